"""
Department and Office Models for the University Inventory Portal
"""

from pydantic import BaseModel
from typing import Any, Dict, Optional

FACULTIES = [
    "Faculty of Agriculture",
    "Faculty of Engineering & Technology",
    "Faculty of Computer Science & Engineering",
    "Faculty of Business Administration",
    "Faculty of Fisheries",
    "Faculty of Veterinary & Animal Science",
    "Faculty of Disaster Management",
    "Faculty of Land Management & Law",
]

SECTIONS = [
    "Administration",
    "Academic Affairs",
    "Student Services",
    "Finance",
    "Human Resources",
    "IT Department",
    "Library",
    "Research",
    "International Relations",
    "Maintenance",
]


class DepartmentForm(BaseModel):
    name: str = ""
    code: str = ""
    description: str = ""
    faculty: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


class OfficeForm(BaseModel):
    name: str = ""
    code: Optional[str] = None
    description: str = ""
    section: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
