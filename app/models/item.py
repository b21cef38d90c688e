"""
Item Models for the University Inventory Portal
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

ITEM_CATEGORIES = [
    "Office Supplies",
    "Electronics",
    "Furniture",
    "Laboratory Equipment",
    "Computer Hardware",
]

ITEM_UNITS = [
    "Piece", "Set", "Box", "Pack", "Dozen",
    "Kilogram", "Liter", "Meter", "Square Meter", "Cubic Meter",
]


class ItemForm(BaseModel):
    name: str = ""
    description: str = ""
    category_id: str = ""
    unit: str = ""
    brand: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "category_id": self.category_id,
            "unit": self.unit,
            "price": 0,
        }
        if self.brand:
            payload["brand"] = self.brand
        return payload


class ItemOptions(BaseModel):
    categories: List[str] = Field(default_factory=lambda: list(ITEM_CATEGORIES))
    units: List[str] = Field(default_factory=lambda: list(ITEM_UNITS))
