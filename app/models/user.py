from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Mapping, Optional
from enum import Enum

from app.core.normalize import reference_id


class UserRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STAFF = "staff"


# Roles that land in the user area rather than the admin area
PORTAL_ROLES = (UserRole.TEACHER.value, UserRole.STAFF.value)


def user_role(user: Mapping[str, Any]) -> str:
    """Role of a backend user record; older records spell it ``roll``."""
    return user.get("role") or user.get("roll") or ""


def affiliation_fields(user: Mapping[str, Any]) -> Dict[str, Any]:
    """The single affiliation reference a user's role allows."""
    role = user_role(user)
    if role == UserRole.TEACHER.value:
        return {"department_id": reference_id(user.get("department_id"))}
    if role == UserRole.STAFF.value:
        return {"office_id": reference_id(user.get("office_id"))}
    return {}


class UserForm(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = Field("", alias="confirmPassword")
    role: str = ""
    department_id: str = Field("", alias="departmentId")
    office_id: str = Field("", alias="officeId")
    phone: str = ""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "role": self.role,
            "phone_number": self.phone,
            "department_id": self.department_id if self.role == UserRole.TEACHER.value else None,
            "office_id": self.office_id if self.role == UserRole.STAFF.value else None,
        }


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class SessionUser(BaseModel):
    name: str = ""
    email: str = ""
    role: str
    id: Optional[str] = None
    department_id: Optional[str] = None
    office_id: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser
    redirect: str


class UserLookupResponse(BaseModel):
    found: bool
    user: Optional[Dict[str, Any]] = None
    role: Optional[str] = None
    affiliation_error: Optional[str] = None


class UserFormOptions(BaseModel):
    roles: List[str] = Field(default_factory=lambda: list(PORTAL_ROLES))
    departments: List[Dict[str, Any]] = Field(default_factory=list)
    offices: List[Dict[str, Any]] = Field(default_factory=list)
