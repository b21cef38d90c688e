from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from app.core.view_state import FormStatus


class ListingResponse(BaseModel):
    status: str = "loaded"
    records: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    matched: int = 0
    options: Dict[str, List[str]] = Field(default_factory=dict)
    summary: Dict[str, Any] = Field(default_factory=dict)


class MutationResponse(BaseModel):
    """Created records are echoed so the list page can insert them without a refetch."""
    success: bool = True
    status: FormStatus = FormStatus.SUCCESS
    message: str
    records: List[Dict[str, Any]] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """``id`` lets the list page drop the record without a refetch."""
    success: bool = True
    status: FormStatus = FormStatus.SUCCESS
    message: str
    id: str
    backend_message: Optional[str] = None
