from pydantic import BaseModel, Field
from typing import List, Optional


class DashboardStats(BaseModel):
    total_items: int = 0
    stock_in_count: int = 0
    stock_out_count: int = 0
    dead_stock_count: int = 0
    users_count: int = 0
    departments_count: int = 0


class RecentStockIn(BaseModel):
    id: str
    item_name: str
    quantity: float = 0
    received_at: Optional[str] = None
    supplier: Optional[str] = None


class RecentStockOut(BaseModel):
    id: str
    item_name: str
    quantity: float = 0
    issued_at: Optional[str] = None
    user_name: str = "Unknown User"
    user_role: str = "Unknown"


class AdminDashboardResponse(BaseModel):
    stats: DashboardStats
    recent_stock_in: List[RecentStockIn] = Field(default_factory=list)
    recent_stock_out: List[RecentStockOut] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class UserDashboardResponse(BaseModel):
    name: str
    role: str
    title: str
