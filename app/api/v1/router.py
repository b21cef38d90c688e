from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, dashboard, items, suppliers, departments, offices, users,
    stock_in, stock_out, deadstock
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(items.router, prefix="/items", tags=["Items"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["Suppliers"])
api_router.include_router(departments.router, prefix="/departments", tags=["Departments"])
api_router.include_router(offices.router, prefix="/offices", tags=["Offices"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(stock_in.router, prefix="/stock-in", tags=["Stock In"])
api_router.include_router(stock_out.router, prefix="/stock-out", tags=["Stock Out"])
api_router.include_router(deadstock.router, prefix="/deadstock", tags=["Dead Stock"])
