"""
Inventory backend resources.

A logical resource is an ordered tuple of ``ResourceDescriptor`` entries; the
fetcher tries them in order. Only stock-in and stock-out carry historical
fallback paths.
"""

from dataclasses import dataclass, field
from typing import Tuple

from app.core.normalize import (
    DEADSTOCK_SCHEMA,
    EMPTY_SCHEMA,
    ITEM_SCHEMA,
    STOCK_IN_SCHEMA,
    STOCK_OUT_SCHEMA,
    SUPPLIER_SCHEMA,
    USER_SCHEMA,
    Schema,
)


@dataclass(frozen=True)
class ResourceDescriptor:
    name: str
    path: str
    schema: Schema = field(default_factory=dict, compare=False)


Resource = Tuple[ResourceDescriptor, ...]


ITEMS: Resource = (ResourceDescriptor("items", "/api/items/get", ITEM_SCHEMA),)
USERS: Resource = (ResourceDescriptor("users", "/api/users/get", USER_SCHEMA),)
TEACHERS: Resource = (ResourceDescriptor("teachers", "/api/users/get-teachers", USER_SCHEMA),)
STAFF: Resource = (ResourceDescriptor("staff", "/api/users/get-staff", USER_SCHEMA),)
DEPARTMENTS: Resource = (ResourceDescriptor("departments", "/api/departments/get", EMPTY_SCHEMA),)
OFFICES: Resource = (ResourceDescriptor("offices", "/api/offices/get", EMPTY_SCHEMA),)
SUPPLIERS: Resource = (ResourceDescriptor("suppliers", "/api/suppliers/get", SUPPLIER_SCHEMA),)
DEADSTOCKS: Resource = (ResourceDescriptor("deadstocks", "/api/deadstocks/get", DEADSTOCK_SCHEMA),)

STOCK_INS: Resource = (
    ResourceDescriptor("stockins", "/api/stockins/get", STOCK_IN_SCHEMA),
    ResourceDescriptor("stock-ins", "/api/stock-ins/get", STOCK_IN_SCHEMA),
    ResourceDescriptor("stockin", "/api/stockin/get", STOCK_IN_SCHEMA),
    ResourceDescriptor("stock-in", "/api/stock-in/get", STOCK_IN_SCHEMA),
)

STOCK_OUTS: Resource = (
    ResourceDescriptor("stockouts", "/api/stockouts/get", STOCK_OUT_SCHEMA),
    ResourceDescriptor("stock-outs", "/api/stock-outs/get", STOCK_OUT_SCHEMA),
    ResourceDescriptor("stockout", "/api/stockout/get", STOCK_OUT_SCHEMA),
    ResourceDescriptor("stock-out", "/api/stock-out/get", STOCK_OUT_SCHEMA),
)


# Mutation and single-record paths
USER_DETAIL_PATH = "/api/users/get/{user_id}"
LOGIN_PATH = "/api/users/login"

CREATE_PATHS = {
    "items": "/api/items/create",
    "users": "/api/users/create",
    "departments": "/api/departments/create",
    "offices": "/api/offices/create",
    "suppliers": "/api/suppliers/create",
    "stockins": "/api/stockins/create",
    "stockouts": "/api/stockouts/create",
    "deadstocks": "/api/deadstocks/create",
}

DELETE_PATHS = {
    "users": "/api/users/delete/{record_id}",
    "departments": "/api/departments/delete/{record_id}",
    "offices": "/api/offices/delete/{record_id}",
    "deadstocks": "/api/deadstocks/delete/{record_id}",
}
