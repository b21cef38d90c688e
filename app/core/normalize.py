"""
Schema normalization for records coming from the inventory backend.

The backend spells the same field differently across endpoints and versions
(``product_id`` / ``item_id`` / ``itemId`` ...). Every record is normalized once
on ingest: for each canonical field the aliases are tried in the order listed
and the first present value is copied to the canonical name. Original keys are
kept so the raw payload stays visible to callers.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

Schema = Mapping[str, Tuple[str, ...]]

# Canonical field -> aliases, in lookup order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "item_id": ("product_id", "item_id", "itemId", "productId", "item"),
    "user_id": ("user_id", "userId", "user"),
    "supplier_id": ("supplier_id", "supplierId"),
    "department_id": ("department_id", "departmentId"),
    "office_id": ("office_id", "officeId"),
    "role": ("role", "roll"),
    "quantity": ("quantity", "qty"),
    "category": ("category", "category_id"),
    "contactPerson": ("contactPerson", "contact_person"),
    "phone": ("phone", "phone_number"),
}

ITEM_SCHEMA: Schema = {
    "category": FIELD_ALIASES["category"],
}

USER_SCHEMA: Schema = {
    "role": FIELD_ALIASES["role"],
    "department_id": FIELD_ALIASES["department_id"],
    "office_id": FIELD_ALIASES["office_id"],
    "phone": FIELD_ALIASES["phone"],
}

SUPPLIER_SCHEMA: Schema = {
    "contactPerson": FIELD_ALIASES["contactPerson"],
    "phone": FIELD_ALIASES["phone"],
}

STOCK_IN_SCHEMA: Schema = {
    "item_id": FIELD_ALIASES["item_id"],
    "user_id": FIELD_ALIASES["user_id"],
    "supplier_id": FIELD_ALIASES["supplier_id"],
    "department_id": FIELD_ALIASES["department_id"],
    "office_id": FIELD_ALIASES["office_id"],
    "quantity": FIELD_ALIASES["quantity"],
    "received_at": ("received_at", "date", "created_at", "createdAt"),
    "supplier": ("supplier", "vendor", "from"),
}

STOCK_OUT_SCHEMA: Schema = {
    "item_id": FIELD_ALIASES["item_id"],
    "user_id": FIELD_ALIASES["user_id"],
    "department_id": FIELD_ALIASES["department_id"],
    "office_id": FIELD_ALIASES["office_id"],
    "quantity": FIELD_ALIASES["quantity"],
    "issued_at": ("issued_at", "date", "created_at", "createdAt"),
    "user_name": ("user_name", "userName", "requestedBy", "issuedTo"),
    "user_role": ("user_role", "userRole", "role"),
}

DEADSTOCK_SCHEMA: Schema = {
    "item_id": FIELD_ALIASES["item_id"],
    "user_id": FIELD_ALIASES["user_id"],
    "quantity": FIELD_ALIASES["quantity"],
}

EMPTY_SCHEMA: Schema = {}


def is_present(value: Any) -> bool:
    """A value counts as present unless it is None or an empty string."""
    return value is not None and value != ""


def first_present(record: Mapping[str, Any], aliases: Iterable[str]) -> Optional[Any]:
    """Return the first present value among ``aliases``, or None."""
    for alias in aliases:
        value = record.get(alias)
        if is_present(value):
            return value
    return None


def reference_id(value: Any) -> Optional[Any]:
    """Reduce a reference to its identifier.

    Populated references arrive as nested objects; those resolve through
    their ``_id`` (or ``id``).
    """
    if isinstance(value, Mapping):
        return first_present(value, ("_id", "id"))
    return value if is_present(value) else None


def normalize_record(record: Mapping[str, Any], schema: Schema) -> Dict[str, Any]:
    """Return a copy of ``record`` with every canonical field of ``schema`` filled."""
    normalized = dict(record)
    for canonical, aliases in schema.items():
        value = first_present(record, aliases)
        if value is not None:
            normalized[canonical] = value
    return normalized


def normalize_records(records: Iterable[Any], schema: Schema) -> List[Dict[str, Any]]:
    """Normalize a collection, dropping entries that are not JSON objects."""
    return [normalize_record(record, schema) for record in records if isinstance(record, Mapping)]


def as_number(value: Any) -> float:
    """Numeric value of a quantity or price field; anything unparseable is 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
