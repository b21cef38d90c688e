"""
Form validation rules.

Each ``validate_*`` function is pure: it takes the submitted form (plus any
looked-up context such as the receiving user) and returns a mapping of form
field name to message. A form is accepted only when the mapping is empty.
"""
import re
from typing import Any, Dict, Mapping, Optional, Sequence

from app.core.normalize import as_number
from app.models.deadstock import DEADSTOCK_REASONS, DeadstockForm
from app.models.department import DepartmentForm, OfficeForm
from app.models.item import ItemForm
from app.models.stock import StockInForm, StockOutForm
from app.models.supplier import SupplierForm
from app.models.user import LoginRequest, UserForm, UserRole, user_role

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
BD_PHONE_PATTERN = re.compile(r"^(\+88)?01[3-9]\d{8}$")

LOOKUP_FIRST = "Please lookup user information first"
MIN_PASSWORD_LENGTH = 6

Errors = Dict[str, str]


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.search(email) is not None


def is_valid_bd_phone(phone: str) -> bool:
    """Bangladesh mobile number, optionally prefixed with +88. Spaces are ignored."""
    return BD_PHONE_PATTERN.match(re.sub(r"\s", "", phone)) is not None


def _check_email(errors: Errors, email: str, field: str = "email") -> None:
    if is_blank(email):
        errors[field] = "Email is required"
    elif not is_valid_email(email):
        errors[field] = "Email is invalid"


def _check_phone(errors: Errors, phone: str, field: str = "phone") -> None:
    if is_blank(phone):
        errors[field] = "Phone number is required"
    elif not is_valid_bd_phone(phone):
        errors[field] = "Please enter a valid Bangladesh phone number"


def _format_quantity(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def validate_supplier(form: SupplierForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.name):
        errors["name"] = "Supplier name is required"
    if is_blank(form.contact_person):
        errors["contactPerson"] = "Contact person is required"
    _check_phone(errors, form.phone)
    _check_email(errors, form.email)
    if is_blank(form.address):
        errors["address"] = "Address is required"
    return errors


def validate_user(form: UserForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.name):
        errors["name"] = "Full name is required"
    _check_email(errors, form.email)

    if not form.password:
        errors["password"] = "Password is required"
    elif len(form.password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if not form.confirm_password:
        errors["confirmPassword"] = "Confirm password is required"
    elif form.password != form.confirm_password:
        errors["confirmPassword"] = "Passwords do not match"

    if not form.role:
        errors["role"] = "Role is required"
    elif form.role not in {r.value for r in UserRole}:
        errors["role"] = "Role is invalid"

    _check_phone(errors, form.phone)

    # Role decides which single affiliation is required
    if form.role == UserRole.TEACHER.value and not form.department_id:
        errors["departmentId"] = "Department is required for teachers"
    if form.role == UserRole.STAFF.value and not form.office_id:
        errors["officeId"] = "Office is required for staff"
    return errors


def validate_item(form: ItemForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.name):
        errors["name"] = "Item name is required"
    if is_blank(form.description):
        errors["description"] = "Description is required"
    if not form.category_id:
        errors["category_id"] = "Category is required"
    if not form.unit:
        errors["unit"] = "Unit is required"
    return errors


def validate_department(form: DepartmentForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.name):
        errors["name"] = "Department name is required"
    if is_blank(form.code):
        errors["code"] = "Department code is required"
    if not form.faculty:
        errors["faculty"] = "Faculty is required"
    if is_blank(form.description):
        errors["description"] = "Description is required"
    return errors


def validate_office(form: OfficeForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.name):
        errors["name"] = "Office name is required"
    if not form.section:
        errors["section"] = "Section is required"
    if is_blank(form.description):
        errors["description"] = "Description is required"
    return errors


def validate_login(form: LoginRequest) -> Errors:
    errors: Errors = {}
    _check_email(errors, form.email)
    if not form.password:
        errors["password"] = "Password is required"
    return errors


def receiver_affiliation_error(user: Mapping[str, Any]) -> Optional[str]:
    """Feedback shown right after a receiver lookup."""
    role = user_role(user)
    if role == UserRole.TEACHER.value and not user.get("department_id"):
        return "This teacher does not have a department_id assigned"
    if role == UserRole.STAFF.value and not user.get("office_id"):
        return "This staff member does not have an office_id assigned"
    return None


def validate_stock_in_fields(form: StockInForm) -> Errors:
    errors: Errors = {}
    if not form.supplier_id:
        errors["supplierId"] = "Supplier is required"
    if is_blank(form.invoice_number):
        errors["invoiceNumber"] = "Invoice number is required"
    if not form.invoice_date:
        errors["invoiceDate"] = "Invoice date is required"
    if is_blank(form.user_id):
        errors["userId"] = "User ID is required"

    if not form.items:
        errors["items"] = "At least one item is required"
    for index, line in enumerate(form.items):
        if not line.item_id:
            errors[f"item_{index}"] = "Item is required"
        if line.quantity <= 0:
            errors[f"quantity_{index}"] = "Quantity must be greater than 0"
        if line.unit_price <= 0:
            errors[f"unitPrice_{index}"] = "Unit price must be greater than 0"
    return errors


def validate_stock_in(form: StockInForm, receiver: Optional[Mapping[str, Any]]) -> Errors:
    errors = validate_stock_in_fields(form)
    if receiver is not None:
        role = user_role(receiver)
        if role == UserRole.TEACHER.value:
            if not receiver.get("department_id"):
                errors["userId"] = "This teacher does not have a department_id assigned in their profile"
        elif role == UserRole.STAFF.value:
            if not receiver.get("office_id"):
                errors["userId"] = "This staff member does not have an office_id assigned in their profile"
        else:
            errors["userId"] = f"Invalid user role: {role or None}. User must be either 'teacher' or 'staff'"
    elif not is_blank(form.user_id):
        errors["userId"] = LOOKUP_FIRST
    return errors


def validate_stock_out_fields(form: StockOutForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.user_id):
        errors["userId"] = "User ID is required"
    if not form.issue_date:
        errors["issueDate"] = "Issue date is required"
    if is_blank(form.issue_by):
        errors["issueBy"] = "Issue by is required"

    if not form.items:
        errors["items"] = "At least one item is required"
    for index, line in enumerate(form.items):
        if not line.stock_in_id:
            errors[f"stockIn_{index}"] = "Stock item is required"
        if line.quantity <= 0:
            errors[f"quantity_{index}"] = "Quantity must be greater than 0"
    return errors


def validate_stock_out(
    form: StockOutForm,
    recipient: Optional[Mapping[str, Any]],
    available: Mapping[str, Mapping[str, Any]],
) -> Errors:
    """``available`` is the snapshot of stock-in records with quantity left.

    Lines drawing on the same stock-in record are checked against it
    together. The check is advisory: the backend must still decrement
    atomically.
    """
    errors = validate_stock_out_fields(form)
    if not is_blank(form.user_id) and recipient is None:
        errors["userId"] = LOOKUP_FIRST

    requested: Dict[str, float] = {}
    for line in form.items:
        if line.quantity > 0:
            requested[line.stock_in_id] = requested.get(line.stock_in_id, 0) + line.quantity

    for index, line in enumerate(form.items):
        if not line.stock_in_id:
            continue
        stock = available.get(line.stock_in_id)
        if stock is None:
            errors[f"stockIn_{index}"] = "Selected stock item is no longer available"
            continue
        if line.quantity <= 0:
            continue
        in_stock = as_number(stock.get("quantity"))
        if requested[line.stock_in_id] > in_stock:
            errors[f"quantity_{index}"] = f"Only {_format_quantity(in_stock)} items available in stock"
    return errors


def validate_deadstock_fields(form: DeadstockForm) -> Errors:
    errors: Errors = {}
    if is_blank(form.user_id):
        errors["userId"] = "User ID is required"
    if is_blank(form.item_id):
        errors["itemId"] = "Item ID is required"
    if form.quantity <= 0:
        errors["quantity"] = "Quantity must be greater than 0"
    if is_blank(form.reason):
        errors["reason"] = "Reason is required"
    elif form.reason not in DEADSTOCK_REASONS:
        errors["reason"] = "Please select a valid reason"
    if not form.reported_at:
        errors["reportedAt"] = "Reported date is required"
    return errors


def validate_deadstock(form: DeadstockForm, reporter: Optional[Mapping[str, Any]]) -> Errors:
    errors = validate_deadstock_fields(form)
    if not is_blank(form.user_id) and reporter is None:
        errors["userId"] = LOOKUP_FIRST
    return errors


# Request-body fields whose parse failure reads like the form check
NUMBER_MESSAGES = {
    "quantity": "Quantity must be greater than 0",
    "unitPrice": "Unit price must be greater than 0",
}
LINE_KEYS = {"itemId": "item", "stockInId": "stockIn"}


def request_errors(errors: Sequence[Mapping[str, Any]]) -> Errors:
    """Map request parsing errors onto the form's field keys.

    ``("body", "items", 0, "quantity")`` becomes ``quantity_0`` so that
    unparseable input is reported like any other invalid field.
    """
    mapped: Errors = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        names = [part for part in loc if isinstance(part, str)]
        if not names:
            mapped.setdefault("form", "Invalid form data")
            continue
        field_name = names[-1]
        message = NUMBER_MESSAGES.get(field_name) or error.get("msg") or "Invalid value"
        indexes = [part for part in loc if isinstance(part, int)]
        if indexes:
            field_name = f"{LINE_KEYS.get(field_name, field_name)}_{indexes[-1]}"
        mapped.setdefault(field_name, message)
    return mapped
