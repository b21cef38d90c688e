"""Form validation tests."""

from app.core.validation import (
    LOOKUP_FIRST,
    is_valid_bd_phone,
    is_valid_email,
    receiver_affiliation_error,
    request_errors,
    validate_deadstock,
    validate_deadstock_fields,
    validate_department,
    validate_item,
    validate_login,
    validate_office,
    validate_stock_in,
    validate_stock_out,
    validate_stock_out_fields,
    validate_supplier,
    validate_user,
)
from app.models.deadstock import DeadstockForm
from app.models.department import DepartmentForm, OfficeForm
from app.models.item import ItemForm
from app.models.stock import StockInForm, StockOutForm
from app.models.supplier import SupplierForm
from app.models.user import LoginRequest, UserForm

TEACHER = {"_id": "u1", "name": "Rahim", "role": "teacher", "department_id": "d1"}
STAFF = {"_id": "u2", "name": "Karim", "roll": "staff", "office_id": "o1"}


def supplier(**overrides):
    data = {
        "name": "Dhaka Traders",
        "contactPerson": "Selim",
        "phone": "01712345678",
        "email": "sales@dhakatraders.com",
        "address": "Motijheel, Dhaka",
    }
    data.update(overrides)
    return SupplierForm(**data)


def stock_in(**overrides):
    data = {
        "supplierId": "s1",
        "invoiceNumber": "INV-001",
        "invoiceDate": "2024-05-01",
        "userId": "u1",
        "items": [{"itemId": "i1", "quantity": 3, "unitPrice": 150}],
    }
    data.update(overrides)
    return StockInForm(**data)


def stock_out(**overrides):
    data = {
        "userId": "u1",
        "issueDate": "2024-05-02",
        "issueBy": "Store Keeper",
        "items": [{"stockInId": "si1", "quantity": 2}],
    }
    data.update(overrides)
    return StockOutForm(**data)


class TestPhoneNumbers:

    def test_valid_local_number(self):
        assert is_valid_bd_phone("01712345678")

    def test_valid_with_country_prefix(self):
        assert is_valid_bd_phone("+8801912345678")

    def test_spaces_are_ignored(self):
        assert is_valid_bd_phone("017 1234 5678")

    def test_operator_digit_out_of_range(self):
        assert not is_valid_bd_phone("01212345678")

    def test_too_short(self):
        assert not is_valid_bd_phone("0171234567")

    def test_other_country_prefix(self):
        assert not is_valid_bd_phone("+9101712345678")


class TestEmail:

    def test_valid(self):
        assert is_valid_email("a@b.co")

    def test_missing_domain_dot(self):
        assert not is_valid_email("user@localhost")

    def test_missing_at(self):
        assert not is_valid_email("user.example.com")


class TestSupplierForm:

    def test_valid(self):
        assert validate_supplier(supplier()) == {}

    def test_invalid_email(self):
        errors = validate_supplier(supplier(email="not-an-email"))
        assert errors == {"email": "Email is invalid"}

    def test_invalid_phone(self):
        errors = validate_supplier(supplier(phone="12345"))
        assert errors["phone"] == "Please enter a valid Bangladesh phone number"

    def test_required_fields(self):
        errors = validate_supplier(SupplierForm())
        assert set(errors) == {"name", "contactPerson", "phone", "email", "address"}
        assert errors["email"] == "Email is required"

    def test_whitespace_counts_as_blank(self):
        assert "name" in validate_supplier(supplier(name="   "))


class TestUserForm:

    def user(self, **overrides):
        data = {
            "name": "Rahim",
            "email": "rahim@pstu.ac.bd",
            "password": "secret1",
            "confirmPassword": "secret1",
            "role": "teacher",
            "departmentId": "d1",
            "phone": "01812345678",
        }
        data.update(overrides)
        return UserForm(**data)

    def test_valid_teacher(self):
        assert validate_user(self.user()) == {}

    def test_teacher_requires_department(self):
        errors = validate_user(self.user(departmentId=""))
        assert errors == {"departmentId": "Department is required for teachers"}

    def test_staff_requires_office(self):
        errors = validate_user(self.user(role="staff", departmentId=""))
        assert errors == {"officeId": "Office is required for staff"}

    def test_password_mismatch(self):
        errors = validate_user(self.user(confirmPassword="other"))
        assert errors["confirmPassword"] == "Passwords do not match"

    def test_short_password(self):
        errors = validate_user(self.user(password="abc", confirmPassword="abc"))
        assert errors["password"] == "Password must be at least 6 characters"

    def test_unknown_role(self):
        assert validate_user(self.user(role="student"))["role"] == "Role is invalid"

    def test_payload_sends_single_affiliation(self):
        payload = self.user(officeId="o1").to_payload()
        assert payload["department_id"] == "d1"
        assert payload["office_id"] is None
        assert payload["phone_number"] == "01812345678"
        assert "confirmPassword" not in payload


class TestSimpleForms:

    def test_item_required_fields(self):
        errors = validate_item(ItemForm())
        assert set(errors) == {"name", "description", "category_id", "unit"}

    def test_item_payload_has_zero_price(self):
        form = ItemForm(name="Stapler", description="Metal", category_id="Office Supplies", unit="Piece")
        assert validate_item(form) == {}
        assert form.to_payload()["price"] == 0

    def test_department_required_fields(self):
        errors = validate_department(DepartmentForm())
        assert set(errors) == {"name", "code", "faculty", "description"}

    def test_office_code_is_optional(self):
        form = OfficeForm(name="Registrar", description="Records", section="Administration")
        assert validate_office(form) == {}
        assert "code" not in form.to_payload()

    def test_login(self):
        assert validate_login(LoginRequest(email="admin@pstu.ac.bd", password="x")) == {}
        assert set(validate_login(LoginRequest())) == {"email", "password"}


class TestReceiverAffiliation:

    def test_teacher_with_department(self):
        assert receiver_affiliation_error(TEACHER) is None

    def test_teacher_without_department(self):
        error = receiver_affiliation_error({"role": "teacher"})
        assert error == "This teacher does not have a department_id assigned"

    def test_staff_without_office(self):
        error = receiver_affiliation_error({"roll": "staff"})
        assert error == "This staff member does not have an office_id assigned"


class TestStockInForm:

    def test_valid(self):
        assert validate_stock_in(stock_in(), TEACHER) == {}

    def test_lookup_required(self):
        errors = validate_stock_in(stock_in(), None)
        assert errors == {"userId": LOOKUP_FIRST}

    def test_teacher_without_department(self):
        errors = validate_stock_in(stock_in(), {"_id": "u1", "role": "teacher"})
        assert errors["userId"] == "This teacher does not have a department_id assigned in their profile"

    def test_staff_without_office(self):
        errors = validate_stock_in(stock_in(), {"_id": "u2", "role": "staff"})
        assert errors["userId"] == "This staff member does not have an office_id assigned in their profile"

    def test_admin_cannot_receive_stock(self):
        errors = validate_stock_in(stock_in(), {"_id": "u3", "role": "admin"})
        assert errors["userId"].startswith("Invalid user role: admin")

    def test_line_errors_are_indexed(self):
        form = stock_in(items=[
            {"itemId": "i1", "quantity": 1, "unitPrice": 10},
            {"itemId": "", "quantity": 0, "unitPrice": 0},
        ])
        errors = validate_stock_in(form, TEACHER)
        assert errors == {
            "item_1": "Item is required",
            "quantity_1": "Quantity must be greater than 0",
            "unitPrice_1": "Unit price must be greater than 0",
        }

    def test_payload_per_line(self):
        form = stock_in(items=[
            {"itemId": "i1", "quantity": 3, "unitPrice": 150},
            {"itemId": "i2", "quantity": 2, "unitPrice": 25.5},
        ])
        payloads = form.to_payloads(STAFF)
        assert [p["total_price"] for p in payloads] == [450, 51.0]
        assert all(p["office_id"] == "o1" and "department_id" not in p for p in payloads)
        assert payloads[0]["invoice_no"] == "INV-001"


class TestStockOutForm:

    AVAILABLE = {"si1": {"_id": "si1", "item_id": "i1", "quantity": 5}}

    def test_valid(self):
        assert validate_stock_out(stock_out(), TEACHER, self.AVAILABLE) == {}

    def test_quantity_above_stock(self):
        errors = validate_stock_out(
            stock_out(items=[{"stockInId": "si1", "quantity": 9}]), TEACHER, self.AVAILABLE
        )
        assert errors == {"quantity_0": "Only 5 items available in stock"}

    def test_stock_no_longer_available(self):
        errors = validate_stock_out(
            stock_out(items=[{"stockInId": "gone", "quantity": 1}]), TEACHER, self.AVAILABLE
        )
        assert errors == {"stockIn_0": "Selected stock item is no longer available"}

    def test_lookup_required(self):
        errors = validate_stock_out(stock_out(), None, self.AVAILABLE)
        assert errors == {"userId": LOOKUP_FIRST}

    def test_field_checks_need_no_context(self):
        form = stock_out(issueBy="", items=[{"stockInId": "", "quantity": 0}])
        assert validate_stock_out_fields(form) == {
            "issueBy": "Issue by is required",
            "stockIn_0": "Stock item is required",
            "quantity_0": "Quantity must be greater than 0",
        }

    def test_lines_on_one_record_are_summed(self):
        form = stock_out(items=[{"stockInId": "si1", "quantity": 3}, {"stockInId": "si1", "quantity": 3}])
        errors = validate_stock_out(form, TEACHER, self.AVAILABLE)
        assert errors == {
            "quantity_0": "Only 5 items available in stock",
            "quantity_1": "Only 5 items available in stock",
        }

    def test_lines_within_stock_together_pass(self):
        form = stock_out(items=[{"stockInId": "si1", "quantity": 2}, {"stockInId": "si1", "quantity": 3}])
        assert validate_stock_out(form, TEACHER, self.AVAILABLE) == {}

    def test_payload_unwraps_populated_item(self):
        available = {"si1": {"_id": "si1", "item_id": {"_id": "i1", "name": "Stapler"}, "quantity": 5}}
        assert stock_out().to_payloads(TEACHER, available)[0]["item_id"] == "i1"

    def test_payload_uses_stock_in_item(self):
        payload = stock_out().to_payloads(TEACHER, self.AVAILABLE)[0]
        assert payload["item_id"] == "i1"
        assert payload["issue_type"] == "manual"
        assert payload["department_id"] == "d1"
        assert "office_id" not in payload


class TestDeadstockForm:

    def form(self, **overrides):
        data = {"userId": "u1", "itemId": "i1", "quantity": 1, "reason": "Damaged", "reportedAt": "2024-05-03"}
        data.update(overrides)
        return DeadstockForm(**data)

    def test_valid(self):
        assert validate_deadstock(self.form(), TEACHER) == {}

    def test_reason_must_be_listed(self):
        assert validate_deadstock(self.form(reason="Bored"), TEACHER) == {"reason": "Please select a valid reason"}

    def test_zero_quantity(self):
        errors = validate_deadstock(self.form(quantity=0), TEACHER)
        assert errors == {"quantity": "Quantity must be greater than 0"}

    def test_field_checks_skip_the_lookup(self):
        assert validate_deadstock_fields(self.form()) == {}
        assert validate_deadstock(self.form(), None) == {"userId": LOOKUP_FIRST}

    def test_payload_is_snake_case(self):
        payload = self.form().to_payload()
        assert payload["user_id"] == "u1"
        assert payload["reported_at"] == "2024-05-03"


class TestRequestErrors:

    def test_top_level_number(self):
        errors = request_errors([{"loc": ("body", "quantity"), "msg": "Input should be a valid integer"}])
        assert errors == {"quantity": "Quantity must be greater than 0"}

    def test_line_fields_are_indexed(self):
        errors = request_errors([
            {"loc": ("body", "items", 1, "unitPrice"), "msg": "Input should be a valid number"},
            {"loc": ("body", "items", 0, "stockInId"), "msg": "Input should be a valid string"},
        ])
        assert errors == {
            "unitPrice_1": "Unit price must be greater than 0",
            "stockIn_0": "Input should be a valid string",
        }

    def test_missing_body(self):
        assert request_errors([{"loc": ("body",), "msg": "Field required"}]) == {"form": "Invalid form data"}
