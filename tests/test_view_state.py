"""List and form state tests."""

import asyncio

import pytest

from app.core.exceptions import BackendHTTPError, FormValidationError
from app.core.filtering import CategoricalFilter
from app.core.view_state import (
    FormStatus,
    FormSubmission,
    InvalidTransition,
    ListStatus,
    ListView,
    reject_invalid,
    submit_form,
)


class TestListView:

    def view(self):
        view = ListView(("name",), (CategoricalFilter("reason", "reason", "All Reasons"),))
        view.start_loading()
        view.loaded([
            {"_id": "1", "name": "Broken chair", "reason": "Broken"},
            {"_id": "2", "name": "Expired toner", "reason": "Expired"},
        ])
        return view

    def test_loading_lifecycle(self):
        view = ListView()
        assert view.status == ListStatus.IDLE
        view.start_loading()
        assert view.status == ListStatus.LOADING
        view.loaded([])
        assert view.status == ListStatus.LOADED

    def test_failure_keeps_message(self):
        view = ListView()
        view.start_loading()
        view.failed("Failed to fetch items")
        assert view.status == ListStatus.ERROR
        assert view.error == "Failed to fetch items"

    def test_cannot_load_without_starting(self):
        with pytest.raises(InvalidTransition):
            ListView().loaded([])

    def test_retry_after_error(self):
        view = ListView()
        view.start_loading()
        view.failed("down")
        view.start_loading()
        assert view.error is None

    def test_selections_start_at_sentinel(self):
        assert self.view().selections == {"reason": "All Reasons"}

    def test_visible_applies_search_and_filter(self):
        view = self.view()
        view.search("toner")
        assert [r["_id"] for r in view.visible] == ["2"]
        view.search("")
        view.select("reason", "Broken")
        assert [r["_id"] for r in view.visible] == ["1"]


class TestFormSubmission:

    def test_success_path(self):
        form = FormSubmission("supplier")
        form.begin()
        assert form.status == FormStatus.SUBMITTING
        form.succeed()
        assert form.status == FormStatus.SUCCESS

    def test_success_keeps_result(self):
        form = FormSubmission("supplier")
        form.begin()
        form.succeed({"_id": "s1"})
        assert form.result == {"_id": "s1"}
        assert form.errors == {}

    def test_cannot_succeed_without_submitting(self):
        with pytest.raises(InvalidTransition):
            FormSubmission("supplier").succeed()

    def test_double_submit_rejected(self):
        form = FormSubmission("supplier")
        form.begin()
        with pytest.raises(InvalidTransition):
            form.begin()

    def test_failure_records_errors(self):
        form = FormSubmission("supplier")
        form.begin()
        form.fail({"submit": "Cannot connect"})
        assert form.status == FormStatus.ERROR
        assert form.errors == {"submit": "Cannot connect"}


class TestSubmitForm:

    def test_validation_errors_skip_the_action(self):
        calls = []

        async def action():
            calls.append("called")

        with pytest.raises(FormValidationError) as exc_info:
            asyncio.run(submit_form("supplier", {"email": "Email is invalid"}, action))
        assert exc_info.value.errors == {"email": "Email is invalid"}
        assert calls == []

    def test_reject_invalid_passes_clean_forms(self):
        reject_invalid("supplier", {})

    def test_reject_invalid_raises_with_errors(self):
        with pytest.raises(FormValidationError) as exc_info:
            reject_invalid("stock-out", {"quantity_0": "Quantity must be greater than 0"})
        assert exc_info.value.errors == {"quantity_0": "Quantity must be greater than 0"}

    def test_returns_finished_submission(self):
        async def action():
            return {"_id": "s1"}

        submission = asyncio.run(submit_form("supplier", {}, action))
        assert submission.status == FormStatus.SUCCESS
        assert submission.result == {"_id": "s1"}

    def test_backend_error_propagates(self):
        async def action():
            raise BackendHTTPError("Supplier already exists", status_code=409)

        with pytest.raises(BackendHTTPError):
            asyncio.run(submit_form("supplier", {}, action))
