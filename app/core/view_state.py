"""
Page state for list views and forms.

List pages move ``idle -> loading -> loaded | error``; forms move
``idle -> submitting -> success | error``. Returning a form to idle happens
in the browser once it has read the outcome.
"""
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

from app.core.exceptions import BackendError, FormValidationError
from app.core.filtering import CategoricalFilter, filter_records
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class InvalidTransition(RuntimeError):
    pass


class ListStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class FormStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class ListView:
    """Records of one list page plus its current search and dropdown state."""

    def __init__(
        self,
        search_fields: Sequence[str] = (),
        filters: Sequence[CategoricalFilter] = (),
    ):
        self.search_fields = tuple(search_fields)
        self.filters = tuple(filters)
        self.status = ListStatus.IDLE
        self.records: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.search_text = ""
        self.selections: Dict[str, Optional[str]] = {f.param: f.sentinel for f in self.filters}

    def start_loading(self) -> None:
        if self.status == ListStatus.LOADING:
            raise InvalidTransition("List is already loading")
        self.status = ListStatus.LOADING
        self.error = None

    def loaded(self, records: Sequence[Mapping[str, Any]]) -> None:
        if self.status != ListStatus.LOADING:
            raise InvalidTransition(f"Cannot finish loading from {self.status.value}")
        self.records = [dict(r) for r in records]
        self.status = ListStatus.LOADED

    def failed(self, message: str) -> None:
        if self.status != ListStatus.LOADING:
            raise InvalidTransition(f"Cannot fail loading from {self.status.value}")
        self.error = message
        self.status = ListStatus.ERROR

    def search(self, text: Optional[str]) -> None:
        self.search_text = text or ""

    def select(self, param: str, value: Optional[str]) -> None:
        self.selections[param] = value

    @property
    def visible(self) -> List[Dict[str, Any]]:
        return filter_records(self.records, self.search_text, self.search_fields, self.filters, self.selections)

class FormSubmission:
    """Tracks one form's submission lifecycle."""

    def __init__(self, name: str):
        self.name = name
        self.status = FormStatus.IDLE
        self.errors: Dict[str, str] = {}
        self.result: Any = None

    def begin(self) -> None:
        if self.status == FormStatus.SUBMITTING:
            raise InvalidTransition(f"{self.name} is already submitting")
        self.status = FormStatus.SUBMITTING
        self.errors = {}

    def succeed(self, result: Any = None) -> None:
        if self.status != FormStatus.SUBMITTING:
            raise InvalidTransition(f"Cannot succeed from {self.status.value}")
        self.result = result
        self.status = FormStatus.SUCCESS

    def fail(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        self.status = FormStatus.ERROR


def reject_invalid(name: str, errors: Mapping[str, str]) -> None:
    """Raise for a non-empty ``errors`` map. Called before any network call."""
    if errors:
        logger.info(f"{name} rejected by validation: {sorted(errors)}")
        raise FormValidationError(errors)


async def submit_form(
    name: str,
    errors: Mapping[str, str],
    action: Callable[[], Awaitable[Any]],
) -> FormSubmission:
    """Run a validated mutation and return the finished submission.

    A non-empty ``errors`` map rejects the form before any network call.
    Backend failures surface under the ``submit`` key and leave the caller's
    form untouched.
    """
    submission = FormSubmission(name)
    if errors:
        submission.fail(errors)
    reject_invalid(name, submission.errors)

    submission.begin()
    try:
        result = await action()
    except BackendError as e:
        submission.fail({"submit": e.message})
        logger.error(f"{name} submission failed: {e.message}")
        raise
    submission.succeed(result)
    logger.info(f"{name} submitted successfully")
    return submission
