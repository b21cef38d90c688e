"""Helpers shared by the create/delete endpoints."""
import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

from app.core.backend import BackendClient
from app.core.exceptions import BackendError, BackendUnavailableError
from app.core.logging_config import get_logger
from app.core.normalize import USER_SCHEMA
from app.core.resources import DELETE_PATHS, USER_DETAIL_PATH
from app.core.validation import is_blank
from app.core.view_state import submit_form
from app.models.listing import DeleteResponse

logger = get_logger(__name__)


def records_from_response(data: Any) -> List[Dict[str, Any]]:
    """Created records echoed by the backend, as a list."""
    if isinstance(data, list):
        return [dict(r) for r in data if isinstance(r, Mapping)]
    if isinstance(data, Mapping):
        for key in ("data", "record", "item"):
            nested = data.get(key)
            if isinstance(nested, Mapping):
                return [dict(nested)]
        if "_id" in data:
            return [dict(data)]
    return []


def backend_message(data: Any) -> Optional[str]:
    if isinstance(data, Mapping) and isinstance(data.get("message"), str):
        return data["message"]
    return None


async def lookup_user(client: BackendClient, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Fetch one user by id. Returns None for a blank id or an unknown user."""
    if is_blank(user_id):
        return None
    path = USER_DETAIL_PATH.format(user_id=quote(user_id.strip(), safe=""))
    return await client.get_record(path, USER_SCHEMA)


async def ensure_backend_online(client: BackendClient, path: str) -> None:
    if not await client.ping(path):
        raise BackendUnavailableError(
            f"Cannot connect to server. Please check if the backend server is running on {client.base_url}",
            error_code="BACKEND_OFFLINE",
        )


async def submit_each(client: BackendClient, path: str, payloads: Sequence[Dict[str, Any]]) -> List[Any]:
    """POST one record per payload concurrently. Any failure fails the batch.

    The raised error lists the lines the backend already saved under
    ``saved_lines``, next to ``failed_lines``.
    """
    outcomes = await asyncio.gather(
        *(client.submit("POST", path, payload) for payload in payloads),
        return_exceptions=True,
    )
    failed = [i for i, outcome in enumerate(outcomes) if isinstance(outcome, BaseException)]
    if not failed:
        return list(outcomes)

    error = outcomes[failed[0]]
    if not isinstance(error, BackendError):
        raise error
    saved = [i for i in range(len(outcomes)) if i not in failed]
    if saved:
        logger.error(f"Batch to {path} partially saved: lines {saved} written, lines {failed} failed")
    error.details.update({"saved_lines": saved, "failed_lines": failed})
    raise error


async def delete_record(client: BackendClient, resource: str, record_id: str, label: str) -> DeleteResponse:
    path = DELETE_PATHS[resource].format(record_id=quote(record_id, safe=""))
    submission = await submit_form(f"delete {resource}", {}, lambda: client.submit("DELETE", path))
    return DeleteResponse(
        status=submission.status,
        message=f"{label} deleted successfully",
        id=record_id,
        backend_message=backend_message(submission.result),
    )
