"""HTTP client for the inventory REST backend."""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from app.core.exceptions import (
    BackendError,
    BackendHTTPError,
    BackendUnavailableError,
    MalformedResponseError,
)
from app.core.logging_config import get_logger
from app.core.normalize import EMPTY_SCHEMA, Schema, is_present, normalize_record, normalize_records
from app.core.resources import ResourceDescriptor

logger = get_logger(__name__)


@dataclass
class FetchResult:
    """Outcome of fetching one logical resource.

    ``error`` is set only when every candidate endpoint failed; an endpoint that
    answered with an empty list is a success with no records.
    """
    resource: str
    records: List[Dict[str, Any]] = field(default_factory=list)
    source: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def error_message_from(data: Any, status_code: Optional[int] = None, reason_phrase: Optional[str] = None) -> str:
    """Pick the most specific message for a failed backend call.

    Order: ``message`` field, ``error`` field, HTTP status line, generic text.
    """
    if isinstance(data, Mapping):
        for key in ("message", "error"):
            value = data.get(key)
            if is_present(value) and isinstance(value, str):
                return value
    if status_code:
        if reason_phrase:
            return f"HTTP {status_code}: {reason_phrase}"
        return f"HTTP {status_code}"
    return "Unknown server error"


class BackendClient:
    """Async wrapper around the inventory backend.

    Collection reads never raise: failures are logged and reported through
    ``FetchResult``. Single-record reads and mutations raise ``BackendError``
    subclasses.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_list(self, descriptor: ResourceDescriptor) -> List[Dict[str, Any]]:
        try:
            response = await self._client.get(descriptor.path)
        except httpx.HTTPError as e:
            raise BackendUnavailableError(
                f"Could not reach {descriptor.path}: {e}",
                error_code="BACKEND_UNREACHABLE",
            )

        if not response.is_success:
            raise BackendHTTPError(
                f"Failed to fetch {descriptor.name}: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            raise MalformedResponseError(
                f"Failed to fetch {descriptor.name}: response is not valid JSON",
                error_code="MALFORMED_RESPONSE",
            )

        if not isinstance(body, list):
            raise MalformedResponseError(
                f"Failed to fetch {descriptor.name}: expected a list, got {type(body).__name__}",
                error_code="MALFORMED_RESPONSE",
            )

        return normalize_records(body, descriptor.schema)

    async def fetch_collection(self, resource: Sequence[ResourceDescriptor]) -> FetchResult:
        """Fetch a logical resource, probing its descriptors in order.

        Returns the first non-empty list. Probing stops there.
        """
        result = FetchResult(resource=resource[0].name)
        last_error: Optional[str] = None
        answered = False

        for descriptor in resource:
            try:
                records = await self._get_list(descriptor)
            except BackendError as e:
                logger.warning(f"Failed to fetch {descriptor.name} from {descriptor.path}: {e.message}")
                last_error = e.message
                continue

            if records:
                if len(resource) > 1:
                    logger.info(f"Fetched {result.resource} from {descriptor.path} ({len(records)} records)")
                return FetchResult(resource=result.resource, records=records, source=descriptor.path)

            logger.debug(f"{descriptor.path} answered with no {descriptor.name}")
            if not answered:
                answered = True
                result.source = descriptor.path

        if not answered:
            result.error = last_error or f"Failed to fetch {result.resource}"
        return result

    async def fetch_collections(self, *resources: Sequence[ResourceDescriptor]) -> List[FetchResult]:
        """Fetch several logical resources concurrently."""
        return list(await asyncio.gather(*(self.fetch_collection(resource) for resource in resources)))

    async def get_record(self, path: str, schema: Schema = EMPTY_SCHEMA) -> Optional[Dict[str, Any]]:
        """Fetch a single record. Returns None when the backend answers 404."""
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            raise BackendUnavailableError(f"Could not reach {path}: {e}", error_code="BACKEND_UNREACHABLE")

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise BackendHTTPError(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            raise MalformedResponseError(f"Invalid JSON from {path}", error_code="MALFORMED_RESPONSE")

        if not isinstance(body, Mapping):
            raise MalformedResponseError(f"Expected an object from {path}", error_code="MALFORMED_RESPONSE")
        return normalize_record(body, schema)

    async def ping(self, path: str) -> bool:
        """HEAD request used as a connectivity check before mutations."""
        try:
            response = await self._client.head(path)
        except httpx.HTTPError as e:
            logger.error(f"Server connection check failed: {e}")
            return False
        return response.is_success

    async def submit(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Send a mutation and return the parsed JSON body.

        Raises BackendUnavailableError, MalformedResponseError or
        BackendHTTPError carrying the most specific message available.
        """
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendUnavailableError(
                f"Cannot connect to server. Please check if the backend server is running on {self.base_url}",
                error_code="BACKEND_UNREACHABLE",
            )

        try:
            data = response.json()
        except ValueError:
            text = response.text
            if response.is_success and not text.strip():
                return None
            logger.error(f"{method} {path} returned invalid JSON (status {response.status_code}): {text[:200]}")
            raise MalformedResponseError(
                f"Server returned invalid JSON. Status: {response.status_code}, Response: {text}",
                error_code="MALFORMED_RESPONSE",
                details={"status_code": response.status_code},
            )

        if not response.is_success:
            message = error_message_from(data, response.status_code, response.reason_phrase)
            logger.error(f"{method} {path} failed with status {response.status_code}: {message}")
            raise BackendHTTPError(message, status_code=response.status_code, details={"response": data})

        return data


# Process-wide client, created on first use
_backend_client: Optional[BackendClient] = None


def get_backend_client() -> BackendClient:
    """FastAPI dependency returning the shared backend client."""
    global _backend_client
    if _backend_client is None:
        from app.core.config import settings
        if settings is None:
            raise RuntimeError(
                "Settings not initialized. Ensure environment variables are set before using the backend client."
            )
        _backend_client = BackendClient(settings.BACKEND_URL, timeout=settings.BACKEND_TIMEOUT)
    return _backend_client


async def close_backend_client() -> None:
    global _backend_client
    if _backend_client is not None:
        await _backend_client.aclose()
        _backend_client = None
