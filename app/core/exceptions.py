"""Custom exception classes for the University Inventory Portal."""
from typing import Optional, Dict, Any


class InventoryPortalException(Exception):
    """Base exception for all application-specific exceptions."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class BackendError(InventoryPortalException):
    """Base exception for failures talking to the inventory backend."""
    pass


class BackendUnavailableError(BackendError):
    """Exception raised when the backend cannot be reached."""
    pass


class BackendHTTPError(BackendError):
    """Exception raised when the backend answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        super().__init__(message, error_code=error_code or "BACKEND_HTTP_ERROR", details=details)


class MalformedResponseError(BackendError):
    """Exception raised when the backend body is not the expected JSON."""
    pass


class FormValidationError(InventoryPortalException):
    """Exception raised when a submitted form fails validation.

    ``errors`` maps form field names to user-visible messages.
    """

    def __init__(self, errors: Dict[str, str], message: str = "Please correct the highlighted fields"):
        self.errors = dict(errors)
        super().__init__(message, error_code="VALIDATION_ERROR", details={"fields": sorted(self.errors)})


class AuthenticationError(InventoryPortalException):
    """Exception raised for authentication errors."""
    pass


class AuthorizationError(InventoryPortalException):
    """Exception raised for authorization errors."""
    pass


class NotFoundError(InventoryPortalException):
    """Exception raised when a resource is not found."""
    pass


class ConfigurationError(InventoryPortalException):
    """Exception raised for configuration errors."""
    pass


def sanitize_error_message(error: Exception, include_details: bool = False) -> str:
    """
    Sanitize error messages to prevent leaking sensitive information.

    Args:
        error: The exception to sanitize
        include_details: Whether to include detailed error information (dev only)

    Returns:
        Sanitized error message
    """
    from app.core.config import settings

    if isinstance(error, InventoryPortalException):
        return error.message

    debug = bool(settings and settings.DEBUG)
    error_type = type(error).__name__
    error_str = str(error)

    sensitive_patterns = [
        'password',
        'secret',
        'key',
        'token',
        'credential',
        'auth',
        'connection',
    ]

    error_lower = error_str.lower()
    is_sensitive = any(pattern in error_lower for pattern in sensitive_patterns)

    if is_sensitive and not debug:
        if 'password' in error_lower or 'credential' in error_lower:
            return "Authentication failed. Please check your credentials."
        elif 'connection' in error_lower:
            return "Inventory backend connection error. Please try again later."
        elif 'token' in error_lower or 'auth' in error_lower:
            return "Authentication error. Please login again."
        else:
            return "An error occurred. Please try again or contact support."

    if debug or include_details:
        return f"{error_type}: {error_str}"
    return "An error occurred. Please try again."
