from fastapi import APIRouter, Depends
from app.models.user import LoginRequest, SessionUser, TokenResponse, user_role
from app.core.backend import BackendClient, get_backend_client
from app.core.security import create_session_token, get_current_session, landing_route
from app.core.resources import LOGIN_PATH
from app.core.validation import validate_login
from app.core.logging_config import get_logger
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendHTTPError,
    FormValidationError,
    MalformedResponseError,
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    client: BackendClient = Depends(get_backend_client),
):
    """Login with email and password and receive a session token"""
    errors = validate_login(credentials)
    if errors:
        raise FormValidationError(errors)

    try:
        data = await client.submit(
            "POST",
            LOGIN_PATH,
            {"email": credentials.email, "password": credentials.password},
        )
    except BackendHTTPError as e:
        response = (e.details or {}).get("response")
        message = response.get("message") if isinstance(response, dict) else None
        logger.warning(f"Failed login attempt for {credentials.email}: HTTP {e.status_code}")
        raise AuthenticationError(message or "Invalid email or password", error_code="INVALID_CREDENTIALS")

    user = data.get("user") if isinstance(data, dict) else None
    if not isinstance(user, dict):
        raise MalformedResponseError("Login response did not include a user", error_code="MALFORMED_RESPONSE")

    role = user_role(user)
    redirect = landing_route(role)
    if redirect is None:
        logger.warning(f"Login refused for {credentials.email}: role '{role}' has no portal area")
        raise AuthorizationError(
            "Your account does not have access to this portal",
            error_code="FORBIDDEN_ROLE",
            details={"role": role},
        )

    session = SessionUser(
        id=user.get("_id") or user.get("id"),
        name=user.get("name") or "",
        email=credentials.email,
        role=role,
        department_id=user.get("department_id") or user.get("departmentId"),
        office_id=user.get("office_id") or user.get("officeId"),
    )

    logger.info(f"User logged in: {credentials.email} ({role})")
    return TokenResponse(
        access_token=create_session_token(session),
        user=session,
        redirect=redirect,
    )


@router.get("/session", response_model=SessionUser)
async def current_session(session: SessionUser = Depends(get_current_session)):
    """Get the signed-in user's session"""
    return session
