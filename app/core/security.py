"""Session tokens and route guards."""
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.logging_config import get_logger
from app.models.user import PORTAL_ROLES, SessionUser, UserRole

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_LANDING = "/admin/dashboard"
USER_LANDING = "/user/dashboard"


def _settings():
    from app.core.config import settings
    if settings is None:
        raise RuntimeError("Settings not initialized. Ensure JWT_SECRET_KEY is set.")
    return settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    settings = _settings()
    to_encode = dict(data)
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    settings = _settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected session token: {e}")
        return None


def create_session_token(user: SessionUser) -> str:
    return create_access_token(
        data={
            "sub": user.id or user.email,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "department_id": user.department_id,
            "office_id": user.office_id,
        }
    )


def landing_route(role: str) -> Optional[str]:
    if role == UserRole.ADMIN.value:
        return ADMIN_LANDING
    if role in PORTAL_ROLES:
        return USER_LANDING
    return None


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionUser:
    if credentials is None:
        raise AuthenticationError("Not authenticated", error_code="NOT_AUTHENTICATED")

    payload = decode_token(credentials.credentials)
    if payload is None or not payload.get("role"):
        raise AuthenticationError("Could not validate credentials", error_code="INVALID_TOKEN")

    return SessionUser(
        id=payload.get("sub"),
        email=payload.get("email") or "",
        name=payload.get("name") or "",
        role=payload["role"],
        department_id=payload.get("department_id"),
        office_id=payload.get("office_id"),
    )


def require_role(allowed_roles: List[str]) -> Callable:
    """Dependency factory admitting only sessions whose role is listed."""

    async def role_checker(session: SessionUser = Depends(get_current_session)) -> SessionUser:
        if session.role not in allowed_roles:
            raise AuthorizationError(
                "You do not have permission to access this area",
                error_code="FORBIDDEN_ROLE",
                details={"role": session.role},
            )
        return session

    return role_checker


require_admin = require_role([UserRole.ADMIN.value])


async def require_portal_user(session: SessionUser = Depends(get_current_session)) -> SessionUser:
    """User area: any non-empty role except admin."""
    if not session.role or session.role == UserRole.ADMIN.value:
        raise AuthorizationError(
            "The user area is only available to teachers and staff",
            error_code="FORBIDDEN_ROLE",
            details={"role": session.role},
        )
    return session
