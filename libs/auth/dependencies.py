from typing import Annotated, Any, Iterable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.access import Identity, check_access
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# auto_error is off so a missing header is reported as 401 like a bad token
security = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> AuthUser:
    """
    Validate a JWT signed with the configured secret and return its caller.

    Raises JWTError or ValidationError on a bad token.
    """
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"verify_aud": False},
    )
    return AuthUser(**payload)


async def get_optional_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[AuthUser]:
    """
    Return the caller when a valid bearer token is sent, ``None`` without one.
    A malformed token is still rejected.
    """
    if token is None:
        return None
    try:
        return decode_token(token.credentials)
    except (JWTError, ValidationError):
        raise _credentials_exception()


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer JWT and return the authenticated user.
    """
    if token is None:
        raise _credentials_exception()
    try:
        return decode_token(token.credentials)
    except (JWTError, ValidationError):
        raise _credentials_exception()


def enforce_access(identity: Identity, required_roles: Iterable[Any]) -> None:
    """
    Raise 403 unless ``identity`` may use a resource gated by ``required_roles``.

    ``identity`` is the caller as the owning service stores it (its account
    row); token claims other than the subject are not trusted for roles.
    """
    decision = check_access(identity, required_roles)
    if decision.allowed:
        return

    logger.debug(
        "Access denied",
        extra={
            "extra_fields": {
                "role": decision.actual_role,
                "required_roles": list(decision.required_roles),
            }
        },
    )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=decision.message,
    )


async def require_service_role(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """
    Admit only backend-to-backend calls signed with the service role.
    """
    if not current_user.is_service_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Service role required",
        )
    return current_user
