from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.auth.tokens import decode_access_token
from libs.common import errors

security = HTTPBearer(auto_error=False)


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer token and return the authenticated user.
    """
    if token is None:
        raise errors.AuthError("Missing or invalid authorization header")

    try:
        payload = decode_access_token(token.credentials)
        return AuthUser(**payload)
    except (JWTError, ValidationError):
        raise errors.AuthError("Invalid or expired token")


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """
    Ensure the caller carries the ADMIN role claim.
    """
    if not current_user.is_admin:
        raise errors.PermissionDeniedError()
    return current_user
