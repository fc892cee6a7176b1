"""Access token issuing and decoding (HS256 JWT)."""

from datetime import timedelta
from typing import Any

from jose import jwt

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now


def create_access_token(user_id: str, email: str, role: str) -> str:
    settings = get_settings()
    expires_at = utc_now() + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload = {"sub": user_id, "email": email, "role": role, "exp": expires_at}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token. Raises ``jose.JWTError`` when invalid."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
