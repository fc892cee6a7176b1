"""Rate limiting configuration for the shop API.

Uses slowapi; storage is in-memory by default and can point at Redis via
RATE_LIMIT_STORAGE_URI when several workers must share counters.
"""

from functools import lru_cache
from typing import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings
from libs.common.responses import error_body


def _get_client_ip(request: Request) -> str:
    """
    Get client IP from request, handling proxies.

    Checks X-Forwarded-For header first (for proxied requests),
    then falls back to direct connection IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


@lru_cache
def get_limiter() -> Limiter:
    """Create and return a cached Limiter instance."""
    settings = get_settings()

    return Limiter(
        key_func=_get_client_ip,
        default_limits=["100/minute"],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Custom handler for rate limit exceeded errors.

    Returns the error envelope with a retry-after header.
    """
    retry_after = exc.detail.split("per")[0].strip() if exc.detail else "1 minute"

    return JSONResponse(
        status_code=429,
        content=error_body(
            f"Rate limit exceeded. Try again in {retry_after}.",
            "rate_limit_exceeded",
        ),
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )


def auth_limit(func: Callable) -> Callable:
    """Apply the configured login rate limit."""
    return limiter.limit(get_settings().LOGIN_RATE_LIMIT)(func)
