"""Per-request logging context for the shop API.

Every request gets an ``X-Request-ID`` (propagated when the client sends
one), is tagged with the account id from its bearer token when it carries
a valid one, and is logged on start and completion. An exception that no
handler claimed is logged and answered with the standard error envelope.
"""
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from libs.auth.tokens import decode_access_token
from libs.common.errors import AppError
from libs.common.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
    set_user_context,
)
from libs.common.responses import error_body

logger = get_logger(__name__)

QUIET_PATHS = ("/health",)


def caller_id(request: Request) -> Optional[str]:
    """Account id from a valid bearer token, else None.

    Only used to label log lines; authorization stays with the route
    dependencies, which reject bad tokens on their own.
    """
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    try:
        return decode_access_token(token).get("sub")
    except JWTError:
        return None


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get("X-Request-ID"),
            path=request.url.path,
            method=request.method,
        )
        set_user_context(caller_id(request))
        quiet = request.url.path in QUIET_PATHS
        start_time = time.perf_counter()

        if not quiet:
            logger.info(
                "Request started",
                extra={
                    "extra_fields": {
                        "query": str(request.url.query) if request.url.query else None
                    }
                },
            )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Request failed with unhandled exception",
                extra={
                    "extra_fields": {
                        "error": str(e),
                        "duration_ms": round(duration_ms, 2),
                    }
                },
            )
            fallback = AppError()
            response = JSONResponse(
                status_code=fallback.status_code,
                content=error_body(fallback.message, fallback.code),
            )
        else:
            duration_ms = (time.perf_counter() - start_time) * 1000
            if not quiet:
                log_level = "warning" if response.status_code >= 400 else "info"
                getattr(logger, log_level)(
                    "Request completed",
                    extra={
                        "extra_fields": {
                            "status_code": response.status_code,
                            "duration_ms": round(duration_ms, 2),
                        }
                    },
                )
        finally:
            clear_request_context()

        response.headers["X-Request-ID"] = request_id
        return response


def add_observability_middleware(app: FastAPI) -> None:
    configure_logging()
    app.add_middleware(RequestContextMiddleware)
    logger.info("Request logging middleware installed")
