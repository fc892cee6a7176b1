"""Global exception handlers producing the standard error envelope."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from libs.common import errors
from libs.common.logging import get_logger
from libs.common.responses import error_body

logger = get_logger(__name__)


def classify_db_error(exc: sa_exc.SQLAlchemyError) -> errors.AppError:
    """Map a SQLAlchemy failure onto the application taxonomy by type."""
    if isinstance(exc, (sa_exc.TimeoutError, sa_exc.DisconnectionError)):
        return errors.ServiceUnavailableError()
    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return errors.ServiceUnavailableError()
    return errors.PersistenceError()


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else err.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


async def app_error_handler(request: Request, exc: errors.AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code, content=error_body(exc.message, exc.code)
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = errors.ValidationError(_format_validation_error(exc))
    return JSONResponse(
        status_code=error.status_code, content=error_body(error.message, error.code)
    )


async def sqlalchemy_error_handler(
    request: Request, exc: sa_exc.SQLAlchemyError
) -> JSONResponse:
    error = classify_db_error(exc)
    logger.exception(
        "Database failure on %s %s (%s)",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=error.status_code, content=error_body(error.message, error.code)
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), "http_error"),
        headers=getattr(exc, "headers", None),
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register envelope-producing handlers on the app."""
    app.add_exception_handler(errors.AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(sa_exc.SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
