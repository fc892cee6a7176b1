"""Process-wide database engine and session factory.

Exactly one engine (and therefore one connection pool) exists per process.
It is built on first use from settings and disposed by the app lifespan.
"""

from functools import lru_cache
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from libs.common.config import Settings, get_settings


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` derived from settings."""
    options: dict[str, Any] = {
        # echo for local dev to see SQL queries
        "echo": settings.ENVIRONMENT == "local" and settings.LOG_LEVEL == "DEBUG",
        "future": True,
    }
    if settings.is_sqlite:
        return options

    options.update(
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    if settings.DB_SSL_RELAXED:
        # Encrypt, but accept the provider's self-signed certificate chain
        options["connect_args"] = {"sslmode": "require"}
    return options


@lru_cache
def get_engine() -> AsyncEngine:
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, **engine_options(settings))


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def AsyncSessionLocal() -> AsyncSession:
    """Open a new session from the shared factory (scripts and background use)."""
    return get_sessionmaker()()


async def dispose_engine() -> None:
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        get_engine.cache_clear()
        get_sessionmaker.cache_clear()
