"""FastAPI application for the Shop Service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.db.config import dispose_engine
from services.shop_service.routers import (
    admin_orders_router,
    admin_users_router,
    auth_router,
    cart_router,
    categories_router,
    import_export_router,
    marketplaces_router,
    orders_router,
    placeholders_router,
    products_router,
    profile_router,
    uploads_router,
    users_router,
)
from slowapi.errors import RateLimitExceeded

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await dispose_engine()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """Create and configure the Shop Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Parts Shop Service",
        version="0.1.0",
        description="Storefront and admin back-office API for a parts retailer.",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "shop"}

    # Storefront
    app.include_router(auth_router, prefix="/api")
    app.include_router(categories_router, prefix="/api")
    app.include_router(products_router, prefix="/api")
    app.include_router(marketplaces_router, prefix="/api")
    app.include_router(cart_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")

    # Back office
    app.include_router(users_router, prefix="/api")
    app.include_router(admin_users_router, prefix="/api")
    app.include_router(admin_orders_router, prefix="/api")
    app.include_router(uploads_router, prefix="/api")
    app.include_router(import_export_router, prefix="/api")
    app.include_router(placeholders_router, prefix="/api")

    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()
