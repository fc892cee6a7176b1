"""Shop service routers package."""

from services.shop_service.routers.admin_orders import router as admin_orders_router
from services.shop_service.routers.auth import router as auth_router
from services.shop_service.routers.cart import router as cart_router
from services.shop_service.routers.categories import router as categories_router
from services.shop_service.routers.import_export import router as import_export_router
from services.shop_service.routers.marketplaces import router as marketplaces_router
from services.shop_service.routers.orders import router as orders_router
from services.shop_service.routers.placeholders import router as placeholders_router
from services.shop_service.routers.products import router as products_router
from services.shop_service.routers.profile import router as profile_router
from services.shop_service.routers.uploads import router as uploads_router
from services.shop_service.routers.users import admin_router as admin_users_router
from services.shop_service.routers.users import router as users_router

__all__ = [
    "admin_orders_router",
    "admin_users_router",
    "auth_router",
    "cart_router",
    "categories_router",
    "import_export_router",
    "marketplaces_router",
    "orders_router",
    "placeholders_router",
    "products_router",
    "profile_router",
    "uploads_router",
    "users_router",
]
