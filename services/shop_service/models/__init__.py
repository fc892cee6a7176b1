"""Shop Service models package."""

from services.shop_service.models.catalog import Category, Marketplace, Product
from services.shop_service.models.commerce import (
    CartItem,
    Order,
    OrderItem,
    generate_order_number,
)
from services.shop_service.models.core import User, new_id
from services.shop_service.models.enums import (
    ImportJobStatus,
    ImportJobType,
    OrderStatus,
    UserRole,
)
from services.shop_service.models.operations import ImportJob

__all__ = [
    "CartItem",
    "Category",
    "ImportJob",
    "ImportJobStatus",
    "ImportJobType",
    "Marketplace",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Product",
    "User",
    "UserRole",
    "generate_order_number",
    "new_id",
]
