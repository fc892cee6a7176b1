"""Cart operations: snapshotting products into carts and cart totals."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from libs.common import errors
from libs.common.logging import get_logger
from services.shop_service.models import CartItem, Product, User
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CENT = Decimal("0.01")


def _round(amount: Decimal) -> float:
    return float(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def cart_totals(items: Iterable[CartItem]) -> dict:
    """Sum quantities and amounts over cart rows, rounded to 2 decimals."""
    total_items = 0
    total_price = Decimal("0")
    total_sale_price = Decimal("0")
    for item in items:
        total_items += item.quantity
        total_price += item.total_price
        total_sale_price += item.total_sale_price

    return {
        "total_items": total_items,
        "total_price": _round(total_price),
        "total_sale_price": _round(total_sale_price),
        "savings": _round(total_price - total_sale_price),
    }


async def list_cart(db: AsyncSession, user_id: str) -> list[CartItem]:
    result = await db.execute(
        select(CartItem)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.desc())
    )
    return list(result.scalars().all())


async def add_to_cart(
    db: AsyncSession, *, user_id: str, product_id: str, quantity: int = 1
) -> CartItem:
    """Add a product to a user's cart.

    A second add of the same product increments the existing row instead of
    creating a new one.
    """
    product = await db.get(Product, product_id)
    if product is None or not product.is_active:
        raise errors.NotFoundError.for_resource("Product")

    user = await db.get(User, user_id)
    if user is None:
        raise errors.NotFoundError.for_resource("User")

    result = await db.execute(
        select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
    )
    item = result.scalar_one_or_none()

    if item:
        item.quantity += quantity
    else:
        item = CartItem(
            user_id=user_id,
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            price=product.price,
            sale_price=product.sale_price,
            image=product.primary_image,
            stock=product.stock,
            quantity=quantity,
        )
        db.add(item)

    await db.commit()
    await db.refresh(item)
    return item


async def update_cart_item(
    db: AsyncSession, *, cart_item_id: str, quantity: int
) -> Optional[CartItem]:
    """Set a row's quantity. Returns None when the row was removed instead."""
    item = await db.get(CartItem, cart_item_id)
    if item is None:
        raise errors.NotFoundError.for_resource("Cart item")

    if quantity <= 0:
        await db.delete(item)
        await db.commit()
        return None

    item.quantity = quantity
    await db.commit()
    await db.refresh(item)
    return item


async def remove_cart_item(db: AsyncSession, cart_item_id: str) -> None:
    item = await db.get(CartItem, cart_item_id)
    if item is None:
        raise errors.NotFoundError.for_resource("Cart item")
    await db.delete(item)
    await db.commit()


async def clear_cart(db: AsyncSession, user_id: str) -> int:
    """Delete every cart row owned by ``user_id`` and return how many went.

    Clearing an already empty cart is not an error and returns 0.
    """
    result = await db.execute(
        delete(CartItem)
        .where(CartItem.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    cleared = result.rowcount or 0
    logger.info("Cleared %d cart item(s) for user %s", cleared, user_id)
    return cleared


async def carts_by_user(db: AsyncSession) -> list[tuple[User, list[CartItem]]]:
    """All non-empty carts grouped by owner, owners ordered by email."""
    result = await db.execute(
        select(CartItem, User)
        .join(User, User.id == CartItem.user_id)
        .order_by(User.email, CartItem.created_at)
    )

    grouped: dict[str, tuple[User, list[CartItem]]] = {}
    for item, user in result.all():
        grouped.setdefault(user.id, (user, []))[1].append(item)
    return list(grouped.values())
