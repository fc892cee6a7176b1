"""Order operations: checkout, status changes, line edits and bulk deletion."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from libs.common import errors
from libs.common.logging import get_logger
from services.shop_service.models import (
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
)
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

CENT = Decimal("0.01")


def discounted_price(unit_price: Decimal, discount_percentage: Optional[Decimal]) -> Decimal:
    """Apply a percentage discount to a unit price, rounded to cents."""
    discount = Decimal(discount_percentage or 0)
    price = Decimal(unit_price) * (Decimal("100") - discount) / Decimal("100")
    return price.quantize(CENT, rounding=ROUND_HALF_UP)


def order_query():
    return select(Order).options(selectinload(Order.items))


async def get_order(db: AsyncSession, order_id: str) -> Order:
    result = await db.execute(order_query().where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if order is None:
        raise errors.NotFoundError.for_resource("Order")
    return order


async def list_user_orders(db: AsyncSession, user_id: str) -> list[Order]:
    result = await db.execute(
        order_query().where(Order.user_id == user_id).order_by(Order.created_at.desc())
    )
    return list(result.scalars().all())


async def list_all_orders(db: AsyncSession) -> list[Order]:
    result = await db.execute(
        order_query()
        .options(selectinload(Order.user))
        .order_by(Order.created_at.desc())
    )
    return list(result.scalars().all())


async def _category_names(db: AsyncSession, product_ids: Sequence[str]) -> dict[str, Optional[str]]:
    if not product_ids:
        return {}
    result = await db.execute(
        select(Product)
        .where(Product.id.in_(product_ids))
        .options(selectinload(Product.category))
    )
    return {
        product.id: product.category.name if product.category else None
        for product in result.scalars().all()
    }


def _order_item(
    *,
    product_id: str,
    name: str,
    sku: Optional[str],
    category_name: Optional[str],
    quantity: int,
    unit_price: Decimal,
    discount_percentage: Optional[Decimal],
) -> OrderItem:
    price = discounted_price(unit_price, discount_percentage)
    return OrderItem(
        product_id=product_id,
        name=name,
        sku=sku,
        category_name=category_name,
        quantity=quantity,
        price=price,
        total_price=price * quantity,
    )


async def create_order(
    db: AsyncSession,
    *,
    user_id: str,
    notes: Optional[str] = None,
    items: Optional[Sequence[tuple[str, int]]] = None,
) -> Order:
    """Place an order for ``user_id``.

    With explicit ``items`` (product id, quantity pairs) those products are
    ordered at their current price. Without them the user's cart is
    converted and then emptied in the same transaction.
    """
    user = await db.get(User, user_id)
    if user is None:
        raise errors.NotFoundError.for_resource("User")

    order_items: list[OrderItem] = []
    from_cart = items is None

    if from_cart:
        result = await db.execute(select(CartItem).where(CartItem.user_id == user_id))
        cart_items = list(result.scalars().all())
        if not cart_items:
            raise errors.ValidationError("Cart is empty")

        categories = await _category_names(db, [ci.product_id for ci in cart_items])
        for cart_item in cart_items:
            unit = cart_item.sale_price if cart_item.sale_price is not None else cart_item.price
            order_items.append(
                _order_item(
                    product_id=cart_item.product_id,
                    name=cart_item.name,
                    sku=cart_item.sku,
                    category_name=categories.get(cart_item.product_id),
                    quantity=cart_item.quantity,
                    unit_price=unit,
                    discount_percentage=user.discount_percentage,
                )
            )
    else:
        if not items:
            raise errors.ValidationError("Order must contain at least one item")
        result = await db.execute(
            select(Product)
            .where(Product.id.in_([product_id for product_id, _ in items]))
            .options(selectinload(Product.category))
        )
        products = {p.id: p for p in result.scalars().all()}
        for product_id, quantity in items:
            product = products.get(product_id)
            if product is None or not product.is_active:
                raise errors.NotFoundError(f"Product {product_id} not found")
            order_items.append(
                _order_item(
                    product_id=product.id,
                    name=product.name,
                    sku=product.sku,
                    category_name=product.category.name if product.category else None,
                    quantity=quantity,
                    unit_price=product.effective_price,
                    discount_percentage=user.discount_percentage,
                )
            )

    order = Order(
        user_id=user_id,
        notes=notes,
        total_amount=sum((item.total_price for item in order_items), Decimal("0")),
        items=order_items,
    )
    db.add(order)

    if from_cart:
        await db.execute(
            delete(CartItem)
            .where(CartItem.user_id == user_id)
            .execution_options(synchronize_session=False)
        )

    await db.commit()
    logger.info(
        "Created order %s for user %s (%d items, total=%s)",
        order.order_number,
        user_id,
        len(order_items),
        order.total_amount,
    )
    return await get_order(db, order.id)


async def update_order_status(db: AsyncSession, order_id: str, status: OrderStatus) -> Order:
    order = await get_order(db, order_id)
    old_status = order.status
    order.status = status
    await db.commit()
    logger.info(
        "Order %s status %s -> %s", order.order_number, old_status.value, status.value
    )
    return await get_order(db, order_id)


def _find_line(order: Order, item_id: str) -> OrderItem:
    for item in order.items:
        if item.id == item_id:
            return item
    raise errors.NotFoundError.for_resource("Order item")


def _recalculate_total(order: Order) -> None:
    order.total_amount = sum((item.total_price for item in order.items), Decimal("0"))


async def update_item_quantity(
    db: AsyncSession, order_id: str, item_id: str, quantity: int
) -> Order:
    """Change the quantity of one order line and recompute the order total.

    The line keeps the unit price it was ordered at.
    """
    if quantity < 1:
        raise errors.ValidationError("Quantity must be at least 1")

    order = await get_order(db, order_id)
    item = _find_line(order, item_id)
    item.quantity = quantity
    item.total_price = Decimal(item.price) * quantity
    _recalculate_total(order)
    await db.commit()
    logger.info(
        "Order %s line %s quantity set to %d (total=%s)",
        order.order_number,
        item_id,
        quantity,
        order.total_amount,
    )
    return await get_order(db, order_id)


async def remove_order_item(db: AsyncSession, order_id: str, item_id: str) -> Order:
    """Drop one line from an order and recompute the order total."""
    order = await get_order(db, order_id)
    item = _find_line(order, item_id)
    order.items.remove(item)
    _recalculate_total(order)
    await db.commit()
    logger.info(
        "Removed line %s from order %s (total=%s)",
        item_id,
        order.order_number,
        order.total_amount,
    )
    return await get_order(db, order_id)


async def bulk_delete_orders(
    db: AsyncSession,
    *,
    order_ids: Optional[Sequence[str]] = None,
    delete_all: bool = False,
) -> int:
    """Delete orders together with their items and return the order count.

    Items go first, then the orders, inside one transaction: either both
    are removed or, on failure, neither is.
    """
    if not delete_all and not order_ids:
        raise errors.ValidationError("Provide orderIds or set deleteAll to true")

    query = select(Order.id)
    if not delete_all:
        query = query.where(Order.id.in_(list(order_ids)))
    target_ids = list((await db.execute(query)).scalars().all())

    if not target_ids:
        return 0

    try:
        await db.execute(
            delete(OrderItem)
            .where(OrderItem.order_id.in_(target_ids))
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(
            delete(Order)
            .where(Order.id.in_(target_ids))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Bulk order delete rolled back (%d targets)", len(target_ids))
        raise

    deleted = result.rowcount or 0
    logger.info("Bulk deleted %d order(s)", deleted)
    return deleted
