"""Unit tests for order_ops: checkout, line edits and bulk deletion."""

from decimal import Decimal

import pytest
from libs.common import errors
from services.shop_service.models import CartItem, Order, OrderItem
from services.shop_service.services.order_ops import (
    bulk_delete_orders,
    create_order,
    discounted_price,
    remove_order_item,
    update_item_quantity,
)
from sqlalchemy import Delete, func, select
from sqlalchemy.exc import OperationalError
from tests.factories import (
    CartItemFactory,
    CategoryFactory,
    OrderFactory,
    ProductFactory,
    UserFactory,
)


async def _count(db, column):
    return (await db.execute(select(func.count(column)))).scalar_one()


@pytest.mark.unit
def test_discounted_price_rounds_to_cents():
    assert discounted_price(Decimal("19.99"), Decimal("10")) == Decimal("17.99")
    assert discounted_price(Decimal("20.00"), None) == Decimal("20.00")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_converts_cart_and_clears_it(db_session):
    category = CategoryFactory.create(name="Filters")
    user = UserFactory.create(discount_percentage=Decimal("10"))
    db_session.add_all([category, user])
    await db_session.commit()
    cheap = ProductFactory.create(category_id=category.id, price=Decimal("10.00"))
    sale = ProductFactory.create(price=Decimal("50.00"), sale_price=Decimal("40.00"))
    db_session.add_all([cheap, sale])
    await db_session.commit()
    db_session.add_all(
        [
            CartItemFactory.create(user.id, cheap, quantity=2),
            CartItemFactory.create(user.id, sale, quantity=1),
        ]
    )
    await db_session.commit()

    order = await create_order(db_session, user_id=user.id, notes="Leave at door")

    # (10 * 0.9) * 2 + (40 * 0.9) * 1
    assert order.total_amount == Decimal("54.00")
    assert order.order_number.startswith("ORD-")
    assert {item.category_name for item in order.items} == {"Filters", None}
    assert await _count(db_session, CartItem.id) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_with_empty_cart_is_rejected(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()

    with pytest.raises(errors.ValidationError):
        await create_order(db_session, user_id=user.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_bulk_delete_all_leaves_no_orphan_items(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    db_session.add_all([OrderFactory.create(user.id, item_count=3) for _ in range(3)])
    await db_session.commit()

    deleted = await bulk_delete_orders(db_session, delete_all=True)

    assert deleted == 3
    assert await _count(db_session, Order.id) == 0
    assert await _count(db_session, OrderItem.id) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_bulk_delete_selected_orders_keeps_the_rest(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    keep = OrderFactory.create(user.id, item_count=2)
    drop = OrderFactory.create(user.id, item_count=2)
    db_session.add_all([keep, drop])
    await db_session.commit()

    deleted = await bulk_delete_orders(db_session, order_ids=[drop.id, "unknown"])

    assert deleted == 1
    remaining = (
        await db_session.execute(select(OrderItem.order_id).distinct())
    ).scalars().all()
    assert remaining == [keep.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_bulk_delete_without_targets_is_a_validation_error(db_session):
    with pytest.raises(errors.ValidationError):
        await bulk_delete_orders(db_session, order_ids=[], delete_all=False)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_bulk_delete_with_no_matching_orders_returns_zero(db_session):
    assert await bulk_delete_orders(db_session, order_ids=["nope"]) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_bulk_delete_keeps_orders_and_items(db_session, monkeypatch):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    db_session.add_all([OrderFactory.create(user.id, item_count=2) for _ in range(2)])
    await db_session.commit()

    real_execute = db_session.execute

    async def execute_failing_on_orders(statement, *args, **kwargs):
        if isinstance(statement, Delete) and statement.table.name == "orders":
            raise OperationalError("DELETE FROM orders", {}, Exception("database is locked"))
        return await real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", execute_failing_on_orders)

    with pytest.raises(OperationalError):
        await bulk_delete_orders(db_session, delete_all=True)

    monkeypatch.undo()
    assert await _count(db_session, Order.id) == 2
    assert await _count(db_session, OrderItem.id) == 4


@pytest.mark.asyncio
@pytest.mark.unit
async def test_line_quantity_change_recomputes_total(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=2)
    db_session.add(order)
    await db_session.commit()
    line = order.items[0]

    updated = await update_item_quantity(db_session, order.id, line.id, 3)

    changed = next(item for item in updated.items if item.id == line.id)
    assert changed.quantity == 3
    assert changed.total_price == Decimal("30.00")
    # 3 x 10.00 + 1 x 10.00
    assert updated.total_amount == Decimal("40.00")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_line_quantity_below_one_is_rejected(db_session):
    with pytest.raises(errors.ValidationError):
        await update_item_quantity(db_session, "any-order", "any-item", 0)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remove_line_deletes_it_and_recomputes_total(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=3)
    db_session.add(order)
    await db_session.commit()
    line_id = order.items[0].id

    updated = await remove_order_item(db_session, order.id, line_id)

    assert line_id not in {item.id for item in updated.items}
    assert updated.total_amount == Decimal("20.00")
    assert await _count(db_session, OrderItem.id) == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_line_edit_on_another_order_is_not_found(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    first = OrderFactory.create(user.id, item_count=1)
    second = OrderFactory.create(user.id, item_count=1)
    db_session.add_all([first, second])
    await db_session.commit()

    with pytest.raises(errors.NotFoundError):
        await remove_order_item(db_session, first.id, second.items[0].id)
