"""Integration tests for customer and admin order endpoints."""

from decimal import Decimal

import pytest
from services.shop_service.models import Order, OrderItem
from sqlalchemy import func, select
from tests.factories import CartItemFactory, OrderFactory, ProductFactory, UserFactory


async def _count(db, column):
    return (await db.execute(select(func.count(column)))).scalar_one()


# ---------------------------------------------------------------------------
# Checkout / history
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_from_cart(client, db_session):
    """POST /api/orders: cart becomes an order and is emptied."""
    user = UserFactory.create()
    product = ProductFactory.create(price=Decimal("15.00"))
    db_session.add_all([user, product])
    await db_session.commit()
    db_session.add(CartItemFactory.create(user.id, product, quantity=2))
    await db_session.commit()

    response = await client.post("/api/orders", json={"userId": user.id, "notes": "Call first"})

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["status"] == "pending"
    assert data["totalAmount"] == 30.0
    assert data["currency"] == "AZN"
    assert data["notes"] == "Call first"
    assert len(data["items"]) == 1

    cart = await client.get("/api/cart", params={"userId": user.id})
    assert cart.json()["data"]["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_empty_cart_is_400(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()

    response = await client.post("/api/orders", json={"userId": user.id})

    assert response.status_code == 400
    assert response.json()["error"] == "Cart is empty"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_with_explicit_items(client, db_session):
    user = UserFactory.create()
    product = ProductFactory.create(price=Decimal("8.00"), sale_price=Decimal("6.00"))
    db_session.add_all([user, product])
    await db_session.commit()

    response = await client.post(
        "/api/orders",
        json={"userId": user.id, "items": [{"productId": product.id, "quantity": 3}]},
    )

    assert response.status_code == 201, response.text
    assert response.json()["data"]["totalAmount"] == 18.0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_and_get_orders(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=2)
    db_session.add(order)
    await db_session.commit()

    listing = await client.get("/api/orders", params={"userId": user.id})
    assert listing.status_code == 200
    assert [o["id"] for o in listing.json()["data"]] == [order.id]

    detail = await client.get(f"/api/orders/{order.id}")
    assert detail.status_code == 200
    assert len(detail.json()["data"]["items"]) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_missing_order_is_404(client):
    response = await client.get("/api/orders/nope")

    assert response.status_code == 404
    body = response.json()
    assert body == {
        "success": False,
        "error": "Order not found",
        "code": "not_found",
        "timestamp": body["timestamp"],
    }


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_lists_orders_with_customer(client, db_session):
    user = UserFactory.create(first_name="Rauf", last_name="Aliyev")
    db_session.add(user)
    await db_session.commit()
    db_session.add(OrderFactory.create(user.id))
    await db_session.commit()

    response = await client.get("/api/admin/orders")

    assert response.status_code == 200, response.text
    order = response.json()["data"][0]
    assert order["customer"]["fullName"] == "Rauf Aliyev"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_updates_status(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id)
    db_session.add(order)
    await db_session.commit()

    response = await client.put(
        "/api/admin/orders", json={"orderId": order.id, "status": "approved"}
    )
    assert response.status_code == 200, response.text
    assert response.json()["data"]["status"] == "approved"

    invalid = await client.put(
        "/api/admin/orders", json={"orderId": order.id, "status": "shipped-to-mars"}
    )
    assert invalid.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_bulk_delete_all_orders(client, db_session):
    """POST /api/admin/orders/bulk-delete: deleteAll leaves no orphan items."""
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    db_session.add_all([OrderFactory.create(user.id, item_count=2) for _ in range(2)])
    await db_session.commit()

    response = await client.post("/api/admin/orders/bulk-delete", json={"deleteAll": True})

    assert response.status_code == 200, response.text
    assert response.json()["success"] is True
    assert response.json()["deleted"] == 2
    assert await _count(db_session, Order.id) == 0
    assert await _count(db_session, OrderItem.id) == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_bulk_delete_with_empty_ids_is_400(client):
    response = await client.post("/api/admin/orders/bulk-delete", json={"orderIds": []})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_bulk_delete_unknown_ids_deletes_nothing(client):
    response = await client.post(
        "/api/admin/orders/bulk-delete", json={"orderIds": ["ghost"]}
    )

    assert response.status_code == 200
    assert response.json()["deleted"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customer_cannot_bulk_delete(customer_client):
    response = await customer_client.post(
        "/api/admin/orders/bulk-delete", json={"deleteAll": True}
    )
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Admin line edits
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_updates_line_quantity(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=2)
    db_session.add(order)
    await db_session.commit()

    response = await client.post(
        "/api/admin/orders/update-item-quantity",
        json={"orderId": order.id, "itemId": order.items[1].id, "quantity": 4},
    )

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["totalAmount"] == 50.0
    line = next(item for item in data["items"] if item["id"] == order.items[1].id)
    assert line["quantity"] == 4
    assert line["totalPrice"] == 40.0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_line_quantity_must_be_positive(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=1)
    db_session.add(order)
    await db_session.commit()

    response = await client.post(
        "/api/admin/orders/update-item-quantity",
        json={"orderId": order.id, "itemId": order.items[0].id, "quantity": 0},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_removes_line(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=2)
    db_session.add(order)
    await db_session.commit()

    response = await client.request(
        "DELETE",
        "/api/admin/orders/remove-item",
        json={"orderId": order.id, "itemId": order.items[0].id},
    )

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert len(data["items"]) == 1
    assert data["totalAmount"] == 10.0
    assert await _count(db_session, OrderItem.id) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_remove_unknown_line_is_404(client, db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()
    order = OrderFactory.create(user.id, item_count=1)
    db_session.add(order)
    await db_session.commit()

    response = await client.request(
        "DELETE",
        "/api/admin/orders/remove-item",
        json={"orderId": order.id, "itemId": "ghost"},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customer_cannot_edit_order_lines(customer_client):
    response = await customer_client.post(
        "/api/admin/orders/update-item-quantity",
        json={"orderId": "o1", "itemId": "i1", "quantity": 2},
    )
    assert response.status_code == 403
