"""Admin order management."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse, BulkDeleteResponse
from libs.db.session import get_async_db
from services.shop_service.models import Order
from services.shop_service.schemas import (
    AdminOrderResponse,
    CustomerSummary,
    OrderBulkDeleteRequest,
    OrderItemQuantityUpdate,
    OrderItemRef,
    OrderResponse,
    OrderStatusUpdate,
)
from services.shop_service.services import order_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/orders", tags=["admin"])


def _admin_view(order: Order) -> AdminOrderResponse:
    data = OrderResponse.model_validate(order).model_dump()
    if order.user is not None:
        data["customer"] = CustomerSummary(
            id=order.user.id,
            email=order.user.email,
            full_name=order.user.full_name,
            phone=order.user.phone,
        )
    return AdminOrderResponse(**data)


@router.get("", response_model=ApiResponse[list[AdminOrderResponse]])
async def list_all_orders(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    orders = await order_ops.list_all_orders(db)
    return ApiResponse[list[AdminOrderResponse]](data=[_admin_view(o) for o in orders])


@router.put("", response_model=ApiResponse[OrderResponse])
async def update_order_status(
    payload: OrderStatusUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await order_ops.update_order_status(db, payload.order_id, payload.status)
    return ApiResponse[OrderResponse](
        data=OrderResponse.model_validate(order), message="Order status updated"
    )


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_orders(
    payload: OrderBulkDeleteRequest,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete selected orders (or all of them) along with their items."""
    deleted = await order_ops.bulk_delete_orders(
        db, order_ids=payload.order_ids, delete_all=bool(payload.delete_all)
    )
    return BulkDeleteResponse(deleted=deleted, message=f"{deleted} order(s) deleted")


@router.post("/update-item-quantity", response_model=ApiResponse[OrderResponse])
async def update_item_quantity(
    payload: OrderItemQuantityUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await order_ops.update_item_quantity(
        db, payload.order_id, payload.item_id, payload.quantity
    )
    return ApiResponse[OrderResponse](
        data=OrderResponse.model_validate(order), message="Item quantity updated"
    )


@router.delete("/remove-item", response_model=ApiResponse[OrderResponse])
async def remove_order_item(
    payload: OrderItemRef,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await order_ops.remove_order_item(db, payload.order_id, payload.item_id)
    return ApiResponse[OrderResponse](
        data=OrderResponse.model_validate(order), message="Item removed from order"
    )
