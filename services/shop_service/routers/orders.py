"""Customer order endpoints: history and checkout."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.routers._helpers import ensure_self_or_admin, require_user_id
from services.shop_service.schemas import OrderCreate, OrderResponse
from services.shop_service.services import order_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=ApiResponse[list[OrderResponse]])
async def list_orders(
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    user_id = require_user_id(user_id)
    ensure_self_or_admin(current_user, user_id)
    orders = await order_ops.list_user_orders(db, user_id)
    return ApiResponse[list[OrderResponse]](
        data=[OrderResponse.model_validate(o) for o in orders]
    )


@router.post(
    "",
    response_model=ApiResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    payload: OrderCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Check out the cart, or order an explicit list of products."""
    ensure_self_or_admin(current_user, payload.user_id)
    items = (
        [(item.product_id, item.quantity) for item in payload.items]
        if payload.items is not None
        else None
    )
    order = await order_ops.create_order(
        db, user_id=payload.user_id, notes=payload.notes, items=items
    )
    return ApiResponse[OrderResponse](
        data=OrderResponse.model_validate(order), message="Order created"
    )


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_order(
    order_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    order = await order_ops.get_order(db, order_id)
    ensure_self_or_admin(current_user, order.user_id)
    return ApiResponse[OrderResponse](data=OrderResponse.model_validate(order))
