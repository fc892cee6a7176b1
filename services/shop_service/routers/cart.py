"""Shopping cart endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common import errors
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.models import CartItem
from services.shop_service.routers._helpers import (
    ensure_self_or_admin,
    get_or_404,
    require_user_id,
)
from services.shop_service.schemas import (
    AllCartsData,
    CartClearRequest,
    CartClearResponse,
    CartData,
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartOwner,
    CartTotals,
    UserCart,
)
from services.shop_service.services import cart_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_data(items: list[CartItem]) -> CartData:
    return CartData(
        items=[CartItemResponse.model_validate(i) for i in items],
        totals=CartTotals(**cart_ops.cart_totals(items)),
    )


@router.get("", response_model=ApiResponse[CartData])
async def get_cart(
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    user_id = require_user_id(user_id)
    ensure_self_or_admin(current_user, user_id)
    items = await cart_ops.list_cart(db, user_id)
    return ApiResponse[CartData](data=_cart_data(items))


@router.post(
    "",
    response_model=ApiResponse[CartItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_to_cart(
    payload: CartItemCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    ensure_self_or_admin(current_user, payload.user_id)
    item = await cart_ops.add_to_cart(
        db,
        user_id=payload.user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )
    return ApiResponse[CartItemResponse](
        data=CartItemResponse.model_validate(item), message="Product added to cart"
    )


@router.put("", response_model=ApiResponse[CartItemResponse])
async def update_cart_item(
    payload: CartItemUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Set a row's quantity; zero or less removes the row."""
    item = await get_or_404(db, CartItem, payload.cart_item_id, "Cart item")
    ensure_self_or_admin(current_user, item.user_id)

    updated = await cart_ops.update_cart_item(
        db, cart_item_id=payload.cart_item_id, quantity=payload.quantity
    )
    if updated is None:
        return ApiResponse[CartItemResponse](message="Item removed from cart")
    return ApiResponse[CartItemResponse](
        data=CartItemResponse.model_validate(updated), message="Cart updated"
    )


@router.delete("", response_model=ApiResponse[None])
async def remove_cart_item(
    cart_item_id: Optional[str] = Query(None, alias="cartItemId"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    if not cart_item_id:
        raise errors.ValidationError("cartItemId is required")
    item = await get_or_404(db, CartItem, cart_item_id, "Cart item")
    ensure_self_or_admin(current_user, item.user_id)
    await cart_ops.remove_cart_item(db, cart_item_id)
    return ApiResponse[None](message="Item removed from cart")


@router.post("/clear", response_model=CartClearResponse)
async def clear_cart(
    payload: CartClearRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Remove every row of one user's cart and report how many went."""
    user_id = require_user_id(payload.user_id)
    ensure_self_or_admin(current_user, user_id)
    cleared = await cart_ops.clear_cart(db, user_id)
    return CartClearResponse(cleared_items=cleared, message="Cart cleared")


@router.get("/all", response_model=ApiResponse[AllCartsData])
async def all_carts(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Every non-empty cart, grouped by customer."""
    groups = await cart_ops.carts_by_user(db)
    carts = [
        UserCart(
            user=CartOwner(id=user.id, email=user.email, full_name=user.full_name),
            items=[CartItemResponse.model_validate(i) for i in items],
            totals=CartTotals(**cart_ops.cart_totals(items)),
        )
        for user, items in groups
    ]
    return ApiResponse[AllCartsData](
        data=AllCartsData(
            carts=carts,
            total_users=len(carts),
            total_items=sum(c.totals.total_items for c in carts),
        )
    )
