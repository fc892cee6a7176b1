"""Customer profile with order statistics."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.routers._helpers import ensure_self_or_admin, require_user_id
from services.shop_service.schemas import (
    OrderResponse,
    ProfileData,
    ProfileStatistics,
    ProfileUpdate,
    UserResponse,
)
from services.shop_service.services import order_ops, user_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ApiResponse[ProfileData])
async def get_profile(
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    user_id = require_user_id(user_id)
    ensure_self_or_admin(current_user, user_id)

    user = await user_ops.get_user_or_404(db, user_id)
    statistics = await user_ops.order_statistics(db, user)
    orders = await order_ops.list_user_orders(db, user_id)

    data = ProfileData(
        user=UserResponse.model_validate(user),
        statistics=ProfileStatistics(**statistics),
        orders=[OrderResponse.model_validate(o) for o in orders],
    )
    return ApiResponse[ProfileData](data=data)


@router.put("", response_model=ApiResponse[UserResponse])
async def update_profile(
    payload: ProfileUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Update the caller's own contact details."""
    ensure_self_or_admin(current_user, payload.user_id)
    user = await user_ops.get_user_or_404(db, payload.user_id)

    for field, value in payload.model_dump(exclude_unset=True, exclude={"user_id"}).items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user), message="Profile updated"
    )
