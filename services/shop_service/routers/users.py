"""User administration and approval."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.auth.passwords import hash_password
from libs.common import errors
from libs.common.logging import get_logger
from libs.common.responses import (
    ApiResponse,
    BulkDeleteResponse,
    PaginatedResponse,
    Pagination,
)
from libs.db.session import get_async_db
from services.shop_service.models import UserRole
from services.shop_service.routers._helpers import ensure_self_or_admin
from services.shop_service.schemas import (
    UserBulkDeleteRequest,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from services.shop_service.services import user_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(prefix="/admin/users", tags=["admin"])
logger = get_logger(__name__)


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_approved: Optional[bool] = Query(None, alias="isApproved"),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    users, total = await user_ops.list_users(
        db, page=page, limit=limit, search=search, role=role, is_approved=is_approved
    )
    return PaginatedResponse[UserResponse](
        data=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    payload: UserCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create an account on a customer's behalf (approved by default)."""
    user = await user_ops.create_user(
        db,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        is_approved=payload.is_approved,
        **payload.model_dump(exclude={"email", "password", "role", "is_approved"}),
    )
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user), message="User created"
    )


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    ensure_self_or_admin(current_user, user_id)
    user = await user_ops.get_user_or_404(db, user_id)
    return ApiResponse[UserResponse](data=UserResponse.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: str,
    payload: UserUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    user = await user_ops.get_user_or_404(db, user_id)
    changes = payload.model_dump(exclude_unset=True)

    if "email" in changes:
        email = user_ops.normalize_email(changes.pop("email"))
        existing = await user_ops.get_user_by_email(db, email)
        if existing and existing.id != user.id:
            raise errors.ValidationError("User with this email already exists")
        user.email = email
    if "password" in changes:
        user.password_hash = hash_password(changes.pop("password"))

    for field, value in changes.items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user), message="User updated"
    )


@router.put("/{user_id}/approve", response_model=ApiResponse[UserResponse])
async def approve_user(
    user_id: str,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    user = await user_ops.get_user_or_404(db, user_id)
    user.is_approved = True
    await db.commit()
    await db.refresh(user)
    logger.info("User %s approved", user.email)
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user), message="User approved"
    )


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: str,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an account together with its cart and orders."""
    if user_id == current_user.user_id:
        raise errors.ValidationError("You cannot delete your own account")
    user = await user_ops.get_user_or_404(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info("User %s deleted", user.email)
    return ApiResponse[None](message="User deleted")


@admin_router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_users(
    payload: UserBulkDeleteRequest,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete many customers at once. Admin accounts are always kept."""
    deleted = await user_ops.bulk_delete_users(
        db, user_ids=payload.user_ids, delete_all=bool(payload.delete_all)
    )
    return BulkDeleteResponse(deleted=deleted, message=f"{deleted} user(s) deleted")
