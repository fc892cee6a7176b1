"""Category CRUD."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common import errors
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.models import Category, Product
from services.shop_service.routers._helpers import get_or_404
from services.shop_service.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/categories", tags=["categories"])
logger = get_logger(__name__)


@router.get("", response_model=ApiResponse[list[CategoryResponse]])
async def list_categories(db: AsyncSession = Depends(get_async_db)):
    """List active categories by name."""
    result = await db.execute(
        select(Category).where(Category.is_active.is_(True)).order_by(Category.name)
    )
    categories = [CategoryResponse.model_validate(c) for c in result.scalars().all()]
    return ApiResponse[list[CategoryResponse]](data=categories)


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    payload: CategoryCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = Category(**payload.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return ApiResponse[CategoryResponse](
        data=CategoryResponse.model_validate(category), message="Category created"
    )


@router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def get_category(category_id: str, db: AsyncSession = Depends(get_async_db)):
    category = await get_or_404(db, Category, category_id, "Category")
    return ApiResponse[CategoryResponse](data=CategoryResponse.model_validate(category))


@router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await get_or_404(db, Category, category_id, "Category")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    await db.commit()
    await db.refresh(category)
    return ApiResponse[CategoryResponse](
        data=CategoryResponse.model_validate(category), message="Category updated"
    )


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(
    category_id: str,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft-delete a category that no active product still uses."""
    category = await get_or_404(db, Category, category_id, "Category")

    in_use = (
        await db.execute(
            select(func.count(Product.id)).where(
                Product.category_id == category_id, Product.is_active.is_(True)
            )
        )
    ).scalar_one()
    if in_use:
        raise errors.ValidationError(
            f"Category is used by {in_use} active product(s) and cannot be deleted"
        )

    category.is_active = False
    await db.commit()
    logger.info("Category %s deactivated", category_id)
    return ApiResponse[None](message="Category deleted")
