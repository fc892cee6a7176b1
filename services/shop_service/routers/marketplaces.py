"""Marketplace CRUD."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.models import Marketplace
from services.shop_service.routers._helpers import get_or_404
from services.shop_service.schemas import (
    MarketplaceCreate,
    MarketplaceResponse,
    MarketplaceUpdate,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/marketplaces", tags=["marketplaces"])


@router.get("", response_model=ApiResponse[list[MarketplaceResponse]])
async def list_marketplaces(db: AsyncSession = Depends(get_async_db)):
    result = await db.execute(
        select(Marketplace)
        .where(Marketplace.is_active.is_(True))
        .order_by(Marketplace.name)
    )
    items = [MarketplaceResponse.model_validate(m) for m in result.scalars().all()]
    return ApiResponse[list[MarketplaceResponse]](data=items)


@router.post(
    "",
    response_model=ApiResponse[MarketplaceResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_marketplace(
    payload: MarketplaceCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    marketplace = Marketplace(**payload.model_dump())
    db.add(marketplace)
    await db.commit()
    await db.refresh(marketplace)
    return ApiResponse[MarketplaceResponse](
        data=MarketplaceResponse.model_validate(marketplace),
        message="Marketplace created",
    )


@router.get("/{marketplace_id}", response_model=ApiResponse[MarketplaceResponse])
async def get_marketplace(marketplace_id: str, db: AsyncSession = Depends(get_async_db)):
    marketplace = await get_or_404(db, Marketplace, marketplace_id, "Marketplace")
    return ApiResponse[MarketplaceResponse](
        data=MarketplaceResponse.model_validate(marketplace)
    )


@router.put("/{marketplace_id}", response_model=ApiResponse[MarketplaceResponse])
async def update_marketplace(
    marketplace_id: str,
    payload: MarketplaceUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    marketplace = await get_or_404(db, Marketplace, marketplace_id, "Marketplace")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(marketplace, field, value)
    await db.commit()
    await db.refresh(marketplace)
    return ApiResponse[MarketplaceResponse](
        data=MarketplaceResponse.model_validate(marketplace),
        message="Marketplace updated",
    )


@router.delete("/{marketplace_id}", response_model=ApiResponse[None])
async def delete_marketplace(
    marketplace_id: str,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    marketplace = await get_or_404(db, Marketplace, marketplace_id, "Marketplace")
    await db.delete(marketplace)
    await db.commit()
    return ApiResponse[None](message="Marketplace deleted")
