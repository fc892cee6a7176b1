"""Bulk product import and export with ImportJob bookkeeping."""

from typing import Any, Optional

from libs.common import errors
from libs.common.logging import get_logger
from pydantic import ValidationError as SchemaValidationError
from services.shop_service.models import (
    Category,
    ImportJob,
    ImportJobStatus,
    ImportJobType,
    Product,
)
from services.shop_service.schemas import ImportProductRow
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

RECENT_JOBS_LIMIT = 20


async def recent_jobs(db: AsyncSession, limit: int = RECENT_JOBS_LIMIT) -> list[ImportJob]:
    result = await db.execute(
        select(ImportJob).order_by(ImportJob.created_at.desc(), ImportJob.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def import_status(db: AsyncSession) -> dict[str, Any]:
    total_products = (await db.execute(select(func.count(Product.id)))).scalar_one()
    active_products = (
        await db.execute(select(func.count(Product.id)).where(Product.is_active.is_(True)))
    ).scalar_one()
    total_categories = (await db.execute(select(func.count(Category.id)))).scalar_one()
    running_jobs = (
        await db.execute(
            select(func.count(ImportJob.id)).where(
                ImportJob.status.in_([ImportJobStatus.PENDING, ImportJobStatus.PROCESSING])
            )
        )
    ).scalar_one()

    return {
        "total_products": total_products,
        "active_products": active_products,
        "total_categories": total_categories,
        "running_jobs": running_jobs,
        "recent_jobs": await recent_jobs(db),
    }


async def _category_id(
    db: AsyncSession, name: Optional[str], cache: dict[str, str]
) -> Optional[str]:
    """Resolve a category by name, creating it on first sight."""
    if not name:
        return None
    name = name.strip()
    if name in cache:
        return cache[name]

    result = await db.execute(select(Category).where(Category.name == name))
    category = result.scalars().first()
    if category is None:
        category = Category(name=name)
        db.add(category)
        await db.flush()
        logger.info("Import created category %s", name)

    cache[name] = category.id
    return category.id


def _apply_row(product: Product, row: ImportProductRow, category_id: Optional[str]) -> None:
    product.name = row.name
    product.sku = row.sku
    product.price = row.price
    product.sale_price = row.sale_price
    product.stock = row.stock
    product.is_featured = row.is_featured
    if row.description is not None:
        product.description = row.description
    if row.artikul is not None:
        product.artikul = row.artikul
    if row.catalog_number is not None:
        product.catalog_number = row.catalog_number
    if row.images:
        product.images = row.images
    if category_id is not None:
        product.category_id = category_id


async def run_import(
    db: AsyncSession, *, file_name: str, rows: list[dict[str, Any]]
) -> ImportJob:
    """Upsert products by SKU, recording progress on an ImportJob.

    Invalid rows (for example without name or sku) are counted as errors and
    skipped. A database failure marks the job failed and re-raises.
    """
    job = ImportJob(
        type=ImportJobType.IMPORT,
        file_name=file_name,
        status=ImportJobStatus.PROCESSING,
        total_items=len(rows),
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    job_id = job.id

    categories: dict[str, str] = {}
    try:
        for raw in rows:
            job.processed_items += 1
            try:
                row = ImportProductRow.model_validate(raw)
            except SchemaValidationError as exc:
                job.error_count += 1
                logger.warning("Import job %s skipped row: %s", job_id, exc.errors()[0]["msg"])
                continue

            if row.sale_price is not None and row.sale_price > row.price:
                job.error_count += 1
                continue

            category_id = await _category_id(db, row.category, categories)
            result = await db.execute(select(Product).where(Product.sku == row.sku))
            product = result.scalars().first()
            if product is None:
                product = Product(name=row.name, price=row.price, images=[])
                db.add(product)
                job.created_count += 1
            else:
                job.updated_count += 1
            _apply_row(product, row, category_id)
            await db.flush()

        job.status = ImportJobStatus.COMPLETED
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        failed = await db.get(ImportJob, job_id)
        failed.status = ImportJobStatus.FAILED
        failed.error_message = type(exc).__name__
        await db.commit()
        logger.exception("Import job %s failed", job_id)
        raise errors.PersistenceError("Import failed") from exc

    await db.refresh(job)
    logger.info(
        "Import job %s finished: %d created, %d updated, %d errors",
        job_id,
        job.created_count,
        job.updated_count,
        job.error_count,
    )
    return job


def product_export_row(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "artikul": product.artikul,
        "catalogNumber": product.catalog_number,
        "description": product.description,
        "price": float(product.price),
        "salePrice": float(product.sale_price) if product.sale_price is not None else None,
        "stock": product.stock,
        "images": product.images or [],
        "category": product.category.name if product.category else None,
        "isActive": product.is_active,
        "isFeatured": product.is_featured,
    }


async def run_export(db: AsyncSession) -> tuple[ImportJob, list[dict[str, Any]]]:
    result = await db.execute(
        select(Product).options(selectinload(Product.category)).order_by(Product.name)
    )
    rows = [product_export_row(product) for product in result.scalars().all()]

    job = ImportJob(
        type=ImportJobType.EXPORT,
        file_name="products-export.json",
        status=ImportJobStatus.COMPLETED,
        total_items=len(rows),
        processed_items=len(rows),
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    logger.info("Export job %s wrote %d product(s)", job.id, len(rows))
    return job, rows
