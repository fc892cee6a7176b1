"""Bulk product import and export."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.schemas import (
    ExportData,
    ImportExportStatus,
    ImportJobResponse,
    ImportRequest,
)
from services.shop_service.services import import_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/import-export", tags=["import-export"])


@router.get("", response_model=ApiResponse[ImportExportStatus])
async def import_export_status(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    status = await import_ops.import_status(db)
    status["recent_jobs"] = [
        ImportJobResponse.model_validate(job) for job in status["recent_jobs"]
    ]
    return ApiResponse[ImportExportStatus](
        data=ImportExportStatus(**status), message="Import/export system is ready"
    )


@router.post("/import", response_model=ApiResponse[ImportJobResponse])
async def import_products(
    payload: ImportRequest,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Upsert products by SKU from a JSON payload."""
    job = await import_ops.run_import(
        db, file_name=payload.file_name, rows=payload.products
    )
    return ApiResponse[ImportJobResponse](
        data=ImportJobResponse.model_validate(job),
        message=(
            f"Import finished: {job.created_count} created, "
            f"{job.updated_count} updated, {job.error_count} errors"
        ),
    )


@router.get("/export", response_model=ApiResponse[ExportData])
async def export_products(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    job, rows = await import_ops.run_export(db)
    return ApiResponse[ExportData](
        data=ExportData(job=ImportJobResponse.model_validate(job), products=rows)
    )
