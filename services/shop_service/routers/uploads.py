"""File upload endpoint backed by local storage."""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common import errors
from libs.common.responses import ApiResponse
from services.shop_service.schemas import UploadData
from services.shop_service.storage import LocalStorage, get_storage

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=ApiResponse[UploadData])
async def upload_file(
    file: Optional[UploadFile] = File(None),
    _admin: AuthUser = Depends(require_admin),
    storage: LocalStorage = Depends(get_storage),
):
    """Store one file from the multipart field ``file``."""
    if file is None or not file.filename:
        raise errors.ValidationError("No file provided")

    data = await file.read()
    name, url = await storage.save(file.filename, data)
    return ApiResponse[UploadData](
        data=UploadData(
            url=url, file_name=name, size=len(data), content_type=file.content_type
        ),
        message="File uploaded",
    )
