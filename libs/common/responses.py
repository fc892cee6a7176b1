"""Standard JSON envelope shared by every endpoint.

Success: ``{"success": true, "data": ..., "message": ..., "timestamp": ...}``
Error:   ``{"success": false, "error": ..., "code": ..., "timestamp": ...}``

Models serialise with camelCase keys while Python code keeps snake_case.
"""

import math
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from libs.common.datetime_utils import utc_now

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API schemas: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            page=page, limit=limit, total=total, pages=math.ceil(total / limit)
        )


class PaginatedResponse(ApiResponse[T], Generic[T]):
    pagination: Pagination


class BulkDeleteResponse(ApiResponse[None]):
    deleted: int


def error_body(message: str, code: str) -> dict[str, Any]:
    """Build the error envelope as a plain JSON-ready dict."""
    return {
        "success": False,
        "error": message,
        "code": code,
        "timestamp": utc_now().isoformat(),
    }
