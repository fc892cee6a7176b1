"""Endpoints reserved for admin sections that have no backend logic yet.

They keep a stable contract: GET answers an empty list, POST answers null.
"""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse

router = APIRouter(tags=["placeholders"])

PLACEHOLDER_SECTIONS = ("reviews", "shipping", "security", "analytics", "database")


def _register(section: str) -> None:
    title = section.capitalize()

    async def list_section(_admin: AuthUser = Depends(require_admin)):
        return ApiResponse[list](data=[], message=f"{title} API is not implemented yet")

    async def post_section(_admin: AuthUser = Depends(require_admin)):
        return ApiResponse[None](message=f"{title} API is not implemented yet")

    router.add_api_route(
        f"/{section}",
        list_section,
        methods=["GET"],
        response_model=ApiResponse[list],
        name=f"list_{section}",
    )
    router.add_api_route(
        f"/{section}",
        post_section,
        methods=["POST"],
        response_model=ApiResponse[None],
        name=f"post_{section}",
    )


for _section in PLACEHOLDER_SECTIONS:
    _register(_section)
