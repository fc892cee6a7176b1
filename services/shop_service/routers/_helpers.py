"""Shared helpers for shop routers."""

from typing import Optional, TypeVar

from libs.auth.models import AuthUser
from libs.common import errors
from libs.db.base import Base
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(
    db: AsyncSession, model: type[ModelT], entity_id: str, resource: str
) -> ModelT:
    entity = await db.get(model, entity_id)
    if entity is None:
        raise errors.NotFoundError.for_resource(resource)
    return entity


def require_user_id(user_id: Optional[str]) -> str:
    if not user_id or not user_id.strip():
        raise errors.ValidationError("userId is required")
    return user_id


def ensure_self_or_admin(current_user: AuthUser, user_id: str) -> None:
    """Customers may only act on their own records; admins on anyone's."""
    if not current_user.is_admin and current_user.user_id != user_id:
        raise errors.PermissionDeniedError("You can only access your own data")
