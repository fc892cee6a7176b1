"""User account operations shared by routers and admin scripts."""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from libs.auth.passwords import hash_password
from libs.common import errors
from libs.common.logging import get_logger
from services.shop_service.models import Order, OrderStatus, User, UserRole
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User)
        .where(func.lower(User.email) == normalize_email(email))
        .order_by(User.created_at)
    )
    return result.scalars().first()


async def get_user_or_404(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise errors.NotFoundError.for_resource("User")
    return user


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    role: UserRole = UserRole.CUSTOMER,
    is_approved: bool = False,
    **profile,
) -> User:
    """Create an account. A duplicate email is a validation error."""
    if await get_user_by_email(db, email):
        raise errors.ValidationError("User with this email already exists")

    user = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role,
        is_approved=is_approved,
        **profile,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created %s user %s (approved=%s)", role.value, user.email, is_approved)
    return user


async def list_users(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_approved: Optional[bool] = None,
) -> tuple[list[User], int]:
    query = select(User)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.phone.ilike(pattern),
            )
        )
    if role is not None:
        query = query.where(User.role == role)
    if is_approved is not None:
        query = query.where(User.is_approved == is_approved)

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar_one()
    result = await db.execute(
        query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(result.scalars().all()), total


async def bulk_delete_users(
    db: AsyncSession,
    *,
    user_ids: Optional[Sequence[str]] = None,
    delete_all: bool = False,
) -> int:
    """Delete customer accounts; admins are never removed this way."""
    if not delete_all and not user_ids:
        raise errors.ValidationError("Provide userIds or set deleteAll to true")

    stmt = delete(User).where(User.role != UserRole.ADMIN)
    if not delete_all:
        stmt = stmt.where(User.id.in_(list(user_ids)))

    result = await db.execute(stmt.execution_options(synchronize_session=False))
    await db.commit()

    deleted = result.rowcount or 0
    logger.info("Bulk deleted %d user(s)", deleted)
    return deleted


async def approve_pending_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).where(User.is_approved.is_(False)))
    users = list(result.scalars().all())
    for user in users:
        user.is_approved = True
    await db.commit()
    return users


async def delete_stale_unapproved(db: AsyncSession, older_than: datetime) -> list[str]:
    """Remove unapproved customers created before ``older_than``; returns their emails."""
    result = await db.execute(
        select(User).where(
            User.is_approved.is_(False),
            User.role != UserRole.ADMIN,
            User.created_at < older_than,
        )
    )
    users = list(result.scalars().all())
    for user in users:
        await db.delete(user)
    await db.commit()
    return [user.email for user in users]


async def order_statistics(db: AsyncSession, user: User) -> dict:
    result = await db.execute(
        select(Order.status, func.count(), func.coalesce(func.sum(Order.total_amount), 0))
        .where(Order.user_id == user.id)
        .group_by(Order.status)
    )

    total_orders = 0
    total_spent = Decimal("0")
    by_status: dict[OrderStatus, int] = {}
    for status, count, amount in result.all():
        total_orders += count
        by_status[status] = count
        total_spent += Decimal(str(amount))

    return {
        "total_orders": total_orders,
        "total_spent": float(total_spent.quantize(Decimal("0.01"))),
        "completed_orders": by_status.get(OrderStatus.COMPLETED, 0),
        "pending_orders": by_status.get(OrderStatus.PENDING, 0),
        "discount_percentage": float(user.discount_percentage or 0),
    }
