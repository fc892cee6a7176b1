"""Authentication: login and self-registration."""

from fastapi import APIRouter, Depends, Request, status
from libs.auth.passwords import verify_password
from libs.auth.tokens import create_access_token
from libs.common import errors
from libs.common.logging import get_logger
from libs.common.rate_limit import auth_limit
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.shop_service.schemas import (
    LoginData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from services.shop_service.services import user_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/login", response_model=ApiResponse[LoginData])
@auth_limit
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Exchange email and password for the public user and an access token."""
    user = await user_ops.get_user_by_email(db, payload.email)

    # Same message for unknown email and wrong password
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login attempt for %s", payload.email)
        raise errors.AuthError(INVALID_CREDENTIALS)

    if not user.is_active:
        raise errors.AuthError("Account is deactivated")
    if not user.is_approved:
        raise errors.ForbiddenError()

    token = create_access_token(user.id, user.email, user.role.value)
    data = LoginData(
        **UserResponse.model_validate(user).model_dump(), access_token=token
    )
    logger.info("User %s logged in", user.email)
    return ApiResponse[LoginData](data=data, message="Login successful")


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Create a customer account that waits for admin approval."""
    user = await user_ops.create_user(
        db,
        email=payload.email,
        password=payload.password,
        is_approved=False,
        **payload.model_dump(exclude={"email", "password"}),
    )
    return ApiResponse[UserResponse](
        data=UserResponse.model_validate(user),
        message="Registration successful. Your account is awaiting approval.",
    )
