"""Pydantic schemas for the shop service.

Attributes are snake_case; JSON is camelCase through ``CamelModel``.
"""

from datetime import datetime
from typing import Any, ClassVar, Optional

from libs.common.responses import ApiResponse, CamelModel
from pydantic import EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel
from services.shop_service.models import (
    ImportJobStatus,
    ImportJobType,
    OrderStatus,
    UserRole,
)


class PartialUpdate(CamelModel):
    """Base for PUT payloads.

    Omitted fields are left alone. An explicit ``null`` is only accepted for
    columns that may be empty; fields listed in ``required_fields`` reject it.
    """

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_for_required_fields(self):
        nulls = [
            to_camel(name)
            for name in self.required_fields
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


# ============================================================================
# AUTH / USER SCHEMAS
# ============================================================================


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileFields(CamelModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    inn: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)


class RegisterRequest(ProfileFields):
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserCreate(RegisterRequest):
    role: UserRole = UserRole.CUSTOMER
    is_approved: bool = True
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)


class UserUpdate(ProfileFields, PartialUpdate):
    required_fields = ("email", "password", "role", "is_approved", "is_active")

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    is_approved: Optional[bool] = None
    is_active: Optional[bool] = None
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)


class ProfileUpdate(ProfileFields):
    user_id: str = Field(..., min_length=1)


class UserResponse(ProfileFields):
    """Public view of a user; the password hash is never serialised."""

    id: str
    email: str
    role: UserRole
    is_approved: bool
    is_active: bool
    discount_percentage: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class LoginData(UserResponse):
    access_token: str


class BulkDeleteRequest(CamelModel):
    delete_all: Optional[bool] = False


class UserBulkDeleteRequest(BulkDeleteRequest):
    user_ids: Optional[list[str]] = None


# ============================================================================
# CATALOG SCHEMAS
# ============================================================================


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: bool = True


class CategoryUpdate(PartialUpdate):
    required_fields = ("name", "is_active")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None


class CategorySummary(CamelModel):
    id: str
    name: str


class CategoryResponse(CategorySummary):
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MarketplaceCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    url: Optional[str] = Field(None, max_length=500)
    is_active: bool = True


class MarketplaceUpdate(PartialUpdate):
    required_fields = ("name", "is_active")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class MarketplaceResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductFields(CamelModel):
    description: Optional[str] = None
    sale_price: Optional[float] = Field(None, ge=0)
    sku: Optional[str] = Field(None, max_length=100)
    artikul: Optional[str] = Field(None, max_length=100)
    catalog_number: Optional[str] = Field(None, max_length=100)
    category_id: Optional[str] = None


class ProductCreate(ProductFields):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    images: list[str] = []
    is_active: bool = True
    is_featured: bool = False

    @model_validator(mode="after")
    def check_sale_price(self):
        if self.sale_price is not None and self.sale_price > self.price:
            raise ValueError("salePrice cannot exceed price")
        return self


class ProductUpdate(ProductFields, PartialUpdate):
    required_fields = ("name", "price", "stock", "images", "is_active", "is_featured")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    images: Optional[list[str]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class ProductResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    sale_price: Optional[float] = None
    sku: Optional[str] = None
    artikul: Optional[str] = None
    catalog_number: Optional[str] = None
    stock: int
    images: list[str] = []
    category_id: Optional[str] = None
    category: Optional[CategorySummary] = None
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class CartItemUpdate(CamelModel):
    cart_item_id: str = Field(..., min_length=1)
    quantity: int


class CartClearRequest(CamelModel):
    user_id: Optional[str] = None


class CartItemResponse(CamelModel):
    id: str
    user_id: str
    product_id: str
    name: str
    sku: Optional[str] = None
    price: float
    sale_price: Optional[float] = None
    image: Optional[str] = None
    stock: int
    quantity: int
    total_price: float
    total_sale_price: float
    created_at: datetime


class CartTotals(CamelModel):
    total_items: int
    total_price: float
    total_sale_price: float
    savings: float


class CartData(CamelModel):
    items: list[CartItemResponse]
    totals: CartTotals


class CartClearResponse(ApiResponse[None]):
    cleared_items: int


class CartOwner(CamelModel):
    id: str
    email: str
    full_name: str


class UserCart(CamelModel):
    user: CartOwner
    items: list[CartItemResponse]
    totals: CartTotals


class AllCartsData(CamelModel):
    carts: list[UserCart]
    total_users: int
    total_items: int


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemInput(CamelModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class OrderCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    notes: Optional[str] = None
    items: Optional[list[OrderItemInput]] = None


class OrderStatusUpdate(CamelModel):
    order_id: str = Field(..., min_length=1)
    status: OrderStatus


class OrderBulkDeleteRequest(BulkDeleteRequest):
    order_ids: Optional[list[str]] = None


class OrderItemRef(CamelModel):
    order_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)


class OrderItemQuantityUpdate(OrderItemRef):
    quantity: int = Field(..., ge=1)


class OrderItemResponse(CamelModel):
    id: str
    product_id: Optional[str] = None
    name: str
    sku: Optional[str] = None
    category_name: Optional[str] = None
    quantity: int
    price: float
    total_price: float


class CustomerSummary(CamelModel):
    id: str
    email: str
    full_name: str
    phone: Optional[str] = None


class OrderResponse(CamelModel):
    id: str
    order_number: str
    user_id: str
    status: OrderStatus
    total_amount: float
    currency: str
    notes: Optional[str] = None
    items: list[OrderItemResponse] = []
    created_at: datetime
    updated_at: datetime


class AdminOrderResponse(OrderResponse):
    customer: Optional[CustomerSummary] = None


# ============================================================================
# PROFILE SCHEMAS
# ============================================================================


class ProfileStatistics(CamelModel):
    total_orders: int
    total_spent: float
    completed_orders: int
    pending_orders: int
    discount_percentage: float


class ProfileData(CamelModel):
    user: UserResponse
    statistics: ProfileStatistics
    orders: list[OrderResponse]


# ============================================================================
# UPLOAD / IMPORT-EXPORT SCHEMAS
# ============================================================================


class UploadData(CamelModel):
    url: str
    file_name: str
    size: int
    content_type: Optional[str] = None


class ImportProductRow(CamelModel):
    """One product row of an import payload."""

    name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    price: float = Field(0, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    artikul: Optional[str] = None
    catalog_number: Optional[str] = None
    stock: int = Field(0, ge=0)
    images: list[str] = []
    category: Optional[str] = None
    is_featured: bool = False


class ImportRequest(CamelModel):
    file_name: str = Field("import.json", min_length=1)
    products: list[dict[str, Any]]


class ImportJobResponse(CamelModel):
    id: int
    type: ImportJobType
    file_name: str
    status: ImportJobStatus
    total_items: int
    processed_items: int
    created_count: int
    updated_count: int
    error_count: int
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ImportExportStatus(CamelModel):
    total_products: int
    active_products: int
    total_categories: int
    running_jobs: int
    recent_jobs: list[ImportJobResponse]


class ExportData(CamelModel):
    job: ImportJobResponse
    products: list[dict[str, Any]]
