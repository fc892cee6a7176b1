"""Product catalog: listing, search, recommendations and admin CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common import errors
from libs.common.logging import get_logger
from libs.common.responses import ApiResponse, PaginatedResponse, Pagination
from libs.db.session import get_async_db
from services.shop_service.models import Category, Product
from services.shop_service.schemas import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(prefix="/products", tags=["products"])
logger = get_logger(__name__)

SEARCH_LIMIT = 10
BATCH_LIMIT = 100
SIMILAR_LIMIT = 8
SIMILAR_MIN = 4


async def _load_product(db: AsyncSession, product_id: str) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.category))
        .execution_options(populate_existing=True)
    )
    product = result.scalar_one_or_none()
    if product is None:
        raise errors.NotFoundError.for_resource("Product")
    return product


async def _check_category(db: AsyncSession, category_id: Optional[str]) -> None:
    if category_id and await db.get(Category, category_id) is None:
        raise errors.ValidationError("Category does not exist")


@router.get("", response_model=PaginatedResponse[ProductResponse])
async def list_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """List active products, newest first."""
    query = select(Product).where(Product.is_active.is_(True))
    if category_id:
        query = query.where(Product.category_id == category_id)
    if featured is not None:
        query = query.where(Product.is_featured.is_(featured))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
                Product.artikul.ilike(pattern),
                Product.catalog_number.ilike(pattern),
            )
        )

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar_one()
    result = await db.execute(
        query.options(selectinload(Product.category))
        .order_by(Product.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    products = [ProductResponse.model_validate(p) for p in result.scalars().all()]
    return PaginatedResponse[ProductResponse](
        data=products, pagination=Pagination.build(page, limit, total)
    )


@router.get("/search", response_model=ApiResponse[list[ProductResponse]])
async def search_products(
    q: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """Quick search ranked by where the term matched.

    Name matches rank first, then sku, artikul and catalog number; ties go
    to featured and then newer products.
    """
    if not q or not q.strip():
        return ApiResponse[list[ProductResponse]](data=[])

    pattern = f"%{q.strip()}%"
    rank = case(
        (Product.name.ilike(pattern), 1),
        (Product.sku.ilike(pattern), 2),
        (Product.artikul.ilike(pattern), 3),
        (Product.catalog_number.ilike(pattern), 4),
        else_=5,
    )
    result = await db.execute(
        select(Product)
        .outerjoin(Category, Product.category_id == Category.id)
        .where(
            Product.is_active.is_(True),
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
                Product.artikul.ilike(pattern),
                Product.catalog_number.ilike(pattern),
                Category.name.ilike(pattern),
            ),
        )
        .options(selectinload(Product.category))
        .order_by(rank, Product.is_featured.desc(), Product.created_at.desc())
        .limit(SEARCH_LIMIT)
    )
    products = [ProductResponse.model_validate(p) for p in result.scalars().all()]
    return ApiResponse[list[ProductResponse]](data=products)


@router.get("/batch", response_model=ApiResponse[list[ProductResponse]])
async def batch_products(
    ids: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """Fetch products by a comma-separated id list, in the order given.

    Inactive products are included so saved lists still resolve.
    """
    wanted = [i.strip() for i in (ids or "").split(",") if i.strip()][:BATCH_LIMIT]
    if not wanted:
        return ApiResponse[list[ProductResponse]](data=[])

    result = await db.execute(
        select(Product)
        .where(Product.id.in_(wanted))
        .options(selectinload(Product.category))
    )
    found = {p.id: p for p in result.scalars().all()}
    products = [
        ProductResponse.model_validate(found[i]) for i in dict.fromkeys(wanted) if i in found
    ]
    return ApiResponse[list[ProductResponse]](data=products)


@router.get("/similar/{product_id}", response_model=ApiResponse[list[ProductResponse]])
async def similar_products(product_id: str, db: AsyncSession = Depends(get_async_db)):
    """Recommendations for a product page.

    Active products from the same category come first. When there are fewer
    than ``SIMILAR_MIN`` of them, products whose name, artikul or catalog
    number contains the first word of this product's name fill the list.
    """
    product = await db.get(Product, product_id)
    if product is None:
        raise errors.NotFoundError.for_resource("Product")

    base = (
        select(Product)
        .where(Product.is_active.is_(True), Product.id != product_id)
        .options(selectinload(Product.category))
        .order_by(Product.created_at.desc())
    )
    similar: list[Product] = []
    if product.category_id:
        result = await db.execute(
            base.where(Product.category_id == product.category_id).limit(SIMILAR_LIMIT)
        )
        similar = list(result.scalars().all())

    words = product.name.split()
    first_word = words[0] if words else ""
    if len(similar) < SIMILAR_MIN and first_word:
        pattern = f"%{first_word}%"
        result = await db.execute(
            base.where(
                Product.id.not_in([p.id for p in similar]),
                or_(
                    Product.name.ilike(pattern),
                    Product.artikul.ilike(pattern),
                    Product.catalog_number.ilike(pattern),
                ),
            ).limit(SIMILAR_LIMIT - len(similar))
        )
        similar.extend(result.scalars().all())

    return ApiResponse[list[ProductResponse]](
        data=[ProductResponse.model_validate(p) for p in similar]
    )


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    payload: ProductCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await _check_category(db, payload.category_id)
    product = Product(**payload.model_dump())
    db.add(product)
    await db.commit()
    logger.info("Created product %s (%s)", product.name, product.id)
    product = await _load_product(db, product.id)
    return ApiResponse[ProductResponse](
        data=ProductResponse.model_validate(product), message="Product created"
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(product_id: str, db: AsyncSession = Depends(get_async_db)):
    product = await _load_product(db, product_id)
    return ApiResponse[ProductResponse](data=ProductResponse.model_validate(product))


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await _load_product(db, product_id)
    changes = payload.model_dump(exclude_unset=True)
    if "category_id" in changes:
        await _check_category(db, changes["category_id"])

    price = changes.get("price", product.price)
    sale_price = changes.get("sale_price", product.sale_price)
    if sale_price is not None and price is not None and sale_price > price:
        raise errors.ValidationError("salePrice cannot exceed price")

    for field, value in changes.items():
        setattr(product, field, value)
    await db.commit()

    product = await _load_product(db, product_id)
    return ApiResponse[ProductResponse](
        data=ProductResponse.model_validate(product), message="Product updated"
    )


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    product_id: str,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Deactivate a product; order history keeps referring to it."""
    product = await db.get(Product, product_id)
    if product is None:
        raise errors.NotFoundError.for_resource("Product")
    product.is_active = False
    await db.commit()
    return ApiResponse[None](message="Product deleted")
