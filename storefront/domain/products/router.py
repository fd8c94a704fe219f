"""Product router - FastAPI endpoints for product operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import Product, User
from ...schemas import MessageResponse
from ...utils.media_storage import get_media_storage
from .repository import ProductQuery
from .schemas import (
    AdminProductListResponse,
    ProductCreate,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    SizesResponse,
    StockUpdate,
)
from .service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency injection for ProductService (read paths, no media host)"""
    return ProductService(db)


def get_product_media_service(
    db: Session = Depends(get_db), storage=Depends(get_media_storage)
) -> ProductService:
    """Dependency injection for ProductService on paths that touch images"""
    return ProductService(db, storage)


def to_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        info=product.info,
        category=product.category,
        ratings=product.ratings or 0,
        images=product.images or [],
        Stock=product.stock or {},
        numOfReviews=product.num_of_reviews or 0,
        user_id=product.user_id,
        created_at=product.created_at,
    )


def _validate(schema, **fields):
    try:
        return schema(**fields)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


def product_create_form(
    name: str = Form(...),
    description: str = Form(...),
    price: float = Form(...),
    info: str = Form(...),
    category: str = Form(...),
    Stock: str = Form(...),
    images: list[str] = Form(default=[]),
) -> ProductCreate:
    """Parse the multipart product form once, at the request boundary"""
    return _validate(
        ProductCreate,
        name=name,
        description=description,
        price=price,
        info=info,
        category=category,
        Stock=Stock,
        images=images,
    )


def product_update_form(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    info: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    Stock: Optional[str] = Form(None),
    images: Optional[list[str]] = Form(None),
) -> ProductUpdate:
    return _validate(
        ProductUpdate,
        name=name,
        description=description,
        price=price,
        info=info,
        category=category,
        Stock=Stock,
        images=images,
    )


def product_query(
    keyword: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    price_gte: Optional[float] = Query(None, alias="price[gte]"),
    price_lte: Optional[float] = Query(None, alias="price[lte]"),
    ratings_gte: Optional[float] = Query(None, alias="ratings[gte]"),
    ratings_lte: Optional[float] = Query(None, alias="ratings[lte]"),
    page: int = Query(1, ge=1),
) -> ProductQuery:
    return ProductQuery(
        keyword=keyword,
        category=category,
        price_gte=price_gte,
        price_lte=price_lte,
        ratings_gte=ratings_gte,
        ratings_lte=ratings_lte,
        page=page,
    )


# ============================================================================
# PUBLIC
# ============================================================================


@router.get("", response_model=ProductListResponse)
async def get_products(
    params: ProductQuery = Depends(product_query),
    service: ProductService = Depends(get_product_service),
):
    """Search, filter and page through products"""
    result = service.list_products(params)
    return ProductListResponse(
        products=[to_product_response(p) for p in result["products"]],
        productsCount=result["productsCount"],
        resultPerPage=result["resultPerPage"],
        filteredProductCount=result["filteredProductCount"],
    )


@router.get("/sizes", response_model=SizesResponse)
async def get_sizes():
    """Sizes a product can be stocked in"""
    return SizesResponse(sizes=ProductService.get_sizes())


@router.get("/admin", response_model=AdminProductListResponse)
async def get_products_admin(
    _admin: User = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    """Every product, unfiltered"""
    products = service.list_all_products()
    return AdminProductListResponse(products=[to_product_response(p) for p in products])


@router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
):
    product = service.get_product(product_id)
    return ProductEnvelope(product=to_product_response(product))


# ============================================================================
# ADMIN
# ============================================================================


@router.post("", response_model=ProductEnvelope, status_code=201)
async def create_product(
    data: ProductCreate = Depends(product_create_form),
    admin: User = Depends(require_admin),
    service: ProductService = Depends(get_product_media_service),
):
    """Create a product; inline images are uploaded to the media host"""
    product = await service.create_product(data, admin)
    return ProductEnvelope(product=to_product_response(product))


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: int,
    data: ProductUpdate = Depends(product_update_form),
    _admin: User = Depends(require_admin),
    service: ProductService = Depends(get_product_media_service),
):
    """Update a product; supplying images replaces the stored ones"""
    product = await service.update_product(product_id, data)
    return ProductEnvelope(product=to_product_response(product))


@router.put("/{product_id}/stock", response_model=ProductEnvelope)
async def update_product_stock(
    product_id: int,
    data: StockUpdate,
    _admin: User = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    product = service.update_stock(product_id, data)
    return ProductEnvelope(product=to_product_response(product))


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    _admin: User = Depends(require_admin),
    service: ProductService = Depends(get_product_media_service),
):
    """Delete a product along with its images on the media host"""
    return await service.delete_product(product_id)
