"""Product domain schemas - Pydantic models for validation"""

import json
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...constants import MAX_STOCK_PER_SIZE, SIZES, Size
from ...services.image_ingestion import normalize_image_payloads


def _parse_size(key: Any) -> Size:
    if isinstance(key, bool):
        raise ValueError(f"Invalid size: {key!r}")
    if isinstance(key, int):
        size = key
    elif isinstance(key, str) and key.strip().isdigit():
        size = int(key.strip())
    else:
        raise ValueError(f"Invalid size: {key!r}")

    if size not in SIZES:
        raise ValueError(f"Invalid size: {key!r}")
    return Size(size)


def _parse_count(size: Size, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid quantity for size {int(size)}: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Invalid quantity for size {int(size)}: {value!r}")

    count = int(value)
    if count < 0 or count > MAX_STOCK_PER_SIZE:
        raise ValueError(
            f"Quantity for size {int(size)} must be between 0 and {MAX_STOCK_PER_SIZE}"
        )
    return count


def parse_stock(value: Union[str, dict, None]) -> dict[Size, int]:
    """
    Parse a stock payload into {size: count}.

    Accepts a JSON-encoded object or a dict. Keys must be sizes from SIZES,
    values whole numbers between 0 and MAX_STOCK_PER_SIZE. Two keys naming
    the same size (e.g. "40" and " 40") are rejected.

    Raises:
        ValueError: If the payload or any entry is invalid
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError("Please enter a valid size and quantity") from e

    if not isinstance(value, dict):
        raise ValueError("Please enter a valid size and quantity")

    stock: dict[Size, int] = {}
    for key, count in value.items():
        size = _parse_size(key)
        if size in stock:
            raise ValueError(f"Duplicate size: {int(size)}")
        stock[size] = _parse_count(size, count)
    return stock


def stock_to_storage(stock: dict[Size, int]) -> dict[str, int]:
    """JSON columns need string keys"""
    return {str(int(size)): count for size, count in sorted(stock.items())}


class ProductCreate(BaseModel):
    """Schema for creating a product (multipart form fields)"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, lt=100_000_000)
    info: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    stock: dict[Size, int] = Field(..., alias="Stock")
    images: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Please Enter product name")
        return v

    @field_validator("stock", mode="before")
    @classmethod
    def validate_stock(cls, v):
        return parse_stock(v)

    @field_validator("images", mode="before")
    @classmethod
    def single_image(cls, v):
        return normalize_image_payloads(v)


class ProductUpdate(BaseModel):
    """Schema for updating a product; omitted fields keep their value"""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0, lt=100_000_000)
    info: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    stock: Optional[dict[Size, int]] = Field(None, alias="Stock")
    images: Optional[list[str]] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Please Enter product name")
        return v

    @field_validator("stock", mode="before")
    @classmethod
    def validate_stock(cls, v):
        if v is None or v == "":
            return None
        return parse_stock(v)

    @field_validator("images", mode="before")
    @classmethod
    def single_image(cls, v):
        return normalize_image_payloads(v) or None


class StockUpdate(BaseModel):
    """Schema for replacing a product's stock"""

    model_config = ConfigDict(populate_by_name=True)

    stock: dict[Size, int] = Field(..., alias="Stock")

    @field_validator("stock", mode="before")
    @classmethod
    def validate_stock(cls, v):
        return parse_stock(v)


class ProductImageResponse(BaseModel):
    remote_id: str
    url: str


class ProductResponse(BaseModel):
    """Schema for product response"""

    id: int
    name: str
    description: str
    price: float
    info: str
    category: str
    ratings: float
    images: list[ProductImageResponse]
    Stock: dict[str, int]
    numOfReviews: int
    user_id: int
    created_at: Optional[datetime] = None


class ProductEnvelope(BaseModel):
    success: bool = True
    product: ProductResponse


class ProductListResponse(BaseModel):
    success: bool = True
    products: list[ProductResponse]
    productsCount: int
    resultPerPage: int
    filteredProductCount: int


class AdminProductListResponse(BaseModel):
    success: bool = True
    products: list[ProductResponse]


class SizesResponse(BaseModel):
    success: bool = True
    sizes: list[int]
