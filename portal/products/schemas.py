"""
This module defines the Pydantic models used for product management.
These models are used for request and response validation and serialization.
"""

import math
from typing import Optional, List

from pydantic import AnyHttpUrl, BaseModel, StrictFloat, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from portal.common.schemas import TimestampMixin

PRICE_FIELDS = ("retailPrice", "bulkPrice")
TEXT_FIELDS = ("name", "itemCode", "imageUrl")

_url_adapter = TypeAdapter(AnyHttpUrl)


def _required_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


def _absolute_url(value: str) -> str:
    value = value.strip()
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Image URL must be a valid URL")
    # Keep the text as entered; AnyHttpUrl normalizes (e.g. adds a trailing slash)
    return value


def _finite_price(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    if not math.isfinite(value):
        raise ValueError("Price must be a finite number")
    return float(value)


class ProductFields(BaseModel):
    """
    Shared validation for the editable product fields.
    Prices only accept JSON numbers or null; numeric strings are rejected.
    """
    name: Optional[str] = None
    itemCode: Optional[str] = None
    imageUrl: Optional[str] = None
    retailPrice: Optional[StrictFloat] = None
    bulkPrice: Optional[StrictFloat] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        return None if value is None else _required_text(value, "Name")

    @field_validator('itemCode')
    @classmethod
    def validate_item_code(cls, value):
        return None if value is None else _required_text(value, "Item code")

    @field_validator('imageUrl')
    @classmethod
    def validate_image_url(cls, value):
        return None if value is None else _absolute_url(value)

    @field_validator('retailPrice', 'bulkPrice')
    @classmethod
    def validate_price(cls, value):
        return _finite_price(value)


class ProductCreate(ProductFields):
    """
    Represents the request data for creating a new product.
    Prices are optional and start absent.
    """
    name: str
    itemCode: str
    imageUrl: str


class ProductUpdate(ProductFields):
    """
    Represents the request data for a partial product update.
    Only the fields present in the request body are applied; prices may be
    sent as null to clear them, the text fields may not.
    """

    @field_validator('name', 'itemCode', 'imageUrl', mode='before')
    @classmethod
    def reject_null_text(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def changes(self) -> dict:
        """The fields the client actually sent, explicit nulls included."""
        return self.model_dump(exclude_unset=True)


class ProductInDB(BaseModel, TimestampMixin):
    """
    Represents a product as stored in the database, including its document id.
    """
    id: str
    name: str
    itemCode: str
    imageUrl: str
    retailPrice: Optional[float] = None
    bulkPrice: Optional[float] = None


class ProgressSnapshot(BaseModel):
    """
    Count of done products over all products, with a whole-number percentage.
    """
    completed: int
    total: int
    percent: int


class ProductsData(BaseModel):
    """
    Represents the full product list along with its pricing progress.
    """
    products: List[ProductInDB]
    progress: ProgressSnapshot
