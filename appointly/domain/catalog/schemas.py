"""Catalog domain schemas - Pydantic models for validation"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_service_name

MAX_PRICE = Decimal("100000")
MAX_DESCRIPTION_LENGTH = 1000


def _validate_price(v: Decimal) -> Decimal:
    if v <= 0:
        raise ValueError("Price must be greater than zero.")
    if v > MAX_PRICE:
        raise ValueError(f"Price cannot exceed {MAX_PRICE}.")
    if v != v.quantize(Decimal("0.01")):
        raise ValueError("Price can have at most 2 decimal places.")
    return v


def _validate_duration(v: int) -> int:
    if v < 30 or v > 480:
        raise ValueError("Duration must be between 30 and 480 minutes.")
    return v


def _validate_description(v: Optional[str]) -> Optional[str]:
    if v and len(v) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters.")
    return v


# ============================================================================
# CATEGORIES
# ============================================================================


class CategoryCreate(BaseModel):
    """Schema for creating a category"""

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError("Category name is required.")
        if len(v) > 100:
            raise ValueError("Category name cannot exceed 100 characters.")
        return v


class CategoryUpdate(CategoryCreate):
    """Schema for updating a category"""

    isActive: bool = True


class CategoryResponse(BaseModel):
    id: str
    name: str
    isActive: bool
    serviceCount: int = 0


# ============================================================================
# SERVICES
# ============================================================================


class ServiceCreate(BaseModel):
    """Schema for creating a bookable service"""

    name: str
    description: Optional[str] = None
    price: Decimal
    duration: int
    staffId: str
    categoryId: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_service_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _validate_description(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _validate_price(v)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _validate_duration(v)


class ServiceUpdate(BaseModel):
    """Schema for updating a service (staff and category are fixed)"""

    name: str
    description: Optional[str] = None
    price: Decimal
    duration: int

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_service_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _validate_description(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _validate_price(v)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _validate_duration(v)


class CatalogServiceResponse(BaseModel):
    """A bookable service with its category and staff names"""

    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    duration: int
    staffId: str
    staffName: Optional[str] = None
    categoryId: str
    categoryName: Optional[str] = None
    isDeleted: bool = False

    class Config:
        from_attributes = True
