"""Pydantic schemas for the SKU API.

These schemas are the validation boundary: anything that reaches SkuService
has a well-formed category, a 12-digit UPC (if any), a non-blank name and a
batch of at most MAX_BATCH_SIZE items.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import settings

UPC_PATTERN = r"^\d{12}$"
CATEGORY_PATTERN = r"^[A-Z]{3}$"

# Documented units; other short codes are accepted as-is
UNITS_OF_MEASURE = ("EACH", "SQFT", "LINEAR_FT", "CUBIC_FT", "LB", "GAL")

Money = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]
Tag = Annotated[str, Field(max_length=50)]


class DimensionsSchema(BaseModel):
    """Product dimensions in inches"""
    model_config = ConfigDict(from_attributes=True)

    length: Optional[Decimal] = Field(None, gt=0, examples=[12.5])
    width: Optional[Decimal] = Field(None, gt=0, examples=[8.0])
    height: Optional[Decimal] = Field(None, gt=0, examples=[4.0])


class SkuRequest(BaseModel):
    """Payload for creating a SKU or fully replacing one"""
    upc: Optional[str] = Field(
        None,
        pattern=UPC_PATTERN,
        description="Universal Product Code (12 digits)",
        examples=["012345678901"],
    )
    name: str = Field(..., min_length=1, max_length=255, examples=["2x4x8 Pressure Treated Lumber"])
    description: Optional[str] = Field(None, max_length=4000)
    brand: Optional[str] = Field(None, max_length=100, examples=["WeatherShield"])
    category: str = Field(
        ...,
        pattern=CATEGORY_PATTERN,
        description="3-letter uppercase category code",
        examples=["LBR"],
    )
    subcategory: Optional[str] = Field(None, max_length=50, examples=["PRESSURE_TREATED"])
    price: Optional[Money] = Field(None, description="Retail price", examples=[8.99])
    cost: Optional[Money] = Field(None, description="Wholesale cost", examples=[5.50])
    unit_of_measure: Optional[str] = Field(
        None,
        max_length=20,
        description=f"One of {', '.join(UNITS_OF_MEASURE)}",
        examples=["EACH"],
    )
    quantity_per_unit: Optional[int] = Field(None, ge=1)
    weight: Optional[Decimal] = Field(None, gt=0, description="Weight in pounds")
    dimensions: Optional[DimensionsSchema] = None
    tags: Optional[List[Tag]] = Field(None, examples=[["outdoor", "treated", "lumber"]])
    attributes: Optional[Dict[str, str]] = Field(None, examples=[{"treatment_type": "ACQ"}])

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names that are only whitespace"""
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class SkuUpdateRequest(BaseModel):
    """Payload for a partial update; only supplied, non-null fields are applied"""
    upc: Optional[str] = Field(None, pattern=UPC_PATTERN)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=4000)
    brand: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, pattern=CATEGORY_PATTERN)
    subcategory: Optional[str] = Field(None, max_length=50)
    price: Optional[Money] = None
    cost: Optional[Money] = None
    unit_of_measure: Optional[str] = Field(None, max_length=20)
    quantity_per_unit: Optional[int] = Field(None, ge=1)
    weight: Optional[Decimal] = Field(None, gt=0)
    dimensions: Optional[DimensionsSchema] = None
    tags: Optional[List[Tag]] = None
    attributes: Optional[Dict[str, str]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be blank")
        return v.strip() if v is not None else None


class BatchSkuRequest(BaseModel):
    """Payload for batch creation"""
    skus: List[SkuRequest] = Field(..., min_length=1, max_length=settings.MAX_BATCH_SIZE)


class SkuResponse(BaseModel):
    """SKU response payload"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sku_code: str = Field(..., examples=["THD-LBR-0001234"])
    upc: Optional[str] = None
    name: str
    description: Optional[str] = None
    brand: Optional[str] = None
    category: str
    subcategory: Optional[str] = None
    price: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    unit_of_measure: Optional[str] = None
    quantity_per_unit: Optional[int] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[DimensionsSchema] = None
    status: str = Field(..., examples=["ACTIVE"])
    tags: Optional[List[str]] = None
    attributes: Optional[Dict[str, str]] = None
    created_at: datetime
    updated_at: datetime


class SkuListResponse(BaseModel):
    """One page of SKUs"""
    items: List[SkuResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class CategoryResponse(BaseModel):
    code: str
    name: str
