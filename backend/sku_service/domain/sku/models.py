"""Domain value objects for the SKU core."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .exceptions import InvalidArgumentError


# Known merchandising categories. Codes outside this table are still
# accepted as long as they are three uppercase letters.
CATEGORY_CODES = {
    "LBR": "Lumber & Building Materials",
    "PLB": "Plumbing",
    "ELC": "Electrical",
    "HRD": "Hardware",
    "PNT": "Paint",
    "GAR": "Garden & Outdoor",
    "APL": "Appliances",
    "FLR": "Flooring",
    "KIT": "Kitchen & Bath",
    "TOL": "Tools",
}


class SkuSearchCriteria(BaseModel):
    """Optional search/filter fields. Omitted or blank fields impose no constraint."""
    query: Optional[str] = Field(None, description="Case-insensitive match on name or description")
    category: Optional[str] = None
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    status: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    tags: Optional[list[str]] = Field(None, description="Matches SKUs carrying any of these tags")


# Columns a client may sort on, mapped to Sku attribute names
SORTABLE_FIELDS = {
    "created_at",
    "updated_at",
    "name",
    "sku_code",
    "price",
    "category",
    "brand",
    "status",
}


@dataclass(frozen=True)
class SortOrder:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class PageRequest:
    """1-based page request with an ordered list of sort keys."""
    page: int = 1
    per_page: int = 20
    sort: tuple[SortOrder, ...] = field(default_factory=tuple)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def parse_sort(values: Optional[list[str]], default: SortOrder) -> tuple[SortOrder, ...]:
    """Parse `field[,asc|desc]` sort parameters.

    Args:
        values: Raw query values, e.g. ["price,desc", "name"]
        default: Order used when no value is supplied

    Returns:
        Tuple of SortOrder in priority order

    Raises:
        InvalidArgumentError: Unknown field or direction
    """
    if not values:
        return (default,)

    orders = []
    for raw in values:
        parts = [p.strip() for p in raw.split(",")]
        name = parts[0]
        if name not in SORTABLE_FIELDS:
            raise InvalidArgumentError(
                f"Cannot sort by '{name}'. Sortable fields: {', '.join(sorted(SORTABLE_FIELDS))}"
            )
        direction = parts[1].lower() if len(parts) > 1 else "asc"
        if direction not in ("asc", "desc") or len(parts) > 2:
            raise InvalidArgumentError(f"Invalid sort direction in '{raw}'. Use asc or desc")
        orders.append(SortOrder(field=name, descending=direction == "desc"))
    return tuple(orders)


@dataclass
class Page:
    """One page of results plus the total match count."""
    items: list
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.per_page - 1) // self.per_page if self.total > 0 else 0
