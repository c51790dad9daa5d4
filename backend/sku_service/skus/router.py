"""SKU API endpoints"""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ..config import settings
from ..dependencies import get_sku_service
from ..domain.sku import CATEGORY_CODES, Page, PageRequest, SkuSearchCriteria, SortOrder, parse_sort
from .schemas import (
    BatchSkuRequest,
    CategoryResponse,
    SkuListResponse,
    SkuRequest,
    SkuResponse,
    SkuUpdateRequest,
)
from .service import SkuService

router = APIRouter(prefix="/skus", tags=["SKU Management"])

LIST_DEFAULT_SORT = SortOrder(field="created_at", descending=True)
SEARCH_DEFAULT_SORT = SortOrder(field="name")


def _page_request(page: int, per_page: int, sort: Optional[List[str]], default: SortOrder) -> PageRequest:
    return PageRequest(page=page, per_page=per_page, sort=parse_sort(sort, default))


def _to_list_response(page: Page) -> SkuListResponse:
    return SkuListResponse(
        items=[SkuResponse.model_validate(sku) for sku in page.items],
        total=page.total,
        page=page.page,
        per_page=page.per_page,
        total_pages=page.total_pages,
    )


# ============================================================================
# Create
# ============================================================================

@router.post("", response_model=SkuResponse, status_code=status.HTTP_201_CREATED)
def create_sku(
    sku_request: SkuRequest,
    service: SkuService = Depends(get_sku_service),
):
    """
    Create a new SKU. The SKU code is generated from the category.

    Raises:
        409: UPC already exists
    """
    return SkuResponse.model_validate(service.create_sku(sku_request))


@router.post("/batch", response_model=List[SkuResponse], status_code=status.HTTP_201_CREATED)
def create_skus_batch(
    batch: BatchSkuRequest,
    service: SkuService = Depends(get_sku_service),
):
    """
    Create up to MAX_BATCH_SIZE SKUs in one transaction.

    Either every SKU is created or none is.
    """
    skus = service.create_skus_batch(batch.skus)
    return [SkuResponse.model_validate(sku) for sku in skus]


# ============================================================================
# Read
# ============================================================================

@router.get("", response_model=SkuListResponse)
def list_skus(
    category: Optional[str] = Query(None, description="Filter by category code"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    brand: Optional[str] = Query(None, description="Filter by brand"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[List[str]] = Query(None, description="field[,asc|desc]; may repeat"),
    service: SkuService = Depends(get_sku_service),
):
    """
    List SKUs with optional filters, newest first by default.
    """
    page_request = _page_request(page, per_page, sort, LIST_DEFAULT_SORT)
    result = service.list_skus(
        page_request,
        category=category,
        status=status_filter,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
    )
    return _to_list_response(result)


@router.get("/search", response_model=SkuListResponse)
def search_skus(
    query: Optional[str] = Query(None, description="Text matched against name and description"),
    category: Optional[str] = Query(None),
    subcategory: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    tags: Optional[List[str]] = Query(None, description="Match any tag; repeat or comma-separate"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[List[str]] = Query(None),
    service: SkuService = Depends(get_sku_service),
):
    """
    Search SKUs. Every supplied criterion must match; tags match if any overlap.
    """
    if tags:
        tags = [tag.strip() for value in tags for tag in value.split(",") if tag.strip()]

    criteria = SkuSearchCriteria(
        query=query,
        category=category,
        subcategory=subcategory,
        brand=brand,
        status=status_filter,
        min_price=min_price,
        max_price=max_price,
        tags=tags or None,
    )
    page_request = _page_request(page, per_page, sort, SEARCH_DEFAULT_SORT)
    return _to_list_response(service.search_skus(criteria, page_request))


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories():
    """Known category codes and their names."""
    return [CategoryResponse(code=code, name=name) for code, name in CATEGORY_CODES.items()]


@router.get("/code/{sku_code}", response_model=SkuResponse)
def get_sku_by_code(sku_code: str, service: SkuService = Depends(get_sku_service)):
    return SkuResponse.model_validate(service.get_sku_by_code(sku_code))


@router.get("/upc/{upc}", response_model=SkuResponse)
def get_sku_by_upc(upc: str, service: SkuService = Depends(get_sku_service)):
    return SkuResponse.model_validate(service.get_sku_by_upc(upc))


@router.get("/{sku_id}", response_model=SkuResponse)
def get_sku(sku_id: UUID, service: SkuService = Depends(get_sku_service)):
    """
    Get a SKU by ID. Discontinued SKUs are returned as well.
    """
    return SkuResponse.model_validate(service.get_sku_by_id(sku_id))


# ============================================================================
# Update / delete
# ============================================================================

@router.put("/{sku_id}", response_model=SkuResponse)
def update_sku(
    sku_id: UUID,
    sku_request: SkuRequest,
    service: SkuService = Depends(get_sku_service),
):
    """
    Replace all mutable fields of a SKU. The SKU code never changes.

    Raises:
        404: SKU not found
        409: UPC belongs to another SKU
    """
    return SkuResponse.model_validate(service.update_sku(sku_id, sku_request))


@router.patch("/{sku_id}", response_model=SkuResponse)
def partial_update_sku(
    sku_id: UUID,
    sku_request: SkuUpdateRequest,
    service: SkuService = Depends(get_sku_service),
):
    """
    Update only the supplied fields of a SKU.
    """
    return SkuResponse.model_validate(service.partial_update_sku(sku_id, sku_request))


@router.delete("/{sku_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sku(sku_id: UUID, service: SkuService = Depends(get_sku_service)):
    """
    Soft delete a SKU by marking it DISCONTINUED.
    """
    service.delete_sku(sku_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
