"""FastAPI dependencies for SKU request handling.

The SequenceCounters instance lives on ``app.state`` so every request of one
application shares the same counters, while each request gets its own
session, repository and service.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .domain.sku import SequenceCounters, SkuCodeGenerator
from .infrastructure.repositories import SkuRepository
from .skus.service import SkuService


def get_sequence_counters(request: Request) -> SequenceCounters:
    """Application-wide sequence counters created at startup."""
    return request.app.state.sequence_counters


def get_sku_service(
    db: Session = Depends(get_db),
    counters: SequenceCounters = Depends(get_sequence_counters),
) -> SkuService:
    """Build a SkuService bound to this request's session.

    Args:
        db: Database session
        counters: Shared sequence counters

    Returns:
        SkuService ready for one request
    """
    return SkuService(
        repository=SkuRepository(db),
        code_generator=SkuCodeGenerator(counters, retailer_prefix=settings.RETAILER_PREFIX),
    )
