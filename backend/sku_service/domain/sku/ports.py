"""SkuRepositoryPort interface (hexagonal architecture).

The code generator, uniqueness guard and service only talk to storage through
this contract, so any backend that can answer these queries can host the core.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from sqlalchemy import ColumnElement

from ...models.sku import Sku
from .models import Page, PageRequest


class SkuRepositoryPort(ABC):
    """Persistence contract consumed by the SKU core."""

    @abstractmethod
    def find_max_sequence_by_prefix(self, prefix: str) -> int:
        """Highest sequence among codes matching `prefix-%`, or 0 if none."""
        pass

    @abstractmethod
    def exists_by_upc(self, upc: str) -> bool:
        pass

    @abstractmethod
    def exists_by_sku_code(self, sku_code: str) -> bool:
        pass

    @abstractmethod
    def save(self, sku: Sku) -> Sku:
        """Persist one SKU and commit.

        Raises:
            DuplicateKeyError: A unique constraint on upc or sku_code fired
        """
        pass

    @abstractmethod
    def save_all(self, skus: list[Sku]) -> list[Sku]:
        """Persist all SKUs in a single transaction; nothing is kept on failure.

        Raises:
            DuplicateKeyError: A unique constraint on upc or sku_code fired
        """
        pass

    @abstractmethod
    def find_by_id(self, sku_id: UUID) -> Optional[Sku]:
        pass

    @abstractmethod
    def find_by_sku_code(self, sku_code: str) -> Optional[Sku]:
        pass

    @abstractmethod
    def find_by_upc(self, upc: str) -> Optional[Sku]:
        pass

    @abstractmethod
    def find_page(self, predicate: ColumnElement[bool], page_request: PageRequest) -> Page:
        """Evaluate a composed predicate and return the requested page."""
        pass
