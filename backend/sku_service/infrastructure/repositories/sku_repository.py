"""SKU repository for database operations"""

import logging
import re
from typing import Optional
from uuid import UUID

from sqlalchemy import ColumnElement, Integer, cast, exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...domain.sku.exceptions import DuplicateKeyError
from ...domain.sku.models import Page, PageRequest
from ...domain.sku.ports import SkuRepositoryPort
from ...models.sku import Sku

logger = logging.getLogger(__name__)

# Unique indexes on skus and the natural key each one guards
UNIQUE_INDEX_FIELDS = {
    "ix_skus_sku_code": "sku_code",
    "ix_skus_upc": "upc",
}
UNIQUE_COLUMN_FIELDS = {
    "skus.sku_code": "sku_code",
    "skus.upc": "upc",
}

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<column>[\w.]+)")


class SkuRepository(SkuRepositoryPort):
    """SQLAlchemy implementation of SkuRepositoryPort.

    Writes commit immediately; any failure rolls the whole transaction back,
    which is what gives batch creation its all-or-nothing behavior.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def find_max_sequence_by_prefix(self, prefix: str) -> int:
        # Codes are PREFIX-NNNNNNN; the sequence starts right after the dash.
        sequence = cast(func.substr(Sku.sku_code, len(prefix) + 2), Integer)
        stmt = select(func.coalesce(func.max(sequence), 0)).where(
            Sku.sku_code.like(f"{prefix}-%")
        )
        return int(self.db.execute(stmt).scalar_one())

    def exists_by_upc(self, upc: str) -> bool:
        return bool(self.db.execute(select(exists().where(Sku.upc == upc))).scalar())

    def exists_by_sku_code(self, sku_code: str) -> bool:
        return bool(self.db.execute(select(exists().where(Sku.sku_code == sku_code))).scalar())

    def save(self, sku: Sku) -> Sku:
        self.db.add(sku)
        try:
            self.db.commit()
        except IntegrityError as e:
            duplicate = self._translate_integrity_error(e, [sku])
            self.db.rollback()
            if duplicate is None:
                raise
            raise duplicate from e
        self.db.refresh(sku)
        return sku

    def save_all(self, skus: list[Sku]) -> list[Sku]:
        self.db.add_all(skus)
        try:
            self.db.commit()
        except IntegrityError as e:
            duplicate = self._translate_integrity_error(e, skus)
            self.db.rollback()
            if duplicate is None:
                raise
            raise duplicate from e
        for sku in skus:
            self.db.refresh(sku)
        return skus

    def find_by_id(self, sku_id: UUID) -> Optional[Sku]:
        return self.db.get(Sku, sku_id)

    def find_by_sku_code(self, sku_code: str) -> Optional[Sku]:
        stmt = select(Sku).where(Sku.sku_code == sku_code)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_by_upc(self, upc: str) -> Optional[Sku]:
        stmt = select(Sku).where(Sku.upc == upc)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_page(self, predicate: ColumnElement[bool], page_request: PageRequest) -> Page:
        stmt = select(Sku).where(predicate)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = self.db.execute(count_stmt).scalar_one()

        order_by = [
            getattr(Sku, order.field).desc() if order.descending else getattr(Sku, order.field).asc()
            for order in page_request.sort
        ]
        # Stable paging when sort keys tie
        order_by.append(Sku.id.asc())

        stmt = stmt.order_by(*order_by).offset(page_request.offset).limit(page_request.per_page)
        items = list(self.db.execute(stmt).scalars().all())

        return Page(
            items=items,
            total=total,
            page=page_request.page,
            per_page=page_request.per_page,
        )

    @staticmethod
    def _translate_integrity_error(
        error: IntegrityError, skus: list[Sku]
    ) -> Optional[DuplicateKeyError]:
        """Map a unique violation onto DuplicateKeyError.

        PostgreSQL (psycopg2) names the violated index in ``diag``; SQLite
        only reports ``UNIQUE constraint failed: skus.<column>``. Returns None
        for any other integrity failure so the caller re-raises it untouched.
        """
        field = SkuRepository._duplicate_field(error)
        if field is None:
            return None

        logger.warning(f"Unique violation on {field}: {error.orig}")
        single = skus[0] if len(skus) == 1 else None
        if field == "sku_code":
            return DuplicateKeyError.for_sku_code(single.sku_code if single else None)
        return DuplicateKeyError.for_upc(single.upc if single else None)

    @staticmethod
    def _duplicate_field(error: IntegrityError) -> Optional[str]:
        diag = getattr(error.orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None)
        if constraint_name is not None:
            return UNIQUE_INDEX_FIELDS.get(constraint_name)

        match = _SQLITE_UNIQUE.search(str(error.orig))
        if match is None:
            return None
        return UNIQUE_COLUMN_FIELDS.get(match.group("column"))
