"""SKU service - orchestration for SKU lifecycle operations.

Creation: guard UPC, generate code, persist. Updates re-check the UPC only
when it changes. Delete is a soft delete that flips status to DISCONTINUED.
"""

from typing import List, Optional
from uuid import UUID

from ..domain.sku import (
    DuplicateKeyError,
    Page,
    PageRequest,
    SkuCodeGenerator,
    SkuNotFoundError,
    SkuRepositoryPort,
    SkuSearchCriteria,
    SkuStatus,
    UniquenessGuard,
    build_filter_predicate,
    build_search_predicate,
    validate_transition,
)
from ..models.sku import Sku
from ..observability.logging_config import get_logger
from ..observability.metrics import (
    duplicate_rejections_total,
    lookup_misses_total,
    sku_batch_size,
    sku_updates_total,
    skus_created_total,
    skus_discontinued_total,
)
from ..observability.tracing import get_tracer
from .schemas import SkuRequest, SkuUpdateRequest

logger = get_logger(__name__)

# Fields copied verbatim from a request onto the record
MUTABLE_FIELDS = (
    "upc",
    "name",
    "description",
    "brand",
    "category",
    "subcategory",
    "price",
    "cost",
    "unit_of_measure",
    "quantity_per_unit",
    "weight",
    "tags",
    "attributes",
)


class SkuService:
    """Service for SKU operations."""

    def __init__(self, repository: SkuRepositoryPort, code_generator: SkuCodeGenerator, tracer=None):
        self.repository = repository
        self.code_generator = code_generator
        self.uniqueness = UniquenessGuard(repository)
        self.tracer = tracer or get_tracer()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_sku(self, request: SkuRequest) -> Sku:
        """Create a single SKU with a freshly generated code.

        Args:
            request: Validated creation payload

        Returns:
            The persisted SKU, status ACTIVE

        Raises:
            DuplicateKeyError: UPC already exists (or a code collision)
        """
        with self.tracer.start_as_current_span("sku.create") as span:
            span.set_attribute("sku.category", request.category)
            if request.brand:
                span.set_attribute("sku.brand", request.brand)

            self._guarded(self.uniqueness.validate_upc, request.upc)

            sku = self._build(request)
            sku.sku_code = self.code_generator.next_code(request.category, self.repository)
            span.add_event("sku.code.generated", {"sku.code": sku.sku_code})

            sku = self._persist([sku])[0]
            span.set_attribute("sku.code", sku.sku_code)
            span.set_attribute("sku.id", str(sku.id))
            span.add_event("sku.persisted")

        skus_created_total.labels(category=sku.category).inc()
        logger.info(
            f"Created SKU {sku.sku_code}",
            extra={"sku_code": sku.sku_code, "sku_id": str(sku.id)},
        )
        return sku

    def create_skus_batch(self, requests: List[SkuRequest]) -> List[Sku]:
        """Create several SKUs in one transaction.

        Every UPC is validated (within the batch and against storage) before
        any code is generated. The first collision aborts the whole batch and
        nothing is persisted. Codes already drawn for an aborted batch are
        not reused.

        Raises:
            DuplicateKeyError: First UPC collision found
        """
        with self.tracer.start_as_current_span("sku.batch.create") as span:
            span.set_attribute("batch.size", len(requests))

            self._guarded(self.uniqueness.validate_batch_upcs, [r.upc for r in requests])
            span.add_event("batch.validated")

            skus = []
            for request in requests:
                sku = self._build(request)
                sku.sku_code = self.code_generator.next_code(request.category, self.repository)
                skus.append(sku)

            skus = self._persist(skus)
            span.add_event("sku.persisted", {"batch.size": len(skus)})

        sku_batch_size.observe(len(skus))
        for sku in skus:
            skus_created_total.labels(category=sku.category).inc()
        logger.info(
            f"Created batch of {len(skus)} SKUs",
            extra={"sku_codes": [sku.sku_code for sku in skus]},
        )
        return skus

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_sku_by_id(self, sku_id: UUID) -> Sku:
        return self._found(self.repository.find_by_id(sku_id), "id", sku_id)

    def get_sku_by_code(self, sku_code: str) -> Sku:
        return self._found(self.repository.find_by_sku_code(sku_code), "sku_code", sku_code)

    def get_sku_by_upc(self, upc: str) -> Sku:
        return self._found(self.repository.find_by_upc(upc), "upc", upc)

    def list_skus(
        self,
        page_request: PageRequest,
        category: Optional[str] = None,
        status: Optional[str] = None,
        brand: Optional[str] = None,
        min_price=None,
        max_price=None,
    ) -> Page:
        """List SKUs matching exact filters and a price range."""
        predicate = build_filter_predicate(
            category=category,
            status=status,
            brand=brand,
            min_price=min_price,
            max_price=max_price,
        )
        return self.repository.find_page(predicate, page_request)

    def search_skus(self, criteria: SkuSearchCriteria, page_request: PageRequest) -> Page:
        """Search SKUs; every supplied criterion must match."""
        return self.repository.find_page(build_search_predicate(criteria), page_request)

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update_sku(self, sku_id: UUID, request: SkuRequest) -> Sku:
        """Replace every mutable field of a SKU.

        id, sku_code, status and created_at are kept. The UPC is only
        re-checked when it differs from the stored one.

        Raises:
            SkuNotFoundError: No SKU with this id
            DuplicateKeyError: New UPC belongs to another SKU
        """
        with self.tracer.start_as_current_span("sku.update") as span:
            span.set_attribute("sku.id", str(sku_id))
            sku = self.get_sku_by_id(sku_id)
            span.set_attribute("sku.code", sku.sku_code)

            self._guarded(self.uniqueness.validate_upc_change, request.upc, sku.upc)

            values = request.model_dump()
            for field in MUTABLE_FIELDS:
                setattr(sku, field, values[field])
            sku.dimensions = values["dimensions"]

            sku = self._persist([sku])[0]
            span.add_event("sku.persisted")

        sku_updates_total.labels(kind="full").inc()
        logger.info(
            f"Updated SKU {sku.sku_code}",
            extra={"sku_code": sku.sku_code, "sku_id": str(sku.id)},
        )
        return sku

    def partial_update_sku(self, sku_id: UUID, request: SkuUpdateRequest) -> Sku:
        """Apply only the fields present (and non-null) in the request.

        Supplied dimension components are merged into the stored ones.
        """
        with self.tracer.start_as_current_span("sku.partial.update") as span:
            span.set_attribute("sku.id", str(sku_id))
            sku = self.get_sku_by_id(sku_id)
            span.set_attribute("sku.code", sku.sku_code)

            changes = request.model_dump(exclude_unset=True, exclude_none=True)
            span.set_attribute("sku.fields", ",".join(sorted(changes)))

            if "upc" in changes:
                self._guarded(self.uniqueness.validate_upc_change, changes["upc"], sku.upc)

            dimensions = changes.pop("dimensions", None)
            for field, value in changes.items():
                setattr(sku, field, value)
            if dimensions:
                merged = dict(sku.dimensions or {})
                merged.update(dimensions)
                sku.dimensions = merged

            sku = self._persist([sku])[0]
            span.add_event("sku.persisted")

        sku_updates_total.labels(kind="partial").inc()
        logger.info(
            f"Partially updated SKU {sku.sku_code}",
            extra={"sku_code": sku.sku_code, "sku_id": str(sku.id)},
        )
        return sku

    def delete_sku(self, sku_id: UUID) -> None:
        """Soft delete: mark the SKU DISCONTINUED, leave every other field alone.

        Deleting an already discontinued SKU is a no-op.
        """
        with self.tracer.start_as_current_span("sku.delete") as span:
            span.set_attribute("sku.id", str(sku_id))
            sku = self.get_sku_by_id(sku_id)
            span.set_attribute("sku.code", sku.sku_code)

            if sku.status == SkuStatus.DISCONTINUED.value:
                span.add_event("sku.already_discontinued")
                logger.info(f"SKU {sku.sku_code} already discontinued")
                return

            validate_transition(SkuStatus(sku.status), SkuStatus.DISCONTINUED)
            sku.status = SkuStatus.DISCONTINUED.value
            self._persist([sku])
            span.add_event("sku.persisted")

        skus_discontinued_total.inc()
        logger.info(
            f"Discontinued SKU {sku.sku_code}",
            extra={"sku_code": sku.sku_code, "sku_id": str(sku.id)},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build(request: SkuRequest) -> Sku:
        values = request.model_dump()
        sku = Sku(status=SkuStatus.ACTIVE.value, **{f: values[f] for f in MUTABLE_FIELDS})
        sku.dimensions = values["dimensions"]
        return sku

    @staticmethod
    def _guarded(check, *args) -> None:
        """Run a uniqueness check, counting rejections."""
        try:
            check(*args)
        except DuplicateKeyError as e:
            duplicate_rejections_total.labels(field=e.field).inc()
            logger.info(f"Rejected write: {e}")
            raise

    def _persist(self, skus: List[Sku]) -> List[Sku]:
        """Save one or many SKUs in a single transaction.

        A unique violation on sku_code means another writer issued the same
        sequence; the affected counters are marked stale so the next request
        reseeds from storage.
        """
        try:
            if len(skus) == 1:
                return [self.repository.save(skus[0])]
            return self.repository.save_all(skus)
        except DuplicateKeyError as e:
            duplicate_rejections_total.labels(field=e.field).inc()
            if e.field == "sku_code":
                for category in {sku.category for sku in skus}:
                    self.code_generator.invalidate(category)
                logger.warning(f"SKU code collision, counters reset: {e}")
            raise

    @staticmethod
    def _found(sku: Optional[Sku], key: str, value) -> Sku:
        if sku is None:
            lookup_misses_total.labels(key=key).inc()
            raise SkuNotFoundError(key, value)
        return sku
