"""UPC uniqueness guard.

The checks here are a fast-fail pre-check only. Check and insert are not
atomic, so two concurrent writers can both pass. The unique index on
``skus.upc`` is the real guarantee; the repository turns that constraint
violation into the same DuplicateKeyError raised here.
"""

from collections import Counter
from typing import Iterable, Optional

from .exceptions import DuplicateKeyError
from .ports import SkuRepositoryPort


class UniquenessGuard:
    """Rejects writes that would duplicate a UPC before they reach storage."""

    def __init__(self, repository: SkuRepositoryPort):
        self.repository = repository

    def validate_upc(self, upc: Optional[str]) -> None:
        """Fail if `upc` is set and any SKU (any status) already carries it.

        Raises:
            DuplicateKeyError: UPC already exists
        """
        if upc is not None and self.repository.exists_by_upc(upc):
            raise DuplicateKeyError.for_upc(upc)

    def validate_upc_change(self, new_upc: Optional[str], current_upc: Optional[str]) -> None:
        """Check a UPC on update, but only when it actually changes.

        Re-saving a SKU with its own UPC must never fail; clearing the UPC
        (None) never conflicts.
        """
        if new_upc is not None and new_upc != current_upc:
            self.validate_upc(new_upc)

    def validate_batch_upcs(self, upcs: Iterable[Optional[str]]) -> None:
        """Validate every UPC of a batch before anything is written.

        Duplicates inside the batch itself are rejected first, then each
        distinct UPC is checked against storage in request order.

        Raises:
            DuplicateKeyError: On the first collision found
        """
        present = [upc for upc in upcs if upc is not None]
        repeated = [upc for upc, count in Counter(present).items() if count > 1]
        if repeated:
            raise DuplicateKeyError(
                f"UPC {repeated[0]} appears more than once in the batch",
                field="upc",
                value=repeated[0],
            )
        for upc in present:
            self.validate_upc(upc)
