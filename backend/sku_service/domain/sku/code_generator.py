"""SKU code generation.

Codes look like ``THD-LBR-0000042``: retailer prefix, category, and a
7-digit zero-padded sequence that only ever grows per (retailer, category).

The sequence state lives in a ``SequenceCounters`` object created once per
application and handed to every ``SkuCodeGenerator``. The first time a prefix
is used in a process, its counter is seeded from the highest sequence already
persisted, so codes keep growing across restarts.

Known limitation: counters are process-local. Two service instances seeded
from the same persisted max will hand out overlapping sequences until one of
the inserts hits the unique index on ``sku_code``. When that happens the
service calls ``SequenceCounters.invalidate`` so the next request reseeds
from storage, never dropping below the last sequence this process issued;
the colliding request fails with a DuplicateKeyError.
"""

import logging
import re
import threading
from typing import Callable, Optional

from .ports import SkuRepositoryPort

logger = logging.getLogger(__name__)

SEQUENCE_DIGITS = 7
MAX_SEQUENCE = 10 ** SEQUENCE_DIGITS - 1

_CODE_PATTERN = re.compile(r"^(?P<prefix>[A-Z0-9]+-[A-Z]{3})-(?P<sequence>\d{7})$")


class SequenceOverflowError(Exception):
    """Raised when a prefix has exhausted its 7-digit sequence space."""
    pass


class SequenceCounters:
    """Thread-safe last-issued sequence per prefix.

    Each prefix gets its own lock, so seeding and incrementing one prefix
    never blocks another. The registry lock only guards lock creation.

    Invalidating a prefix marks it stale instead of dropping it: the next
    call reseeds from storage but never goes below the last value this
    process issued, since issued codes may still be uncommitted.
    """

    def __init__(self):
        self._values: dict[str, int] = {}
        self._stale: set[str] = set()
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, prefix: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(prefix)
            if lock is None:
                lock = threading.Lock()
                self._locks[prefix] = lock
            return lock

    def next_value(self, prefix: str, seed: Callable[[], int]) -> int:
        """Increment and return the counter for `prefix`.

        Args:
            prefix: Sequence namespace, e.g. "THD-LBR"
            seed: Called once per prefix (and again after invalidation) to
                load the last persisted sequence

        Returns:
            The newly issued sequence number
        """
        with self._lock_for(prefix):
            if prefix not in self._values or prefix in self._stale:
                last_issued = self._values.get(prefix, 0)
                seeded = max(seed() or 0, last_issued)
                logger.info(
                    f"Seeded sequence counter for {prefix} at {seeded}",
                    extra={"prefix": prefix, "seed": seeded},
                )
                self._values[prefix] = seeded
                self._stale.discard(prefix)
            self._values[prefix] += 1
            return self._values[prefix]

    def invalidate(self, prefix: str) -> None:
        """Mark a prefix stale; the next call reseeds it from storage."""
        with self._lock_for(prefix):
            if prefix in self._values:
                self._stale.add(prefix)

    def is_stale(self, prefix: str) -> bool:
        with self._lock_for(prefix):
            return prefix in self._stale

    def current(self, prefix: str) -> Optional[int]:
        """Last issued sequence for `prefix`, or None if not seeded yet."""
        with self._lock_for(prefix):
            return self._values.get(prefix)

    def reset(self) -> None:
        with self._registry_lock:
            self._values.clear()
            self._stale.clear()
            self._locks.clear()


class SkuCodeGenerator:
    """Produces the next SKU code for a category."""

    def __init__(self, counters: SequenceCounters, retailer_prefix: str = "THD"):
        self.counters = counters
        self.retailer_prefix = retailer_prefix

    def prefix_for(self, category: str) -> str:
        return f"{self.retailer_prefix}-{category}"

    def next_code(self, category: str, repository: SkuRepositoryPort) -> str:
        """Issue the next code for `category`.

        Args:
            category: Validated 3-letter uppercase category code
            repository: Used once per prefix to read the persisted max sequence

        Returns:
            Formatted code, e.g. "THD-LBR-0000001"

        Raises:
            SequenceOverflowError: The prefix passed 9999999
        """
        prefix = self.prefix_for(category)
        sequence = self.counters.next_value(
            prefix,
            lambda: repository.find_max_sequence_by_prefix(prefix),
        )
        if sequence > MAX_SEQUENCE:
            raise SequenceOverflowError(f"Sequence space exhausted for prefix {prefix}")
        return format_code(prefix, sequence)

    def invalidate(self, category: str) -> None:
        self.counters.invalidate(self.prefix_for(category))


def format_code(prefix: str, sequence: int) -> str:
    return f"{prefix}-{sequence:0{SEQUENCE_DIGITS}d}"


def parse_sequence(sku_code: str) -> int:
    """Extract the trailing sequence number from a SKU code.

    Raises:
        ValueError: `sku_code` is not in PREFIX-CATEGORY-NNNNNNN form
    """
    match = _CODE_PATTERN.match(sku_code)
    if not match:
        raise ValueError(f"Not a SKU code: {sku_code!r}")
    return int(match.group("sequence"))
