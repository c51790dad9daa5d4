"""Domain errors raised by the SKU core.

The HTTP layer maps each of these onto a problem+json response:
SkuNotFoundError -> 404, DuplicateKeyError -> 409, InvalidArgumentError -> 400.
"""

from typing import Optional


class SkuServiceError(Exception):
    """Base class for SKU service errors."""
    pass


class SkuNotFoundError(SkuServiceError):
    """Lookup by id, SKU code or UPC found nothing."""

    def __init__(self, key: str, value: object):
        self.key = key
        self.value = value
        super().__init__(f"SKU not found with {key}: {value}")


class DuplicateKeyError(SkuServiceError):
    """A natural key (UPC or SKU code) already exists."""

    def __init__(self, message: str, field: str, value: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(message)

    @classmethod
    def for_upc(cls, upc: Optional[str]) -> "DuplicateKeyError":
        if upc is None:
            return cls("SKU with the given UPC already exists", field="upc")
        return cls(f"SKU with UPC {upc} already exists", field="upc", value=upc)

    @classmethod
    def for_sku_code(cls, sku_code: Optional[str]) -> "DuplicateKeyError":
        if sku_code is None:
            return cls("SKU code collision, please retry", field="sku_code")
        return cls(
            f"SKU with code {sku_code} already exists, please retry",
            field="sku_code",
            value=sku_code,
        )


class InvalidArgumentError(SkuServiceError):
    """Malformed request shape not covered by schema validation."""
    pass
