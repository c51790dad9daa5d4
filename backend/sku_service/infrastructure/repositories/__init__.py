from .sku_repository import SkuRepository

__all__ = ["SkuRepository"]
