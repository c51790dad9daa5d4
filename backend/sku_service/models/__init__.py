"""SQLAlchemy Models for the SKU service"""

from .base import Base, PortableJSONB
from .sku import Sku

__all__ = [
    "Base",
    "PortableJSONB",
    "Sku",
]
