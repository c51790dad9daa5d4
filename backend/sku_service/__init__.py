"""SKU Service - SKU management for retail product catalogs"""

__version__ = "1.0.0"
