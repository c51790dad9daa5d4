"""SKU SQLAlchemy model"""

import uuid

from sqlalchemy import Column, DateTime, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.sql import func

from .base import Base, PortableJSONB


class Sku(Base):
    """Stock Keeping Unit record.

    sku_code is assigned once by the code generator and never changes.
    upc is optional but unique whenever present, regardless of status.
    Records are never physically removed; delete flips status to DISCONTINUED.
    """
    __tablename__ = "skus"
    __table_args__ = (
        Index("ix_skus_sku_code", "sku_code", unique=True),
        Index("ix_skus_upc", "upc", unique=True),
        Index("ix_skus_category", "category"),
        Index("ix_skus_status", "status"),
        Index("ix_skus_brand", "brand"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sku_code = Column(String(50), nullable=False)
    upc = Column(String(12), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    brand = Column(String(100), nullable=True)
    category = Column(String(50), nullable=False)
    subcategory = Column(String(50), nullable=True)
    price = Column(Numeric(precision=10, scale=2), nullable=True)
    cost = Column(Numeric(precision=10, scale=2), nullable=True)
    unit_of_measure = Column(String(20), nullable=True)
    quantity_per_unit = Column(Integer, nullable=True)
    weight = Column(Numeric(precision=10, scale=2), nullable=True)
    dimension_length = Column(Numeric(precision=10, scale=2), nullable=True)
    dimension_width = Column(Numeric(precision=10, scale=2), nullable=True)
    dimension_height = Column(Numeric(precision=10, scale=2), nullable=True)
    status = Column(String(20), nullable=False, default="ACTIVE", server_default="ACTIVE")
    tags = Column(PortableJSONB, nullable=True)
    attributes = Column(PortableJSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def dimensions(self):
        """Dimensions as a dict, or None when no dimension is recorded."""
        if (
            self.dimension_length is None
            and self.dimension_width is None
            and self.dimension_height is None
        ):
            return None
        return {
            "length": self.dimension_length,
            "width": self.dimension_width,
            "height": self.dimension_height,
        }

    @dimensions.setter
    def dimensions(self, value):
        value = value or {}
        self.dimension_length = value.get("length")
        self.dimension_width = value.get("width")
        self.dimension_height = value.get("height")

    def __repr__(self):
        return f"Sku(id={self.id}, sku_code='{self.sku_code}', status='{self.status}')"

