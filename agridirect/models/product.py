from datetime import datetime
from typing import Iterable, List

from sqlalchemy import Column, String, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from agridirect.db.session import Base
from agridirect.models.base import BaseModel


def normalize_tags(values: Iterable[str]) -> List[str]:
    """Strip, drop blanks and collapse duplicates, keeping first-seen order."""
    tags: List[str] = []
    for value in values or ():
        tag = str(value).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class ProductTag(Base):
    __tablename__ = "product_tags"

    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    tag = Column(String(50), primary_key=True, index=True)


class Product(BaseModel):
    __tablename__ = "products"

    farmer_id = Column(String(36), ForeignKey("farmers.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), index=True)
    price = Column(Float, nullable=False, default=0)
    quantity = Column(Float, nullable=False, default=0)
    location = Column(String(150))
    image = Column(String(255), nullable=False)
    harvest_date = Column(Date)

    # lab quality readings; None means "not measured", not zero
    moisture = Column(Float)
    protein = Column(Float)
    pesticide_residue = Column(Float)
    soil_ph = Column(Float)
    lab_report = Column(String(255))

    qr_path = Column(String(255))
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    farmer = relationship("Farmer", back_populates="products")
    tags = relationship(
        "ProductTag", cascade="all, delete-orphan", lazy="selectin", order_by="ProductTag.tag"
    )

    @property
    def preferences(self) -> List[str]:
        return sorted(t.tag for t in self.tags)

    @preferences.setter
    def preferences(self, values: Iterable[str]) -> None:
        # reuse surviving rows so the (product_id, tag) key is never re-inserted
        existing = {t.tag: t for t in self.tags}
        self.tags = [existing.get(tag) or ProductTag(tag=tag) for tag in normalize_tags(values)]
