"""
Catalog search over products.

`CatalogCriteria` enumerates every recognised filter; each defaults to "no
constraint", and blank strings count as absent. Filters combine with AND,
while the requested preference tags combine with OR (a product matches if
it carries any of them). Unknown sort keys are ignored rather than rejected.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session, joinedload

from agridirect.models.product import Product, ProductTag, normalize_tags


class SortOrder(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"


class CatalogCriteria(BaseModel):
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    location: Optional[str] = None
    preferences: List[str] = []
    sort_by: Optional[SortOrder] = None

    @field_validator("category", "location", "min_price", "max_price", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("preferences", mode="before")
    @classmethod
    def _split_preferences(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        parts: List[str] = []
        for item in value:
            parts.extend(str(item).split(","))
        return normalize_tags(parts)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _known_sort_only(cls, value: Any) -> Optional[str]:
        if isinstance(value, SortOrder):
            return value
        if isinstance(value, str) and value.strip() in {s.value for s in SortOrder}:
            return value.strip()
        return None


def applied_filters(criteria: CatalogCriteria) -> Dict[str, Any]:
    """The constraints that actually shape the result, keyed by criterion name."""
    applied = criteria.model_dump(exclude_none=True, mode="json")
    if not applied.get("preferences"):
        applied.pop("preferences", None)
    return applied


def build_query(db: Session, criteria: CatalogCriteria):
    query = db.query(Product).options(joinedload(Product.farmer))

    if criteria.category:
        query = query.filter(Product.category == criteria.category)

    if criteria.min_price is not None:
        query = query.filter(Product.price >= criteria.min_price)

    if criteria.max_price is not None:
        query = query.filter(Product.price <= criteria.max_price)

    if criteria.location:
        query = query.filter(Product.location.icontains(criteria.location, autoescape=True))

    if criteria.preferences:
        # EXISTS keeps one row per product however many tags match
        query = query.filter(Product.tags.any(ProductTag.tag.in_(criteria.preferences)))

    if criteria.sort_by == SortOrder.PRICE_ASC:
        query = query.order_by(Product.price.asc())
    elif criteria.sort_by == SortOrder.PRICE_DESC:
        query = query.order_by(Product.price.desc())
    elif criteria.sort_by == SortOrder.NEWEST:
        query = query.order_by(Product.created_at.desc())

    return query


def search(db: Session, criteria: Optional[CatalogCriteria] = None) -> List[Product]:
    return build_query(db, criteria or CatalogCriteria()).all()
