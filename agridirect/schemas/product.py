import json
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from agridirect.models.product import normalize_tags
from agridirect.schemas.base import TimestampSchema
from agridirect.schemas.farmer import FarmerBrief


def parse_preferences(value: Any) -> List[str]:
    """Accept a JSON list, a comma separated string or a list of either."""
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                value = json.loads(text)
            except ValueError:
                value = text.strip("[]").split(",")
        else:
            value = text.split(",")
    parts: List[str] = []
    for item in value:
        parts.extend(str(item).split(","))
    return normalize_tags(parts)


class _FormFields(BaseModel):
    """Multipart fields arrive as strings; blank means "not provided"."""

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("preferences", mode="before", check_fields=False)
    @classmethod
    def _preferences(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return parse_preferences(value)


class ProductCreate(_FormFields):
    name: str
    category: Optional[str] = None
    preferences: Optional[List[str]] = None
    price: float = Field(..., ge=0)
    quantity: float = Field(..., ge=0)
    location: Optional[str] = None
    harvest_date: Optional[date] = None
    moisture: Optional[float] = None
    protein: Optional[float] = None
    pesticide_residue: Optional[float] = None
    soil_ph: Optional[float] = None


class ProductUpdate(_FormFields):
    name: Optional[str] = None
    category: Optional[str] = None
    preferences: Optional[List[str]] = None
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[float] = Field(None, ge=0)
    location: Optional[str] = None


class Product(TimestampSchema):
    id: str
    farmer_id: str
    name: str
    category: Optional[str] = None
    preferences: List[str] = []
    price: float
    quantity: float
    location: Optional[str] = None
    image: str
    harvest_date: Optional[date] = None
    moisture: Optional[float] = None
    protein: Optional[float] = None
    pesticide_residue: Optional[float] = None
    soil_ph: Optional[float] = None
    lab_report: Optional[str] = None
    qr_path: Optional[str] = None


class ProductCreated(BaseModel):
    status: str
    message: str
    qr_pending: bool
    product: Product


class CatalogProduct(Product):
    farmer: Optional[FarmerBrief] = None


class CatalogPage(BaseModel):
    count: int
    applied_filters: Dict[str, Any]
    products: List[CatalogProduct]


class QRArtifact(BaseModel):
    success: bool = True
    qr_url: str
