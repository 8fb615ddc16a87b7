from typing import List, Optional
from pydantic import BaseModel, Field
from agridirect.schemas.base import TimestampSchema


class OrderCreate(BaseModel):
    product_id: str
    consumer_id: str
    quantity: float = Field(..., gt=0)
    address: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)


class Order(TimestampSchema):
    id: str
    product_id: str
    farmer_id: str
    consumer_id: str
    consumer_name: str
    consumer_email: str
    consumer_mobile: Optional[str] = None
    product_name: str
    unit_price: float
    quantity: float
    total_price: float
    address: str
    payment_method: str


class OrderList(BaseModel):
    success: bool = True
    orders: List[Order]
