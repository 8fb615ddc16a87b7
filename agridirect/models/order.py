from sqlalchemy import Column, String, Float

from agridirect.models.base import BaseModel


class Order(BaseModel):
    """Immutable purchase snapshot.

    The reference columns are plain identifiers rather than foreign keys: an
    order outlives the product, farmer or consumer it points to, and the
    copied consumer/product fields are never resynchronized.
    """
    __tablename__ = "orders"

    product_id = Column(String(36), index=True, nullable=False)
    farmer_id = Column(String(36), index=True, nullable=False)
    consumer_id = Column(String(36), index=True, nullable=False)

    consumer_name = Column(String(100))
    consumer_email = Column(String(100))
    consumer_mobile = Column(String(20))
    product_name = Column(String(100))
    unit_price = Column(Float, nullable=False)

    quantity = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    address = Column(String(255), nullable=False)
    payment_method = Column(String(30), nullable=False)
