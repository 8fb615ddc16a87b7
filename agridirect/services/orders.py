import logging
from typing import List

from sqlalchemy.orm import Session

from agridirect.auth.accounts import get_consumer
from agridirect.models.order import Order
from agridirect.schemas.order import OrderCreate
from agridirect.services.identifiers import require_valid
from agridirect.services.products import get_product

logger = logging.getLogger(__name__)


def place_order(db: Session, data: OrderCreate) -> Order:
    """Record an order, copying consumer and product details as they are now."""
    consumer = get_consumer(db, data.consumer_id)
    product = get_product(db, data.product_id)

    order = Order(
        product_id=product.id,
        farmer_id=product.farmer_id,
        consumer_id=consumer.id,
        consumer_name=consumer.name,
        consumer_email=consumer.email,
        consumer_mobile=consumer.mobile,
        product_name=product.name,
        unit_price=product.price,
        quantity=data.quantity,
        total_price=round(product.price * data.quantity, 2),
        address=data.address,
        payment_method=data.payment_method,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order %s placed for product %s by consumer %s", order.id, product.id, consumer.id)
    return order


def consumer_orders(db: Session, consumer_id: str) -> List[Order]:
    require_valid(consumer_id, "consumer identifier")
    return db.query(Order).filter(Order.consumer_id == consumer_id).order_by(Order.created_at.desc()).all()


def farmer_orders(db: Session, farmer_id: str) -> List[Order]:
    require_valid(farmer_id, "farmer identifier")
    return db.query(Order).filter(Order.farmer_id == farmer_id).order_by(Order.created_at.desc()).all()
