from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agridirect.db.session import get_db
from agridirect.schemas.order import Order as OrderSchema, OrderCreate, OrderList
from agridirect.services import orders as order_service

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED)
def place_order(order: OrderCreate, db: Session = Depends(get_db)):
    db_order = order_service.place_order(db, order)
    return {
        "success": True,
        "message": "Order placed successfully!",
        "order": OrderSchema.model_validate(db_order),
    }


@router.get("/", response_model=OrderList)
def read_consumer_orders(
    consumer_id: str = Query(..., description="Consumer whose orders to list"),
    db: Session = Depends(get_db),
):
    orders = order_service.consumer_orders(db, consumer_id)
    return OrderList(orders=[OrderSchema.model_validate(o) for o in orders])


@router.get("/farmer/{farmer_id}", response_model=OrderList)
def read_farmer_orders(farmer_id: str, db: Session = Depends(get_db)):
    orders = order_service.farmer_orders(db, farmer_id)
    return OrderList(orders=[OrderSchema.model_validate(o) for o in orders])
