from agridirect.models.farmer import Farmer
from agridirect.models.consumer import Consumer
from agridirect.models.product import Product, ProductTag
from agridirect.models.order import Order
from agridirect.db.session import engine, Base


def init_db(bind=None):
    # Create all tables
    Base.metadata.create_all(bind=bind or engine)


def drop_db(bind=None):
    Base.metadata.drop_all(bind=bind or engine)
