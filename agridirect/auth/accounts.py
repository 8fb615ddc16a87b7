import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agridirect.auth.security import get_password_hash, verify_password
from agridirect.core.errors import AuthenticationError, ConflictError, NotFoundError
from agridirect.models.consumer import Consumer
from agridirect.models.farmer import Farmer
from agridirect.schemas.consumer import ConsumerCreate
from agridirect.schemas.farmer import FarmerCreate
from agridirect.services.identifiers import require_valid
from agridirect.services.storage import ArtifactStore, has_file

logger = logging.getLogger(__name__)


def _save(db: Session, account, what: str):
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(account)
    logger.info("Registered %s %s", what, account.id)
    return account


def register_farmer(
    db: Session,
    data: FarmerCreate,
    store: ArtifactStore,
    certificate: Optional[UploadFile] = None,
    qr_code: Optional[UploadFile] = None,
) -> Farmer:
    if db.query(Farmer).filter(Farmer.email == data.email).first():
        raise ConflictError("Email already registered")

    stored = {}
    try:
        for field, upload in (("certificate", certificate), ("qr_code", qr_code)):
            if has_file(upload):
                stored[field] = store.save_upload(upload)
        farmer = Farmer(
            name=data.name,
            farm_name=data.farm_name,
            location=data.location,
            mobile=data.mobile,
            experience=data.experience,
            email=data.email,
            hashed_password=get_password_hash(data.password),
            certificate=stored.get("certificate"),
            qr_code=stored.get("qr_code"),
        )
        return _save(db, farmer, "farmer")
    except Exception:
        store.remove_all(stored.values())
        raise


def authenticate_farmer(db: Session, email: str, password: str) -> Farmer:
    farmer = db.query(Farmer).filter(Farmer.email == email).first()
    if not farmer or not verify_password(password, farmer.hashed_password):
        raise AuthenticationError("Invalid email or password")
    return farmer


def get_farmer(db: Session, farmer_id: str) -> Farmer:
    require_valid(farmer_id, "farmer identifier")
    farmer = db.get(Farmer, farmer_id)
    if farmer is None:
        raise NotFoundError("Farmer not found")
    return farmer


def register_consumer(db: Session, data: ConsumerCreate) -> Consumer:
    if consumer_email_exists(db, data.email):
        raise ConflictError("Email already registered")

    consumer = Consumer(
        name=data.name,
        email=data.email,
        mobile=data.mobile,
        hashed_password=get_password_hash(data.password),
    )
    return _save(db, consumer, "consumer")


def authenticate_consumer(db: Session, email: str, password: str, name: Optional[str] = None) -> Consumer:
    query = db.query(Consumer).filter(Consumer.email == email)
    if name:
        query = query.filter(Consumer.name == name)
    consumer = query.first()
    if not consumer or not verify_password(password, consumer.hashed_password):
        raise AuthenticationError("Invalid name, email, or password")
    return consumer


def consumer_email_exists(db: Session, email: str) -> bool:
    return db.query(Consumer.id).filter(Consumer.email == email).first() is not None


def get_consumer(db: Session, consumer_id: str) -> Consumer:
    require_valid(consumer_id, "consumer identifier")
    consumer = db.get(Consumer, consumer_id)
    if consumer is None:
        raise NotFoundError("Consumer not found")
    return consumer
