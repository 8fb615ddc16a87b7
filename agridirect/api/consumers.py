from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from agridirect.auth import accounts
from agridirect.db.session import get_db
from agridirect.schemas.consumer import (
    Consumer as ConsumerSchema,
    ConsumerCreate,
    ConsumerLogin,
    ConsumerLoginRequest,
    EmailCheck,
    EmailCheckResult,
)

router = APIRouter()


@router.post("/register", response_model=ConsumerSchema, status_code=status.HTTP_201_CREATED)
def register_consumer(data: ConsumerCreate, db: Session = Depends(get_db)):
    return accounts.register_consumer(db, data)


@router.post("/login", response_model=ConsumerLogin)
def login_consumer(credentials: ConsumerLoginRequest, db: Session = Depends(get_db)):
    consumer = accounts.authenticate_consumer(
        db, credentials.email, credentials.password, name=credentials.name
    )
    return ConsumerLogin(consumer=ConsumerSchema.model_validate(consumer))


@router.post("/check-email", response_model=EmailCheckResult)
def check_email(payload: EmailCheck, db: Session = Depends(get_db)):
    return EmailCheckResult(exists=accounts.consumer_email_exists(db, payload.email))


@router.get("/{consumer_id}", response_model=ConsumerSchema)
def read_consumer(consumer_id: str, db: Session = Depends(get_db)):
    return accounts.get_consumer(db, consumer_id)
