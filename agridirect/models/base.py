from datetime import datetime

from sqlalchemy import Column, String, DateTime

from agridirect.db.session import Base
from agridirect.services.identifiers import generate


class BaseModel(Base):
    __abstract__ = True

    id = Column(String(36), primary_key=True, index=True, default=generate)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
