from sqlalchemy import Column, String

from agridirect.models.base import BaseModel


class Consumer(BaseModel):
    __tablename__ = "consumers"

    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    mobile = Column(String(20))
    hashed_password = Column(String(255), nullable=False)
