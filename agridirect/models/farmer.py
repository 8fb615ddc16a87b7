from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import relationship

from agridirect.models.base import BaseModel


class Farmer(BaseModel):
    __tablename__ = "farmers"

    name = Column(String(100), nullable=False)
    farm_name = Column(String(150))
    location = Column(String(150))
    mobile = Column(String(20))
    experience = Column(Integer)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    certificate = Column(String(255))
    qr_code = Column(String(255))

    products = relationship("Product", back_populates="farmer")
