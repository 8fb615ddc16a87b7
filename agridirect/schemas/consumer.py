from typing import Optional
from pydantic import BaseModel, EmailStr
from agridirect.schemas.base import TimestampSchema


class ConsumerBase(BaseModel):
    name: str
    email: EmailStr
    mobile: Optional[str] = None


class ConsumerCreate(ConsumerBase):
    password: str


class Consumer(TimestampSchema, ConsumerBase):
    id: str


class ConsumerLoginRequest(BaseModel):
    name: Optional[str] = None
    email: EmailStr
    password: str


class ConsumerLogin(BaseModel):
    success: bool = True
    message: str = "Login successful"
    consumer: Consumer


class EmailCheck(BaseModel):
    email: EmailStr


class EmailCheckResult(BaseModel):
    exists: bool
