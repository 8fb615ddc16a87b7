from typing import Optional
from pydantic import BaseModel, EmailStr
from agridirect.schemas.base import BaseSchema, TimestampSchema


class FarmerBase(BaseModel):
    name: str
    farm_name: Optional[str] = None
    location: Optional[str] = None
    mobile: Optional[str] = None
    experience: Optional[int] = None
    email: EmailStr


class FarmerCreate(FarmerBase):
    password: str


class Farmer(TimestampSchema, FarmerBase):
    """Farmer profile as returned by the API; never carries the password hash."""
    id: str
    certificate: Optional[str] = None
    qr_code: Optional[str] = None


class FarmerBrief(BaseSchema):
    """Public seller details joined onto catalog results."""
    id: str
    name: str
    location: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class FarmerLogin(BaseModel):
    status: str = "success"
    message: str = "Login successful"
    farmer_id: str
    farmer_name: str
