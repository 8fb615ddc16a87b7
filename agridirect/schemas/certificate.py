from typing import Optional

from pydantic import BaseModel


class CertificateFarmer(BaseModel):
    id: str
    name: str
    farm_name: str
    location: str


class CertificateProduct(BaseModel):
    id: str
    name: str
    category: str
    image: Optional[str] = None
    price: str
    quantity: str
    harvest_date: str
    moisture: str
    protein: str
    pesticide_residue: str
    soil_ph: str
    lab_report: Optional[str] = None


class CertificateDocument(BaseModel):
    """Display-ready values; absent readings are the string "unknown"."""
    verification_url: str
    farmer: CertificateFarmer
    product: CertificateProduct
