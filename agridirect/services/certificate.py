"""
Public product authenticity certificates.

This is what a scanned QR code lands on. The page is unauthenticated and
must render for any input: unknown or malformed ids get a "not found" page,
and a product whose farmer has disappeared still renders with unknown
farmer fields. Rendering only reads.
"""
import logging
from html import escape
from typing import Optional

from sqlalchemy.orm import Session

from agridirect.core.config import Settings
from agridirect.models.farmer import Farmer
from agridirect.models.product import Product
from agridirect.schemas.certificate import (
    CertificateDocument,
    CertificateFarmer,
    CertificateProduct,
)
from agridirect.services.identifiers import validate
from agridirect.services.qr import verification_url

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


def display_number(value: Optional[float]) -> str:
    # zero is a real reading (e.g. no pesticide residue), only None is unknown
    if value is None:
        return UNKNOWN
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def display_text(value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        return UNKNOWN
    return str(value)


PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: 'Segoe UI', sans-serif; background: #e0f7fa; display: flex; justify-content: center; padding: 40px; }}
    .certificate {{ background: white; padding: 30px; border-radius: 15px; max-width: 800px; width: 100%; box-shadow: 0 10px 25px rgba(0,0,0,0.15); }}
    .header {{ text-align: center; margin-bottom: 25px; }}
    .header h1 {{ color: #00796b; font-size: 28px; }}
    .section h3 {{ color: #004d40; border-bottom: 1px solid #b2dfdb; padding-bottom: 5px; }}
    .section p {{ font-size: 16px; line-height: 1.5; margin: 5px 0; }}
    .product-img {{ text-align: center; margin: 20px 0; }}
    .product-img img {{ max-width: 250px; border-radius: 10px; }}
    a {{ color: #00796b; font-weight: bold; }}
  </style>
</head>
<body>
  <div class="certificate">
{body}
  </div>
</body>
</html>
"""

CERTIFICATE_BODY = """    <div class="header"><h1>Product Authenticity Certificate</h1></div>
    <div class="section">
      <h3>Farmer Info</h3>
      <p><strong>Name:</strong> {farmer_name}</p>
      <p><strong>Farm Name:</strong> {farm_name}</p>
      <p><strong>Location:</strong> {farmer_location}</p>
      <p><strong>Farmer ID:</strong> {farmer_id}</p>
    </div>
    <div class="section">
      <h3>Product Info</h3>
{image}
      <p><strong>Product ID:</strong> {product_id}</p>
      <p><strong>Name:</strong> {name}</p>
      <p><strong>Category:</strong> {category}</p>
      <p><strong>Price:</strong> {price}</p>
      <p><strong>Quantity:</strong> {quantity}</p>
      <p><strong>Harvest Date:</strong> {harvest_date}</p>
      <p><strong>Moisture:</strong> {moisture}</p>
      <p><strong>Protein:</strong> {protein}</p>
      <p><strong>Pesticide Residue:</strong> {pesticide_residue}</p>
      <p><strong>Soil pH:</strong> {soil_ph}</p>
      <p><strong>Lab Report:</strong> {lab_report}</p>
    </div>
    <div class="verified"><p><strong>Verified:</strong> Authentic Product</p></div>"""

NOT_FOUND_BODY = """    <div class="header"><h1>Product not found</h1></div>
    <p>No product is registered under {product_id}. The code may be outdated or not genuine.</p>"""


class CertificateRenderer:
    def __init__(self, settings: Settings):
        self.base_url = settings.BASE_URL.rstrip("/")
        self.currency = settings.CURRENCY_SYMBOL
        self.unit = settings.QUANTITY_UNIT

    def _with_unit(self, value: Optional[float], unit: str, prefix: str = "") -> str:
        shown = display_number(value)
        if shown == UNKNOWN:
            return shown
        return f"{prefix}{shown}{unit}"

    def build(self, db: Session, product_id: str) -> Optional[CertificateDocument]:
        if not validate(product_id):
            return None
        product = db.get(Product, product_id)
        if product is None:
            return None

        farmer = db.get(Farmer, product.farmer_id) if product.farmer_id else None
        if farmer is None:
            logger.warning("Product %s references missing farmer %s", product.id, product.farmer_id)

        return CertificateDocument(
            verification_url=verification_url(self.base_url, product.id),
            farmer=CertificateFarmer(
                id=display_text(farmer.id if farmer else product.farmer_id),
                name=display_text(farmer.name if farmer else None),
                farm_name=display_text(farmer.farm_name if farmer else None),
                location=display_text(farmer.location if farmer else None),
            ),
            product=CertificateProduct(
                id=product.id,
                name=display_text(product.name),
                category=display_text(product.category),
                image=product.image,
                price=self._with_unit(product.price, "", prefix=self.currency),
                quantity=self._with_unit(product.quantity, f" {self.unit}"),
                harvest_date=product.harvest_date.isoformat() if product.harvest_date else UNKNOWN,
                moisture=self._with_unit(product.moisture, "%"),
                protein=self._with_unit(product.protein, "%"),
                pesticide_residue=self._with_unit(product.pesticide_residue, " ppm"),
                soil_ph=display_number(product.soil_ph),
                lab_report=product.lab_report,
            ),
        )

    def render_html(self, document: CertificateDocument) -> str:
        farmer, product = document.farmer, document.product
        image = ""
        if product.image:
            image = (
                f'      <div class="product-img"><img src="{escape(product.image)}" '
                f'alt="{escape(product.name)}" /></div>'
            )
        lab_report = UNKNOWN
        if product.lab_report:
            lab_report = f'<a href="{escape(product.lab_report)}" target="_blank">View Report</a>'
        body = CERTIFICATE_BODY.format(
            farmer_name=escape(farmer.name),
            farm_name=escape(farmer.farm_name),
            farmer_location=escape(farmer.location),
            farmer_id=escape(farmer.id),
            image=image,
            product_id=escape(product.id),
            name=escape(product.name),
            category=escape(product.category),
            price=escape(product.price),
            quantity=escape(product.quantity),
            harvest_date=escape(product.harvest_date),
            moisture=escape(product.moisture),
            protein=escape(product.protein),
            pesticide_residue=escape(product.pesticide_residue),
            soil_ph=escape(product.soil_ph),
            lab_report=lab_report,
        )
        return PAGE.format(title="Product Certificate", body=body)

    def render_not_found(self, product_id: str) -> str:
        return PAGE.format(
            title="Product not found",
            body=NOT_FOUND_BODY.format(product_id=escape(str(product_id))),
        )

    def render(self, db: Session, product_id: str) -> Optional[str]:
        document = self.build(db, product_id)
        if document is None:
            return None
        return self.render_html(document)
