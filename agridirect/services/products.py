"""
Product lifecycle: creation with QR binding, partial updates and deletion.

Creation is store-write-first: the product row is committed before its QR
code is bound. If binding fails the product stays, `qr_path` stays unset and
the caller gets `qr_pending=True`.
"""
import logging
from typing import List, Optional, Tuple

from fastapi import UploadFile
from sqlalchemy.orm import Session

from agridirect.core.errors import (
    DependencyFailure,
    InvalidOwnerError,
    MissingImageError,
    NotFoundError,
    OwnershipError,
)
from agridirect.models.farmer import Farmer
from agridirect.models.product import Product
from agridirect.schemas.product import ProductCreate, ProductUpdate
from agridirect.services.identifiers import require_valid, validate
from agridirect.services.qr import QRBinder
from agridirect.services.storage import ArtifactStore, has_file

logger = logging.getLogger(__name__)


def get_product(db: Session, product_id: str) -> Product:
    require_valid(product_id, "product identifier")
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def _check_owner(product: Product, farmer_id: Optional[str]) -> None:
    if farmer_id and product.farmer_id != farmer_id:
        raise OwnershipError("Product belongs to another farmer")


def create_product(
    db: Session,
    farmer_id: str,
    data: ProductCreate,
    image: Optional[UploadFile],
    lab_report: Optional[UploadFile],
    store: ArtifactStore,
    binder: QRBinder,
) -> Tuple[Product, bool]:
    """Create a product and bind its QR code.

    Returns the product and whether its QR code is still pending.
    Nothing is written unless the owner resolves and an image is supplied,
    and uploads already stored are removed again when the insert fails.
    """
    if not validate(farmer_id):
        raise InvalidOwnerError(f"Invalid farmer identifier: {farmer_id!r}")
    if db.get(Farmer, farmer_id) is None:
        raise InvalidOwnerError("Farmer not found")
    if not has_file(image):
        raise MissingImageError("Product image required")

    stored = []
    try:
        stored.append(store.save_upload(image))
        if has_file(lab_report):
            stored.append(store.save_upload(lab_report))
        product = Product(
            farmer_id=farmer_id,
            name=data.name,
            category=data.category,
            preferences=data.preferences or [],
            price=data.price,
            quantity=data.quantity,
            location=data.location,
            image=stored[0],
            harvest_date=data.harvest_date,
            moisture=data.moisture,
            protein=data.protein,
            pesticide_residue=data.pesticide_residue,
            soil_ph=data.soil_ph,
            lab_report=stored[1] if len(stored) > 1 else None,
        )
        db.add(product)
        db.commit()
    except Exception:
        db.rollback()
        store.remove_all(stored)
        raise
    db.refresh(product)

    try:
        binder.bind(db, product)
    except DependencyFailure as e:
        logger.warning("Product %s created without QR code: %s", product.id, e.message)
        db.refresh(product)
        return product, True
    return product, False


def update_product(
    db: Session,
    product_id: str,
    changes: ProductUpdate,
    image: Optional[UploadFile],
    store: ArtifactStore,
    farmer_id: Optional[str] = None,
) -> Product:
    product = get_product(db, product_id)
    _check_owner(product, farmer_id)

    update_data = changes.model_dump(exclude_none=True)
    for field, value in update_data.items():
        setattr(product, field, value)
    old_image = product.image
    new_image = None
    try:
        if has_file(image):
            new_image = store.save_upload(image)
            product.image = new_image
        db.add(product)
        db.commit()
    except Exception:
        db.rollback()
        store.remove(new_image)
        raise
    db.refresh(product)
    if new_image and old_image != new_image:
        store.remove(old_image)
    return product


def delete_product(
    db: Session,
    product_id: str,
    binder: QRBinder,
    farmer_id: Optional[str] = None,
) -> None:
    # orders keep their own snapshot of the product, nothing cascades to them
    product = get_product(db, product_id)
    _check_owner(product, farmer_id)

    db.delete(product)
    db.commit()
    binder.unbind(product_id)
    logger.info("Deleted product %s", product_id)


def list_farmer_products(db: Session, farmer_id: str) -> List[Product]:
    require_valid(farmer_id, "farmer identifier")
    return db.query(Product).filter(Product.farmer_id == farmer_id).all()
