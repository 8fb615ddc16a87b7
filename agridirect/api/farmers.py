from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from agridirect.api.deps import get_qr_binder, get_store
from agridirect.auth import accounts
from agridirect.core.errors import NotFoundError, validation_error_from
from agridirect.db.session import get_db
from agridirect.schemas.farmer import Farmer as FarmerSchema, FarmerCreate, FarmerLogin, LoginRequest
from agridirect.schemas.product import Product as ProductSchema, ProductCreate, ProductCreated, QRArtifact
from agridirect.services import products as product_service
from agridirect.services.qr import QRBinder
from agridirect.services.storage import ArtifactStore

router = APIRouter()


# --------------------------------------------------------------------
# Accounts -> POST /farmers/register, POST /farmers/login
# --------------------------------------------------------------------
@router.post("/register", response_model=FarmerSchema, status_code=status.HTTP_201_CREATED)
def register_farmer(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    farm_name: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    certificate: Optional[UploadFile] = File(None),
    qr_code: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: ArtifactStore = Depends(get_store),
):
    try:
        data = FarmerCreate(
            name=name,
            email=email,
            password=password,
            farm_name=farm_name,
            location=location,
            mobile=mobile,
            experience=experience or None,
        )
    except PydanticValidationError as e:
        raise validation_error_from(e)
    return accounts.register_farmer(db, data, store, certificate=certificate, qr_code=qr_code)


@router.post("/login", response_model=FarmerLogin)
def login_farmer(credentials: LoginRequest, db: Session = Depends(get_db)):
    farmer = accounts.authenticate_farmer(db, credentials.email, credentials.password)
    return FarmerLogin(farmer_id=farmer.id, farmer_name=farmer.name)


# --------------------------------------------------------------------
# Profile -> GET /farmers/{farmer_id}, GET /farmers/{farmer_id}/qr
# --------------------------------------------------------------------
@router.get("/{farmer_id}", response_model=FarmerSchema)
def read_farmer(farmer_id: str, db: Session = Depends(get_db)):
    return accounts.get_farmer(db, farmer_id)


@router.get("/{farmer_id}/qr", response_model=QRArtifact)
def read_farmer_qr(farmer_id: str, db: Session = Depends(get_db)):
    farmer = accounts.get_farmer(db, farmer_id)
    if not farmer.qr_code:
        raise NotFoundError("QR not found")
    return QRArtifact(qr_url=farmer.qr_code)


# --------------------------------------------------------------------
# Listings -> POST/GET /farmers/{farmer_id}/products
# --------------------------------------------------------------------
@router.post(
    "/{farmer_id}/products",
    response_model=ProductCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product and its authenticity QR code",
)
def create_product(
    farmer_id: str,
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    preferences: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    harvest_date: Optional[str] = Form(None),
    moisture: Optional[str] = Form(None),
    protein: Optional[str] = Form(None),
    pesticide_residue: Optional[str] = Form(None),
    soil_ph: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    lab_report: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: ArtifactStore = Depends(get_store),
    binder: QRBinder = Depends(get_qr_binder),
):
    """
    Multipart form. **image** is required, **lab_report** optional.
    Lab readings left blank are stored as unknown, not as zero.

    When the product is saved but its QR code could not be written the
    response carries `qr_pending: true` and status `partial`.
    """
    try:
        data = ProductCreate(
            name=name,
            category=category,
            preferences=preferences,
            price=price,
            quantity=quantity,
            location=location,
            harvest_date=harvest_date,
            moisture=moisture,
            protein=protein,
            pesticide_residue=pesticide_residue,
            soil_ph=soil_ph,
        )
    except PydanticValidationError as e:
        raise validation_error_from(e)

    product, qr_pending = product_service.create_product(db, farmer_id, data, image, lab_report, store, binder)
    if qr_pending:
        return ProductCreated(
            status="partial",
            message="Product added, QR code pending",
            qr_pending=True,
            product=ProductSchema.model_validate(product),
        )
    return ProductCreated(
        status="success",
        message="Product added successfully with QR!",
        qr_pending=False,
        product=ProductSchema.model_validate(product),
    )


@router.get("/{farmer_id}/products", response_model=List[ProductSchema])
def read_farmer_products(farmer_id: str, db: Session = Depends(get_db)):
    return product_service.list_farmer_products(db, farmer_id)
