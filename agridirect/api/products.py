from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from agridirect.api.deps import get_qr_binder, get_store
from agridirect.core.errors import validation_error_from
from agridirect.db.session import get_db
from agridirect.schemas.product import CatalogPage, CatalogProduct, Product as ProductSchema, ProductUpdate
from agridirect.services import catalog, products as product_service
from agridirect.services.catalog import CatalogCriteria
from agridirect.services.qr import QRBinder
from agridirect.services.storage import ArtifactStore

router = APIRouter()


def catalog_criteria(
    category: Optional[str] = Query(None, description="Exact category"),
    min_price: Optional[str] = Query(None, description="Inclusive lower price bound"),
    max_price: Optional[str] = Query(None, description="Inclusive upper price bound"),
    location: Optional[str] = Query(None, description="Case-insensitive substring of the product location"),
    preferences: Optional[List[str]] = Query(None, description="Tags, repeated or comma separated; any one matches"),
    sort_by: Optional[str] = Query(None, description="price_asc, price_desc or newest"),
) -> CatalogCriteria:
    # prices are taken as text so that an empty value means "no bound"
    try:
        return CatalogCriteria(
            category=category,
            min_price=min_price,
            max_price=max_price,
            location=location,
            preferences=preferences,
            sort_by=sort_by,
        )
    except PydanticValidationError as e:
        raise validation_error_from(e)


@router.get(
    "/",
    response_model=CatalogPage,
    summary="Search the catalog",
    description="Filter and sort products. An empty match is a successful, empty page.",
)
def search_products(
    criteria: CatalogCriteria = Depends(catalog_criteria),
    db: Session = Depends(get_db),
):
    """
    - **category**: exact category match
    - **min_price** / **max_price**: inclusive price range, each optional
    - **location**: case-insensitive substring of the product location
    - **preferences**: products carrying at least one of these tags
    - **sort_by**: price_asc, price_desc or newest; anything else is ignored
    """
    products = catalog.search(db, criteria)
    return CatalogPage(
        count=len(products),
        applied_filters=catalog.applied_filters(criteria),
        products=[CatalogProduct.model_validate(p) for p in products],
    )


@router.get("/{product_id}", response_model=ProductSchema, summary="Get product by ID")
def read_product(product_id: str, db: Session = Depends(get_db)):
    return product_service.get_product(db, product_id)


@router.put(
    "/{product_id}",
    response_model=ProductSchema,
    summary="Update a product",
    description="Partial update; omitted or blank fields keep their value. The QR code is not regenerated.",
)
def update_product(
    product_id: str,
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    preferences: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    farmer_id: Optional[str] = Query(None, description="When given, must own the product"),
    db: Session = Depends(get_db),
    store: ArtifactStore = Depends(get_store),
):
    try:
        changes = ProductUpdate(
            name=name,
            category=category,
            preferences=preferences,
            price=price,
            quantity=quantity,
            location=location,
        )
    except PydanticValidationError as e:
        raise validation_error_from(e)
    return product_service.update_product(db, product_id, changes, image, store, farmer_id=farmer_id)


@router.delete("/{product_id}", status_code=status.HTTP_200_OK, summary="Delete a product")
def delete_product(
    product_id: str,
    farmer_id: Optional[str] = Query(None, description="When given, must own the product"),
    db: Session = Depends(get_db),
    binder: QRBinder = Depends(get_qr_binder),
):
    product_service.delete_product(db, product_id, binder, farmer_id=farmer_id)
    return {"ok": True, "message": "Product deleted successfully"}
