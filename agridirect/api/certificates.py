from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from agridirect.api.deps import get_certificate_renderer
from agridirect.core.errors import NotFoundError
from agridirect.db.session import get_db
from agridirect.schemas.certificate import CertificateDocument
from agridirect.schemas.product import QRArtifact
from agridirect.services.certificate import CertificateRenderer
from agridirect.services.identifiers import require_valid
from agridirect.services.products import get_product

router = APIRouter()


@router.get(
    "/{product_id}/view",
    response_class=HTMLResponse,
    summary="Public authenticity certificate",
    description="Target of product QR codes. Unknown or malformed ids get a not-found page, never an error.",
)
def view_certificate(
    product_id: str,
    db: Session = Depends(get_db),
    renderer: CertificateRenderer = Depends(get_certificate_renderer),
):
    page = renderer.render(db, product_id)
    if page is None:
        return HTMLResponse(renderer.render_not_found(product_id))
    return HTMLResponse(page)


@router.get("/{product_id}/certificate", response_model=CertificateDocument)
def read_certificate(
    product_id: str,
    db: Session = Depends(get_db),
    renderer: CertificateRenderer = Depends(get_certificate_renderer),
):
    require_valid(product_id, "product identifier")
    document = renderer.build(db, product_id)
    if document is None:
        raise NotFoundError("Product not found")
    return document


@router.get("/{product_id}/qr", response_model=QRArtifact)
def read_product_qr(product_id: str, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    if not product.qr_path:
        raise NotFoundError("QR not found")
    return QRArtifact(qr_url=product.qr_path)
