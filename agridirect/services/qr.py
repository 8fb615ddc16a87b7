"""
Binds products to scannable authenticity QR codes.

A product's QR code encodes its public verification URL
(`{BASE_URL}/product/{id}/view`) and lives at `{QR_DIR}/{id}-authQR.png`.
The file name is derived from the product id only, so binding the same
product again overwrites the same artifact.
"""
import io
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import urlparse

import qrcode
from qrcode.exceptions import DataOverflowError
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from agridirect.core.config import Settings
from agridirect.core.errors import ArtifactStorageError, DependencyFailure
from agridirect.models.product import Product
from agridirect.services.identifiers import require_valid
from agridirect.services.storage import PUBLIC_PREFIX

logger = logging.getLogger(__name__)

QR_SUFFIX = "-authQR.png"


def verification_url(base_url: str, product_id: str) -> str:
    return f"{base_url.rstrip('/')}/product/{product_id}/view"


class QRBinder:
    def __init__(self, settings: Settings):
        parsed = urlparse(settings.BASE_URL or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"QR binding needs an absolute BASE_URL, got {settings.BASE_URL!r}")
        self.base_url = settings.BASE_URL.rstrip("/")
        self.qr_dir = Path(settings.qr_dir)
        self.public_prefix = f"{PUBLIC_PREFIX}{settings.QR_SUBDIR}/"

    def verification_url(self, product_id: str) -> str:
        return verification_url(self.base_url, product_id)

    def artifact_name(self, product_id: str) -> str:
        return f"{product_id}{QR_SUFFIX}"

    def artifact_reference(self, product_id: str) -> str:
        return self.public_prefix + self.artifact_name(product_id)

    def artifact_path(self, product_id: str) -> Path:
        return self.qr_dir / self.artifact_name(product_id)

    def render(self, url: str) -> bytes:
        img = qrcode.make(url)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def _write(self, product_id: str, data: bytes) -> None:
        self.qr_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.qr_dir, prefix=f".{product_id}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            # concurrent binds of one product both land on the same name
            os.replace(tmp, self.artifact_path(product_id))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def bind(self, db: Session, product: Product) -> str:
        """Write the product's QR artifact, then record it as `qr_path`.

        The artifact is written before the store update, so a product whose
        `qr_path` is unset has no complete binding. Raises
        ArtifactStorageError when the artifact cannot be rendered or written,
        and DependencyFailure when the `qr_path` update cannot be committed.
        """
        product_id = require_valid(product.id, "product identifier")
        url = self.verification_url(product_id)
        try:
            self._write(product_id, self.render(url))
        except (OSError, DataOverflowError) as e:
            logger.warning("QR artifact for product %s not written: %s", product_id, e)
            raise ArtifactStorageError(f"Could not store QR code for product {product_id}")

        reference = self.artifact_reference(product_id)
        if product.qr_path != reference:
            product.qr_path = reference
            db.add(product)
            try:
                db.commit()
            except (OperationalError, PoolTimeoutError) as e:
                db.rollback()
                logger.warning("qr_path for product %s not recorded: %s", product_id, e)
                raise DependencyFailure(f"Could not record QR code for product {product_id}")
            db.refresh(product)
        logger.info("QR bound for %s -> %s (%s)", product.name, reference, url)
        return reference

    def unbind(self, product_id: str) -> None:
        try:
            self.artifact_path(product_id).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove QR artifact for product %s: %s", product_id, e)
