from fastapi import Depends

from agridirect.core.config import Settings, get_settings
from agridirect.services.certificate import CertificateRenderer
from agridirect.services.qr import QRBinder
from agridirect.services.storage import ArtifactStore


def get_store(settings: Settings = Depends(get_settings)) -> ArtifactStore:
    return ArtifactStore(settings)


def get_qr_binder(settings: Settings = Depends(get_settings)) -> QRBinder:
    return QRBinder(settings)


def get_certificate_renderer(settings: Settings = Depends(get_settings)) -> CertificateRenderer:
    return CertificateRenderer(settings)
