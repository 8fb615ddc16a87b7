import logging
import re
import shutil
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from agridirect.core.config import Settings
from agridirect.core.errors import ArtifactStorageError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads/"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


def safe_filename(name: str) -> str:
    cleaned = _UNSAFE.sub("_", Path(name).name).strip("._")
    return cleaned or "upload"


class ArtifactStore:
    """Stores received uploads under UPLOAD_DIR and hands back public references."""

    def __init__(self, settings: Settings):
        self.root = Path(settings.UPLOAD_DIR)

    def path_for(self, reference: str) -> Path:
        if not reference.startswith(PUBLIC_PREFIX):
            raise ValueError(f"Not an upload reference: {reference!r}")
        return self.root / reference[len(PUBLIC_PREFIX):]

    def save_upload(self, upload: UploadFile) -> str:
        # timestamp prefix avoids collisions between equally named uploads
        filename = f"{int(time.time() * 1000)}-{safe_filename(upload.filename)}"
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(self.root / filename, "wb") as buffer:
                shutil.copyfileobj(upload.file, buffer)
        except OSError as e:
            logger.error("Could not store upload %s: %s", upload.filename, e)
            raise ArtifactStorageError(f"Could not store {upload.filename}")
        logger.info("Stored upload %s as %s", upload.filename, filename)
        return PUBLIC_PREFIX + filename

    def remove(self, reference: Optional[str]) -> None:
        if not reference or not reference.startswith(PUBLIC_PREFIX):
            return
        try:
            self.path_for(reference).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove artifact %s: %s", reference, e)

    def remove_all(self, references) -> None:
        for reference in references:
            self.remove(reference)
