"""
AgriDirect settings.

Every value can be overridden from the environment or a local .env file.
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "agridirect"

    # =========================================================================
    # Database
    # =========================================================================
    DATABASE_URL: str = Field(default="sqlite:///./agridirect.db")
    DB_ECHO: bool = False

    # =========================================================================
    # Public URLs and artifact storage
    # =========================================================================
    BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Public root encoded into product verification QR codes",
    )
    UPLOAD_DIR: Path = Path("uploads")
    QR_SUBDIR: str = "qrs"

    # =========================================================================
    # Certificate display
    # =========================================================================
    CURRENCY_SYMBOL: str = "₹"
    QUANTITY_UNIT: str = "kg"

    # =========================================================================
    # HTTP / logging
    # =========================================================================
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("BASE_URL")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"BASE_URL must be an absolute http(s) URL, got {value!r}")
        return value.rstrip("/")

    @property
    def qr_dir(self) -> Path:
        return Path(self.UPLOAD_DIR) / self.QR_SUBDIR


@lru_cache
def get_settings() -> Settings:
    return Settings()
