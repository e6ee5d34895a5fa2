"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - billing_timeout_seconds=None means no timeout on Sales → Billing calls

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: both services start with no environment
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from silkroute.services.invoice_pdf import DEFAULT_PDF_PATH


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Sales → Billing
    billing_base_url: str = "http://localhost:7072"
    billing_timeout_seconds: float | None = None

    @field_validator("billing_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Billing assets
    invoice_pdf_path: Path = DEFAULT_PDF_PATH
    pdf_chunk_size: int = 64 * 1024

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
