"""Pydantic models describing how the ingest pipeline talks to the catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

GATHERER_BASE_URL = "https://gatherer.wizards.com"
IDENTIFIER_PLACEHOLDER = "{id}"


class IngestConfig(BaseModel):
    """Remote endpoints, batching, retry policy and storage location."""

    detail_url_template: str = (
        f"{GATHERER_BASE_URL}/Pages/Card/Details.aspx?printed=false&multiverseid={IDENTIFIER_PLACEHOLDER}"
    )
    image_url_template: str = (
        f"{GATHERER_BASE_URL}/Handlers/Image.ashx?type=card&multiverseid={IDENTIFIER_PLACEHOLDER}"
    )
    language_url_template: str = (
        f"{GATHERER_BASE_URL}/Pages/Card/Languages.aspx?multiverseid={IDENTIFIER_PLACEHOLDER}"
    )
    batch_size: int = Field(default=1000, ge=1)
    max_attempts: int = Field(default=5, ge=1)
    retry_wait_seconds: float = Field(default=10.0, ge=0)
    request_timeout: float = Field(default=30.0, gt=0)
    user_agent: str | None = None
    # Populate walks every identifier below this bound
    max_identifier: int = Field(default=500_000, ge=1)
    database_path: Path = Field(default=Path("data/cards.db"))

    @field_validator("detail_url_template", "image_url_template", "language_url_template")
    @classmethod
    def _require_placeholder(cls, value: str) -> str:
        if IDENTIFIER_PLACEHOLDER not in value:
            raise ValueError(f"URL template must contain {IDENTIFIER_PLACEHOLDER}: {value}")
        return value

    @field_validator("database_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)

    def detail_url(self, identifier: int) -> str:
        return self.detail_url_template.replace(IDENTIFIER_PLACEHOLDER, str(identifier))

    def image_url(self, identifier: int) -> str:
        return self.image_url_template.replace(IDENTIFIER_PLACEHOLDER, str(identifier))

    def language_url(self, identifier: int) -> str:
        return self.language_url_template.replace(IDENTIFIER_PLACEHOLDER, str(identifier))

    def resolved_database_path(self, base_dir: Path) -> Path:
        """Return the SQLite path, relative paths anchored at the project root."""

        if not self.database_path.is_absolute():
            return (base_dir / self.database_path).resolve()
        return self.database_path


__all__ = ["GATHERER_BASE_URL", "IDENTIFIER_PLACEHOLDER", "IngestConfig"]
