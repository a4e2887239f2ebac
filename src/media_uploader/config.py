"""Upload pipeline configuration.

Defaults mirror the backend: ``UPLOAD_MAX_BYTES`` is 10 MB, so the raw-size
ceiling and the default compression budget both use that value. Values are
overridden through ``MEDIA_UPLOADER_*`` environment variables.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import MEGABYTE, CompressionBudget
from .transport.transport_selector import DEFAULT_SIGNED_URL_PATH, DEFAULT_UPLOAD_PATH


class UploaderSettings(BaseSettings):
    """Pydantic settings container for the upload pipeline."""

    model_config = SettingsConfigDict(env_prefix="MEDIA_UPLOADER_")

    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the admin REST backend.",
    )
    access_token: str | None = Field(
        default=None,
        description="Bearer token sent to the backend upload endpoints.",
    )
    signed_url_path: str = Field(
        default=DEFAULT_SIGNED_URL_PATH,
        description="Path of the signed-upload-target endpoint.",
    )
    upload_path: str = Field(
        default=DEFAULT_UPLOAD_PATH,
        description="Path of the proxied multipart upload endpoint.",
    )
    absolute_cap_bytes: int = Field(
        default=10 * MEGABYTE,
        ge=1,
        description="Hard ceiling on raw payload size, checked before decoding.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout applied to every backend and storage request.",
    )
    max_bytes: int = Field(
        default=10 * MEGABYTE,
        ge=1,
        description="Default compression byte budget.",
    )
    max_dimension: int = Field(
        default=1600,
        ge=1,
        description="Default maximum long edge in pixels.",
    )
    initial_quality: float = Field(default=0.85, gt=0.0, le=1.0)
    quality_floor: float = Field(default=0.45, gt=0.0, le=1.0)
    max_attempts: int = Field(default=6, ge=1)

    def default_budget(self) -> CompressionBudget:
        return CompressionBudget(
            max_bytes=self.max_bytes,
            max_dimension=self.max_dimension,
            initial_quality=self.initial_quality,
            quality_floor=self.quality_floor,
            max_attempts=self.max_attempts,
        )


__all__ = ["UploaderSettings"]
