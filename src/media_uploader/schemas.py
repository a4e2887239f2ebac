"""Pydantic models for backend upload responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models import SignedTarget, StorageDriver


def _driver(value: str | None) -> StorageDriver | None:
    if value is None:
        return None
    try:
        return StorageDriver(value)
    except ValueError:
        return None


class SignedTargetResponse(BaseModel):
    """Body of the signed-upload-target endpoint.

    ``uploadUrl`` is ``null`` when the backend has no direct-write storage
    configured; unknown ``driver`` tags are tolerated and dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    upload_url: str | None = Field(default=None, alias="uploadUrl")
    public_url: str = Field(default="", alias="publicUrl")
    driver: str | None = None
    warnings: list[str] | None = None

    def to_target(self) -> SignedTarget:
        return SignedTarget(
            upload_url=self.upload_url or None,
            public_url=self.public_url,
            driver=_driver(self.driver),
            warnings=tuple(self.warnings or ()),
        )


class ProxyUploadResponse(BaseModel):
    """Body of the proxied upload endpoint."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(min_length=1)
    warnings: list[str] | None = None


__all__ = ["ProxyUploadResponse", "SignedTargetResponse"]
