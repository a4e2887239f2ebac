"""Abstract image codec definition."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import DecodedImage

LOSSLESS_TYPES = frozenset({"image/png", "image/bmp", "image/tiff", "image/gif"})
LOSSY_FALLBACK_TYPE = "image/jpeg"


def is_lossless(content_type: str) -> bool:
    """Return whether re-encoding ``content_type`` ignores the quality setting."""

    return content_type.lower() in LOSSLESS_TYPES


def clamp_dimensions(image: DecodedImage, width: int, height: int) -> tuple[int, int]:
    """Clamp requested dimensions so the source is never upscaled."""

    return (
        max(1, min(width, image.width or width)),
        max(1, min(height, image.height or height)),
    )


class ImageCodec(ABC):
    """Base interface for image decode/encode backends."""

    @abstractmethod
    async def decode(self, payload: bytes, content_type: str) -> DecodedImage:
        """Decode ``payload`` and return its pixel surface."""

    @abstractmethod
    async def encode(
        self,
        image: DecodedImage,
        width: int,
        height: int,
        quality: float,
        content_type: str,
    ) -> bytes:
        """Re-encode ``image`` at the given dimensions, quality and media type."""
