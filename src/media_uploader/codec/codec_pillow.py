"""Pillow-backed image codec."""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import ImageDecodeError
from ..models import DecodedImage
from .codec_base import LOSSY_FALLBACK_TYPE, ImageCodec, clamp_dimensions

logger = logging.getLogger(__name__)

_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/pjpeg": "JPEG",
    "image/webp": "WEBP",
    "image/png": "PNG",
}
_ALPHA_MODES = ("RGBA", "LA", "P")


def pillow_quality(quality: float) -> int:
    """Map a 0..1 quality factor onto Pillow's 1..95 scale."""

    return max(1, min(95, round(quality * 100)))


@dataclass(slots=True)
class PillowImageCodec(ImageCodec):
    """Decode and re-encode images with Pillow in a worker thread."""

    resample: Image.Resampling = Image.Resampling.LANCZOS

    async def decode(self, payload: bytes, content_type: str) -> DecodedImage:
        return await asyncio.to_thread(self._decode_sync, payload, content_type)

    async def encode(
        self,
        image: DecodedImage,
        width: int,
        height: int,
        quality: float,
        content_type: str,
    ) -> bytes:
        width, height = clamp_dimensions(image, width, height)
        return await asyncio.to_thread(
            self._encode_sync, image, width, height, quality, content_type
        )

    def _decode_sync(self, payload: bytes, content_type: str) -> DecodedImage:
        try:
            with Image.open(io.BytesIO(payload)) as source:
                source.load()
                img = ImageOps.exif_transpose(source)
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
            logger.warning(
                "upload.codec.decode_failed",
                extra={"content_type": content_type, "error": str(exc)},
            )
            raise ImageDecodeError(f"Cannot decode {content_type} payload") from exc
        width, height = img.size
        return DecodedImage(
            width=width, height=height, content_type=content_type, handle=img
        )

    def _encode_sync(
        self,
        image: DecodedImage,
        width: int,
        height: int,
        quality: float,
        content_type: str,
    ) -> bytes:
        img: Image.Image = image.handle
        fmt = _FORMATS.get(content_type.lower(), _FORMATS[LOSSY_FALLBACK_TYPE])

        if (width, height) != img.size:
            img = img.resize((width, height), self.resample)
        img = _prepare_mode(img, fmt)

        buffer = io.BytesIO()
        if fmt == "PNG":
            img.save(buffer, format=fmt, optimize=True)
        else:
            img.save(buffer, format=fmt, quality=pillow_quality(quality), optimize=True)
        return buffer.getvalue()


def _prepare_mode(img: Image.Image, fmt: str) -> Image.Image:
    if fmt == "JPEG":
        if img.mode in _ALPHA_MODES:
            # JPEG has no alpha channel: flatten onto white
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        if img.mode != "RGB":
            return img.convert("RGB")
        return img
    if fmt == "WEBP" and img.mode not in ("RGB", "RGBA"):
        return img.convert("RGBA" if img.mode in _ALPHA_MODES else "RGB")
    return img
