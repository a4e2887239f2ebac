"""Bounded iterative image compression."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePath

from .codec.codec_base import LOSSY_FALLBACK_TYPE, ImageCodec, is_lossless
from .errors import CompressionUnconvergedError
from .models import (
    CompressionAttempt,
    CompressionBudget,
    DecodedImage,
    PreparedPayload,
    UploadRequest,
)

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/png": ".png",
}


def scale_to_long_edge(image: DecodedImage, long_edge: int) -> tuple[int, int]:
    """Return dimensions whose long edge is ``long_edge``, keeping aspect ratio."""

    source = image.long_edge
    if not source:
        return max(1, image.width), max(1, image.height)
    scale = long_edge / source
    return max(1, round(image.width * scale)), max(1, round(image.height * scale))


def output_type_for(content_type: str) -> str:
    if is_lossless(content_type):
        return LOSSY_FALLBACK_TYPE
    return content_type


def rename_for_type(filename: str, content_type: str) -> str:
    extension = _EXTENSIONS.get(content_type)
    path = PurePath(filename)
    suffix = path.suffix.lower()
    if extension is None or suffix == extension:
        return filename
    if extension == ".jpg" and suffix == ".jpeg":
        return filename
    if suffix:
        return str(path.with_suffix(extension))
    return filename + extension


@dataclass(slots=True)
class AdaptiveCompressor:
    """Shrink an image until it fits a :class:`CompressionBudget`.

    Quality is lowered first in ``quality_step`` increments down to
    ``quality_floor``; after that only the long edge shrinks by
    ``dimension_scale`` per attempt. Attempts are strictly sequential since
    each one depends on the size produced by the previous one.
    """

    codec: ImageCodec
    log: logging.Logger = field(default_factory=lambda: logger)

    async def compress(
        self, request: UploadRequest, budget: CompressionBudget
    ) -> PreparedPayload:
        image = await self.codec.decode(request.payload, request.content_type)
        full_size = await self._encode_full_size(image, budget)
        if full_size is not None and request.size_bytes > budget.max_bytes:
            self.log.info(
                "upload.compress.reencoded",
                extra={
                    "upload_filename": request.filename,
                    "original_bytes": request.size_bytes,
                    "size_bytes": len(full_size),
                },
            )
            return PreparedPayload(
                payload=full_size,
                content_type=request.content_type,
                filename=request.filename,
                transformed=True,
            )
        if full_size is not None:
            self.log.info(
                "upload.compress.unchanged",
                extra={
                    "upload_filename": request.filename,
                    "size_bytes": request.size_bytes,
                    "width": image.width,
                    "height": image.height,
                },
            )
            return PreparedPayload.passthrough(request)

        output_type = output_type_for(request.content_type)
        filename = request.filename
        if output_type != request.content_type:
            filename = rename_for_type(filename, output_type)
        quality = budget.initial_quality
        target_edge = min(budget.max_dimension, image.long_edge)

        for index in range(budget.max_attempts):
            width, height = scale_to_long_edge(image, target_edge)
            attempt = CompressionAttempt(
                width=width,
                height=height,
                quality=quality,
                index=index,
                content_type=output_type,
            )
            encoded = await self.codec.encode(
                image, attempt.width, attempt.height, attempt.quality, attempt.content_type
            )
            self.log.debug(
                "upload.compress.attempt",
                extra={
                    "attempt": attempt.index,
                    "width": attempt.width,
                    "height": attempt.height,
                    "quality": attempt.quality,
                    "size_bytes": len(encoded),
                    "max_bytes": budget.max_bytes,
                },
            )
            if len(encoded) <= budget.max_bytes:
                self.log.info(
                    "upload.compress.converged",
                    extra={
                        "upload_filename": request.filename,
                        "attempts": index + 1,
                        "original_bytes": request.size_bytes,
                        "size_bytes": len(encoded),
                        "content_type": output_type,
                    },
                )
                return PreparedPayload(
                    payload=encoded,
                    content_type=output_type,
                    filename=filename,
                    transformed=True,
                )

            if quality > budget.quality_floor:
                quality = round(max(budget.quality_floor, quality - budget.quality_step), 4)
            else:
                target_edge = max(1, round(target_edge * budget.dimension_scale))

        self.log.warning(
            "upload.compress.unconverged",
            extra={
                "upload_filename": request.filename,
                "attempts": budget.max_attempts,
                "max_bytes": budget.max_bytes,
            },
        )
        raise CompressionUnconvergedError(budget.max_bytes, budget.max_attempts)

    async def _encode_full_size(
        self, image: DecodedImage, budget: CompressionBudget
    ) -> bytes | None:
        """Return the full-size re-encode when it fits the budget, else ``None``."""
        if image.long_edge and image.long_edge > budget.max_dimension:
            return None
        full_size = await self.codec.encode(
            image, image.width, image.height, budget.initial_quality, image.content_type
        )
        if len(full_size) > budget.max_bytes:
            return None
        return full_size
