"""Raw payload size validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import SizeExceededError
from .models import MEGABYTE

logger = logging.getLogger(__name__)

DEFAULT_CEILING_BYTES = 10 * MEGABYTE


def ensure_within_ceiling(size_bytes: int, ceiling_bytes: int) -> None:
    """Raise :class:`SizeExceededError` when ``size_bytes`` exceeds the ceiling."""

    if size_bytes > ceiling_bytes:
        logger.warning(
            "upload.guard.too_large",
            extra={"size_bytes": size_bytes, "limit_bytes": ceiling_bytes},
        )
        raise SizeExceededError(size_bytes, ceiling_bytes)


@dataclass(slots=True)
class SizeGuard:
    """Reject payloads above the absolute platform limit before decoding."""

    ceiling_bytes: int = DEFAULT_CEILING_BYTES

    def check(self, size_bytes: int) -> None:
        ensure_within_ceiling(size_bytes, self.ceiling_bytes)
