"""Data structures for the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

MEGABYTE = 1024 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_FILENAME = "upload"
# vector formats have no pixel surface to re-encode
NON_RASTER_IMAGE_TYPES = frozenset({"image/svg+xml"})


class StorageDriver(StrEnum):
    """Storage drivers the backend may report for a signed target."""

    DIRECT = "direct"
    PROXIED = "proxied"
    INLINE = "inline"


class TransportTier(StrEnum):
    """Transport path that delivered a payload."""

    DIRECT = "direct"
    PROXY = "proxy"


@dataclass(slots=True, frozen=True)
class UploadRequest:
    """Caller-supplied payload with its declared media type and filename."""

    payload: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
    filename: str = DEFAULT_FILENAME

    def __post_init__(self) -> None:
        if not self.content_type:
            object.__setattr__(self, "content_type", DEFAULT_CONTENT_TYPE)
        if not self.filename:
            object.__setattr__(self, "filename", DEFAULT_FILENAME)

    @property
    def size_bytes(self) -> int:
        return len(self.payload)

    @property
    def is_image(self) -> bool:
        content_type = self.content_type.lower()
        return content_type.startswith("image/") and content_type not in NON_RASTER_IMAGE_TYPES


@dataclass(slots=True, frozen=True)
class CompressionBudget:
    """Byte and pixel limits for re-encoding a single image.

    ``quality_step`` and ``dimension_scale`` drive the alternating search:
    quality is lowered first, then the long edge shrinks once quality has
    reached ``quality_floor``.
    """

    max_bytes: int = 10 * MEGABYTE
    max_dimension: int = 1600
    initial_quality: float = 0.85
    quality_floor: float = 0.45
    max_attempts: int = 6
    quality_step: float = 0.15
    dimension_scale: float = 0.8

    def __post_init__(self) -> None:
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.max_dimension <= 0:
            raise ValueError("max_dimension must be positive")
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if not 0 < self.quality_floor <= self.initial_quality <= 1:
            raise ValueError(
                "expected 0 < quality_floor <= initial_quality <= 1, "
                f"got floor={self.quality_floor} initial={self.initial_quality}"
            )
        if self.quality_step <= 0:
            raise ValueError("quality_step must be positive")
        if not 0 < self.dimension_scale < 1:
            raise ValueError("dimension_scale must be between 0 and 1")

    def with_overrides(
        self,
        *,
        max_bytes: int | None = None,
        max_dimension: int | None = None,
        quality: float | None = None,
    ) -> "CompressionBudget":
        """Return a copy tightened for a specific asset class."""

        changes: dict[str, Any] = {}
        if max_bytes is not None:
            changes["max_bytes"] = max_bytes
        if max_dimension is not None:
            changes["max_dimension"] = max_dimension
        if quality is not None:
            changes["initial_quality"] = quality
            changes["quality_floor"] = min(self.quality_floor, quality)
        return replace(self, **changes)


@dataclass(slots=True)
class DecodedImage:
    """Decoded pixel surface returned by an image codec."""

    width: int
    height: int
    content_type: str
    handle: Any = None

    @property
    def long_edge(self) -> int:
        return max(self.width, self.height)


@dataclass(slots=True)
class CompressionAttempt:
    """Parameters of one encode attempt."""

    width: int
    height: int
    quality: float
    index: int
    content_type: str


@dataclass(slots=True)
class PreparedPayload:
    """Payload ready for transport."""

    payload: bytes
    content_type: str
    filename: str
    transformed: bool = False

    @property
    def size_bytes(self) -> int:
        return len(self.payload)

    @classmethod
    def passthrough(cls, request: UploadRequest) -> "PreparedPayload":
        return cls(
            payload=request.payload,
            content_type=request.content_type,
            filename=request.filename,
        )


@dataclass(slots=True)
class SignedTarget:
    """Direct-write destination issued by the backend."""

    upload_url: str | None
    public_url: str
    driver: StorageDriver | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_available(self) -> bool:
        return bool(self.upload_url)


@dataclass(slots=True)
class UploadResult:
    """Public reference of a stored payload."""

    url: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    tier: TransportTier = TransportTier.PROXY
    content_type: str = DEFAULT_CONTENT_TYPE
    size_bytes: int = 0

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("upload result URL must not be empty")
