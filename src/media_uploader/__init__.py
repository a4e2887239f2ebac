"""Adaptive media upload pipeline.

Validates raw payloads, re-encodes images to fit a byte budget and delivers
them to storage through a signed direct URL or the backend upload proxy.
"""

from .errors import (
    CompressionUnconvergedError,
    ImageDecodeError,
    SizeExceededError,
    TransportError,
    UploadError,
)
from .factory import create_orchestrator
from .models import CompressionBudget, UploadRequest, UploadResult
from .orchestrator import UploadOrchestrator

__all__ = [
    "CompressionBudget",
    "CompressionUnconvergedError",
    "ImageDecodeError",
    "SizeExceededError",
    "TransportError",
    "UploadError",
    "UploadOrchestrator",
    "UploadRequest",
    "UploadResult",
    "create_orchestrator",
]
