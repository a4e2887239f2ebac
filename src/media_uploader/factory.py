"""Factory wiring the default upload pipeline."""

from __future__ import annotations

from .codec.codec_base import ImageCodec
from .codec.codec_pillow import PillowImageCodec
from .compressor import AdaptiveCompressor
from .config import UploaderSettings
from .guard import SizeGuard
from .orchestrator import UploadOrchestrator
from .transport.transport_selector import AccessToken, TransportSelector


def create_orchestrator(
    settings: UploaderSettings | None = None,
    *,
    access_token: AccessToken = None,
    codec: ImageCodec | None = None,
) -> UploadOrchestrator:
    """Build an :class:`UploadOrchestrator` from settings.

    ``access_token`` takes precedence over ``settings.access_token`` and may
    be a callable so long-lived orchestrators pick up refreshed tokens.
    """
    settings = settings or UploaderSettings()
    transport = TransportSelector(
        api_base_url=settings.api_base_url,
        access_token=access_token if access_token is not None else settings.access_token,
        signed_url_path=settings.signed_url_path,
        upload_path=settings.upload_path,
        timeout_seconds=settings.request_timeout_seconds,
    )
    return UploadOrchestrator(
        guard=SizeGuard(settings.absolute_cap_bytes),
        compressor=AdaptiveCompressor(codec or PillowImageCodec()),
        transport=transport,
        default_budget=settings.default_budget(),
    )
