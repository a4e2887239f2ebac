"""Tiered transport of prepared payloads to durable storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from ..errors import TransportError
from ..models import PreparedPayload, SignedTarget, TransportTier, UploadResult
from ..schemas import ProxyUploadResponse, SignedTargetResponse

logger = logging.getLogger(__name__)

AccessToken = str | Callable[[], str | None] | None

DEFAULT_SIGNED_URL_PATH = "/api/v1/admin/uploads/signed-url"
DEFAULT_UPLOAD_PATH = "/api/v1/admin/uploads"
GENERIC_FAILURE_MESSAGE = "Upload failed"


@dataclass(slots=True)
class TransportSelector:
    """Deliver payloads via a signed direct URL, falling back to the backend proxy.

    The direct tier is best effort: a declined target, a network error or a
    rejected PUT only means the proxy tier is used instead. Proxy failures
    raise :class:`TransportError`.
    """

    api_base_url: str
    access_token: AccessToken = None
    signed_url_path: str = DEFAULT_SIGNED_URL_PATH
    upload_path: str = DEFAULT_UPLOAD_PATH
    timeout_seconds: float = 30.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def deliver(self, payload: PreparedPayload) -> UploadResult:
        result = await self._try_direct(payload)
        if result is not None:
            return result
        return await self._upload_via_proxy(payload)

    async def _try_direct(self, payload: PreparedPayload) -> UploadResult | None:
        try:
            target = await self._request_signed_target(payload)
            if not target.is_available or not target.public_url:
                self.log.info(
                    "upload.transport.direct_declined",
                    extra={"upload_filename": payload.filename, "driver": target.driver},
                )
                return None
            await self._put(target, payload)
        except Exception as exc:
            self.log.warning(
                "upload.transport.direct_unavailable",
                extra={"upload_filename": payload.filename, "error": str(exc)},
            )
            return None

        self.log.info(
            "upload.transport.direct_success",
            extra={"upload_filename": payload.filename, "size_bytes": payload.size_bytes},
        )
        return UploadResult(
            url=target.public_url,
            warnings=target.warnings,
            tier=TransportTier.DIRECT,
            content_type=payload.content_type,
            size_bytes=payload.size_bytes,
        )

    async def _request_signed_target(self, payload: PreparedPayload) -> SignedTarget:
        params = {"filename": payload.filename, "contentType": payload.content_type}
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.get(
                self._url(self.signed_url_path),
                params=params,
                headers=self._auth_headers(),
            )
        _ensure_success(response)
        return SignedTargetResponse.model_validate(response.json()).to_target()

    async def _put(self, target: SignedTarget, payload: PreparedPayload) -> None:
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.put(
                target.upload_url,
                content=payload.payload,
                headers={"Content-Type": payload.content_type},
            )
        _ensure_success(response)

    async def _upload_via_proxy(self, payload: PreparedPayload) -> UploadResult:
        files = {"file": (payload.filename, payload.payload, payload.content_type)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self._url(self.upload_path),
                    headers=self._auth_headers(),
                    files=files,
                )
        except httpx.HTTPError as exc:
            self.log.error(
                "upload.transport.proxy_unreachable",
                extra={"upload_filename": payload.filename, "error": str(exc)},
            )
            raise TransportError(f"{GENERIC_FAILURE_MESSAGE}: {exc}") from exc

        if not _is_success(response.status_code):
            detail = _extract_error(response)
            self.log.error(
                "upload.transport.proxy_error status=%s detail=%s",
                response.status_code,
                detail,
                extra={"upload_filename": payload.filename, "http_status": response.status_code},
            )
            raise TransportError(
                detail or GENERIC_FAILURE_MESSAGE, status_code=response.status_code
            )

        try:
            body = ProxyUploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportError(
                "Upload response is invalid", status_code=response.status_code
            ) from exc

        self.log.info(
            "upload.transport.proxy_success",
            extra={"upload_filename": payload.filename, "size_bytes": payload.size_bytes},
        )
        return UploadResult(
            url=body.url,
            warnings=tuple(body.warnings or ()),
            tier=TransportTier.PROXY,
            content_type=payload.content_type,
            size_bytes=payload.size_bytes,
        )

    def _url(self, path: str) -> str:
        return f"{self.api_base_url.rstrip('/')}/{path.lstrip('/')}"

    def _auth_headers(self) -> dict[str, str]:
        token = self.access_token() if callable(self.access_token) else self.access_token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _ensure_success(response: Any) -> None:
    if not _is_success(response.status_code):
        raise TransportError(
            f"Unexpected status {response.status_code}", status_code=response.status_code
        )


def _extract_error(response: Any) -> str:
    try:
        data = response.json()
    except ValueError:
        return (response.text or "").strip()
    if not isinstance(data, dict):
        return str(data)
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    for key in ("message", "detail"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
