"""Public entry point of the upload pipeline."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable

from .compressor import AdaptiveCompressor
from .guard import SizeGuard
from .models import CompressionBudget, PreparedPayload, UploadRequest, UploadResult
from .transport.transport_selector import TransportSelector

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UploadOrchestrator:
    """Validate, compress and deliver a single payload.

    Either a complete :class:`UploadResult` is returned or an
    :class:`~media_uploader.errors.UploadError` is raised; no intermediate
    state is exposed to the caller.
    """

    guard: SizeGuard
    compressor: AdaptiveCompressor
    transport: TransportSelector
    default_budget: CompressionBudget = field(default_factory=CompressionBudget)

    async def upload(
        self,
        payload: bytes,
        content_type: str,
        filename: str,
        budget: CompressionBudget | None = None,
    ) -> UploadResult:
        request = UploadRequest(payload=payload, content_type=content_type, filename=filename)
        return await self.upload_request(request, budget)

    async def upload_request(
        self, request: UploadRequest, budget: CompressionBudget | None = None
    ) -> UploadResult:
        self.guard.check(request.size_bytes)

        if request.is_image:
            prepared = await self.compressor.compress(request, budget or self.default_budget)
        else:
            prepared = PreparedPayload.passthrough(request)

        result = await self.transport.deliver(prepared)
        logger.info(
            "upload.completed",
            extra={
                "upload_filename": prepared.filename,
                "tier": result.tier,
                "transformed": prepared.transformed,
                "size_bytes": prepared.size_bytes,
            },
        )
        return result

    async def upload_many(
        self,
        requests: Iterable[UploadRequest],
        budget: CompressionBudget | None = None,
    ) -> list[UploadResult]:
        """Run independent uploads concurrently, preserving input order.

        The first failure cancels the uploads still in flight and is raised
        as is.
        """

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self.upload_request(request, budget))
                    for request in requests
                ]
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from None
        return [task.result() for task in tasks]
