"""Command-line entry point for uploading local files through the pipeline."""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from dataclasses import dataclass
from pathlib import Path

from src.media_uploader.config import UploaderSettings
from src.media_uploader.errors import UploadError
from src.media_uploader.factory import create_orchestrator
from src.media_uploader.logging import configure_logging
from src.media_uploader.models import MEGABYTE, UploadRequest, UploadResult


@dataclass(slots=True)
class UploadSummary:
    path: Path
    result: UploadResult


def build_request(path: Path) -> UploadRequest:
    content_type, _ = mimetypes.guess_type(path.name)
    return UploadRequest(
        payload=path.read_bytes(),
        content_type=content_type or "application/octet-stream",
        filename=path.name,
    )


async def upload_paths(
    paths: list[Path],
    *,
    settings: UploaderSettings,
    max_bytes: int | None = None,
    max_dimension: int | None = None,
    quality: float | None = None,
) -> list[UploadSummary]:
    """Upload ``paths`` concurrently and return per-file summaries."""
    orchestrator = create_orchestrator(settings)
    budget = orchestrator.default_budget.with_overrides(
        max_bytes=max_bytes, max_dimension=max_dimension, quality=quality
    )
    results = await orchestrator.upload_many([build_request(path) for path in paths], budget)
    return [UploadSummary(path=path, result=result) for path, result in zip(paths, results)]


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload files to admin media storage.")
    parser.add_argument("paths", nargs="+", type=Path, help="Files to upload.")
    parser.add_argument("--max-mb", type=float, default=None, help="Compression byte budget in MB.")
    parser.add_argument("--max-dimension", type=int, default=None, help="Maximum long edge in pixels.")
    parser.add_argument("--quality", type=float, default=None, help="Initial quality factor (0-1).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging()
    max_bytes = int(args.max_mb * MEGABYTE) if args.max_mb else None
    try:
        summaries = asyncio.run(
            upload_paths(
                args.paths,
                settings=UploaderSettings(),
                max_bytes=max_bytes,
                max_dimension=args.max_dimension,
                quality=args.quality,
            )
        )
    except (UploadError, OSError, ValueError) as exc:
        print(f"upload failed: {exc}", file=sys.stderr)
        return 2

    for summary in summaries:
        print(f"{summary.path.name} -> {summary.result.url} ({summary.result.tier})", file=sys.stdout)
        for warning in summary.result.warnings:
            print(f"  warning: {warning}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
