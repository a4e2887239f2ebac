import io
import json
import logging

import pytest
import structlog

from src.media_uploader.logging import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_sets_up_structlog(restore_root_logger) -> None:
    configure_logging(level=logging.DEBUG, stream=io.StringIO())

    assert structlog.is_configured()
    assert logging.getLogger().level == logging.DEBUG


def test_stdlib_records_render_as_json_with_extra_fields(restore_root_logger) -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)

    logging.getLogger("src.media_uploader.guard").warning(
        "upload.guard.too_large", extra={"size_bytes": 5, "ceiling_bytes": 4}
    )

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["event"] == "upload.guard.too_large"
    assert record["level"] == "warning"
    assert record["logger"] == "src.media_uploader.guard"
    assert record["size_bytes"] == 5
    assert record["ceiling_bytes"] == 4
    assert "timestamp" in record


def test_structlog_loggers_share_the_json_handler(restore_root_logger) -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)

    structlog.get_logger("media_uploader.cli").info("upload.cli.started", files=2)

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["event"] == "upload.cli.started"
    assert record["files"] == 2
    assert record["level"] == "info"
