from __future__ import annotations

import os

import pytest

for _name in [name for name in os.environ if name.startswith("MEDIA_UPLOADER_")]:
    os.environ.pop(_name)


@pytest.fixture(autouse=True)
def isolate_structlog():
    yield
    import structlog

    structlog.reset_defaults()
