from __future__ import annotations

import pytest
from loguru import logger

from markstyle.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
