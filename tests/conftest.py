from __future__ import annotations

import sys
from typing import Iterator

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    """CLI runs replace loguru sinks; put back a plain stderr sink afterwards."""
    yield
    logger.remove()
    logger.add(lambda message: sys.stderr.write(message), level="WARNING")
