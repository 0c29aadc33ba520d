import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeClock:
    """Callable clock that tests move forward by hand."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, minutes=0, seconds=0):
        self.now += timedelta(minutes=minutes, seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    """BackendClient stand-in: every request method is an AsyncMock."""
    mock = MagicMock()
    mock.select = AsyncMock(return_value=[])
    mock.insert = AsyncMock(return_value={})
    mock.update = AsyncMock(return_value={})
    mock.delete = AsyncMock(return_value=None)
    mock.rpc = AsyncMock(return_value=None)
    mock.ping = AsyncMock(return_value=True)
    mock.close = AsyncMock()
    return mock
