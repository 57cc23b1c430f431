"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.host.app import FunctionApp
from src.host.monitor import ScheduleMonitor


@pytest.fixture
def context() -> MagicMock:
    """A fake InvocationContext recording log/warn calls."""
    ctx = MagicMock()
    ctx.log = MagicMock()
    ctx.warn = MagicMock()
    return ctx


@pytest.fixture
def handler() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def app() -> FunctionApp:
    return FunctionApp({"TIMER_SCHEDULE": "0 9 * * *"})


@pytest.fixture
def monitor(tmp_path) -> ScheduleMonitor:
    """Create a ScheduleMonitor backed by a temp database."""
    return ScheduleMonitor(db_path=tmp_path / "status.db")
