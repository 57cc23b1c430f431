"""Tests for the timer-triggered function."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from src.functions.timer_function import FUNCTION_NAME, register, timer_function
from src.host.app import FunctionApp
from src.host.context import LoggerInvocationContext
from src.host.models import TimerInfo


def _timer(is_past_due: bool = False) -> TimerInfo:
    return TimerInfo(fired_at=datetime(2025, 1, 1, tzinfo=UTC), is_past_due=is_past_due)


def _logged_timestamp(context: MagicMock) -> datetime:
    message = context.log.call_args.args[0]
    return datetime.fromisoformat(message.rsplit(": ", 1)[1])


# -- Handler -------------------------------------------------------------------


async def test_on_time_logs_once_without_warning(context: MagicMock) -> None:
    await timer_function(_timer(is_past_due=False), context)

    assert context.log.call_count == 1
    context.warn.assert_not_called()


async def test_past_due_logs_and_warns(context: MagicMock) -> None:
    await timer_function(_timer(is_past_due=True), context)

    assert context.log.call_count == 1
    context.warn.assert_called_once_with("The timer is running late!")


async def test_logs_absolute_timestamp(context: MagicMock) -> None:
    await timer_function(_timer(), context)

    logged = _logged_timestamp(context)
    assert logged.tzinfo is not None


async def test_timestamp_is_execution_time_not_fire_time(context: MagicMock) -> None:
    before = datetime.now(UTC)
    # fired_at is far in the past; the logged time must still be "now"
    await timer_function(_timer(), context)
    after = datetime.now(UTC)

    logged = _logged_timestamp(context)
    assert before - timedelta(seconds=1) <= logged <= after + timedelta(seconds=1)


@pytest.mark.parametrize("is_past_due", [True, False])
async def test_never_raises(context: MagicMock, is_past_due: bool) -> None:
    assert await timer_function(_timer(is_past_due), context) is None


async def test_repeated_calls_are_independent() -> None:
    first, second = MagicMock(), MagicMock()

    await asyncio.gather(
        timer_function(_timer(is_past_due=True), first),
        timer_function(_timer(is_past_due=False), second),
    )

    assert first.log.call_count == 1
    assert first.warn.call_count == 1
    assert second.log.call_count == 1
    second.warn.assert_not_called()


async def test_writes_through_logger_context(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger=f"Function.{FUNCTION_NAME}")
    context = LoggerInvocationContext(FUNCTION_NAME, invocation_id="abc")

    await timer_function(_timer(is_past_due=True), context)

    levels = [r.levelname for r in caplog.records if r.name == f"Function.{FUNCTION_NAME}"]
    assert levels == ["INFO", "WARNING"]


# -- Registration --------------------------------------------------------------


def test_register_resolves_schedule_from_settings() -> None:
    app = FunctionApp({"TIMER_SCHEDULE": "*/30 * * * * *"})
    register(app)

    registration = app.get_timer(FUNCTION_NAME)
    assert registration.schedule == "*/30 * * * * *"
    assert registration.handler is timer_function
    assert registration.run_on_startup is True


def test_register_run_on_startup_disabled() -> None:
    app = FunctionApp({"TIMER_SCHEDULE": "0 9 * * *"})
    register(app, run_on_startup=False)

    assert app.get_timer(FUNCTION_NAME).run_on_startup is False


def test_register_without_schedule_setting_raises() -> None:
    app = FunctionApp({})
    with pytest.raises(ValueError, match="TIMER_SCHEDULE"):
        register(app)
