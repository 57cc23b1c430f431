"""Tests for timer data models."""

import dataclasses
from datetime import UTC, datetime

import pytest

from src.host.models import ScheduleStatus, TimerInfo


def test_timer_info_is_read_only() -> None:
    timer = TimerInfo(fired_at=datetime.now(UTC), is_past_due=False)
    with pytest.raises(dataclasses.FrozenInstanceError):
        timer.is_past_due = True  # type: ignore[misc]


def test_timer_info_defaults() -> None:
    timer = TimerInfo(fired_at=datetime.now(UTC))
    assert timer.is_past_due is False
    assert timer.schedule_status is None


def test_schedule_status_row_roundtrip() -> None:
    status = ScheduleStatus(
        last=datetime(2025, 1, 1, 9, 0, tzinfo=UTC),
        next=datetime(2025, 1, 2, 9, 0, tzinfo=UTC),
        last_updated=datetime(2025, 1, 1, 9, 0, 1, tzinfo=UTC),
    )
    row = status.to_row("t")
    assert row[0] == "t"
    assert ScheduleStatus.from_row(row) == status


def test_schedule_status_empty_row() -> None:
    status = ScheduleStatus.from_row(("t", None, None, None))
    assert status == ScheduleStatus()


def test_naive_timestamps_are_treated_as_utc() -> None:
    status = ScheduleStatus.from_row(("t", None, "2025-01-02T09:00:00", None))
    assert status.next == datetime(2025, 1, 2, 9, 0, tzinfo=UTC)
