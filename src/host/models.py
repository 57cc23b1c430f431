"""Timer data models — invocation signal, schedule status, registrations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from src.host.context import InvocationContext

    TimerHandler = Callable[["TimerInfo", InvocationContext], Awaitable[None]]


def _to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    # Attach UTC if naive
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class ScheduleStatus:
    """Recorded occurrences of a timer.

    Attributes:
        last: Nominal time of the most recent occurrence.
        next: Nominal time of the upcoming occurrence.
        last_updated: When this status was recorded.
    """

    last: datetime | None = None
    next: datetime | None = None
    last_updated: datetime | None = None

    def to_row(self, name: str) -> tuple:
        """Serialize to a tuple matching the ``schedule_status`` column order."""
        return (name, _to_iso(self.last), _to_iso(self.next), _to_iso(self.last_updated))

    @classmethod
    def from_row(cls, row: tuple) -> ScheduleStatus:
        """Deserialize from a SQLite row ``(name, last, next, last_updated)``."""
        return cls(
            last=_from_iso(row[1]),
            next=_from_iso(row[2]),
            last_updated=_from_iso(row[3]),
        )


@dataclass(frozen=True)
class TimerInfo:
    """One firing of a timer, handed to the function by the host.

    Attributes:
        fired_at: Instant the host began the invocation.
        is_past_due: True when the firing happened later than scheduled.
        schedule_status: Occurrences known to the host at firing time.
    """

    fired_at: datetime
    is_past_due: bool = False
    schedule_status: ScheduleStatus | None = None


@dataclass(frozen=True)
class TimerRegistration:
    """A function bound to a cron schedule."""

    name: str
    schedule: str
    handler: TimerHandler
    run_on_startup: bool = False
    use_monitor: bool = True
