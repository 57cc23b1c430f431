"""FunctionApp — registry of timer functions and their schedules."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from apscheduler.triggers.cron import CronTrigger

from src.host.models import TimerRegistration

if TYPE_CHECKING:
    from collections.abc import Mapping

    from src.host.models import TimerHandler

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"%([A-Za-z0-9_]+)%")


def resolve_app_setting(value: str, app_settings: Mapping[str, str]) -> str:
    """Replace ``%NAME%`` placeholders with values from *app_settings*.

    Raises:
        ValueError: If a referenced setting is missing or empty.
    """

    def _lookup(match: re.Match[str]) -> str:
        name = match.group(1)
        resolved = app_settings.get(name, "")
        if not resolved:
            msg = f"App setting '{name}' is not defined"
            raise ValueError(msg)
        return resolved

    return _PLACEHOLDER.sub(_lookup, value)


_CRON_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat", "sun")
_WEEKDAY_ITEM = re.compile(r"^(\*|\d+)(?:-(\d+))?(?:/(\d+))?$")


def _weekday_number(value: str) -> int:
    number = int(value)
    if number > 7:
        msg = f"Day of week must be 0-7, got {number}"
        raise ValueError(msg)
    return number


def convert_day_of_week(field: str) -> str:
    """Translate a crontab day-of-week field to APScheduler weekday names.

    Crontab counts from Sunday (0 and 7 are both Sunday) while APScheduler
    counts from Monday. Numeric values, ranges and steps are expanded to
    names, e.g. ``1-5`` -> ``mon,tue,wed,thu,fri``. Named values pass through.
    """
    if field in ("*", "?"):
        return "*"

    names: list[str] = []
    for item in field.split(","):
        match = _WEEKDAY_ITEM.match(item)
        if match is None:
            names.append(item)
            continue

        start, end, step = match.groups()
        if start == "*":
            first, last = 0, 6
        else:
            first = _weekday_number(start)
            last = _weekday_number(end) if end is not None else (6 if step else first)
        if first > last:
            msg = f"Invalid day-of-week range: {item!r}"
            raise ValueError(msg)

        for number in range(first, last + 1, int(step or 1)):
            name = _CRON_WEEKDAYS[number]
            if name not in names:
                names.append(name)
    return ",".join(names)


def build_trigger(schedule: str, timezone: str = "UTC") -> CronTrigger:
    """Convert a cron expression into an APScheduler trigger.

    Five fields are standard crontab (``minute hour day month day_of_week``).
    Six fields put seconds first (``second minute hour day month day_of_week``).
    Day of week uses crontab numbering, where 0 and 7 are Sunday.

    Raises:
        ValueError: If the expression has the wrong number of fields or a
            field APScheduler cannot parse.
    """
    fields = schedule.split()
    if len(fields) == 5:
        second = "0"
        minute, hour, day, month, day_of_week = fields
    elif len(fields) == 6:
        second, minute, hour, day, month, day_of_week = fields
    else:
        msg = f"Expected 5 or 6 cron fields, got {len(fields)}: {schedule!r}"
        raise ValueError(msg)

    return CronTrigger(
        second=second,
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=convert_day_of_week(day_of_week),
        timezone=timezone,
    )


class FunctionApp:
    """Holds timer registrations until a host picks them up.

    Args:
        app_settings: Mapping used to resolve ``%NAME%`` placeholders in
            registration options.
    """

    def __init__(self, app_settings: Mapping[str, str] | None = None) -> None:
        self._app_settings = dict(app_settings or {})
        self._timers: dict[str, TimerRegistration] = {}

    @property
    def timers(self) -> list[TimerRegistration]:
        return list(self._timers.values())

    def get_timer(self, name: str) -> TimerRegistration:
        """Return the registration for *name*. Raises KeyError if unknown."""
        return self._timers[name]

    def timer(
        self,
        name: str,
        *,
        schedule: str,
        handler: TimerHandler,
        run_on_startup: bool = False,
        use_monitor: bool = True,
    ) -> TimerRegistration:
        """Bind *handler* to a cron *schedule* under *name*.

        The schedule may reference app settings as ``%NAME%``. It is resolved
        and validated immediately so configuration errors surface at startup.
        """
        if name in self._timers:
            msg = f"Timer '{name}' is already registered"
            raise ValueError(msg)

        resolved = resolve_app_setting(schedule, self._app_settings)
        build_trigger(resolved)

        registration = TimerRegistration(
            name=name,
            schedule=resolved,
            handler=handler,
            run_on_startup=run_on_startup,
            use_monitor=use_monitor,
        )
        self._timers[name] = registration
        logger.info(
            "Registered timer '%s' (schedule=%s, run_on_startup=%s)",
            name,
            resolved,
            run_on_startup,
        )
        return registration
