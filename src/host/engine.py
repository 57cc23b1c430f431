"""TimerHost — APScheduler lifecycle and timer invocation."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.config import settings
from src.host.app import build_trigger
from src.host.context import LoggerInvocationContext
from src.host.models import ScheduleStatus, TimerInfo

if TYPE_CHECKING:
    from apscheduler.triggers.cron import CronTrigger

    from src.host.app import FunctionApp
    from src.host.models import TimerRegistration
    from src.host.monitor import ScheduleMonitor

logger = logging.getLogger(__name__)


class TimerHost:
    """Runs the timers registered on a FunctionApp.

    Args:
        app: FunctionApp holding the timer registrations.
        monitor: ScheduleMonitor used to persist schedule status. When None,
            missed occurrences across restarts are not detected.
        timezone: IANA timezone the cron expressions are evaluated in.
        past_due_tolerance: Seconds a firing may lag its nominal time before
            it is reported as past due.
    """

    def __init__(
        self,
        app: FunctionApp,
        monitor: ScheduleMonitor | None = None,
        timezone: str | None = None,
        past_due_tolerance: float | None = None,
    ) -> None:
        self._app = app
        self._monitor = monitor
        self._timezone = timezone or settings.scheduler_timezone
        if past_due_tolerance is None:
            past_due_tolerance = settings.past_due_tolerance_seconds
        self._tolerance = timedelta(seconds=past_due_tolerance)
        self._scheduler = AsyncIOScheduler(timezone=self._timezone)
        self._triggers: dict[str, CronTrigger] = {}
        self._status: dict[str, ScheduleStatus] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def get_status(self, name: str) -> ScheduleStatus | None:
        """Return the in-memory schedule status of a timer."""
        return self._status.get(name)

    # -- Lifecycle -------------------------------------------------------------

    async def start(self) -> None:
        """Create jobs for every registered timer and start the scheduler.

        Timers whose stored next occurrence already passed fire immediately as
        past due. Otherwise timers registered with ``run_on_startup`` fire once.
        """
        now = self._now()
        startup: list[tuple[str, bool]] = []
        pending: dict[str, ScheduleStatus | None] = {}

        for registration in self._app.timers:
            name = registration.name
            trigger = build_trigger(registration.schedule, self._timezone)
            self._triggers[name] = trigger

            stored = None
            if self._uses_monitor(registration):
                stored = await self._monitor.get_status(name)

            if stored is not None and stored.next is not None and stored.next < now:
                logger.warning(
                    "Timer '%s' missed its occurrence at %s",
                    name,
                    stored.next.isoformat(),
                )
                self._status[name] = stored
                startup.append((name, True))
            else:
                pending[name] = stored
                if registration.run_on_startup:
                    startup.append((name, False))

            self._scheduler.add_job(
                self._run_scheduled,
                trigger=trigger,
                id=name,
                name=name,
                args=[name],
                misfire_grace_time=None,
                coalesce=True,
                replace_existing=True,
            )

        self._scheduler.start()
        self._running = True

        # The job's next_run_time is only known once the scheduler has started
        for name, stored in pending.items():
            status = ScheduleStatus(
                last=stored.last if stored else None,
                next=self._scheduler.get_job(name).next_run_time,
                last_updated=self._now(),
            )
            await self._record(self._app.get_timer(name), status)

        logger.info(
            "Timer host started with %d timer(s) (tz=%s)",
            len(self._triggers),
            self._timezone,
        )

        for name, missed in startup:
            if missed:
                nominal = self._status[name].next
                await self._invoke(
                    name, is_past_due=True, nominal=nominal, reason="Missed occurrence"
                )
            else:
                await self._invoke(name, is_past_due=False, reason="Run on startup")

    async def stop(self) -> None:
        """Shut down the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Timer host stopped")

    # -- Invocation ------------------------------------------------------------

    async def trigger(self, name: str) -> None:
        """Fire a registered timer now. Raises KeyError for unknown names."""
        self._app.get_timer(name)
        await self._invoke(name, is_past_due=False, reason="Manual")

    async def _run_scheduled(self, name: str) -> None:
        """Callback invoked by APScheduler at each cron occurrence."""
        now = self._now()
        status = self._status.get(name)
        nominal = status.next if status else None
        is_past_due = nominal is not None and now - nominal > self._tolerance
        await self._invoke(name, is_past_due=is_past_due, nominal=nominal, reason="Timer fired")

    async def _invoke(
        self,
        name: str,
        *,
        is_past_due: bool,
        reason: str,
        nominal: datetime | None = None,
    ) -> None:
        registration = self._app.get_timer(name)
        fired_at = self._now()
        timer = TimerInfo(
            fired_at=fired_at,
            is_past_due=is_past_due,
            schedule_status=self._status.get(name),
        )
        context = LoggerInvocationContext(name)

        logger.info(
            "Executing '%s' (Reason='%s', Id=%s)",
            name,
            reason,
            context.invocation_id,
        )
        try:
            await registration.handler(timer, context)
            logger.info("Executed '%s' (Succeeded, Id=%s)", name, context.invocation_id)
        except Exception:
            logger.exception("Executed '%s' (Failed, Id=%s)", name, context.invocation_id)

        # Manual and startup runs leave the schedule untouched
        if nominal is not None:
            status = ScheduleStatus(
                last=nominal,
                next=self._next_run_time(name, fired_at),
                last_updated=fired_at,
            )
            await self._record(registration, status)

    # -- Internal --------------------------------------------------------------

    def _now(self) -> datetime:
        return datetime.now(UTC)

    def _next_run_time(self, name: str, now: datetime) -> datetime | None:
        job = self._scheduler.get_job(name) if self._running else None
        if job is not None:
            return job.next_run_time
        return self._triggers[name].get_next_fire_time(None, now)

    def _uses_monitor(self, registration: TimerRegistration) -> bool:
        return self._monitor is not None and registration.use_monitor

    async def _record(self, registration: TimerRegistration, status: ScheduleStatus) -> None:
        self._status[registration.name] = status
        if self._uses_monitor(registration):
            await self._monitor.update_status(registration.name, status)
