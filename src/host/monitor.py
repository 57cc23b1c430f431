"""ScheduleMonitor — aiosqlite persistence of timer schedule status."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from src.config import settings
from src.host.models import ScheduleStatus

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS schedule_status (
    name TEXT PRIMARY KEY,
    last TEXT,
    next TEXT,
    last_updated TEXT
)
"""


class ScheduleMonitor:
    """Persists the last/next occurrences of each timer in SQLite.

    Lets the host notice occurrences that were missed while it was down.
    Pass an explicit *db_path* for test isolation.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or settings.schedule_monitor_path
        self._initialised = False

    async def _connect(self) -> aiosqlite.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        db = await aiosqlite.connect(str(self._db_path))
        if not self._initialised:
            await db.execute(_CREATE_TABLE)
            await db.commit()
            self._initialised = True
        return db

    async def get_status(self, name: str) -> ScheduleStatus | None:
        """Fetch the stored status for a timer, or None if never recorded."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT name, last, next, last_updated FROM schedule_status WHERE name = ?",
                (name,),
            )
            row = await cursor.fetchone()
            return ScheduleStatus.from_row(row) if row else None
        finally:
            await db.close()

    async def update_status(self, name: str, status: ScheduleStatus) -> None:
        """Insert or replace the status for a timer."""
        db = await self._connect()
        try:
            await db.execute(
                """
                INSERT INTO schedule_status (name, last, next, last_updated)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    last = excluded.last,
                    next = excluded.next,
                    last_updated = excluded.last_updated
                """,
                status.to_row(name),
            )
            await db.commit()
            logger.debug("Recorded schedule status for %s: next=%s", name, status.next)
        finally:
            await db.close()

    async def clear(self, name: str) -> bool:
        """Forget a timer's status. Returns True if a row was removed."""
        db = await self._connect()
        try:
            cursor = await db.execute("DELETE FROM schedule_status WHERE name = ?", (name,))
            await db.commit()
            return cursor.rowcount > 0
        finally:
            await db.close()
