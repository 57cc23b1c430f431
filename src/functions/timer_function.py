"""Timer-triggered function that logs each scheduled run.

The schedule comes from the ``TIMER_SCHEDULE`` app setting. ``run_on_startup``
fires the function once when the host starts, which helps during development
but should normally be turned off in production so deployments and restarts
don't cause unexpected runs.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.host.app import FunctionApp
    from src.host.context import InvocationContext
    from src.host.models import TimerInfo

FUNCTION_NAME = "timerFunction"
SCHEDULE = "%TIMER_SCHEDULE%"


async def timer_function(timer: TimerInfo, context: InvocationContext) -> None:
    context.log(f"Python Timer trigger function executed at: {datetime.now(UTC).isoformat()}")

    if timer.is_past_due:
        context.warn("The timer is running late!")


def register(app: FunctionApp, *, run_on_startup: bool = True) -> None:
    """Bind ``timer_function`` to its schedule on *app*."""
    app.timer(
        FUNCTION_NAME,
        schedule=SCHEDULE,
        run_on_startup=run_on_startup,
        handler=timer_function,
    )
