"""Timer host entry point."""

import asyncio
import logging
import signal

from src.config import settings
from src.function_app import create_app
from src.host.engine import TimerHost
from src.host.monitor import ScheduleMonitor

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


def create_host() -> TimerHost:
    """Build a TimerHost serving the configured function app."""
    app = create_app(settings)
    monitor = ScheduleMonitor() if settings.schedule_monitor_enabled else None
    return TimerHost(app, monitor=monitor)


async def serve(stop_event: asyncio.Event | None = None) -> None:
    """Run the host until *stop_event* is set (SIGINT/SIGTERM by default)."""
    host = create_host()
    stop = stop_event or asyncio.Event()

    if stop_event is None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop.set)

    await host.start()
    try:
        await stop.wait()
    finally:
        await host.stop()
        logger.info("Shutdown complete")


def main() -> None:
    """Start the timer host."""
    logger.info("Starting timer host (schedule=%s)...", settings.timer_schedule)
    asyncio.run(serve())


if __name__ == "__main__":
    main()
