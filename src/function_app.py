"""Function app assembly — registers every function once at process start."""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.functions import timer_function
from src.host.app import FunctionApp

if TYPE_CHECKING:
    from src.config import Settings


def create_app(app_settings: Settings) -> FunctionApp:
    """Build a FunctionApp with all functions bound using *app_settings*."""
    app = FunctionApp(app_settings.app_settings())
    timer_function.register(app, run_on_startup=app_settings.timer_run_on_startup)
    return app
