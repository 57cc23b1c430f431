"""Local timer host — registrations, invocation context, scheduling, status."""

from src.host.app import FunctionApp, build_trigger, resolve_app_setting
from src.host.context import InvocationContext, LoggerInvocationContext
from src.host.engine import TimerHost
from src.host.models import ScheduleStatus, TimerInfo, TimerRegistration
from src.host.monitor import ScheduleMonitor

__all__ = [
    "FunctionApp",
    "InvocationContext",
    "LoggerInvocationContext",
    "ScheduleMonitor",
    "ScheduleStatus",
    "TimerHost",
    "TimerInfo",
    "TimerRegistration",
    "build_trigger",
    "resolve_app_setting",
]
