"""Per-invocation context handed to timer functions."""

from __future__ import annotations

import logging
import uuid
from typing import Protocol


class InvocationContext(Protocol):
    """Minimal logging capability a timer function relies on."""

    def log(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...


class LoggerInvocationContext:
    """InvocationContext backed by a stdlib logger named ``Function.<name>``.

    Args:
        function_name: Registered name of the function being invoked.
        invocation_id: Identifier of this invocation (random UUID by default).
    """

    def __init__(self, function_name: str, invocation_id: str | None = None) -> None:
        self.function_name = function_name
        self.invocation_id = invocation_id or str(uuid.uuid4())
        self._logger = logging.getLogger(f"Function.{function_name}")

    def _emit(self, level: int, message: str) -> None:
        self._logger.log(level, "[%s] %s", self.invocation_id, message)

    def log(self, message: str) -> None:
        self._emit(logging.INFO, message)

    def warn(self, message: str) -> None:
        self._emit(logging.WARNING, message)

    def error(self, message: str) -> None:
        self._emit(logging.ERROR, message)

    def debug(self, message: str) -> None:
        self._emit(logging.DEBUG, message)
