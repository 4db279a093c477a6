"""Pluggable output sinks used for verbose and diagnostic logging."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

_SEVERITIES = ("info", "success", "warn", "error")


@runtime_checkable
class Output(Protocol):
    """Anything exposing the four severity methods can receive SDK log lines."""

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleOutput:
    """Default sink: bold, ANSI-coloured lines on stdout."""

    RED = "\033[31m"
    YELLOW = "\033[33m"
    GREEN = "\033[32m"
    WHITE = "\033[37m"
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def _write(self, colour: str, message: str) -> None:
        print(f"{colour}{self.BOLD}{message}{self.RESET}", flush=True)

    def info(self, message: str) -> None:
        self._write(self.WHITE, message)

    def success(self, message: str) -> None:
        self._write(self.GREEN, message)

    def warn(self, message: str) -> None:
        self._write(self.YELLOW, message)

    def error(self, message: str) -> None:
        self._write(self.RED, message)


class LoggingOutput:
    """Route SDK output into a standard :mod:`logging` logger.

    Args:
        logger: Target logger; defaults to the ``risc_sdk`` logger.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("risc_sdk")

    def info(self, message: str) -> None:
        self.logger.info(message)

    def success(self, message: str) -> None:
        self.logger.info(message)

    def warn(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)


def resolve_output(output: Any | None) -> Output:
    """Return *output* if it provides all four severities, else a :class:`ConsoleOutput`."""
    if output is None:
        return ConsoleOutput()
    if all(callable(getattr(output, name, None)) for name in _SEVERITIES):
        return output  # type: ignore[no-any-return]
    fallback = ConsoleOutput()
    fallback.warn("Custom output is missing one of info/success/warn/error; using console output")
    return fallback
