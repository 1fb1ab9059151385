"""Toasts — transient success/failure feedback for the operator.

Learn: the portal surfaced every mutation outcome as a toast. Here a
Toaster records them (tests assert on .toasts), logs each one, and
forwards to any registered sink — the CLI registers one that prints
in colour.
"""

from dataclasses import dataclass
from typing import Callable

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class Toast:
    level: str  # success | error | info
    message: str


ToastSink = Callable[[Toast], None]


class Toaster:
    def __init__(self):
        self.toasts: list[Toast] = []
        self._sinks: list[ToastSink] = []

    def add_sink(self, sink: ToastSink) -> None:
        self._sinks.append(sink)

    def _emit(self, level: str, message: str) -> None:
        toast = Toast(level, message)
        self.toasts.append(toast)
        log = logger.warning if level == "error" else logger.info
        log("toast", level=level, message=message)
        for sink in self._sinks:
            sink(toast)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def info(self, message: str) -> None:
        self._emit("info", message)

    @property
    def last(self):
        return self.toasts[-1] if self.toasts else None

    def errors(self) -> list[str]:
        return [t.message for t in self.toasts if t.level == "error"]
