"""Structured progress reporting for the scaffold pipeline.

Every component reports through a ``Reporter`` instead of printing.  The
default ``ConsoleReporter`` renders events with Rich; ``RecordingReporter``
keeps them in memory so tests can assert on event names and payloads.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol

from rich.console import Console
from rich.markup import escape

from .utils import console as default_console


class EventLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ScaffoldEvent:
    """A single progress event.

    ``name`` is a dotted identifier such as ``manifest.missing``; ``data``
    carries the machine-readable details.
    """

    name: str
    message: str = ""
    level: EventLevel = EventLevel.INFO
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class Reporter(Protocol):
    def emit(self, event: ScaffoldEvent) -> None: ...


class NullReporter:
    """Discards every event."""

    def emit(self, event: ScaffoldEvent) -> None:
        return None


class RecordingReporter:
    """Keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[ScaffoldEvent] = []

    def emit(self, event: ScaffoldEvent) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def of(self, name: str) -> list[ScaffoldEvent]:
        return [e for e in self.events if e.name == name]

    def warnings(self) -> list[ScaffoldEvent]:
        return [e for e in self.events if e.level is EventLevel.WARNING]

    def clear(self) -> None:
        self.events.clear()


_LEVEL_STYLES: dict[EventLevel, str] = {
    EventLevel.DEBUG: "dim",
    EventLevel.INFO: "cyan",
    EventLevel.SUCCESS: "bold green",
    EventLevel.WARNING: "bold yellow",
    EventLevel.ERROR: "bold red",
}


class ConsoleReporter:
    """Renders events to a Rich console.

    Process output chunks are shown as a stream of dots when ``verbose`` is
    set and suppressed otherwise; debug events only appear in verbose mode.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        self.console = console or default_console
        self.verbose = verbose
        self._dots = False

    def emit(self, event: ScaffoldEvent) -> None:
        if event.name == "process.output":
            if self.verbose:
                self.console.print(".", end="")
                self._dots = True
            return
        if event.level is EventLevel.DEBUG and not self.verbose:
            return
        if self._dots:
            self.console.print()
            self._dots = False

        style = _LEVEL_STYLES.get(event.level, "white")
        self.console.print(f"[{style}]{escape(event.message or event.name)}[/{style}]")
        if event.level is EventLevel.ERROR:
            for key in ("stdout", "stderr"):
                output = str(event.data.get(key) or "").strip()
                if output:
                    self.console.print(f"  [dim]{key}:[/dim] {escape(output[-2000:])}")


def report(
    reporter: Optional[Reporter],
    name: str,
    message: str = "",
    level: EventLevel = EventLevel.INFO,
    **data: Any,
) -> None:
    """Emit an event on *reporter*, tolerating ``None``."""
    if reporter is None:
        return
    reporter.emit(ScaffoldEvent(name=name, message=message, level=level, data=data))
