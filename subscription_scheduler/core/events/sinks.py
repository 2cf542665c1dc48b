"""
Scheduling event sinks.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any


def event_record(event: Any) -> dict[str, Any]:
    """Return a JSON-compatible record tagged with the event's type name."""
    if dataclasses.is_dataclass(event) and not isinstance(event, type):
        fields = dataclasses.asdict(event)
    else:
        fields = {"event": str(event)}
    return {"type": type(event).__name__, **fields}


class LoggingEventSink:
    """Logs scheduling events through the standard logging module."""

    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self._logger = logger
        self._level = level

    def on_event(self, event: Any) -> None:
        self._logger.log(self._level, "scheduling_event", extra={"event": event_record(event)})


class RecordingEventSink:
    """Keeps events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]


class FileRecorderSink:
    """Appends each event as a JSON line to a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    def on_event(self, event: Any) -> None:
        self._fh.write(json.dumps(event_record(event)) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.close()
        self._closed = True
