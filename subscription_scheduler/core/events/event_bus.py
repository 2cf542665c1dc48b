"""
Synchronous scheduling event bus.

Sinks are called in registration order on the caller's thread. A sink that
raises aborts the emitting call.
"""
from __future__ import annotations

from typing import Any, Iterable, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a scheduling event."""


class EventBus:
    """Fans scheduling events out to registered sinks."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        if self._closed:
            raise RuntimeError("Cannot emit on a closed event bus")
        for sink in self._sinks:
            sink.on_event(event)

    def close(self) -> None:
        """Close every sink exposing close(); later calls are no-ops."""
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True

    def __enter__(self) -> EventBus:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class NullEventBus(EventBus):
    """EventBus without sinks; the default when the caller does not observe events."""

    def __init__(self) -> None:
        super().__init__(sinks=())
