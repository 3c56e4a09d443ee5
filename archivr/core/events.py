"""Progress and diagnostic events emitted by the orchestrators."""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventKind(str, Enum):
    """Category of a user-visible notification."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    PROGRESS = "progress"


@dataclass(frozen=True)
class Event:
    """A single notification."""

    kind: EventKind
    message: str
    data: dict[str, Any] = field(default_factory=dict)


EventListener = Callable[[Event], None]


class EventChannel:
    """Ordered, unbounded event buffer the orchestrators write to.

    ``emit`` never blocks or awaits, so an orchestrator is never held up by
    whoever renders the events. Callers either ``drain()`` the buffer after
    a run or register listeners that are called synchronously on emit.

    Args:
        listeners: Callbacks notified of every event
        buffered: Keep events for ``drain()``; listener-only consumers pass False
    """

    def __init__(
        self, listeners: list[EventListener] | None = None, buffered: bool = True
    ) -> None:
        self._events: deque[Event] = deque()
        self._listeners: list[EventListener] = list(listeners or [])
        self._buffered = buffered

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def emit(self, kind: EventKind, message: str, **data: Any) -> Event:
        """Record an event and notify listeners."""
        event = Event(kind=kind, message=message, data=data)
        if self._buffered:
            self._events.append(event)
        for listener in self._listeners:
            listener(event)
        return event

    def drain(self) -> list[Event]:
        """Return buffered events in emission order and clear the buffer."""
        events = list(self._events)
        self._events.clear()
        return events

    def __len__(self) -> int:
        return len(self._events)
