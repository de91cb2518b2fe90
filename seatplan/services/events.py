"""
Input events and scoped listener subscriptions
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]

@dataclass(frozen=True)
class PointerEvent:
    pointer_id: int
    client_x: float
    client_y: float

@dataclass(frozen=True)
class KeyEvent:
    key: str

class EventHub:
    """Registry of listeners by event type, standing in for the window"""

    def __init__(self):
        # event type -> handlers, in subscription order
        self.listeners: Dict[str, List[Handler]] = {}

    def add_listener(self, event_type: str, handler: Handler) -> None:
        self.listeners.setdefault(event_type, []).append(handler)
        logger.debug(f"Listener added for {event_type}. Total listeners: {len(self.listeners[event_type])}")

    def remove_listener(self, event_type: str, handler: Handler) -> None:
        handlers = self.listeners.get(event_type)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self.listeners[event_type]

    def dispatch(self, event_type: str, event: Any) -> int:
        """Deliver an event to every listener; returns how many received it"""
        # Handlers may unsubscribe while running
        handlers = list(self.listeners.get(event_type, []))
        for handler in handlers:
            handler(event)
        return len(handlers)

    def listener_count(self, event_type: str) -> int:
        return len(self.listeners.get(event_type, []))

class ScopedListener:
    """A subscription that lives between ``acquire`` and ``release``.

    ``enabled`` can be switched while acquired: disabling detaches the
    handler, re-enabling attaches it again. Usable as a context manager.
    """

    def __init__(self, hub: EventHub, event_type: str, handler: Handler, enabled: bool = True):
        self.hub = hub
        self.event_type = event_type
        self.handler = handler
        self._enabled = enabled
        self._acquired = False
        self._attached = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value
        self._sync()

    @property
    def active(self) -> bool:
        return self._attached

    def acquire(self) -> "ScopedListener":
        self._acquired = True
        self._sync()
        return self

    def release(self) -> None:
        self._acquired = False
        self._sync()

    def _sync(self) -> None:
        should_attach = self._acquired and self._enabled
        if should_attach and not self._attached:
            self.hub.add_listener(self.event_type, self.handler)
            self._attached = True
        elif not should_attach and self._attached:
            self.hub.remove_listener(self.event_type, self.handler)
            self._attached = False

    def __enter__(self) -> "ScopedListener":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
