"""
Typed publish/subscribe bus.

Event types are Enum members. Handlers are held weakly by default, so a
listener that goes away stops receiving events without unsubscribing.
A publish made while handlers are running is delivered after the
current event has reached every handler.

Usage:
    class InventoryEvent(Enum):
        ITEM_MOVED = auto()

    event_bus.subscribe(InventoryEvent.ITEM_MOVED, listener.on_item_moved)
    event_bus.publish(InventoryEvent.ITEM_MOVED, item_id="sword", target="mainHand")
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    A published event.

    Attributes:
        type: Enum member naming the event
        data: Keyword arguments given to ``publish``
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]

# Zero-argument callable returning the handler, or None once it is gone
_Resolver = Callable[[], Optional[EventHandler]]


def _strong(handler: EventHandler) -> _Resolver:
    return lambda: handler


def _weak(handler: EventHandler) -> _Resolver:
    if hasattr(handler, "__self__"):
        return WeakMethod(handler)
    return ref(handler)


class EventBus:
    """Routes published events to the handlers subscribed to their type."""

    def __init__(self):
        self._subscribers: dict[Enum, list[_Resolver]] = {}
        self._pending: deque[Event] = deque()
        self._dispatching = False

    def subscribe(
        self, event_type: Enum, handler: EventHandler, weak: bool = True
    ) -> None:
        """
        Register a handler for an event type.

        Handlers run in subscription order. With ``weak`` (the default)
        the bus does not keep the handler alive; pass ``weak=False`` for
        lambdas and other callables nothing else references.
        """
        resolver = _weak(handler) if weak else _strong(handler)
        self._subscribers.setdefault(event_type, []).append(resolver)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        resolvers = self._subscribers.get(event_type)
        if resolvers:
            resolvers[:] = [r for r in resolvers if r() != handler]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Called from inside a handler, the event is queued and delivered
        once the event being handled is done.

        Returns:
            The published Event
        """
        event = Event(type=event_type, data=data)
        self._pending.append(event)
        if not self._dispatching:
            self._dispatching = True
            try:
                while self._pending:
                    self._deliver(self._pending.popleft())
            finally:
                self._dispatching = False
        return event

    def _deliver(self, event: Event) -> None:
        resolvers = self._subscribers.get(event.type)
        if not resolvers:
            return

        dead = []
        for resolver in list(resolvers):
            handler = resolver()
            if handler is None:
                dead.append(resolver)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(f"Error in event handler for {event.type}")

        for resolver in dead:
            if resolver in resolvers:
                resolvers.remove(resolver)
