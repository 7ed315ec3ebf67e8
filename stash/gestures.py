"""
Gesture handling - inbound requests from the UI layer.

The UI reports finished drags, delete clicks and the new-item form. It can
either call the handler directly or publish GestureEvents on the event bus
after ``attach``:

    handler = GestureHandler(store, event_bus)
    handler.attach()
    event_bus.publish(GestureEvent.MOVE_REQUESTED, active_id=item_id, target_id="head")
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from pydantic import ValidationError

from stash.components import Item
from stash.inventory.items import parse_stats
from stash.store import InventoryStore
from stashcore.core.events import Event, EventBus

logger = logging.getLogger(__name__)


class GestureEvent(Enum):
    """Gesture events (inbound requests and their rejections)."""
    MOVE_REQUESTED = auto()
    DELETE_REQUESTED = auto()
    CREATE_REQUESTED = auto()
    CREATE_REJECTED = auto()


class GestureHandler:
    """Translates UI gestures into store requests."""

    def __init__(self, store: InventoryStore, event_bus: Optional[EventBus] = None):
        self.store = store
        self.event_bus = event_bus or store.event_bus

    def attach(self) -> None:
        """Subscribe to gesture request events."""
        if not self.event_bus:
            raise RuntimeError("GestureHandler.attach() needs an event bus")
        self.event_bus.subscribe(GestureEvent.MOVE_REQUESTED, self._handle_move)
        self.event_bus.subscribe(GestureEvent.DELETE_REQUESTED, self._handle_delete)
        self.event_bus.subscribe(GestureEvent.CREATE_REQUESTED, self._handle_create)

    def detach(self) -> None:
        """Unsubscribe from gesture request events."""
        if not self.event_bus:
            return
        self.event_bus.unsubscribe(GestureEvent.MOVE_REQUESTED, self._handle_move)
        self.event_bus.unsubscribe(GestureEvent.DELETE_REQUESTED, self._handle_delete)
        self.event_bus.unsubscribe(GestureEvent.CREATE_REQUESTED, self._handle_create)

    def on_move_requested(self, active_id: Optional[str], target_id: Optional[str]) -> bool:
        """
        A drag ended with ``active_id`` over ``target_id``.

        A drag released over nothing arrives with an empty target and is
        ignored.

        Returns:
            True if the inventory changed
        """
        if not active_id or not target_id:
            return False
        return self.store.resolve_move(active_id, target_id)

    def on_delete_requested(self, item_id: Optional[str]) -> bool:
        """Delete button pressed for an item."""
        if not item_id:
            return False
        return self.store.remove(item_id)

    def on_create_requested(
        self,
        name: str,
        icon: Optional[str] = None,
        description: Optional[str] = None,
        stats_text: Optional[str] = None,
    ) -> Optional[Item]:
        """
        New-item form submitted.

        Returns:
            The created item, or None if the form was rejected (the UI
            should re-prompt; a CREATE_REJECTED event carries the reasons)
        """
        try:
            return self.store.create(
                name,
                icon=icon,
                description=description,
                stats=parse_stats(stats_text),
            )
        except ValidationError as e:
            messages = [error["msg"] for error in e.errors()]
            logger.info(f"Rejected new item {name!r}: {'; '.join(messages)}")
            if self.event_bus:
                self.event_bus.publish(
                    GestureEvent.CREATE_REJECTED, name=name, errors=messages
                )
            return None

    # Event bus adapters

    def _handle_move(self, event: Event) -> None:
        self.on_move_requested(event.get("active_id"), event.get("target_id"))

    def _handle_delete(self, event: Event) -> None:
        self.on_delete_requested(event.get("item_id"))

    def _handle_create(self, event: Event) -> None:
        self.on_create_requested(
            event.get("name", ""),
            icon=event.get("icon"),
            description=event.get("description"),
            stats_text=event.get("stats_text"),
        )
