"""
Stash inventory module.

Provides the equipment + storage inventory built on top of stashcore:
- Components (data-only, Pydantic models)
- Systems (placement transitions)
- Store (state owner, projection)
- Gestures (inbound UI requests)
- Save (persistence)
"""

from stash.components import EquipSlot, Item, InventoryState, SLOT_LABELS, SLOT_ORDER
from stash.store import InventoryStore, InventoryEvent
from stash.gestures import GestureHandler, GestureEvent
from stash.save import SaveManager, SaveEvent, dump_snapshot, load_snapshot

__all__ = [
    "EquipSlot",
    "Item",
    "InventoryState",
    "SLOT_LABELS",
    "SLOT_ORDER",
    "InventoryStore",
    "InventoryEvent",
    "GestureHandler",
    "GestureEvent",
    "SaveManager",
    "SaveEvent",
    "dump_snapshot",
    "load_snapshot",
]
