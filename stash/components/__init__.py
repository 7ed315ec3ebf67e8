"""
Inventory components.

All components are data-only Pydantic models.
"""

from stash.components.inventory import (
    EquipSlot,
    SLOT_LABELS,
    SLOT_ORDER,
    Item,
    InventoryState,
    StatValue,
    empty_slots,
)

__all__ = [
    "EquipSlot",
    "SLOT_LABELS",
    "SLOT_ORDER",
    "Item",
    "InventoryState",
    "StatValue",
    "empty_slots",
]
