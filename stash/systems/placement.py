"""
Placement system - item location transitions.

Every function takes the current InventoryState and returns the next one.
A transition builds its slot assignment and storage order together and
returns them in a single new snapshot; when nothing changes the input
state is returned unchanged (same object), so callers can detect no-ops
with ``is``.

Unknown item ids and unknown targets are no-ops, never errors: gesture
layers routinely report moves against items deleted mid-drag.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional, Union

from stash.components import EquipSlot, InventoryState, Item

STORAGE_ID = "storage"

SlotRef = Union[EquipSlot, str]


class MoveKind(Enum):
    """How a move request is resolved, in precedence order."""
    REORDER = auto()         # Stored item dropped on another stored item
    TO_STORAGE = auto()      # Dropped on the storage container
    INSERT_AT_ITEM = auto()  # Non-stored item dropped on a stored item
    EQUIP = auto()           # Dropped on an equipment slot
    IGNORED = auto()         # Nothing valid under the pointer


def classify_move(
    state: InventoryState,
    active_id: str,
    target_id: str,
    storage_id: str = STORAGE_ID,
) -> MoveKind:
    """
    Classify a move request.

    Args:
        state: Current state
        active_id: Item being moved
        target_id: Slot id, storage container id or another item's id
        storage_id: Identifier of the storage container

    Returns:
        The MoveKind that resolve_move will apply
    """
    if active_id not in state.items:
        return MoveKind.IGNORED

    active_stored = state.is_stored(active_id)
    target_stored = state.is_stored(target_id)

    if active_stored and target_stored:
        return MoveKind.REORDER
    if target_id == storage_id:
        return MoveKind.TO_STORAGE
    if target_stored:
        return MoveKind.INSERT_AT_ITEM
    if EquipSlot.parse(target_id) is not None:
        return MoveKind.EQUIP
    return MoveKind.IGNORED


def resolve_move(
    state: InventoryState,
    active_id: str,
    target_id: str,
    storage_id: str = STORAGE_ID,
) -> InventoryState:
    """Apply a move request (see classify_move for the cases)."""
    kind = classify_move(state, active_id, target_id, storage_id)

    if kind is MoveKind.REORDER:
        return move_within_storage(state, active_id, target_id)
    if kind is MoveKind.TO_STORAGE:
        return send_to_storage_end(state, active_id)
    if kind is MoveKind.INSERT_AT_ITEM:
        return insert_before_item(state, active_id, target_id)
    if kind is MoveKind.EQUIP:
        return equip(state, active_id, target_id)
    return state


def _unequipped(
    slots: dict[EquipSlot, Optional[str]], item_id: str
) -> dict[EquipSlot, Optional[str]]:
    """Slot assignment with item_id cleared from every slot."""
    return {
        slot: (None if held == item_id else held)
        for slot, held in slots.items()
    }


def _commit(
    state: InventoryState,
    slots: dict[EquipSlot, Optional[str]],
    order: list[str],
) -> InventoryState:
    """Build the next state, or return state if nothing changed."""
    order_tuple = tuple(order)
    if slots == state.slots and order_tuple == state.storage_order:
        return state
    return state.evolve(slots=slots, storage_order=order_tuple)


def move_within_storage(
    state: InventoryState, active_id: str, target_id: str
) -> InventoryState:
    """
    Move a stored item onto another stored item's position.

    The active item is taken out and reinserted at the index the target
    holds once the active item is gone: moving forward lands it just
    before the target, moving backward lands it on the target's old index.
    Dropping an item on itself is a no-op. Slots are never touched.
    """
    if not (state.is_stored(active_id) and state.is_stored(target_id)):
        return state
    if active_id == target_id:
        return state

    order = list(state.storage_order)
    order.remove(active_id)
    order.insert(order.index(target_id), active_id)
    return _commit(state, state.slots, order)


def send_to_storage_end(state: InventoryState, item_id: str) -> InventoryState:
    """
    Unequip an item and make sure it is stored.

    Items that are already stored keep their position.
    """
    if item_id not in state.items:
        return state

    slots = _unequipped(state.slots, item_id)
    order = list(state.storage_order)
    if item_id not in order:
        order.append(item_id)
    return _commit(state, slots, order)


def insert_into_storage_at(
    state: InventoryState, item_id: str, index: int
) -> InventoryState:
    """
    Unequip an item and place it at a storage index.

    The item is removed from storage first if present; the index is then
    clamped to the bounds of the remaining list.
    """
    if item_id not in state.items:
        return state

    slots = _unequipped(state.slots, item_id)
    order = [i for i in state.storage_order if i != item_id]
    index = max(0, min(index, len(order)))
    order.insert(index, item_id)
    return _commit(state, slots, order)


def insert_before_item(
    state: InventoryState, active_id: str, target_id: str
) -> InventoryState:
    """Unequip an item and insert it into storage just before a stored item."""
    if active_id == target_id or not state.is_stored(target_id):
        return state

    remaining = [i for i in state.storage_order if i != active_id]
    return insert_into_storage_at(state, active_id, remaining.index(target_id))


def equip(state: InventoryState, item_id: str, slot: SlotRef) -> InventoryState:
    """
    Equip an item into a slot.

    The slot's previous occupant goes to the end of storage. The item is
    cleared from any other slot and taken out of storage.
    """
    if not isinstance(slot, EquipSlot):
        slot = EquipSlot.parse(slot)
    if slot is None or item_id not in state.items:
        return state

    displaced = state.slots[slot]
    if displaced == item_id:
        return state

    order = [i for i in state.storage_order if i != item_id]
    if displaced is not None and displaced not in order:
        order.append(displaced)

    slots = _unequipped(state.slots, item_id)
    slots[slot] = item_id
    return _commit(state, slots, order)


def add_item(state: InventoryState, item: Item) -> InventoryState:
    """Add a new item to the catalog and the end of storage."""
    items = dict(state.items)
    items[item.id] = item
    order = [i for i in state.storage_order if i != item.id]
    order.append(item.id)
    return state.evolve(
        items=items,
        slots=_unequipped(state.slots, item.id),
        storage_order=tuple(order),
    )


def remove_item(state: InventoryState, item_id: str) -> InventoryState:
    """Delete an item from the catalog, its slot and storage."""
    if item_id not in state.items:
        return state

    items = {k: v for k, v in state.items.items() if k != item_id}
    return state.evolve(
        items=items,
        slots=_unequipped(state.slots, item_id),
        storage_order=tuple(i for i in state.storage_order if i != item_id),
    )
