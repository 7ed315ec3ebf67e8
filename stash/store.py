"""
Inventory store - single entry point for inventory state.

The store owns the current InventoryState. Every request is resolved to
completion by a placement transition, committed as one new snapshot, and
only then persisted (save hook) and announced (event bus). Collaborators
read snapshots and submit requests; they never mutate state directly.

Usage:
    save_mgr = SaveManager(save_path="saves")
    store = InventoryStore(
        snapshot=save_mgr.load(),
        on_save=save_mgr.save_snapshot,
        event_bus=event_bus,
    )

    sword = store.create("Sword", icon="🗡️", stats={"attack": 5})
    store.resolve_move(sword.id, "mainHand")
    store.slot_contents("mainHand")  # -> sword
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum, auto
from typing import Any, Callable, Iterator, Mapping, Optional

from stash.components import EquipSlot, InventoryState, Item, SLOT_ORDER
from stash.inventory.items import DEMO_ITEMS, draft_item
from stash.save.manager import dump_snapshot, load_snapshot
from stash.systems import placement
from stashcore.core.config import StoreConfig
from stashcore.core.events import EventBus

logger = logging.getLogger(__name__)

SaveHook = Callable[[dict[str, Any]], Any]


class InventoryEvent(Enum):
    """Inventory store events."""
    ITEM_CREATED = auto()
    ITEM_REMOVED = auto()
    ITEM_MOVED = auto()
    STATE_LOADED = auto()


def _new_id() -> str:
    return uuid.uuid4().hex


class InventoryStore:
    """
    Holds the item catalog, slot assignment and storage order.

    Features:
    - Atomic transitions (one new immutable snapshot per request)
    - Unknown ids and targets are ignored, never raised
    - Save hook called with the encoded snapshot after each commit
    - Event publishing for committed changes
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        snapshot: Optional[Mapping[str, Any]] = None,
        on_save: Optional[SaveHook] = None,
        event_bus: Optional[EventBus] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.config = config or StoreConfig()
        self.event_bus = event_bus
        self._on_save = on_save
        self._id_factory = id_factory or _new_id

        if snapshot is not None:
            self._state = load_snapshot(snapshot)
        elif self.config.seed_demo_items:
            self._state = InventoryState(
                items={item.id: item for item in DEMO_ITEMS},
                storage_order=tuple(item.id for item in DEMO_ITEMS),
            )
        else:
            self._state = InventoryState()

    # State access

    @property
    def state(self) -> InventoryState:
        """Current immutable snapshot."""
        return self._state

    @property
    def storage_id(self) -> str:
        """Identifier of the storage container drop target."""
        return self.config.storage_id

    def snapshot(self) -> dict[str, Any]:
        """Encode the current state for persistence."""
        return dump_snapshot(self._state)

    def load(self, snapshot: Optional[Mapping[str, Any]]) -> None:
        """Replace the current state with a decoded snapshot."""
        self._state = load_snapshot(snapshot)
        logger.info(
            f"Loaded inventory: {len(self._state.items)} items, "
            f"{len(self._state.storage_order)} stored"
        )
        if self.event_bus:
            self.event_bus.publish(InventoryEvent.STATE_LOADED, state=self._state)

    # Projection

    def get_item(self, item_id: str) -> Optional[Item]:
        """Get an item from the catalog."""
        return self._state.items.get(item_id)

    def stored_items(self) -> Iterator[Item]:
        """
        Iterate stored items in storage order.

        The iterator reads the state current at call time; call again for
        a fresh pass.
        """
        return self._state.iter_stored()

    def slot_contents(self, slot: EquipSlot | str) -> Optional[Item]:
        """Get the item equipped in a slot (None if empty or not a slot)."""
        if not isinstance(slot, EquipSlot):
            slot = EquipSlot.parse(slot)
        if slot is None:
            return None
        item_id = self._state.slots[slot]
        return self._state.items.get(item_id) if item_id else None

    def equipment(self) -> list[tuple[EquipSlot, Optional[Item]]]:
        """Every slot with its item, in display order."""
        return [(slot, self.slot_contents(slot)) for slot in SLOT_ORDER]

    # Mutations

    def create(
        self,
        name: str,
        icon: Optional[str] = None,
        description: Optional[str] = None,
        stats: Optional[Mapping[str, Any]] = None,
    ) -> Item:
        """
        Create an item at the end of storage.

        Returns:
            The new item

        Raises:
            pydantic.ValidationError: if the name is empty after trimming
                (no id is allocated and the state is unchanged)
        """
        draft = draft_item(name, icon=icon, description=description, stats=stats)
        item = draft.evolve(id=self._id_factory())
        self._commit(
            placement.add_item(self._state, item),
            InventoryEvent.ITEM_CREATED,
            item_id=item.id,
        )
        return item

    def remove(self, item_id: str) -> bool:
        """
        Delete an item from the catalog, its slot and storage.

        Returns:
            True if an item was deleted
        """
        return self._commit(
            placement.remove_item(self._state, item_id),
            InventoryEvent.ITEM_REMOVED,
            item_id=item_id,
        )

    def resolve_move(self, active_id: str, target_id: str) -> bool:
        """
        Apply a drag-and-drop move.

        Args:
            active_id: Item being moved
            target_id: Slot id, storage container id or a stored item's id

        Returns:
            True if the state changed
        """
        kind = placement.classify_move(
            self._state, active_id, target_id, self.storage_id
        )
        if kind is placement.MoveKind.IGNORED:
            logger.debug(f"Ignoring move of {active_id!r} onto {target_id!r}")
            return False

        return self._commit(
            placement.resolve_move(self._state, active_id, target_id, self.storage_id),
            InventoryEvent.ITEM_MOVED,
            item_id=active_id,
            target=target_id,
            kind=kind,
        )

    def equip(self, item_id: str, slot: EquipSlot | str) -> bool:
        """Equip an item, sending the slot's occupant to storage."""
        return self._commit(
            placement.equip(self._state, item_id, slot),
            InventoryEvent.ITEM_MOVED,
            item_id=item_id,
            target=str(getattr(slot, "value", slot)),
            kind=placement.MoveKind.EQUIP,
        )

    def move_within_storage(self, active_id: str, target_id: str) -> bool:
        """Move a stored item onto another stored item's position."""
        return self._commit(
            placement.move_within_storage(self._state, active_id, target_id),
            InventoryEvent.ITEM_MOVED,
            item_id=active_id,
            target=target_id,
            kind=placement.MoveKind.REORDER,
        )

    def insert_into_storage_at(self, item_id: str, index: int) -> bool:
        """Unequip an item and place it at a storage index."""
        return self._commit(
            placement.insert_into_storage_at(self._state, item_id, index),
            InventoryEvent.ITEM_MOVED,
            item_id=item_id,
            target=self.storage_id,
            index=index,
        )

    def send_to_storage_end(self, item_id: str) -> bool:
        """Unequip an item; append it to storage unless already stored."""
        return self._commit(
            placement.send_to_storage_end(self._state, item_id),
            InventoryEvent.ITEM_MOVED,
            item_id=item_id,
            target=self.storage_id,
            kind=placement.MoveKind.TO_STORAGE,
        )

    def _commit(
        self, new_state: InventoryState, event_type: InventoryEvent, **data: Any
    ) -> bool:
        """
        Install a transition result, persist it, then announce it.

        Handlers may call back into the store; their commits run after
        this one is saved, so the last save always matches memory.
        """
        if new_state is self._state:
            return False

        self._state = new_state

        if self._on_save:
            try:
                self._on_save(dump_snapshot(new_state))
            except Exception:
                # Keep working from memory when persistence is unavailable
                logger.exception("Save hook failed")

        if self.event_bus:
            self.event_bus.publish(event_type, state=new_state, **data)

        return True
