"""
Inventory components - items, equipment slots, inventory state.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Optional, Union, Iterator

from pydantic import Field, field_serializer, field_validator

from stashcore.core.component import Snapshot, register_component


class EquipSlot(str, Enum):
    """Equipment slots, in display order."""
    HEAD = "head"
    BODY = "body"
    MAIN_HAND = "mainHand"
    OFF_HAND = "offHand"
    LEGS = "legs"

    @property
    def label(self) -> str:
        """Human-readable slot name."""
        return SLOT_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> Optional[EquipSlot]:
        """Look up a slot by identifier, None if it is not a slot."""
        try:
            return cls(value)
        except ValueError:
            return None


SLOT_LABELS: dict[EquipSlot, str] = {
    EquipSlot.HEAD: "Head",
    EquipSlot.BODY: "Body",
    EquipSlot.MAIN_HAND: "Main Hand",
    EquipSlot.OFF_HAND: "Off-Hand",
    EquipSlot.LEGS: "Legs",
}

SLOT_ORDER: tuple[EquipSlot, ...] = tuple(EquipSlot)

StatValue = Union[int, float, str]


@register_component
class Item(Snapshot):
    """
    An inventory item.

    Attributes:
        id: Opaque stable identifier
        name: Display name (trimmed, never empty)
        icon: Optional icon (usually an emoji)
        description: Optional flavour text
        stats: Stat name -> number or text
    """
    id: str = ""
    name: str
    icon: Optional[str] = None
    description: Optional[str] = None
    stats: dict[str, StatValue] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("item name must not be empty")
        return value

    @field_validator("stats")
    @classmethod
    def _freeze_stats(cls, value: dict[str, StatValue]) -> dict[str, StatValue]:
        return MappingProxyType(dict(value))

    @field_serializer("stats")
    def _dump_stats(self, value) -> dict[str, StatValue]:
        return dict(value)


def empty_slots() -> dict[EquipSlot, Optional[str]]:
    """Slot assignment with every slot empty."""
    return {slot: None for slot in SLOT_ORDER}


@register_component
class InventoryState(Snapshot):
    """
    Complete inventory state: catalog, slot assignment, storage order.

    Every catalog item is either referenced by exactly one slot
    (equipped) or listed exactly once in ``storage_order`` (stored).

    Mappings are exposed as read-only views; transitions build new ones.

    Attributes:
        items: Catalog, item id -> Item (creation order)
        slots: Slot -> equipped item id (or None); always lists every slot
        storage_order: Ids of stored items, in user order
    """
    items: dict[str, Item] = Field(default_factory=dict)
    slots: dict[EquipSlot, Optional[str]] = Field(default_factory=empty_slots)
    storage_order: tuple[str, ...] = ()

    @field_validator("items")
    @classmethod
    def _freeze_items(cls, value: dict[str, Item]) -> dict[str, Item]:
        return MappingProxyType(dict(value))

    @field_validator("slots")
    @classmethod
    def _all_slots_present(
        cls, value: dict[EquipSlot, Optional[str]]
    ) -> dict[EquipSlot, Optional[str]]:
        return MappingProxyType({slot: value.get(slot) for slot in SLOT_ORDER})

    @field_serializer("items")
    def _dump_items(self, value) -> dict[str, Item]:
        return dict(value)

    @field_serializer("slots")
    def _dump_slots(self, value) -> dict[EquipSlot, Optional[str]]:
        return dict(value)

    def is_stored(self, item_id: str) -> bool:
        """Check if an item is in storage."""
        return item_id in self.storage_order

    def is_equipped(self, item_id: str) -> bool:
        """Check if an item is equipped anywhere."""
        return item_id in self.slots.values()

    def slot_of(self, item_id: str) -> Optional[EquipSlot]:
        """Get the slot holding an item."""
        for slot, held in self.slots.items():
            if held == item_id:
                return slot
        return None

    def get_equipped(self, slot: EquipSlot) -> Optional[str]:
        """Get item ID in a slot."""
        return self.slots.get(slot)

    def iter_stored(self) -> Iterator[Item]:
        """Iterate stored items in storage order."""
        for item_id in self.storage_order:
            item = self.items.get(item_id)
            if item is not None:
                yield item

    def check_invariants(self) -> list[str]:
        """
        Describe every broken location invariant.

        Returns:
            List of problems (empty when the state is consistent)
        """
        problems = []
        stored = list(self.storage_order)
        equipped = [i for i in self.slots.values() if i is not None]

        for item_id in set(stored):
            if stored.count(item_id) > 1:
                problems.append(f"{item_id} listed {stored.count(item_id)} times in storage")
        for item_id in set(equipped):
            if equipped.count(item_id) > 1:
                problems.append(f"{item_id} equipped in {equipped.count(item_id)} slots")
        for item_id in set(stored) | set(equipped):
            if item_id not in self.items:
                problems.append(f"{item_id} referenced but not in catalog")
        for item_id in self.items:
            where = (item_id in stored) + (item_id in equipped)
            if where == 0:
                problems.append(f"{item_id} is neither stored nor equipped")
            elif where == 2:
                problems.append(f"{item_id} is both stored and equipped")

        return problems
