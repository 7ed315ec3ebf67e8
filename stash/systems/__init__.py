"""
Inventory systems.

Systems contain all logic; components stay data-only.
"""

from stash.systems.placement import (
    STORAGE_ID,
    MoveKind,
    classify_move,
    resolve_move,
    move_within_storage,
    send_to_storage_end,
    insert_into_storage_at,
    insert_before_item,
    equip,
    add_item,
    remove_item,
)

__all__ = [
    "STORAGE_ID",
    "MoveKind",
    "classify_move",
    "resolve_move",
    "move_within_storage",
    "send_to_storage_end",
    "insert_into_storage_at",
    "insert_before_item",
    "equip",
    "add_item",
    "remove_item",
]
