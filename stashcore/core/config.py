"""
Store configuration.

Static settings shared by the inventory store and its persistence
collaborator. Slot identifiers are not configuration; they live with the
inventory components.
"""

from __future__ import annotations

from pathlib import Path


class StoreConfig:
    """Configuration for an inventory store."""

    def __init__(
        self,
        storage_id: str = "storage",
        save_path: str | Path = "saves",
        save_name: str = "inventory",
        seed_demo_items: bool = False,
        validate_checksum: bool = True,
    ):
        self.storage_id = storage_id
        self.save_path = Path(save_path)
        self.save_name = save_name
        self.seed_demo_items = seed_demo_items
        self.validate_checksum = validate_checksum

    def __repr__(self) -> str:
        return (
            f"StoreConfig(storage_id={self.storage_id!r}, "
            f"save_path={str(self.save_path)!r}, save_name={self.save_name!r})"
        )
