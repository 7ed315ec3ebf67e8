"""
Save/Load system - inventory persistence.

Provides:
- Snapshot encoding (dump_snapshot) and tolerant decoding (load_snapshot)
- Save/load of a snapshot to a JSON file
- Save integrity validation (checksum + JSON schema)

The persisted blob is shaped as::

    {
        "items": [{"id", "name", "icon"?, "description"?, "stats"}, ...],
        "storageOrder": [item_id, ...],
        "slots": {slot_id: item_id | null, ...}
    }
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from enum import Enum, auto
from pathlib import Path
from typing import Any, Mapping, Optional

import jsonschema
from pydantic import ValidationError

from stash.components import EquipSlot, InventoryState, Item, SLOT_ORDER
from stashcore.core.config import StoreConfig
from stashcore.core.events import EventBus

logger = logging.getLogger(__name__)


class SaveEvent(Enum):
    """Save system events."""
    SAVE_STARTED = auto()
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_STARTED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()


ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "pattern": r"\S"},
        "icon": {"type": ["string", "null"]},
        "description": {"type": ["string", "null"]},
        "stats": {
            "type": "object",
            "additionalProperties": {"type": ["string", "number"]},
        },
    },
}

SNAPSHOT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["items", "storageOrder", "slots"],
    "properties": {
        "items": {"type": "array", "items": ITEM_SCHEMA},
        "storageOrder": {
            "type": "array",
            "items": {"type": "string"},
            "uniqueItems": True,
        },
        "slots": {
            "type": "object",
            "properties": {
                slot.value: {"type": ["string", "null"]} for slot in SLOT_ORDER
            },
            "additionalProperties": False,
        },
        "checksum": {"type": "string"},
    },
}


# Snapshot encoding

def dump_snapshot(state: InventoryState) -> dict[str, Any]:
    """Encode a state as a JSON-ready snapshot dict."""
    return {
        "items": [
            item.model_dump(mode="json", exclude_none=True)
            for item in state.items.values()
        ],
        "storageOrder": list(state.storage_order),
        "slots": {slot.value: item_id for slot, item_id in state.slots.items()},
    }


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _parse_items(raw_items: Any) -> dict[str, Item]:
    """Parse item records, skipping any that fail validation."""
    items: dict[str, Item] = {}
    for raw in _as_list(raw_items):
        if isinstance(raw, Mapping):
            # Unknown keys are dropped rather than rejected
            raw = {k: raw[k] for k in Item.model_fields if k in raw}
        try:
            item = Item.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping invalid item record: {e.errors()[0]['msg']}")
            continue
        if not item.id:
            logger.warning(f"Skipping item record without id: {item.name!r}")
            continue
        if item.id in items:
            logger.warning(f"Skipping duplicate item id: {item.id}")
            continue
        items[item.id] = item
    return items


def load_snapshot(data: Optional[Mapping[str, Any]]) -> InventoryState:
    """
    Decode a snapshot dict into a consistent state.

    Missing or malformed fields default to empty. The result always
    satisfies the location invariants:
    - references to unknown item ids are dropped
    - repeated storage ids keep their first position
    - an item held by several slots stays only in the first one
    - an item both equipped and stored stays equipped
    - items neither equipped nor stored are appended to storage
    """
    if not isinstance(data, Mapping):
        if data is not None:
            logger.warning("Snapshot is not a mapping, starting empty")
        return InventoryState()

    items = _parse_items(data.get("items"))

    slots: dict[EquipSlot, Optional[str]] = {slot: None for slot in SLOT_ORDER}
    raw_slots = data.get("slots")
    if isinstance(raw_slots, Mapping):
        equipped: set[str] = set()
        for slot in SLOT_ORDER:
            item_id = raw_slots.get(slot.value)
            if isinstance(item_id, str) and item_id in items and item_id not in equipped:
                slots[slot] = item_id
                equipped.add(item_id)
    else:
        equipped = set()

    order: list[str] = []
    for item_id in _as_list(data.get("storageOrder")):
        if not isinstance(item_id, str):
            continue
        if item_id in items and item_id not in equipped and item_id not in order:
            order.append(item_id)

    for item_id in items:
        if item_id not in equipped and item_id not in order:
            order.append(item_id)

    return InventoryState(items=items, slots=slots, storage_order=tuple(order))


class SaveManager:
    """
    Manages saving and loading the inventory snapshot.

    Features:
    - One JSON save file per save name
    - Checksum validation for save integrity
    - Event publishing for save/load operations

    Usage:
        save_mgr = SaveManager(save_path="saves", event_bus=event_bus)
        store = InventoryStore(snapshot=save_mgr.load(),
                               on_save=save_mgr.save_snapshot)
    """

    VERSION = "1.0"

    def __init__(
        self,
        save_path: str | Path = "saves",
        save_name: str = "inventory",
        event_bus: Optional[EventBus] = None,
        validate_checksum: bool = True,
    ):
        self.save_path = Path(save_path)
        self.save_name = save_name
        self.event_bus = event_bus
        self.validate_checksum = validate_checksum

    @classmethod
    def from_config(
        cls, config: StoreConfig, event_bus: Optional[EventBus] = None
    ) -> SaveManager:
        """Create a save manager from store configuration."""
        return cls(
            save_path=config.save_path,
            save_name=config.save_name,
            event_bus=event_bus,
            validate_checksum=config.validate_checksum,
        )

    @property
    def file_path(self) -> Path:
        """Path of the save file."""
        return self.save_path / f"{self.save_name}.json"

    @property
    def has_save(self) -> bool:
        """Check if a save file exists."""
        return self.file_path.exists()

    def _publish(self, event_type: SaveEvent, **data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, **data)

    def save(self, state: InventoryState) -> bool:
        """
        Save a state.

        Returns:
            True if save was successful
        """
        return self.save_snapshot(dump_snapshot(state))

    def save_snapshot(self, snapshot: Mapping[str, Any]) -> bool:
        """
        Save an already-encoded snapshot.

        Suitable as the store's on_save hook. The file is written next to
        the save and then swapped in, so a failed save leaves the previous
        one intact.

        Returns:
            True if save was successful
        """
        self._publish(SaveEvent.SAVE_STARTED, path=self.file_path)
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")

        try:
            save_dict = dict(snapshot)
            save_dict["version"] = self.VERSION
            save_dict["checksum"] = self._calculate_checksum(save_dict)
            text = json.dumps(save_dict, indent=2, ensure_ascii=False)

            self.save_path.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding='utf-8')
            tmp_path.replace(self.file_path)

        except (OSError, TypeError, ValueError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            logger.error(f"Save failed: {e}")
            self._publish(SaveEvent.SAVE_FAILED, path=self.file_path, error=str(e))
            return False

        logger.debug(f"Saved inventory to {self.file_path}")
        self._publish(SaveEvent.SAVE_COMPLETED, path=self.file_path)
        return True

    def load(self, validate: Optional[bool] = None) -> Optional[dict[str, Any]]:
        """
        Load the saved snapshot.

        Args:
            validate: Whether to validate the checksum (defaults to the
                manager's setting)

        Returns:
            The snapshot dict, or None if missing, unreadable or corrupted
        """
        if not self.has_save:
            return None

        if validate is None:
            validate = self.validate_checksum

        self._publish(SaveEvent.LOAD_STARTED, path=self.file_path)

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                save_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Load failed: {e}")
            self._publish(SaveEvent.LOAD_FAILED, path=self.file_path, error=str(e))
            return None

        if not isinstance(save_dict, dict):
            logger.error("Load failed: save file does not hold an object")
            self._publish(
                SaveEvent.LOAD_FAILED, path=self.file_path, error="not an object"
            )
            return None

        checksum = save_dict.get('checksum')
        if validate and checksum and not self._verify_checksum(save_dict, checksum):
            logger.error("Save file corrupted: checksum mismatch")
            self._publish(
                SaveEvent.LOAD_FAILED,
                path=self.file_path,
                error="Checksum validation failed",
            )
            return None

        logger.info(f"Loaded inventory from {self.file_path}")
        self._publish(SaveEvent.LOAD_COMPLETED, path=self.file_path)
        return save_dict

    def load_state(self, validate: Optional[bool] = None) -> InventoryState:
        """Load the save as a state (empty when there is nothing usable)."""
        return load_snapshot(self.load(validate))

    def delete_save(self) -> bool:
        """Delete the save file."""
        try:
            if self.has_save:
                self.file_path.unlink()
            return True
        except OSError as e:
            logger.error(f"Delete failed: {e}")
            return False

    # Validation

    def schema_errors(self) -> list[str]:
        """
        Check the save file against the snapshot schema.

        Returns:
            Error messages (empty when the file conforms)
        """
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            return [str(e)]

        validator = jsonschema.Draft7Validator(SNAPSHOT_SCHEMA)
        return [
            f"{'/'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
            for error in validator.iter_errors(data)
        ]

    def validate_save(self) -> bool:
        """
        Validate the save file's integrity.

        Returns:
            True if save is valid, False if corrupted or missing
        """
        if not self.has_save:
            return False

        errors = self.schema_errors()
        if errors:
            for message in errors:
                logger.warning(f"Schema violation: {message}")
            return False

        with open(self.file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        checksum = data.get('checksum')
        if not checksum:
            # No checksum = hand-written or old save, assume valid
            return True

        return self._verify_checksum(data, checksum)

    def _calculate_checksum(self, data: Mapping[str, Any]) -> str:
        """Calculate checksum for save data."""
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: Mapping[str, Any], expected_checksum: str) -> bool:
        """Verify save data checksum."""
        data_copy = dict(data)
        data_copy.pop('checksum', None)
        return self._calculate_checksum(data_copy) == expected_checksum
