"""
Save module - inventory persistence.
"""

from stash.save.manager import (
    SaveManager,
    SaveEvent,
    SNAPSHOT_SCHEMA,
    dump_snapshot,
    load_snapshot,
)

__all__ = [
    "SaveManager",
    "SaveEvent",
    "SNAPSHOT_SCHEMA",
    "dump_snapshot",
    "load_snapshot",
]
