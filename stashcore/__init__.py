"""
Stash core

Reusable building blocks for the inventory domain: pydantic data models,
a typed event bus and store configuration.

Quick Start:
    from stashcore.core import EventBus, StoreConfig

    bus = EventBus()
    config = StoreConfig(save_path="saves")
"""

__version__ = "0.1.0"
__author__ = "Developer"

from stashcore.core import (
    StoreConfig,
    Component,
    Snapshot,
    register_component,
    EventBus,
    Event,
)

__all__ = [
    "StoreConfig",
    "Component",
    "Snapshot",
    "register_component",
    "EventBus",
    "Event",
]
