"""
Core module.

Exports:
- StoreConfig: Store configuration
- Component, Snapshot, register_component: Data model bases and registration
- EventBus, Event: Event system
"""

from stashcore.core.config import StoreConfig
from stashcore.core.component import (
    Component,
    Snapshot,
    register_component,
    get_component_type,
)
from stashcore.core.events import EventBus, Event, EventHandler

__all__ = [
    # Config
    "StoreConfig",
    # Components
    "Component",
    "Snapshot",
    "register_component",
    "get_component_type",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
]
