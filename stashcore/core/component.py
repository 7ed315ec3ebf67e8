"""
Component base classes for data-only models.

Components are pure data containers with NO logic.
All state transitions live in systems. This separation makes:
- Serialization trivial
- Testing easier
- Snapshots safe to hand to collaborators

Usage:
    class Item(Component):
        id: str
        name: str

    class InventoryState(Snapshot):
        storage_order: tuple[str, ...] = ()
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Components are data-only containers using Pydantic for:
    - Automatic validation
    - JSON serialization
    - Type hints
    - Default values

    IMPORTANT: Do NOT add methods that modify state.
    All logic belongs in systems.
    """

    model_config = ConfigDict(
        # Allow arbitrary types (for references)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        extra='forbid',
    )

    # Class variable: component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)


class Snapshot(Component):
    """
    Immutable component.

    Assignment raises; a change is expressed by building a new instance
    (see ``evolve``), so a reader never observes a half-applied update.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )

    def clone(self) -> Snapshot:
        """Snapshots are immutable; a clone is the instance itself."""
        return self

    def evolve(self, **changes) -> Snapshot:
        """Return a validated copy with ``changes`` applied."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(changes)
        return type(self)(**data)


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class Item(Component):
            id: str
            name: str
    """
    type_name = cls.get_type_name()
    _component_registry[type_name] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)


def get_all_component_types() -> dict[str, type[Component]]:
    """Get all registered component types."""
    return _component_registry.copy()
