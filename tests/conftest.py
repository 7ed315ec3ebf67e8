import os
import sys
import itertools
import pytest

# Ensure stash modules can be imported
sys.path.append(os.getcwd())


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from stashcore.core.events import EventBus
    return EventBus()


@pytest.fixture
def id_factory():
    """Predictable ids: item-1, item-2, ..."""
    counter = itertools.count(1)
    return lambda: f"item-{next(counter)}"


@pytest.fixture
def store(event_bus, id_factory):
    """Empty InventoryStore wired to the event bus."""
    from stash.store import InventoryStore
    return InventoryStore(event_bus=event_bus, id_factory=id_factory)


@pytest.fixture
def make_state():
    """
    Build an InventoryState from ids.

    make_state(stored=["a", "b"], slots={"head": "c"}) creates items
    a, b, c with a and b stored in that order and c on the head.
    """
    from stash.components import InventoryState, Item

    def _make(stored=(), slots=None):
        slots = slots or {}
        ids = list(stored) + [i for i in slots.values() if i]
        items = {i: Item(id=i, name=i.title()) for i in ids}
        return InventoryState(items=items, slots=slots, storage_order=tuple(stored))

    return _make


@pytest.fixture
def sword_and_shield(make_state):
    """Catalog {sword, shield}, both stored, all slots empty."""
    return make_state(stored=["sword", "shield"])
