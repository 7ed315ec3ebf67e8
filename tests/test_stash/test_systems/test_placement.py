import pytest
from stash.components import EquipSlot, Item
from stash.systems import placement
from stash.systems.placement import MoveKind, classify_move, resolve_move


def stored(state):
    return list(state.storage_order)


# Classification

def test_classify_precedence(make_state):
    state = make_state(stored=["a", "b"], slots={"head": "c"})

    assert classify_move(state, "a", "b") is MoveKind.REORDER
    assert classify_move(state, "a", "storage") is MoveKind.TO_STORAGE
    assert classify_move(state, "c", "storage") is MoveKind.TO_STORAGE
    assert classify_move(state, "c", "a") is MoveKind.INSERT_AT_ITEM
    assert classify_move(state, "a", "mainHand") is MoveKind.EQUIP
    assert classify_move(state, "a", "nowhere") is MoveKind.IGNORED
    assert classify_move(state, "ghost", "head") is MoveKind.IGNORED


def test_classify_custom_storage_id(make_state):
    state = make_state(stored=["a"], slots={"head": "c"})
    assert classify_move(state, "c", "bag", storage_id="bag") is MoveKind.TO_STORAGE
    assert classify_move(state, "c", "storage", storage_id="bag") is MoveKind.IGNORED


def test_equipped_item_dropped_on_equipped_item_is_ignored(make_state):
    state = make_state(slots={"head": "a", "body": "b"})
    assert classify_move(state, "a", "b") is MoveKind.IGNORED
    assert resolve_move(state, "a", "b") is state


# Scenarios

def test_equip_from_storage(sword_and_shield):
    state = resolve_move(sword_and_shield, "sword", "mainHand")

    assert state.slots[EquipSlot.MAIN_HAND] == "sword"
    assert stored(state) == ["shield"]
    assert state.check_invariants() == []


def test_equip_displaces_previous_item(sword_and_shield):
    state = resolve_move(sword_and_shield, "sword", "mainHand")
    state = resolve_move(state, "shield", "mainHand")

    assert state.slots[EquipSlot.MAIN_HAND] == "shield"
    assert stored(state) == ["sword"]
    assert state.check_invariants() == []


def test_displaced_item_goes_to_storage_end(make_state):
    state = make_state(stored=["a", "b", "c"], slots={"head": "helm"})
    state = resolve_move(state, "b", "head")

    assert state.slots[EquipSlot.HEAD] == "b"
    assert stored(state) == ["a", "c", "helm"]


def test_reorder_forward(make_state):
    state = resolve_move(make_state(stored=["a", "b", "c"]), "a", "c")
    assert stored(state) == ["b", "a", "c"]


def test_reorder_backward(make_state):
    state = resolve_move(make_state(stored=["a", "b", "c"]), "c", "a")
    assert stored(state) == ["c", "a", "b"]


def test_reorder_adjacent(make_state):
    state = resolve_move(make_state(stored=["a", "b", "c", "d"]), "b", "c")
    assert stored(state) == ["a", "b", "c", "d"]
    state = resolve_move(make_state(stored=["a", "b", "c", "d"]), "c", "b")
    assert stored(state) == ["a", "c", "b", "d"]


def test_reorder_onto_self_is_noop(make_state):
    state = make_state(stored=["a", "b"])
    assert resolve_move(state, "a", "a") is state


def test_reorder_never_touches_slots(make_state):
    state = make_state(stored=["a", "b", "c"], slots={"legs": "boots"})
    after = resolve_move(state, "c", "a")
    assert after.slots == state.slots
    assert set(after.storage_order) == set(state.storage_order)


def test_remove_equipped_item(make_state):
    state = make_state(stored=["sword"], slots={"offHand": "shield"})
    state = placement.remove_item(state, "shield")

    assert state.slots[EquipSlot.OFF_HAND] is None
    assert "shield" not in state.storage_order
    assert "shield" not in state.items
    assert state.check_invariants() == []


# Drop on storage container

def test_unequip_to_storage_appends(make_state):
    state = make_state(stored=["a", "b"], slots={"head": "helm"})
    state = resolve_move(state, "helm", "storage")

    assert state.slots[EquipSlot.HEAD] is None
    assert stored(state) == ["a", "b", "helm"]


def test_redrop_stored_item_on_storage_is_noop(make_state):
    state = make_state(stored=["a", "b", "c"])
    assert resolve_move(state, "a", "storage") is state


# Drop on a stored item

def test_equipped_item_dropped_on_stored_item_inserts_before_it(make_state):
    state = make_state(stored=["a", "b", "c"], slots={"head": "helm"})
    state = resolve_move(state, "helm", "b")

    assert state.slots[EquipSlot.HEAD] is None
    assert stored(state) == ["a", "helm", "b", "c"]


def test_equipped_item_dropped_on_first_stored_item(make_state):
    state = make_state(stored=["a"], slots={"mainHand": "sword"})
    state = resolve_move(state, "sword", "a")
    assert stored(state) == ["sword", "a"]


# Equip edge cases

def test_equip_into_same_slot_is_noop(make_state):
    state = make_state(slots={"head": "helm"})
    assert resolve_move(state, "helm", "head") is state


def test_move_between_slots_leaves_first_slot_empty(make_state):
    state = make_state(slots={"mainHand": "sword"})
    state = resolve_move(state, "sword", "offHand")

    assert state.slots[EquipSlot.MAIN_HAND] is None
    assert state.slots[EquipSlot.OFF_HAND] == "sword"
    assert stored(state) == []


def test_swap_between_slots_sends_occupant_to_storage(make_state):
    state = make_state(slots={"mainHand": "sword", "offHand": "shield"})
    state = resolve_move(state, "sword", "offHand")

    assert state.slots[EquipSlot.MAIN_HAND] is None
    assert state.slots[EquipSlot.OFF_HAND] == "sword"
    assert stored(state) == ["shield"]
    assert state.check_invariants() == []


def test_equip_accepts_slot_enum(make_state):
    state = placement.equip(make_state(stored=["a"]), "a", EquipSlot.LEGS)
    assert state.slots[EquipSlot.LEGS] == "a"


def test_equip_unknown_slot_is_noop(make_state):
    state = make_state(stored=["a"])
    assert placement.equip(state, "a", "tail") is state


# Unknown ids

@pytest.mark.parametrize("target", ["head", "storage", "a", "nowhere"])
def test_unknown_active_item_is_noop(make_state, target):
    state = make_state(stored=["a"])
    assert resolve_move(state, "ghost", target) is state


def test_unknown_target_is_noop(make_state):
    state = make_state(stored=["a"], slots={"head": "b"})
    assert resolve_move(state, "b", "ghost") is state


def test_remove_unknown_item_is_noop(make_state):
    state = make_state(stored=["a"])
    assert placement.remove_item(state, "ghost") is state


# Direct operations

@pytest.mark.parametrize("index, expected", [
    (0, ["x", "a", "b"]),
    (1, ["a", "x", "b"]),
    (2, ["a", "b", "x"]),
    (99, ["a", "b", "x"]),
    (-5, ["x", "a", "b"]),
])
def test_insert_into_storage_at_clamps(make_state, index, expected):
    state = make_state(stored=["a", "b"], slots={"head": "x"})
    state = placement.insert_into_storage_at(state, "x", index)

    assert stored(state) == expected
    assert state.slots[EquipSlot.HEAD] is None


def test_insert_into_storage_at_moves_stored_item(make_state):
    state = placement.insert_into_storage_at(make_state(stored=["a", "b", "c"]), "c", 0)
    assert stored(state) == ["c", "a", "b"]


def test_insert_before_item_repositions_stored_item(make_state):
    state = placement.insert_before_item(make_state(stored=["a", "b", "c"]), "a", "c")
    assert stored(state) == ["b", "a", "c"]


def test_send_to_storage_end_keeps_position_of_stored_item(make_state):
    state = make_state(stored=["a", "b"])
    assert placement.send_to_storage_end(state, "a") is state


def test_add_item_appends_to_storage(make_state):
    state = make_state(stored=["a"])
    state = placement.add_item(state, Item(id="new", name="New"))

    assert stored(state) == ["a", "new"]
    assert state.items["new"].name == "New"


def test_transitions_do_not_mutate_input(make_state):
    state = make_state(stored=["a", "b"], slots={"head": "c"})
    slots_before = dict(state.slots)
    order_before = state.storage_order

    resolve_move(state, "a", "head")
    resolve_move(state, "c", "storage")
    placement.remove_item(state, "b")

    assert state.slots == slots_before
    assert state.storage_order == order_before
    assert set(state.items) == {"a", "b", "c"}
