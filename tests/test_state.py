import pytest

from froggen.state import ItemState, State, TargetState


def test_with_item_from_empty():
    state = State().with_item("_")
    assert state.item == "_"
    assert state.tree == ("_",)


def test_item_with_item_appends():
    state = State().with_item("Outer").with_item("Inner")
    assert state.tree == ("Outer", "Inner")
    assert state.item == "Inner"


def test_with_target_keeps_item():
    target = State().with_item("Packet").with_target("field")
    assert target.item == "Packet"
    assert target.target == "field"


def test_create_item_joins_item_and_target():
    created = State().with_item("Packet").with_target("field").create_item()
    assert created.item == "Packet_field"
    assert created.tree[0] == "Packet"
    assert len(created.tree) == 2


def test_target_with_target_replaces_target():
    target = State().with_item("A").with_target("x").with_target("y")
    assert target.target == "y"
    assert target.tree == ("A",)


def test_target_with_item_extends_tree():
    state = State().with_item("A").with_target("x").with_item("B")
    assert state.tree == ("A", "B")


def test_states_are_values():
    first = State().with_item("A").with_target("x")
    second = State().with_item("A").with_target("x")
    assert first == second
    assert hash(first) == hash(second)


@pytest.mark.parametrize("bad", ["", "minecraft:stone", "1abc", "a-b", "a.b"])
def test_invalid_identifier_raises(bad):
    with pytest.raises(ValueError):
        State().with_item(bad)
    with pytest.raises(ValueError):
        State().with_item("A").with_target(bad)


def test_empty_tree_rejected():
    with pytest.raises(ValueError):
        ItemState(())
    with pytest.raises(ValueError):
        TargetState((), "x")