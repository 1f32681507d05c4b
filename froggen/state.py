"""Naming state used while generating nested items and their fields."""

from __future__ import annotations

from dataclasses import dataclass


def _ident(name: str) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise ValueError(f"invalid identifier: {name!r}")
    return name


@dataclass(frozen=True)
class State:
    """An empty state with no item yet."""

    def with_item(self, item: str) -> ItemState:
        """Start a state at the given item."""
        return ItemState((_ident(item),))


@dataclass(frozen=True)
class ItemState:
    """A state positioned at an item, remembering the items above it."""

    tree: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.tree:
            raise ValueError("an item state needs at least one item")

    @property
    def item(self) -> str:
        """The current item."""
        return self.tree[-1]

    def with_item(self, item: str) -> ItemState:
        """Descend into a nested item."""
        return ItemState((*self.tree, _ident(item)))

    def with_target(self, target: str) -> TargetState:
        """Point at a field or variant of the current item."""
        return TargetState(self.tree, _ident(target))


@dataclass(frozen=True)
class TargetState:
    """A state positioned at a field or variant of an item."""

    tree: tuple[str, ...]
    target: str

    def __post_init__(self) -> None:
        if not self.tree:
            raise ValueError("a target state needs at least one item")

    @property
    def item(self) -> str:
        """The item that owns the target."""
        return self.tree[-1]

    def create_item(self) -> ItemState:
        """Turn the current target into a new nested item."""
        return self.with_item(f"{self.item}_{self.target}")

    def with_item(self, item: str) -> ItemState:
        """Descend into a nested item."""
        return ItemState((*self.tree, _ident(item)))

    def with_target(self, target: str) -> TargetState:
        """Point at another target of the same item."""
        return TargetState(self.tree, _ident(target))