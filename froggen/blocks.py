"""Generation of block attribute types and block definitions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from froggen.datamap import version_ident
from froggen.naming import to_pascal
from froggen.syntax import (
    EnumItem,
    Field,
    StructItem,
    Variant,
    parse_type,
    render_file,
    render_item,
)


@dataclass(frozen=True)
class BoolState:
    """A boolean block state."""

    name: str


@dataclass(frozen=True)
class EnumState:
    """A block state taking one of several named values."""

    name: str
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class IntState:
    """A block state taking one of several integer values, written as text."""

    name: str
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


BlockState = BoolState | EnumState | IntState


@dataclass(frozen=True)
class BlockSpec:
    """The description of one block."""

    name: str
    display_name: str
    min_state_id: int
    max_state_id: int
    default_state: int
    states: tuple[BlockState, ...] = ()
    material: str = "default"
    diggable: bool = True
    hardness: float = 0.0
    resistance: float = 0.0
    transparent: bool = False
    emit_light: int = 0
    bounding_box: str = "block"

    def __post_init__(self) -> None:
        object.__setattr__(self, "states", tuple(self.states))
        if self.max_state_id < self.min_state_id:
            raise ValueError(
                f"block {self.name!r}: max state id {self.max_state_id} "
                f"is below min state id {self.min_state_id}"
            )

    def state_count(self) -> int:
        """The number of state ids the block occupies."""
        return self.max_state_id - self.min_state_id + 1


def _int_values(state: IntState) -> list[int]:
    if not state.values:
        raise ValueError(f"integer state {state.name!r} has no values")
    return sorted(int(value) for value in state.values)


def attribute_item_name(state: BlockState) -> str:
    """The name of the type generated for a block state."""
    base = to_pascal(state.name)
    match state:
        case BoolState():
            return f"{base}BooleanAttribute"
        case EnumState(values=values):
            return f"{base}EnumAttribute" + "".join(f"_{to_pascal(v)}" for v in values)
        case IntState(values=values):
            ints = _int_values(state)
            if all(a + 1 == b for a, b in zip(ints, ints[1:])):
                return f"{base}IntRangeAttribute_{ints[0]}_{ints[-1]}"
            return f"{base}IntListAttribute" + "".join(f"_{v}" for v in values)
    raise TypeError(f"not a block state: {state!r}")


def attribute_list(blocks: Iterable[BlockSpec]) -> list[tuple[str, BlockState]]:
    """Every distinct state of the blocks, paired with its type name and sorted by name."""
    unique = dict.fromkeys(state for block in blocks for state in block.states)
    return sorted(((attribute_item_name(state), state) for state in unique), key=lambda p: p[0])


def shorten_attribute_names(
    attrib_type: str, items: list[StructItem | EnumItem]
) -> list[tuple[str, str, int]]:
    """Shorten enum names of the given kind whose prefix no other enum shares.

    Renames the items in place and returns ``(old, new, index)`` for each one.
    """
    enum_idents = [item.ident for item in items if isinstance(item, EnumItem)]
    shortened: list[tuple[str, str, int]] = []
    for index, item in enumerate(items):
        if not isinstance(item, EnumItem):
            continue
        prefix, sep, _ = item.ident.partition(attrib_type)
        if not sep:
            continue
        if sum(ident.startswith(prefix) for ident in enum_idents) == 1:
            shortened.append((item.ident, f"{prefix}{attrib_type}", index))

    for _, new_ident, index in shortened:
        items[index].ident = new_ident
    return shortened


def _attribute_item(name: str, state: BlockState) -> StructItem | EnumItem:
    match state:
        case BoolState():
            return StructItem(name, fields=[Field(ty=parse_type("bool"), public=True)])
        case EnumState(values=values):
            return EnumItem(name, variants=[Variant(to_pascal(v)) for v in values])
        case IntState(values=values):
            return EnumItem(name, variants=[Variant(f"_{v}") for v in values])
    raise TypeError(f"not a block state: {state!r}")


def generate_attributes(
    attributes: Iterable[tuple[str, BlockState]],
) -> tuple[list[StructItem | EnumItem], list[tuple[str, str]]]:
    """Generate a struct or enum per attribute.

    Returns the items and the ``(old, new)`` names of those that were shortened.
    """
    items = [_attribute_item(name, state) for name, state in attributes]
    changes: list[tuple[str, str]] = []
    for kind in ("EnumAttribute", "IntRangeAttribute", "IntListAttribute"):
        changes.extend((old, new) for old, new, _ in shorten_attribute_names(kind, items))
    return items, changes


def _render_impl(version: str, block_name: str, attributes: Sequence[str]) -> str:
    return (
        f"impl BlockState<{version}> for {block_name} {{\n"
        f"    type Attributes = ({', '.join(attributes)});\n"
        "}"
    )


def generate_blocks(version: object, blocks: Iterable[BlockSpec]) -> tuple[str, str]:
    """Generate source text for the attributes and the blocks of one version.

    Returns ``(attributes_source, blocks_source)``.
    """
    blocks = list(blocks)
    attribute_items, changes = generate_attributes(attribute_list(blocks))
    overrides: dict[str, str] = {}
    for old, new in changes:
        overrides.setdefault(old, new)

    ident = version_ident(version)
    chunks: list[str] = []
    for block in blocks:
        block_name = to_pascal(block.display_name).replace("'", "_")
        names = [attribute_item_name(state) for state in block.states]
        attributes = [overrides.get(name, name) for name in names]
        if not attributes:
            chunks.append(render_item(StructItem(block_name)))
        else:
            chunks.append(render_item(StructItem(block_name, fields=[Field(parse_type("u16"))])))
            chunks.append(_render_impl(ident, block_name, attributes))

    blocks_source = "\n\n".join(chunks) + "\n" if chunks else ""
    return render_file(attribute_items), blocks_source