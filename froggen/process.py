"""Clean-up of generated items: naming conventions, var-int markers and manual overrides."""

from __future__ import annotations

import copy
from dataclasses import dataclass

from froggen.naming import to_pascal
from froggen.syntax import (
    ArrayType,
    EnumItem,
    Field,
    PathSegment,
    StructItem,
    TypePath,
    Variant,
    parse_type,
)

VAR_ATTR = "#[frog(var)]"

CORRECT_TYPES = frozenset(
    {"bool", "u8", "u16", "u32", "u64", "i8", "i16", "i32", "i64", "usize", "isize", "f32", "f64"}
)

_VAR_TYPES = {"varint": "u32", "varlong": "u64"}


@dataclass(frozen=True)
class Replaced:
    """The item is dropped and references to it should use ``ident`` instead."""

    ident: str


@dataclass(frozen=True)
class _Replace:
    ident: str


@dataclass(frozen=True)
class _Fields:
    ident: str | None
    fields: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class _Variants:
    ident: str | None
    variants: tuple[Variant, ...]


class _Remove:
    pass


_REMOVE = _Remove()

_STRUCT_ACTIONS: dict[str, _Replace | _Fields | _Remove] = {
    "PreviousMessages": _REMOVE,
}

_ENUM_ACTIONS: dict[str, _Replace | _Variants | _Remove] = {
    "PreviousMessagesSignature": _Variants(
        "PreviousMessages",
        (
            Variant(
                "Signed",
                fields=[Field(ty=ArrayType(parse_type("u8"), "256"))],
                discriminant="0",
            ),
            Variant(
                "MessageId",
                fields=[Field(ty=parse_type("u32"), attrs=[VAR_ATTR])],
                attrs=["#[frog(other)]"],
            ),
        ),
    ),
}


def _process_segment(segment: PathSegment) -> tuple[PathSegment, str | None]:
    returned: str | None = None
    args = []
    for arg in segment.args:
        if isinstance(arg, TypePath):
            inner = []
            for inner_segment in arg.segments:
                new_segment, attr = _process_segment(inner_segment)
                inner.append(new_segment)
                if attr is not None:
                    returned = attr
            arg = TypePath(tuple(inner))
        args.append(arg)

    ident = segment.ident
    if ident in _VAR_TYPES:
        return PathSegment(_VAR_TYPES[ident], tuple(args)), VAR_ATTR
    if ident not in CORRECT_TYPES:
        ident = to_pascal(ident)
    return PathSegment(ident, tuple(args)), returned


def _process_field(field: Field) -> None:
    if not isinstance(field.ty, TypePath):
        return
    segments = []
    for segment in field.ty.segments:
        new_segment, attr = _process_segment(segment)
        segments.append(new_segment)
        if attr is not None:
            field.attrs.append(attr)
    field.ty = TypePath(tuple(segments))


def _process_struct(item: StructItem) -> StructItem | Replaced | None:
    item.ident = to_pascal(item.ident)
    action = _STRUCT_ACTIONS.get(item.ident)
    if isinstance(action, _Remove):
        return None
    if isinstance(action, _Replace):
        return Replaced(action.ident)
    if isinstance(action, _Fields):
        if action.ident is not None:
            item.ident = action.ident
        item.fields = [Field(ty=parse_type(ty), name=name) for name, ty in action.fields]
        return item
    for field in item.fields:
        _process_field(field)
    return item


def _process_enum(item: EnumItem) -> EnumItem | Replaced | None:
    item.ident = to_pascal(item.ident)
    action = _ENUM_ACTIONS.get(item.ident)
    if isinstance(action, _Remove):
        return None
    if isinstance(action, _Replace):
        return Replaced(action.ident)
    if isinstance(action, _Variants):
        if action.ident is not None:
            item.ident = action.ident
        item.variants = copy.deepcopy(list(action.variants))
        return item
    for variant in item.variants:
        variant.ident = to_pascal(variant.ident)
        for field in variant.fields:
            _process_field(field)
    return item


def process_item(
    item: StructItem | EnumItem,
) -> StructItem | EnumItem | Replaced | None:
    """Clean up a generated item.

    Returns the processed copy, a :class:`Replaced` marker, or None when the
    item is to be removed.  The given item is left untouched.
    """
    item = copy.deepcopy(item)
    if isinstance(item, StructItem):
        return _process_struct(item)
    if isinstance(item, EnumItem):
        return _process_enum(item)
    return item