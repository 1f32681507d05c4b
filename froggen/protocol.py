"""The description of protocol types that packets and protocol types are generated from.

A protocol type is either a :class:`NamedType`, referring to a type by name, or an
:class:`InlineType` whose ``name`` is the kind of type (``"container"``,
``"bitfield"``, ``"switch"`` and so on) and whose ``args`` describe it.  Bitfields
and containers carry a tuple of :class:`BitfieldArg` or :class:`ContainerArg`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_INTEGER = re.compile(r"[+-]?\d+")


def _freeze_mapping(instance: Any, attr: str) -> None:
    object.__setattr__(instance, attr, dict(getattr(instance, attr)))


@dataclass(frozen=True)
class NamedType:
    """A reference to a type by name, such as ``varint`` or ``void``."""

    name: str


@dataclass(frozen=True)
class InlineType:
    """A type described in place: its kind and its arguments."""

    name: str
    args: Any

    def __post_init__(self) -> None:
        if isinstance(self.args, list):
            object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class ArrayCountField:
    """An array whose length is held in another field."""

    count_field: str
    kind: ProtocolType


@dataclass(frozen=True)
class ArrayCount:
    """An array prefixed by a length of the given count type."""

    count_type: str
    kind: ProtocolType


@dataclass(frozen=True)
class ArrayWithLengthOffset:
    """An array whose length is offset by a constant."""

    array: ArrayCountField | ArrayCount
    length_offset: int


@dataclass(frozen=True)
class BitfieldArg:
    """One field of a bitfield, ``size`` bits wide."""

    name: str
    size: int
    signed: bool = False


@dataclass(frozen=True)
class BitflagArgs:
    """A set of named boolean flags packed into an integer."""

    kind: str
    flags: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", tuple(self.flags))


@dataclass(frozen=True)
class BufferCount:
    """A buffer of a fixed number of bytes."""

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"buffer count must not be negative: {self.count}")


@dataclass(frozen=True)
class BufferCountType:
    """A buffer prefixed by a length of the given count type."""

    count_type: str


@dataclass(frozen=True)
class ContainerArg:
    """One field of a container; anonymous when ``name`` is None."""

    name: str | None
    kind: ProtocolType


@dataclass(frozen=True)
class EntityMetadataArgs:
    """Entity metadata, terminated by ``end_val``."""

    kind: str
    end_val: int


@dataclass(frozen=True)
class MapperArgs:
    """An integer type whose values map to names."""

    kind: str
    mappings: Mapping[str, str]

    def __post_init__(self) -> None:
        _freeze_mapping(self, "mappings")
        for key in self.mappings:
            if not _INTEGER.fullmatch(key):
                raise ValueError(f"mapper key is not an integer: {key!r}")


@dataclass(frozen=True)
class OptionArgs:
    """A value that may be absent."""

    kind: ProtocolType


@dataclass(frozen=True)
class PStringArgs:
    """A length-prefixed string."""

    count: BufferCount | BufferCountType


@dataclass(frozen=True)
class RegistryEntryHolderArgs:
    """A registry entry given either by id or inline."""

    base_name: str
    otherwise: ContainerArg


@dataclass(frozen=True)
class RegistryEntryHolderSetArgs:
    """A set of registry entries given either by tag or inline."""

    base: ContainerArg
    otherwise: ContainerArg


@dataclass(frozen=True)
class SwitchArgs:
    """A type chosen by the value of another field."""

    compare_to: str
    fields: Mapping[str, ProtocolType]
    default: ProtocolType | None = None

    def __post_init__(self) -> None:
        _freeze_mapping(self, "fields")


@dataclass(frozen=True)
class TopBitSetTerminatedArrayArgs:
    """An array ending at the first element whose top bit is clear."""

    kind: ProtocolType


ProtocolType = NamedType | InlineType