"""Per-version data sets, and the names versions take in generated code."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any


def version_ident(version: Any) -> str:
    """The type name of a version, such as ``V1_21_1`` for ``1.21.1``."""
    text = str(version)
    if not text:
        raise ValueError("a version needs a name")
    return f"V{text.replace('.', '_')}"


def module_name(version: Any) -> str:
    """The module name of a version, such as ``v1_21_1`` for ``1.21.1``."""
    return version_ident(version).lower()


@dataclass
class DataSet:
    """The data known for one version."""

    blocks: list[Any] = field(default_factory=list)
    entities: list[Any] = field(default_factory=list)
    proto: Any = None
    info: Any = None
    generated: Any = None


@dataclass
class DataMap:
    """Data for every version being generated, with the shared manifest and data path."""

    version_data: dict[Hashable, DataSet] = field(default_factory=dict)
    manifest: Any = None
    datapath: Any = None

    def __post_init__(self) -> None:
        self.version_data = dict(self.version_data)