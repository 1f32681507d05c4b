"""The generator's configuration file: which versions to generate."""

from __future__ import annotations

import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class VersionTuple:
    """A version used for naming, paired with the version whose data is used."""

    base: str
    target: str

    @classmethod
    def from_tuple(cls, pair: tuple[str, str]) -> VersionTuple:
        """Build from a ``(base, target)`` pair."""
        base, target = pair
        return cls(base, target)

    def __iter__(self) -> Iterator[str]:
        yield self.base
        yield self.target


@dataclass
class Config:
    """The list of versions to generate."""

    version: list[VersionTuple] = field(default_factory=list)

    def __iter__(self) -> Iterator[VersionTuple]:
        return iter(self.version)

    def __len__(self) -> int:
        return len(self.version)

    def __getitem__(self, index: int) -> VersionTuple:
        return self.version[index]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build from parsed configuration data; raises ValueError if it is malformed."""
        if "version" not in data:
            raise ValueError("configuration has no 'version' list")
        entries = data["version"]
        if not isinstance(entries, list):
            raise ValueError("'version' must be a list of tables")
        versions = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise ValueError(f"version entry is not a table: {entry!r}")
            try:
                base, target = entry["base"], entry["target"]
            except KeyError as err:
                raise ValueError(f"version entry is missing {err.args[0]!r}") from err
            if not isinstance(base, str) or not isinstance(target, str):
                raise ValueError(f"version entry values must be strings: {entry!r}")
            versions.append(VersionTuple(base, target))
        return cls(versions)

    def to_dict(self) -> dict[str, Any]:
        """The configuration as plain data."""
        return {"version": [{"base": v.base, "target": v.target} for v in self.version]}


def load_config(path: str | Path) -> Config:
    """Read a TOML configuration file."""
    with open(path, "rb") as handle:
        data = tomllib.load(handle)
    return Config.from_dict(data)