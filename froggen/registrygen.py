"""Generation of the registry source files.

Each version's ``DataSet.generated`` holds a mapping of registry name to
:class:`RegistryReport`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from froggen.blockgen import GENERATED_BY
from froggen.datamap import DataMap, module_name, version_ident
from froggen.naming import to_pascal

logger = logging.getLogger(__name__)

_REGISTRY_GENERATED = Path("crates/froglight-registry/src/generated")
_NAMESPACE = "minecraft:"


@dataclass(frozen=True)
class RegistryEntry:
    """One entry of a registry."""

    protocol_id: int


@dataclass
class RegistryReport:
    """The entries of one registry, and its default entry if it has one."""

    entries: dict[str, RegistryEntry] = field(default_factory=dict)
    default: str | None = None

    def __post_init__(self) -> None:
        self.entries = dict(self.entries)


def _registries(data: Any) -> Mapping[str, RegistryReport]:
    return data.generated or {}


def _registry_ident(name: str) -> str:
    while name.startswith(_NAMESPACE):
        name = name[len(_NAMESPACE):]
    for char in ".:/\\":
        name = name.replace(char, "_")
    return to_pascal(name)


def generate_registries(datamap: DataMap) -> str:
    """Source declaring an enum for every registry of every version."""
    combined: dict[str, RegistryReport] = {}
    for data in datamap.version_data.values():
        for name, report in _registries(data).items():
            if name in combined:
                combined[name].entries.update(report.entries)
            else:
                combined[name] = RegistryReport(dict(report.entries), report.default)

    parts = [
        "//! Generated registries for all\n"
        "//! [`Versions`](froglight_protocol::traits::Version).\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(missing_docs)]\n"
        "\n"
        "use froglight_macros::FrogRegistry;\n"
        "\n"
    ]

    for name, report in sorted(combined.items(), key=lambda pair: pair[0]):
        enum_content = []
        for entry_name in sorted(report.entries):
            entry_ident = _registry_ident(entry_name)
            if report.default == entry_name:
                enum_content.append("    #[default]\n")
            enum_content.append(f'    #[frog(key = "{entry_name}")]\n    {entry_ident},\n')

        if report.default is not None:
            parts.append(
                "#[derive(Debug, Default, Clone, Copy, PartialEq, Eq, PartialOrd, Ord, Hash, "
                "FrogRegistry)]\n"
            )
        else:
            parts.append(
                "#[derive(Debug, Clone, Copy, PartialEq, Eq, PartialOrd, Ord, Hash, "
                "FrogRegistry)]\n"
            )
        parts.append('#[cfg_attr(feature = "reflect", derive(bevy_reflect::Reflect))]\n')
        parts.append(
            f"pub enum {_registry_ident(name)}Registry {{\n{''.join(enum_content)}\n}}\n"
        )

    return "".join(parts)


def generate_registry_impls(version: Any, report: Mapping[str, RegistryReport]) -> str:
    """Source listing every registry's entries, in protocol id order, for one version."""
    version_name = version_ident(version)
    module = module_name(version)

    lines = []
    for name, registry in sorted(report.items(), key=lambda pair: pair[0]):
        entries = sorted(registry.entries.items(), key=lambda pair: pair[1].protocol_id)
        idents = ", ".join(_registry_ident(entry_name) for entry_name, _ in entries)
        lines.append(f"        {_registry_ident(name)}Registry {{ {idents} }},\n")
    impl_content = "".join(lines)

    return (
        f"//! Generated registry impls for [`{version_name}`].\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(clippy::wildcard_imports)]\n"
        "\n"
        f"use froglight_protocol::versions::{module}::{version_name};\n"
        "\n"
        "use super::registry::*;\n"
        "use crate::{RegistryId, RegistryKey};\n"
        "\n"
        "froglight_macros::impl_generated_registries! {\n"
        f"    {version_name} => {{\n"
        f"{impl_content}    }}\n"
        "}\n"
    )


def generate_reflect(datamap: DataMap) -> str:
    """Source registering every registry enum for reflection."""
    names = sorted({name for data in datamap.version_data.values() for name in _registries(data)})
    registrations = "".join(
        f"    app.register_type::<{_registry_ident(name)}Registry>();\n" for name in names
    )
    return (
        "#![allow(clippy::wildcard_imports)]\n"
        "\n"
        "use bevy_app::App;\n"
        "\n"
        "use super::registry::*;\n"
        "\n"
        "pub(crate) fn register(app: &mut App) {\n"
        f"{registrations}"
        "}\n"
    )


def _write(path: Path, content: str) -> Path:
    if not path.exists():
        logger.warning('RegistryGenerator: Creating file "%s"', path)
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_registry_files(datamap: DataMap, root: str | Path) -> list[Path]:
    """Write every registry source file under the repository ``root``.

    Returns the paths written, in the order they were written.
    """
    generated = Path(root) / _REGISTRY_GENERATED
    written = [
        _write(generated / "registry.rs", generate_registries(datamap)),
        _write(generated / "reflect.rs", generate_reflect(datamap)),
    ]
    for version, data in datamap.version_data.items():
        content = generate_registry_impls(version, _registries(data))
        written.append(_write(generated / f"{module_name(version)}.rs", content))
    return written