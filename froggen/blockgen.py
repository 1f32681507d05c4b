"""Generation of the block source files shared by all versions and per version."""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from froggen.blocks import (
    BlockSpec,
    BlockState,
    attribute_item_name,
    attribute_list,
    generate_attributes,
)
from froggen.datamap import DataMap, module_name, version_ident
from froggen.naming import to_pascal
from froggen.syntax import render_file

logger = logging.getLogger(__name__)

GENERATED_BY = "@generated by 'froggen'"

_BLOCK_CRATE = Path("crates/froglight-block/src")


class _BlockType(enum.Enum):
    UNIT = "unit"
    U16 = "u16"


def _block_ident(name: str) -> str:
    return to_pascal(name.replace("'", "_"))


def _rust_float(value: float) -> str:
    """Format a number the way it is written before an ``f32`` suffix."""
    value = float(value)
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if math.isnan(value):
        return "NaN"
    if value == int(value):
        return str(int(value))
    return repr(value)


def _attribute_names(states: Iterable[BlockState], overrides: Sequence[tuple[str, str]]) -> str:
    names = []
    for state in states:
        name = attribute_item_name(state)
        replacement = next((new for old, new in overrides if old == name), None)
        names.append(replacement if replacement is not None else name)
    return ", ".join(names)


def generate_block_list(datamap: DataMap) -> str:
    """Source declaring every block of every version, sorted by name."""
    block_types: dict[str, _BlockType] = {}
    for data in datamap.version_data.values():
        for block in data.blocks:
            kind = _BlockType.UNIT if block.state_count() == 1 else _BlockType.U16
            if block.name not in block_types or kind is _BlockType.U16:
                block_types[block.name] = (
                    kind if block.name not in block_types else _BlockType.U16
                )

    tokens = []
    for name in sorted(block_types):
        ident = _block_ident(name)
        if block_types[name] is _BlockType.UNIT:
            tokens.append(f"    pub struct {ident};\n")
        else:
            tokens.append(f"    pub struct {ident}(pub(super) u16);\n")
    block_tokens = "".join(tokens)

    return (
        "//! Generated blocks for all\n"
        "//! [`Versions`](froglight_protocol::traits::Version).\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(missing_docs)]\n"
        "\n"
        "froglight_macros::impl_generated_blocks! {\n"
        f"{block_tokens}\n"
        "}"
    )


def generate_attribute_file(datamap: DataMap) -> tuple[str, list[tuple[str, str]]]:
    """Source declaring every block attribute of every version.

    Returns the source and the ``(old, new)`` names of shortened attributes.
    """
    attributes: dict[str, BlockState] = {}
    for data in datamap.version_data.values():
        attributes.update(attribute_list(data.blocks))

    items, modified = generate_attributes(sorted(attributes.items(), key=lambda p: p[0]))
    body = "\n".join(f"    {line}" for line in render_file(items).splitlines())

    content = (
        "//! Generated attributes for all\n"
        "//! [`Versions`](froglight_protocol::traits::Version).\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(missing_docs, non_camel_case_types)]\n"
        "\n"
        "froglight_macros::impl_generated_attributes! {\n"
        f"{body}\n"
        "}\n"
    )
    return content, modified


def generate_block_impl(
    version: Any, blocks: Iterable[BlockSpec], overrides: Sequence[tuple[str, str]]
) -> str:
    """Source implementing the block traits for one version."""
    version_name = version_ident(version)
    module = module_name(version)
    parts = [
        f"//! Generated block implementations for [`{version_name}`].\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(\n"
        "    missing_docs,\n"
        "    clippy::cast_possible_truncation,\n"
        "    clippy::unreadable_literal,\n"
        "    clippy::wildcard_imports\n"
        ")]\n"
        "\n"
        f"use froglight_protocol::versions::{module}::{version_name};\n"
        "\n"
        "use super::{attribute::*, block::*};\n"
        "use crate::{BlockState, BlockStateExt};\n"
        "\n"
        "froglight_macros::impl_block_traits! {\n"
        f"    {version_name} => {{\n"
    ]

    for block in blocks:
        ident = _block_ident(block.name)
        diggable = str(bool(block.diggable)).lower()
        transparent = str(bool(block.transparent)).lower()
        properties = (
            f'"minecraft:{block.name}", "minecraft:{block.material}", '
            f"{diggable}, {_rust_float(block.hardness)}f32, "
            f"{_rust_float(block.resistance)}f32, {transparent}, "
            f'{block.emit_light}u8, "minecraft:{block.bounding_box}"'
        )
        if not block.states:
            parts.append(f"        {ident} => [{properties}],\n")
        else:
            default = block.default_state - block.min_state_id
            attributes = _attribute_names(block.states, overrides)
            parts.append(
                f"        {ident} => ({attributes}),\n"
                f"                [{properties}, {default}],\n"
            )

    parts.append("    }\n}\n")
    return "".join(parts)


def generate_resolve(version: Any, blocks: Iterable[BlockSpec]) -> str:
    """Source of the vanilla block resolver for one version."""
    version_name = version_ident(version)
    module = module_name(version)
    registrations = "".join(
        f'    "minecraft:{block.name}" => |s, id|  '
        f"s.get_known_block::<{_block_ident(block.name)}>(id).map(Into::into),\n"
        for block in blocks
    )
    return (
        f"//! [`BlockResolver`] [`{version_name}`] for [`VanillaResolver`].\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(clippy::wildcard_imports)]\n"
        "\n"
        f"use froglight_protocol::versions::{module}::{version_name};\n"
        "use phf::phf_map;\n"
        "\n"
        "use super::{BlockResolver, VanillaResolver};\n"
        "use crate::{block::*, BlockStorage};\n"
        "\n"
        f"impl BlockResolver<{version_name}> for VanillaResolver {{\n"
        "    type Output = Option<Blocks>;\n"
        f"    fn resolve(block_id: u32, storage: &BlockStorage<{version_name}>) "
        "-> Self::Output {\n"
        "        storage\n"
        "            .get_stored_default(block_id)\n"
        "            .and_then(|dyn_block| BLOCKS.get(dyn_block.resource_key()))\n"
        "            .and_then(|func| func(storage, block_id))\n"
        "    }\n"
        "}\n"
        "\n"
        f"type BlockFn = fn(&BlockStorage<{version_name}>, u32) -> Option<Blocks>;\n"
        "static BLOCKS: phf::Map<&'static str, BlockFn> = phf_map! {\n"
        f"{registrations}}};\n"
    )


def generate_vanilla_storage(versions: Iterable[Any]) -> str:
    """Source of the vanilla storage module that ties all versions together."""
    version_names = sorted(version_ident(v) for v in versions)
    modules = [name.lower() for name in version_names]

    imports = ", ".join(f"{m}::{v}" for m, v in zip(modules, version_names, strict=True))
    module_lines = "\n".join(f"mod {m};" for m in modules)
    registrations = "\n".join(
        f"        app.register_type_data::<Self, ReflectBlockBuilder<{v}>>();"
        for v in version_names
    )
    initializations = "\n".join(
        f"        app.init_resource::<BlockStorageArc<{v}>>();" for v in version_names
    )

    return (
        "use bevy_app::App;\n"
        "use bevy_reflect::Reflect;\n"
        f"use froglight_protocol::versions::{{{imports}}};\n"
        "\n"
        "use super::{BlockStorageArc, ReflectBlockBuilder};\n"
        "\n"
        f"{module_lines}\n"
        "\n"
        "/// A builder for vanilla block storage.\n"
        "#[derive(Debug, Default, Clone, Copy, PartialEq, Eq, Hash, Reflect)]\n"
        "pub struct VanillaBuilder;\n"
        "\n"
        "impl VanillaBuilder {\n"
        "    pub(super) fn build(app: &mut App) {\n"
        "        app.register_type::<Self>();\n"
        f"{registrations}\n"
        "    }\n"
        "    pub(super) fn finish(app: &mut App) {\n"
        f"{initializations}\n"
        "    }\n"
        "}\n"
    )


def generate_vanilla_version(version: Any, blocks: Iterable[BlockSpec]) -> str:
    """Source registering every block of one version in the vanilla storage."""
    version_name = version_ident(version)
    module = module_name(version)
    registrations = "\n".join(
        f"        storage.register::<{_block_ident(block.name)}>();" for block in blocks
    )
    return (
        f"//! [`VanillaBuilder`] for [`{version_name}`].\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(clippy::wildcard_imports)]\n"
        "\n"
        "use bevy_ecs::world::World;\n"
        f"use froglight_protocol::versions::{module}::{version_name};\n"
        "\n"
        "use super::VanillaBuilder;\n"
        "use crate::{block::*, BlockBuilder, BlockStorage, ReflectBlockBuilder};\n"
        "\n"
        f"impl BlockBuilder<{version_name}> for VanillaBuilder {{\n"
        "    #[expect(clippy::too_many_lines)]\n"
        "    fn build(\n"
        f"        storage: &mut BlockStorage<{version_name}>,\n"
        "        _: &mut World,\n"
        f"        _: &[&ReflectBlockBuilder<{version_name}>],\n"
        "    ) {\n"
        f"{registrations}\n"
        "    }\n"
        "}\n"
    )


def _write(path: Path, content: str) -> Path:
    if not path.exists():
        logger.warning('BlockGenerator: Creating file "%s"', path)
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_block_files(datamap: DataMap, root: str | Path) -> list[Path]:
    """Write every block source file under the repository ``root``.

    Returns the paths written, in the order they were written.
    """
    if not datamap.version_data:
        logger.warning("BlockGenerator: No data to generate blocks from!")
        return []

    crate = Path(root) / _BLOCK_CRATE
    generated = crate / "generated"
    written = [_write(generated / "block.rs", generate_block_list(datamap))]

    attributes, modified = generate_attribute_file(datamap)
    written.append(_write(generated / "attribute.rs", attributes))
    for version, data in datamap.version_data.items():
        content = generate_block_impl(version, data.blocks, modified)
        written.append(_write(generated / f"{module_name(version)}.rs", content))

    vanilla = crate / "storage" / "vanilla"
    for version, data in datamap.version_data.items():
        content = generate_vanilla_version(version, data.blocks)
        written.append(_write(vanilla / f"{module_name(version)}.rs", content))
    written.append(_write(vanilla / "mod.rs", generate_vanilla_storage(datamap.version_data)))

    resolve = crate / "traits" / "resolve"
    for version, data in datamap.version_data.items():
        content = generate_resolve(version, data.blocks)
        written.append(_write(resolve / f"{module_name(version)}.rs", content))

    return written