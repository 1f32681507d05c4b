"""Generation of the entity and entity component source files."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from froggen.blockgen import GENERATED_BY
from froggen.datamap import DataMap
from froggen.naming import to_pascal

logger = logging.getLogger(__name__)

_ENTITY_GENERATED = Path("crates/froglight-entity/src/generated")


@dataclass(frozen=True)
class EntitySpec:
    """The description of one entity."""

    name: str
    category: str
    kind: str
    width: float
    height: float
    metadata: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", tuple(self.metadata))


@dataclass(frozen=True)
class MetadataAction:
    """How a metadata key becomes a component.

    ``data`` is the component's field list, ``default`` its default value and
    ``name`` an explicit component name. A ``data`` of None removes the component.
    """

    data: str | None
    default: str | None = None
    name: str | None = None

    @property
    def removed(self) -> bool:
        """Whether the component is left out."""
        return self.data is None


_REMOVE = MetadataAction(None)


def _t(data: str, default: str | None = None) -> MetadataAction:
    return MetadataAction(data, default)


METADATA_ACTIONS: dict[str, MetadataAction] = {
    "air_supply": _t("()"),
    "armadillo_state": _t("(u32)", "0u32"),
    "arrow_count": _t("(u32)", "0u32"),
    "baby": _t("(bool)", "false"),
    "biting": _t("(bool)", "false"),
    "boost_time": _t("(u32)", "0u32"),
    "brightness_override": _t("(bool)", "false"),
    "bubble_time": _t("(u32)", "0u32"),
    "can_duplicate": _t("(bool)", "true"),
    "client_anger_level": _t("(u32)", "0u32"),
    "converting": _t("(bool)", "false"),
    "custom_name_visible": _t("(bool)", "true"),
    "custom_name": _t("(CompactString)"),
    "dancing": _t("(bool)", "false"),
    "dangerous": _t("(bool)", "false"),
    "dark_ticks_remaining": _t("(u32)", "0u32"),
    "dash": _t("(bool)", "false"),
    "display_block": _t("(u32)", "9u32"),
    "drop_seed_at_tick": _t("(u32)", "0u32"),
    "eat_counter": _t("(u32)", "0u32"),
    "foil": _t("(bool)", "false"),
    "from_bucket": _t("(bool)", "false"),
    "fuel": _t("(bool)", "false"),
    "fuse": _t("(u32)", "40u32"),
    "going_home": _t("(bool)", "false"),
    "got_fish": _t("(bool)", "false"),
    "has_egg": _t("(bool)", "false"),
    "has_left_horn": _t("(bool)", "true"),
    "has_right_horn": _t("(bool)", "true"),
    "health": _t("()"),
    "height": _t("(f32)", "1f32"),
    "hurt": _t("(bool)", "false"),
    "hurtdir": _REMOVE,
    "immune_to_zombification": _t("(bool)", "false"),
    "interested": _t("(bool)", "false"),
    "is_celebrating": _t("(bool)", "false"),
    "is_charging_crossbow": _t("(bool)", "false"),
    "is_charging": _t("(bool)", "false"),
    "is_dancing": _t("(bool)", "false"),
    "is_ignited": _t("(bool)", "false"),
    "is_lying": _t("(bool)", "false"),
    "is_powered": _t("(bool)", "false"),
    "is_screaming_goat": _t("(bool)", "false"),
    "laying_egg": _t("(bool)", "false"),
    "left_rotation": _t("(f32)", "0f32"),
    "loyalty": _t("(bool)", "false"),
    "moistness_level": _t("(u32)", "0u32"),
    "moving": _t("(bool)", "false"),
    "no_gravity": _t("(bool)", "false"),
    "owneruuid": MetadataAction("(Uuid)", None, "OwnerUuid"),
    "paddle_left": _t("(bool)", "false"),
    "paddle_right": _t("(bool)", "false"),
    "painting_variant": _t("(u32)", "0u32"),
    "peek": _t("(bool)", "false"),
    "phase": _t("(u32)", "0u32"),
    "pierce_level": _t("(u32)", "0u32"),
    "player_absorption": _t("(u32)", "0u32"),
    "player_main_hand": _t("(bool)", "true"),
    "playing_dead": _t("(bool)", "false"),
    "puff_state": _t("(u32)", "0u32"),
    "pumpkin": _t("(bool)", "false"),
    "radius": _t("(f32)", "1f32"),
    "relax_state_one": _t("(bool)", "false"),
    "remaining_anger_time": _t("(u32)", "0u32"),
    "right_rotation": _t("(f32)", "0f32"),
    "rotation": _t("(f32)", "0f32"),
    "saddle": _t("(bool)", "false"),
    "scale": _t("(f32)", "1f32"),
    "score": _t("(u32)", "0u32"),
    "shadow_radius": _t("()"),
    "shadow_strength": _t("()"),
    "sheared": _t("(bool)", "false"),
    "shoulder_left": _REMOVE,
    "shoulder_right": _REMOVE,
    "show_bottom": _t("(bool)", "true"),
    "silent": _t("(bool)", "false"),
    "size": _t("(f32)", "1f32"),
    "sneeze_counter": _t("(u32)", "0u32"),
    "special_type": _t("(bool)", "false"),
    "spell_casting": _t("(bool)", "false"),
    "standing": _t("(bool)", "true"),
    "stared_at": _t("(bool)", "false"),
    "state": _t("(u32)", "0u32"),
    "stinger_count": _t("(u32)", "0u32"),
    "strength": _t("()"),
    "suffocating": _t("(bool)", "false"),
    "swell_dir": _REMOVE,
    "ticks_frozen": _t("(u32)", "0u32"),
    "travelling": _t("(bool)", "false"),
    "trusting": _t("(bool)", "false"),
    "type_variant": _t("(u32)", "0u32"),
    "type": _t("(u32)", "0u32"),
    "unhappy_counter": _t("(u32)", "0u32"),
    "using_item": _t("(bool)", "false"),
    "variant": _t("(u32)", "0u32"),
    "view_range": _t("()"),
    "waiting": _t("(bool)", "false"),
    "width": _t("(f32)", "1f32"),
    "wool": _t("(u32)", "0u32"),
}

# Metadata keys that are not required on entities.
REQUIRED_FILTER = frozenset(
    {
        "arrow_count",
        "custom_name_visible",
        "custom_name",
        "hurtdir",
        "interested",
        "owneruuid",
        "pose",
        "shoulder_left",
        "shoulder_right",
        "sleeping_pos",
        "stinger_count",
        "swell_dir",
    }
)


def _rust_float(value: float) -> str:
    value = float(value)
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if math.isnan(value):
        return "NaN"
    if value == int(value):
        return str(int(value))
    return repr(value)


def _latest_entities(datamap: DataMap) -> dict[str, Any]:
    entities: dict[str, Any] = {}
    for data in datamap.version_data.values():
        for entity in data.entities:
            entities[entity.name] = entity
    return entities


def _entity_line(entity: EntitySpec) -> str:
    parts = [
        f"    {to_pascal(entity.name)} => {{ ",
        f"{to_pascal(entity.category)}, ",
        f"{to_pascal(entity.kind)}Entity, ",
        f"EntitySize({_rust_float(entity.width)}f32,{_rust_float(entity.height)}f32), ",
    ]
    components = []
    for meta in entity.metadata:
        if meta in REQUIRED_FILTER:
            continue
        action = METADATA_ACTIONS.get(meta)
        if action is not None and action.name is not None:
            components.append(action.name)
        else:
            components.append(to_pascal(meta))
    parts.append(", ".join(components))
    return "".join(parts)


def generate_entities(datamap: DataMap) -> str:
    """Source declaring every entity, using the latest data for each."""
    entities = sorted(_latest_entities(datamap).items(), key=lambda pair: pair[0])
    entity_content = " },\n".join(_entity_line(entity) for _, entity in entities)
    if entities:
        entity_content += " }"

    return (
        "//! Generated entities for all versions.\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(clippy::unreadable_literal, clippy::wildcard_imports, missing_docs, "
        "unused_parens)]\n"
        "\n"
        "use bevy_ecs::component::Component;\n"
        '#[cfg(feature = "reflect")]\n'
        "use bevy_ecs::reflect::ReflectComponent;\n"
        '#[cfg(feature = "reflect")]\n'
        "use bevy_reflect::{std_traits::ReflectDefault, Reflect};\n"
        "\n"
        "use super::component::*;\n"
        "use crate::EntitySize;\n"
        "\n"
        "froglight_macros::impl_generated_entities! {\n"
        f"{entity_content}\n"
        "}\n"
    )


def _metadata_lines(metadata: list[str]) -> Iterable[str]:
    last = len(metadata) - 1
    for index, meta in enumerate(metadata):
        ident = to_pascal(meta)
        action = METADATA_ACTIONS.get(meta)
        if action is None:
            logger.warning('EntityGenerator: Metadata type not found for "%s"', ident)
            if index < last:
                yield f"    {ident} => (), // unknown\n"
            else:
                yield f"    {ident} => () // unknown"
            continue
        if action.removed:
            continue
        name = action.name if action.name is not None else ident
        line = f"    {name} => {action.data}"
        if action.default is not None:
            line += f" = {action.default}"
        if index < last:
            line += ",\n"
        yield line


def generate_metadata(datamap: DataMap) -> str:
    """Source declaring the categories, kinds and metadata components of all entities."""
    entities = _latest_entities(datamap).values()

    metadata: set[str] = set()
    cat_and_type: set[str] = set()
    for entity in entities:
        metadata.update(entity.metadata)
        cat_and_type.add(str(entity.category))
        cat_and_type.add(f"{entity.kind}Entity")

    parts = ["    // Mob Categories and Types\n"]
    for name in sorted(cat_and_type, key=str.lower):
        parts.append(f"    {to_pascal(name)},\n")
    parts.append("    // Entity Components\n")
    parts.extend(_metadata_lines(sorted(metadata)))
    metadata_content = "".join(parts)

    return (
        "//! Generated entity components.\n"
        "//!\n"
        f"//! {GENERATED_BY}\n"
        "#![allow(clippy::unreadable_literal, clippy::wildcard_imports, missing_docs, "
        "unused_parens)]\n"
        "\n"
        "use bevy_ecs::component::Component;\n"
        '#[cfg(feature = "reflect")]\n'
        "use bevy_ecs::reflect::ReflectComponent;\n"
        '#[cfg(feature = "reflect")]\n'
        "use bevy_reflect::Reflect;\n"
        "use compact_str::CompactString;\n"
        "use uuid::Uuid;\n"
        "\n"
        "froglight_macros::impl_generated_components! {\n"
        f"{metadata_content}\n"
        "}\n"
    )


def _write(path: Path, content: str) -> Path:
    if not path.exists():
        logger.warning('EntityGenerator: Creating file "%s"', path)
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_entity_files(datamap: DataMap, root: str | Path) -> list[Path]:
    """Write the entity and component source files under the repository ``root``.

    Returns the paths written.
    """
    if not datamap.version_data:
        logger.warning("EntityGenerator: No data to generate entities from!")
        return []
    generated = Path(root) / _ENTITY_GENERATED
    return [
        _write(generated / "entity.rs", generate_entities(datamap)),
        _write(generated / "component.rs", generate_metadata(datamap)),
    ]