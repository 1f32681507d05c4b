"""Runs every generator over a data map."""

from __future__ import annotations

from pathlib import Path

from froggen.blockgen import write_block_files
from froggen.datamap import DataMap
from froggen.entitygen import write_entity_files
from froggen.registrygen import write_registry_files


def generate_all(datamap: DataMap, root: str | Path) -> list[Path]:
    """Write the block, entity and registry files under ``root``.

    Returns every path written.
    """
    written = write_block_files(datamap, root)
    written.extend(write_entity_files(datamap, root))
    written.extend(write_registry_files(datamap, root))
    return written