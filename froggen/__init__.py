"""Generate source code for protocol types, blocks, entities and registries from version data."""

__version__ = "0.1.0"