# froggen

`froggen` is a library that turns descriptions of a game version's data
into source code. It covers protocol types and packets, blocks and their
attributes, entities and their components, and registry enums.

You build the in-memory description of each version's data, put it in a
`DataMap`, and call the generators. They either return the generated
text or write it into a checkout of the target repository.

## Modules

- `froggen.naming`: identifier helpers. `to_pascal` and `to_snake`
  convert case. `format_field_name` appends `_` to reserved words and
  converts other names to snake case. `format_variant_name` drops a
  `namespace:` prefix and replaces dots with underscores.
- `froggen.syntax`: a small model of generated code. It has
  `PathSegment`, `TypePath`, `ArrayType`, `Field`, `Variant`,
  `StructItem` and `EnumItem`. `parse_type` reads a type written as text,
  and `render_type`, `render_item` and `render_file` write the model
  back out as text.
- `froggen.state`: `State`, `ItemState` and `TargetState`. These track
  which item and which field or variant is being generated. Nested items
  are named `<item>_<target>`.
- `froggen.result`: `TypeResult` is a generated type with its field
  attributes. `None` stands for a void type. This module also defines
  `GenerationError` and the helpers `item_from_str`, `item_from_state`,
  `unsupported`, `with_attr`, `with_attrs` and `map_item`.
- `froggen.codefile`: `CodeFile` collects generated structs and enums.
  It creates items and adds fields, attributes and variants to them, and
  `render()` returns the collected items as text.
- `froggen.protocol`: the protocol type description. A type is either a
  `NamedType` or an `InlineType`. An inline type takes argument classes:
  - arrays: `ArrayCountField`, `ArrayCount`, `ArrayWithLengthOffset`
  - bit types: `BitfieldArg`, `BitflagArgs`
  - buffers and strings: `BufferCount`, `BufferCountType`, `PStringArgs`
  - containers, mappers and options: `ContainerArg`, `MapperArgs`, `OptionArgs`
  - switches: `SwitchArgs`
  - others: `EntityMetadataArgs`, `RegistryEntryHolderArgs`,
    `RegistryEntryHolderSetArgs`, `TopBitSetTerminatedArrayArgs`
- `froggen.packet`: `generate_type` generates one protocol type into a
  `CodeFile`. `generate_types` generates every entry of a mapping, in
  name order. `generate_packets` does the same for the `packet_*`
  entries only. The last two return `(CodeFile, had_error)`.
- `froggen.process`: `process_item` returns a cleaned-up copy of an item:
  - names are converted to Pascal case;
  - `varint` and `varlong` become `u32` and `u64`, with a
    `#[frog(var)]` field attribute;
  - fixed overrides are applied.

  It can also return a `Replaced` marker, or `None` when the item is
  removed.
- `froggen.blocks`: `BoolState`, `EnumState`, `IntState` and `BlockSpec`.
  It provides `attribute_item_name`, `attribute_list`,
  `shorten_attribute_names`, `generate_attributes` and
  `generate_blocks`. `generate_blocks` returns the attribute source and
  the block source for one version.
- `froggen.config`: `VersionTuple` and `Config`. `load_config` reads a
  TOML file made of `[[version]]` tables, each with `base` and `target`
  strings.
- `froggen.cli`: `CliArgs`, `find_cache_dir` and `parse_args(argv)`.
  - `parse_args` accepts `-c/--config`, `-d/--dir`, `--cache`,
    `-r/--redownload`, `-v/--verbose` and `-q/--quiet`.
  - It sets up logging, finds and creates the cache directory, loads the
    configuration, and returns `(CliArgs, Config)`.
  - When no cache directory is given, it uses `target/generate` in the
    nearest directory at or above the current one that has a `target`
    folder.
- `froggen.datamap`: `DataSet`, `DataMap`, and the naming helpers
  `version_ident` and `module_name`. For `"1.21.1"` these give
  `V1_21_1` and `v1_21_1`.
- `froggen.blockgen`: builds the shared block list, the attribute file,
  the per-version trait implementations, the vanilla storage and the
  resolver sources. `write_block_files` writes them under
  `crates/froglight-block/src`.
- `froggen.entitygen`: `EntitySpec`, `MetadataAction`,
  `generate_entities` and `generate_metadata`. `write_entity_files`
  writes the output under `crates/froglight-entity/src/generated`.
- `froggen.registrygen`: `RegistryEntry`, `RegistryReport`,
  `generate_registries`, `generate_registry_impls` and
  `generate_reflect`. `write_registry_files` writes the output under
  `crates/froglight-registry/src/generated`. Each `DataSet.generated`
  holds a mapping from registry name to `RegistryReport`.
- `froggen.generator`: `generate_all(datamap, root)` writes the block,
  entity and registry files and returns the paths it wrote.

## Example

```python
from froggen.naming import format_field_name, format_variant_name

format_field_name("type")                    # "type_"
format_variant_name("minecraft:item.stack")  # "item_stack"
```

Generating protocol types:

```python
from froggen.packet import generate_types
from froggen.protocol import ContainerArg, InlineType, NamedType

types = {"pos": InlineType("container", (ContainerArg("x", NamedType("i32")),))}
file, had_error = generate_types(types)
print(file.render())
```

Writing every block, entity and registry file for a prepared data map:

```python
from froggen.generator import generate_all

paths = generate_all(datamap, "path/to/repository")
```

## What it does not do

- It does not download or parse version data. You build `BlockSpec`,
  `EntitySpec`, `RegistryReport` and protocol descriptions yourself and
  place them in a `DataMap`.
- It has no installed command. `parse_args` is a helper for scripts that
  need the arguments and configuration.
- `generate_all` does not write packet or protocol type files. Those
  definitions are produced in memory by `froggen.packet` and are yours to
  render and save.

## Running the tests

Install the package with its `test` extra and run `pytest` from the
project directory.