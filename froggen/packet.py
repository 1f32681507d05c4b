"""Generation of struct and enum definitions from protocol type descriptions."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from froggen.codefile import CodeFile
from froggen.naming import format_field_name, format_variant_name
from froggen.protocol import (
    ArrayCount,
    ArrayCountField,
    ArrayWithLengthOffset,
    BitfieldArg,
    BitflagArgs,
    BufferCount,
    BufferCountType,
    ContainerArg,
    EntityMetadataArgs,
    InlineType,
    MapperArgs,
    NamedType,
    OptionArgs,
    ProtocolType,
    PStringArgs,
    RegistryEntryHolderArgs,
    RegistryEntryHolderSetArgs,
    SwitchArgs,
    TopBitSetTerminatedArrayArgs,
)
from froggen.result import (
    GenerationError,
    TypeResult,
    item_from_state,
    item_from_str,
    map_item,
    unsupported,
    with_attr,
)
from froggen.state import ItemState, State, TargetState
from froggen.syntax import parse_type

logger = logging.getLogger(__name__)

_INTEGER_TYPES = frozenset({"varint", "u8", "u16", "u32", "u64", "i8", "i16", "i32", "i64"})
_BOOL_FALSE = frozenset({"false", "0", "0x0"})
_BOOL_TRUE = frozenset({"true", "1", "0x1"})


def generate_type(state: TargetState, proto: ProtocolType, file: CodeFile) -> TypeResult | None:
    """Return the type for ``proto``, adding any items it needs to ``file``.

    Returns None for a void type and raises GenerationError when the type
    cannot be generated.
    """
    if isinstance(proto, NamedType):
        return None if proto.name == "void" else item_from_str(proto.name)
    if isinstance(proto, InlineType):
        return _generate_args(state, proto, file)
    raise TypeError(f"not a protocol type: {proto!r}")


def _generate_args(state: TargetState, proto: InlineType, file: CodeFile) -> TypeResult | None:
    args = proto.args
    match args:
        case ArrayCountField() | ArrayCount():
            return _handle_array(state, args, file)
        case ArrayWithLengthOffset():
            return _handle_offset(state, args, file)
        case BitflagArgs():
            return _handle_bitflags(state, args, file)
        case BufferCount() | BufferCountType():
            return _handle_buffer(state, args)
        case EntityMetadataArgs() | RegistryEntryHolderArgs() | RegistryEntryHolderSetArgs():
            return unsupported()
        case MapperArgs():
            return _handle_mapper(state, args, file)
        case OptionArgs():
            return _handle_option(state, args.kind, file)
        case PStringArgs():
            return item_from_str("string")
        case SwitchArgs():
            return _handle_switch(state, args, file)
        case TopBitSetTerminatedArrayArgs():
            return map_item(generate_type(state, args.kind, file), lambda ty: f"BitVec<{ty}>")
        case tuple():
            if proto.name == "bitfield" or any(isinstance(a, BitfieldArg) for a in args):
                return _handle_bitfield(state, args, file)
            if all(isinstance(a, ContainerArg) for a in args):
                return _handle_container(state, args, file)
    raise GenerationError(f'Unknown arguments for type "{proto.name}": {args!r}')


def _handle_array(
    state: TargetState, args: ArrayCountField | ArrayCount, file: CodeFile
) -> TypeResult | None:
    if isinstance(args, ArrayCountField):
        length = format_field_name(args.count_field)
        result = map_item(generate_type(state, args.kind, file), lambda ty: f"Vec<{ty}>")
        return with_attr(result, f"#[frog(length = {length})]")
    if args.count_type != "varint":
        raise GenerationError(
            f'ArrayArgs: Unsupported count type "{state.item}.{state.target}": '
            f'"{args.count_type}"'
        )
    return map_item(generate_type(state, args.kind, file), lambda ty: f"Vec<{ty}>")


def _handle_offset(
    state: TargetState, args: ArrayWithLengthOffset, file: CodeFile
) -> TypeResult | None:
    array = args.array
    count_field = array.count_field if isinstance(array, ArrayCountField) else array.count_type
    if count_field != "type":
        raise ValueError(f'ArrayWithLengthOffsetArgs: Invalid count field "{count_field}"')
    result = with_attr(
        generate_type(state, array.kind, file), f"#[frog(offset = {args.length_offset})]"
    )
    return map_item(result, lambda ty: f"Vec<{ty}>")


def _bitfield_type(size: int) -> str | None:
    if size == 1:
        return "bool"
    for limit, name in ((8, "u8"), (16, "u16"), (32, "u32"), (64, "u64")):
        if 2 <= size <= limit:
            return name
    return None


def _handle_bitfield(
    state: TargetState, args: Iterable[BitfieldArg], file: CodeFile
) -> TypeResult:
    item_state = state.create_item()
    file.create_struct(item_state)
    file.push_struct_attr(item_state, "#[frog(bitfield)]")

    for arg in args:
        field_state = item_state.with_target(format_field_name(arg.name))
        field_type = _bitfield_type(arg.size)
        if field_type is None:
            raise GenerationError(
                f'BitfieldArg: Unsupported size "{field_state.item}.{field_state.target}": '
                f'"{arg.size}"'
            )
        file.push_struct_field_str(field_state, field_type)
        file.push_struct_field_attr(field_state, f"#[frog(bits = {arg.size})]")

    return item_from_state(item_state)


def _handle_bitflags(state: TargetState, args: BitflagArgs, file: CodeFile) -> TypeResult:
    item_state = state.create_item()
    file.create_struct(item_state)
    file.push_struct_attr(item_state, "#[frog(bitflags)]")

    for flag in args.flags:
        file.push_struct_field_str(item_state.with_target(format_field_name(flag)), "bool")

    return item_from_state(item_state)


def _handle_buffer(state: TargetState, args: BufferCount | BufferCountType) -> TypeResult:
    if isinstance(args, BufferCount):
        return item_from_str(f"[u8; {args.count}]")
    if args.count_type != "varint":
        raise GenerationError(
            f'BufferArgs: Unsupported count type "{state.item}.{state.target}": '
            f'"{args.count_type}"'
        )
    return item_from_str("Vec<u8>")


def _handle_container(
    state: TargetState, args: Iterable[ContainerArg], file: CodeFile
) -> TypeResult:
    item_state = state.create_item()
    file.create_struct(item_state)

    for index, arg in enumerate(args):
        if arg.name is not None:
            field_state = item_state.with_target(format_field_name(arg.name))
        else:
            field_state = item_state.with_target(f"field_{index}")

        result = generate_type(field_state, arg.kind, file)
        if result is not None:
            file.push_struct_field(field_state, result.kind)
            file.push_struct_field_attrs(field_state, result.attrs)

    return item_from_state(item_state)


def _handle_mapper(state: TargetState, args: MapperArgs, file: CodeFile) -> TypeResult:
    item_state = state.create_item()
    file.create_enum(item_state)

    for key, value in sorted(args.mappings.items(), key=lambda pair: int(pair[0])):
        variant_state = item_state.with_target(format_variant_name(value))
        file.push_enum_variant(variant_state, key)

    return item_from_state(item_state)


def _handle_option(state: TargetState, proto: ProtocolType, file: CodeFile) -> TypeResult | None:
    return map_item(generate_type(state, proto, file), lambda ty: f"Option<{ty}>")


def _handle_switch(state: TargetState, args: SwitchArgs, file: CodeFile) -> TypeResult | None:
    compared_field = format_field_name(args.compare_to)
    if "/" in compared_field:
        logger.warning(
            'SwitchArgs: "%s.%s" references a nested field "%s"',
            state.item,
            state.target,
            compared_field,
        )
        return unsupported()

    compared_state = state.with_target(compared_field)
    compared_type = file.get_struct_field_type(compared_state)
    if compared_type is None:
        raise GenerationError(
            f'SwitchArgs: "{state.item}.{state.target}" references an unknown field '
            f'"{compared_state.item}.{compared_state.target}"'
        )

    if compared_type == "bool":
        result = _handle_switch_bool(state, args, file)
    elif compared_type in _INTEGER_TYPES:
        result = _handle_switch_integer(state, args, file)
    elif compared_type.startswith("__"):
        result = _handle_switch_enum(state, compared_state.create_item(), args, file)
    else:
        result = unsupported()
    return with_attr(result, f"#[frog(match_on = {compared_field})]")


def _bool_discriminant(key: str) -> str:
    if key in _BOOL_FALSE:
        return "0"
    if key in _BOOL_TRUE:
        return "1"
    raise ValueError(f"Boolean switch with non-boolean key {key!r}")


def _push_default(item_state: ItemState, args: SwitchArgs, file: CodeFile) -> None:
    if args.default is None:
        return
    variant_state = item_state.with_target("default")
    file.push_enum_variant(variant_state, None)
    file.push_enum_variant_field_type(variant_state, parse_type("varint"), [])
    result = generate_type(variant_state, args.default, file)
    if result is not None:
        file.push_enum_variant_field_type(variant_state, result.kind, result.attrs)


def _push_variant_body(variant_state: TargetState, value: ProtocolType, file: CodeFile) -> None:
    result = generate_type(variant_state, value, file)
    if result is not None:
        file.push_enum_variant_field_type(variant_state, result.kind, result.attrs)


def _handle_switch_bool(state: TargetState, args: SwitchArgs, file: CodeFile) -> TypeResult | None:
    fields: Mapping[str, ProtocolType] = args.fields
    if len(fields) == 1 and args.default is None:
        (key, value), = fields.items()
        if key in _BOOL_TRUE:
            return _handle_option(state, value, file)

    item_state = state.create_item()
    file.create_enum(item_state)

    keyed = [(_bool_discriminant(key), key, value) for key, value in fields.items()]
    for discriminant, key, value in sorted(keyed, key=lambda entry: entry[0]):
        variant_state = item_state.with_target(f"when_{format_variant_name(key)}")
        file.push_enum_variant(variant_state, discriminant)
        _push_variant_body(variant_state, value, file)

    _push_default(item_state, args, file)
    return item_from_state(item_state)


def _handle_switch_integer(state: TargetState, args: SwitchArgs, file: CodeFile) -> TypeResult:
    item_state = state.create_item()
    file.create_enum(item_state)

    for key, value in sorted(args.fields.items(), key=lambda pair: int(pair[0])):
        variant_state = item_state.with_target(f"variant_{key}")
        file.push_enum_variant(variant_state, key)
        _push_variant_body(variant_state, value, file)

    _push_default(item_state, args, file)
    return item_from_state(item_state)


def _discriminant_value(discriminant: str | None) -> int | None:
    if discriminant is None:
        return None
    for base in (0, 10):
        try:
            return int(discriminant, base)
        except ValueError:
            continue
    return None


def _handle_switch_enum(
    state: TargetState, referenced: ItemState, args: SwitchArgs, file: CodeFile
) -> TypeResult:
    enum_state = state.create_item()
    file.create_enum(enum_state)

    for key, value in args.fields.items():
        variant_name = format_variant_name(key)
        variant_state = enum_state.with_target(variant_name)
        referenced_variant = file.get_enum_variant(referenced.with_target(variant_name))
        if referenced_variant is None:
            logger.warning(
                'SwitchArgs: "%s.%s" references an unknown enum variant "%s.%s"',
                state.item,
                state.target,
                variant_state.item,
                variant_state.target,
            )
            continue
        file.push_enum_variant(variant_state, referenced_variant.discriminant)
        _push_variant_body(variant_state, value, file)

    item_enum = file.get_enum(enum_state)
    if item_enum is not None:

        def order(variant):
            value = _discriminant_value(variant.discriminant)
            return (value is not None, value if value is not None else 0)

        item_enum.variants.sort(key=order)

    _push_default(enum_state, args, file)
    return item_from_state(enum_state)


def _generate_all(
    entries: Iterable[tuple[str, ProtocolType]], what: str
) -> tuple[CodeFile, bool]:
    error = False
    file = CodeFile()
    state = State().with_item("_")
    for name, proto in entries:
        try:
            generate_type(state.with_target(name), proto, file)
        except GenerationError as err:
            logger.error('Error generating %s "%s": %s', what, name, err)
            error = True
    return file, error


def generate_packets(packets: Mapping[str, ProtocolType]) -> tuple[CodeFile, bool]:
    """Generate every ``packet_*`` entry, in name order.

    Returns the generated file and whether any packet failed to generate.
    """
    entries = sorted(
        (item for item in packets.items() if item[0].startswith("packet_")),
        key=lambda pair: pair[0],
    )
    return _generate_all(entries, "packet")


def generate_types(types: Mapping[str, ProtocolType]) -> tuple[CodeFile, bool]:
    """Generate every protocol type, in name order.

    Returns the generated file and whether any type failed to generate.
    """
    return _generate_all(sorted(types.items(), key=lambda pair: pair[0]), "type")