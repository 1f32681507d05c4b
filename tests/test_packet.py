import pytest

from froggen.codefile import CodeFile
from froggen.packet import generate_packets, generate_type, generate_types
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
    PStringArgs,
    SwitchArgs,
    TopBitSetTerminatedArrayArgs,
)
from froggen.result import GenerationError
from froggen.state import State
from froggen.syntax import EnumItem, StructItem, render_type

VARINT = NamedType("varint")
BOOL = NamedType("bool")


def _state():
    return State().with_item("_").with_target("field")


def _run(proto):
    file = CodeFile()
    return generate_type(_state(), proto, file), file


def _container(*fields):
    return InlineType("container", [ContainerArg(name, kind) for name, kind in fields])


def _single_packet(proto):
    file, error = generate_packets({"packet_x": proto})
    assert error is False
    return {item.ident: item for item in file}


def test_named_void_and_plain():
    assert _run(NamedType("void"))[0] is None
    result, file = _run(VARINT)
    assert render_type(result.kind) == "varint"
    assert len(file) == 0


def test_array_count_varint():
    result, _ = _run(InlineType("array", ArrayCount("varint", NamedType("u8"))))
    assert render_type(result.kind) == "Vec<u8>"


def test_array_count_unsupported_type():
    with pytest.raises(GenerationError):
        _run(InlineType("array", ArrayCount("i16", NamedType("u8"))))


def test_array_count_field_adds_length_attr():
    result, _ = _run(InlineType("array", ArrayCountField("count", VARINT)))
    assert render_type(result.kind) == "Vec<varint>"
    assert result.attrs == ("#[frog(length = count)]",)


def test_array_with_length_offset():
    proto = InlineType("arrayWithLengthOffset", ArrayWithLengthOffset(ArrayCountField("type", VARINT), 1))
    result, _ = _run(proto)
    assert render_type(result.kind) == "Vec<varint>"
    assert result.attrs == ("#[frog(offset = 1)]",)


def test_array_with_length_offset_bad_field():
    proto = InlineType("arrayWithLengthOffset", ArrayWithLengthOffset(ArrayCountField("other", VARINT), 1))
    with pytest.raises(ValueError):
        _run(proto)


def test_buffers():
    fixed, _ = _run(InlineType("buffer", BufferCount(256)))
    assert render_type(fixed.kind) == "[u8; 256]"
    var, _ = _run(InlineType("buffer", BufferCountType("varint")))
    assert render_type(var.kind) == "Vec<u8>"
    with pytest.raises(GenerationError):
        _run(InlineType("buffer", BufferCountType("u16")))


def test_pstring_option_and_bitset():
    assert render_type(_run(InlineType("pstring", PStringArgs(BufferCountType("varint"))))[0].kind) == "string"
    assert render_type(_run(InlineType("option", OptionArgs(VARINT)))[0].kind) == "Option<varint>"
    bitset = InlineType("topBitSetTerminatedArray", TopBitSetTerminatedArrayArgs(NamedType("u8")))
    assert render_type(_run(bitset)[0].kind) == "BitVec<u8>"


def test_option_of_void_stays_void():
    assert _run(InlineType("option", OptionArgs(NamedType("void"))))[0] is None


def test_entity_metadata_unsupported():
    result, _ = _run(InlineType("entityMetadataLoop", EntityMetadataArgs("u8", 255)))
    assert render_type(result.kind) == "Unsupported"


def test_container_builds_struct():
    result, file = _run(_container(("someValue", VARINT), (None, BOOL), ("gone", NamedType("void"))))
    (item,) = list(file)
    assert isinstance(item, StructItem)
    assert render_type(result.kind) == item.ident
    assert [f.name for f in item.fields] == ["some_value", "field_1"]
    assert [render_type(f.ty) for f in item.fields] == ["varint", "bool"]


def test_bitfield_sizes_and_attrs():
    args = [BitfieldArg("a", 1), BitfieldArg("b", 5), BitfieldArg("c", 12), BitfieldArg("d", 40)]
    result, file = _run(InlineType("bitfield", args))
    (item,) = list(file)
    assert item.attrs == ["#[frog(bitfield)]"]
    assert render_type(result.kind) == item.ident
    assert [render_type(f.ty) for f in item.fields] == ["bool", "u8", "u16", "u64"]
    assert [f.attrs for f in item.fields] == [[f"#[frog(bits = {a.size})]"] for a in args]


def test_bitfield_bad_size():
    with pytest.raises(GenerationError):
        _run(InlineType("bitfield", [BitfieldArg("a", 0)]))


def test_bitflags():
    _, file = _run(InlineType("bitflags", BitflagArgs("u8", ["onGround", "flying"])))
    (item,) = list(file)
    assert item.attrs == ["#[frog(bitflags)]"]
    assert [(f.name, render_type(f.ty)) for f in item.fields] == [("on_ground", "bool"), ("flying", "bool")]


def test_mapper_sorted_by_key():
    _, file = _run(InlineType("mapper", MapperArgs("varint", {"2": "minecraft:b", "0": "a.b"})))
    (item,) = list(file)
    assert isinstance(item, EnumItem)
    assert [(v.ident, v.discriminant) for v in item.variants] == [("a_b", "0"), ("b", "2")]


def test_switch_bool_single_true_is_option():
    items = _single_packet(_container(("flag", BOOL), ("value", InlineType("switch", SwitchArgs("flag", {"true": VARINT})))))
    struct = items["__packet_x"]
    value = struct.fields[1]
    assert render_type(value.ty) == "Option<varint>"
    assert value.attrs == ["#[frog(match_on = flag)]"]


def test_switch_bool_two_branches():
    switch = InlineType("switch", SwitchArgs("flag", {"true": VARINT, "false": NamedType("void")}))
    items = _single_packet(_container(("flag", BOOL), ("value", switch)))
    enum = next(i for i in items.values() if isinstance(i, EnumItem))
    assert [(v.ident, v.discriminant) for v in enum.variants] == [("when_false", "0"), ("when_true", "1")]
    assert enum.variants[0].fields == []
    assert [render_type(f.ty) for f in enum.variants[1].fields] == ["varint"]


def test_switch_integer_with_default():
    switch = InlineType("switch", SwitchArgs("kind", {"1": BOOL, "0": NamedType("void")}, default=NamedType("u8")))
    items = _single_packet(_container(("kind", VARINT), ("data", switch)))
    enum = next(i for i in items.values() if isinstance(i, EnumItem))
    assert [v.ident for v in enum.variants] == ["variant_0", "variant_1", "default"]
    assert enum.variants[2].discriminant is None
    assert [render_type(f.ty) for f in enum.variants[2].fields] == ["varint", "u8"]
    data = items["__packet_x"].fields[1]
    assert render_type(data.ty) == enum.ident


def test_switch_on_mapper_enum():
    mapper = InlineType("mapper", MapperArgs("varint", {"0": "first", "1": "second"}))
    switch = InlineType("switch", SwitchArgs("mode", {"second": VARINT, "first": BOOL, "missing": BOOL}))
    items = _single_packet(_container(("mode", mapper), ("data", switch)))
    data_type = render_type(items["__packet_x"].fields[1].ty)
    enum = items[data_type]
    assert [(v.ident, v.discriminant) for v in enum.variants] == [("first", "0"), ("second", "1")]


def test_switch_unknown_field_and_nested():
    bad = InlineType("switch", SwitchArgs("nothing", {"1": BOOL}))
    with pytest.raises(GenerationError):
        _run(_container(("data", bad)))
    nested = InlineType("switch", SwitchArgs("../flag", {"1": BOOL}))
    _, file = _run(_container(("data", nested)))
    (item,) = list(file)
    assert render_type(item.fields[0].ty) == "Unsupported"


def test_generate_packets_filters_and_flags_errors():
    packets = {
        "packet_b": _container(("x", VARINT)),
        "packet_a": _container(("y", InlineType("buffer", BufferCountType("u16")))),
        "other": _container(("z", VARINT)),
    }
    file, error = generate_packets(packets)
    assert error is True
    idents = [item.ident for item in file]
    assert all("packet" in ident for ident in idents)
    assert not any("other" in ident for ident in idents)


def test_generate_types_sorted():
    types = {"zeta": _container(("a", VARINT)), "alpha": _container(("b", BOOL)), "varint": NamedType("native")}
    file, error = generate_types(types)
    assert error is False
    idents = [item.ident for item in file]
    assert idents == sorted(idents)
    assert len(idents) == 2