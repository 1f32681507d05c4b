import pytest

from froggen.codefile import CodeFile
from froggen.result import GenerationError
from froggen.state import State
from froggen.syntax import EnumItem, Field, StructItem, parse_type


@pytest.fixture
def item_state():
    return State().with_item("Packet")


def test_create_struct_is_found(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    found = file.get_struct(item_state)
    assert isinstance(found, StructItem)
    assert found.ident == "Packet"
    assert file.get_enum(item_state) is None
    assert len(file) == 1


def test_unit_struct_becomes_named(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    file.push_struct_field_str(item_state.with_target("x"), "u8")
    assert file.render() == "pub struct Packet {\n    pub x: u8,\n}\n"


def test_struct_field_type_uses_last_segment(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    target = item_state.with_target("data")
    file.push_struct_field_str(target, "a::b::Vec<u8>")
    assert file.get_struct_field_type(target) == "Vec"
    assert file.get_struct_field(target).ty == parse_type("a::b::Vec<u8>")


def test_struct_field_type_of_array_is_none(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    target = item_state.with_target("bytes")
    file.push_struct_field_str(target, "[u8; 4]")
    assert file.get_struct_field_type(target) is None


def test_missing_field_has_no_type(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    assert file.get_struct_field_type(item_state.with_target("nope")) is None


def test_invalid_type_text_raises(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    with pytest.raises(GenerationError):
        file.push_struct_field_str(item_state.with_target("x"), "Vec<")


def test_push_field_to_missing_struct_raises(item_state):
    file = CodeFile()
    with pytest.raises(GenerationError):
        file.push_struct_field_str(item_state.with_target("x"), "u8")


def test_push_field_to_enum_raises(item_state):
    file = CodeFile()
    file.create_enum(item_state)
    with pytest.raises(GenerationError):
        file.push_struct_field_str(item_state.with_target("x"), "u8")


def test_struct_and_field_attributes(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    file.push_struct_attr(item_state, "#[frog(bitfield)]")
    target = item_state.with_target("flag")
    file.push_struct_field_str(target, "bool")
    file.push_struct_field_attr(target, "#[frog(bits = 1)]")
    file.push_struct_field_attrs(target, ["#[a]", "#[b]"])
    assert file.get_struct(item_state).attrs == ["#[frog(bitfield)]"]
    assert file.get_struct_field(target).attrs == ["#[frog(bits = 1)]", "#[a]", "#[b]"]


def test_attr_on_missing_field_raises(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    with pytest.raises(GenerationError):
        file.push_struct_field_attr(item_state.with_target("ghost"), "#[a]")


def test_attr_on_non_struct_raises(item_state):
    file = CodeFile()
    file.create_enum(item_state)
    with pytest.raises(GenerationError):
        file.push_struct_attr(item_state, "#[a]")


def test_enum_variants(item_state):
    file = CodeFile()
    file.create_enum(item_state)
    first = item_state.with_target("First")
    file.push_enum_variant(first, "0")
    file.push_enum_variant(item_state.with_target("Second"), None)
    enum = file.get_enum(item_state)
    assert isinstance(enum, EnumItem)
    assert [v.ident for v in enum.variants] == ["First", "Second"]
    assert file.get_enum_variant(first).discriminant == "0"
    assert file.get_enum_variant(item_state.with_target("Second")).discriminant is None


def test_push_variant_to_struct_raises(item_state):
    file = CodeFile()
    file.create_struct(item_state)
    with pytest.raises(GenerationError):
        file.push_enum_variant(item_state.with_target("A"), None)


def test_variant_field_by_type(item_state):
    file = CodeFile()
    file.create_enum(item_state)
    target = item_state.with_target("A")
    file.push_enum_variant(target, "1")
    file.push_enum_variant_field_type(target, parse_type("Vec<u8>"), ["#[x]"])
    found = file.get_enum_variant_field(target, "Vec")
    assert found.ty == parse_type("Vec<u8>")
    assert found.attrs == ["#[x]"]
    assert found.public is False
    assert file.get_enum_variant_field(target, "u8") is None


def test_variant_field_by_name(item_state):
    file = CodeFile()
    file.create_enum(item_state)
    target = item_state.with_target("A")
    file.push_enum_variant(target, None)
    file.push_enum_variant_field(target, Field(ty=parse_type("u32"), name="count"))
    assert file.get_enum_variant_field(target, "count").name == "count"
    assert file.get_enum_variant_field(target, "u32") is None


def test_push_field_to_missing_variant_raises(item_state):
    file = CodeFile()
    file.create_enum(item_state)
    with pytest.raises(GenerationError):
        file.push_enum_variant_field_type(item_state.with_target("Ghost"), parse_type("u8"), [])


def test_render_empty_file():
    assert CodeFile().render() == ""


def test_render_keeps_item_order():
    file = CodeFile()
    file.create_struct(State().with_item("Zeta"))
    file.create_enum(State().with_item("Alpha"))
    rendered = file.render()
    assert rendered.index("Zeta") < rendered.index("Alpha")
    assert [item.ident for item in file] == ["Zeta", "Alpha"]