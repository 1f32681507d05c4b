from froggen.process import VAR_ATTR, process_item
from froggen.syntax import (
    ArrayType,
    EnumItem,
    Field,
    StructItem,
    Variant,
    parse_type,
    render_type,
)


def _struct(ident, *fields):
    return StructItem(ident, fields=[Field(ty=parse_type(ty), name=name) for name, ty in fields])


def test_struct_ident_becomes_pascal():
    result = process_item(_struct("packet_login_start"))
    assert result.ident == "PacketLoginStart"


def test_previous_messages_struct_is_removed():
    assert process_item(_struct("previous_messages")) is None


def test_varint_becomes_u32_with_attr():
    result = process_item(_struct("a", ("count", "varint")))
    assert render_type(result.fields[0].ty) == "u32"
    assert result.fields[0].attrs == [VAR_ATTR]


def test_varlong_inside_generic_is_marked():
    result = process_item(_struct("a", ("times", "Vec<varlong>")))
    assert render_type(result.fields[0].ty) == "Vec<u64>"
    assert result.fields[0].attrs == [VAR_ATTR]


def test_primitive_types_untouched():
    result = process_item(_struct("a", ("flag", "bool"), ("x", "f64")))
    assert [render_type(f.ty) for f in result.fields] == ["bool", "f64"]
    assert all(f.attrs == [] for f in result.fields)


def test_other_types_become_pascal():
    result = process_item(_struct("a", ("name", "Option<string>")))
    assert render_type(result.fields[0].ty) == "Option<String>"
    assert result.fields[0].attrs == []


def test_array_field_left_alone():
    item = StructItem("a", fields=[Field(ty=ArrayType(parse_type("u8"), "16"), name="b")])
    result = process_item(item)
    assert result.fields[0].ty == ArrayType(parse_type("u8"), "16")


def test_input_is_not_modified():
    item = _struct("packet_x", ("count", "varint"))
    process_item(item)
    assert item.ident == "packet_x"
    assert render_type(item.fields[0].ty) == "varint"
    assert item.fields[0].attrs == []


def test_enum_variants_become_pascal_and_fields_processed():
    item = EnumItem(
        "packet_kind",
        variants=[
            Variant("when_true", fields=[Field(ty=parse_type("varint"))], discriminant="1"),
            Variant("other_thing"),
        ],
    )
    result = process_item(item)
    assert result.ident == "PacketKind"
    assert [v.ident for v in result.variants] == ["WhenTrue", "OtherThing"]
    assert render_type(result.variants[0].fields[0].ty) == "u32"
    assert result.variants[0].fields[0].attrs == [VAR_ATTR]
    assert result.variants[0].discriminant == "1"


def test_previous_messages_signature_enum_is_rewritten():
    item = EnumItem("previous_messages_signature", variants=[Variant("anything")])
    result = process_item(item)
    assert result.ident == "PreviousMessages"
    assert [v.ident for v in result.variants] == ["Signed", "MessageId"]
    signed, message_id = result.variants
    assert signed.discriminant == "0"
    assert render_type(signed.fields[0].ty) == "[u8; 256]"
    assert message_id.attrs == ["#[frog(other)]"]
    assert message_id.fields[0].attrs == ["#[frog(var)]"]
    assert render_type(message_id.fields[0].ty) == "u32"


def test_rewritten_variants_are_independent_copies():
    first = process_item(EnumItem("previous_messages_signature"))
    first.variants[0].ident = "Changed"
    second = process_item(EnumItem("previous_messages_signature"))
    assert second.variants[0].ident == "Signed"