"""A collection of generated structs and enums, built up item by item."""

from __future__ import annotations

from collections.abc import Iterable

from froggen.result import GenerationError
from froggen.state import ItemState, TargetState
from froggen.syntax import (
    EnumItem,
    Field,
    StructItem,
    Type,
    TypePath,
    Variant,
    parse_type,
    render_file,
)

Item = StructItem | EnumItem
AnyState = ItemState | TargetState


class CodeFile:
    """An ordered set of generated items, addressed through generation states."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self.items: list[Item] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def _find(self, ident: str) -> Item | None:
        return next((item for item in self.items if item.ident == ident), None)

    def get_item(self, state: AnyState) -> Item | None:
        """The struct or enum named by the state's current item."""
        return self._find(state.item)

    def get_struct(self, state: AnyState) -> StructItem | None:
        """The struct named by the state's current item, if it is a struct."""
        item = self.get_item(state)
        return item if isinstance(item, StructItem) else None

    def get_enum(self, state: AnyState) -> EnumItem | None:
        """The enum named by the state's current item, if it is an enum."""
        item = self.get_item(state)
        return item if isinstance(item, EnumItem) else None

    # Structs

    def create_struct(self, state: AnyState) -> StructItem:
        """Add a new unit struct named after the state's current item."""
        item = StructItem(state.item)
        self.items.append(item)
        return item

    def push_struct_attr(self, state: AnyState, attr: str) -> None:
        """Add an attribute to a struct."""
        item = self.get_struct(state)
        if item is None:
            raise GenerationError(
                f'File: Tried to push an attribute to a non-struct item, "{state.item}"'
            )
        item.attrs.append(attr)

    def get_struct_field(self, state: TargetState) -> Field | None:
        """The named field of a struct that the state targets."""
        item = self.get_struct(state)
        if item is None:
            return None
        return next((f for f in item.fields if f.name == state.target), None)

    def get_struct_field_type(self, state: TargetState) -> str | None:
        """The last path identifier of the targeted struct field's type."""
        found = self.get_struct_field(state)
        if found is None or not isinstance(found.ty, TypePath):
            return None
        return found.ty.last_ident()

    def push_struct_field(self, state: TargetState, kind: Type) -> None:
        """Add a public field to a struct, named after the target unless the struct is a tuple."""
        item = self.get_struct(state)
        if item is None:
            raise GenerationError(
                "File: Tried to push a field to a non-struct item, "
                f'"{state.item}.{state.target}"'
            )
        tuple_struct = bool(item.fields) and all(f.name is None for f in item.fields)
        name = None if tuple_struct else state.target
        item.fields.append(Field(ty=kind, name=name, public=True))

    def push_struct_field_str(self, state: TargetState, kind: str) -> None:
        """Add a public field whose type is written as source text."""
        try:
            ty = parse_type(kind)
        except ValueError as err:
            raise GenerationError(
                f'File: Failed to parse type "{kind}" for field '
                f'"{state.item}.{state.target}": {err}'
            ) from err
        self.push_struct_field(state, ty)

    def push_struct_field_attr(self, state: TargetState, attr: str) -> None:
        """Add an attribute to the targeted struct field."""
        self.push_struct_field_attrs(state, [attr])

    def push_struct_field_attrs(self, state: TargetState, attrs: Iterable[str]) -> None:
        """Add several attributes to the targeted struct field."""
        found = self.get_struct_field(state)
        if found is None:
            raise GenerationError(
                "File: Tried to push attributes to a non-existent field, "
                f'"{state.item}.{state.target}"'
            )
        found.attrs.extend(attrs)

    # Enums

    def create_enum(self, state: AnyState) -> EnumItem:
        """Add a new empty enum named after the state's current item."""
        item = EnumItem(state.item)
        self.items.append(item)
        return item

    def get_enum_variant(self, state: TargetState) -> Variant | None:
        """The variant of an enum that the state targets."""
        item = self.get_enum(state)
        if item is None:
            return None
        return next((v for v in item.variants if v.ident == state.target), None)

    def push_enum_variant(self, state: TargetState, discriminant: str | None) -> None:
        """Add a variant named after the target, with an optional discriminant."""
        item = self.get_enum(state)
        if item is None:
            raise GenerationError(
                "File: Tried to push a variant to a non-enum item, "
                f'"{state.item}.{state.target}"'
            )
        item.variants.append(Variant(state.target, discriminant=discriminant))

    def get_enum_variant_field(self, state: TargetState, ident: str) -> Field | None:
        """A field of the targeted variant, matched by name or else by type identifier."""
        variant = self.get_enum_variant(state)
        if variant is None:
            return None
        for candidate in variant.fields:
            if candidate.name is not None:
                if candidate.name == ident:
                    return candidate
            elif isinstance(candidate.ty, TypePath) and candidate.ty.last_ident() == ident:
                return candidate
        return None

    def push_enum_variant_field(self, state: TargetState, field: Field) -> None:
        """Add a field to the targeted variant."""
        variant = self.get_enum_variant(state)
        if variant is None:
            raise GenerationError(
                "File: Tried to push a field to a non-existent variant, "
                f'"{state.item}.{state.target}"'
            )
        variant.fields.append(field)

    def push_enum_variant_field_type(
        self, state: TargetState, kind: Type, attrs: Iterable[str]
    ) -> None:
        """Add an unnamed field of the given type and attributes to the targeted variant."""
        self.push_enum_variant_field(state, Field(ty=kind, attrs=list(attrs)))

    def render(self) -> str:
        """Render every item as source text."""
        return render_file(self.items)