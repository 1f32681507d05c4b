"""A small model of generated type, struct and enum definitions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_LEXEME_PATTERN = re.compile(
    r"\s*(?:(?P<path>::)|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)|(?P<int>\d[A-Za-z0-9_]*)"
    r"|(?P<punct>[<>,\[\];]))"
)


@dataclass(frozen=True)
class PathSegment:
    """One segment of a type path, with its generic arguments."""

    ident: str
    args: tuple[Type, ...] = ()


@dataclass(frozen=True)
class TypePath:
    """A path type such as ``Vec<u8>`` or ``a::b::C``."""

    segments: tuple[PathSegment, ...]

    def ident(self) -> str | None:
        """The identifier if the path is a single bare identifier."""
        if len(self.segments) == 1 and not self.segments[0].args:
            return self.segments[0].ident
        return None

    def last_ident(self) -> str:
        """The identifier of the last segment."""
        return self.segments[-1].ident


@dataclass(frozen=True)
class ArrayType:
    """A fixed-size array type such as ``[u8; 256]``."""

    elem: Type
    length: str


Type = TypePath | ArrayType


@dataclass
class Field:
    """A field of a struct or enum variant; unnamed when ``name`` is None."""

    ty: Type
    name: str | None = None
    attrs: list[str] = field(default_factory=list)
    public: bool = False


@dataclass
class Variant:
    """An enum variant."""

    ident: str
    fields: list[Field] = field(default_factory=list)
    discriminant: str | None = None
    attrs: list[str] = field(default_factory=list)


@dataclass
class StructItem:
    """A struct definition; a unit struct when it has no fields."""

    ident: str
    fields: list[Field] = field(default_factory=list)
    attrs: list[str] = field(default_factory=list)


@dataclass
class EnumItem:
    """An enum definition."""

    ident: str
    variants: list[Variant] = field(default_factory=list)
    attrs: list[str] = field(default_factory=list)


class _Parser:
    def __init__(self, text: str) -> None:
        self.lexemes = list(self._lex(text))
        self.pos = 0

    @staticmethod
    def _lex(text: str):
        pos = 0
        stripped_end = len(text.rstrip())
        while pos < stripped_end:
            match = _LEXEME_PATTERN.match(text, pos)
            if match is None:
                raise ValueError(f"unexpected character in type {text!r} at {pos}")
            kind = match.lastgroup
            yield kind, match.group(kind)
            pos = match.end()

    def peek(self) -> tuple[str, str] | None:
        return self.lexemes[self.pos] if self.pos < len(self.lexemes) else None

    def take(self, kind: str, value: str | None = None) -> str:
        lexeme = self.peek()
        if lexeme is None or lexeme[0] != kind or (value is not None and lexeme[1] != value):
            wanted = value or kind
            raise ValueError(f"expected {wanted!r}, found {lexeme[1] if lexeme else 'end'!r}")
        self.pos += 1
        return lexeme[1]

    def accept(self, value: str) -> bool:
        lexeme = self.peek()
        if lexeme is not None and lexeme[1] == value and lexeme[0] in ("punct", "path"):
            self.pos += 1
            return True
        return False

    def parse_type(self) -> Type:
        if self.accept("["):
            elem = self.parse_type()
            self.take("punct", ";")
            length = self.take("int")
            self.take("punct", "]")
            return ArrayType(elem, length)
        segments = [self.parse_segment()]
        while self.accept("::"):
            segments.append(self.parse_segment())
        return TypePath(tuple(segments))

    def parse_segment(self) -> PathSegment:
        ident = self.take("ident")
        args: list[Type] = []
        if self.accept("<"):
            args.append(self.parse_type())
            while self.accept(","):
                args.append(self.parse_type())
            self.take("punct", ">")
        return PathSegment(ident, tuple(args))


def parse_type(text: str) -> Type:
    """Parse a type written as source text; raises ValueError if it is malformed."""
    parser = _Parser(text)
    if not parser.lexemes:
        raise ValueError("empty type")
    result = parser.parse_type()
    if parser.peek() is not None:
        raise ValueError(f"trailing tokens in type {text!r}")
    return result


def _render_segment(segment: PathSegment) -> str:
    if not segment.args:
        return segment.ident
    return f"{segment.ident}<{', '.join(render_type(arg) for arg in segment.args)}>"


def render_type(ty: Type) -> str:
    """Render a type as source text."""
    if isinstance(ty, ArrayType):
        return f"[{render_type(ty.elem)}; {ty.length}]"
    if isinstance(ty, TypePath):
        return "::".join(_render_segment(segment) for segment in ty.segments)
    raise TypeError(f"not a type: {ty!r}")


def _is_named(fields: list[Field]) -> bool:
    return any(f.name is not None for f in fields)


def _field_body(f: Field, named: bool) -> str:
    prefix = "pub " if f.public else ""
    body = f"{f.name}: {render_type(f.ty)}" if named else render_type(f.ty)
    return prefix + body


def _inline_field(f: Field, named: bool) -> str:
    return " ".join([*f.attrs, _field_body(f, named)])


def _render_variant(variant: Variant) -> str:
    text = variant.ident
    if variant.fields:
        named = _is_named(variant.fields)
        inner = ", ".join(_inline_field(f, named) for f in variant.fields)
        text += f" {{ {inner} }}" if named else f"({inner})"
    if variant.discriminant is not None:
        text += f" = {variant.discriminant}"
    return text


def _render_struct(item: StructItem) -> list[str]:
    lines = list(item.attrs)
    if not item.fields:
        lines.append(f"pub struct {item.ident};")
    elif _is_named(item.fields):
        lines.append(f"pub struct {item.ident} {{")
        for f in item.fields:
            lines.extend(f"    {attr}" for attr in f.attrs)
            lines.append(f"    {_field_body(f, True)},")
        lines.append("}")
    else:
        inner = ", ".join(_inline_field(f, False) for f in item.fields)
        lines.append(f"pub struct {item.ident}({inner});")
    return lines


def _render_enum(item: EnumItem) -> list[str]:
    lines = list(item.attrs)
    if not item.variants:
        lines.append(f"pub enum {item.ident} {{}}")
        return lines
    lines.append(f"pub enum {item.ident} {{")
    for variant in item.variants:
        lines.extend(f"    {attr}" for attr in variant.attrs)
        lines.append(f"    {_render_variant(variant)},")
    lines.append("}")
    return lines


def render_item(item: StructItem | EnumItem) -> str:
    """Render a struct or enum definition as source text."""
    if isinstance(item, StructItem):
        return "\n".join(_render_struct(item))
    if isinstance(item, EnumItem):
        return "\n".join(_render_enum(item))
    raise TypeError(f"not an item: {item!r}")


def render_file(items: list[StructItem | EnumItem]) -> str:
    """Render a sequence of items; empty input gives an empty string."""
    if not items:
        return ""
    return "\n\n".join(render_item(item) for item in items) + "\n"