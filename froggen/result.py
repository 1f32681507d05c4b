"""The outcome of generating a type: a type with attributes, or nothing (None)."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from froggen.state import ItemState
from froggen.syntax import PathSegment, Type, TypePath, parse_type


class GenerationError(Exception):
    """Raised when a type cannot be generated."""


@dataclass(frozen=True)
class TypeResult:
    """A generated type together with attributes for the field that holds it.

    Where a type generates to nothing (a void type), None is used instead.
    """

    kind: Type
    attrs: tuple[str, ...] = ()


def _parse(kind: str) -> Type:
    try:
        return parse_type(kind)
    except ValueError as err:
        raise GenerationError(f"invalid type {kind!r}: {err}") from err


def item_from_str(kind: str) -> TypeResult:
    """A result holding the type written as ``kind``."""
    return TypeResult(_parse(kind))


def item_from_state(state: ItemState) -> TypeResult:
    """A result holding the type named by the state's current item."""
    return TypeResult(TypePath((PathSegment(state.item),)))


def unsupported() -> TypeResult:
    """A result marking a type that cannot be generated."""
    return item_from_str("Unsupported")


def with_attr(result: TypeResult | None, attr: str) -> TypeResult | None:
    """Append an attribute; a void result stays void."""
    if result is None:
        return None
    return replace(result, attrs=(*result.attrs, attr))


def with_attrs(result: TypeResult | None, attrs: Iterable[str]) -> TypeResult | None:
    """Append several attributes; a void result stays void."""
    if result is None:
        return None
    return replace(result, attrs=(*result.attrs, *attrs))


def map_item(result: TypeResult | None, fun: Callable[[str], str]) -> TypeResult | None:
    """Rewrite a bare identifier type through ``fun``; other results are unchanged."""
    if result is None or not isinstance(result.kind, TypePath):
        return result
    ident = result.kind.ident()
    if ident is None:
        return result
    return TypeResult(_parse(fun(ident)), result.attrs)