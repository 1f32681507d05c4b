"""Identifier case conversion and name sanitising for generated code."""

from __future__ import annotations

import re

_DELIMITERS = re.compile(r"[_\- ]+")

_KEYWORDS = frozenset(
    {
        "abstract", "as", "async", "await", "become", "box", "break", "const",
        "continue", "crate", "do", "dyn", "else", "enum", "extern", "false",
        "final", "fn", "for", "if", "impl", "in", "let", "loop", "macro",
        "match", "mod", "move", "mut", "override", "priv", "pub", "ref",
        "return", "self", "Self", "static", "struct", "super", "trait", "true",
        "try", "type", "typeof", "unsafe", "unsized", "use", "virtual", "where",
        "while", "yield",
    }
)


def _is_digit(char: str) -> bool:
    return char.isascii() and char.isdigit()


def _is_boundary(prev: str, cur: str, nxt: str) -> bool:
    """Whether a new word starts at ``cur``."""
    if prev.islower() and cur.isupper():
        return True
    if prev.isupper() and _is_digit(cur):
        return True
    if _is_digit(prev) and (cur.isupper() or cur.islower()):
        return True
    if prev.islower() and _is_digit(cur):
        return True
    return prev.isupper() and cur.isupper() and nxt.islower()


def _words(text: str) -> list[str]:
    """Split text into words on delimiters and case or digit boundaries."""
    words: list[str] = []
    for chunk in _DELIMITERS.split(text):
        if not chunk:
            continue
        current = chunk[0]
        for prev, cur, nxt in zip(chunk, chunk[1:], chunk[2:] + "\0"):
            if _is_boundary(prev, cur, nxt):
                words.append(current)
                current = cur
            else:
                current += cur
        words.append(current)
    return words


def to_pascal(text: str) -> str:
    """Convert text to PascalCase."""
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(text))


def to_snake(text: str) -> str:
    """Convert text to snake_case."""
    return "_".join(word.lower() for word in _words(text))


def format_field_name(name: str) -> str:
    """Make a field name usable, escaping reserved words and using snake case."""
    if name in _KEYWORDS:
        return f"{name}_"
    return to_snake(name)


def format_variant_name(name: str) -> str:
    """Drop any namespace prefix and replace dots so the name is an identifier."""
    _, sep, rest = name.partition(":")
    return (rest if sep else name).replace(".", "_")