"""Balanced-bracket scanner for PHP attributes and docblock annotations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..models import AttributeUsage, Expression

_PAIRS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = set(_PAIRS.values())

_ATTRIBUTE_HEAD = re.compile(r"^\s*(\\?[A-Za-z_][\w\\]*)\s*", re.DOTALL)
_NAMED_ARGUMENT = re.compile(r"^\s*([A-Za-z_]\w*)\s*(?::(?!:)|=(?![=>]))\s*(.*?)\s*$", re.DOTALL)
_ANNOTATION = re.compile(r"(?<![\w@\\])@(\\?[A-Z][\w\\]*)")
_INTEGER = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+(?:\.\d*)?[eE][+-]?\d+)$")
_TYPES_CONSTANT = re.compile(r"^\\?(?:[A-Za-z_]\w*\\)*Types::([A-Z][A-Z0-9_]*)$")
_DOCBLOCK_PREFIX = re.compile(r"^[ \t]*(?:/\*\*|\*/|\*)?", re.MULTILINE)


@dataclass(frozen=True)
class AttributeGroup:
    """A ``#[...]`` group located in the source; ``end`` is one past its ``]``."""

    start: int
    end: int
    usages: Tuple[AttributeUsage, ...]


def find_closing(text: str, start: int) -> Optional[int]:
    """Return the index of the bracket closing the one at ``start``.

    Nested ``()``, ``[]`` and ``{}`` are balanced and quoted strings skipped.
    Returns None when the brackets never balance or are mismatched.
    """
    if start >= len(text) or text[start] not in _PAIRS:
        return None
    stack = [_PAIRS[text[start]]]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char in {"'", '"'}:
            index = _skip_string(text, index)
            continue
        if char in _PAIRS:
            stack.append(_PAIRS[char])
        elif char in _CLOSERS:
            if char != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return index
        index += 1
    return None


def split_arguments(text: str) -> List[str]:
    """Split on commas that are not nested in brackets or strings."""
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    index = 0
    while index < len(text):
        char = text[index]
        if char in {"'", '"'}:
            end = _skip_string(text, index)
            current.append(text[index:end])
            index = end
            continue
        if char in _PAIRS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            index += 1
            continue
        current.append(char)
        index += 1
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def parse_literal(raw: str) -> Any:
    """Convert a scalar literal; anything else is kept as an ``Expression``."""
    value = raw.strip()
    if len(value) >= 2 and value[0] in {"'", '"'} and _skip_string(value, 0) == len(value):
        return _unescape(value[1:-1], value[0])
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INTEGER.match(value):
        return int(value)
    if _FLOAT.match(value):
        return float(value)
    return Expression(value)


def parse_arguments(text: str) -> Tuple[Dict[str, Any], Tuple[Any, ...]]:
    """Tokenize an argument list into named and positional values."""
    named: Dict[str, Any] = {}
    positional: List[Any] = []
    for piece in split_arguments(text):
        match = _NAMED_ARGUMENT.match(piece)
        if match:
            named[match.group(1)] = parse_literal(match.group(2))
        else:
            positional.append(parse_literal(piece))
    return named, tuple(positional)


def parse_attribute(text: str) -> Optional[AttributeUsage]:
    """Parse ``Name`` or ``Name(args)``; malformed arguments are dropped."""
    match = _ATTRIBUTE_HEAD.match(text)
    if not match:
        return None
    name = match.group(1)
    rest = text[match.end():]
    if not rest.startswith("("):
        return AttributeUsage(name=name)
    close = find_closing(rest, 0)
    if close is None:
        return AttributeUsage(name=name)
    named, positional = parse_arguments(rest[1:close])
    return AttributeUsage(name=name, named=named, positional=positional)


def parse_attribute_group(content: str) -> Tuple[AttributeUsage, ...]:
    """Parse the inside of ``#[A, B(x)]`` into its attribute usages."""
    usages = []
    for piece in split_arguments(content):
        usage = parse_attribute(piece)
        if usage is not None:
            usages.append(usage)
    return tuple(usages)


def find_attribute_groups(code: str, structure: str, start: int = 0, end: Optional[int] = None) -> List[AttributeGroup]:
    """Locate every ``#[...]`` group between ``start`` and ``end``.

    ``structure`` is used to find group openings outside strings, ``code`` to
    read the arguments with their string literals intact.
    """
    limit = len(structure) if end is None else end
    groups: List[AttributeGroup] = []
    index = structure.find("#[", start, limit)
    while index != -1:
        close = find_closing(code, index + 1)
        if close is None or close >= limit:
            index = structure.find("#[", index + 2, limit)
            continue
        usages = parse_attribute_group(code[index + 2 : close])
        groups.append(AttributeGroup(start=index, end=close + 1, usages=usages))
        index = structure.find("#[", close + 1, limit)
    return groups


def parse_annotations(docblock: str) -> Tuple[AttributeUsage, ...]:
    """Extract ``@Name(args)`` annotations from a docblock.

    Lower-case tags such as ``@var`` and ``@param`` are not mapping metadata
    and are skipped.
    """
    cleaned = _DOCBLOCK_PREFIX.sub("", docblock)
    usages: List[AttributeUsage] = []
    match = _ANNOTATION.search(cleaned)
    while match:
        name = match.group(1)
        position = match.end()
        while position < len(cleaned) and cleaned[position] in " \t":
            position += 1
        close = find_closing(cleaned, position) if cleaned[position : position + 1] == "(" else None
        if close is not None:
            # Nested annotations (``joinColumns={@JoinColumn(...)}``) stay inside the argument bag.
            named, positional = parse_arguments(cleaned[position + 1 : close])
            usages.append(AttributeUsage(name=name, named=named, positional=positional))
            position = close + 1
        else:
            usages.append(AttributeUsage(name=name))
        match = _ANNOTATION.search(cleaned, position)
    return tuple(usages)


def column_type_name(value: Any) -> Optional[str]:
    """Return the DBAL type name a ``type`` argument refers to, if it is knowable."""
    if isinstance(value, Expression):
        match = _TYPES_CONSTANT.match(value)
        if not match:
            return None
        name = match.group(1).lower()
        if name.endswith("_mutable"):
            name = name[: -len("_mutable")]
        return name
    if isinstance(value, str):
        return value.strip() or None
    return None


def _skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal opened at ``start``."""
    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        index += 1
    return len(text)


def _unescape(body: str, quote: str) -> str:
    return body.replace("\\" + quote, quote).replace("\\\\", "\\")


__all__ = [
    "AttributeGroup",
    "column_type_name",
    "find_attribute_groups",
    "find_closing",
    "parse_annotations",
    "parse_arguments",
    "parse_attribute",
    "parse_attribute_group",
    "parse_literal",
    "split_arguments",
]
