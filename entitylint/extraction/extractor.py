"""Builds a ClassDeclaration from PHP source text using pattern matching."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import (
    REPOSITORY_BASES,
    AttributeUsage,
    ClassDeclaration,
    ClassKind,
    MethodSignature,
    Property,
    has_marker,
)
from .lexer import MaskedSource, mask_source
from .scanner import (
    AttributeGroup,
    find_attribute_groups,
    find_closing,
    parse_annotations,
    parse_attribute_group,
    split_arguments,
)

_NAMESPACE = re.compile(r"(?:^|(?<=[;{}])|(?<=<\?php))\s*namespace\s+\\?([A-Za-z_][\w\\]*)\s*[;{]", re.MULTILINE)
_USE = re.compile(
    r"(?:^|(?<=[;{}])|(?<=<\?php))\s*use\s+(?:function\s+|const\s+)?\\?([A-Za-z_][\w\\]*)(?:\s+as\s+([A-Za-z_]\w*))?\s*;",
    re.MULTILINE,
)
_CLASS = re.compile(
    r"(?<![\w$:>])((?:(?:final|abstract|readonly)\s+)*)(class|trait)\s+([A-Za-z_]\w*)"
    r"(?:\s+extends\s+(\\?[A-Za-z_][\w\\]*))?"
    r"(?:\s+implements\s+[^{]+)?\s*\{"
)
_METHOD = re.compile(
    r"^((?:(?:public|protected|private|static|abstract|final)\s+)*)function\s+&?\s*([A-Za-z_]\w*)\s*\("
)
_PROPERTY = re.compile(
    r"^((?:(?:public|protected|private|static|readonly|var|final|abstract)(?:\(set\))?\s+)+)"
    r"(?:([?\\\w|&()]+)\s+)?&?\$([A-Za-z_]\w*)"
)
_PROMOTED = re.compile(
    r"^((?:(?:public|protected|private|readonly)(?:\(set\))?\s+)+)"
    r"(?:([?\\\w|&()]+)\s+)?&?(?:\.\.\.)?\$([A-Za-z_]\w*)"
)
_RETURN_TYPE = re.compile(r"^\s*:\s*(.+?)\s*$", re.DOTALL)
_VISIBILITIES = ("public", "protected", "private")


@dataclass(frozen=True)
class _Segment:
    """A depth-0 member of a class body; ``body`` is the span inside ``{}``."""

    start: int
    end: int
    body: Optional[Tuple[int, int]]


def extract_class(text: str, repository_bases: Iterable[str] = REPOSITORY_BASES) -> ClassDeclaration:
    """Return the first class (or trait) declared in ``text``.

    A file without a class yields an empty declaration that only carries the
    namespace and imports.
    """
    masked = mask_source(text)
    structure = masked.structure

    namespace_match = _NAMESPACE.search(structure)
    namespace = namespace_match.group(1) if namespace_match else None

    class_match = _CLASS.search(structure)
    header_limit = class_match.start() if class_match else len(structure)
    imports = tuple(match.group(1) for match in _USE.finditer(structure, 0, header_limit))

    if class_match is None:
        return ClassDeclaration(namespace=namespace, imports=imports)

    groups = find_attribute_groups(masked.code, structure)
    groups_by_end = {group.end: group for group in groups}
    groups_by_start = {group.start: group for group in groups}

    class_attributes = _leading_attributes(masked, groups_by_end, class_match.start())
    modifiers = class_match.group(1).split()
    name = class_match.group(3)
    parent = class_match.group(4)

    brace = class_match.end() - 1
    close = find_closing(structure, brace)
    body_end = close if close is not None else len(structure)

    properties: List[Property] = []
    methods: List[MethodSignature] = []
    for segment in _segments(structure, brace + 1, body_end):
        decl_start, attributes = _member_attributes(masked, groups_by_start, segment)
        declaration = structure[decl_start : segment.end]
        method_match = _METHOD.match(declaration)
        if method_match:
            method, promoted = _build_method(masked, segment, decl_start, method_match, attributes)
            methods.append(method)
            properties.extend(
                _with_readonly(prop, "readonly" in modifiers) for prop in promoted
            )
            continue
        property_match = _PROPERTY.match(declaration)
        if property_match:
            properties.append(
                _build_property(
                    property_match.group(1),
                    property_match.group(2),
                    property_match.group(3),
                    attributes,
                    class_readonly="readonly" in modifiers,
                )
            )

    kind = _classify(class_attributes, name, parent, repository_bases)
    return ClassDeclaration(
        namespace=namespace,
        name=name,
        parent=parent,
        kind=kind,
        imports=imports,
        attributes=class_attributes,
        properties=tuple(properties),
        methods=tuple(methods),
    )


def _classify(
    attributes: Sequence[AttributeUsage],
    name: str,
    parent: Optional[str],
    repository_bases: Iterable[str],
) -> ClassKind:
    if has_marker(attributes, "Embeddable"):
        return ClassKind.EMBEDDABLE
    if has_marker(attributes, "Entity"):
        return ClassKind.ENTITY
    if name.endswith("Repository") and parent:
        if parent.rsplit("\\", 1)[-1] in set(repository_bases):
            return ClassKind.REPOSITORY
    return ClassKind.UNCLASSIFIED


def _leading_attributes(
    masked: MaskedSource,
    groups_by_end: Dict[int, AttributeGroup],
    decl_start: int,
) -> Tuple[AttributeUsage, ...]:
    """Collect attribute groups and docblocks directly preceding ``decl_start``."""
    structure = masked.structure
    position = decl_start
    groups: List[AttributeGroup] = []
    while True:
        cursor = position
        while cursor > 0 and structure[cursor - 1].isspace():
            cursor -= 1
        group = groups_by_end.get(cursor)
        if group is None:
            break
        groups.insert(0, group)
        position = group.start
    return _merge_metadata(masked, groups, cursor, decl_start)


def _member_attributes(
    masked: MaskedSource,
    groups_by_start: Dict[int, AttributeGroup],
    segment: _Segment,
) -> Tuple[int, Tuple[AttributeUsage, ...]]:
    """Skip the attribute groups heading a member; return its start and metadata."""
    structure = masked.structure
    position = segment.start
    groups: List[AttributeGroup] = []
    while True:
        while position < segment.end and structure[position].isspace():
            position += 1
        group = groups_by_start.get(position)
        if group is None or group.end > segment.end:
            break
        groups.append(group)
        position = group.end
    return position, _merge_metadata(masked, groups, segment.start, position)


def _merge_metadata(
    masked: MaskedSource,
    groups: Sequence[AttributeGroup],
    region_start: int,
    region_end: int,
) -> Tuple[AttributeUsage, ...]:
    """Interleave attribute groups and docblock annotations in source order."""
    items: List[Tuple[int, Tuple[AttributeUsage, ...]]] = [(group.start, group.usages) for group in groups]
    for block in masked.docblocks_between(region_start, region_end):
        items.append((block.start, parse_annotations(block.text)))
    items.sort(key=lambda item: item[0])
    return tuple(usage for _, usages in items for usage in usages)


def _segments(structure: str, start: int, end: int) -> List[_Segment]:
    """Split a class body into depth-0 members ending in ``;`` or a ``{}`` block."""
    segments: List[_Segment] = []
    segment_start = start
    depth = 0
    index = start
    while index < end:
        char = structure[index]
        if char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        elif char == ";" and depth == 0:
            segments.append(_Segment(segment_start, index, None))
            segment_start = index + 1
        elif char == "{" and depth == 0:
            close = find_closing(structure, index)
            close = end if close is None or close > end else close
            segments.append(_Segment(segment_start, index, (index + 1, close)))
            segment_start = close + 1
            index = close + 1
            continue
        index += 1
    return segments


def _build_method(
    masked: MaskedSource,
    segment: _Segment,
    decl_start: int,
    match: re.Match[str],
    attributes: Tuple[AttributeUsage, ...],
) -> Tuple[MethodSignature, List[Property]]:
    modifiers = match.group(1).split()
    name = match.group(2)
    paren = decl_start + match.end() - 1
    close = find_closing(masked.structure, paren)
    if close is None or close > segment.end:
        close = segment.end
    return_match = _RETURN_TYPE.match(masked.structure[close + 1 : segment.end])
    body = masked.code[segment.body[0] : segment.body[1]] if segment.body else ""

    method = MethodSignature(
        name=name,
        visibility=_visibility(modifiers),
        static="static" in modifiers,
        return_type=return_match.group(1) if return_match else None,
        attributes=attributes,
        body=body,
    )
    promoted: List[Property] = []
    if name.lower() == "__construct":
        promoted = _promoted_properties(masked.code[paren + 1 : close])
    return method, promoted


def _promoted_properties(parameters: str) -> List[Property]:
    properties: List[Property] = []
    for parameter in split_arguments(parameters):
        usages: List[AttributeUsage] = []
        remainder = parameter.lstrip()
        while remainder.startswith("#["):
            close = find_closing(remainder, 1)
            if close is None:
                break
            usages.extend(parse_attribute_group(remainder[2:close]))
            remainder = remainder[close + 1 :].lstrip()
        match = _PROMOTED.match(remainder)
        if not match:
            continue
        properties.append(
            _build_property(match.group(1), match.group(2), match.group(3), tuple(usages), promoted=True)
        )
    return properties


def _build_property(
    modifier_text: str,
    raw_type: Optional[str],
    name: str,
    attributes: Tuple[AttributeUsage, ...],
    *,
    class_readonly: bool = False,
    promoted: bool = False,
) -> Property:
    modifiers = modifier_text.split()
    declared, nullable = _normalise_type(raw_type)
    return Property(
        name=name,
        type=declared,
        nullable=nullable,
        visibility=_visibility(modifiers),
        readonly=class_readonly or "readonly" in modifiers,
        static="static" in modifiers,
        promoted=promoted,
        raw_type=raw_type,
        attributes=attributes,
    )


def _with_readonly(prop: Property, readonly: bool) -> Property:
    if not readonly or prop.readonly:
        return prop
    return replace(prop, readonly=True)


def _normalise_type(raw_type: Optional[str]) -> Tuple[Optional[str], bool]:
    """Split ``?Foo`` / ``Foo|null`` into the type and a nullability flag."""
    if not raw_type:
        return None, False
    nullable = raw_type.startswith("?")
    members = [member for member in raw_type.lstrip("?").split("|") if member]
    kept = [member for member in members if member.lower() != "null"]
    if len(kept) != len(members):
        nullable = True
    if not kept:
        return "null", True
    return "|".join(kept), nullable


def _visibility(modifiers: Sequence[str]) -> str:
    for modifier in modifiers:
        if modifier in _VISIBILITIES:
            return modifier
    return "public"


__all__ = ["extract_class"]
