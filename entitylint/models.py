"""Core data models shared across entitylint components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

REPOSITORY_BASES = ("EntityRepository", "ServiceEntityRepository")
ASSOCIATION_KINDS = ("OneToOne", "OneToMany", "ManyToOne", "ManyToMany")
LIFECYCLE_MARKERS = frozenset(
    {
        "PrePersist",
        "PostPersist",
        "PreUpdate",
        "PostUpdate",
        "PreRemove",
        "PostRemove",
        "PostLoad",
        "PreFlush",
    }
)

_CLASS_REFERENCE = re.compile(r"^\\?(?:[A-Za-z_]\w*\\)*([A-Za-z_]\w*)(?:::class)?$")
_MISSING = object()


class Expression(str):
    """Argument value kept as unevaluated source text (arrays, constants, ``Foo::class``)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Expression({str.__repr__(self)})"


class ClassKind(str, Enum):
    ENTITY = "entity"
    EMBEDDABLE = "embeddable"
    REPOSITORY = "repository"
    UNCLASSIFIED = "unclassified"


class Severity(str, Enum):
    FATAL = "fatal"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One reported finding."""

    rule: str
    severity: Severity
    message: str


@dataclass
class SourceUnit:
    """A file under validation; lives for a single invocation."""

    path: Path
    text: str
    syntax_valid: Optional[bool] = None


@dataclass(frozen=True)
class AttributeUsage:
    """A mapping attribute (or docblock annotation) and its parsed arguments."""

    name: str
    named: Dict[str, Any] = field(default_factory=dict)
    positional: Tuple[Any, ...] = ()

    @property
    def short_name(self) -> str:
        return self.name.rstrip("\\").rsplit("\\", 1)[-1]

    def argument(self, key: str, position: Optional[int] = None, default: Any = None) -> Any:
        """Return a named argument, falling back to a positional slot."""
        if key in self.named:
            return self.named[key]
        if position is not None and position < len(self.positional):
            return self.positional[position]
        return default

    def has_argument(self, key: str, position: Optional[int] = None) -> bool:
        return self.argument(key, position, _MISSING) is not _MISSING


def short_class_name(value: Any) -> Optional[str]:
    """Resolve ``App\\Entity\\User::class`` or ``'User'`` to ``User``."""
    if not isinstance(value, str):
        return None
    match = _CLASS_REFERENCE.match(value.strip())
    return match.group(1) if match else None


def has_marker(attributes: Sequence[AttributeUsage], name: str) -> bool:
    return any(attribute.short_name == name for attribute in attributes)


def find_marker(attributes: Sequence[AttributeUsage], name: str) -> Optional[AttributeUsage]:
    for attribute in attributes:
        if attribute.short_name == name:
            return attribute
    return None


@dataclass(frozen=True)
class Association:
    """Relationship view derived from a property's attributes."""

    kind: str
    target_entity: Optional[str]
    mapped_by: Optional[str]
    inversed_by: Optional[str]
    has_join_column: bool = False
    has_join_table: bool = False
    has_order_by: bool = False

    @classmethod
    def from_attributes(cls, attributes: Sequence[AttributeUsage]) -> Optional["Association"]:
        marker = next((a for a in attributes if a.short_name in ASSOCIATION_KINDS), None)
        if marker is None:
            return None
        target = short_class_name(marker.named.get("targetEntity"))
        if target is None and "targetEntity" not in marker.named and marker.positional:
            # Only a class-looking first positional argument counts as the target.
            candidate = short_class_name(marker.positional[0])
            if candidate and candidate[0].isupper():
                target = candidate
        return cls(
            kind=marker.short_name,
            target_entity=target,
            mapped_by=_non_empty(marker.named.get("mappedBy")),
            inversed_by=_non_empty(marker.named.get("inversedBy")),
            has_join_column=has_marker(attributes, "JoinColumn"),
            has_join_table=has_marker(attributes, "JoinTable"),
            has_order_by=has_marker(attributes, "OrderBy"),
        )


def _non_empty(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(frozen=True)
class Property:
    """A declared (or constructor-promoted) class property."""

    name: str
    type: Optional[str] = None
    nullable: bool = False
    visibility: str = "public"
    readonly: bool = False
    static: bool = False
    promoted: bool = False
    raw_type: Optional[str] = None
    attributes: Tuple[AttributeUsage, ...] = ()
    association: Optional[Association] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "association", Association.from_attributes(self.attributes))

    @property
    def type_members(self) -> Tuple[str, ...]:
        """Short class names of the non-null members of the declared type."""
        if not self.type:
            return ()
        members = re.split(r"[|&]", self.type.replace("(", "").replace(")", ""))
        return tuple(
            member.strip().lstrip("\\").rsplit("\\", 1)[-1]
            for member in members
            if member.strip() and member.strip().lower() != "null"
        )

    @property
    def is_collection(self) -> bool:
        return any(member.endswith("Collection") for member in self.type_members)

    def has(self, marker: str) -> bool:
        return has_marker(self.attributes, marker)

    def marker(self, name: str) -> Optional[AttributeUsage]:
        return find_marker(self.attributes, name)


@dataclass(frozen=True)
class MethodSignature:
    name: str
    visibility: str = "public"
    static: bool = False
    return_type: Optional[str] = None
    attributes: Tuple[AttributeUsage, ...] = ()
    body: str = ""

    def has(self, marker: str) -> bool:
        return has_marker(self.attributes, marker)


@dataclass
class ClassDeclaration:
    """Structured view of the single class a source file declares."""

    namespace: Optional[str] = None
    name: Optional[str] = None
    parent: Optional[str] = None
    kind: ClassKind = ClassKind.UNCLASSIFIED
    imports: Tuple[str, ...] = ()
    attributes: Tuple[AttributeUsage, ...] = ()
    properties: Tuple[Property, ...] = ()
    methods: Tuple[MethodSignature, ...] = ()

    def has(self, marker: str) -> bool:
        return has_marker(self.attributes, marker)

    def all_attributes(self) -> Tuple[AttributeUsage, ...]:
        """Class, property and method attributes in declaration order."""
        collected = list(self.attributes)
        for prop in self.properties:
            collected.extend(prop.attributes)
        for method in self.methods:
            collected.extend(method.attributes)
        return tuple(collected)

    def method(self, name: str) -> Optional[MethodSignature]:
        lowered = name.lower()
        for method in self.methods:
            if method.name.lower() == lowered:
                return method
        return None
