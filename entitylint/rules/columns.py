"""Column mapping rules: type names, length/precision and PHP type compatibility."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from ..extraction.scanner import column_type_name
from ..models import AttributeUsage, ClassDeclaration, Diagnostic
from .base import RuleCheck, error, iter_columns

KNOWN_COLUMN_TYPES = frozenset(
    {
        "tinyint",
        "smallint",
        "integer",
        "int",
        "bigint",
        "string",
        "ascii_string",
        "text",
        "guid",
        "binary",
        "blob",
        "boolean",
        "decimal",
        "float",
        "smallfloat",
        "double",
        "datetime",
        "datetime_immutable",
        "datetimetz",
        "datetimetz_immutable",
        "date",
        "date_immutable",
        "time",
        "time_immutable",
        "array",
        "simple_array",
        "json",
        "json_object",
        "object",
        "uuid",
        "ulid",
        "dateinterval",
        "enum",
    }
)

_MUTABLE_DATE = ("DateTime", "DateTimeInterface")
_IMMUTABLE_DATE = ("DateTimeImmutable", "DateTimeInterface")

# Doctrine type -> PHP property types it hydrates into.
TYPE_COMPATIBILITY = {
    "string": ("string",),
    "text": ("string",),
    "guid": ("string",),
    "ascii_string": ("string",),
    "decimal": ("string",),
    "integer": ("int", "integer"),
    "smallint": ("int",),
    "bigint": ("string", "int"),
    "boolean": ("bool", "boolean"),
    "float": ("float", "double"),
    "datetime": _MUTABLE_DATE,
    "date": _MUTABLE_DATE,
    "time": _MUTABLE_DATE,
    "datetime_immutable": _IMMUTABLE_DATE,
    "date_immutable": _IMMUTABLE_DATE,
    "time_immutable": _IMMUTABLE_DATE,
    "array": ("array",),
    "simple_array": ("array",),
    "json": ("array",),
    "object": ("object",),
}

# Positional order of the Column attribute constructor.
_COLUMN_POSITIONS = {"name": 0, "type": 1, "length": 2, "precision": 3, "scale": 4}


def column_argument(column: AttributeUsage, key: str) -> Any:
    return column.argument(key, _COLUMN_POSITIONS.get(key))


def has_column_argument(column: AttributeUsage, key: str) -> bool:
    return column.has_argument(key, _COLUMN_POSITIONS.get(key))


def mapped_type(column: AttributeUsage) -> Optional[str]:
    return column_type_name(column_argument(column, "type"))


def unknown_column_type(extra_types: Iterable[str] = ()) -> RuleCheck:
    """Build the unknown-type check, accepting project-specific custom types."""
    known = KNOWN_COLUMN_TYPES | {name.lower() for name in extra_types}

    def check(declaration: ClassDeclaration) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for _, column in iter_columns(declaration):
            type_name = mapped_type(column)
            if type_name and type_name.lower() not in known:
                diagnostics.append(
                    error(
                        "unknown-column-type",
                        f"Unknown column type '{type_name}' - check Doctrine documentation for valid types",
                    )
                )
        return diagnostics

    return check


def string_length(declaration: ClassDeclaration) -> List[Diagnostic]:
    for _, column in iter_columns(declaration):
        type_name = mapped_type(column)
        if type_name and type_name.lower() == "string" and not has_column_argument(column, "length"):
            return [
                error(
                    "string-length",
                    "String column without length - consider adding length: 255 (or appropriate value) to #[Column]",
                )
            ]
    return []


def decimal_precision(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop, column in iter_columns(declaration):
        type_name = mapped_type(column)
        if not type_name or type_name.lower() != "decimal":
            continue
        if has_column_argument(column, "precision") and has_column_argument(column, "scale"):
            continue
        diagnostics.append(
            error(
                "decimal-precision",
                f"Decimal column '${prop.name}' should specify precision and scale "
                "(e.g., precision: 10, scale: 2)",
            )
        )
    return diagnostics


def type_mismatch(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop, column in iter_columns(declaration):
        type_name = mapped_type(column)
        members = [member.lower() for member in prop.type_members]
        if not type_name or not members or "mixed" in members:
            continue
        compatible = TYPE_COMPATIBILITY.get(type_name.lower())
        if compatible is None:
            continue
        allowed = {name.lower() for name in compatible}
        if all(member in allowed for member in members):
            continue
        diagnostics.append(
            error(
                "type-mismatch",
                f"Property '${prop.name}' has PHP type '{prop.raw_type}' but Doctrine type "
                f"'{type_name.lower()}' expects {' or '.join(compatible)}",
            )
        )
    return diagnostics


__all__ = [
    "KNOWN_COLUMN_TYPES",
    "TYPE_COMPATIBILITY",
    "column_argument",
    "decimal_precision",
    "has_column_argument",
    "mapped_type",
    "string_length",
    "type_mismatch",
    "unknown_column_type",
]
