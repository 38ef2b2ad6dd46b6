"""Class-level rules: identity, visibility, lifecycle and repository checks."""

from __future__ import annotations

from typing import List

from ..models import LIFECYCLE_MARKERS, ClassDeclaration, ClassKind, Diagnostic, has_marker
from .base import error

_DATETIME_TYPES = ("DateTime", "DateTimeImmutable", "DateTimeInterface")


def missing_namespace(declaration: ClassDeclaration) -> List[Diagnostic]:
    if declaration.name is None or declaration.namespace:
        return []
    return [error("missing-namespace", "Missing namespace declaration - entities should be namespaced")]


def missing_id(declaration: ClassDeclaration) -> List[Diagnostic]:
    if declaration.kind is not ClassKind.ENTITY:
        return []
    if any(prop.has("Id") for prop in declaration.properties):
        return []
    return [error("missing-id", "Missing #[Id] attribute - entity must have a primary key")]


def orphan_generated_value(declaration: ClassDeclaration) -> List[Diagnostic]:
    attributes = declaration.all_attributes()
    if not has_marker(attributes, "GeneratedValue") or has_marker(attributes, "Id"):
        return []
    return [
        error(
            "orphan-generated-value",
            "#[GeneratedValue] found but no #[Id] attribute - #[GeneratedValue] must be paired with #[Id]",
        )
    ]


def orphan_sequence_generator(declaration: ClassDeclaration) -> List[Diagnostic]:
    attributes = declaration.all_attributes()
    if not has_marker(attributes, "SequenceGenerator") or has_marker(attributes, "GeneratedValue"):
        return []
    return [
        error(
            "orphan-sequence-generator",
            "#[SequenceGenerator] must be used with #[GeneratedValue(strategy: 'SEQUENCE')]",
        )
    ]


def public_property(declaration: ClassDeclaration) -> List[Diagnostic]:
    offending = [
        f"${prop.name}"
        for prop in declaration.properties
        if prop.visibility == "public" and not prop.readonly
    ]
    if not offending:
        return []
    return [
        error(
            "public-property",
            f"Public properties detected ({', '.join(offending)}) - consider using private/protected "
            "properties with getters/setters or readonly public properties",
        )
    ]


def lifecycle_callbacks(declaration: ClassDeclaration) -> List[Diagnostic]:
    if not declaration.has("HasLifecycleCallbacks"):
        return []
    members = list(declaration.methods) + list(declaration.properties)
    for member in members:
        if any(attribute.short_name in LIFECYCLE_MARKERS for attribute in member.attributes):
            return []
    return [
        error(
            "lifecycle-callbacks",
            "#[HasLifecycleCallbacks] declared but no lifecycle callback methods "
            "(#[PrePersist], #[PostUpdate], etc.) found",
        )
    ]


def repository_return_type(declaration: ClassDeclaration) -> List[Diagnostic]:
    if declaration.kind is not ClassKind.REPOSITORY:
        return []
    missing = [
        f"{method.name}()"
        for method in declaration.methods
        if method.visibility == "public"
        and method.name.lower().startswith("find")
        and not method.return_type
    ]
    if not missing:
        return []
    return [
        error(
            "repository-return-type",
            f"Repository find method missing return type ({', '.join(missing)}) - add return type hint "
            "(?Entity or array) for better type safety",
        )
    ]


def datetime_import(declaration: ClassDeclaration) -> List[Diagnostic]:
    """Unqualified DateTime types resolve inside the class namespace unless imported."""
    if not declaration.namespace:
        return []
    imported = {name.lstrip("\\") for name in declaration.imports}
    for prop in declaration.properties:
        if not prop.type:
            continue
        for member in prop.type.replace("(", "").replace(")", "").split("|"):
            member = member.strip()
            if member in _DATETIME_TYPES and member not in imported:
                return [
                    error(
                        "datetime-import",
                        f"{member} property '${prop.name}' without proper namespace - "
                        f"use \\{member} or add 'use {member};' import",
                    )
                ]
    return []


__all__ = [
    "datetime_import",
    "lifecycle_callbacks",
    "missing_id",
    "missing_namespace",
    "orphan_generated_value",
    "orphan_sequence_generator",
    "public_property",
    "repository_return_type",
]
