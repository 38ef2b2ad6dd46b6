"""Association mapping rules: owning/inverse sides, join metadata and collections."""

from __future__ import annotations

import re
from typing import List

from ..models import ClassDeclaration, ClassKind, Diagnostic
from .base import error

_SINGLE_VALUED = ("OneToOne", "ManyToOne")
_TO_MANY = ("OneToMany", "ManyToMany")


def mapped_and_inversed(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association and association.mapped_by and association.inversed_by:
            diagnostics.append(
                error(
                    "mapped-and-inversed",
                    f"Association '${prop.name}' cannot have both mappedBy and inversedBy - "
                    "one must be on each side of the relationship",
                )
            )
    return diagnostics


def many_to_one_mapped_by(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association is None or association.kind != "ManyToOne":
            continue
        # Both sides declared at once is reported by mapped_and_inversed.
        if association.mapped_by and not association.inversed_by:
            diagnostics.append(
                error(
                    "many-to-one-mapped-by",
                    f"ManyToOne association '${prop.name}' should not have mappedBy - "
                    "ManyToOne is always the owning side, use inversedBy instead",
                )
            )
    return diagnostics


def one_to_many_mapped_by(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association and association.kind == "OneToMany" and not association.mapped_by:
            diagnostics.append(
                error(
                    "one-to-many-mapped-by",
                    f"OneToMany association '${prop.name}' should have mappedBy pointing to the "
                    "ManyToOne property on the target entity",
                )
            )
    return diagnostics


def missing_target_entity(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association and not association.target_entity:
            diagnostics.append(
                error(
                    "missing-target-entity",
                    f"{association.kind} association '${prop.name}' missing targetEntity - "
                    "specify the entity class to link to",
                )
            )
    return diagnostics


def embeddable_association(declaration: ClassDeclaration) -> List[Diagnostic]:
    if declaration.kind is not ClassKind.EMBEDDABLE:
        return []
    for prop in declaration.properties:
        if prop.association:
            return [
                error(
                    "embeddable-association",
                    f"Embeddable class cannot contain associations ({prop.association.kind}) - "
                    "Embeddables are value objects without relationships",
                )
            ]
    return []


def join_column(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association is None:
            misplaced = prop.has("JoinColumn")
        else:
            misplaced = association.has_join_column and association.kind not in _SINGLE_VALUED
        if misplaced:
            diagnostics.append(
                error(
                    "join-column",
                    f"#[JoinColumn] on '${prop.name}' found without accompanying #[ManyToOne] or #[OneToOne] - "
                    "JoinColumn only applies to single-valued associations",
                )
            )
    return diagnostics


def join_table(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association is None:
            misplaced = prop.has("JoinTable")
        else:
            misplaced = association.has_join_table and association.kind != "ManyToMany"
        if misplaced:
            diagnostics.append(
                error(
                    "join-table",
                    f"#[JoinTable] on '${prop.name}' found without #[ManyToMany] - "
                    "JoinTable only applies to ManyToMany associations",
                )
            )
    return diagnostics


def order_by(declaration: ClassDeclaration) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        association = prop.association
        if association is None:
            misplaced = prop.has("OrderBy")
        else:
            misplaced = association.has_order_by and association.kind not in _TO_MANY
        if misplaced:
            diagnostics.append(
                error(
                    "order-by",
                    f"#[OrderBy] on '${prop.name}' found without #[OneToMany] or #[ManyToMany] - "
                    "OrderBy only applies to to-many associations",
                )
            )
    return diagnostics


def collection_init(declaration: ClassDeclaration) -> List[Diagnostic]:
    """Any assignment in the constructor counts, whatever the assigned value."""
    constructor = declaration.method("__construct")
    body = constructor.body if constructor else ""
    diagnostics: List[Diagnostic] = []
    for prop in declaration.properties:
        if not prop.is_collection or prop.static or prop.promoted:
            continue
        assignment = re.compile(rf"\$this\s*->\s*{re.escape(prop.name)}\s*(?:=(?![=>])|\?\?=)")
        if assignment.search(body):
            continue
        diagnostics.append(
            error(
                "collection-init",
                f"Collection property '${prop.name}' should be initialized in constructor "
                "with new ArrayCollection()",
            )
        )
    return diagnostics


__all__ = [
    "collection_init",
    "embeddable_association",
    "join_column",
    "join_table",
    "mapped_and_inversed",
    "many_to_one_mapped_by",
    "missing_target_entity",
    "one_to_many_mapped_by",
    "order_by",
]
