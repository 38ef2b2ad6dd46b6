"""Core rule data structures and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple

from ..models import AttributeUsage, ClassDeclaration, Diagnostic, Property, Severity

RuleCheck = Callable[[ClassDeclaration], List[Diagnostic]]


@dataclass(frozen=True)
class Rule:
    """A named, independent check over an extracted class."""

    identifier: str
    check: RuleCheck

    def __call__(self, declaration: ClassDeclaration) -> List[Diagnostic]:
        return self.check(declaration)


def error(rule: str, message: str) -> Diagnostic:
    return Diagnostic(rule=rule, severity=Severity.ERROR, message=message)


def iter_columns(declaration: ClassDeclaration) -> Iterator[Tuple[Property, AttributeUsage]]:
    """Yield every property carrying a ``Column`` mapping together with it."""
    for prop in declaration.properties:
        for attribute in prop.attributes:
            if attribute.short_name == "Column":
                yield prop, attribute
