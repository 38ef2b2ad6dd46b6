"""Runs the rule registry over an extracted class."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .logging import get_logger
from .models import ClassDeclaration, Diagnostic
from .rules import Rule, build_rules


class RuleEngine:
    """Evaluates every rule independently and collects all findings."""

    def __init__(self, rules: Optional[Iterable[Rule]] = None) -> None:
        self.rules: List[Rule] = list(rules) if rules is not None else build_rules()
        self.logger = get_logger("engine")

    def run(self, declaration: ClassDeclaration) -> List[Diagnostic]:
        """Return diagnostics in registry order, then in each rule's emission order."""
        diagnostics: List[Diagnostic] = []
        for rule in self.rules:
            found = rule(declaration)
            if found:
                self.logger.debug("Rule %s reported %d finding(s)", rule.identifier, len(found))
            diagnostics.extend(found)
        self.logger.debug(
            "Evaluated %d rules against %s: %d diagnostic(s)",
            len(self.rules),
            declaration.name or "<no class>",
            len(diagnostics),
        )
        return diagnostics


__all__ = ["RuleEngine"]
