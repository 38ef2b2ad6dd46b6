"""Tests for the rule engine."""

from __future__ import annotations

from entitylint.engine import RuleEngine
from entitylint.models import ClassDeclaration, ClassKind, Diagnostic, Severity
from entitylint.rules import Rule


def _always(rule_id: str, count: int = 1) -> Rule:
    def check(declaration: ClassDeclaration):
        return [
            Diagnostic(rule=rule_id, severity=Severity.ERROR, message=f"{rule_id} #{index}")
            for index in range(count)
        ]

    return Rule(identifier=rule_id, check=check)


def test_engine_runs_every_rule_in_order() -> None:
    engine = RuleEngine([_always("first", 2), _always("second", 0), _always("third")])

    diagnostics = engine.run(ClassDeclaration(name="Post"))

    assert [diagnostic.message for diagnostic in diagnostics] == ["first #0", "first #1", "third #0"]


def test_default_engine_uses_the_full_registry() -> None:
    engine = RuleEngine()
    assert len(engine.rules) == 21


def test_default_engine_reports_missing_namespace_and_id() -> None:
    declaration = ClassDeclaration(name="Post", kind=ClassKind.ENTITY)

    rules = [diagnostic.rule for diagnostic in RuleEngine().run(declaration)]

    assert rules == ["missing-namespace", "missing-id"]


def test_engine_is_deterministic() -> None:
    declaration = ClassDeclaration(name="Post", kind=ClassKind.ENTITY)
    engine = RuleEngine()
    assert engine.run(declaration) == engine.run(declaration)
