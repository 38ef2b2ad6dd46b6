"""Tests for diagnostic formatting and exit codes."""

from __future__ import annotations

import io
import json

from entitylint.models import Diagnostic, Severity
from entitylint.reporter import exit_status, format_report, report, to_json


def _diagnostic(message: str, rule: str = "missing-id") -> Diagnostic:
    return Diagnostic(rule=rule, severity=Severity.ERROR, message=message)


def test_report_writes_header_and_blank_line_separated_messages() -> None:
    stream = io.StringIO()
    status = report(
        "/app/src/Entity/Post.php",
        [_diagnostic("First problem"), _diagnostic("Second problem")],
        stream,
    )

    assert status == 2
    assert stream.getvalue() == (
        "Entity validation errors in Post.php:\n"
        "First problem\n"
        "\n"
        "Second problem\n"
    )


def test_report_is_silent_without_diagnostics() -> None:
    stream = io.StringIO()
    assert report("/app/src/Entity/Post.php", [], stream) == 0
    assert stream.getvalue() == ""
    assert format_report("Post.php", []) == ""


def test_exit_status_maps_findings_to_two() -> None:
    assert exit_status([]) == 0
    assert exit_status([_diagnostic("x")]) == 2


def test_to_json_is_serialisable() -> None:
    document = to_json(
        "src/Entity/Post.php",
        [Diagnostic(rule="php-syntax", severity=Severity.FATAL, message="PHP syntax error:\nboom")],
    )

    assert json.loads(json.dumps(document)) == {
        "file": "src/Entity/Post.php",
        "status": 2,
        "diagnostics": [
            {"rule": "php-syntax", "severity": "fatal", "message": "PHP syntax error:\nboom"},
        ],
    }
