"""Tests for the php -l syntax gate."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from entitylint.models import Severity
from entitylint.syntax import SYNTAX_RULE, SyntaxGate
from tests._fixtures.entity_builder import FakePhpLint


def test_clean_lint_passes(php_lint: FakePhpLint, tmp_path: Path) -> None:
    gate = SyntaxGate(runner=php_lint)
    assert gate.check(tmp_path / "Post.php") is None
    assert php_lint.commands == [("php", "-l", str(tmp_path / "Post.php"))]


def test_lint_failure_becomes_a_fatal_diagnostic(tmp_path: Path) -> None:
    runner = FakePhpLint(
        exit_code=255,
        output="PHP Parse error:  syntax error, unexpected end of file in Post.php on line 12\n",
    )
    diagnostic = SyntaxGate(php_binary="/usr/bin/php8.3", runner=runner).check(tmp_path / "Post.php")

    assert diagnostic is not None
    assert diagnostic.rule == SYNTAX_RULE
    assert diagnostic.severity is Severity.FATAL
    assert diagnostic.message == (
        "PHP syntax error:\nPHP Parse error:  syntax error, unexpected end of file in Post.php on line 12"
    )
    assert runner.commands[0][0] == "/usr/bin/php8.3"


def test_missing_checker_fails_closed(tmp_path: Path) -> None:
    def _missing(command):
        raise FileNotFoundError(2, "No such file or directory", command[0])

    diagnostic = SyntaxGate(php_binary="php-missing", runner=_missing).check(tmp_path / "Post.php")

    assert diagnostic is not None
    assert diagnostic.severity is Severity.FATAL
    assert "could not run" in diagnostic.message
    assert "php-missing" in diagnostic.message


@pytest.mark.skipif(shutil.which("php") is None, reason="php binary not available")
def test_real_php_linter(entity_files) -> None:
    valid = entity_files.write("Valid.php", "<?php\nclass Valid {}\n")
    broken = entity_files.write("Broken.php", "<?php\nclass Broken {\n")
    gate = SyntaxGate()

    assert gate.check(valid) is None
    diagnostic = gate.check(broken)
    assert diagnostic is not None
    assert diagnostic.message.startswith("PHP syntax error:\n")
