"""Syntax gate backed by the PHP linter (``php -l``)."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from .logging import get_logger
from .models import Diagnostic, Severity

SYNTAX_RULE = "php-syntax"

Runner = Callable[[Sequence[str]], Tuple[int, str]]


class SyntaxGate:
    """Confirms a file parses before pattern-based extraction runs."""

    def __init__(self, php_binary: str = "php", runner: Runner | None = None) -> None:
        self._php_binary = php_binary
        self._runner = runner or self._default_runner
        self._logger = get_logger("syntax")

    def check(self, path: Path) -> Optional[Diagnostic]:
        """Return a fatal diagnostic when the file fails to lint, else None."""
        command = [self._php_binary, "-l", str(path)]
        try:
            exit_code, output = self._runner(command)
        except OSError as exc:
            self._logger.debug("Syntax checker %s could not start: %s", self._php_binary, exc)
            return Diagnostic(
                rule=SYNTAX_RULE,
                severity=Severity.FATAL,
                message=f"PHP syntax check could not run ({self._php_binary}: {exc.strerror or exc})",
            )
        if exit_code != 0:
            self._logger.debug("Syntax checker exited with %d for %s", exit_code, path)
            return Diagnostic(
                rule=SYNTAX_RULE,
                severity=Severity.FATAL,
                message="PHP syntax error:\n" + output.rstrip("\n"),
            )
        return None

    @staticmethod
    def _default_runner(command: Sequence[str]) -> Tuple[int, str]:
        completed = subprocess.run(
            list(command),
            check=False,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        return completed.returncode, completed.stdout or ""


__all__ = ["SYNTAX_RULE", "SyntaxGate"]
