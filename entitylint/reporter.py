"""Formats diagnostics for the hook channel (stderr) and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Sequence, TextIO

from .models import Diagnostic

EXIT_CLEAN = 0
EXIT_DIAGNOSTICS = 2


def exit_status(diagnostics: Sequence[Diagnostic]) -> int:
    return EXIT_DIAGNOSTICS if diagnostics else EXIT_CLEAN


def format_report(path: Path | str, diagnostics: Sequence[Diagnostic]) -> str:
    """Render the human-readable block; empty when there is nothing to report."""
    if not diagnostics:
        return ""
    header = f"Entity validation errors in {Path(path).name}:\n"
    return header + "\n\n".join(diagnostic.message for diagnostic in diagnostics) + "\n"


def report(path: Path | str, diagnostics: Sequence[Diagnostic], stream: TextIO) -> int:
    """Write diagnostics for ``path`` to ``stream`` and return the exit status."""
    text = format_report(path, diagnostics)
    if text:
        stream.write(text)
        stream.flush()
    return exit_status(diagnostics)


def to_json(path: Path | str, diagnostics: Sequence[Diagnostic]) -> Dict[str, Any]:
    """Return a JSON-serialisable summary of the findings for one file."""
    return {
        "file": str(path),
        "status": exit_status(diagnostics),
        "diagnostics": [
            {
                "rule": diagnostic.rule,
                "severity": diagnostic.severity.value,
                "message": diagnostic.message,
            }
            for diagnostic in diagnostics
        ],
    }


__all__ = [
    "EXIT_CLEAN",
    "EXIT_DIAGNOSTICS",
    "exit_status",
    "format_report",
    "report",
    "to_json",
]
