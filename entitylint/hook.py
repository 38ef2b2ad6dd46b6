"""PostToolUse hook adapter: JSON envelope on stdin, findings on stderr."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TextIO

from .config import EntityLintConfig
from .logging import get_logger
from .orchestrator import Orchestrator
from .reporter import EXIT_CLEAN, report
from .syntax import Runner

_logger = get_logger("hook")


@dataclass(frozen=True)
class HookRequest:
    """The edited file named by a hook envelope."""

    file_path: Path
    cwd: Path


def parse_envelope(raw: str, default_cwd: Path | None = None) -> Optional[HookRequest]:
    """Return the request carried by ``raw``, or None when there is nothing to validate.

    The envelope looks like ``{"tool_input": {"file_path": ...}, "cwd": ...}``.
    A relative ``file_path`` is resolved against ``cwd``.
    """
    if not raw or not raw.strip():
        return None
    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        _logger.debug("Ignoring unparseable hook input: %s", exc)
        return None
    if not isinstance(payload, dict):
        return None

    tool_input = payload.get("tool_input")
    if not isinstance(tool_input, dict):
        return None
    file_path = tool_input.get("file_path")
    if not isinstance(file_path, str) or not file_path:
        return None

    cwd_value = payload.get("cwd")
    if isinstance(cwd_value, str) and cwd_value:
        cwd = Path(cwd_value)
    else:
        cwd = default_cwd or Path(os.getcwd())

    path = Path(file_path)
    if not path.is_absolute():
        path = cwd / path
    return HookRequest(file_path=path, cwd=cwd)


def run_hook(
    request: HookRequest,
    config: EntityLintConfig,
    stream: TextIO,
    *,
    runner: Runner | None = None,
) -> int:
    """Validate the requested file and report to ``stream`` (stderr in practice)."""
    orchestrator = Orchestrator(config, runner=runner)
    diagnostics = orchestrator.validate(request.file_path)
    if diagnostics is None:
        return EXIT_CLEAN
    return report(request.file_path, diagnostics, stream)


__all__ = ["HookRequest", "parse_envelope", "run_hook"]
