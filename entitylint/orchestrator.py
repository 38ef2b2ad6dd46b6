"""Pipeline orchestration: scope, syntax gate, extraction and rules."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from .config import ConfigError, EntityLintConfig, load_config
from .engine import RuleEngine
from .extraction import extract_class
from .logging import get_logger
from .models import REPOSITORY_BASES, Diagnostic, SourceUnit
from .rules import Rule, build_rules
from .scope import is_entity_file, load_source
from .syntax import Runner, SyntaxGate

_logger = get_logger("orchestrator")


class Orchestrator:
    """Validates one candidate file at a time against the configured rules."""

    def __init__(
        self,
        config: EntityLintConfig | None = None,
        syntax_gate: SyntaxGate | None = None,
        engine: RuleEngine | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.config = config or EntityLintConfig(root=Path.cwd())
        self.syntax_gate = syntax_gate or SyntaxGate(self.config.php_binary, runner=runner)
        self.engine = engine or RuleEngine(self._select_rules(self.config))
        self.repository_bases: Tuple[str, ...] = REPOSITORY_BASES + tuple(
            base for base in self.config.repository_bases if base not in REPOSITORY_BASES
        )
        self.logger = get_logger("orchestrator")

    @staticmethod
    def load_settings(path: Path | str) -> EntityLintConfig:
        """Read ``.entitylint.yml``; a broken file falls back to defaults."""
        config_path = Path(path)
        try:
            return load_config(config_path)
        except (ConfigError, OSError, UnicodeDecodeError) as exc:
            _logger.warning("Ignoring configuration at %s: %s", config_path, exc)
            root = config_path if config_path.is_dir() else config_path.parent
            return EntityLintConfig(root=root.resolve())

    def validate(self, path: Path | str) -> Optional[List[Diagnostic]]:
        """Return the diagnostics for ``path``, or None when it is out of scope."""
        file_path = Path(path)
        text = load_source(file_path)
        if text is None:
            self.logger.debug("Skipping %s: not a readable PHP file", file_path)
            return None
        if not is_entity_file(file_path, text, self.repository_bases):
            self.logger.debug("Skipping %s: no entity markers", file_path)
            return None

        unit = SourceUnit(path=file_path, text=text)
        fatal = self.syntax_gate.check(unit.path)
        unit.syntax_valid = fatal is None
        if fatal is not None:
            self.logger.debug("Syntax gate rejected %s", unit.path)
            return [fatal]

        declaration = extract_class(unit.text, self.repository_bases)
        self.logger.debug(
            "Extracted %s (%s) with %d properties and %d methods",
            declaration.name or "<no class>",
            declaration.kind.value,
            len(declaration.properties),
            len(declaration.methods),
        )
        return self.engine.run(declaration)

    @staticmethod
    def _select_rules(config: EntityLintConfig) -> List[Rule]:
        try:
            return build_rules(config.column_types, config.rules.disabled)
        except ValueError as exc:
            _logger.warning("%s; running every rule", exc)
            return build_rules(config.column_types)


__all__ = ["Orchestrator"]
