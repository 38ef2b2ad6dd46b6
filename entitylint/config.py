"""Configuration loading for entitylint (.entitylint.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".entitylint.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RulesConfig:
    """Rule enablement settings."""

    disabled: List[str] = field(default_factory=list)


@dataclass
class EntityLintConfig:
    """Represents the settings defined in .entitylint.yml."""

    root: Path
    php_binary: str = "php"
    column_types: List[str] = field(default_factory=list)
    repository_bases: List[str] = field(default_factory=list)
    rules: RulesConfig = field(default_factory=RulesConfig)
    log_file: Optional[Path] = None


def load_config(config_path: Path) -> EntityLintConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return EntityLintConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    rules_data = _as_dict(data.get("rules"))
    rules = RulesConfig()
    if rules_data:
        rules.disabled = _as_str_list(rules_data.get("disabled"))

    log_file_str = _as_str(data.get("log_file"))

    return EntityLintConfig(
        root=root,
        php_binary=_as_str(data.get("php_binary")) or "php",
        column_types=[name.lower() for name in _as_str_list(data.get("column_types"))],
        repository_bases=_as_str_list(data.get("repository_bases")),
        rules=rules,
        log_file=root / log_file_str if log_file_str else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
