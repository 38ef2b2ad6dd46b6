"""Source loading and scope classification for candidate entity files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional

from .models import REPOSITORY_BASES

_ENTITY_NAMESPACE = re.compile(r"namespace\s+[^;{]*Entity\s*(?:[;{]|\\)")
_MAPPING_ATTRIBUTE = re.compile(r"#\[\s*(?:\\?[A-Za-z_]\w*\\)*(?:Entity|Embeddable)\b(?!\\)")
_MAPPING_ANNOTATION = re.compile(r"@(?:\\?[A-Za-z_]\w*\\)*(?:Entity|Embeddable)\b(?!\\)")
_REPOSITORY_CLASS = re.compile(r"class\s+\w+Repository\s+extends\s+\\?(?:[A-Za-z_]\w*\\)*([A-Za-z_]\w*)")


def load_source(path: Path) -> Optional[str]:
    """Return the file's text, or None when it is not a readable PHP file."""
    if path.suffix != ".php":
        return None
    try:
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def is_entity_file(
    path: Path | str,
    text: str,
    repository_bases: Iterable[str] = REPOSITORY_BASES,
) -> bool:
    """Return True when any entity heuristic matches.

    The heuristics are independent; missing a file is preferred over
    validating something that is not a mapped class.
    """
    raw_path = str(path)
    if "/Entity/" in raw_path or "\\Entity\\" in raw_path:
        return True
    if _ENTITY_NAMESPACE.search(text):
        return True
    if _MAPPING_ATTRIBUTE.search(text) or _MAPPING_ANNOTATION.search(text):
        return True
    bases = set(repository_bases)
    for match in _REPOSITORY_CLASS.finditer(text):
        if match.group(1) in bases:
            return True
    return False


__all__ = ["is_entity_file", "load_source"]
