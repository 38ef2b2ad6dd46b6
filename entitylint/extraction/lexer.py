"""Offset-preserving comment and string masking for PHP sources."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

# <<<ID, <<<"ID" (heredoc) and <<<'ID' (nowdoc); the body starts on the next line.
_HEREDOC_OPEN = re.compile(r"<<<[ \t]*([\"']?)([A-Za-z_]\w*)\1\r?\n")


@dataclass(frozen=True)
class Docblock:
    """A ``/** ... */`` comment and its span in the original text."""

    start: int
    end: int
    text: str


@dataclass
class MaskedSource:
    """Three aligned views of a source file.

    ``code`` has comments blanked, ``structure`` additionally blanks string
    literal contents so brace and keyword scanning cannot be fooled by them.
    Every view has the same length as the original text.
    """

    text: str
    code: str
    structure: str
    docblocks: List[Docblock] = field(default_factory=list)

    def docblocks_between(self, start: int, end: int) -> List[Docblock]:
        return [block for block in self.docblocks if block.start >= start and block.end <= end]


def mask_source(text: str) -> MaskedSource:
    """Blank comments (and, for ``structure``, string contents) in ``text``."""
    code = list(text)
    structure = list(text)
    docblocks: List[Docblock] = []
    length = len(text)
    index = 0

    while index < length:
        char = text[index]
        if char == "<" and text.startswith("<<<", index):
            opener = _HEREDOC_OPEN.match(text, index)
            if opener is not None:
                index = _heredoc_end(text, opener, structure)
                continue
        if char in {"'", '"'}:
            end = _string_end(text, index)
            _blank(structure, index + 1, end)
            index = end + 1
            continue
        if text.startswith("/*", index):
            close = text.find("*/", index + 2)
            end = length if close == -1 else close + 2
            if text.startswith("/**", index) and not text.startswith("/**/", index):
                docblocks.append(Docblock(start=index, end=end, text=text[index:end]))
            _blank(code, index, end)
            _blank(structure, index, end)
            index = end
            continue
        if text.startswith("//", index) or (char == "#" and not text.startswith("#[", index)):
            newline = text.find("\n", index)
            end = length if newline == -1 else newline
            _blank(code, index, end)
            _blank(structure, index, end)
            index = end
            continue
        index += 1

    return MaskedSource(
        text=text,
        code="".join(code),
        structure="".join(structure),
        docblocks=docblocks,
    )


def _heredoc_end(text: str, opener: re.Match[str], structure: List[str]) -> int:
    """Blank a heredoc/nowdoc body in ``structure``; return the index after its terminator."""
    body_start = opener.end()
    terminator = re.compile(rf"^[ \t]*{re.escape(opener.group(2))}(?!\w)", re.MULTILINE)
    closing = terminator.search(text, body_start)
    if closing is None:
        _blank(structure, body_start, len(text))
        return len(text)
    _blank(structure, body_start, closing.start())
    return closing.end()


def _string_end(text: str, start: int) -> int:
    """Return the index of the quote closing the literal opened at ``start``."""
    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index
        index += 1
    return len(text) - 1


def _blank(buffer: List[str], start: int, end: int) -> None:
    for position in range(start, min(end, len(buffer))):
        if buffer[position] != "\n":
            buffer[position] = " "


__all__ = ["Docblock", "MaskedSource", "mask_source"]
