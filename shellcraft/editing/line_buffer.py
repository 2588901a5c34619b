"""
Line buffer — the exact, line-addressable content of a text file.

The buffer is the single source of truth for serialization: every line the
user did not touch is written back byte-for-byte.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .modifications import apply_modifications


@dataclass(frozen=True)
class RawLine:
    """A line of text and its zero-based position at recognition time."""
    index: int
    text: str


@dataclass
class LineBuffer:
    """Ordered, mutable sequence of raw text lines.

    ``trailing_newline`` records whether the source text ended with a
    newline, so ``LineBuffer.from_text(x).to_text() == x`` for any ``x``.
    Carriage returns are kept inside the line text.
    """
    lines: list[str] = field(default_factory=list)
    trailing_newline: bool = True

    @classmethod
    def from_text(cls, text: str) -> "LineBuffer":
        if not text:
            return cls(lines=[], trailing_newline=True)
        trailing = text.endswith("\n")
        body = text[:-1] if trailing else text
        return cls(lines=body.split("\n"), trailing_newline=trailing)

    def to_text(self) -> str:
        if not self.lines:
            return ""
        text = "\n".join(self.lines)
        if self.trailing_newline:
            text += "\n"
        return text

    def raw_lines(self) -> list[RawLine]:
        return [RawLine(index=i, text=line) for i, line in enumerate(self.lines)]

    def copy(self) -> "LineBuffer":
        return LineBuffer(lines=list(self.lines), trailing_newline=self.trailing_newline)

    def apply(self, modifications) -> "LineBuffer":
        """Apply a modification batch in place and return ``self``."""
        apply_modifications(self.lines, modifications)
        return self

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)
