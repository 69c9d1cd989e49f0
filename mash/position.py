"""Source positions tracked by the lexer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A (line, column) cursor. Both are 1-based; columns count runes."""
    line: int = 1
    column: int = 1

    def advance(self) -> Position:
        return Position(self.line, self.column + 1)

    def next_line(self) -> Position:
        return Position(self.line + 1, 1)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


ORIGIN = Position(1, 1)
