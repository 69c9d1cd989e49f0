"""Mash error types with source location info."""

from __future__ import annotations

from mash.position import Position


class MashError(Exception):
    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"Line {line}, Col {column}: {message}")

    @classmethod
    def at(cls, position: Position, message: str) -> "MashError":
        return cls(message, position.line, position.column)

    @property
    def position(self) -> Position:
        return Position(self.line, self.column)


class LexerError(MashError):
    pass


class ParseError(MashError):
    pass


class ConfigError(MashError):
    pass


class RenderError(MashError):
    pass
