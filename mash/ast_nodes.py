"""Mash AST node definitions.

Every node is a Python dataclass carrying ``line`` and ``col`` for
source-location tracking.  Statements and commands are closed sets of
variants; an executor dispatches on the concrete class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from mash.tokens import Token, unquote


# ── Base ────────────────────────────────────────────────────────────────────

@dataclass
class Node:
    """Base class for every AST node."""
    line: int = 0
    col: int = 0


# ── Program ─────────────────────────────────────────────────────────────────

@dataclass
class Program(Node):
    statements: list = field(default_factory=list)


# ── Statements ──────────────────────────────────────────────────────────────

@dataclass
class BlockStatement(Node):
    statements: list = field(default_factory=list)


@dataclass
class CommandStatement(Node):
    command: Optional["Command"] = None


# ── Commands ────────────────────────────────────────────────────────────────

@dataclass
class LiteralCommand(Node):
    """A program invocation: the command name followed by its arguments."""
    cmd: Optional[Token] = None
    args: list[Token] = field(default_factory=list)

    @property
    def name(self) -> str:
        return unquote(self.cmd.value) if self.cmd else ""

    @property
    def argv(self) -> list[str]:
        """Name and arguments with quoting removed, as an executor wants them."""
        return [self.name] + [unquote(arg.value) for arg in self.args]


@dataclass
class UnaryCommand(Node):
    operator: Optional[Token] = None
    right: Optional["Command"] = None


@dataclass
class BinaryCommand(Node):
    left: Optional["Command"] = None
    operator: Optional[Token] = None
    right: Optional["Command"] = None


@dataclass
class LogicalCommand(Node):
    left: Optional["Command"] = None
    operator: Optional[Token] = None
    right: Optional["Command"] = None


Statement = Union[BlockStatement, CommandStatement]
Command = Union[LiteralCommand, UnaryCommand, BinaryCommand, LogicalCommand]
