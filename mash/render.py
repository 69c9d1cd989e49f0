"""Mash renderer — walks the AST and emits canonical source or plain data."""

from __future__ import annotations

from mash.ast_nodes import (
    Node,
    Program,
    BlockStatement,
    CommandStatement,
    LiteralCommand,
    UnaryCommand,
    BinaryCommand,
    LogicalCommand,
)
from mash.errors import RenderError


def _unsupported(node) -> RenderError:
    return RenderError(
        f"Unsupported node type: {type(node).__name__}",
        getattr(node, "line", 0),
        getattr(node, "col", 0),
    )


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------

def to_source(node: Node) -> str:
    """Render *node* back to mash source.

    Composite operands are parenthesised so the rendering shows how the
    parser nested them: ``a | b | c`` renders as ``(a | b) | c``.
    """
    if isinstance(node, Program):
        return "\n".join(to_source(stmt) for stmt in node.statements)
    if isinstance(node, BlockStatement):
        if not node.statements:
            return "{ };"
        return "{ " + " ".join(to_source(stmt) for stmt in node.statements) + " };"
    if isinstance(node, CommandStatement):
        return f"{to_source(node.command)};"
    if isinstance(node, LiteralCommand):
        return " ".join(tok.value for tok in [node.cmd, *node.args])
    if isinstance(node, UnaryCommand):
        return f"{node.operator.value} {_operand(node.right)}"
    if isinstance(node, (BinaryCommand, LogicalCommand)):
        return f"{_operand(node.left)} {node.operator.value} {_operand(node.right)}"

    raise _unsupported(node)


def _operand(node: Node) -> str:
    if isinstance(node, LiteralCommand):
        return to_source(node)
    return f"({to_source(node)})"


# ---------------------------------------------------------------------------
# Plain data
# ---------------------------------------------------------------------------

def to_dict(node: Node) -> dict:
    """Convert *node* into nested dicts and lists, for YAML or JSON dumps."""
    data: dict = {"type": type(node).__name__, "line": node.line, "col": node.col}

    if isinstance(node, (Program, BlockStatement)):
        data["statements"] = [to_dict(stmt) for stmt in node.statements]
    elif isinstance(node, CommandStatement):
        data["command"] = to_dict(node.command)
    elif isinstance(node, LiteralCommand):
        data["cmd"] = node.cmd.value
        data["args"] = [arg.value for arg in node.args]
    elif isinstance(node, UnaryCommand):
        data["operator"] = node.operator.value
        data["right"] = to_dict(node.right)
    elif isinstance(node, (BinaryCommand, LogicalCommand)):
        data["left"] = to_dict(node.left)
        data["operator"] = node.operator.value
        data["right"] = to_dict(node.right)
    else:
        raise _unsupported(node)

    return data
