"""End-to-end tests: example scripts lexed and parsed into the expected trees."""

import os

import pytest

from mash.ast_nodes import (
    BlockStatement,
    CommandStatement,
    LiteralCommand,
    UnaryCommand,
    BinaryCommand,
    LogicalCommand,
)
from mash.parser import parse
from mash.render import to_source

EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "examples")


def parse_example(name: str):
    with open(os.path.join(EXAMPLES_DIR, name), "rb") as f:
        result = parse(f.read())
    assert result.ok, result.errors
    return result.program


@pytest.mark.parametrize("name", sorted(
    n for n in os.listdir(EXAMPLES_DIR) if n.endswith(".mash")
))
def test_example_parses_cleanly(name):
    program = parse_example(name)
    assert program.statements


def test_hello():
    program = parse_example("hello.mash")
    assert len(program.statements) == 2
    echo, pwd = (s.command for s in program.statements)
    assert echo.argv == ["echo", "Hello from mash!"]
    assert pwd.name == "pwd"
    assert pwd.args == []
    assert (echo.line, pwd.line) == (2, 3)


def test_pipeline():
    program = parse_example("pipeline.mash")
    assert len(program.statements) == 3

    first = program.statements[0].command
    assert isinstance(first, BinaryCommand)
    assert first.right.argv == ["head", "-n", "5"]
    assert first.left.right.argv == ["grep", r"\.log$"]

    last = program.statements[2].command
    assert isinstance(last, LogicalCommand)
    assert last.operator.value == "||"
    assert isinstance(last.left, LogicalCommand)
    assert isinstance(last.left.left, UnaryCommand)
    assert last.right.argv == ["echo", "fatal errors found"]


def test_build():
    program = parse_example("build.mash")
    block, tests = program.statements
    assert isinstance(block, BlockStatement)
    assert [type(s) for s in block.statements] == [CommandStatement, CommandStatement]
    assert block.statements[0].command.argv == ["cd", "build"]

    assert isinstance(tests, CommandStatement)
    assert isinstance(tests.command, LogicalCommand)
    assert tests.command.right.argv == ["echo", "tests failed"]
    assert tests.command.right.line == 7


def test_render_example():
    program = parse_example("build.mash")
    assert to_source(program) == (
        "{ cd build; make -j4 && make install; };\n"
        'make test || echo "tests failed";'
    )


def test_script_with_every_construct():
    source = (
        "# setup\n"
        "mkdir -p out;\n"
        "{ cd out; ! test -f done && touch done; };\n"
        "ls out | wc -l || echo 'listing failed'\n"
    )
    result = parse(source)
    assert result.ok
    kinds = [type(s) for s in result.program.statements]
    assert kinds == [CommandStatement, BlockStatement, CommandStatement]
    inner = result.program.statements[1].statements[1].command
    assert isinstance(inner, LogicalCommand)
    assert isinstance(inner.left, UnaryCommand)
    assert isinstance(inner.left.right, LiteralCommand)
