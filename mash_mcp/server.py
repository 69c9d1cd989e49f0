"""Mash MCP Server — exposes the mash lexer and parser via MCP protocol."""

import yaml
from mcp.server.fastmcp import FastMCP

from mash.lexer import Lexer
from mash.parser import parse
from mash.render import to_dict, to_source

mcp = FastMCP("mash")


def _format_errors(errors: list) -> str:
    return "\n".join(f"Error: {err}" for err in errors)


@mcp.tool()
def mash_tokens(source: str) -> str:
    """Split mash source into tokens, one per line as ``line:col KIND 'value'``.

    Args:
        source: The mash source to tokenize
    """
    return tokenize_source(source)


def tokenize_source(source: str) -> str:
    """Core logic for listing tokens — testable without MCP."""
    lexer = Lexer(source)
    lines = [f"{tok.line}:{tok.column} {tok.type.name} {tok.value!r}" for tok in lexer.tokens()]
    if lexer.errors:
        lines.append(_format_errors(lexer.errors))
    return "\n".join(lines)


@mcp.tool()
def mash_check(source: str) -> str:
    """Check mash syntax. Returns OK, or one error per line with its position.

    Args:
        source: The mash source to check
    """
    return check_source(source)


def check_source(source: str) -> str:
    """Core logic for checking source — testable without MCP."""
    result = parse(source)
    if result.ok:
        return f"OK: {len(result.program.statements)} statement(s)"
    return _format_errors(result.errors)


@mcp.tool()
def mash_parse(source: str) -> str:
    """Parse mash source and return its syntax tree as YAML.

    The tree is followed by the canonical source, with parentheses showing
    how pipes and logical operators were grouped.

    Args:
        source: The mash source to parse
    """
    return parse_source(source)


def parse_source(source: str) -> str:
    """Core logic for parsing source — testable without MCP."""
    result = parse(source)
    if not result.ok:
        return _format_errors(result.errors)
    tree = yaml.safe_dump(to_dict(result.program), sort_keys=False)
    return f"{tree}---\n{to_source(result.program)}"


@mcp.tool()
def mash_check_file(filepath: str) -> str:
    """Check the syntax of a mash script on disk.

    Args:
        filepath: Path to the .mash file to check
    """
    return check_mash_file(filepath)


def check_mash_file(filepath: str) -> str:
    """Core logic for checking a mash file — testable without MCP."""
    try:
        with open(filepath, encoding="utf-8", errors="surrogateescape") as f:
            source = f.read()
    except FileNotFoundError:
        return f"Error: file not found: {filepath}"
    except OSError as e:
        return f"Error reading file: {e}"

    result = parse(source)
    if result.ok:
        return f"OK: {filepath}"
    return _format_errors(result.errors)


MASH_LANGUAGE_GUIDE = """\
# Writing mash scripts

mash is a small shell language. A script is a list of statements, each ended
by a semicolon. The semicolon after the last statement may be left out.

## Commands
```
ls -la;
echo "hello world" 'single quoted' escaped\\ space;
```
A command is a name followed by its arguments on the same line. Quotes group
words; a backslash escapes the next character.

## Composition
```
cat log.txt | grep error | wc -l;      # pipes, left to right
make && make install || echo failed;   # && binds tighter than ||
! grep -q secret notes.txt;            # negates the whole pipe
```

## Blocks
```
{ cd build; make; };
```

## Comments
```
# a comment runs to the end of the line
```

## Important Rules
1. End every statement with ';' (a newline is not a terminator)
2. '!', '{' and '}' must stand alone, separated by spaces
3. let, if, for, obj, func are reserved and not supported yet
"""


@mcp.prompt()
def mash_guide() -> str:
    """Guide to writing mash scripts. Use this when writing .mash files."""
    return MASH_LANGUAGE_GUIDE


if __name__ == "__main__":
    mcp.run(transport="stdio")
