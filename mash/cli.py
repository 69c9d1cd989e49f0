"""Mash CLI — mash check, mash tokens, mash ast."""
import logging
import os
import sys

import yaml

from mash.config import get_config
from mash.errors import MashError
from mash.lexer import Lexer
from mash.parser import parse
from mash.render import to_dict

COMMANDS = ("check", "tokens", "ast")


def _read_source(filepath: str) -> str:
    if filepath == "-":
        return sys.stdin.read()
    with open(filepath, encoding="utf-8", errors="surrogateescape") as f:
        return f.read()


def _setup_logging(config: dict) -> None:
    name = os.environ.get("MASH_LOG_LEVEL") or config["logging"]["level"]
    level = getattr(logging, str(name).upper(), logging.WARNING)

    # Every module logger is a child of the package logger.
    root_logger = logging.getLogger("mash")
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(console_handler)


def _print_errors(filepath: str, errors: list, limit: int = 0) -> None:
    shown = errors[:limit] if limit else errors
    for err in shown:
        print(f"{filepath}:{err.line}:{err.column}: {err.message}", file=sys.stderr)
    if len(shown) < len(errors):
        print(f"{filepath}: {len(errors) - len(shown)} more error(s) not shown", file=sys.stderr)


def main():
    if len(sys.argv) < 2:
        print("Usage: mash <command> <file.mash>", file=sys.stderr)
        print("Commands: check, tokens, ast", file=sys.stderr)
        sys.exit(1)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"Unknown command: {command}", file=sys.stderr)
        sys.exit(1)

    if len(sys.argv) < 3:
        print(f"Usage: mash {command} <file.mash>", file=sys.stderr)
        sys.exit(1)
    filepath = sys.argv[2]
    if filepath != "-" and not os.path.exists(filepath):
        print(f"Error: file not found: {filepath}", file=sys.stderr)
        sys.exit(1)

    try:
        config = get_config()
    except MashError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    _setup_logging(config)

    source = _read_source(filepath)
    infer_semicolons = config["lexer"]["infer_semicolons"]
    max_errors = config["check"]["max_errors"]

    if command == "tokens":
        lexer = Lexer(source, infer_semicolons=infer_semicolons)
        for tok in lexer.tokens():
            print(f"{tok.line}:{tok.column}\t{tok.type.name}\t{tok.value!r}")
        if lexer.errors:
            _print_errors(filepath, lexer.errors, max_errors)
            sys.exit(1)
        sys.exit(0)

    result = parse(source, infer_semicolons=infer_semicolons)

    if command == "check":
        if result.ok:
            print(f"OK: {filepath}")
            sys.exit(0)
        _print_errors(filepath, result.errors, max_errors)
        sys.exit(1)

    if command == "ast":
        print(yaml.safe_dump(to_dict(result.program), sort_keys=False), end="")
        if not result.ok:
            _print_errors(filepath, result.errors, max_errors)
            sys.exit(1)


if __name__ == "__main__":
    main()
