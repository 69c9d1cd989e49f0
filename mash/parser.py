"""Mash parser — recursive-descent parser producing an AST from tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from mash.ast_nodes import (
    Program,
    BlockStatement,
    CommandStatement,
    LiteralCommand,
    UnaryCommand,
    BinaryCommand,
    LogicalCommand,
)
from mash.errors import MashError, ParseError
from mash.lexer import Lexer
from mash.position import ORIGIN, Position
from mash.tokens import Token, TokenType, unquote

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Position, MashError], None]


def describe(tok: Token) -> str:
    """Human-readable name of a token for error messages."""
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type == TokenType.SEMICOLON and not tok.value:
        return "end of input"
    if tok.type.is_literal or tok.type == TokenType.ILLEGAL:
        return f"{tok.type.spelling} {tok.value!r}"
    return f"'{tok.type.spelling}'"


class Parser:
    """Recursive-descent parser for mash.

    Pulls tokens one at a time from an iterable (normally the Lexer's token
    stream) and produces an AST rooted at a ``Program`` node.  Syntax errors
    never abort the parse: they are collected in ``errors`` and the parser
    resumes at the next statement.
    """

    def __init__(self, tokens: Iterable[Token], error_handler: ErrorHandler | None = None) -> None:
        self._tokens = iter(tokens)
        self.error_handler = error_handler
        self.errors: list[ParseError] = []

        self._closed = False
        self._current: Token | None = None
        self._next: Token = self._pull(ORIGIN)

    # -- Navigation helpers ------------------------------------------------

    def _pull(self, last: Position) -> Token:
        """Receive the next token from the stream.

        Once the stream is exhausted, an EOF token is synthesised so callers
        never crash on input that ends without one.
        """
        if not self._closed:
            try:
                return next(self._tokens)
            except StopIteration:
                self._closed = True
        return Token(TokenType.EOF, "", last)

    def current(self) -> Token | None:
        """Return the token consumed last."""
        return self._current

    def peek(self) -> TokenType:
        """Return the type of the next, not yet consumed, token."""
        return self._next.type

    def peek_token(self) -> Token:
        return self._next

    def next(self) -> Token:
        """Consume the next token and return it."""
        self._current = self._next
        if self._current.type == TokenType.EOF:
            # Nothing follows EOF; keep returning it.
            return self._current
        self._next = self._pull(self._current.position)
        return self._current

    def match(self, token_type: TokenType) -> bool:
        """Consume the next token if it is of *token_type*."""
        if self._next.type == token_type:
            self.next()
            return True
        return False

    def at_end(self) -> bool:
        """Check whether the lookahead is EOF (received, or synthesised after the stream closed)."""
        return self._next.type == TokenType.EOF

    @property
    def error_count(self) -> int:
        return len(self.errors)

    # -- Error handling ----------------------------------------------------

    def error(self, message: str, tok: Token | None = None) -> ParseError:
        """Record a syntax error at *tok* (default: the lookahead)."""
        tok = tok or self._next
        err = ParseError(message, tok.line, tok.column)
        self._record(err)
        return err

    def _fail(self, message: str) -> ParseError:
        """Build a ParseError at the lookahead, for the caller to raise."""
        return ParseError(message, self._next.line, self._next.column)

    def _record(self, err: ParseError) -> None:
        self.errors.append(err)
        logger.debug("parse error at %s: %s", err.position, err.message)
        if self.error_handler is not None:
            self.error_handler(err.position, err)

    def synchronize(self) -> None:
        """Skip to the next statement boundary after a hard error.

        Consumes through the next ``;`` at the current brace depth, stops in
        front of an unmatched ``}`` so the enclosing block can close, or stops
        at EOF.
        """
        depth = 0
        while not self.at_end():
            tok_type = self.peek()
            if tok_type == TokenType.SEMICOLON and depth == 0:
                self.next()
                return
            if tok_type == TokenType.RBRACE:
                if depth == 0:
                    return
                depth -= 1
            elif tok_type == TokenType.LBRACE:
                depth += 1
            self.next()

    # -- Top-level ---------------------------------------------------------

    def parse(self) -> Program:
        """Parse the full token stream into a ``Program`` AST node."""
        first = self._next
        statements: list = []
        while not self.at_end():
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
        return Program(statements=statements, line=first.line, col=first.column)

    # -- Statement parsing -------------------------------------------------

    def parse_statement(self):
        """Parse one statement and its terminator.

        Returns None when nothing could be built; the error has been recorded
        and the parser has moved past the bad input.
        """
        tok = self._next

        if tok.type.is_keyword:
            self.error(f"'{tok.value}' statements are not supported yet")
            self.synchronize()
            return None

        if tok.type not in (TokenType.LBRACE, TokenType.STRING, TokenType.NOT):
            self.error(f"unexpected {describe(tok)} at start of statement")
            self.next()
            return None

        try:
            if tok.type == TokenType.LBRACE:
                stmt = self.parse_block()
            else:
                stmt = self.parse_command_statement()
        except ParseError as err:
            self._record(err)
            self.synchronize()
            return None

        self.expect_terminator()
        return stmt

    def expect_terminator(self) -> None:
        """Require ``;`` after a statement.

        A ``}`` closing the enclosing block also ends the statement and is
        left for the block.  A missing terminator is reported but does not
        discard the statement.
        """
        if self.match(TokenType.SEMICOLON):
            return
        if self.peek() == TokenType.RBRACE:
            return
        self.error(f"expected ';' after statement, got {describe(self._next)}")

    def parse_block(self) -> BlockStatement:
        """Parse ``{ statement* }``."""
        lbrace = self.next()
        statements: list = []
        while self.peek() != TokenType.RBRACE:
            if self.at_end():
                raise self._fail("expected '}' to close block, got end of input")
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
        self.next()  # consume '}'
        return BlockStatement(statements=statements, line=lbrace.line, col=lbrace.column)

    def parse_command_statement(self) -> CommandStatement:
        tok = self._next
        command = self.parse_command()
        return CommandStatement(command=command, line=tok.line, col=tok.column)

    # -- Command parsing (lowest to highest precedence) --------------------

    def parse_command(self):
        return self.parse_logical_or()

    def parse_logical_or(self):
        """Parse ``and ('||' and)*``, folding left."""
        node = self.parse_logical_and()
        while self.match(TokenType.LOGICAL_OR):
            op = self.current()
            right = self.parse_logical_and()
            node = LogicalCommand(left=node, operator=op, right=right, line=node.line, col=node.col)
        return node

    def parse_logical_and(self):
        """Parse ``not ('&&' not)*``, folding left."""
        node = self.parse_not()
        while self.match(TokenType.LOGICAL_AND):
            op = self.current()
            right = self.parse_not()
            node = LogicalCommand(left=node, operator=op, right=right, line=node.line, col=node.col)
        return node

    def parse_not(self):
        """Parse ``'!' pipe | pipe``. The negation covers the whole pipe."""
        if self.match(TokenType.NOT):
            op = self.current()
            right = self.parse_pipe()
            return UnaryCommand(operator=op, right=right, line=op.line, col=op.column)
        return self.parse_pipe()

    def parse_pipe(self):
        """Parse ``literal ('|' literal)*``, folding left."""
        node = self.parse_literal()
        while self.match(TokenType.PIPE):
            op = self.current()
            right = self.parse_literal()
            node = BinaryCommand(left=node, operator=op, right=right, line=node.line, col=node.col)
        return node

    def parse_literal(self) -> LiteralCommand:
        """Parse a command name and the arguments on the same line.

        A line continuation joins lines; any other line break ends the
        argument list.
        """
        if not self.match(TokenType.STRING):
            raise self._fail(f"expected command, got {describe(self._next)}")
        cmd = self.current()
        if not unquote(cmd.value):
            raise ParseError(f"empty command name {cmd.value!r}", cmd.line, cmd.column)

        args: list[Token] = []
        while self.peek() == TokenType.STRING and not self._next.line_break:
            self.next()
            args.append(self.current())

        return LiteralCommand(cmd=cmd, args=args, line=cmd.line, col=cmd.column)


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------

@dataclass
class ParseResult:
    """A parsed program and every error reported while producing it."""
    program: Program
    errors: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse(
    source: str | bytes,
    error_handler: ErrorHandler | None = None,
    infer_semicolons: bool = True,
) -> ParseResult:
    """Lex and parse *source*, collecting lexer and parser errors in order."""
    errors: list[MashError] = []

    def report(position: Position, err: MashError) -> None:
        errors.append(err)
        if error_handler is not None:
            error_handler(position, err)

    lexer = Lexer(source, report, infer_semicolons=infer_semicolons)
    stream = lexer.tokens()
    try:
        program = Parser(stream, report).parse()
    finally:
        stream.close()
    return ParseResult(program=program, errors=errors)
