"""Mash lexer — a state machine that scans source text into a token stream.

The lexer reads UTF-8 source one rune at a time.  Each state is a method
that consumes some input, emits zero or more tokens and returns the next
state; ``None`` stops the machine.  Tokens are produced lazily: the state
machine only advances when the consumer pulls the next token, so it never
runs more than one token ahead of the parser.

A statement starts in the *base* state.  A leading keyword switches to
*statement* mode, where the programming-language token set applies; any
other statement is a command line, where words are free-form and only the
command operators (``;``, ``|``, ``||``, ``&``, ``&&`` and stand-alone
``!``, ``{``, ``}``) are special.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Iterator, Optional

from mash.errors import LexerError
from mash.position import ORIGIN, Position
from mash.tokens import OPERATORS, Token, TokenType, lookup, operator

logger = logging.getLogger(__name__)

EOF = ""  # value of ``ch`` once the source is exhausted
BOM = "\ufeff"
_BOM_BYTES = BOM.encode("utf-8")

ERR_NUL = "illegal character NUL"
ERR_BOM = "illegal byte order mark"
ERR_ENC = "illegal utf-8 encoding"
ERR_QUOTE = "unterminated string literal"

ErrorHandler = Callable[[Position, LexerError], None]

# Every prefix of every operator spelling, for longest-match scanning.
_OPERATOR_PREFIXES = frozenset(
    spelling[:i] for spelling in OPERATORS for i in range(1, len(spelling) + 1)
)

# Runes that end a command word.
_COMMAND_DELIMITERS = frozenset(";|&")

# Command-mode operators that only count when they stand alone.
_RESERVED_WORDS = frozenset("!{}")


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

def _is_space(ch: str) -> bool:
    return ch.isspace()


def _is_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident(ch: str) -> bool:
    return _is_ident_start(ch) or ch.isdecimal()


def _is_word(ch: str) -> bool:
    return ch != EOF and not ch.isspace() and ch not in _COMMAND_DELIMITERS


def _sequence_length(lead: int) -> int:
    """Length of the UTF-8 sequence introduced by *lead*, or 0 if invalid."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def _encode(source: str) -> bytes:
    try:
        return source.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        # Lone surrogates outside the escape range; the lexer reports them.
        return source.encode("utf-8", "surrogatepass")


# ---------------------------------------------------------------------------
# Token stream
# ---------------------------------------------------------------------------

class TokenStream:
    """A lazy, single-pass stream of tokens.

    The stream is closed once the lexer has emitted EOF and stopped, or when
    the consumer calls ``close()`` to abandon it.
    """

    def __init__(self, tokens: Iterator[Token]) -> None:
        self._tokens = tokens
        self.closed = False

    def __iter__(self) -> TokenStream:
        return self

    def __next__(self) -> Token:
        if self.closed:
            raise StopIteration
        try:
            return next(self._tokens)
        except StopIteration:
            self.closed = True
            raise

    def close(self) -> None:
        """Stop the lexer and discard any tokens it has not produced yet."""
        self.closed = True
        close = getattr(self._tokens, "close", None)
        if close is not None:
            close()


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------

StateFunc = Callable[[], Optional["StateFunc"]]


class Lexer:
    """Scans mash source text and produces Token objects on demand."""

    def __init__(
        self,
        source: str | bytes,
        error_handler: ErrorHandler | None = None,
        infer_semicolons: bool = True,
    ) -> None:
        self.src: bytes = _encode(source) if isinstance(source, str) else bytes(source)
        self.error_handler = error_handler
        self.infer_semicolons = infer_semicolons

        self.ch: str = EOF      # current rune
        self.wd: int = 0        # byte width of the current rune

        self.offset: int = 0    # start of the current token
        self.rd_offset: int = 0 # byte after the current rune

        self.start: Position = ORIGIN  # position of the start of the token
        self.prev: Position = ORIGIN   # position before the last consume
        self.pos: Position = ORIGIN    # position of the next rune

        self.insert_semi: bool = False
        self.line_break: bool = False  # a line break was skipped since the last emit
        self.error_count: int = 0
        self.errors: list[LexerError] = []

        self._pending: deque[Token] = deque()

        # A byte order mark is only legal as the very first rune.
        if self.src.startswith(_BOM_BYTES):
            self.offset = self.rd_offset = len(_BOM_BYTES)

    # -- Entry points --------------------------------------------------------

    def tokens(self) -> TokenStream:
        """Return a lazy stream of tokens ending with EOF."""
        return TokenStream(self._run())

    def tokenize(self) -> list[Token]:
        """Scan the entire source and return a list of tokens ending with EOF."""
        return list(self.tokens())

    def _run(self) -> Iterator[Token]:
        state: StateFunc | None = self._lex_base
        while state is not None:
            state = state()
            while self._pending:
                yield self._pending.popleft()

    # -- Rune-level helpers ----------------------------------------------------

    def at_end(self) -> bool:
        return self.rd_offset >= len(self.src)

    def _decode(self, at: int) -> tuple[str, int, bool]:
        """Decode the rune at byte offset *at* as (rune, width, valid)."""
        lead = self.src[at]
        if lead < 0x80:
            return chr(lead), 1, True
        width = _sequence_length(lead)
        if width:
            try:
                return self.src[at:at + width].decode("utf-8"), width, True
            except UnicodeDecodeError:
                pass
        return "\ufffd", 1, False

    def consume(self) -> None:
        """Read the next rune into ``ch``, advancing offsets and position."""
        self.prev = self.pos
        if self.at_end():
            self.ch = EOF
            self.wd = 0
            return

        ch, wd, valid = self._decode(self.rd_offset)
        if ch == "\x00":
            self.error(ERR_NUL)
        elif not valid:
            self.error(ERR_ENC)
        elif ch == BOM:
            self.error(ERR_BOM)

        self.ch = ch
        self.wd = wd
        self.rd_offset += wd
        self.pos = self.pos.next_line() if ch == "\n" else self.pos.advance()

    def backup(self) -> None:
        """Step back over the last consumed rune. Only one step is possible."""
        self.rd_offset -= self.wd
        self.pos = self.prev
        self.wd = 0

    def peek(self) -> str:
        """Return the next rune without consuming it, or EOF."""
        if self.at_end():
            return EOF
        return self._decode(self.rd_offset)[0]

    def _accept(self, ch: str) -> bool:
        if self.peek() == ch:
            self.consume()
            return True
        return False

    def literal(self) -> str:
        return self.src[self.offset:self.rd_offset].decode("utf-8", "replace")

    def ignore(self) -> None:
        """Drop the consumed input without emitting a token."""
        self.offset = self.rd_offset
        self.start = self.pos

    def emit(self, kind: TokenType) -> None:
        self._pending.append(Token(kind, self.literal(), self.start, self.line_break))
        self.insert_semi = kind.insert_semi
        self.line_break = False
        self.ignore()

    def error(self, message: str, position: Position | None = None) -> None:
        err = LexerError.at(position or self.pos, message)
        self.error_count += 1
        self.errors.append(err)
        logger.debug("lexer error at %s: %s", err.position, message)
        if self.error_handler is not None:
            self.error_handler(err.position, err)

    # -- Scanners ------------------------------------------------------------

    def _skip_space(self) -> None:
        while _is_space(self.peek()):
            self.consume()
            if self.ch == "\n":
                self.line_break = True
        self.ignore()

    def _at_continuation(self) -> bool:
        """Whether an unquoted backslash-newline comes next."""
        return self.src.startswith(b"\\\n", self.rd_offset)

    def _skip_inline_space(self) -> None:
        """Skip blanks and line continuations, stopping at a line break."""
        while True:
            if self.peek() != "\n" and _is_space(self.peek()):
                self.consume()
            elif self._at_continuation():
                self.consume()
                self.consume()
            else:
                break
        self.ignore()

    def _skip_comment(self) -> None:
        """Consume a ``#`` comment, leaving the newline for the caller."""
        while True:
            self.consume()
            if self.ch == "\n":
                self.backup()
                break
            if self.ch == EOF:
                break
        self.ignore()

    def _scan_quoted(self, quote: str, escapes: bool) -> None:
        """Consume up to and including the closing *quote*."""
        opening = self.prev
        while True:
            self.consume()
            if self.ch == EOF:
                self.error(ERR_QUOTE, opening)
                return
            if self.ch == quote:
                return
            if escapes and self.ch == "\\":
                self.consume()

    def _scan_word_rune(self) -> None:
        if self.ch == '"':
            self._scan_quoted('"', escapes=True)
        elif self.ch == "'":
            self._scan_quoted("'", escapes=False)
        elif self.ch == "\\":
            self.consume()

    # -- States --------------------------------------------------------------

    def _lex_base(self) -> StateFunc:
        """Start of a statement: a keyword selects statement mode."""
        self._skip_space()
        if not _is_letter(self.peek()):
            return self._lex_command

        while _is_ident(self.peek()):
            self.consume()
        kind = lookup(self.literal())
        if kind.is_keyword and not _is_word(self.peek()):
            self.emit(kind)
            return self._lex_statement

        # The consumed letters are the start of a command word.
        return self._lex_word

    def _lex_command(self) -> StateFunc:
        self._skip_inline_space()
        self.consume()
        ch = self.ch

        if ch == EOF:
            return self._lex_end
        if ch == "\n":
            self.line_break = True
            self.ignore()
            return self._lex_base
        if ch == "#":
            self._skip_comment()
            return self._lex_command
        if ch == ";":
            self.emit(TokenType.SEMICOLON)
            return self._lex_base
        if ch == "|":
            self.emit(TokenType.LOGICAL_OR if self._accept("|") else TokenType.PIPE)
            return self._lex_command
        if ch == "&":
            self.emit(TokenType.LOGICAL_AND if self._accept("&") else TokenType.AMPERSAND)
            return self._lex_command
        if ch in _RESERVED_WORDS and not _is_word(self.peek()):
            kind = operator(ch)
            self.emit(kind)
            if kind is TokenType.LBRACE:
                return self._lex_base
            return self._lex_command

        return self._lex_word

    def _lex_word(self) -> StateFunc:
        """A free-form command word; ``ch`` is its latest consumed rune."""
        self._scan_word_rune()
        while _is_word(self.peek()):
            self.consume()
            self._scan_word_rune()
        self.emit(TokenType.STRING)
        return self._lex_command

    def _lex_statement(self) -> StateFunc:
        self.consume()
        ch = self.ch

        if ch == EOF:
            return self._lex_end
        if ch == "\n":
            self.line_break = True
            self.ignore()
            return self._lex_base
        if _is_space(ch):
            self._skip_inline_space()
            return self._lex_statement

        # literals
        if _is_ident_start(ch):
            while _is_ident(self.peek()):
                self.consume()
            self.emit(lookup(self.literal()))
            return self._lex_statement
        if _is_digit(ch):
            return self._lex_number
        if ch == '"':
            self._scan_quoted('"', escapes=True)
            self.emit(TokenType.STRING)
            return self._lex_statement

        # special
        if ch == "#":
            self._skip_comment()
            return self._lex_statement
        if ch in _OPERATOR_PREFIXES:
            return self._lex_operator

        self.emit(TokenType.ILLEGAL)
        return self._lex_statement

    def _lex_number(self) -> StateFunc:
        while _is_digit(self.peek()):
            self.consume()
        self.emit(TokenType.NUMBER)
        return self._lex_statement

    def _lex_operator(self) -> StateFunc:
        # Longest match: keep consuming while the text is still an operator prefix.
        while True:
            nxt = self.peek()
            if nxt == EOF or self.literal() + nxt not in _OPERATOR_PREFIXES:
                break
            self.consume()

        kind = operator(self.literal())
        self.emit(kind)
        if kind in (TokenType.SEMICOLON, TokenType.LBRACE, TokenType.RBRACE):
            return self._lex_base
        return self._lex_statement

    def _lex_end(self) -> None:
        if self.infer_semicolons and self.insert_semi:
            self.emit(TokenType.SEMICOLON)
        self.emit(TokenType.EOF)
        return None


def lex(source: str | bytes, error_handler: ErrorHandler | None = None) -> TokenStream:
    """Start lexing *source* and return its token stream."""
    return Lexer(source, error_handler).tokens()
