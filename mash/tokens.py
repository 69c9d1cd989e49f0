"""Mash token catalog — token kinds, spellings, keyword lookup."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from mash.position import Position


# ---------------------------------------------------------------------------
# Token types
# ---------------------------------------------------------------------------

class TokenType(Enum):
    # Sentinels
    ILLEGAL = auto()
    EOF = auto()

    # Literals
    IDENTIFIER = auto()    # main
    NUMBER = auto()        # 42
    STRING = auto()        # "abc", or any command word

    # Arithmetic
    PLUS = auto()          # +
    MINUS = auto()         # -
    STAR = auto()          # *
    SLASH = auto()         # /
    PERCENT = auto()       # %

    # Bitwise
    AMPERSAND = auto()     # &
    PIPE = auto()          # |
    CARET = auto()         # ^
    SHIFT_LEFT = auto()    # <<
    SHIFT_RIGHT = auto()   # >>
    AND_NOT = auto()       # &^

    # Compound assignment
    PLUS_ASSIGN = auto()         # +=
    MINUS_ASSIGN = auto()        # -=
    STAR_ASSIGN = auto()         # *=
    SLASH_ASSIGN = auto()        # /=
    PERCENT_ASSIGN = auto()      # %=
    AND_ASSIGN = auto()          # &=
    OR_ASSIGN = auto()           # |=
    XOR_ASSIGN = auto()          # ^=
    SHIFT_LEFT_ASSIGN = auto()   # <<=
    SHIFT_RIGHT_ASSIGN = auto()  # >>=
    AND_NOT_ASSIGN = auto()      # &^=

    # Logical
    LOGICAL_AND = auto()   # &&
    LOGICAL_OR = auto()    # ||

    # Comparison and assignment
    DOUBLE_EQUALS = auto() # ==
    LT = auto()            # <
    GT = auto()            # >
    ASSIGN = auto()        # =
    DEFINE = auto()        # :=
    NOT = auto()           # !
    NOT_EQUALS = auto()    # !=
    LTE = auto()           # <=
    GTE = auto()           # >=

    # Delimiters
    LPAREN = auto()        # (
    LBRACKET = auto()      # [
    LBRACE = auto()        # {
    TEMPLATE = auto()      # '
    COMMA = auto()         # ,
    PERIOD = auto()        # .
    RPAREN = auto()        # )
    RBRACKET = auto()      # ]
    RBRACE = auto()        # }
    SEMICOLON = auto()     # ;
    COLON = auto()         # :

    # Keywords
    FOR = auto()
    IF = auto()
    ELSE = auto()
    LET = auto()
    OBJ = auto()
    FUNC = auto()
    BREAK = auto()
    CONTINUE = auto()
    RETURN = auto()

    # -- Classification ----------------------------------------------------
    # Ranges are checked against their first and last member, so a new kind
    # must be declared between them.

    @property
    def is_literal(self) -> bool:
        return TokenType.IDENTIFIER.value <= self.value <= TokenType.STRING.value

    @property
    def is_operator(self) -> bool:
        return TokenType.PLUS.value <= self.value <= TokenType.COLON.value

    @property
    def is_keyword(self) -> bool:
        return TokenType.FOR.value <= self.value <= TokenType.RETURN.value

    @property
    def insert_semi(self) -> bool:
        """Whether a statement terminator may be inferred after this kind."""
        return self.is_literal or self in _INSERT_SEMI

    @property
    def spelling(self) -> str:
        return SPELLINGS[self]

    def __str__(self) -> str:
        return SPELLINGS[self]


_INSERT_SEMI = frozenset({
    TokenType.RPAREN,
    TokenType.RBRACKET,
    TokenType.RBRACE,
    TokenType.BREAK,
    TokenType.CONTINUE,
    TokenType.RETURN,
})


# ---------------------------------------------------------------------------
# Spellings
# ---------------------------------------------------------------------------

SPELLINGS: dict[TokenType, str] = {
    TokenType.ILLEGAL: "ILLEGAL",
    TokenType.EOF: "EOF",

    TokenType.IDENTIFIER: "IDENT",
    TokenType.NUMBER: "NUMBER",
    TokenType.STRING: "STRING",

    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.PERCENT: "%",

    TokenType.AMPERSAND: "&",
    TokenType.PIPE: "|",
    TokenType.CARET: "^",
    TokenType.SHIFT_LEFT: "<<",
    TokenType.SHIFT_RIGHT: ">>",
    TokenType.AND_NOT: "&^",

    TokenType.PLUS_ASSIGN: "+=",
    TokenType.MINUS_ASSIGN: "-=",
    TokenType.STAR_ASSIGN: "*=",
    TokenType.SLASH_ASSIGN: "/=",
    TokenType.PERCENT_ASSIGN: "%=",
    TokenType.AND_ASSIGN: "&=",
    TokenType.OR_ASSIGN: "|=",
    TokenType.XOR_ASSIGN: "^=",
    TokenType.SHIFT_LEFT_ASSIGN: "<<=",
    TokenType.SHIFT_RIGHT_ASSIGN: ">>=",
    TokenType.AND_NOT_ASSIGN: "&^=",

    TokenType.LOGICAL_AND: "&&",
    TokenType.LOGICAL_OR: "||",

    TokenType.DOUBLE_EQUALS: "==",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.ASSIGN: "=",
    TokenType.DEFINE: ":=",
    TokenType.NOT: "!",
    TokenType.NOT_EQUALS: "!=",
    TokenType.LTE: "<=",
    TokenType.GTE: ">=",

    TokenType.LPAREN: "(",
    TokenType.LBRACKET: "[",
    TokenType.LBRACE: "{",
    TokenType.TEMPLATE: "'",
    TokenType.COMMA: ",",
    TokenType.PERIOD: ".",
    TokenType.RPAREN: ")",
    TokenType.RBRACKET: "]",
    TokenType.RBRACE: "}",
    TokenType.SEMICOLON: ";",
    TokenType.COLON: ":",

    TokenType.FOR: "for",
    TokenType.IF: "if",
    TokenType.ELSE: "else",
    TokenType.LET: "let",
    TokenType.OBJ: "obj",
    TokenType.FUNC: "func",
    TokenType.BREAK: "break",
    TokenType.CONTINUE: "continue",
    TokenType.RETURN: "return",
}


# Reverse maps, built once at import.
KEYWORDS: dict[str, TokenType] = {
    SPELLINGS[t]: t for t in TokenType if t.is_keyword
}

OPERATORS: dict[str, TokenType] = {
    SPELLINGS[t]: t for t in TokenType if t.is_operator
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def lookup(name: str) -> TokenType:
    """Return the keyword kind for *name*, or IDENTIFIER."""
    return KEYWORDS.get(name, TokenType.IDENTIFIER)


def operator(spelling: str) -> TokenType:
    """Return the operator kind spelled *spelling*, or ILLEGAL."""
    return OPERATORS.get(spelling, TokenType.ILLEGAL)


def is_keyword(name: str) -> bool:
    return name in KEYWORDS


def is_operator(spelling: str) -> bool:
    return spelling in OPERATORS


def is_identifier(name: str) -> bool:
    """A letter or underscore, then letters, digits, or underscores; not a keyword."""
    if not name or is_keyword(name):
        return False
    for i, ch in enumerate(name):
        if ch.isalpha() or ch == "_":
            continue
        if i > 0 and ch.isdecimal():
            continue
        return False
    return True


# ---------------------------------------------------------------------------
# Token dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    position: Position
    # An unescaped line break separates this token from the previous one.
    line_break: bool = False

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def last_line(self) -> int:
        """Line on which the token's text ends."""
        return self.position.line + self.value.count("\n")

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.column})"


# ---------------------------------------------------------------------------
# Command words
# ---------------------------------------------------------------------------

# Characters a backslash escapes inside double quotes.
_DQUOTE_ESCAPES = frozenset('"\\$`\n')


def unquote(word: str) -> str:
    """Return the argument value of a command word, with quoting removed.

    Double-quoted sections honour backslash escapes of ``"``, ``\\``, ``$``,
    backtick and newline; single-quoted sections are taken verbatim; outside
    quotes a backslash escapes the next character. An escaped newline is a
    line continuation and disappears.
    """
    out: list[str] = []
    quote = ""
    i = 0
    while i < len(word):
        ch = word[i]
        if quote == "'":
            if ch == "'":
                quote = ""
            else:
                out.append(ch)
        elif quote == '"':
            if ch == '"':
                quote = ""
            elif ch == "\\" and i + 1 < len(word) and word[i + 1] in _DQUOTE_ESCAPES:
                i += 1
                if word[i] != "\n":
                    out.append(word[i])
            else:
                out.append(ch)
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "\\" and i + 1 < len(word):
            i += 1
            if word[i] != "\n":
                out.append(word[i])
        else:
            out.append(ch)
        i += 1
    return "".join(out)
