"""mash — lexer and parser front end for the mash shell language."""

from mash.position import Position
from mash.tokens import Token, TokenType
from mash.lexer import Lexer, TokenStream, lex
from mash.parser import Parser, ParseResult, parse
from mash.ast_nodes import (
    Program,
    BlockStatement,
    CommandStatement,
    LiteralCommand,
    UnaryCommand,
    BinaryCommand,
    LogicalCommand,
)
from mash.errors import MashError, LexerError, ParseError, ConfigError, RenderError

__all__ = [
    "Position", "Token", "TokenType",
    "Lexer", "TokenStream", "lex",
    "Parser", "ParseResult", "parse",
    "Program", "BlockStatement", "CommandStatement",
    "LiteralCommand", "UnaryCommand", "BinaryCommand", "LogicalCommand",
    "MashError", "LexerError", "ParseError", "ConfigError", "RenderError",
]
