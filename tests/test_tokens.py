"""Tests for the mash token catalog."""

import pytest

from mash.position import Position
from mash.tokens import (
    KEYWORDS,
    OPERATORS,
    SPELLINGS,
    Token,
    TokenType,
    is_identifier,
    is_keyword,
    is_operator,
    lookup,
    operator,
    unquote,
)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:
    def test_literals(self):
        for kind in (TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING):
            assert kind.is_literal
            assert not kind.is_operator
            assert not kind.is_keyword

    def test_operator_range_edges(self):
        assert TokenType.PLUS.is_operator
        assert TokenType.COLON.is_operator
        assert TokenType.LOGICAL_OR.is_operator

    def test_keyword_range_edges(self):
        assert TokenType.FOR.is_keyword
        assert TokenType.RETURN.is_keyword
        assert not TokenType.COLON.is_keyword

    def test_sentinels_belong_to_no_range(self):
        for kind in (TokenType.ILLEGAL, TokenType.EOF):
            assert not kind.is_literal
            assert not kind.is_operator
            assert not kind.is_keyword

    def test_ranges_partition_the_catalog(self):
        for kind in TokenType:
            if kind in (TokenType.ILLEGAL, TokenType.EOF):
                continue
            memberships = [kind.is_literal, kind.is_operator, kind.is_keyword]
            assert memberships.count(True) == 1, kind


# ---------------------------------------------------------------------------
# Spellings and lookup
# ---------------------------------------------------------------------------

class TestSpellings:
    def test_every_kind_has_a_spelling(self):
        assert set(SPELLINGS) == set(TokenType)

    def test_str_is_spelling(self):
        assert str(TokenType.LOGICAL_AND) == "&&"
        assert str(TokenType.AND_NOT_ASSIGN) == "&^="
        assert str(TokenType.IDENTIFIER) == "IDENT"
        assert str(TokenType.EOF) == "EOF"
        assert TokenType.FUNC.spelling == "func"

    def test_keyword_table(self):
        assert set(KEYWORDS) == {
            "for", "if", "else", "let", "obj", "func", "break", "continue", "return",
        }

    def test_operators_round_trip(self):
        for kind in TokenType:
            if kind.is_operator:
                assert operator(str(kind)) == kind
        assert len(OPERATORS) == sum(1 for kind in TokenType if kind.is_operator)

    def test_keywords_round_trip(self):
        for kind in TokenType:
            if kind.is_keyword:
                assert lookup(str(kind)) == kind

    def test_lookup_identifier(self):
        assert lookup("main") == TokenType.IDENTIFIER
        assert lookup("For") == TokenType.IDENTIFIER

    def test_operator_unknown(self):
        assert operator("@") == TokenType.ILLEGAL
        assert operator("for") == TokenType.ILLEGAL

    def test_is_keyword(self):
        assert is_keyword("let")
        assert not is_keyword("ls")

    def test_is_operator(self):
        assert is_operator("&^=")
        assert is_operator("'")
        assert not is_operator("for")
        assert not is_operator("#")


class TestIsIdentifier:
    @pytest.mark.parametrize("name", ["main", "_x1", "héllo", "a_b_c"])
    def test_valid(self, name):
        assert is_identifier(name)

    @pytest.mark.parametrize("name", ["", "1abc", "a-b", "for", "return", "a b"])
    def test_invalid(self, name):
        assert not is_identifier(name)


class TestInsertSemi:
    @pytest.mark.parametrize("kind", [
        TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING,
        TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE,
        TokenType.BREAK, TokenType.CONTINUE, TokenType.RETURN,
    ])
    def test_terminator_may_follow(self, kind):
        assert kind.insert_semi

    @pytest.mark.parametrize("kind", [
        TokenType.SEMICOLON, TokenType.PIPE, TokenType.LBRACE,
        TokenType.FOR, TokenType.NOT, TokenType.EOF,
    ])
    def test_terminator_may_not_follow(self, kind):
        assert not kind.insert_semi


# ---------------------------------------------------------------------------
# Token and Position
# ---------------------------------------------------------------------------

class TestToken:
    def test_repr(self):
        tok = Token(TokenType.STRING, "ls", Position(2, 5))
        assert repr(tok) == "Token(STRING, 'ls', L2:5)"

    def test_line_and_column(self):
        tok = Token(TokenType.PIPE, "|", Position(3, 7))
        assert tok.line == 3
        assert tok.column == 7

    def test_last_line_spans_newlines(self):
        tok = Token(TokenType.STRING, '"a\nb\nc"', Position(2, 3))
        assert tok.last_line == 4

    def test_line_break_defaults_to_false(self):
        tok = Token(TokenType.STRING, "ls", Position(1, 1))
        assert tok.line_break is False
        assert repr(Token(TokenType.STRING, "ls", Position(2, 1), line_break=True)) == "Token(STRING, 'ls', L2:1)"

    def test_is_immutable(self):
        tok = Token(TokenType.PIPE, "|", Position(1, 1))
        with pytest.raises(AttributeError):
            tok.value = "||"


class TestPosition:
    def test_advance(self):
        assert Position(1, 1).advance() == Position(1, 2)

    def test_next_line_resets_column(self):
        assert Position(4, 9).next_line() == Position(5, 1)

    def test_str(self):
        assert str(Position(3, 12)) == "3:12"


# ---------------------------------------------------------------------------
# Word unquoting
# ---------------------------------------------------------------------------

class TestUnquote:
    def test_plain_word(self):
        assert unquote("ls") == "ls"

    def test_double_quotes(self):
        assert unquote('"hello world"') == "hello world"

    def test_single_quotes_are_verbatim(self):
        assert unquote(r"'a\nb'") == r"a\nb"

    def test_escapes_inside_double_quotes(self):
        assert unquote(r'"say \"hi\" \\ \$HOME"') == r'say "hi" \ $HOME'

    def test_unknown_escape_inside_double_quotes_is_kept(self):
        assert unquote(r'"a\tb"') == r"a\tb"

    def test_backslash_outside_quotes(self):
        assert unquote(r"a\ b") == "a b"

    def test_mixed_sections(self):
        assert unquote("""pre"mid dle"'post'""") == "premid dlepost"

    def test_line_continuation_disappears(self):
        assert unquote('"a\\\nb"') == "ab"

    def test_trailing_backslash_is_kept(self):
        assert unquote("a\\") == "a\\"

    def test_empty_quotes(self):
        assert unquote('""') == ""
