"""Tests for mash error types."""

from mash.errors import MashError, LexerError, ParseError, ConfigError, RenderError
from mash.position import Position


def test_base_is_exception():
    assert issubclass(MashError, Exception)


def test_lexer_error_is_mash_error():
    assert issubclass(LexerError, MashError)


def test_parse_error_is_mash_error():
    assert issubclass(ParseError, MashError)


def test_config_error_is_mash_error():
    assert issubclass(ConfigError, MashError)


def test_render_error_is_mash_error():
    assert issubclass(RenderError, MashError)


def test_str_includes_location():
    err = ParseError("expected command, got ';'", 3, 7)
    assert str(err) == "Line 3, Col 7: expected command, got ';'"
    assert err.message == "expected command, got ';'"


def test_default_location():
    err = MashError("boom")
    assert (err.line, err.column) == (0, 0)


def test_at_builds_subclass_from_position():
    err = LexerError.at(Position(2, 5), "illegal character NUL")
    assert isinstance(err, LexerError)
    assert (err.line, err.column) == (2, 5)


def test_position_property():
    assert ParseError("x", 4, 9).position == Position(4, 9)
