"""Tests for the markup lexer."""

import pytest

from xmlit import ErrorCode, ParseError, TokenType
from xmlit.lexer import tokenize


def types(source: str) -> list[TokenType]:
    return [token.type for token in tokenize(source)]


def values(source: str) -> list[str]:
    return [token.value for token in tokenize(source)]


class TestContentMode:
    """Text, interpolations and markup outside of tags."""

    def test_element_with_text(self):
        assert types("<a>hi</a>") == [
            TokenType.TAG_OPEN,
            TokenType.TAG_END,
            TokenType.TEXT,
            TokenType.CLOSE_TAG,
            TokenType.EOF,
        ]
        assert values("<a>hi</a>") == ["a", ">", "hi", "a", ""]

    def test_shorthand_close_has_empty_name(self):
        tokens = tokenize("<cat>{name}</>")
        assert tokens[-2].type is TokenType.CLOSE_TAG
        assert tokens[-2].value == ""

    def test_close_tag_allows_trailing_whitespace(self):
        assert values("<a></a  >")[-2] == "a"

    def test_interpolation_value_is_inner_source(self):
        tokens = tokenize("x{ ..items }y")
        assert [t.type for t in tokens] == [
            TokenType.TEXT,
            TokenType.INTERPOLATION,
            TokenType.TEXT,
            TokenType.EOF,
        ]
        assert tokens[1].value == " ..items "

    def test_interpolation_with_nested_braces_and_quotes(self):
        tokens = tokenize("{'}'}")
        assert tokens[0].type is TokenType.INTERPOLATION
        assert tokens[0].value == "'}'"

    def test_doubled_braces_stay_in_text(self):
        assert values("a{{b}}c") == ["a{{b}}c", ""]

    def test_comment(self):
        tokens = tokenize("<!-- hi -->")
        assert tokens[0].type is TokenType.COMMENT
        assert tokens[0].value == " hi "

    @pytest.mark.parametrize(
        "source",
        [
            '<?xml version="1.0"?>',
            "<![CDATA[a < b]]>",
            "<!DOCTYPE rss>",
        ],
    )
    def test_raw_markup_is_kept_verbatim(self, source):
        tokens = tokenize(source)
        assert tokens[0].type is TokenType.RAW
        assert tokens[0].value == source


class TestTagMode:
    """Attribute syntax inside start tags."""

    def test_attribute_forms(self):
        source = '<a x="1" y={z} w?{v} r{..s} {..rest}/>'
        assert types(source) == [
            TokenType.TAG_OPEN,
            TokenType.ATTR_NAME,
            TokenType.EQUALS,
            TokenType.STRING,
            TokenType.ATTR_NAME,
            TokenType.EQUALS,
            TokenType.INTERPOLATION,
            TokenType.ATTR_NAME,
            TokenType.QUESTION,
            TokenType.INTERPOLATION,
            TokenType.ATTR_NAME,
            TokenType.INTERPOLATION,
            TokenType.INTERPOLATION,
            TokenType.TAG_SELF_CLOSE,
            TokenType.EOF,
        ]

    def test_single_quoted_value(self):
        assert values("<a x='say \"hi\"'/>")[3] == 'say "hi"'

    def test_whitespace_and_newlines_between_attributes(self):
        source = '<a\n    x="1"\n    y="2"\n>'
        assert values(source) == ["a", "x", "=", "1", "y", "=", "2", ">", ""]

    def test_namespaced_names(self):
        assert values('<itunes:image href="c.jpg"/>')[:2] == ["itunes:image", "href"]


class TestSpans:
    def test_line_and_column(self):
        tokens = tokenize("<a>\n  <b/>\n</a>")
        b = next(t for t in tokens if t.value == "b")
        assert (b.lineno, b.col_offset) == (2, 2)

    def test_span_offsets(self):
        tokens = tokenize("<a>{x}</a>")
        interpolation = tokens[2]
        assert (interpolation.span.start, interpolation.span.end) == (3, 6)


class TestErrors:
    @pytest.mark.parametrize(
        ("source", "code"),
        [
            ("<a", ErrorCode.UNTERMINATED_TAG),
            ("<a>{x", ErrorCode.UNTERMINATED_INTERPOLATION),
            ("<!-- x", ErrorCode.UNTERMINATED_COMMENT),
            ('<a b="x>', ErrorCode.UNTERMINATED_STRING),
            ("<", ErrorCode.UNEXPECTED_EOF),
            ("</", ErrorCode.UNEXPECTED_EOF),
            ("<1a>", ErrorCode.INVALID_NAME),
            ("</1>", ErrorCode.INVALID_NAME),
            ("<a !>", ErrorCode.INVALID_ATTRIBUTE),
            ("<a / >", ErrorCode.INVALID_ATTRIBUTE),
            ("<?xml", ErrorCode.UNTERMINATED_TAG),
        ],
    )
    def test_error_codes(self, source, code):
        with pytest.raises(ParseError) as exc_info:
            tokenize(source)
        assert exc_info.value.code is code
        assert exc_info.value.kind is code

    def test_error_points_at_offending_character(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize('<zoo name="Lorem>')
        assert (exc_info.value.lineno, exc_info.value.col_offset) == (1, 10)
