"""Markup lexer for xmlit templates.

Splits template source into tokens. The lexer has two modes:

- **Content mode**: text runs, ``{…}`` interpolations, comments, processing
  instructions / declarations, start tags and end tags.
- **Tag mode** (inside ``<name …>``): attribute names, ``=``, ``?``, quoted
  strings, ``{…}`` interpolations, and the closing ``>`` or ``/>``.

Text tokens carry the raw source slice; the parser decides what whitespace is
significant and decodes entities. Interpolation tokens carry the source
between the braces, which may itself contain braces and quoted strings.

Example:
    >>> [t.type.name for t in tokenize("<cat>{name}</>")]
    ['TAG_OPEN', 'TAG_END', 'INTERPOLATION', 'CLOSE_TAG', 'EOF']
"""

from __future__ import annotations

import re
from bisect import bisect_left

from xmlit._types import Span, Token, TokenType
from xmlit.environment.exceptions import ErrorCode
from xmlit.parser.errors import ParseError
from xmlit.utils.escape import NAME_RE

_TEXT_RUN = re.compile(r"[^<{}]+")
_WHITESPACE = re.compile(r"\s*")


class Lexer:
    """Tokenizer for template markup.

    A Lexer is single-use: create one per source and call ``tokenize()``.
    """

    __slots__ = ("_filename", "_n", "_name", "_newlines", "_source", "_tokens")

    def __init__(
        self,
        source: str,
        *,
        name: str | None = None,
        filename: str | None = None,
    ):
        self._source = source
        self._n = len(source)
        self._name = name
        self._filename = filename
        self._newlines = [i for i, ch in enumerate(source) if ch == "\n"]
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source. The last token is always EOF."""
        source = self._source
        n = self._n
        pos = 0
        text_start: int | None = None

        while pos < n:
            ch = source[pos]
            if ch == "<" or (ch == "{" and not source.startswith("{{", pos)):
                if text_start is not None:
                    self._emit(TokenType.TEXT, source[text_start:pos], text_start, pos)
                    text_start = None
                if ch == "<":
                    pos = self._lex_markup(pos)
                else:
                    pos = self._lex_interpolation(pos)
                continue

            if text_start is None:
                text_start = pos
            if ch in "{}":
                pos += 2 if source.startswith(ch * 2, pos) else 1
            else:
                match = _TEXT_RUN.match(source, pos)
                assert match is not None
                pos = match.end()

        if text_start is not None:
            self._emit(TokenType.TEXT, source[text_start:], text_start, n)
        self._emit(TokenType.EOF, "", n, n)
        return self._tokens

    # -- helpers ----------------------------------------------------------

    def _span(self, start: int, end: int) -> Span:
        line_index = bisect_left(self._newlines, start)
        line_start = self._newlines[line_index - 1] + 1 if line_index else 0
        return Span(line_index + 1, start - line_start, start, end)

    def _emit(self, type_: TokenType, value: str, start: int, end: int) -> None:
        self._tokens.append(Token(type_, value, self._span(start, end)))

    def _error(
        self, message: str, start: int, code: ErrorCode, suggestion: str | None = None
    ) -> ParseError:
        return ParseError(
            message,
            self._span(start, min(start + 1, self._n)),
            code=code,
            template_name=self._name,
            filename=self._filename,
            source=self._source,
            suggestion=suggestion,
        )

    # -- content mode -----------------------------------------------------

    def _lex_markup(self, pos: int) -> int:
        """Lex a construct starting with '<'. Returns the position after it."""
        source = self._source

        if source.startswith("<!--", pos):
            end = source.find("-->", pos + 4)
            if end == -1:
                raise self._error(
                    "unterminated comment", pos, ErrorCode.UNTERMINATED_COMMENT,
                    suggestion="Close the comment with -->",
                )
            self._emit(TokenType.COMMENT, source[pos + 4 : end], pos, end + 3)
            return end + 3

        if source.startswith("<?", pos):
            return self._lex_raw(pos, "?>")
        if source.startswith("<![CDATA[", pos):
            return self._lex_raw(pos, "]]>")
        if source.startswith("<!", pos):
            return self._lex_raw(pos, ">")
        if source.startswith("</", pos):
            return self._lex_close_tag(pos)
        return self._lex_start_tag(pos)

    def _lex_raw(self, pos: int, terminator: str) -> int:
        end = self._source.find(terminator, pos + 2)
        if end == -1:
            raise self._error(
                f"unterminated markup, expected '{terminator}'", pos, ErrorCode.UNTERMINATED_TAG
            )
        end += len(terminator)
        self._emit(TokenType.RAW, self._source[pos:end], pos, end)
        return end

    def _lex_close_tag(self, pos: int) -> int:
        source = self._source
        p = pos + 2
        if p >= self._n:
            raise self._error("unexpected end of input in end tag", pos, ErrorCode.UNEXPECTED_EOF)
        match = NAME_RE.match(source, p)
        name = match.group(0) if match else ""
        p = _WHITESPACE.match(source, p + len(name)).end()  # type: ignore[union-attr]
        if p >= self._n:
            raise self._error(f"unterminated end tag </{name}", pos, ErrorCode.UNTERMINATED_TAG)
        if source[p] != ">":
            if not name:
                raise self._error(
                    "invalid end tag name", pos + 2, ErrorCode.INVALID_NAME,
                    suggestion="Use </name> or the shorthand </>",
                )
            raise self._error(
                f"expected '>' to end </{name}", p, ErrorCode.UNTERMINATED_TAG
            )
        self._emit(TokenType.CLOSE_TAG, name, pos, p + 1)
        return p + 1

    def _lex_start_tag(self, pos: int) -> int:
        source = self._source
        n = self._n
        if pos + 1 >= n:
            raise self._error("unexpected end of input after '<'", pos, ErrorCode.UNEXPECTED_EOF)
        match = NAME_RE.match(source, pos + 1)
        if match is None:
            raise self._error(
                f"invalid tag name starting with {source[pos + 1]!r}",
                pos + 1,
                ErrorCode.INVALID_NAME,
                suggestion="Write a literal '<' in text as &lt;",
            )
        name = match.group(0)
        self._emit(TokenType.TAG_OPEN, name, pos, match.end())
        p = match.end()

        # Tag mode
        while True:
            p = _WHITESPACE.match(source, p).end()  # type: ignore[union-attr]
            if p >= n:
                raise self._error(f"unterminated tag <{name}", pos, ErrorCode.UNTERMINATED_TAG)
            ch = source[p]
            if ch == ">":
                self._emit(TokenType.TAG_END, ">", p, p + 1)
                return p + 1
            if ch == "/":
                if source.startswith("/>", p):
                    self._emit(TokenType.TAG_SELF_CLOSE, "/>", p, p + 2)
                    return p + 2
                raise self._error(
                    "expected '/>' to end a self-closing tag", p, ErrorCode.INVALID_ATTRIBUTE
                )
            if ch == "=":
                self._emit(TokenType.EQUALS, "=", p, p + 1)
                p += 1
            elif ch == "?":
                self._emit(TokenType.QUESTION, "?", p, p + 1)
                p += 1
            elif ch in "\"'":
                end = source.find(ch, p + 1)
                if end == -1:
                    raise self._error(
                        "unterminated attribute value", p, ErrorCode.UNTERMINATED_STRING,
                        suggestion=f"Close the value with {ch}",
                    )
                self._emit(TokenType.STRING, source[p + 1 : end], p, end + 1)
                p = end + 1
            elif ch == "{":
                p = self._lex_interpolation(p)
            else:
                attr = NAME_RE.match(source, p)
                if attr is None:
                    raise self._error(
                        f"unexpected character {ch!r} in tag <{name}>",
                        p,
                        ErrorCode.INVALID_ATTRIBUTE,
                    )
                self._emit(TokenType.ATTR_NAME, attr.group(0), p, attr.end())
                p = attr.end()

    def _lex_interpolation(self, pos: int) -> int:
        """Lex ``{…}`` with nested braces and quoted strings."""
        source = self._source
        i = pos + 1
        depth = 1
        quote: str | None = None
        while i < self._n:
            ch = source[i]
            if quote:
                if ch == "\\":
                    i += 2
                    continue
                if ch == quote:
                    quote = None
            elif ch in "\"'":
                quote = ch
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    break
            i += 1
        else:
            raise self._error(
                "unterminated interpolation", pos, ErrorCode.UNTERMINATED_INTERPOLATION,
                suggestion="Close the interpolation with '}' (write a literal brace as {{)",
            )
        self._emit(TokenType.INTERPOLATION, source[pos + 1 : i], pos, i + 1)
        return i + 1


def tokenize(source: str, *, name: str | None = None, filename: str | None = None) -> list[Token]:
    """Tokenize template source.

    Raises:
        ParseError: If the markup is malformed at the token level.
    """
    return Lexer(source, name=name, filename=filename).tokenize()
