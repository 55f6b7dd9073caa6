"""Template parser for xmlit.

Builds an immutable Document tree from lexer tokens. End tags are matched
with an explicit stack of open elements: ``</>`` resolves to the element on
top of the stack, so no node ever holds an unresolved shorthand. Explicit end
tags are recorded as written; checking them against the start tag is the
validator's job, as is rejecting elements left open at end of input.

Example:
    >>> from xmlit.parser import parse
    >>> doc = parse("<zoo><cat>{name}</></zoo>")
    >>> doc.root.children[0].name
    'cat'
"""

from __future__ import annotations

import ast
import keyword
from dataclasses import dataclass, field

from xmlit._types import Span, Token, TokenType
from xmlit.environment.exceptions import ErrorCode
from xmlit.lexer import tokenize
from xmlit.nodes import (
    Attribute,
    ChildNode,
    CloseTag,
    Comment,
    Document,
    Element,
    Interpolated,
    Literal,
    OptionalInterpolated,
    RawPassthrough,
    RepeatedChildren,
    RepeatedInterpolated,
    Shape,
    Slot,
    Text,
)
from xmlit.parser.errors import ParseError
from xmlit.utils.escape import unescape

__all__ = ["ParseError", "Parser", "parse"]


@dataclass(slots=True)
class _OpenElement:
    """Element whose end tag has not been seen yet."""

    name: str
    attributes: tuple[Attribute, ...]
    span: Span
    children: list[ChildNode] = field(default_factory=list)

    def build(self, close: CloseTag | None) -> Element:
        return Element(
            name=self.name,
            attributes=self.attributes,
            children=tuple(self.children),
            close=close,
            span=self.span,
        )


class Parser:
    """Stack-based parser turning tokens into a Document.

    Attributes:
        _tokens: Token list from the lexer (ends with EOF)
        _pos: Index of the next token
        _source: Template source (for error snippets)
    """

    __slots__ = ("_filename", "_name", "_pos", "_source", "_tokens")

    def __init__(
        self,
        tokens: list[Token],
        *,
        source: str | None = None,
        name: str | None = None,
        filename: str | None = None,
    ):
        self._tokens = tokens
        self._pos = 0
        self._source = source
        self._name = name
        self._filename = filename

    def parse(self) -> Document:
        """Parse the token stream into a Document."""
        top: list[ChildNode] = []
        stack: list[_OpenElement] = []

        while True:
            token = self._advance()
            children = stack[-1].children if stack else top
            kind = token.type
            if kind is TokenType.TEXT:
                text = _text_value(token.value)
                if text:
                    children.append(Text(Literal(text, span=token.span), span=token.span))
            elif kind is TokenType.INTERPOLATION:
                children.append(self._content_interpolation(token))
            elif kind is TokenType.COMMENT:
                children.append(Comment(token.value, span=token.span))
            elif kind is TokenType.RAW:
                children.append(RawPassthrough(token.value, span=token.span))
            elif kind is TokenType.TAG_OPEN:
                attributes, self_closing = self._parse_attributes()
                if self_closing:
                    children.append(
                        Element(
                            name=token.value,
                            attributes=attributes,
                            self_closing=True,
                            span=token.span,
                        )
                    )
                else:
                    stack.append(_OpenElement(token.value, attributes, token.span))
            elif kind is TokenType.CLOSE_TAG:
                if not stack:
                    raise self._error(
                        f"end tag </{token.value}> without a matching start tag",
                        token,
                        ErrorCode.UNEXPECTED_CLOSE_TAG,
                    )
                open_element = stack.pop()
                close = CloseTag(
                    token.value or open_element.name,
                    explicit=bool(token.value),
                    span=token.span,
                )
                element = open_element.build(close)
                (stack[-1].children if stack else top).append(element)
            elif kind is TokenType.EOF:
                # Unclosed elements are kept so the validator can report them
                while stack:
                    element = stack.pop().build(None)
                    (stack[-1].children if stack else top).append(element)
                return Document(tuple(top), span=Span(1, 0, 0, token.span.end))
            else:
                raise self._error(
                    f"unexpected {kind.name.lower()} token", token, ErrorCode.INVALID_ATTRIBUTE
                )

    # -- token helpers ------------------------------------------------------

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _error(
        self, message: str, token: Token, code: ErrorCode, suggestion: str | None = None
    ) -> ParseError:
        return ParseError(
            message,
            token.span,
            code=code,
            template_name=self._name,
            filename=self._filename,
            source=self._source,
            suggestion=suggestion,
        )

    # -- attributes ---------------------------------------------------------

    def _parse_attributes(self) -> tuple[tuple[Attribute, ...], bool]:
        """Parse attributes up to '>' or '/>'. Returns (attributes, self_closing)."""
        attributes: list[Attribute] = []
        while True:
            token = self._advance()
            kind = token.type
            if kind is TokenType.TAG_END:
                return tuple(attributes), False
            if kind is TokenType.TAG_SELF_CLOSE:
                return tuple(attributes), True
            if kind is TokenType.ATTR_NAME:
                attributes.append(self._parse_named_attribute(token))
            elif kind is TokenType.INTERPOLATION:
                value = self._interpolation(token)
                if not isinstance(value, Slot) or value.shape is not Shape.SEQUENCE:
                    raise self._error(
                        "interpolated attribute needs a name",
                        token,
                        ErrorCode.INVALID_ATTRIBUTE,
                        suggestion="Write name={value}, or {..pairs} to spread name/value pairs",
                    )
                attributes.append(
                    Attribute(None, RepeatedInterpolated(value, span=token.span), span=token.span)
                )
            else:
                raise self._error(
                    f"expected an attribute name, found {token.value!r}",
                    token,
                    ErrorCode.INVALID_ATTRIBUTE,
                )

    def _parse_named_attribute(self, name: Token) -> Attribute:
        token = self._peek()
        if token.type is TokenType.EQUALS:
            self._advance()
            token = self._advance()
            if token.type is TokenType.STRING:
                value = Literal(unescape(token.value), span=token.span)
            elif token.type is TokenType.INTERPOLATION:
                value = self._value_node(self._interpolation(token), token)
            else:
                raise self._error(
                    f"expected a quoted value or {{…}} after '{name.value}='",
                    token,
                    ErrorCode.INVALID_ATTRIBUTE,
                )
            return Attribute(name.value, value, span=name.span)

        if token.type is TokenType.QUESTION:
            self._advance()
            token = self._advance()
            slot = self._interpolation(token) if token.type is TokenType.INTERPOLATION else None
            if not isinstance(slot, Slot) or slot.shape is not Shape.SCALAR:
                raise self._error(
                    f"expected {{slot}} after '{name.value}?'",
                    token,
                    ErrorCode.INVALID_ATTRIBUTE,
                )
            optional = Slot(slot.name, Shape.OPTIONAL)
            return Attribute(
                name.value, OptionalInterpolated(optional, span=token.span), span=name.span
            )

        if token.type is TokenType.INTERPOLATION:
            self._advance()
            slot = self._interpolation(token)
            if isinstance(slot, Slot) and slot.shape is Shape.SEQUENCE:
                return Attribute(
                    name.value, RepeatedInterpolated(slot, span=token.span), span=name.span
                )

        raise self._error(
            f"expected '=' after attribute name '{name.value}'",
            token,
            ErrorCode.INVALID_ATTRIBUTE,
        )

    # -- interpolations -----------------------------------------------------

    def _interpolation(self, token: Token) -> Slot | Literal:
        """Interpret ``{expr}``, ``{?expr}`` or ``{..expr}``.

        A Python identifier names a slot. Anything else must be a Python
        literal, folded to text now; literals are only allowed in the
        scalar form.
        """
        expr = token.value.strip()
        shape = Shape.SCALAR
        if expr.startswith(".."):
            shape = Shape.SEQUENCE
            expr = expr[2:].strip()
        elif expr.startswith("?"):
            shape = Shape.OPTIONAL
            expr = expr[1:].strip()

        if not expr:
            raise self._error(
                "empty interpolation", token, ErrorCode.INVALID_INTERPOLATION,
                suggestion="Name a slot, e.g. {title}",
            )
        if expr.isidentifier() and not keyword.iskeyword(expr):
            return Slot(expr, shape)
        if shape is not Shape.SCALAR:
            raise self._error(
                f"only slot names can be {shape.value}, got {expr!r}",
                token,
                ErrorCode.INVALID_INTERPOLATION,
            )
        try:
            value = ast.literal_eval(expr)
        except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
            raise self._error(
                f"{expr!r} is neither a slot name nor a Python literal",
                token,
                ErrorCode.INVALID_INTERPOLATION,
                suggestion="Interpolations name a slot, e.g. {title}, or hold a literal such as {2013}",
            ) from None
        return Literal(str(value), span=token.span)

    def _value_node(
        self, value: Slot | Literal, token: Token
    ) -> Literal | Interpolated | OptionalInterpolated | RepeatedInterpolated:
        if isinstance(value, Literal):
            return value
        if value.shape is Shape.OPTIONAL:
            return OptionalInterpolated(value, span=token.span)
        if value.shape is Shape.SEQUENCE:
            return RepeatedInterpolated(value, span=token.span)
        return Interpolated(value, span=token.span)

    def _content_interpolation(self, token: Token) -> ChildNode:
        value = self._interpolation(token)
        if isinstance(value, Slot) and value.shape is Shape.SEQUENCE:
            return RepeatedChildren(value, span=token.span)
        node = self._value_node(value, token)
        assert not isinstance(node, RepeatedInterpolated)
        return Text(node, span=token.span)


def _text_value(raw: str) -> str:
    """Apply whitespace rules and decode a raw text run.

    Whitespace that contains a line break is layout, not content: runs made
    only of such whitespace are dropped and it is stripped from either end.
    """
    stripped = raw.strip()
    if not stripped:
        return "" if "\n" in raw else raw
    text = raw
    if "\n" in raw[: len(raw) - len(raw.lstrip())]:
        text = text.lstrip()
    if "\n" in text[len(text.rstrip()) :]:
        text = text.rstrip()
    return unescape(text.replace("{{", "{").replace("}}", "}"))


def parse(source: str, *, name: str | None = None, filename: str | None = None) -> Document:
    """Tokenize and parse template source into a Document.

    Raises:
        ParseError: If the markup is malformed.
    """
    tokens = tokenize(source, name=name, filename=filename)
    return Parser(tokens, source=source, name=name, filename=filename).parse()
