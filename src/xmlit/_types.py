"""Token and source-location types shared by the lexer, parser and errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types produced by the markup lexer."""

    # Content mode
    TEXT = auto()
    INTERPOLATION = auto()
    COMMENT = auto()
    RAW = auto()
    TAG_OPEN = auto()
    CLOSE_TAG = auto()

    # Tag mode
    ATTR_NAME = auto()
    EQUALS = auto()
    QUESTION = auto()
    STRING = auto()
    TAG_END = auto()
    TAG_SELF_CLOSE = auto()

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Span:
    """Location of a piece of template source.

    Attributes:
        lineno: 1-based line number
        col_offset: 0-based column on that line
        start: Offset of the first character in the source
        end: Offset one past the last character
    """

    lineno: int
    col_offset: int
    start: int = 0
    end: int = 0

    def __str__(self) -> str:
        return f"{self.lineno}:{self.col_offset}"


UNKNOWN_SPAN = Span(0, 0)


@dataclass(frozen=True, slots=True)
class Token:
    """A lexer token.

    ``value`` holds the decoded payload: tag or attribute names, decoded text,
    comment bodies, raw passthrough text, or the inner source of an
    interpolation.
    """

    type: TokenType
    value: str
    span: Span

    @property
    def lineno(self) -> int:
        return self.span.lineno

    @property
    def col_offset(self) -> int:
        return self.span.col_offset

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.span})"
