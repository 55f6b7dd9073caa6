"""Base node class for the xmlit template tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from xmlit._types import UNKNOWN_SPAN, Span


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes.

    Every node records where it came from for diagnostics. The span is not
    part of node equality: two trees with the same structure compare equal
    regardless of how the source was laid out.
    """

    span: Span = field(default=UNKNOWN_SPAN, compare=False, repr=False, kw_only=True)

    @property
    def lineno(self) -> int:
        return self.span.lineno

    @property
    def col_offset(self) -> int:
        return self.span.col_offset
