"""Markup nodes: documents, elements and their children."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from xmlit.nodes.base import Node
from xmlit.nodes.values import (
    Interpolated,
    Literal,
    OptionalInterpolated,
    RepeatedInterpolated,
    Slot,
)


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """Attribute on an element.

    ``name`` is None only for an unnamed spread (``{..pairs}``), whose items
    supply their own names.
    """

    name: str | None
    value: Literal | Interpolated | OptionalInterpolated | RepeatedInterpolated


@dataclass(frozen=True, slots=True)
class CloseTag(Node):
    """Resolved closing tag.

    ``</>`` resolves to the innermost open element while parsing, so ``name``
    is always set. ``explicit`` only records how it was written.
    """

    name: str
    explicit: bool = field(default=True, compare=False)


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Text content: literal, ``{name}`` or ``{?name}``."""

    value: Literal | Interpolated | OptionalInterpolated


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """Comment: ``<!-- text -->``"""

    text: str


@dataclass(frozen=True, slots=True)
class RawPassthrough(Node):
    """Markup emitted verbatim: ``<?xml version="1.0"?>``, ``<!DOCTYPE ...>``"""

    text: str

    @property
    def is_declaration(self) -> bool:
        """True for the ``<?xml ...?>`` declaration."""
        head = self.text[5:6]
        return self.text.startswith("<?xml") and (not head or head.isspace() or head == "?")


@dataclass(frozen=True, slots=True)
class RepeatedChildren(Node):
    """Sequence of sibling subtrees: ``{..items}``"""

    slot: Slot


@dataclass(frozen=True, slots=True)
class Element(Node):
    """Element: ``<name attr="v">children</name>``"""

    name: str
    attributes: Sequence[Attribute] = ()
    children: Sequence[ChildNode] = ()
    self_closing: bool = False
    close: CloseTag | None = None

    @property
    def is_closed(self) -> bool:
        return self.self_closing or self.close is not None


ChildNode = Element | Text | Comment | RawPassthrough | RepeatedChildren


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root of a template: ordered top-level nodes."""

    children: Sequence[ChildNode] = ()

    @property
    def root(self) -> Element | None:
        """The first top-level element, if any."""
        for child in self.children:
            if isinstance(child, Element):
                return child
        return None
