"""Structural validation of template trees.

The parser guarantees the markup is well-formed token by token; the validator
checks what the grammar alone cannot:

- attribute names on one element are pairwise distinct
- every explicit end tag names the element it closes
- every element is closed
- each slot is used with one shape only
- an ``<?xml …?>`` declaration only appears as the first node, and declares
  version 1.0 or 1.1 and at most the UTF-8 encoding

It also produces the SlotTable: slot name → Shape, in first-use order. The
table is fixed from then on and is what render-time bindings are checked
against.

Example:
    >>> from xmlit.parser import parse
    >>> Validator().validate(parse("<a title?{t}>{body}</a>"))
    SlotTable(t=optional, body=scalar)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from xmlit.analysis.visitor import visit_children
from xmlit.environment.exceptions import (
    DuplicateAttributeError,
    InvalidDeclarationError,
    MisplacedDeclarationError,
    SlotShapeConflictError,
    TagMismatchError,
    UnclosedElementError,
    ValidationError,
)
from xmlit.nodes import Document, Element, RawPassthrough

if TYPE_CHECKING:
    from xmlit.nodes import Node, Shape

logger = logging.getLogger(__name__)

# name="value" pairs inside <?xml ...?>
_PSEUDO_ATTR_RE = re.compile(r"""\s*([A-Za-z]+)\s*=\s*("[^"]*"|'[^']*')\s*""")
_DECLARATION_ORDER = ("version", "encoding", "standalone")


class SlotTable(Mapping[str, "Shape"]):
    """Read-only mapping of slot name to its fixed Shape."""

    __slots__ = ("_shapes",)

    def __init__(self, shapes: dict[str, Shape]):
        self._shapes = MappingProxyType(dict(shapes))

    def __getitem__(self, name: str) -> Shape:
        return self._shapes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={shape.value}" for name, shape in self._shapes.items())
        return f"SlotTable({inner})"


class Validator:
    """Walks a Document and checks its structure.

    ``validate()`` raises the first problem found in document order;
    ``diagnostics()`` collects all of them.
    """

    __slots__ = ("_errors", "_fail_fast", "_prolog", "_shapes")

    def __init__(self) -> None:
        self._shapes: dict[str, Shape] = {}
        self._errors: list[ValidationError] = []
        self._fail_fast = True
        self._prolog: RawPassthrough | None = None

    def validate(self, document: Document) -> SlotTable:
        """Validate ``document`` and return its slot table.

        Raises:
            ValidationError: The first structural problem found.
        """
        self._reset(fail_fast=True)
        self._check_document(document)
        return SlotTable(self._shapes)

    def diagnostics(self, document: Document) -> list[ValidationError]:
        """Return every structural problem in ``document`` (empty if valid)."""
        self._reset(fail_fast=False)
        self._check_document(document)
        return list(self._errors)

    def _reset(self, *, fail_fast: bool) -> None:
        self._shapes = {}
        self._errors = []
        self._fail_fast = fail_fast

    def _report(self, error: ValidationError) -> None:
        if self._fail_fast:
            raise error
        self._errors.append(error)

    # -- checks -------------------------------------------------------------

    def _check_document(self, document: Document) -> None:
        first = document.children[0] if document.children else None
        self._prolog = first if isinstance(first, RawPassthrough) else None
        self._visit(document)
        logger.debug("validated template with %d slot(s)", len(self._shapes))

    def _visit(self, node: Node) -> None:
        if isinstance(node, Element):
            self._check_attributes(node)
            if node.close is None and not node.self_closing:
                self._report(UnclosedElementError(node.name, node.span))
        elif isinstance(node, RawPassthrough) and node.is_declaration:
            if node is not self._prolog:
                self._report(MisplacedDeclarationError(node.span))
            self._check_declaration(node)
        slot = getattr(node, "slot", None)
        if slot is not None:
            self._check_slot(node)
        visit_children(node, self._visit)
        # The end tag follows everything inside the element
        if isinstance(node, Element) and node.close is not None:
            if node.close.name != node.name:
                self._report(TagMismatchError(node.name, node.close.name, node.close.span))

    def _check_attributes(self, element: Element) -> None:
        seen: set[str] = set()
        for attribute in element.attributes:
            if attribute.name is None:
                continue
            if attribute.name in seen:
                self._report(
                    DuplicateAttributeError(attribute.name, element.name, attribute.span)
                )
            seen.add(attribute.name)

    def _check_declaration(self, node: RawPassthrough) -> None:
        """``version`` first and 1.0 or 1.1; then ``encoding`` (UTF-8 only), ``standalone``."""
        body = node.text[5:-2]
        pseudo = _PSEUDO_ATTR_RE.findall(body)
        if _PSEUDO_ATTR_RE.sub("", body).strip():
            self._report(InvalidDeclarationError("unreadable XML declaration", node.span))
            return
        names = [name for name, _ in pseudo]
        order = [name for name in _DECLARATION_ORDER if name in names]
        if not names or names[0] != "version" or names != order:
            self._report(
                InvalidDeclarationError(
                    "XML declaration attributes must be version, encoding, standalone "
                    "in that order",
                    node.span,
                )
            )
            return
        values = {name: value[1:-1] for name, value in pseudo}
        if values["version"] not in ("1.0", "1.1"):
            self._report(
                InvalidDeclarationError(
                    f"unsupported XML version {values['version']!r}", node.span,
                    suggestion='Use version="1.0"',
                )
            )
        encoding = values.get("encoding")
        if encoding is not None and encoding != "UTF-8":
            self._report(
                InvalidDeclarationError(
                    f"only encoding 'UTF-8' is allowed, got {encoding!r}", node.span,
                    suggestion='Rendered output is a str; declare encoding="UTF-8" or omit it',
                )
            )

    def _check_slot(self, node: Node) -> None:
        slot = node.slot  # type: ignore[attr-defined]
        known = self._shapes.get(slot.name)
        if known is None:
            self._shapes[slot.name] = slot.shape
        elif known is not slot.shape:
            self._report(SlotShapeConflictError(slot.name, known, slot.shape, node.span))


def validate(document: Document) -> SlotTable:
    """Validate a Document and return its SlotTable.

    Raises:
        ValidationError: The first structural problem found.
    """
    return Validator().validate(document)
