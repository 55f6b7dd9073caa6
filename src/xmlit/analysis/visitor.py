"""Shared traversal for the template tree.

Provides CHILD_ATTRS and visit_children for generic traversal, used by the
validator and by slot/structure queries on templates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from xmlit.nodes import Comment, Element, RawPassthrough, RepeatedChildren

if TYPE_CHECKING:
    from xmlit.nodes import Node, Slot

# Node attributes holding child nodes, in document order
CHILD_ATTRS = ("attributes", "children")
VALUE_ATTRS = ("value",)


def visit_children(node: Node, visit: Callable[[Node], None]) -> None:
    """Visit the direct children of a node in document order.

    Attributes are visited before element children, values after the node
    that owns them.
    """
    for attr in CHILD_ATTRS:
        children = getattr(node, attr, None)
        if children:
            for child in children:
                visit(child)
    for attr in VALUE_ATTRS:
        child = getattr(node, attr, None)
        if child is not None and hasattr(child, "span"):
            visit(child)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants, depth first, in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        children: list[Node] = []
        visit_children(current, children.append)
        stack.extend(reversed(children))


def iter_slots(node: Node) -> Iterator[Slot]:
    """Yield every slot reference under ``node`` in document order."""
    for current in walk(node):
        slot = getattr(current, "slot", None)
        if slot is not None:
            yield slot


def is_structured(children: tuple[Node, ...] | list[Node]) -> bool:
    """True if a child list holds an element, comment or repeated children.

    Pretty output puts each element, comment and raw node of a structured
    list on its own line. Other lists stay inline.
    """
    return any(isinstance(child, (Element, Comment, RepeatedChildren)) for child in children)


def has_static_blocks(children: tuple[Node, ...] | list[Node]) -> bool:
    """True if a child list holds block nodes other than repeated children."""
    return any(isinstance(child, (Element, Comment, RawPassthrough)) for child in children)


def max_depth(node: Node) -> int:
    """Number of nested element levels below ``node``."""
    deepest = 0
    stack: list[tuple[Node, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in getattr(current, "children", ()):
            if isinstance(child, Element):
                stack.append((child, depth + 1))
    return deepest
