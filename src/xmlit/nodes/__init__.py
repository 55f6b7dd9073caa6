"""Template tree nodes.

The tree is immutable: frozen dataclasses with tuple children, safe to share
between threads and reuse across any number of renders.

Node Hierarchy:
    Node
    ├── Document
    ├── Element
    ├── Attribute
    ├── CloseTag
    ├── Text
    ├── Comment
    ├── RawPassthrough
    ├── RepeatedChildren
    └── values: Literal, Interpolated, OptionalInterpolated, RepeatedInterpolated
"""

from xmlit.nodes.base import Node
from xmlit.nodes.markup import (
    Attribute,
    ChildNode,
    CloseTag,
    Comment,
    Document,
    Element,
    RawPassthrough,
    RepeatedChildren,
    Text,
)
from xmlit.nodes.values import (
    Interpolated,
    Literal,
    OptionalInterpolated,
    RepeatedInterpolated,
    Shape,
    Slot,
    Value,
)

__all__ = [
    "Attribute",
    "ChildNode",
    "CloseTag",
    "Comment",
    "Document",
    "Element",
    "Interpolated",
    "Literal",
    "Node",
    "OptionalInterpolated",
    "RawPassthrough",
    "RepeatedChildren",
    "RepeatedInterpolated",
    "Shape",
    "Slot",
    "Text",
    "Value",
]
