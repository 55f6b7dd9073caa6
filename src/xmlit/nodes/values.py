"""Slots and attribute/text values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from xmlit.nodes.base import Node


class Shape(Enum):
    """What kind of value a slot expects at render time."""

    SCALAR = "scalar"
    OPTIONAL = "optional"
    SEQUENCE = "sequence"


@dataclass(frozen=True, slots=True)
class Slot:
    """An interpolation point, identified by name, with a fixed shape."""

    name: str
    shape: Shape


@dataclass(frozen=True, slots=True)
class Literal(Node):
    """Static text written in the template: ``"Lorem"`` or ``{2013}``."""

    text: str


@dataclass(frozen=True, slots=True)
class Interpolated(Node):
    """Scalar interpolation: ``{name}``"""

    slot: Slot


@dataclass(frozen=True, slots=True)
class OptionalInterpolated(Node):
    """Optional interpolation: ``title?{name}`` or ``{?name}``"""

    slot: Slot


@dataclass(frozen=True, slots=True)
class RepeatedInterpolated(Node):
    """Repeated attribute interpolation: ``class{..names}`` or ``{..pairs}``"""

    slot: Slot


Value = Literal | Interpolated | OptionalInterpolated | RepeatedInterpolated
