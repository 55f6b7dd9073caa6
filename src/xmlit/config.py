"""Output configuration for rendering.

A ``RenderConfig`` is a small frozen value: templates cache one generated
renderer per distinct config, so it must be hashable.

Example:
    >>> from xmlit import RenderConfig
    >>> template.render(name="Tony", config=RenderConfig.pretty(indent=4))
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class OutputMode(Enum):
    """Formatting mode for rendered XML."""

    COMPACT = "compact"
    PRETTY = "pretty"


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Rendering options.

    Attributes:
        mode: ``COMPACT`` emits no inter-tag whitespace, ``PRETTY`` puts
            structured children on their own indented lines
        indent: Spaces per nesting level in pretty mode
    """

    mode: OutputMode = OutputMode.COMPACT
    indent: int = 2

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")

    @classmethod
    def compact(cls) -> RenderConfig:
        return cls(OutputMode.COMPACT)

    @classmethod
    def pretty(cls, indent: int = 2) -> RenderConfig:
        return cls(OutputMode.PRETTY, indent)

    @property
    def is_pretty(self) -> bool:
        return self.mode is OutputMode.PRETTY

    def newlines(self, depth: int, count: int) -> tuple[str, ...]:
        """Line breaks for nesting levels ``depth .. depth + count - 1``."""
        return _newlines(self.indent, depth, count)


COMPACT = RenderConfig.compact()


@lru_cache(maxsize=256)
def _newlines(indent: int, depth: int, count: int) -> tuple[str, ...]:
    return tuple("\n" + " " * (indent * (depth + level)) for level in range(count))
