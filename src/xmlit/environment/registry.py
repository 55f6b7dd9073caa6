"""Value converter registry for the xmlit environment.

Converters turn bound values into text before escaping. Lookup walks the
value's MRO, so a converter registered for a base class covers subclasses;
values with no registered converter use ``str``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

Converter = Callable[[Any], str]


class ConverterRegistry:
    """Dict-like registry of type → converter.

    Supports:
        - env.converters[float] = "{:.2f}".format
        - env.converters.update({date: date.isoformat})
        - func = env.converters[float]
        - float in env.converters
        - del env.converters[float]

    All mutations use copy-on-write, so renders in progress keep reading a
    consistent dict.

    Example:
        >>> registry = ConverterRegistry()
        >>> registry[bool] = lambda value: "true" if value else "false"
        >>> registry.convert(True)
        'true'
        >>> registry.convert(3)
        '3'
    """

    __slots__ = ("_converters", "_default")

    def __init__(self, default: Converter = str):
        self._converters: dict[type, Converter] = {}
        self._default = default

    def __getitem__(self, key: type) -> Converter:
        return self._converters[key]

    def __setitem__(self, key: type, func: Converter) -> None:
        new = self._converters.copy()
        new[key] = func
        self._converters = new

    def __delitem__(self, key: type) -> None:
        new = self._converters.copy()
        del new[key]
        self._converters = new

    def __contains__(self, key: object) -> bool:
        return key in self._converters

    def __len__(self) -> int:
        return len(self._converters)

    def update(self, mapping: dict[type, Converter]) -> None:
        """Batch update converters."""
        new = self._converters.copy()
        new.update(mapping)
        self._converters = new

    def lookup(self, cls: type) -> Converter:
        """Converter for ``cls``: nearest registered class in its MRO."""
        converters = self._converters
        if converters:
            for base in cls.__mro__:
                func = converters.get(base)
                if func is not None:
                    return func
        return self._default

    def convert(self, value: Any) -> str:
        """Convert ``value`` to text (not escaped)."""
        if type(value) is str and str not in self._converters:
            return value
        return self.lookup(type(value))(value)
