"""Pure runtime helper functions injected into the template namespace.

``check_bindings`` runs before a render and turns the caller's values into
the ``ctx`` dict the generated code reads. The remaining helpers are called
by compiled template code for sequence slots. None of them close over
Environment state; the value converter is passed in explicitly.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import difflib
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from xmlit.environment.exceptions import BindingError, ErrorCode
from xmlit.nodes import Shape
from xmlit.utils.escape import escape_attr, escape_text, is_name

# =============================================================================
# Shared Base Namespace
# =============================================================================
# Static entries shared across all Template instances. Each template copies
# this once and adds its value converter as ``_str``.
# =============================================================================

STATIC_NAMESPACE: dict[str, Any] = {
    "__builtins__": {},
    "_escape_text": escape_text,
    "_escape_attr": escape_attr,
}


@runtime_checkable
class Writable(Protocol):
    """Something that renders itself into a shared output buffer.

    ``write_into`` returns True when the output starts on its own line in
    pretty mode, so the enclosing end tag knows to break the line too.
    """

    def write_into(self, buf: list[str], config: Any, depth: int) -> bool: ...


def check_bindings(
    slots: Mapping[str, Shape],
    values: Mapping[str, Any],
    template_name: str | None = None,
) -> dict[str, Any]:
    """Check caller values against a template's slot table.

    Returns the ``ctx`` dict passed to the render function. Sequence values
    are materialized once here, so a generator can be used for a slot and
    is consumed exactly once.

    Raises:
        BindingError: Unknown key, missing value, or a value whose kind does
            not fit the slot's shape.
    """
    for key in values:
        if key not in slots:
            matches = difflib.get_close_matches(key, list(slots), n=1)
            raise BindingError(
                f"unknown slot '{key}'",
                code=ErrorCode.UNKNOWN_BINDING,
                slot=key,
                template_name=template_name,
                suggestion=f"Did you mean '{matches[0]}'?" if matches else None,
            )

    ctx: dict[str, Any] = {}
    for name, shape in slots.items():
        if name in values:
            ctx[name] = check_value(name, shape, values[name], template_name)
        elif shape is Shape.OPTIONAL:
            ctx[name] = None
        else:
            raise BindingError(
                f"missing value for slot '{name}'",
                code=ErrorCode.MISSING_BINDING,
                slot=name,
                template_name=template_name,
            )
    return ctx


def check_value(name: str, shape: Shape, value: Any, template_name: str | None = None) -> Any:
    """Check one value against its slot shape; materialize sequences."""
    if shape is Shape.SCALAR:
        if value is None:
            raise BindingError(
                f"slot '{name}' is scalar and cannot be None",
                code=ErrorCode.SHAPE_MISMATCH,
                slot=name,
                template_name=template_name,
                suggestion=f"Use {{?{name}}} for a value that may be absent",
            )
        return value

    if shape is Shape.OPTIONAL:
        return value

    if isinstance(value, Mapping):
        return tuple(value.items())
    if isinstance(value, (list, tuple)):
        return value
    if value is None or isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise BindingError(
            f"slot '{name}' expects a sequence, got {type(value).__name__}",
            code=ErrorCode.SHAPE_MISMATCH,
            slot=name,
            template_name=template_name,
            suggestion="Pass a list or tuple (wrap a single value as [value])",
        )
    return tuple(value)


def attribute_names(declared: tuple[str, ...]) -> set[str]:
    """Start the set of attribute names written on one element."""
    return set(declared)


def _claim(seen: set[str], name: str) -> None:
    if name in seen:
        raise BindingError(
            f"attribute '{name}' is already set on this element",
            code=ErrorCode.INVALID_ITEM,
            suggestion="Each attribute name may appear once per element",
        )
    seen.add(name)


def spread(
    append: Callable[[str], None],
    to_text: Callable[[Any], str],
    items: Iterable[Any],
    seen: set[str],
) -> None:
    """Emit `` name="value"`` for each ``(name, value)`` pair.

    Pairs whose value is None are skipped. A name already written on the
    element, by the template or an earlier pair, is an error.
    """
    for item in items:
        if not isinstance(item, tuple) or len(item) != 2:
            raise BindingError(
                f"attribute spread items must be (name, value) pairs, got {item!r}",
                code=ErrorCode.INVALID_ITEM,
            )
        name, value = item
        if not isinstance(name, str) or not is_name(name):
            raise BindingError(
                f"{name!r} is not a valid attribute name",
                code=ErrorCode.INVALID_ITEM,
            )
        if value is None:
            continue
        _claim(seen, name)
        append(f' {name}="{escape_attr(to_text(value))}"')


def spread_named(
    append: Callable[[str], None],
    to_text: Callable[[Any], str],
    name: str,
    items: Iterable[Any],
    seen: set[str],
) -> None:
    """Emit `` name="item"`` for the item, if any.

    The attribute is written at most once, so more than one item is an error.
    """
    for item in items:
        if item is None:
            raise BindingError(
                f"repeated attribute '{name}' got a None item",
                code=ErrorCode.INVALID_ITEM,
            )
        _claim(seen, name)
        append(f' {name}="{escape_attr(to_text(item))}"')


def children(
    items: Iterable[Any],
    buf: list[str],
    depth: int,
    config: Any,
    to_text: Callable[[Any], str],
) -> bool:
    """Render repeated children into ``buf`` at ``depth``.

    Fragments and templates write their own markup; anything else becomes
    escaped text. Returns True if any item produced block output.
    """
    block = False
    for item in items:
        if isinstance(item, Writable):
            block = item.write_into(buf, config, depth) or block
        elif item is None:
            raise BindingError(
                "repeated children got a None item",
                code=ErrorCode.INVALID_ITEM,
            )
        else:
            buf.append(escape_text(to_text(item)))
    return block


STATIC_NAMESPACE["_attribute_names"] = attribute_names
STATIC_NAMESPACE["_spread"] = spread
STATIC_NAMESPACE["_spread_named"] = spread_named
STATIC_NAMESPACE["_children"] = children
