"""xmlit Template String support (PEP 750).

Builds templates from Python 3.14+ t-strings. The static parts become the
template source and each interpolation becomes a slot named after its
position (``_0``, ``_1``, …), so the compiled template is cached by its
static text and reused for every call with the same shape:

    >>> title = "Tom & Jerry"
    >>> xml(t"<show title={title}><cast>{cast:..}</cast></show>")

Format specs choose the slot shape:

- ``{value}``: scalar
- ``{value:?}``: optional text, ``None`` renders nothing
- ``{value:..}``: repeated children (fragments or scalars)

Any other format spec or conversion is applied with ``format()`` before the
value is bound. Braces in the static parts are literal text, and a quoted
interpolation such as ``href="{url}"`` is read as ``href={url}``.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import TYPE_CHECKING, Any, Protocol, cast, runtime_checkable

from xmlit.environment.core import default_environment

if TYPE_CHECKING:
    from xmlit.config import RenderConfig
    from xmlit.environment import Environment
    from xmlit.template import Fragment, Template


@runtime_checkable
class TemplateProtocol(Protocol):
    strings: tuple[str, ...]
    interpolations: tuple[Any, ...]


class TemplateLibProtocol(Protocol):
    Template: type[TemplateProtocol]


templatelib_module: ModuleType | None
try:  # Python <3.14 fallback: allow tests and callers to pass compatible objects
    templatelib_module = import_module("string.templatelib")
except ImportError:  # pragma: no cover - exercised via fallback path
    templatelib_module = None

templatelib: TemplateLibProtocol | None = cast(TemplateLibProtocol | None, templatelib_module)

_SHAPE_MARKERS = {"?": "?", "..": ".."}
_CONVERSIONS = {"r": repr, "s": str, "a": ascii}


def _prepare(template: TemplateProtocol) -> tuple[str, dict[str, Any]]:
    """Split a t-string into xmlit source and slot values."""
    # Accept any object that structurally matches the template protocol, even
    # when the stdlib templatelib module is available (tests pass SimpleNamespace).
    if not isinstance(template, TemplateProtocol):
        raise TypeError("expected a string.templatelib.Template or compatible object")

    strings = template.strings
    interpolations = template.interpolations
    parts: list[str] = []
    values: dict[str, Any] = {}

    unquote = False
    for i, text in enumerate(strings):
        if unquote:
            text = text[1:]
        # name="{value}" means name={value}
        unquote = (
            i < len(interpolations)
            and text[-2:] in ('="', "='")
            and strings[i + 1].startswith(text[-1])
        )
        if unquote:
            text = text[:-1]
        parts.append(text.replace("{", "{{").replace("}", "}}"))
        if i >= len(interpolations):
            continue
        interpolation = interpolations[i]
        slot = f"_{i}"
        spec = getattr(interpolation, "format_spec", "") or ""
        conversion = getattr(interpolation, "conversion", None)
        value = interpolation.value

        marker = _SHAPE_MARKERS.get(spec, "")
        if not marker and (spec or conversion):
            if conversion:
                value = _CONVERSIONS[conversion](value)
            value = format(value, spec)

        parts.append(f"{{{marker}{slot}}}")
        values[slot] = value

    return "".join(parts), values


def _compile(template: TemplateProtocol, env: Environment | None) -> tuple[Template, dict[str, Any]]:
    source, values = _prepare(template)
    environment = env if env is not None else default_environment()
    return environment.from_string(source), values


def xml(
    template: TemplateProtocol,
    *,
    config: RenderConfig | None = None,
    env: Environment | None = None,
) -> str:
    """Render a t-string as XML.

    Example:
        >>> name = "Tony"
        >>> xml(t"<cat>{name}</cat>")
        '<cat>Tony</cat>'
    """
    compiled, values = _compile(template, env)
    return compiled.render(values, config=config)


def fragment(template: TemplateProtocol, *, env: Environment | None = None) -> Fragment:
    """Bind a t-string for use in another template's repeated children.

    Example:
        >>> cats = [fragment(t"<cat>{name}</cat>") for name in ("Tony", "Rex")]
        >>> xml(t"<zoo>{cats:..}</zoo>")
        '<zoo><cat>Tony</cat><cat>Rex</cat></zoo>'
    """
    compiled, values = _compile(template, env)
    return compiled.bind(values)
