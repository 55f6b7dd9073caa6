"""xmlit: inline XML templates, validated once and rendered many times.

Templates are written as XML with typed interpolation points. Structure is
checked when a template is compiled; rendering only fills in values.

Quickstart:
    >>> import xmlit
    >>> zoo = xmlit.compile('<zoo name={name} openingYear={2013}><cat>{cat}</></zoo>')
    >>> xmlit.render(zoo, {"name": "Lorem Ipsum", "cat": "Tony"})
    '<zoo name="Lorem Ipsum" openingYear="2013"><cat>Tony</cat></zoo>'

    >>> print(zoo.render(name="Lorem Ipsum", cat="Tony", config=xmlit.RenderConfig.pretty()))
    <zoo name="Lorem Ipsum" openingYear="2013">
      <cat>Tony</cat>
    </zoo>

Interpolation forms:
- ``{x}`` text, ``{?x}`` optional text, ``{..x}`` repeated children
- ``a={x}`` attribute, ``a?{x}`` optional attribute, ``a{..x}`` the
  attribute for at most one item, ``{..pairs}`` one attribute per (name,
  value) pair; no attribute name is written twice on one element

Architecture:
Template Source → Lexer → Parser → Document → Validator → Template
                                                              ↓ (per RenderConfig)
                                              Compiler → Python AST → exec()

Pipeline stages:
1. **Lexer**: Tokenizes source in content and tag modes
2. **Parser**: Builds an immutable Document, resolving ``</>`` end tags
3. **Validator**: Checks tags, attributes and declarations; infers slot shapes
4. **Compiler**: Generates one ``render`` function per output layout
5. **Template**: Checks bound values against slot shapes, then renders

Thread-Safety:
- Documents and templates are immutable after construction
- Rendering uses only local state (one buffer per render call)
- The template cache is lock-guarded; converters use copy-on-write

Free-Threading (PEP 703):
Declares GIL-independence via `_Py_mod_gil = 0` attribute.

"""

from typing import Any

from xmlit._types import Span, Token, TokenType
from xmlit.environment import (
    BindingError,
    ConverterRegistry,
    DictLoader,
    DuplicateAttributeError,
    InvalidDeclarationError,
    Environment,
    ErrorCode,
    FileSystemLoader,
    MisplacedDeclarationError,
    SlotShapeConflictError,
    SourceSnippet,
    TagMismatchError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UnclosedElementError,
    ValidationError,
    build_source_snippet,
    default_environment,
)
from xmlit.analysis import SlotTable, Validator
from xmlit.config import OutputMode, RenderConfig
from xmlit.nodes import Document, Shape, Slot
from xmlit.parser import ParseError, parse
from xmlit.template import Fragment, Template

__version__ = "0.1.0"

__all__ = [
    "BindingError",
    "ConverterRegistry",
    "DictLoader",
    "Document",
    "DuplicateAttributeError",
    "InvalidDeclarationError",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "Fragment",
    "MisplacedDeclarationError",
    "OutputMode",
    "ParseError",
    "RenderConfig",
    "Shape",
    "Slot",
    "SlotShapeConflictError",
    "SlotTable",
    "SourceSnippet",
    "Span",
    "TagMismatchError",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UnclosedElementError",
    "ValidationError",
    "Validator",
    "__version__",
    "build_source_snippet",
    "compile",
    "default_environment",
    "parse",
    "render",
]


def compile(source: str, name: str | None = None) -> Template:
    """Parse and validate ``source`` into a reusable Template.

    Raises:
        ParseError: If the markup is malformed.
        ValidationError: If the markup is well formed but inconsistent.
    """
    return default_environment().from_string(source, name)


def render(
    template: Template,
    bindings: dict[str, Any] | None = None,
    config: RenderConfig | None = None,
) -> str:
    """Render a compiled template with ``bindings``.

    Raises:
        BindingError: A value is missing, unknown or of the wrong kind.
    """
    return template.render(bindings, config=config)


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # Signal: this module is safe for free-threading
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'xmlit' has no attribute {name!r}")
