"""Exceptions for the xmlit template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError           # Static template error, detected at compile time
│   ├── ParseError                # Malformed markup (see xmlit.parser.errors)
│   └── ValidationError           # Well-formed markup with a structural problem
│       ├── DuplicateAttributeError
│       ├── TagMismatchError
│       ├── UnclosedElementError
│       ├── SlotShapeConflictError
│       ├── MisplacedDeclarationError
│       └── InvalidDeclarationError
├── BindingError                  # Render-time value does not fit its slot
└── TemplateNotFoundError         # Loader could not find a template

Static errors are raised once, when a template is compiled, and point at the
offending markup with a source snippet:

    ```
    Validation Error: end tag </b> does not match start tag <a>
      --> feed.xml:3:4
       |
    >  3 |     </b>
       |     ^
       |
    ```

Binding errors are contract violations by the calling code (wrong kind of
value for a slot). They are raised before any output is returned and are
never meant to be caught and retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from xmlit.environment import terminal

if TYPE_CHECKING:
    from xmlit._types import Span
    from xmlit.nodes import Shape


class ErrorCode(Enum):
    """Searchable error codes.

    Format: X-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), VAL (validator), BND (binding), TPL (loading)
    """

    # Parser errors (X-PAR-xxx)
    UNTERMINATED_TAG = "X-PAR-001"
    UNTERMINATED_INTERPOLATION = "X-PAR-002"
    UNTERMINATED_COMMENT = "X-PAR-003"
    UNTERMINATED_STRING = "X-PAR-004"
    UNEXPECTED_EOF = "X-PAR-005"
    INVALID_ATTRIBUTE = "X-PAR-006"
    INVALID_NAME = "X-PAR-007"
    INVALID_INTERPOLATION = "X-PAR-008"
    UNEXPECTED_CLOSE_TAG = "X-PAR-009"

    # Validation errors (X-VAL-xxx)
    DUPLICATE_ATTRIBUTE = "X-VAL-001"
    TAG_MISMATCH = "X-VAL-002"
    UNCLOSED_ELEMENT = "X-VAL-003"
    SLOT_SHAPE_CONFLICT = "X-VAL-004"
    MISPLACED_DECLARATION = "X-VAL-005"
    INVALID_DECLARATION = "X-VAL-006"

    # Binding errors (X-BND-xxx)
    MISSING_BINDING = "X-BND-001"
    UNKNOWN_BINDING = "X-BND-002"
    SHAPE_MISMATCH = "X-BND-003"
    INVALID_ITEM = "X-BND-004"

    # Template loading errors (X-TPL-xxx)
    TEMPLATE_NOT_FOUND = "X-TPL-001"

    @property
    def category(self) -> str:
        """Error category ('parser', 'validation', 'binding', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "VAL": "validation",
            "BND": "binding",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for the caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format the snippet in Rust-inspired diagnostic style."""
        parts: list[str] = [terminal.styled("gutter", "   |")]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
            if is_error and self.column is not None:
                caret = " " * (self.column + 2) + "^"
                gutter = terminal.styled("gutter", "   |")
                parts.append(f"{gutter} {terminal.styled('error', caret)}")
        parts.append(terminal.styled("gutter", "   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for the caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateError(Exception):
    """Base exception for all xmlit template errors.

        >>> try:
        ...     template = xmlit.compile(source)
        ... except TemplateError as e:
        ...     log.error("bad template: %s", e.format_compact())

    Attributes:
        code: ErrorCode identifying the kind of failure.
    """

    code: ErrorCode | None = None

    @property
    def kind(self) -> ErrorCode | None:
        """Discriminant of the failure (same as ``code``)."""
        return self.code

    def format_compact(self) -> str:
        """Format the error as a plain one-block summary with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """Template not found by the configured loader.

        >>> env.get_template("missing.xml")
        TemplateNotFoundError: Template 'missing.xml' not found in: templates/
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Error in the template itself, detected before any rendering.

    Carries the span of the offending markup. When the template source is
    known the message includes a snippet with a caret under the column.
    The environment attaches source and template name to errors raised by
    the validator, which only sees the tree.
    """

    code: ErrorCode | None = None
    _label = "Syntax Error"

    def __init__(
        self,
        message: str,
        span: Span | None = None,
        *,
        code: ErrorCode | None = None,
        template_name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.span = span
        if code is not None:
            self.code = code
        self.template_name = template_name
        self.filename = filename
        self.source = source
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def lineno(self) -> int | None:
        return self.span.lineno if self.span else None

    @property
    def col_offset(self) -> int | None:
        return self.span.col_offset if self.span else None

    def attach_source(
        self,
        source: str,
        *,
        template_name: str | None = None,
        filename: str | None = None,
    ) -> TemplateSyntaxError:
        """Fill in source context (if missing) and refresh the message."""
        if self.source is None:
            self.source = source
        self.template_name = self.template_name or template_name
        self.filename = self.filename or filename
        self.args = (self._format_message(),)
        return self

    def _location(self) -> str:
        location = self.filename or self.template_name or "<template>"
        if self.span and self.span.lineno:
            location += f":{self.span.lineno}:{self.span.col_offset}"
        return location

    def _snippet(self) -> SourceSnippet | None:
        if self.source and self.span and self.span.lineno:
            if self.span.lineno <= len(self.source.splitlines()):
                return build_source_snippet(
                    self.source,
                    self.span.lineno,
                    context_lines=0,
                    column=self.span.col_offset,
                )
        return None

    def _format_message(self) -> str:
        where = terminal.styled("location", self._location())
        parts = [f"{self._label}: {self.message}", f"  --> {where}"]
        snippet = self._snippet()
        if snippet:
            parts.append(snippet.format())
        if self.suggestion:
            parts.append(f"  {terminal.styled('hint', 'Hint:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format as ``CODE: message`` plus location and snippet."""
        code = self.code.value if self.code else None
        parts = [terminal.format_error_header(code, self.message), f"  --> {self._location()}"]
        snippet = self._snippet()
        if snippet:
            parts.append(snippet.format())
        if self.suggestion:
            parts.append(f"  Hint: {self.suggestion}")
        return "\n".join(parts)


class ValidationError(TemplateSyntaxError):
    """Structural problem in well-formed markup."""

    _label = "Validation Error"


class DuplicateAttributeError(ValidationError):
    """Two attributes on one element share a name.

        >>> xmlit.compile('<a id="1" id="2"/>')
        DuplicateAttributeError: duplicate attribute 'id' on <a>
    """

    code: ErrorCode | None = ErrorCode.DUPLICATE_ATTRIBUTE

    def __init__(self, name: str, element: str, span: Span | None = None, **kwargs):
        self.name = name
        self.element = element
        super().__init__(f"duplicate attribute '{name}' on <{element}>", span, **kwargs)


class TagMismatchError(ValidationError):
    """Explicit end tag does not match the element it closes.

        >>> xmlit.compile("<a>...</b>")
        TagMismatchError: end tag </b> does not match start tag <a>
    """

    code: ErrorCode | None = ErrorCode.TAG_MISMATCH

    def __init__(self, expected: str, found: str, span: Span | None = None, **kwargs):
        self.expected = expected
        self.found = found
        kwargs.setdefault("suggestion", f"Write </{expected}> or the shorthand </>")
        super().__init__(
            f"end tag </{found}> does not match start tag <{expected}>", span, **kwargs
        )


class UnclosedElementError(ValidationError):
    """Element still open at the end of the template."""

    code: ErrorCode | None = ErrorCode.UNCLOSED_ELEMENT

    def __init__(self, name: str, span: Span | None = None, **kwargs):
        self.name = name
        kwargs.setdefault("suggestion", f"Close it with </{name}>, </> or write <{name} />")
        super().__init__(f"element <{name}> is never closed", span, **kwargs)


class SlotShapeConflictError(ValidationError):
    """One slot is used as two different shapes within a template."""

    code: ErrorCode | None = ErrorCode.SLOT_SHAPE_CONFLICT

    def __init__(
        self, slot: str, first: Shape, second: Shape, span: Span | None = None, **kwargs
    ):
        self.slot = slot
        self.first = first
        self.second = second
        super().__init__(
            f"slot '{slot}' is used as {second.value} here but as {first.value} earlier",
            span,
            **kwargs,
        )


class MisplacedDeclarationError(ValidationError):
    """``<?xml ...?>`` declaration that is not at the start of the document."""

    code: ErrorCode | None = ErrorCode.MISPLACED_DECLARATION

    def __init__(self, span: Span | None = None, **kwargs):
        kwargs.setdefault("suggestion", "Move the XML declaration to the very start")
        super().__init__("XML declaration must be the first node", span, **kwargs)


class InvalidDeclarationError(ValidationError):
    """``<?xml ...?>`` declaration with an unsupported version or encoding.

        >>> xmlit.compile('<?xml version="1.0" encoding="latin-1"?><a/>')
        InvalidDeclarationError: only encoding 'UTF-8' is allowed, got 'latin-1'
    """

    code: ErrorCode | None = ErrorCode.INVALID_DECLARATION


class BindingError(TemplateError, TypeError):
    """A render-time value does not fit the slot it is bound to.

    This is a programming error in the calling code (for example passing a
    string where a sequence slot was declared), not a data error. No output
    is produced.

        >>> template = xmlit.compile("<a>{name}</a>")
        >>> template.render()
        BindingError: missing value for slot 'name' in <template>
    """

    code: ErrorCode | None = ErrorCode.SHAPE_MISMATCH

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        slot: str | None = None,
        template_name: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        self.slot = slot
        self.template_name = template_name
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        where = terminal.styled("location", self.template_name or "<template>")
        msg = f"{self.message} in {where}"
        if self.suggestion:
            msg += f"\n  {terminal.styled('hint', 'Hint:')} {self.suggestion}"
        return msg
