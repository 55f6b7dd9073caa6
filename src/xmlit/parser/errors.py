"""Parser error handling for xmlit.

Provides ParseError, raised by both the lexer and the parser. The ``code``
(also available as ``kind``) says what went wrong; the span says where.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from xmlit.environment.exceptions import ErrorCode, TemplateSyntaxError

if TYPE_CHECKING:
    from xmlit._types import Span


class ParseError(TemplateSyntaxError):
    """Malformed template markup.

    Example:
        >>> xmlit.compile('<zoo name="Lorem>')
        ParseError: unterminated attribute value
          --> <template>:1:10
           |
        >  1 | <zoo name="Lorem>
           |            ^
           |
    """

    _label = "Parse Error"

    def __init__(
        self,
        message: str,
        span: Span,
        *,
        code: ErrorCode,
        template_name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            message,
            span,
            code=code,
            template_name=template_name,
            filename=filename,
            source=source,
            suggestion=suggestion,
        )
