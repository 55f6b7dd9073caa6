"""Environment, loaders and errors for xmlit.

Exceptions are imported first; everything downstream of the parser raises
them.
"""

from xmlit.environment.exceptions import (
    BindingError,
    DuplicateAttributeError,
    InvalidDeclarationError,
    ErrorCode,
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
)
from xmlit.environment.core import Environment, default_environment
from xmlit.environment.loaders import DictLoader, FileSystemLoader, Loader
from xmlit.environment.registry import ConverterRegistry

__all__ = [
    "BindingError",
    "ConverterRegistry",
    "DictLoader",
    "DuplicateAttributeError",
    "InvalidDeclarationError",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "Loader",
    "MisplacedDeclarationError",
    "SlotShapeConflictError",
    "SourceSnippet",
    "TagMismatchError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "UnclosedElementError",
    "ValidationError",
    "build_source_snippet",
    "default_environment",
]
