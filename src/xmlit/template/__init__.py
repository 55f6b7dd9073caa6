"""Template objects: validated trees bound to lazily generated renderers."""

from xmlit.template.core import Fragment, Template
from xmlit.template.helpers import check_bindings

__all__ = ["Fragment", "Template", "check_bindings"]
