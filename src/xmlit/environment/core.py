"""Core Environment class for xmlit.

The Environment is the central configuration object: it owns the loader,
the default RenderConfig, the value converter registry and the template
cache, and runs the static pipeline

    source → Lexer → Parser → Document → Validator → Template

Compilation to Python code happens later, per RenderConfig, inside the
Template.

Thread-Safety:
- The converter registry uses copy-on-write updates
- The template cache is guarded by a lock
- Templates are immutable; building the same one twice is harmless
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xmlit.analysis import Validator
from xmlit.config import COMPACT
from xmlit.environment.exceptions import ValidationError
from xmlit.environment.registry import ConverterRegistry
from xmlit.parser import parse
from xmlit.template import Template
from xmlit.utils.lru_cache import LRUCache

if TYPE_CHECKING:
    from xmlit.analysis import SlotTable
    from xmlit.config import RenderConfig
    from xmlit.environment.loaders import Loader
    from xmlit.nodes import Document

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration and template management hub.

    Attributes:
        loader: Template source provider (for ``get_template``)
        config: RenderConfig used when ``render()`` is given none
        converters: Type → text converter registry

    Example:
            >>> env = Environment(config=RenderConfig.pretty())
            >>> env.converters[bool] = lambda v: "true" if v else "false"
            >>> t = env.from_string("<flag on={on}/>")
            >>> t.render(on=True)
            '<flag on="true" />'
    """

    __slots__ = ("_cache", "config", "converters", "loader")

    def __init__(
        self,
        loader: Loader | None = None,
        config: RenderConfig = COMPACT,
        cache_size: int = 400,
    ):
        self.loader = loader
        self.config = config
        self.converters = ConverterRegistry()
        self._cache = LRUCache(cache_size)

    def parse(
        self, source: str, name: str | None = None, filename: str | None = None
    ) -> Document:
        """Parse source into an unvalidated Document.

        Raises:
            ParseError: If the markup is malformed.
        """
        return parse(source, name=name, filename=filename)

    def validate(
        self,
        document: Document,
        *,
        source: str | None = None,
        name: str | None = None,
        filename: str | None = None,
    ) -> SlotTable:
        """Validate a Document and return its slot table.

        Raises:
            ValidationError: On the first structural problem, with the
                source snippet attached when ``source`` is given.
        """
        try:
            return Validator().validate(document)
        except ValidationError as e:
            e.attach_source(source or "", template_name=name, filename=filename)
            raise

    def compile(
        self, source: str, name: str | None = None, filename: str | None = None
    ) -> Template:
        """Build a Template from source, bypassing the cache."""
        document = self.parse(source, name, filename)
        slots = self.validate(document, source=source, name=name, filename=filename)
        logger.debug("compiled %s with %d slot(s)", name or "<template>", len(slots))
        return Template(
            document,
            slots,
            name=name,
            filename=filename,
            source=source,
            to_text=self.converters.convert,
            config=self.config,
        )

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Build a Template from source (cached by source and name).

        Example:
            >>> env.from_string("<a>{x}</a>").render(x=1)
            '<a>1</a>'
        """
        return self._cache.get_or_set(
            ("source", source, name), lambda: self.compile(source, name)
        )

    def get_template(self, name: str) -> Template:
        """Load a template by name through the loader (cached by name).

        Raises:
            TemplateNotFoundError: If the loader has no such template.
            RuntimeError: If no loader is configured.
        """
        if self.loader is None:
            raise RuntimeError("No loader configured; use from_string() or pass loader=")

        def load() -> Template:
            assert self.loader is not None
            source, filename = self.loader.get_source(name)
            return self.compile(source, name, filename)

        return self._cache.get_or_set(("name", name), load)

    def clear_cache(self) -> None:
        """Drop every cached template."""
        self._cache.clear()

    def cache_info(self) -> dict[str, int]:
        """Template cache statistics (hits, misses, size, maxsize)."""
        return self._cache.info()

    def __repr__(self) -> str:
        return f"<Environment loader={self.loader!r} config={self.config!r}>"


_DEFAULT_ENVIRONMENT = Environment()


def default_environment() -> Environment:
    """The shared Environment behind ``xmlit.compile`` and ``xmlit.render``."""
    return _DEFAULT_ENVIRONMENT
