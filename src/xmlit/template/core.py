"""xmlit Template: validated template object ready for rendering.

A Template owns an immutable Document and its SlotTable. Python code for it
is generated lazily, once per ``RenderConfig``, and cached on the template:

    ```
    Template
    ├── _document: Document          # Validated tree
    ├── _slots: SlotTable            # Slot name → Shape
    ├── _renderers: {RenderConfig: render}
    └── _name, _filename, _source    # For error messages
    ```

StringBuilder Pattern:
Generated code appends to one list and the caller joins once. Fragments in
a repeated-children slot append to the same list, so nesting never builds
intermediate strings.

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (ctx dict, buf list)
- The renderer cache may compile the same config twice under contention;
  both results are equivalent and the last assignment wins

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from xmlit.analysis.visitor import has_static_blocks, is_structured
from xmlit.compiler import Compiler
from xmlit.config import COMPACT, RenderConfig
from xmlit.environment.exceptions import BindingError, ErrorCode
from xmlit.template.helpers import STATIC_NAMESPACE, check_bindings

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from xmlit.analysis import SlotTable
    from xmlit.nodes import Document

logger = logging.getLogger(__name__)


class Template:
    """Validated template ready for rendering.

    Templates are reusable across any number of renders with different
    values; structural checks happened once, when the template was built.

    Attributes:
        name: Template identifier (for error messages)
        filename: Source file path (for error messages)

    Example:
            >>> import xmlit
            >>> t = xmlit.compile('<zoo name={name}><cat>{cat}</cat></zoo>')
            >>> t.render(name="Lorem Ipsum", cat="Tony")
            '<zoo name="Lorem Ipsum"><cat>Tony</cat></zoo>'

            >>> t.render({"name": "Lorem Ipsum", "cat": "Tony"})  # Dict works too
            '<zoo name="Lorem Ipsum"><cat>Tony</cat></zoo>'

    """

    __slots__ = (
        "_config",
        "_document",
        "_filename",
        "_is_block",
        "_name",
        "_renderers",
        "_slots",
        "_source",
        "_to_text",
    )

    def __init__(
        self,
        document: Document,
        slots: SlotTable,
        *,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        to_text: Callable[[Any], str] = str,
        config: RenderConfig = COMPACT,
    ):
        """Initialize a template from a validated tree.

        Args:
            document: Validated Document
            slots: Slot table produced by validating ``document``
            name: Template name (for error messages)
            filename: Source filename (for error messages and code objects)
            source: Template source
            to_text: Converter from bound values to text
            config: Layout used when ``render()`` is given none
        """
        self._document = document
        self._slots = slots
        self._name = name
        self._filename = filename
        self._source = source
        self._to_text = to_text
        self._config = config
        self._renderers: dict[RenderConfig, Callable[..., None]] = {}
        top = document.children
        self._is_block = is_structured(top) and has_static_blocks(top)

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def document(self) -> Document:
        """The validated tree (immutable)."""
        return self._document

    @property
    def slots(self) -> SlotTable:
        """Slot name → Shape, in first-use order."""
        return self._slots

    @property
    def config(self) -> RenderConfig:
        """Default layout for ``render()``."""
        return self._config

    @property
    def is_block(self) -> bool:
        """True if pretty output starts on its own line when nested."""
        return self._is_block

    def render(
        self,
        bindings: Mapping[str, Any] | None = None,
        /,
        config: RenderConfig | None = None,
        **values: Any,
    ) -> str:
        """Render with the given slot values.

        Args:
            bindings: Slot values as a mapping
            config: Output layout (defaults to the template's). A value that
                is not a RenderConfig binds a slot named ``config``; to
                bind such a slot to a RenderConfig, pass it in ``bindings``
            **values: Slot values as keyword arguments

        Raises:
            BindingError: A value is missing, unknown or of the wrong kind.
                No output is produced.

        Example:
            >>> t.render(name="World")
            '<greeting>World</greeting>'
            >>> t.render({"name": "World"}, config=RenderConfig.pretty())
            '<greeting>World</greeting>'
        """
        if config is not None and not isinstance(config, RenderConfig):
            if "config" not in self._slots:
                raise TypeError(
                    f"config must be a RenderConfig, got {type(config).__name__}"
                )
            # render(config=...) on a template with a slot named 'config'
            values["config"] = config
            config = None
        ctx = self._context(bindings, values)
        return self._render_ctx(ctx, config or self._config)

    def bind(self, bindings: Mapping[str, Any] | None = None, /, **values: Any) -> Fragment:
        """Check values now and return a Fragment that renders later.

        Fragments go into repeated-children slots of other templates.
        """
        return Fragment(self, self._context(bindings, values))

    def write_into(self, buf: list[str], config: RenderConfig, depth: int) -> bool:
        """Render this slot-less template into ``buf`` at ``depth``."""
        if self._slots:
            raise BindingError(
                f"template with slots {', '.join(self._slots)} used as a child",
                code=ErrorCode.INVALID_ITEM,
                template_name=self._name,
                suggestion="Bind it first with template.bind(...)",
            )
        self._renderer(config)({}, buf, depth, config)
        return config.is_pretty and self._is_block

    def _context(
        self, bindings: Mapping[str, Any] | None, values: dict[str, Any]
    ) -> dict[str, Any]:
        if bindings is not None:
            values = {**bindings, **values}
        return check_bindings(self._slots, values, self._name)

    def _render_ctx(self, ctx: dict[str, Any], config: RenderConfig) -> str:
        render_func = self._renderer(config)
        buf: list[str] = []
        try:
            render_func(ctx, buf, 0, config)
        except BindingError as e:
            self._attach_name(e)
            raise
        return "".join(buf)

    def _renderer(self, config: RenderConfig) -> Callable[..., None]:
        """Return the render function for ``config``, compiling on first use."""
        render_func = self._renderers.get(config)
        if render_func is None:
            code = Compiler(config).compile(self._document, self._name, self._filename)
            namespace: dict[str, Any] = STATIC_NAMESPACE.copy()
            namespace["_str"] = self._to_text
            exec(code, namespace)
            render_func = namespace["render"]
            self._renderers[config] = render_func
            logger.debug(
                "generated %s renderer for %s", config.mode.value, self._name or "<template>"
            )
        return render_func

    def _attach_name(self, error: BindingError) -> None:
        if error.template_name is None:
            error.template_name = self._name
            error.args = (error._format_message(),)

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"


class Fragment:
    """A template bound to checked values.

    Renders on demand, and when placed in a repeated-children slot renders
    straight into the enclosing template's buffer at the current depth.

    Example:
        >>> item = xmlit.compile("<item>{title}</item>")
        >>> feed = xmlit.compile("<channel>{..items}</channel>")
        >>> feed.render(items=[item.bind(title="a"), item.bind(title="b")])
        '<channel><item>a</item><item>b</item></channel>'
    """

    __slots__ = ("_template", "_values")

    def __init__(self, template: Template, values: dict[str, Any]):
        self._template = template
        self._values = values

    @property
    def template(self) -> Template:
        return self._template

    @property
    def values(self) -> Mapping[str, Any]:
        """Checked slot values (a copy)."""
        return dict(self._values)

    def render(self, config: RenderConfig | None = None) -> str:
        template = self._template
        return template._render_ctx(self._values, config or template.config)

    def write_into(self, buf: list[str], config: RenderConfig, depth: int) -> bool:
        template = self._template
        template._renderer(config)(self._values, buf, depth, config)
        return config.is_pretty and template.is_block

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<Fragment of {self._template!r}>"
