"""xmlit Compiler Core: main Compiler class.

The Compiler transforms a validated Document into a Python ``ast.Module``,
then compiles it to a code object. The module defines one function:

    ```python
    def render(ctx, buf, _depth, _cfg):
        _append = buf.append
        _e = _escape_text
        _a = _escape_attr
        _s = _str
        _append('<zoo name="Lorem Ipsum" openingYear="2013"><cat>')
        _append(_e(_s(ctx['name'])))
        _append('</cat></zoo>')
    ```

Design Principles:
1. **AST-to-AST**: Generate ``ast.Module``, not source strings
2. **StringBuilder**: Output via ``buf.append()``; the caller joins once
3. **Static work up front**: literal text is escaped and adjacent constant
   output is coalesced at compile time
4. **One renderer per layout**: the ``RenderConfig`` is fixed per compile,
   so compact output carries no layout checks at all

``ctx`` is the checked slot → value dict. ``_depth`` is the nesting level the
template is rendered at (non-zero when rendered as a fragment inside another
template) and only matters in pretty mode.
"""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING

from xmlit.analysis.visitor import max_depth
from xmlit.compiler.markup import MarkupCompilationMixin

if TYPE_CHECKING:
    import types

    from xmlit.config import RenderConfig
    from xmlit.nodes import Document

logger = logging.getLogger(__name__)


class Compiler(MarkupCompilationMixin):
    """Compile a Document to a Python code object.

    Attributes:
        _config: Layout the generated code produces
        _counter: Counter for unique local variable names

    Example:
            >>> from xmlit.compiler import Compiler
            >>> from xmlit.parser import parse
            >>> code = Compiler(RenderConfig.compact()).compile(parse("<a>{x}</a>"))
            >>> namespace = {"_escape_text": escape_text, ...}
            >>> exec(code, namespace)
            >>> buf = []
            >>> namespace["render"]({"x": "1"}, buf, 0, config)
            >>> "".join(buf)
            '<a>1</a>'
    """

    __slots__ = ("_config", "_counter", "_node_dispatch")

    def __init__(self, config: RenderConfig):
        self._config = config
        self._counter = 0
        self._node_dispatch = {
            "Element": self._compile_element,
            "Text": self._compile_text,
            "Comment": self._compile_comment,
            "RawPassthrough": self._compile_raw,
            "RepeatedChildren": self._compile_repeated_children,
        }

    @property
    def pretty(self) -> bool:
        return self._config.is_pretty

    def compile(
        self,
        document: Document,
        name: str | None = None,
        filename: str | None = None,
    ) -> types.CodeType:
        """Compile a validated Document to a code object.

        Args:
            document: Root node (must already be validated)
            name: Template name, for logging
            filename: Source filename used for the code object
        """
        self._counter = 0
        module = ast.Module(body=[self._make_render_function(document)], type_ignores=[])
        ast.fix_missing_locations(module)
        logger.debug(
            "compiled %s for %s output", name or "<template>", self._config.mode.value
        )
        return compile(module, filename or "<template>", "exec")

    def _fresh_name(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}{self._counter}"

    def _emit_output(self, value_expr: ast.expr) -> ast.stmt:
        """Generate ``_append(value)``."""
        return ast.Expr(
            value=ast.Call(
                func=ast.Name(id="_append", ctx=ast.Load()),
                args=[value_expr],
                keywords=[],
            ),
        )

    def _emit_constant(self, text: str) -> ast.stmt:
        return self._emit_output(ast.Constant(value=text))

    def _make_render_function(self, document: Document) -> ast.FunctionDef:
        """Generate ``render(ctx, buf, _depth, _cfg)``.

        Hot-path globals are cached as locals (LOAD_FAST instead of
        LOAD_GLOBAL), and ``buf.append`` is looked up once.
        """
        body: list[ast.stmt] = [
            _assign("_append", ast.Attribute(
                value=ast.Name(id="buf", ctx=ast.Load()), attr="append", ctx=ast.Load()
            )),
            _assign("_e", ast.Name(id="_escape_text", ctx=ast.Load())),
            _assign("_a", ast.Name(id="_escape_attr", ctx=ast.Load())),
            _assign("_s", ast.Name(id="_str", ctx=ast.Load())),
        ]

        if self.pretty:
            # _nl = _cfg.newlines(_depth, N): line breaks for every level used
            body.append(
                _assign(
                    "_nl",
                    ast.Call(
                        func=ast.Attribute(
                            value=ast.Name(id="_cfg", ctx=ast.Load()),
                            attr="newlines",
                            ctx=ast.Load(),
                        ),
                        args=[
                            ast.Name(id="_depth", ctx=ast.Load()),
                            ast.Constant(value=max_depth(document) + 1),
                        ],
                        keywords=[],
                    ),
                )
            )

        body.extend(_coalesce(self._compile_nodes(document.children, 0, top=True)))

        return ast.FunctionDef(
            name="render",
            args=ast.arguments(
                posonlyargs=[],
                args=[
                    ast.arg(arg="ctx"),
                    ast.arg(arg="buf"),
                    ast.arg(arg="_depth"),
                    ast.arg(arg="_cfg"),
                ],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=body,
            decorator_list=[],
            returns=None,
            type_params=[],
        )


def _assign(name: str, value: ast.expr) -> ast.stmt:
    return ast.Assign(targets=[ast.Name(id=name, ctx=ast.Store())], value=value)


def _constant_output(stmt: ast.stmt) -> str | None:
    """Return the text of an ``_append('…')`` statement, else None."""
    if (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Call)
        and isinstance(stmt.value.func, ast.Name)
        and stmt.value.func.id == "_append"
        and len(stmt.value.args) == 1
        and isinstance(stmt.value.args[0], ast.Constant)
        and isinstance(stmt.value.args[0].value, str)
    ):
        return stmt.value.args[0].value
    return None


def _coalesce(stmts: list[ast.stmt]) -> list[ast.stmt]:
    """Merge runs of constant ``_append`` calls into one call.

    ``<a href="`` + ``x`` + ``">`` style sequences around dynamic values stay
    split; purely static markup collapses to a single append.
    """
    result: list[ast.stmt] = []
    pending: list[str] = []

    def flush() -> None:
        if pending:
            result.append(
                ast.Expr(
                    value=ast.Call(
                        func=ast.Name(id="_append", ctx=ast.Load()),
                        args=[ast.Constant(value="".join(pending))],
                        keywords=[],
                    )
                )
            )
            pending.clear()

    for stmt in stmts:
        text = _constant_output(stmt)
        if text is not None:
            pending.append(text)
            continue
        flush()
        if isinstance(stmt, ast.If):
            stmt.body = _coalesce(stmt.body)
        result.append(stmt)
    flush()
    return result
