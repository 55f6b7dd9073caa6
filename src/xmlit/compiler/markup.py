"""Markup compilation for xmlit.

Generates output statements for elements, attributes, text, comments, raw
passthrough and repeated children. Uses inline TYPE_CHECKING declarations
for host attributes, like the other compiler mixins.

Pretty layout is decided here, at compile time: a child list that holds an
element, comment or repeated children is *structured*, and each element,
comment and raw node in it starts on a new line indented to its level.
Top-level nodes only get a line break when something was already written,
so output never starts with a newline.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from xmlit.analysis.visitor import has_static_blocks, is_structured
from xmlit.nodes import (
    Comment,
    Element,
    Interpolated,
    Literal,
    OptionalInterpolated,
    RawPassthrough,
    RepeatedInterpolated,
)
from xmlit.utils.escape import escape_attr, escape_text

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from xmlit.nodes import Attribute, ChildNode, RepeatedChildren, Slot, Text

_BLOCK_NODES = (Element, Comment, RawPassthrough)


class MarkupCompilationMixin:
    """Mixin for compiling markup nodes to output statements."""

    __slots__ = ()

    # Host attributes and cross-mixin dependencies (type-check only)
    if TYPE_CHECKING:
        _node_dispatch: dict[str, Callable[[ChildNode, int, str | None], list[ast.stmt]]]

        @property
        def pretty(self) -> bool: ...

        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...
        def _emit_constant(self, text: str) -> ast.stmt: ...
        def _fresh_name(self, prefix: str) -> str: ...

    def _compile_nodes(
        self,
        children: Sequence[ChildNode],
        level: int,
        *,
        top: bool = False,
        block_flag: str | None = None,
    ) -> list[ast.stmt]:
        """Compile a child list rendered at nesting ``level``.

        Args:
            children: Nodes in document order
            level: Nesting level relative to the template root
            top: True for the document's own children
            block_flag: Local that records whether repeated children
                produced block output (see ``_compile_element``)
        """
        stmts: list[ast.stmt] = []
        structured = self.pretty and is_structured(children)
        for child in children:
            if structured and isinstance(child, _BLOCK_NODES):
                stmts.extend(self._newline(level, guarded=top))
            handler = self._node_dispatch[type(child).__name__]
            stmts.extend(handler(child, level, block_flag))
        return stmts

    def _newline(self, level: int, *, guarded: bool = False) -> list[ast.stmt]:
        """``_append(_nl[level])``, or ``if buf: …`` when ``guarded``."""
        stmt = self._emit_output(
            ast.Subscript(
                value=ast.Name(id="_nl", ctx=ast.Load()),
                slice=ast.Constant(value=level),
                ctx=ast.Load(),
            )
        )
        if not guarded:
            return [stmt]
        return [ast.If(test=ast.Name(id="buf", ctx=ast.Load()), body=[stmt], orelse=[])]

    # -- nodes --------------------------------------------------------------

    def _compile_element(
        self, node: Element, level: int, block_flag: str | None = None
    ) -> list[ast.stmt]:
        """Compile an element.

        In pretty mode the end tag of a structured element goes on its own
        line. When the only block children are repeated children, whether
        that line break is needed depends on what the items render, so the
        generated code tracks it in a ``_bN`` flag.
        """
        stmts: list[ast.stmt] = []
        seen = None
        if any(isinstance(attribute.value, RepeatedInterpolated) for attribute in node.attributes):
            # _seenN = _attribute_names(('id', ...)): names already on the element
            seen = self._fresh_name("_seen")
            declared = tuple(
                attribute.name
                for attribute in node.attributes
                if attribute.name is not None
                and not isinstance(attribute.value, RepeatedInterpolated)
            )
            stmts.append(
                ast.Assign(
                    targets=[ast.Name(id=seen, ctx=ast.Store())],
                    value=ast.Call(
                        func=ast.Name(id="_attribute_names", ctx=ast.Load()),
                        args=[ast.Constant(value=declared)],
                        keywords=[],
                    ),
                )
            )
        stmts.append(self._emit_constant(f"<{node.name}"))
        for attribute in node.attributes:
            stmts.extend(self._compile_attribute(attribute, seen))

        if node.self_closing:
            stmts.append(self._emit_constant(" />" if self.pretty else "/>"))
            return stmts

        stmts.append(self._emit_constant(">"))
        children = node.children
        structured = self.pretty and is_structured(children)
        flag = None
        if structured and not has_static_blocks(children):
            flag = self._fresh_name("_b")
            stmts.append(
                ast.Assign(
                    targets=[ast.Name(id=flag, ctx=ast.Store())],
                    value=ast.Constant(value=False),
                )
            )

        stmts.extend(self._compile_nodes(children, level + 1, block_flag=flag))

        if structured:
            if flag is None:
                stmts.extend(self._newline(level))
            else:
                stmts.append(
                    ast.If(
                        test=ast.Name(id=flag, ctx=ast.Load()),
                        body=self._newline(level),
                        orelse=[],
                    )
                )
        stmts.append(self._emit_constant(f"</{node.name}>"))
        return stmts

    def _compile_text(
        self, node: Text, level: int, block_flag: str | None = None
    ) -> list[ast.stmt]:
        value = node.value
        if isinstance(value, Literal):
            return [self._emit_constant(escape_text(value.text))]
        if isinstance(value, Interpolated):
            return [self._emit_output(_escaped("_e", _slot_value(value.slot)))]
        return [self._optional(value.slot, [self._emit_output(_escaped("_e", _local("_v")))])]

    def _compile_comment(
        self, node: Comment, level: int, block_flag: str | None = None
    ) -> list[ast.stmt]:
        return [self._emit_constant(f"<!--{node.text}-->")]

    def _compile_raw(
        self, node: RawPassthrough, level: int, block_flag: str | None = None
    ) -> list[ast.stmt]:
        return [self._emit_constant(node.text)]

    def _compile_repeated_children(
        self, node: RepeatedChildren, level: int, block_flag: str | None = None
    ) -> list[ast.stmt]:
        """``_children(items, buf, _depth + level, _cfg, _s)``

        Returns whether any item produced block output; the result is kept
        only when the parent element needs it for its end-tag line break.
        """
        call = ast.Call(
            func=ast.Name(id="_children", ctx=ast.Load()),
            args=[
                _slot_value(node.slot),
                ast.Name(id="buf", ctx=ast.Load()),
                ast.BinOp(
                    left=ast.Name(id="_depth", ctx=ast.Load()),
                    op=ast.Add(),
                    right=ast.Constant(value=level),
                ),
                ast.Name(id="_cfg", ctx=ast.Load()),
                ast.Name(id="_s", ctx=ast.Load()),
            ],
            keywords=[],
        )
        if block_flag is None:
            return [ast.Expr(value=call)]
        # _bN = _children(...) or _bN
        return [
            ast.Assign(
                targets=[ast.Name(id=block_flag, ctx=ast.Store())],
                value=ast.BoolOp(op=ast.Or(), values=[call, _local(block_flag)]),
            )
        ]

    # -- attributes ---------------------------------------------------------

    def _compile_attribute(self, node: Attribute, seen: str | None = None) -> list[ast.stmt]:
        value = node.value
        if isinstance(value, Literal):
            return [self._emit_constant(f' {node.name}="{escape_attr(value.text)}"')]

        if isinstance(value, Interpolated):
            return [
                self._emit_constant(f' {node.name}="'),
                self._emit_output(_escaped("_a", _slot_value(value.slot))),
                self._emit_constant('"'),
            ]

        if isinstance(value, OptionalInterpolated):
            return [
                self._optional(
                    value.slot,
                    [
                        self._emit_constant(f' {node.name}="'),
                        self._emit_output(_escaped("_a", _local("_v"))),
                        self._emit_constant('"'),
                    ],
                )
            ]

        assert isinstance(value, RepeatedInterpolated) and seen is not None
        if node.name is None:
            # _spread(_append, _s, items, _seenN)
            args = [_local("_append"), _local("_s"), _slot_value(value.slot), _local(seen)]
            func = "_spread"
        else:
            # _spread_named(_append, _s, 'name', items, _seenN)
            args = [
                _local("_append"),
                _local("_s"),
                ast.Constant(value=node.name),
                _slot_value(value.slot),
                _local(seen),
            ]
            func = "_spread_named"
        return [
            ast.Expr(
                value=ast.Call(func=ast.Name(id=func, ctx=ast.Load()), args=args, keywords=[])
            )
        ]

    def _optional(self, slot: Slot, body: list[ast.stmt]) -> ast.stmt:
        """``if (_v := ctx['slot']) is not None: body``"""
        return ast.If(
            test=ast.Compare(
                left=ast.NamedExpr(
                    target=ast.Name(id="_v", ctx=ast.Store()),
                    value=_slot_value(slot),
                ),
                ops=[ast.IsNot()],
                comparators=[ast.Constant(value=None)],
            ),
            body=body,
            orelse=[],
        )


def _local(name: str) -> ast.expr:
    return ast.Name(id=name, ctx=ast.Load())


def _slot_value(slot: Slot) -> ast.expr:
    """``ctx['slot']``"""
    return ast.Subscript(
        value=ast.Name(id="ctx", ctx=ast.Load()),
        slice=ast.Constant(value=slot.name),
        ctx=ast.Load(),
    )


def _escaped(escape: str, value: ast.expr) -> ast.expr:
    """``_e(_s(value))`` / ``_a(_s(value))``"""
    return ast.Call(
        func=ast.Name(id=escape, ctx=ast.Load()),
        args=[ast.Call(func=ast.Name(id="_s", ctx=ast.Load()), args=[value], keywords=[])],
        keywords=[],
    )
