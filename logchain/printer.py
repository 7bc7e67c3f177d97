"""logchain/printer.py – logchain syntax tree → Go source bytes.

Two kinds of nodes reach the printer:

* **Parsed nodes** carry a :class:`~logchain.ast.Span`.  They are printed
  as the exact source bytes they were parsed from, so untouched code,
  comments and blank lines come out bit for bit.
* **Synthesised nodes** (``span is None``) were built by the matcher.
  They are printed in canonical gofmt style: ``f(a, b)``, ``x.Sel``,
  literal text.  Reused parsed children inside them still print from
  source.

:func:`render` applies a replacement map: every mapped node's byte range
is replaced by its formatted replacement and everything else is copied.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple

from logchain import ast as A
from logchain.errors import RenderError

__all__ = ["format_node", "render", "line_indent"]

logger = logging.getLogger(__name__)

_EMPTY: Mapping[A.Node, A.Node] = MappingProxyType({})


class _Context:
    def __init__(self, source: bytes, indent: bytes) -> None:
        self.source = source
        self.indent = indent


_FORMATTERS: Dict[A.Shape, Callable[[A.Node, _Context], bytes]] = {}


def _register(shape: A.Shape):
    """Decorator: register the formatter for synthesised *shape* nodes."""
    def deco(fn):
        _FORMATTERS[shape] = fn
        return fn
    return deco


def _format(node: A.Node, ctx: _Context) -> bytes:
    if node.span is not None:
        return ctx.source[node.span.start:node.span.end]
    formatter = _FORMATTERS.get(node.shape)
    if formatter is None:
        raise RenderError(f"cannot format synthesised {node.shape.value} node")
    return formatter(node, ctx)


@_register(A.Shape.IDENT)
def _format_ident(node: A.Ident, ctx: _Context) -> bytes:
    return node.name.encode("utf-8")


@_register(A.Shape.BASIC_LIT)
def _format_basic_lit(node: A.BasicLit, ctx: _Context) -> bytes:
    return node.value.encode("utf-8")


@_register(A.Shape.COMMENT)
def _format_comment(node: A.Comment, ctx: _Context) -> bytes:
    return node.text.encode("utf-8")


@_register(A.Shape.SELECTOR)
def _format_selector(node: A.SelectorExpr, ctx: _Context) -> bytes:
    return _format(node.x, ctx) + b"." + _format(node.sel, ctx)


@_register(A.Shape.CALL)
def _format_call(node: A.CallExpr, ctx: _Context) -> bytes:
    args = b", ".join(_format(arg, ctx) for arg in node.args)
    if node.ellipsis:
        args += b"..."
    return _format(node.fun, ctx) + b"(" + args + b")"


@_register(A.Shape.EXPR_STMT)
def _format_expr_stmt(node: A.ExprStmt, ctx: _Context) -> bytes:
    # Decoration comments go on their own lines above the statement.
    lines = [c.encode("utf-8") for c in node.decs.comments]
    lines.append(_format(node.x, ctx))
    return (b"\n" + ctx.indent).join(lines)


@_register(A.Shape.IMPORT_SPEC)
def _format_import_spec(node: A.ImportSpec, ctx: _Context) -> bytes:
    # Line comments need a line break before the path; block comments stay inline.
    out = b""
    if node.name is not None:
        out = _format(node.name, ctx) + b" "
    for comment in node.decs.comments:
        sep = b"\n" + ctx.indent if comment.startswith("//") else b" "
        out += comment.encode("utf-8") + sep
    return out + _format(node.path, ctx)


def line_indent(source: bytes, offset: int) -> bytes:
    """Leading whitespace of the line containing *offset*."""
    start = source.rfind(b"\n", 0, offset) + 1
    end = start
    while end < len(source) and source[end:end + 1] in (b" ", b"\t"):
        end += 1
    return source[start:end]


def format_node(node: A.Node, source: bytes = b"", indent: bytes = b"") -> bytes:
    """Format a single node.

    *source* is required when *node* (or any reused child) was parsed;
    *indent* is used for continuation lines of a statement.
    """
    return _format(node, _Context(source, indent))


def _collect_edits(
    tree: A.File,
    replacements: Mapping[A.Node, A.Node],
) -> List[Tuple[int, int, bytes]]:
    edits: List[Tuple[int, int, bytes]] = []
    stack: List[A.Node] = [tree]
    while stack:
        node = stack.pop()
        replacement = replacements.get(node)
        if replacement is None:
            stack.extend(node.children())
            continue
        if node.span is None:
            raise RenderError(f"cannot replace synthesised {node.shape.value} node")
        ctx = _Context(tree.source, line_indent(tree.source, node.span.start))
        edits.append((node.span.start, node.span.end, _format(replacement, ctx)))
    edits.sort(key=lambda e: e[0])
    return edits


def render(
    tree: A.File,
    replacements: Mapping[A.Node, A.Node] = _EMPTY,
) -> bytes:
    """Serialise *tree*, substituting every node present in *replacements*.

    Replaced subtrees are not descended into.  With an empty map the
    result is the original source, byte for byte.
    """
    source = tree.source
    edits = _collect_edits(tree, replacements)
    if len(edits) != len(replacements):
        logger.debug(
            "%s: %d replacement(s) not reachable from the tree",
            tree.filename, len(replacements) - len(edits),
        )

    out: List[bytes] = []
    pos = 0
    for start, end, text in edits:
        if start < pos:
            raise RenderError(
                f"overlapping replacements at byte {start}",
                A.SourceLoc(tree.filename),
            )
        out.append(source[pos:start])
        out.append(text)
        pos = end
    out.append(source[pos:])
    return b"".join(out)
