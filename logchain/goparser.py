"""logchain/goparser.py – Go source → logchain syntax tree.

Parses Go source with tree-sitter (``tree-sitter-go`` grammar) and lowers
the concrete syntax tree into the closed node set of :mod:`logchain.ast`.

Design principles
-----------------
* **Kind dispatch** – every tree-sitter node kind with a dedicated shape
  is lowered by a ``_convert_<kind>`` helper registered in ``_CONVERTERS``.
  All other kinds become :class:`~logchain.ast.Opaque` nodes holding their
  lowered named children.
* **Spans everywhere** – every lowered node records its byte range so the
  printer can reproduce untouched code byte for byte.
* **Fail on syntax errors** – tree-sitter recovers from errors silently;
  we refuse to rewrite a file whose tree contains ``ERROR`` or missing
  nodes and raise :class:`~logchain.errors.GoParseError` instead.

Public API
----------
``parse(source: bytes, filename: str = "<input>") -> logchain.ast.File``
    Parse a complete Go source file.

``GoParser``
    Reusable parser object owning a ``tree_sitter.Parser``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import tree_sitter
import tree_sitter_go

from logchain import ast as A
from logchain.errors import GoParseError

__all__ = ["GO_LANGUAGE", "GoParser", "parse"]

logger = logging.getLogger(__name__)

GO_LANGUAGE = tree_sitter.Language(tree_sitter_go.language())

TSNode = tree_sitter.Node


# ═══════════════════════════════════════════════════════════════════════
#  Dispatch registry
# ═══════════════════════════════════════════════════════════════════════

_CONVERTERS: Dict[str, Callable[["_Lowering", TSNode], A.Node]] = {}


def _register(*kinds: str):
    """Decorator: register a converter under each tree-sitter *kind*."""
    def deco(fn):
        for kind in kinds:
            _CONVERTERS[kind] = fn
        return fn
    return deco


_IDENT_KINDS = (
    "identifier",
    "field_identifier",
    "package_identifier",
    "blank_identifier",
    "true",
    "false",
    "nil",
    "iota",
)

_LITERAL_KINDS: Dict[str, A.LitKind] = {
    "interpreted_string_literal": A.LitKind.STRING,
    "raw_string_literal": A.LitKind.STRING,
    "int_literal": A.LitKind.INT,
    "float_literal": A.LitKind.FLOAT,
    "imaginary_literal": A.LitKind.IMAG,
    "rune_literal": A.LitKind.CHAR,
}


# ═══════════════════════════════════════════════════════════════════════
#  Lowering
# ═══════════════════════════════════════════════════════════════════════

class _Lowering:
    """Lowers one tree-sitter tree; holds the source for text lookups."""

    def __init__(self, source: bytes, filename: str) -> None:
        self.source = source
        self.filename = filename

    def text(self, ts: TSNode) -> str:
        return self.source[ts.start_byte:ts.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def span(ts: TSNode) -> A.Span:
        row, col = ts.start_point
        return A.Span(ts.start_byte, ts.end_byte, row + 1, col + 1)

    def convert(self, ts: TSNode) -> A.Node:
        converter = _CONVERTERS.get(ts.type, _convert_opaque)
        return converter(self, ts)

    def convert_all(self, nodes: List[TSNode]) -> Tuple[A.Node, ...]:
        return tuple(self.convert(n) for n in nodes)


def _code_children(ts: TSNode) -> List[TSNode]:
    """Named children without comments."""
    return [c for c in ts.named_children if c.type != "comment"]


def _interior_comments(ts: TSNode, lowering: _Lowering) -> Tuple[str, ...]:
    """Comments inside *ts* that are not part of a call argument.

    Call arguments are reproduced verbatim from the source, comments
    included, so only the comments between chain links are collected.
    """
    found: List[Tuple[int, str]] = []
    stack = [ts]
    while stack:
        node = stack.pop()
        for child in reversed(node.children):
            if child.type == "comment":
                found.append((child.start_byte, lowering.text(child)))
            elif node.type in ("argument_list", "special_argument_list") and child.is_named:
                continue
            else:
                stack.append(child)
    return tuple(text for _, text in sorted(found))


@_register("source_file")
def _convert_source_file(lowering: _Lowering, ts: TSNode) -> A.Node:
    return A.File(
        decls=lowering.convert_all(ts.named_children),
        source=lowering.source,
        filename=lowering.filename,
        span=lowering.span(ts),
    )


@_register("import_spec")
def _convert_import_spec(lowering: _Lowering, ts: TSNode) -> A.Node:
    path = ts.child_by_field_name("path")
    if path is None:
        return _convert_opaque(lowering, ts)
    name = ts.child_by_field_name("name")
    return A.ImportSpec(
        path=lowering.convert(path),
        name=A.Ident(lowering.text(name), span=lowering.span(name)) if name is not None else None,
        span=lowering.span(ts),
        decs=A.Decorations(_interior_comments(ts, lowering)),
    )


@_register("expression_statement")
def _convert_expression_statement(lowering: _Lowering, ts: TSNode) -> A.Node:
    code = _code_children(ts)
    if len(code) != 1:
        return _convert_opaque(lowering, ts)
    return A.ExprStmt(
        x=lowering.convert(code[0]),
        span=lowering.span(ts),
        decs=A.Decorations(_interior_comments(ts, lowering)),
    )


@_register("call_expression")
def _convert_call_expression(lowering: _Lowering, ts: TSNode) -> A.Node:
    fun = ts.child_by_field_name("function")
    args = ts.child_by_field_name("arguments")
    if fun is None or args is None or ts.child_by_field_name("type_arguments") is not None:
        return _convert_opaque(lowering, ts)

    # Newer grammars wrap ``xs...`` in a variadic_argument node, older
    # ones leave a bare ``...`` token in the argument list.
    ellipsis = any(c.type == "..." for c in args.children)
    converted: List[A.Node] = []
    for arg in _code_children(args):
        if arg.type == "variadic_argument":
            ellipsis = True
            inner = _code_children(arg)
            if len(inner) == 1:
                converted.append(lowering.convert(inner[0]))
                continue
        converted.append(lowering.convert(arg))
    return A.CallExpr(
        fun=lowering.convert(fun),
        args=tuple(converted),
        ellipsis=ellipsis,
        span=lowering.span(ts),
    )


@_register("selector_expression")
def _convert_selector_expression(lowering: _Lowering, ts: TSNode) -> A.Node:
    operand = ts.child_by_field_name("operand")
    field = ts.child_by_field_name("field")
    if operand is None or field is None:
        return _convert_opaque(lowering, ts)
    return A.SelectorExpr(
        x=lowering.convert(operand),
        sel=A.Ident(lowering.text(field), span=lowering.span(field)),
        span=lowering.span(ts),
    )


@_register(*_IDENT_KINDS)
def _convert_identifier(lowering: _Lowering, ts: TSNode) -> A.Node:
    return A.Ident(lowering.text(ts), span=lowering.span(ts))


@_register(*_LITERAL_KINDS)
def _convert_literal(lowering: _Lowering, ts: TSNode) -> A.Node:
    return A.BasicLit(
        kind=_LITERAL_KINDS[ts.type],
        value=lowering.text(ts),
        span=lowering.span(ts),
    )


@_register("comment")
def _convert_comment(lowering: _Lowering, ts: TSNode) -> A.Node:
    return A.Comment(lowering.text(ts), span=lowering.span(ts))


def _convert_opaque(lowering: _Lowering, ts: TSNode) -> A.Node:
    return A.Opaque(
        kind=ts.type,
        items=lowering.convert_all(ts.named_children),
        span=lowering.span(ts),
    )


# ═══════════════════════════════════════════════════════════════════════
#  Error detection
# ═══════════════════════════════════════════════════════════════════════

def _first_error(root: TSNode) -> Optional[TSNode]:
    """Return the first ``ERROR`` or missing node in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

class GoParser:
    """Parses Go source files into :class:`logchain.ast.File` trees.

    Usage::

        parser = GoParser()
        tree = parser.parse(Path("main.go").read_bytes(), "main.go")
    """

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(GO_LANGUAGE)

    def parse(self, source: bytes, filename: str = "<input>") -> A.File:
        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root)
            row, col = bad.start_point if bad is not None else (0, 0)
            what = "missing " + bad.type if bad is not None and bad.is_missing else "syntax error"
            raise GoParseError(what, A.SourceLoc(filename, row + 1, col + 1))

        lowered = _Lowering(source, filename).convert(root)
        if not isinstance(lowered, A.File):
            raise GoParseError(f"unexpected root node {root.type!r}", A.SourceLoc(filename, 1, 1))
        logger.debug("%s: parsed %d top-level declaration(s)", filename, len(lowered.decls))
        return lowered


def parse(source: bytes, filename: str = "<input>") -> A.File:
    """Parse *source* with a fresh :class:`GoParser`."""
    return GoParser().parse(source, filename)
