"""logchain/ast.py – Syntax tree definitions for the zerolog → slog migration.

The migration only ever needs to look *into* a handful of Go constructs:
import specs, expression statements, calls, selectors, identifiers and
basic literals.  Everything else is carried through as an :class:`Opaque`
node that keeps its kind name and its named children, so traversal still
reaches statements nested inside function bodies.

Design invariants
-----------------
* Every node is a frozen dataclass (immutable after construction).
* Nodes compare and hash by *identity* (``eq=False``): two structurally
  equal nodes are distinct keys in a replacement map.
* Children are held in tuples, never lists.
* Every node carries a closed :class:`Shape` tag so that consumers can
  dispatch through a table keyed by shape instead of chained type tests.
* Parsed nodes carry a :class:`Span`; nodes synthesised by the rewriter
  have ``span=None`` and are formatted canonically by the printer.

Module layout
-------------
§1  Source positions & decorations
§2  Node shapes
§3  Construction helpers
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, Optional, Tuple

# ════════════════════════════════════════════════════════════════════════
# §1  Source positions & decorations
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SourceLoc:
    """A 1-based ``file:line:col`` position used in diagnostics."""

    file: str = "<unknown>"
    line: int = 0
    col: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.col}"


@dataclass(frozen=True, slots=True)
class Span:
    """Byte range ``[start, end)`` of a parsed node plus its start position."""

    start: int
    end: int
    line: int = 0
    col: int = 0


@dataclass(frozen=True, slots=True)
class Decorations:
    """Comments owned by a node.

    Only comments lying *inside* the node's extent and outside every
    sub-expression that is reproduced verbatim are recorded here.
    Comments and blank lines around a node are outside its extent and
    survive any rewrite of the node untouched.
    """

    comments: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.comments)


NO_DECS = Decorations()


# ════════════════════════════════════════════════════════════════════════
# §2  Node shapes
# ════════════════════════════════════════════════════════════════════════


class Shape(Enum):
    FILE = "file"
    IMPORT_SPEC = "import_spec"
    EXPR_STMT = "expr_stmt"
    CALL = "call"
    SELECTOR = "selector"
    IDENT = "ident"
    BASIC_LIT = "basic_lit"
    COMMENT = "comment"
    OPAQUE = "opaque"


class LitKind(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    IMAG = "imag"
    CHAR = "char"


@dataclass(frozen=True, eq=False, slots=True)
class Node:
    """Base class of every syntax node."""

    shape: ClassVar[Shape]

    span: Optional[Span] = field(default=None, kw_only=True, repr=False)
    decs: Decorations = field(default=NO_DECS, kw_only=True, repr=False)

    def children(self) -> Tuple[Node, ...]:
        return ()

    def walk(self) -> Iterator[Node]:
        """Yield this node and all its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    @property
    def synthesized(self) -> bool:
        return self.span is None


#: Expressions are not a separate hierarchy; any node may appear as one.
Expr = Node


@dataclass(frozen=True, eq=False, slots=True)
class Ident(Node):
    shape: ClassVar[Shape] = Shape.IDENT

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False, slots=True)
class BasicLit(Node):
    shape: ClassVar[Shape] = Shape.BASIC_LIT

    kind: LitKind
    value: str

    def unquoted(self) -> str:
        """Return the contents of a string literal without its quotes."""
        if self.kind is LitKind.STRING and len(self.value) >= 2:
            return self.value[1:-1]
        return self.value


@dataclass(frozen=True, eq=False, slots=True)
class Comment(Node):
    shape: ClassVar[Shape] = Shape.COMMENT

    text: str


@dataclass(frozen=True, eq=False, slots=True)
class SelectorExpr(Node):
    """``x.sel``"""

    shape: ClassVar[Shape] = Shape.SELECTOR

    x: Node
    sel: Ident

    def children(self) -> Tuple[Node, ...]:
        return (self.x, self.sel)


@dataclass(frozen=True, eq=False, slots=True)
class CallExpr(Node):
    """``fun(args...)``; ``ellipsis`` marks a trailing ``...`` spread."""

    shape: ClassVar[Shape] = Shape.CALL

    fun: Node
    args: Tuple[Node, ...] = ()
    ellipsis: bool = False

    def children(self) -> Tuple[Node, ...]:
        return (self.fun, *self.args)


@dataclass(frozen=True, eq=False, slots=True)
class ExprStmt(Node):
    shape: ClassVar[Shape] = Shape.EXPR_STMT

    x: Node

    def children(self) -> Tuple[Node, ...]:
        return (self.x,)


@dataclass(frozen=True, eq=False, slots=True)
class ImportSpec(Node):
    """``[name] "path"`` inside an import declaration."""

    shape: ClassVar[Shape] = Shape.IMPORT_SPEC

    path: BasicLit
    name: Optional[Ident] = None

    def children(self) -> Tuple[Node, ...]:
        if self.name is None:
            return (self.path,)
        return (self.name, self.path)


@dataclass(frozen=True, eq=False, slots=True)
class Opaque(Node):
    """Any Go construct the migration does not need to look into."""

    shape: ClassVar[Shape] = Shape.OPAQUE

    kind: str
    items: Tuple[Node, ...] = ()

    def children(self) -> Tuple[Node, ...]:
        return self.items


@dataclass(frozen=True, eq=False, slots=True)
class File(Node):
    """Root of a parsed Go source file; owns the source bytes."""

    shape: ClassVar[Shape] = Shape.FILE

    decls: Tuple[Node, ...]
    source: bytes = field(default=b"", repr=False)
    filename: str = "<input>"

    def children(self) -> Tuple[Node, ...]:
        return self.decls


# ════════════════════════════════════════════════════════════════════════
# §3  Construction helpers
# ════════════════════════════════════════════════════════════════════════


def ident(name: str) -> Ident:
    return Ident(name)


def selector(package: str, name: str) -> SelectorExpr:
    """Build ``package.name``."""
    return SelectorExpr(x=Ident(package), sel=Ident(name))


def call(fun: Node, *args: Node) -> CallExpr:
    return CallExpr(fun=fun, args=tuple(args))


def string_lit(text: str) -> BasicLit:
    """Build an interpreted Go string literal holding *text*.

    JSON string escaping is a subset of Go's interpreted-literal escapes.
    """
    return BasicLit(kind=LitKind.STRING, value=json.dumps(text, ensure_ascii=False))
