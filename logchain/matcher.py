"""logchain/matcher.py – Statement Matcher.

Decides, for one node of the tree, whether it is

* the zerolog import spec → replaced by the slog import spec,
* an expression statement holding a complete zerolog chain → replaced
  by an expression statement holding one ``slog.LogAttrs`` call,
* anything else → left alone.

Decisions are purely local to the node, so the traversal order of the
rewrite driver does not matter.  Dispatch goes through ``_MATCHERS``,
a table keyed by :class:`~logchain.ast.Shape`.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from logchain import ast as A
from logchain.chain import ExtractedEntry, NoMatch, Terminator, extract
from logchain.config import DEFAULT_CONFIG, MigrationConfig

__all__ = ["match_statement", "build_flat_call", "is_placeholder_call"]

logger = logging.getLogger(__name__)

Matcher = Callable[[A.Node, MigrationConfig], Optional[A.Node]]

_MATCHERS: Dict[A.Shape, Matcher] = {}


def _register(shape: A.Shape):
    """Decorator: register a matcher for nodes of *shape*."""
    def deco(fn: Matcher) -> Matcher:
        _MATCHERS[shape] = fn
        return fn
    return deco


def match_statement(
    node: A.Node,
    config: MigrationConfig = DEFAULT_CONFIG,
) -> Optional[A.Node]:
    """Return the replacement for *node*, or ``None`` to keep it."""
    matcher = _MATCHERS.get(node.shape)
    if matcher is None:
        return None
    return matcher(node, config)


@_register(A.Shape.IMPORT_SPEC)
def _match_import(node: A.ImportSpec, config: MigrationConfig) -> Optional[A.Node]:
    if node.path.unquoted() != config.source_import:
        return None
    if node.name is not None:
        logger.debug("dropping import alias %r of %s", node.name.name, config.source_import)
    return A.ImportSpec(path=A.string_lit(config.target_import), decs=node.decs)


@_register(A.Shape.EXPR_STMT)
def _match_expr_stmt(node: A.ExprStmt, config: MigrationConfig) -> Optional[A.Node]:
    call = node.x
    if not isinstance(call, A.CallExpr) or call.ellipsis:
        return None
    fun = call.fun
    if not isinstance(fun, A.SelectorExpr):
        return None
    terminator = Terminator.lookup(fun.sel.name)
    if terminator is None:
        return None
    if not isinstance(fun.x, A.CallExpr):
        return None

    entry = extract(fun.x, terminator, call.args, config)
    if isinstance(entry, NoMatch):
        logger.debug("%s: chain left unchanged: %s", _where(node), entry.reason)
        return None
    return A.ExprStmt(x=build_flat_call(entry, config), decs=node.decs)


def build_flat_call(
    entry: ExtractedEntry,
    config: MigrationConfig = DEFAULT_CONFIG,
) -> A.CallExpr:
    """Build ``slog.LogAttrs(ctx, slog.<Level>, msg, attrs...)``."""
    pkg = config.target_package
    return A.call(
        A.selector(pkg, config.flat_function),
        A.ident(config.context_expr),
        A.selector(pkg, entry.slog_level.value),
        entry.message,
        *entry.fields,
    )


def is_placeholder_call(
    node: A.Node,
    config: MigrationConfig = DEFAULT_CONFIG,
) -> bool:
    """True for a statement built here, whose context argument needs fix-up."""
    if not isinstance(node, A.ExprStmt) or not isinstance(node.x, A.CallExpr):
        return False
    args = node.x.args
    return (
        bool(args)
        and isinstance(args[0], A.Ident)
        and args[0].synthesized
        and args[0].name == config.context_expr
    )


def _where(node: A.Node) -> str:
    if node.span is None:
        return "<synthesized>"
    return f"{node.span.line}:{node.span.col}"
