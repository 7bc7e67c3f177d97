"""logchain/rewrite.py – Rewrite Driver.

Runs the migration over one parsed file in two passes:

1. :func:`collect_replacements` walks the whole tree once and asks the
   statement matcher about every node.  The result is a read-only
   mapping from original node (by identity) to replacement node.  The
   tree itself is never modified.
2. :func:`apply_replacements` prints the tree, substituting the mapped
   nodes.

:func:`rewrite_source` bundles parsing and both passes for callers that
start from bytes, which is what the CLI does for every file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from logchain import ast as A
from logchain.config import DEFAULT_CONFIG, MigrationConfig
from logchain.errors import RewriteError
from logchain.goparser import GoParser
from logchain.matcher import is_placeholder_call, match_statement
from logchain.printer import render
from logchain.visitor import DepthFirstVisitor

__all__ = [
    "RewriteResult",
    "collect_replacements",
    "apply_replacements",
    "rewrite",
    "rewrite_source",
]

logger = logging.getLogger(__name__)


class _ReplacementCollector(DepthFirstVisitor):
    """Records one replacement per matched node; does not descend into it."""

    def __init__(self, config: MigrationConfig) -> None:
        self._config = config
        self.replacements: Dict[A.Node, A.Node] = {}

    def visit(self, node: A.Node) -> None:
        replacement = match_statement(node, self._config)
        if replacement is None:
            super().visit(node)
            return
        if node in self.replacements:
            raise RewriteError(f"{node.shape.value} node matched twice")
        self.replacements[node] = replacement


def collect_replacements(
    tree: A.File,
    config: MigrationConfig = DEFAULT_CONFIG,
) -> Mapping[A.Node, A.Node]:
    """First pass: map every convertible node to its replacement."""
    collector = _ReplacementCollector(config)
    collector.visit(tree)
    return MappingProxyType(collector.replacements)


def apply_replacements(tree: A.File, replacements: Mapping[A.Node, A.Node]) -> bytes:
    """Second pass: serialise *tree* with *replacements* substituted."""
    return render(tree, replacements)


def rewrite(tree: A.File, config: MigrationConfig = DEFAULT_CONFIG) -> bytes:
    """Collect and apply all replacements for *tree*; return the new source."""
    return apply_replacements(tree, collect_replacements(tree, config))


@dataclass(frozen=True)
class RewriteResult:
    """Outcome of rewriting one source file."""

    output: bytes
    replacements: int
    placeholder_calls: int

    @property
    def changed(self) -> bool:
        return self.replacements > 0


def rewrite_source(
    source: bytes,
    filename: str = "<input>",
    config: MigrationConfig = DEFAULT_CONFIG,
    parser: Optional[GoParser] = None,
) -> RewriteResult:
    """Parse *source* and rewrite it.

    Raises :class:`~logchain.errors.GoParseError` when the file does not
    parse and :class:`~logchain.errors.RenderError` when it cannot be
    printed back.
    """
    tree = (parser or GoParser()).parse(source, filename)
    replacements = collect_replacements(tree, config)
    if not replacements:
        return RewriteResult(output=source, replacements=0, placeholder_calls=0)

    placeholders = sum(1 for r in replacements.values() if is_placeholder_call(r, config))
    logger.info("%s: %d replacement(s)", filename, len(replacements))
    return RewriteResult(
        output=apply_replacements(tree, replacements),
        replacements=len(replacements),
        placeholder_calls=placeholders,
    )
