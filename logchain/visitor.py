#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
logchain/visitor.py
===================

Visitor pattern infrastructure for logchain syntax tree traversal.

Provides:
- ``ASTVisitor``: abstract base dispatching on the node's shape tag
- ``DepthFirstVisitor``: generic traversal that visits all children
"""

from __future__ import annotations

import abc
from typing import Any

from logchain import ast as A

__all__ = [
    "ASTVisitor",
    "DepthFirstVisitor",
]


class ASTVisitor(abc.ABC):
    """Abstract base class for logchain tree visitors.

    ``visit`` dispatches to ``visit_<shape>`` (``visit_call``,
    ``visit_expr_stmt``, ...).  Shapes without a method go to
    ``generic_visit``, which does nothing.
    """

    def visit(self, node: A.Node) -> Any:
        """Dispatch to the appropriate visit method."""
        method = getattr(self, f"visit_{node.shape.value}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: A.Node) -> Any:
        """Called when no specific visitor method exists."""
        return None


class DepthFirstVisitor(ASTVisitor):
    """Visitor that traverses all children in depth-first order.

    A ``visit_X`` override that does not call ``generic_visit`` prunes
    the traversal below that node.
    """

    def generic_visit(self, node: A.Node) -> Any:
        """Visit all children."""
        for child in node.children():
            self.visit(child)
        return None
