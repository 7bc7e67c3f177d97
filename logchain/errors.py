# logchain/errors.py
"""
Error types for the logchain migration pipeline.

Error Hierarchy:
────────────────
    LogchainError (base)
    ├── GoParseError   - source file could not be parsed (ParseFailure)
    ├── RenderError    - tree could not be printed back (SerializeFailure)
    ├── RewriteError   - internal invariant violated while rewriting
    └── ConfigError    - invalid migration configuration

A chain that does not fit the supported pattern is *not* an error: the
extractor returns a ``NoMatch`` value and the statement is left as is.
Only the conditions above abort the processing of one file; the CLI
reports them and moves on to the next file.
"""

from __future__ import annotations

from typing import List, Optional

from logchain.ast import SourceLoc

__all__ = [
    "LogchainError",
    "GoParseError",
    "RenderError",
    "RewriteError",
    "ConfigError",
]


class LogchainError(Exception):
    """Base exception for all logchain errors."""

    def __init__(self, message: str, loc: Optional[SourceLoc] = None) -> None:
        super().__init__(message)
        self.message = message
        self.loc = loc

    def __str__(self) -> str:
        if self.loc is not None:
            return f"{self.loc}: {self.message}"
        return self.message


class GoParseError(LogchainError):
    """Raised when tree-sitter reports syntax errors in a Go file."""


class RenderError(LogchainError):
    """Raised when a (possibly rewritten) tree cannot be serialised."""


class RewriteError(LogchainError):
    """Raised when the rewrite driver detects an internal inconsistency."""


class ConfigError(LogchainError):
    """Raised for an invalid :class:`~logchain.config.MigrationConfig`."""

    def __init__(self, problems: List[str]) -> None:
        super().__init__("invalid configuration: " + "; ".join(problems))
        self.problems = problems
