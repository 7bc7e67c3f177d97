"""logchain/config.py — tuning knobs for the zerolog → slog migration."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from typing import Any, List

from logchain.errors import ConfigError

__all__ = ["MigrationConfig", "DEFAULT_CONFIG"]

_GO_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class MigrationConfig:
    """Names used when recognising zerolog chains and building slog calls."""

    source_import: str = "github.com/rs/zerolog/log"
    target_import: str = "log/slog"
    target_package: str = "slog"
    flat_function: str = "LogAttrs"
    # Placeholder for the context argument slog.LogAttrs requires; it is
    # emitted verbatim and never resolved from the enclosing scope.
    context_expr: str = "ctx"
    default_message: str = "zerolog event"
    error_key: str = "err"

    def validate(self) -> List[str]:
        """Return a list of validation problems (empty if valid)."""
        problems: List[str] = []
        for name in ("target_package", "flat_function", "context_expr"):
            value = getattr(self, name)
            if not _GO_IDENT.match(value):
                problems.append(f"{name} must be a Go identifier, got {value!r}")
        for name in ("source_import", "target_import"):
            if not getattr(self, name):
                problems.append(f"{name} must not be empty")
        if self.source_import == self.target_import:
            problems.append("source_import and target_import must differ")
        if not self.error_key:
            problems.append("error_key must not be empty")
        return problems

    @classmethod
    def from_args(cls, args: Any) -> MigrationConfig:
        """Build a config from an ``argparse`` namespace.

        Attributes that are missing or ``None`` keep their defaults.
        Raises :class:`ConfigError` when the result does not validate.
        """
        overrides = {}
        for f in fields(cls):
            value = getattr(args, f.name, None)
            if value is not None:
                overrides[f.name] = value
        config = replace(DEFAULT_CONFIG, **overrides)
        problems = config.validate()
        if problems:
            raise ConfigError(problems)
        return config


DEFAULT_CONFIG = MigrationConfig()
