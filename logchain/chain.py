"""logchain/chain.py – Chain Extractor.

Analyses one zerolog call chain::

    log.Error().Err(err).Str("ctx", "db").Msg("query failed")
    └─root──┘ └─field─┘ └────field────┘ └──terminator──┘

The matcher hands over the receiver of the terminator (the innermost call
``log.Error().Err(err).Str("ctx", "db")``) together with the terminator's
name and arguments.  The extractor walks the receivers from the outermost
call inward until it reaches the level-establishing call on the logger
handle, converting every field link on the way.

The result is either an :class:`ExtractedEntry` or a :class:`NoMatch`.
Not matching is the common case for ordinary code and is never raised.

Semantic narrowing
------------------
* ``Fatal`` and ``Panic`` become ``slog.LevelError``.  The exit / panic
  that zerolog performs after writing the event is **not** reproduced.
* ``Msgf`` keeps its format string only; the format arguments are
  dropped because ``LogAttrs`` has no formatting step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final, List, Mapping, Optional, Sequence, Tuple, Union

from logchain import ast as A
from logchain.config import DEFAULT_CONFIG, MigrationConfig
from logchain.fields import convert_field

__all__ = [
    "Level",
    "SlogLevel",
    "Terminator",
    "ExtractedEntry",
    "NoMatch",
    "target_level",
    "resolve_message",
    "extract",
]

logger = logging.getLogger(__name__)


class Level(Enum):
    """Level-establishing methods on the zerolog logger."""

    TRACE = "Trace"
    DEBUG = "Debug"
    INFO = "Info"
    WARN = "Warn"
    ERROR = "Error"
    FATAL = "Fatal"
    PANIC = "Panic"

    @classmethod
    def lookup(cls, name: str) -> Optional[Level]:
        try:
            return cls(name)
        except ValueError:
            return None


class SlogLevel(Enum):
    """Level constants emitted in the ``log/slog`` package."""

    TRACE = "LevelTrace"
    DEBUG = "LevelDebug"
    INFO = "LevelInfo"
    WARN = "LevelWarn"
    ERROR = "LevelError"


_LEVEL_MAP: Final[Mapping[Level, SlogLevel]] = MappingProxyType({
    Level.TRACE: SlogLevel.TRACE,
    Level.DEBUG: SlogLevel.DEBUG,
    Level.INFO: SlogLevel.INFO,
    Level.WARN: SlogLevel.WARN,
    Level.ERROR: SlogLevel.ERROR,
    Level.FATAL: SlogLevel.ERROR,
    Level.PANIC: SlogLevel.ERROR,
})


def target_level(name: str) -> SlogLevel:
    """Map a zerolog level name to its slog constant.

    Unknown names fall back to ``LevelInfo``.
    """
    level = Level.lookup(name)
    if level is None:
        return SlogLevel.INFO
    return _LEVEL_MAP[level]


class Terminator(Enum):
    """Calls that finalise and emit a zerolog event."""

    MSG = "Msg"
    MSGF = "Msgf"
    SEND = "Send"

    @classmethod
    def lookup(cls, name: str) -> Optional[Terminator]:
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class ExtractedEntry:
    """Level name, message expression and converted fields of one chain."""

    level: str
    message: A.Expr
    fields: Tuple[A.CallExpr, ...] = ()

    @property
    def slog_level(self) -> SlogLevel:
        return target_level(self.level)


@dataclass(frozen=True, slots=True)
class NoMatch:
    """The chain does not fit the supported pattern."""

    reason: str

    def __bool__(self) -> bool:
        return False


ExtractResult = Union[ExtractedEntry, NoMatch]


def resolve_message(
    terminator: Terminator,
    args: Sequence[A.Expr],
    config: MigrationConfig = DEFAULT_CONFIG,
) -> Union[A.Expr, NoMatch]:
    """Pick the message expression for *terminator*."""
    if terminator is Terminator.SEND:
        if args:
            return NoMatch("Send called with arguments")
        return A.string_lit(config.default_message)
    if not args:
        return NoMatch(f"{terminator.value} called without a message")
    if terminator is Terminator.MSGF and len(args) > 1:
        logger.debug("Msgf: dropping %d format argument(s)", len(args) - 1)
    return args[0]


def extract(
    inner: A.Expr,
    terminator: Terminator,
    terminator_args: Sequence[A.Expr],
    config: MigrationConfig = DEFAULT_CONFIG,
) -> ExtractResult:
    """Extract level, message and fields from the chain ending in *inner*.

    Parameters
    ----------
    inner:
        Receiver of the terminator call, i.e. the rest of the chain.
    terminator:
        Which terminator closed the chain.
    terminator_args:
        Arguments passed to the terminator.
    """
    message = resolve_message(terminator, terminator_args, config)
    if isinstance(message, NoMatch):
        return message

    # The walk visits links right-to-left; prepending keeps source order.
    fields: List[A.CallExpr] = []
    current = inner
    while True:
        if not isinstance(current, A.CallExpr):
            return NoMatch(f"chain link is a {current.shape.value}, not a call")
        if current.ellipsis:
            return NoMatch("chain link spreads a variadic argument")
        fun = current.fun
        if not isinstance(fun, A.SelectorExpr):
            return NoMatch("chain link is not a method call")

        name = fun.sel.name
        if Level.lookup(name) is not None:
            if not isinstance(fun.x, A.Ident):
                return NoMatch(f"{name} is not called on a logger identifier")
            return ExtractedEntry(level=name, message=message, fields=tuple(fields))

        attr = convert_field(name, current.args, config)
        if attr is None:
            return NoMatch(f"unsupported field {name} with {len(current.args)} argument(s)")
        fields.insert(0, attr)
        current = fun.x
