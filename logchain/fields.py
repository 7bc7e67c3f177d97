"""logchain/fields.py – Field Mapper.

Maps one zerolog field link, e.g. ``.Int8("x", i8)``, to the ``slog.Attr``
constructor call that attaches the same key/value pair, e.g.
``slog.Int("x", int(i8))``.

slog only exposes ``Int``, ``Int64``, ``Uint64`` and ``Float64`` for
numbers, so the narrower zerolog widths are widened with an explicit Go
conversion around the value.  The widening never loses range.

Table
-----
==============================  ============  ==========================
zerolog method                  slog function value argument
==============================  ============  ==========================
Bool Float64 Int Int64 Time     same name     unchanged
Dur / Str                       Duration /    unchanged
                                String
Float32                         Float64       ``float64(v)``
Int8 Int16 Int32                Int           ``int(v)``
Uint64                          UInt64        unchanged
Uint Uint8 Uint16 Uint32        Uint64        ``uint64(v)``
Err                             Any           key ``"err"`` prepended
(other, two arguments)          Any           unchanged
==============================  ============  ==========================

Anything else is not recognised and makes the whole chain unconvertible.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping, Optional, Sequence

from logchain import ast as A
from logchain.config import DEFAULT_CONFIG, MigrationConfig

__all__ = [
    "FieldMethod",
    "FieldRule",
    "FIELD_RULES",
    "ERROR_METHOD",
    "FALLBACK_TARGET",
    "convert_field",
]


class FieldMethod(Enum):
    """zerolog ``*Event`` methods with a dedicated slog counterpart."""

    BOOL = "Bool"
    DUR = "Dur"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    STR = "Str"
    INT = "Int"
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    UINT = "Uint"
    UINT8 = "Uint8"
    UINT16 = "Uint16"
    UINT32 = "Uint32"
    UINT64 = "Uint64"
    TIME = "Time"


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Target slog function and optional conversion applied to the value."""

    target: str
    conversion: Optional[str] = None


FIELD_RULES: Final[Mapping[FieldMethod, FieldRule]] = MappingProxyType({
    FieldMethod.BOOL: FieldRule("Bool"),
    FieldMethod.DUR: FieldRule("Duration"),
    FieldMethod.FLOAT32: FieldRule("Float64", conversion="float64"),
    FieldMethod.FLOAT64: FieldRule("Float64"),
    FieldMethod.STR: FieldRule("String"),
    FieldMethod.INT: FieldRule("Int"),
    FieldMethod.INT8: FieldRule("Int", conversion="int"),
    FieldMethod.INT16: FieldRule("Int", conversion="int"),
    FieldMethod.INT32: FieldRule("Int", conversion="int"),
    FieldMethod.INT64: FieldRule("Int64"),
    FieldMethod.UINT: FieldRule("Uint64", conversion="uint64"),
    FieldMethod.UINT8: FieldRule("Uint64", conversion="uint64"),
    FieldMethod.UINT16: FieldRule("Uint64", conversion="uint64"),
    FieldMethod.UINT32: FieldRule("Uint64", conversion="uint64"),
    FieldMethod.UINT64: FieldRule("UInt64"),
    FieldMethod.TIME: FieldRule("Time"),
})

#: ``Err(err)`` takes the value only; the key is synthesised.
ERROR_METHOD: Final[str] = "Err"

#: Untyped attribute used for ``Err`` and for unknown two-argument methods.
FALLBACK_TARGET: Final[str] = "Any"


def _attr(config: MigrationConfig, target: str, args: Sequence[A.Expr]) -> A.CallExpr:
    return A.call(A.selector(config.target_package, target), *args)


def convert_field(
    name: str,
    args: Sequence[A.Expr],
    config: MigrationConfig = DEFAULT_CONFIG,
) -> Optional[A.CallExpr]:
    """Convert one field link to a slog attribute call.

    Returns ``None`` when *name*/*args* is not a recognised field shape.
    Argument nodes are reused, not copied.
    """
    if name == ERROR_METHOD:
        if len(args) != 1:
            return None
        return _attr(config, FALLBACK_TARGET, (A.string_lit(config.error_key), args[0]))

    if len(args) != 2:
        return None

    try:
        method = FieldMethod(name)
    except ValueError:
        # Unknown methods such as Interface or Strs keep their key/value
        # pair as an untyped attribute.
        return _attr(config, FALLBACK_TARGET, args)

    rule = FIELD_RULES[method]
    key, value = args
    if rule.conversion is not None:
        value = A.call(A.ident(rule.conversion), value)
    return _attr(config, rule.target, (key, value))
