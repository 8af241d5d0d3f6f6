"""Predicate builders for WHERE clauses.

Each builder quotes the column identifier and binds every operand as a
positional ``?`` parameter, so values are never interpolated into SQL text::

    from datapantry import eq, in_array

    eq("x", 3)                  # Condition('"x" = ?', (3,))
    in_array("id", [1, 2, 3])   # Condition('"id" IN (?, ?, ?)', (1, 2, 3))

Conditions are immutable and independent of any statement; the same
condition can be passed to several statements.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from typing import Any

from datapantry.compile.base import PLACEHOLDER, quote_identifier
from datapantry.errors import InvalidArgumentError

#: Fragment used for ``in_array`` with no values; matches no rows.
EMPTY_IN_FRAGMENT = "1 = 0"


@dataclass(frozen=True)
class Condition:
    """A SQL predicate fragment together with its bound values.

    Attributes:
        sql: Predicate text with one ``?`` per bound value.
        params: Bound values in placeholder order.
    """

    sql: str
    params: tuple[Any, ...] = ()


def _column(column: str) -> str:
    if not isinstance(column, str) or not column:
        raise InvalidArgumentError(
            f"Column name must be a non-empty string, got {column!r}.", argument="column"
        )
    return quote_identifier(column)


def _compare(column: str, op: str, value: Any) -> Condition:
    return Condition(f"{_column(column)} {op} {PLACEHOLDER}", (value,))


def eq(column: str, value: Any) -> Condition:
    return _compare(column, "=", value)


def ne(column: str, value: Any) -> Condition:
    return _compare(column, "!=", value)


def gt(column: str, value: Any) -> Condition:
    return _compare(column, ">", value)


def gte(column: str, value: Any) -> Condition:
    return _compare(column, ">=", value)


def lt(column: str, value: Any) -> Condition:
    return _compare(column, "<", value)


def lte(column: str, value: Any) -> Condition:
    return _compare(column, "<=", value)


def like(column: str, pattern: str) -> Condition:
    """``"column" LIKE ?`` with ``pattern`` bound as-is (wildcards included)."""
    return _compare(column, "LIKE", pattern)


def in_array(column: str, values: Sequence[Any]) -> Condition:
    """Build a membership test with one placeholder per value.

    An empty ``values`` sequence compiles to ``1 = 0`` instead of ``IN ()``,
    which many engines reject.

    Args:
        column: Column name.
        values: An ordered sequence (list, tuple, range, ...).  Strings,
            bytes, mappings and sets are rejected.

    Raises:
        InvalidArgumentError: If ``values`` is not an ordered sequence.
    """
    quoted = _column(column)
    if (
        isinstance(values, (str, bytes, bytearray, Mapping, Set))
        or not isinstance(values, Sequence)
    ):
        raise InvalidArgumentError(
            f"in_array() expects a sequence of values, got {type(values).__name__}.",
            argument="values",
        )
    if not values:
        return Condition(EMPTY_IN_FRAGMENT)
    placeholders = ", ".join(PLACEHOLDER for _ in values)
    return Condition(f"{quoted} IN ({placeholders})", tuple(values))
