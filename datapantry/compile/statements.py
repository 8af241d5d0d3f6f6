"""The four statement kinds: SELECT, INSERT, UPDATE and DELETE.

Each class adds its own clause methods on top of
:class:`~datapantry.compile.builder.Statement`.  Clause methods return the
statement itself so calls chain::

    rows = await (
        db.select("x", "y")
        .from_("Pixels")
        .where(eq("x", 3))
        .or_where(eq("y", 4))
        .order_by("x", "DESC")
        .limit(10)
    )

WHERE chaining
--------------
The first ``where()`` / ``or_where()`` opens the clause with ``WHERE``;
later calls join with ``AND`` / ``OR`` respectively, left to right.  No
parentheses are added, so SQL precedence applies (``AND`` binds tighter
than ``OR``): ``.where(a).or_where(b).where(c)`` means ``a OR (b AND c)``.
Group conditions yourself when that is not what you want.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Self

from datapantry.compile.base import PLACEHOLDER, CompiledSQL, quote_identifier
from datapantry.compile.builder import Row, Statement
from datapantry.compile.conditions import Condition
from datapantry.errors import InvalidArgumentError, MalformedStatementError, RemoteQueryError

if TYPE_CHECKING:
    from datapantry.execute.base import Executor

#: Head that replaces ``SELECT <cols>`` in :meth:`SelectStatement.count`.
COUNT_HEAD = "SELECT COUNT(*) as count"

_DIRECTIONS = ("ASC", "DESC")


def _identifier(name: str, argument: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError(
            f"{argument} must be a non-empty string, got {name!r}.", argument=argument
        )
    return quote_identifier(name)


def _non_negative(n: int, argument: str) -> int:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidArgumentError(
            f"{argument} must be a non-negative integer, got {n!r}.", argument=argument
        )
    return n


class _Filterable(Statement):
    """Adds ``where`` / ``or_where`` to a statement kind."""

    def where(self, condition: Condition) -> Self:
        """Add ``condition``, joined to earlier conditions with ``AND``."""
        return self._add_condition("AND", condition)

    def or_where(self, condition: Condition) -> Self:
        """Add ``condition``, joined to earlier conditions with ``OR``."""
        return self._add_condition("OR", condition)

    def _add_condition(self, connective: str, condition: Condition) -> Self:
        if not isinstance(condition, Condition):
            raise InvalidArgumentError(
                f"Expected a Condition (e.g. eq('col', value)), got {type(condition).__name__}.",
                argument="condition",
            )
        keyword = connective if self._has_where else "WHERE"
        self._append("where", f" {keyword} {condition.sql}", condition.params)
        self._has_where = True
        return self


class SelectStatement(_Filterable):
    """``SELECT <cols> [FROM] [JOIN…] [WHERE…] [ORDER BY] [LIMIT] [OFFSET]``.

    Args:
        executor: Executor that runs the statement.
        columns: Column names or expressions, rendered verbatim.  ``*``
            when empty.
    """

    kind = "select"
    CLAUSE_RANKS = {"from": 1, "join": 2, "where": 3, "order_by": 4, "limit": 5, "offset": 6}
    SINGLE_USE = frozenset({"from", "order_by", "limit", "offset"})

    def __init__(self, executor: Executor, columns: Sequence[str] = ()) -> None:
        for col in columns:
            if not isinstance(col, str) or not col:
                raise InvalidArgumentError(
                    f"Selected columns must be non-empty strings, got {col!r}.",
                    argument="columns",
                )
        cols = ", ".join(columns) if columns else "*"
        super().__init__(executor, head=f"SELECT {cols}")
        self._limit: int | None = None
        self._offset = 0

    def from_(self, table: str) -> Self:
        return self._append("from", f" FROM {_identifier(table, 'table')}")

    def join(self, table: str, on: str | Condition) -> Self:
        """Add an ``INNER JOIN``.  ``on`` is raw SQL or a bound Condition."""
        return self._join("INNER", table, on)

    def left_join(self, table: str, on: str | Condition) -> Self:
        return self._join("LEFT", table, on)

    def _join(self, join_type: str, table: str, on: str | Condition) -> Self:
        quoted = _identifier(table, "table")
        if isinstance(on, Condition):
            return self._append("join", f" {join_type} JOIN {quoted} ON {on.sql}", on.params)
        if not isinstance(on, str) or not on.strip():
            raise InvalidArgumentError(
                "Join condition must be a non-empty string or a Condition.", argument="on"
            )
        if PLACEHOLDER in on:
            raise InvalidArgumentError(
                "Raw join conditions cannot bind values; pass a Condition instead.",
                argument="on",
            )
        return self._append("join", f" {join_type} JOIN {quoted} ON {on}")

    def order_by(self, column: str, direction: str = "ASC") -> Self:
        quoted = _identifier(column, "column")
        normalized = direction.upper() if isinstance(direction, str) else direction
        if normalized not in _DIRECTIONS:
            raise InvalidArgumentError(
                f"Sort direction must be 'ASC' or 'DESC', got {direction!r}.",
                argument="direction",
            )
        return self._append("order_by", f" ORDER BY {quoted} {normalized}")

    def limit(self, n: int) -> Self:
        self._append("limit", f" LIMIT {_non_negative(n, 'limit')}")
        self._limit = n
        return self

    def offset(self, n: int) -> Self:
        self._append("offset", f" OFFSET {_non_negative(n, 'offset')}")
        self._offset = n
        return self

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    async def first(self) -> Row | None:
        """Run the statement and return the first row, or ``None`` if empty."""
        rows = await self.execute()
        return rows[0] if rows else None

    def count_statement(self) -> CompiledSQL:
        """Return the ``SELECT COUNT(*) as count FROM …`` form of this statement.

        The column list is replaced; every later clause and all bound
        parameters are kept.  The aggregate is a single row, so an OFFSET
        past it or a ``LIMIT 0`` would leave nothing to count.

        Raises:
            MalformedStatementError: If the statement has no FROM clause,
                has a positive OFFSET, or has ``LIMIT 0``.
        """
        if "from" not in self._seen:
            raise MalformedStatementError(
                "count() requires a FROM clause.", clause="from"
            )
        if self._offset > 0:
            raise MalformedStatementError(
                f"count() cannot run with OFFSET {self._offset}; the count is a single row.",
                clause="offset",
            )
        if self._limit == 0:
            raise MalformedStatementError(
                "count() cannot run with LIMIT 0; the count is a single row.", clause="limit"
            )
        return CompiledSQL(
            sql=COUNT_HEAD + "".join(self._clauses), params=self.params, kind=self.kind
        )

    async def count(self) -> int:
        """Run the COUNT form of this statement and return the count."""
        compiled = self.count_statement()
        self._claim()
        rows = await self._executor.execute(compiled.sql, compiled.params)
        if not rows:
            raise RemoteQueryError("COUNT query returned no rows.")
        if "count" not in rows[0]:
            raise RemoteQueryError("COUNT query returned no 'count' column.")
        return int(rows[0]["count"])


class InsertStatement(Statement):
    """``INSERT INTO "table" ("a", "b") VALUES (?, ?), …``.

    Nothing is rendered until :meth:`values` is called.
    """

    kind = "insert"
    CLAUSE_RANKS = {"values": 1}
    SINGLE_USE = frozenset({"values"})
    REQUIRED = ("values",)

    def __init__(self, executor: Executor, table: str) -> None:
        super().__init__(executor)
        self._table = _identifier(table, "table")

    @property
    def table(self) -> str:
        return self._table

    def values(self, data: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> Self:
        """Add one row (a mapping) or several rows (a sequence of mappings).

        The column list comes from the first row's keys.  Every other row
        must have exactly the same keys; values are bound row by row in that
        column order.

        Raises:
            MalformedStatementError: If no rows are given.
            InvalidArgumentError: If a row is not a mapping, the first row
                is empty, or a row's keys differ from the first row's.
        """
        if isinstance(data, Mapping):
            rows = [data]
        elif isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
            rows = list(data)
        else:
            raise InvalidArgumentError(
                f"values() expects a mapping or a sequence of mappings, "
                f"got {type(data).__name__}.",
                argument="data",
            )
        if not rows:
            raise MalformedStatementError("values() requires at least one row.", clause="values")
        for row in rows:
            if not isinstance(row, Mapping):
                raise InvalidArgumentError(
                    f"Each row must be a mapping, got {type(row).__name__}.", argument="data"
                )
        columns = list(rows[0])
        if not columns:
            raise InvalidArgumentError("The first row has no columns.", argument="data")
        expected = set(columns)
        for index, row in enumerate(rows[1:], start=1):
            if set(row) != expected:
                raise InvalidArgumentError(
                    f"Row {index} has columns {sorted(row)}; expected {sorted(expected)}.",
                    argument="data",
                )

        column_sql = ", ".join(_identifier(col, "column") for col in columns)
        group = "(" + ", ".join(PLACEHOLDER for _ in columns) + ")"
        groups = ", ".join(group for _ in rows)
        params = [row[col] for row in rows for col in columns]
        return self._append(
            "values", f"INSERT INTO {self._table} ({column_sql}) VALUES {groups}", params
        )


class UpdateStatement(_Filterable):
    """``UPDATE "table" SET "a" = ?, … [WHERE…]``."""

    kind = "update"
    CLAUSE_RANKS = {"set": 1, "where": 2}
    SINGLE_USE = frozenset({"set"})
    REQUIRED = ("set",)

    def __init__(self, executor: Executor, table: str) -> None:
        super().__init__(executor, head=f"UPDATE {_identifier(table, 'table')}")

    def set(self, data: Mapping[str, Any]) -> Self:
        """Assign each key of ``data`` in iteration order."""
        if not isinstance(data, Mapping) or not data:
            raise InvalidArgumentError(
                "set() requires a non-empty mapping of column -> value.", argument="data"
            )
        assignments = ", ".join(
            f"{_identifier(col, 'column')} = {PLACEHOLDER}" for col in data
        )
        return self._append("set", f" SET {assignments}", data.values())


class DeleteStatement(_Filterable):
    """``DELETE FROM "table" [WHERE…]``."""

    kind = "delete"
    CLAUSE_RANKS = {"from": 1, "where": 2}
    SINGLE_USE = frozenset({"from"})
    REQUIRED = ("from",)

    def __init__(self, executor: Executor) -> None:
        super().__init__(executor, head="DELETE")

    def from_(self, table: str) -> Self:
        return self._append("from", f" FROM {_identifier(table, 'table')}")
