"""Shared statement machinery: clause grammar, bound params, deferred execution.

``Statement`` is the common base of the four statement kinds in
:mod:`datapantry.compile.statements`.  It owns

* the accumulated SQL (a fixed head plus appended clause fragments),
* the positional parameter list, kept aligned with the ``?`` placeholders,
* the clause-order state machine, and
* the execution contract.

Clause grammar
--------------
Every subclass declares a rank for each of its clauses.  Clauses are
append-only: a clause may not follow one with a higher rank, and single-use
clauses may appear once.  Violations raise
:class:`~datapantry.errors.MalformedStatementError` at call time, so a
statement can never be assembled in an order SQL would reject.

Deferred execution
------------------
A statement is awaitable.  Awaiting it (or calling :meth:`Statement.execute`)
hands the final SQL and parameters to the executor exactly once; the
statement is then consumed and any later clause call or execution raises
:class:`~datapantry.errors.StatementConsumedError`.  To attach callbacks,
wrap it in a task: ``asyncio.ensure_future(statement)``.

A statement is owned by the code that created it and must not be mutated
from several tasks at once.
"""
from __future__ import annotations

from collections.abc import Generator, Iterable
from typing import TYPE_CHECKING, Any, ClassVar, Self

from datapantry.compile.base import CompiledSQL
from datapantry.errors import MalformedStatementError, StatementConsumedError

if TYPE_CHECKING:
    from datapantry.execute.base import Executor

Row = dict[str, Any]


class Statement:
    """Base class for all statement kinds.

    Args:
        executor: Executor that runs the finished statement.
        head: The kind-specific seed fragment (e.g. ``'SELECT *'``).
    """

    kind: ClassVar[str] = "statement"

    #: Clause name -> rank.  Clauses must be added in non-decreasing rank.
    CLAUSE_RANKS: ClassVar[dict[str, int]] = {}

    #: Clauses that may appear at most once.
    SINGLE_USE: ClassVar[frozenset[str]] = frozenset()

    #: Clauses that must be present before the statement can run.
    REQUIRED: ClassVar[tuple[str, ...]] = ()

    def __init__(self, executor: Executor, head: str = "") -> None:
        self._executor = executor
        self._head = head
        self._clauses: list[str] = []
        self._params: list[Any] = []
        self._seen: set[str] = set()
        self._stage = 0
        self._has_where = False
        self._consumed = False

    # ------------------------------------------------------------------
    # Accumulated state
    # ------------------------------------------------------------------

    @property
    def sql(self) -> str:
        """The SQL text accumulated so far."""
        return self._head + "".join(self._clauses)

    @property
    def params(self) -> tuple[Any, ...]:
        """Bound parameters in placeholder order."""
        return tuple(self._params)

    @property
    def has_where(self) -> bool:
        """Whether a WHERE clause has been opened."""
        return self._has_where

    @property
    def consumed(self) -> bool:
        """Whether the statement has already been handed to the executor."""
        return self._consumed

    def compile(self) -> CompiledSQL:
        """Return the statement as :class:`CompiledSQL` without executing it.

        Raises:
            MalformedStatementError: If a required clause is missing.
        """
        for clause in self.REQUIRED:
            if clause not in self._seen:
                raise MalformedStatementError(
                    f"{self.kind.upper()} statement requires {clause}() before it can run.",
                    clause=clause,
                )
        return CompiledSQL(sql=self.sql, params=self.params, kind=self.kind)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self) -> list[Row]:
        """Run the statement and return the result rows."""
        compiled = self._claim()
        return await self._executor.execute(compiled.sql, compiled.params)

    def __await__(self) -> Generator[Any, None, list[Row]]:
        return self.execute().__await__()

    def _claim(self) -> CompiledSQL:
        """Compile and mark the statement consumed; the one-shot gate."""
        if self._consumed:
            raise StatementConsumedError(self.kind.upper())
        compiled = self.compile()
        self._consumed = True
        return compiled

    # ------------------------------------------------------------------
    # Clause plumbing for subclasses
    # ------------------------------------------------------------------

    def _append(self, clause: str, fragment: str, params: Iterable[Any] = ()) -> Self:
        self._enter(clause)
        self._clauses.append(fragment)
        self._params.extend(params)
        return self

    def _enter(self, clause: str) -> None:
        if self._consumed:
            raise StatementConsumedError(self.kind.upper())
        rank = self.CLAUSE_RANKS[clause]
        if clause in self.SINGLE_USE and clause in self._seen:
            raise MalformedStatementError(
                f"{clause}() may only be called once on a {self.kind.upper()} statement.",
                clause=clause,
            )
        if rank < self._stage:
            later = sorted(c for c in self._seen if self.CLAUSE_RANKS[c] > rank)
            raise MalformedStatementError(
                f"{clause}() cannot follow {', '.join(c + '()' for c in later)} "
                f"on a {self.kind.upper()} statement.",
                clause=clause,
            )
        self._stage = rank
        self._seen.add(clause)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} sql={self.sql!r} params={self.params!r}>"
