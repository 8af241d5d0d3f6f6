"""Tests for deferred execution: awaiting, first(), count() and the one-shot gate."""

from __future__ import annotations

import asyncio

import pytest

from datapantry import DataPantryDatabase
from datapantry.compile.conditions import eq, gt
from datapantry.errors import (
    MalformedStatementError,
    RemoteQueryError,
    StatementConsumedError,
)
from tests.fixtures import RecordingExecutor


def _db(*results, error=None) -> tuple[DataPantryDatabase, RecordingExecutor]:
    recorder = RecordingExecutor(results=results, error=error)
    return DataPantryDatabase(recorder), recorder


# ---------------------------------------------------------------------------
# Awaiting a statement
# ---------------------------------------------------------------------------


def test_await_sends_sql_and_params_once():
    db, recorder = _db([{"x": 3, "y": 4}])

    async def run():
        return await db.select("x", "y").from_("Pixels").where(eq("x", 3)).where(eq("y", 4))

    rows = asyncio.run(run())
    assert rows == [{"x": 3, "y": 4}]
    assert recorder.calls == [
        ('SELECT x, y FROM "Pixels" WHERE "x" = ? AND "y" = ?', (3, 4)),
    ]


def test_second_await_is_rejected():
    db, recorder = _db([{"id": 1}], [{"id": 2}])
    stmt = db.select().from_("Pixels")

    async def run():
        await stmt
        await stmt

    with pytest.raises(StatementConsumedError) as exc_info:
        asyncio.run(run())
    assert len(recorder.calls) == 1
    assert exc_info.value.clause == "execute"
    assert stmt.consumed


def test_execute_after_await_is_rejected():
    db, recorder = _db()
    stmt = db.delete().from_("Pixels")
    asyncio.run(stmt.execute())
    with pytest.raises(StatementConsumedError):
        asyncio.run(stmt.execute())
    assert len(recorder.calls) == 1


def test_clauses_after_execution_are_rejected():
    db, _ = _db()
    stmt = db.select().from_("Pixels")
    asyncio.run(stmt.execute())
    with pytest.raises(StatementConsumedError):
        stmt.where(eq("x", 1))
    with pytest.raises(StatementConsumedError):
        stmt.limit(1)


def test_building_performs_no_io():
    db, recorder = _db()
    stmt = db.update("Pixels").set({"color": "red"}).where(eq("id", 1))
    assert recorder.calls == []
    assert not stmt.consumed


def test_incomplete_statement_is_not_consumed():
    db, recorder = _db()
    stmt = db.insert("Pixels")

    with pytest.raises(MalformedStatementError):
        asyncio.run(stmt.execute())
    assert recorder.calls == []
    assert not stmt.consumed

    stmt.values({"x": 1, "y": 2})
    asyncio.run(stmt.execute())
    assert recorder.calls == [('INSERT INTO "Pixels" ("x", "y") VALUES (?, ?)', (1, 2))]


def test_executor_errors_propagate_unchanged():
    failure = RemoteQueryError("no such table: Nope", status_code=400)
    db, recorder = _db(error=failure)

    with pytest.raises(RemoteQueryError) as exc_info:
        asyncio.run(db.select().from_("Nope").execute())
    assert exc_info.value is failure
    assert len(recorder.calls) == 1


def test_failed_statement_stays_consumed():
    db, recorder = _db(error=RemoteQueryError())
    stmt = db.select().from_("Pixels")
    with pytest.raises(RemoteQueryError):
        asyncio.run(stmt.execute())
    with pytest.raises(StatementConsumedError):
        asyncio.run(stmt.execute())
    assert len(recorder.calls) == 1


def test_continuation_via_task_callback():
    db, _ = _db([{"id": 7}])
    seen: list = []

    async def run():
        task = asyncio.ensure_future(db.select().from_("Pixels").where(eq("id", 7)))
        task.add_done_callback(lambda t: seen.append(t.result()))
        await task
        await asyncio.sleep(0)

    asyncio.run(run())
    assert seen == [[{"id": 7}]]


def test_statements_run_concurrently_with_gather():
    db, recorder = _db([{"n": 1}], [{"n": 2}])

    async def run():
        return await asyncio.gather(
            db.select().from_("A"),
            db.select().from_("B"),
        )

    assert asyncio.run(run()) == [[{"n": 1}], [{"n": 2}]]
    assert [sql for sql, _ in recorder.calls] == ['SELECT * FROM "A"', 'SELECT * FROM "B"']


# ---------------------------------------------------------------------------
# first()
# ---------------------------------------------------------------------------


def test_first_returns_first_row():
    db, _ = _db([{"id": 1}, {"id": 2}])
    assert asyncio.run(db.select().from_("Pixels").first()) == {"id": 1}


def test_first_returns_none_when_empty():
    db, recorder = _db([])
    assert asyncio.run(db.select().from_("Pixels").where(eq("id", 99)).first()) is None
    assert recorder.calls[0][1] == (99,)


def test_first_consumes_statement():
    db, _ = _db()
    stmt = db.select().from_("Pixels")
    asyncio.run(stmt.first())
    with pytest.raises(StatementConsumedError):
        asyncio.run(stmt.first())


# ---------------------------------------------------------------------------
# count()
# ---------------------------------------------------------------------------


def test_count_sends_count_form():
    db, recorder = _db([{"count": 12}])
    n = asyncio.run(db.select("x", "y").from_("Pixels").where(gt("x", 10)).count())
    assert n == 12
    assert recorder.calls == [('SELECT COUNT(*) as count FROM "Pixels" WHERE "x" > ?', (10,))]


def test_count_coerces_to_int():
    db, _ = _db([{"count": "5"}])
    assert asyncio.run(db.select().from_("Pixels").count()) == 5


@pytest.mark.parametrize(
    "rows, message",
    [([], "no rows"), ([{"total": 3}], "no 'count' column")],
    ids=["no-rows", "no-count-column"],
)
def test_count_with_bad_remote_result_fails(rows, message):
    # A valid COUNT always yields one row, so anything else came from the remote.
    db, _ = _db(rows)
    with pytest.raises(RemoteQueryError) as exc_info:
        asyncio.run(db.select().from_("Pixels").count())
    assert message in exc_info.value.message


@pytest.mark.parametrize(
    "build, clause",
    [
        (lambda s: s.limit(10).offset(5), "offset"),
        (lambda s: s.offset(1), "offset"),
        (lambda s: s.limit(0), "limit"),
    ],
    ids=["limit-offset", "offset", "limit-zero"],
)
def test_count_that_would_skip_its_row_fails_before_io(build, clause):
    db, recorder = _db([{"count": 2}])
    stmt = build(db.select().from_("Pixels"))
    with pytest.raises(MalformedStatementError) as exc_info:
        asyncio.run(stmt.count())
    assert exc_info.value.clause == clause
    assert not isinstance(exc_info.value, RemoteQueryError)
    assert recorder.calls == []
    assert not stmt.consumed


def test_count_with_limit_and_zero_offset_runs():
    db, recorder = _db([{"count": 4}])
    n = asyncio.run(db.select().from_("Pixels").limit(10).offset(0).count())
    assert n == 4
    assert recorder.calls == [('SELECT COUNT(*) as count FROM "Pixels" LIMIT 10 OFFSET 0', ())]


def test_count_without_from_fails_before_io():
    db, recorder = _db()
    with pytest.raises(MalformedStatementError):
        asyncio.run(db.select("1").count())
    assert recorder.calls == []


def test_count_consumes_statement():
    db, recorder = _db([{"count": 1}])
    stmt = db.select().from_("Pixels")
    asyncio.run(stmt.count())
    with pytest.raises(StatementConsumedError):
        asyncio.run(stmt.execute())
    assert len(recorder.calls) == 1


# ---------------------------------------------------------------------------
# Raw SQL
# ---------------------------------------------------------------------------


def test_raw_sql_passes_params_positionally():
    db, recorder = _db([{"x": 3}])
    rows = asyncio.run(db.sql("SELECT * FROM Pixels WHERE x = ? AND y = ?", 3, 4))
    assert rows == [{"x": 3}]
    assert recorder.calls == [("SELECT * FROM Pixels WHERE x = ? AND y = ?", (3, 4))]


def test_raw_sql_without_params():
    db, recorder = _db()
    asyncio.run(db.sql("DELETE FROM Pixels"))
    assert recorder.calls == [("DELETE FROM Pixels", ())]
