"""Test fixtures: sample DDL, a local SQLite engine, and a recording executor."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from datapantry.execute.base import Executor

_FIXTURES_DIR = Path(__file__).parent

#: The schema() result expected for ddl_pixels.sql.
PIXELS_SCHEMA: dict[str, Any] = {
    "tables": [
        {
            "name": "Pixels",
            "columns": [
                {
                    "name": "id",
                    "datatype": "number",
                    "constraint": "primary",
                    "isRequired": True,
                    "foreignKey": None,
                },
                {
                    "name": "x",
                    "datatype": "number",
                    "constraint": "none",
                    "isRequired": False,
                    "foreignKey": None,
                },
                {
                    "name": "y",
                    "datatype": "number",
                    "constraint": "none",
                    "isRequired": False,
                    "foreignKey": None,
                },
                {
                    "name": "color",
                    "datatype": "string",
                    "constraint": "none",
                    "isRequired": False,
                    "foreignKey": None,
                },
            ],
        }
    ]
}


def load_ddl(name: Literal["pixels", "bookshop"] = "pixels") -> str:
    """Return the DDL script ``ddl_<name>.sql``."""
    return (_FIXTURES_DIR / f"ddl_{name}.sql").read_text()


def make_sqlite_engine(*ddl_names: Literal["pixels", "bookshop"]) -> Engine:
    """Return an in-memory SQLite engine with the named DDL scripts applied.

    ``StaticPool`` keeps a single connection, so every statement sees the
    same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        for name in ddl_names:
            for statement in load_ddl(name).split(";"):
                if statement.strip():
                    conn.exec_driver_sql(statement)
    return engine


class RecordingExecutor(Executor):
    """Executor stub that records every call and replays canned results.

    Args:
        results: Row lists returned by successive calls; ``[]`` once
            exhausted.
        error: Exception raised by every call, after recording it.
    """

    def __init__(
        self,
        results: Sequence[list[dict[str, Any]]] = (),
        error: Exception | None = None,
    ) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._results = list(results)
        self.error = error

    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        self.calls.append((sql, tuple(params)))
        if self.error is not None:
            raise self.error
        return self._results.pop(0) if self._results else []
