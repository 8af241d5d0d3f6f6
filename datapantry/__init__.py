"""datapantry – query builder and client for DataPantry databases.

Build statements fluently; values are always bound, never interpolated.

Public API
----------
``database``
    Create a :class:`DataPantryDatabase` backed by the HTTP API.

``eq``, ``ne``, ``gt``, ``gte``, ``lt``, ``lte``, ``like``, ``in_array``
    WHERE condition builders.

Example::

    import asyncio
    import datapantry
    from datapantry import eq, gt

    async def main():
        with datapantry.database("pk_live_...") as db:
            await use(db)

    async def use(db):
        red = await db.select("x", "y").from_("Pixels").where(eq("color", "red"))
        pixel = await db.select().from_("Pixels").where(eq("id", 7)).first()
        total = await db.select().from_("Pixels").where(gt("x", 10)).count()

        await db.insert("Pixels").values([{"x": 1, "y": 2}, {"x": 3, "y": 4}])
        await db.update("Pixels").set({"color": "blue"}).where(eq("id", 7))
        await db.delete().from_("Pixels").where(eq("id", 7))

        rows = await db.sql("SELECT * FROM Pixels WHERE x = ? AND y = ?", 3, 4)
        schema = await db.schema()

    asyncio.run(main())

Any :class:`~datapantry.execute.base.Executor` can stand in for the HTTP
API, e.g. ``DataPantryDatabase(SQLAlchemyExecutor.from_url("sqlite:///local.db"))``.
"""

from __future__ import annotations

from datapantry.client import DataPantryDatabase
from datapantry.compile.base import CompiledSQL
from datapantry.compile.conditions import Condition, eq, gt, gte, in_array, like, lt, lte, ne
from datapantry.compile.statements import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    UpdateStatement,
)
from datapantry.config import DataPantrySettings
from datapantry.errors import (
    DataPantryError,
    InvalidArgumentError,
    MalformedStatementError,
    RemoteQueryError,
    StatementConsumedError,
)
from datapantry.execute import Executor, HttpExecutor, SQLAlchemyExecutor
from datapantry.schema import (
    CatalogFactory,
    CatalogIntrospector,
    ColumnDescription,
    ForeignKeyReference,
    SchemaDescription,
    SQLiteCatalog,
    TableDescription,
)

__version__ = "0.1.0"

__all__ = [
    # Entry point
    "database",
    "DataPantryDatabase",
    "DataPantrySettings",
    # Conditions
    "Condition",
    "eq",
    "ne",
    "gt",
    "gte",
    "lt",
    "lte",
    "like",
    "in_array",
    # Statements
    "CompiledSQL",
    "SelectStatement",
    "InsertStatement",
    "UpdateStatement",
    "DeleteStatement",
    # Executors
    "Executor",
    "HttpExecutor",
    "SQLAlchemyExecutor",
    # Schema
    "CatalogFactory",
    "CatalogIntrospector",
    "SQLiteCatalog",
    "SchemaDescription",
    "TableDescription",
    "ColumnDescription",
    "ForeignKeyReference",
    # Errors
    "DataPantryError",
    "RemoteQueryError",
    "MalformedStatementError",
    "StatementConsumedError",
    "InvalidArgumentError",
]


def database(
    api_key: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
) -> DataPantryDatabase:
    """Create a database handle for the DataPantry HTTP API.

    Arguments left as ``None`` fall back to ``DATAPANTRY_*`` environment
    variables (or a ``.env`` file), then to the defaults in
    :class:`DataPantrySettings`.

    Args:
        api_key: API key for the database.
        base_url: Service root, e.g. ``'https://staging.datapantry.org'``.
        timeout: Per-request timeout in seconds.

    Returns:
        A :class:`DataPantryDatabase` using an :class:`HttpExecutor`.  Close
        it (or use it as a context manager) to release the HTTP session.

    Raises:
        InvalidArgumentError: If no API key is given or configured.
    """
    overrides = {
        key: value
        for key, value in (("api_key", api_key), ("base_url", base_url), ("timeout", timeout))
        if value is not None
    }
    return DataPantryDatabase.from_settings(DataPantrySettings(**overrides))
