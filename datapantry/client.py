"""The database handle: statement entry points, raw SQL and schema introspection."""
from __future__ import annotations

from typing import Any

from datapantry.compile.builder import Row
from datapantry.compile.statements import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    UpdateStatement,
)
from datapantry.config import DataPantrySettings
from datapantry.errors import InvalidArgumentError
from datapantry.execute.base import Executor
from datapantry.execute.http import HttpExecutor
from datapantry.schema.catalog import CatalogFactory, CatalogIntrospector, SQLiteCatalog
from datapantry.schema.models import SchemaDescription
from datapantry.schema.normalizer import SchemaNormalizer


class DataPantryDatabase:
    """A remote database, reached through an :class:`Executor`.

    Every statement built here shares the database's executor, but each
    statement object is independent and single-use.

    Args:
        executor: Executor that runs statements.
        catalog: Catalog used by :meth:`schema`.  Defaults to
            :class:`SQLiteCatalog` over the same executor.
    """

    def __init__(self, executor: Executor, catalog: CatalogIntrospector | None = None) -> None:
        self._executor = executor
        self._catalog = catalog if catalog is not None else SQLiteCatalog(executor)

    @classmethod
    def from_settings(cls, settings: DataPantrySettings | None = None) -> DataPantryDatabase:
        """Build a database backed by the HTTP API.

        Args:
            settings: Connection settings; read from the environment when
                omitted.

        Raises:
            InvalidArgumentError: If no API key is configured or the engine
                has no registered catalog.
        """
        settings = settings if settings is not None else DataPantrySettings()
        if not settings.api_key:
            raise InvalidArgumentError(
                "No API key configured. Pass api_key or set DATAPANTRY_API_KEY.",
                argument="api_key",
            )
        executor = HttpExecutor(settings.api_key, settings.base_url, timeout=settings.timeout)
        return cls(executor, CatalogFactory.create(settings.engine, executor))

    @property
    def executor(self) -> Executor:
        return self._executor

    def close(self) -> None:
        """Close the executor, e.g. the HTTP session created by :func:`database`."""
        self._executor.close()

    def __enter__(self) -> DataPantryDatabase:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    async def sql(self, query: str, *params: Any) -> list[Row]:
        """Run raw SQL with positional ``?`` parameters."""
        return await self._executor.execute(query, params)

    async def schema(self) -> SchemaDescription:
        """Introspect the remote database; see :class:`SchemaNormalizer`."""
        return await SchemaNormalizer(self._catalog).describe()

    # ------------------------------------------------------------------
    # Statement entry points
    # ------------------------------------------------------------------

    def select(self, *columns: str) -> SelectStatement:
        return SelectStatement(self._executor, columns)

    def insert(self, table: str) -> InsertStatement:
        return InsertStatement(self._executor, table)

    def update(self, table: str) -> UpdateStatement:
        return UpdateStatement(self._executor, table)

    def delete(self) -> DeleteStatement:
        return DeleteStatement(self._executor)
