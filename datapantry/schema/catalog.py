"""Catalog introspection: the three queries the schema normalizer needs.

A :class:`CatalogIntrospector` answers

* which user tables exist,
* which columns a table has (type, NOT NULL, primary key), and
* which foreign keys a table declares,

by issuing engine-specific SQL through an
:class:`~datapantry.execute.base.Executor` and translating the rows into the
neutral :class:`CatalogColumn` / :class:`CatalogForeignKey` records.

``CatalogFactory`` maps engine names to introspector classes so support for
another engine can be added without touching the normalizer::

    @CatalogFactory.register("postgres")
    class PostgresCatalog(CatalogIntrospector):
        ...
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

from datapantry.compile.base import quote_identifier
from datapantry.errors import InvalidArgumentError
from datapantry.execute.base import Executor


@dataclass(frozen=True)
class CatalogColumn:
    """One column as reported by the engine, in declared order."""

    name: str
    type: str
    not_null: bool
    primary_key: bool


@dataclass(frozen=True)
class CatalogForeignKey:
    """One foreign key: ``from_column`` references ``table.to_column``.

    ``to_column`` is ``None`` when the engine leaves the target implicit
    (SQLite does for ``REFERENCES parent`` without a column list).
    """

    from_column: str
    table: str
    to_column: str | None


class CatalogIntrospector(ABC):
    """Engine-specific catalog queries, run through an executor.

    Args:
        executor: Executor used for every introspection query.
    """

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    @abstractmethod
    async def list_tables(self) -> list[str]:
        """Return user table names, excluding engine-internal tables."""

    @abstractmethod
    async def list_columns(self, table: str) -> list[CatalogColumn]:
        """Return the columns of ``table`` in declared order."""

    @abstractmethod
    async def list_foreign_keys(self, table: str) -> list[CatalogForeignKey]:
        """Return the foreign keys declared on ``table``."""


class CatalogFactory:
    """Registry mapping engine names to :class:`CatalogIntrospector` classes."""

    _catalogs: ClassVar[dict[str, type[CatalogIntrospector]]] = {}

    @classmethod
    def register(
        cls, name: str
    ) -> Callable[[type[CatalogIntrospector]], type[CatalogIntrospector]]:
        """Decorator that registers a catalog class under ``name``."""

        def decorator(catalog_cls: type[CatalogIntrospector]) -> type[CatalogIntrospector]:
            cls._catalogs[name] = catalog_cls
            return catalog_cls

        return decorator

    @classmethod
    def create(cls, name: str, executor: Executor) -> CatalogIntrospector:
        """Instantiate the catalog registered for ``name``.

        Raises:
            InvalidArgumentError: If no catalog is registered for ``name``.
        """
        catalog_cls = cls._catalogs.get(name)
        if catalog_cls is None:
            raise InvalidArgumentError(
                f"Unsupported engine: '{name}'. Registered engines: {cls.registered_engines()}.",
                argument="engine",
            )
        return catalog_cls(executor)

    @classmethod
    def registered_engines(cls) -> list[str]:
        return sorted(cls._catalogs)


@CatalogFactory.register("sqlite")
class SQLiteCatalog(CatalogIntrospector):
    """Catalog queries for SQLite: ``sqlite_master`` and ``PRAGMA``."""

    TABLES_SQL = (
        "SELECT name FROM sqlite_master "
        "WHERE type='table' AND name NOT LIKE 'sqlite_%'"
    )

    async def list_tables(self) -> list[str]:
        rows = await self._executor.execute(self.TABLES_SQL, ())
        return [row["name"] for row in rows]

    async def list_columns(self, table: str) -> list[CatalogColumn]:
        rows = await self._executor.execute(f"PRAGMA table_info({quote_identifier(table)})", ())
        return [
            CatalogColumn(
                name=row["name"],
                type=row["type"] or "",
                not_null=row["notnull"] == 1,
                primary_key=bool(row["pk"]),
            )
            for row in rows
        ]

    async def list_foreign_keys(self, table: str) -> list[CatalogForeignKey]:
        rows = await self._executor.execute(
            f"PRAGMA foreign_key_list({quote_identifier(table)})", ()
        )
        return [
            CatalogForeignKey(from_column=row["from"], table=row["table"], to_column=row["to"])
            for row in rows
        ]
