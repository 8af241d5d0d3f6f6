"""Build a :class:`SchemaDescription` from a live catalog.

The normalizer walks the catalog table by table (in the order the catalog
returns them), and maps every column with three fixed rules:

* **datatype** – :func:`map_type`: a type containing ``INT`` or equal to
  ``REAL`` is ``number``; everything else, unknown types included, is
  ``string``.  The mapping is deliberately coarse.
* **constraint** – ``primary`` for primary-key columns, ``unique`` for any
  other NOT NULL column, ``none`` otherwise.
* **foreign key** – :func:`find_foreign_key`: the first foreign key whose
  source column is this column, or ``None``.

Nothing is cached; each :meth:`SchemaNormalizer.describe` call re-reads the
catalog.
"""
from __future__ import annotations

from collections.abc import Iterable

from datapantry.schema.catalog import CatalogColumn, CatalogForeignKey, CatalogIntrospector
from datapantry.schema.models import (
    ColumnDescription,
    Constraint,
    Datatype,
    ForeignKeyReference,
    SchemaDescription,
    TableDescription,
)


def map_type(type_name: str) -> Datatype:
    upper = type_name.upper()
    if "INT" in upper or upper == "REAL":
        return "number"
    return "string"


def map_constraint(column: CatalogColumn) -> Constraint:
    if column.primary_key:
        return "primary"
    if column.not_null:
        return "unique"
    return "none"


def find_foreign_key(
    column_name: str, foreign_keys: Iterable[CatalogForeignKey]
) -> ForeignKeyReference | None:
    """Return the reference of the first foreign key sourced at ``column_name``."""
    for fk in foreign_keys:
        if fk.from_column == column_name:
            return ForeignKeyReference(table_name=fk.table, column_name=fk.to_column)
    return None


class SchemaNormalizer:
    """Turns catalog rows into a portable :class:`SchemaDescription`.

    Args:
        catalog: Engine-specific catalog queries.
    """

    def __init__(self, catalog: CatalogIntrospector) -> None:
        self._catalog = catalog

    async def describe(self) -> SchemaDescription:
        """Read the catalog and return the normalized schema.

        Raises:
            RemoteQueryError: If any introspection query fails.
        """
        tables: list[TableDescription] = []
        for name in await self._catalog.list_tables():
            columns = await self._catalog.list_columns(name)
            foreign_keys = await self._catalog.list_foreign_keys(name)
            tables.append(
                TableDescription(
                    name=name,
                    columns=[self._describe_column(col, foreign_keys) for col in columns],
                )
            )
        return SchemaDescription(tables=tables)

    @staticmethod
    def _describe_column(
        column: CatalogColumn, foreign_keys: list[CatalogForeignKey]
    ) -> ColumnDescription:
        return ColumnDescription(
            name=column.name,
            datatype=map_type(column.type),
            constraint=map_constraint(column),
            is_required=column.not_null,
            foreign_key=find_foreign_key(column.name, foreign_keys),
        )
