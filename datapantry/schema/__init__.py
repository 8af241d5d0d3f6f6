"""datapantry schema layer: catalog introspection and the portable schema models."""
from datapantry.schema.catalog import (
    CatalogColumn,
    CatalogFactory,
    CatalogForeignKey,
    CatalogIntrospector,
    SQLiteCatalog,
)
from datapantry.schema.models import (
    ColumnDescription,
    ForeignKeyReference,
    SchemaDescription,
    TableDescription,
)
from datapantry.schema.normalizer import SchemaNormalizer, find_foreign_key, map_type

__all__ = [
    "CatalogColumn",
    "CatalogFactory",
    "CatalogForeignKey",
    "CatalogIntrospector",
    "SQLiteCatalog",
    "ColumnDescription",
    "ForeignKeyReference",
    "SchemaDescription",
    "TableDescription",
    "SchemaNormalizer",
    "find_foreign_key",
    "map_type",
]
