"""Pydantic models for the portable schema description.

``SchemaNormalizer.describe()`` builds these from a remote catalog.  Python
attributes are snake_case; :meth:`SchemaDescription.to_dict` produces the
camelCase wire form used by the DataPantry service::

    {"tables": [{"name": "Pixels", "columns": [
        {"name": "id", "datatype": "number", "constraint": "primary",
         "isRequired": True, "foreignKey": None}, ...]}]}
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

#: Portable column data types.
Datatype = Literal["number", "string"]

#: Portable column constraints.
Constraint = Literal["primary", "unique", "none"]


class ForeignKeyReference(BaseModel):
    """The column a foreign key points at.

    Attributes:
        table_name: Referenced table.
        column_name: Referenced column; ``None`` when the engine leaves it
            implicit (the referenced table's primary key).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    table_name: str = Field(alias="tableName")
    column_name: str | None = Field(alias="columnName")


class ColumnDescription(BaseModel):
    """Normalized metadata for one column.

    Attributes:
        name: Column name.
        datatype: ``'number'`` or ``'string'``.
        constraint: ``'primary'`` for primary keys, ``'unique'`` for other
            NOT NULL columns, otherwise ``'none'``.
        is_required: Whether the column is declared NOT NULL.
        foreign_key: The referenced column, or ``None``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    datatype: Datatype
    constraint: Constraint
    is_required: bool = Field(alias="isRequired")
    foreign_key: ForeignKeyReference | None = Field(default=None, alias="foreignKey")


class TableDescription(BaseModel):
    """A table and its columns in declared order."""

    model_config = ConfigDict(extra="forbid")

    name: str
    columns: list[ColumnDescription]

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


class SchemaDescription(BaseModel):
    """All user tables of a database, in catalog order."""

    model_config = ConfigDict(extra="forbid")

    tables: list[TableDescription] = Field(default_factory=list)

    def get_table(self, name: str) -> TableDescription | None:
        """Returns the TableDescription for ``name``, or ``None``."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    @property
    def table_names(self) -> list[str]:
        return [t.name for t in self.tables]

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase, JSON-ready form of the schema."""
        return self.model_dump(by_alias=True)
