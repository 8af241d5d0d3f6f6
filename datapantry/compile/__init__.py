"""datapantry statement layer: conditions and chainable statements → parameterized SQL."""
from datapantry.compile.base import CompiledSQL, quote_identifier
from datapantry.compile.builder import Statement
from datapantry.compile.conditions import Condition, eq, gt, gte, in_array, like, lt, lte, ne
from datapantry.compile.statements import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    UpdateStatement,
)

__all__ = [
    "CompiledSQL",
    "quote_identifier",
    "Statement",
    "SelectStatement",
    "InsertStatement",
    "UpdateStatement",
    "DeleteStatement",
    "Condition",
    "eq",
    "ne",
    "gt",
    "gte",
    "lt",
    "lte",
    "like",
    "in_array",
]
