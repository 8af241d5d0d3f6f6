"""datapantry executors: how finished statements reach a database."""
from datapantry.execute.base import Executor
from datapantry.execute.http import DEFAULT_BASE_URL, HttpExecutor
from datapantry.execute.local import SQLAlchemyExecutor

__all__ = [
    "Executor",
    "HttpExecutor",
    "SQLAlchemyExecutor",
    "DEFAULT_BASE_URL",
]
