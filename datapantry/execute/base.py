"""The executor abstraction: finished SQL + params in, rows out."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class Executor(ABC):
    """Runs a finished statement against a database.

    Statements, :class:`~datapantry.client.DataPantryDatabase.sql` and the
    schema catalog all go through this single operation, so any object that
    implements it (an HTTP client, a local engine, a test stub) can back a
    database.
    """

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        """Run ``sql`` with positional ``params`` and return the result rows.

        Args:
            sql: SQL text using ``?`` placeholders.
            params: One value per placeholder, in order.

        Returns:
            Result rows as ``column -> value`` dicts; ``[]`` when the
            statement produces no rows.

        Raises:
            RemoteQueryError: If the database reports a failure.
        """

    def close(self) -> None:
        """Release resources held by the executor.  Does nothing by default."""
