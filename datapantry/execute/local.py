"""Executor backed by a local SQLAlchemy engine.

Runs statements against a database reachable from this process instead of
the HTTP API: a local SQLite copy of a pantry, a fixture database in tests,
and so on.  The driver must use the ``qmark`` paramstyle (SQLite's does),
because statements are passed through unchanged.

Each statement runs in its own transaction on a worker thread, so a slow
query does not hold up the event loop.  The engine must therefore allow
connections to be used from threads other than the one that created them;
:meth:`SQLAlchemyExecutor.from_url` arranges that for in-memory SQLite.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from datapantry.errors import RemoteQueryError
from datapantry.execute.base import Executor

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

_MEMORY_DATABASES = (None, "", ":memory:")


class SQLAlchemyExecutor(Executor):
    """Runs statements on a SQLAlchemy :class:`~sqlalchemy.Engine`.

    Args:
        engine: Engine for a qmark-style driver (e.g. ``sqlite://``).
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> SQLAlchemyExecutor:
        """Create an executor for a database URL such as ``sqlite:///pantry.db``.

        An in-memory SQLite URL gets a single shared connection, so every
        worker thread sees the same database.
        """
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite" and parsed.database in _MEMORY_DATABASES:
            engine = create_engine(
                parsed,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            engine = create_engine(parsed, echo=echo)
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._run, sql, tuple(params))

    def _run(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        logger.debug("Executing locally: %r params=%r", sql, params)
        try:
            with self._engine.begin() as conn:
                result = conn.exec_driver_sql(sql, params)
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            message = str(getattr(exc, "orig", None) or exc)
            logger.warning("Local statement failed: %s", message)
            raise RemoteQueryError(message) from exc

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
