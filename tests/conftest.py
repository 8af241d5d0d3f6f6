"""Shared pytest fixtures for datapantry unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from datapantry import DataPantryDatabase, SQLAlchemyExecutor
from tests.fixtures import RecordingExecutor, make_sqlite_engine


@pytest.fixture()
def recorder() -> RecordingExecutor:
    """Executor stub with no canned results."""
    return RecordingExecutor()


@pytest.fixture()
def db(recorder: RecordingExecutor) -> DataPantryDatabase:
    """Database whose statements are only recorded, never run."""
    return DataPantryDatabase(recorder)


@pytest.fixture()
def pixels_db() -> Iterator[DataPantryDatabase]:
    """Database backed by an in-memory SQLite copy of the Pixels schema."""
    executor = SQLAlchemyExecutor(make_sqlite_engine("pixels"))
    yield DataPantryDatabase(executor)
    executor.close()


@pytest.fixture()
def bookshop_db() -> Iterator[DataPantryDatabase]:
    """Database backed by an in-memory SQLite bookshop (authors/books/orders)."""
    executor = SQLAlchemyExecutor(make_sqlite_engine("bookshop"))
    yield DataPantryDatabase(executor)
    executor.close()
