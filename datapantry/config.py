"""Client settings loaded from the environment or a ``.env`` file.

Variables use the ``DATAPANTRY_`` prefix::

    DATAPANTRY_API_KEY=pk_live_...
    DATAPANTRY_BASE_URL=https://staging.datapantry.org
    DATAPANTRY_TIMEOUT=10
    DATAPANTRY_ENGINE=sqlite

Settings are only read when a client is built from them; importing
datapantry never touches the environment.
"""
from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from datapantry.execute.http import DEFAULT_BASE_URL


class DataPantrySettings(BaseSettings):
    """Validated connection settings for a DataPantry database."""

    model_config = SettingsConfigDict(
        env_prefix="DATAPANTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Key sent in the APIkey header")
    base_url: str = Field(default=DEFAULT_BASE_URL)
    timeout: float = Field(default=30.0, gt=0)
    engine: str = Field(default="sqlite", description="Remote engine, selects the catalog")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("DATAPANTRY_BASE_URL must start with http:// or https://")
        return v
