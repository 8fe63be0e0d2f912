"""Runtime settings.

Settings are read from environment variables prefixed with ``DBTREE_`` and
from an optional ``.env`` file; command-line options override them.

Example:
    $ export DBTREE_CONN=postgresql://localhost/shop
    $ export DBTREE_SHAPE=graph
    $ dbtree
"""

from __future__ import annotations

from pydantic import Field as PydanticField, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dbtree.onto import OutputFormat, OutputShape

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class DbtreeSettings(BaseSettings):
    """Defaults for the dbtree command."""

    model_config = SettingsConfigDict(
        env_prefix="DBTREE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    conn: str | None = PydanticField(
        default=None, description="SQLAlchemy connection URL or SQLite file path."
    )
    schema_name: str | None = PydanticField(
        default=None, description="Catalog schema to inspect (e.g. 'public')."
    )
    format: OutputFormat = PydanticField(
        default=OutputFormat.TEXT, description="Output format."
    )
    shape: OutputShape = PydanticField(
        default=OutputShape.TREE, description="Output shape."
    )
    log_level: str = PydanticField(default="WARNING", description="Logging level.")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got '{v}'")
        return level
