"""Search configuration settings.

Provides search settings that can be loaded from environment
variables with the SEARCH_ prefix.

Features controlled:
- Default text search configuration (language)
- Keyword length limit
- Name of the derived search vector column
- Debug logging of composed SQL
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """Search configuration settings.

    Can be loaded from environment variables with SEARCH_ prefix.
    Example: SEARCH_DEFAULT_LANGUAGE=turkish, SEARCH_MAX_KEYWORD_LENGTH=200
    """

    default_language: str = Field(
        default="english",
        min_length=1,
        max_length=63,
        description="PostgreSQL text search configuration used when none is given",
    )
    max_keyword_length: int = Field(
        default=500,
        ge=1,
        description="Maximum keyword length accepted by the query composer",
    )
    search_vector_column: str = Field(
        default="search_vector",
        min_length=1,
        max_length=63,
        description="Derived tsvector column maintained by the provisioning trigger",
    )
    log_queries: bool = Field(
        default=False,
        description="Log composed SQL text at DEBUG level (parameters are never logged)",
    )

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


__all__ = ["SearchSettings"]
