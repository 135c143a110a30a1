"""
Configuration system for ablsense.

Implements 12-factor config principles:
- Environment variables as primary config source
- Optional JSON/YAML config file for local development
- Sensible defaults matching a stock OpenEdge Data Dictionary export

Usage:
    from ablsense.config import get_config, Config

    # Load from environment (default)
    config = get_config()

    if config.is_source_name("orders/close.p"):
        ...

    # Explicit settings (tests, embedding)
    config = Config(max_index_fields=5, index_area="Index Area")
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ablsense.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "ABLSENSE_"


class Config(BaseModel):
    """
    ablsense configuration.

    Loaded from environment variables and an optional config file.
    Suffixes are compared case-insensitively and always carry a leading dot.
    """

    model_config = ConfigDict(frozen=True)

    # Input recognition
    source_suffixes: tuple[str, ...] = Field(
        default=(".p", ".w", ".i", ".cls"),
        description="Suffixes of Progress ABL source files",
    )
    archive_suffixes: tuple[str, ...] = Field(
        default=(".zip",),
        description="Suffixes of archives whose source entries are expanded",
    )
    schema_suffixes: tuple[str, ...] = Field(
        default=(".df", ".txt"),
        description="Suffixes of Data Dictionary definition exports",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to decode every input blob",
    )

    # Index suggestion
    max_index_fields: int = Field(
        default=7,
        gt=0,
        description="Field budget; logical fields only pad a suggestion up to it",
    )
    index_area: str = Field(
        default="Schema Area",
        description="Storage area written into suggested indexes",
    )
    index_num: int = Field(
        default=99,
        gt=0,
        description="INDEX-NUM written into suggested indexes",
    )

    @field_validator("source_suffixes", "archive_suffixes", "schema_suffixes", mode="before")
    @classmethod
    def _normalize_suffixes(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            normalized = []
            for suffix in value:
                suffix = str(suffix).strip().lower()
                if not suffix:
                    continue
                if not suffix.startswith("."):
                    suffix = "." + suffix
                normalized.append(suffix)
            return tuple(normalized)
        return value

    def is_source_name(self, name: str) -> bool:
        """Whether a blob name looks like an ABL program."""
        return name.lower().endswith(self.source_suffixes)

    def is_archive_name(self, name: str) -> bool:
        """Whether a blob name is an archive to expand."""
        return name.lower().endswith(self.archive_suffixes)

    def is_schema_name(self, name: str) -> bool:
        """Whether a blob name looks like a .df export."""
        return name.lower().endswith(self.schema_suffixes)


def _parse_env_int(key: str, default: int) -> int:
    """Parse integer from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Could not parse %s=%s, using %d", key, value, default)
        return default


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables.

    Environment variable naming convention: ABLSENSE_<SETTING>

    Examples:
    - ABLSENSE_SOURCE_SUFFIXES=.p,.w,.i,.cls,.t
    - ABLSENSE_SCHEMA_SUFFIXES=.df
    - ABLSENSE_ENCODING=iso-8859-1
    - ABLSENSE_MAX_INDEX_FIELDS=5
    - ABLSENSE_INDEX_AREA="Index Area"
    - ABLSENSE_INDEX_NUM=120
    """
    defaults = Config()
    config_kwargs: dict[str, Any] = {
        "max_index_fields": _parse_env_int(
            f"{ENV_PREFIX}MAX_INDEX_FIELDS", defaults.max_index_fields
        ),
        "index_num": _parse_env_int(f"{ENV_PREFIX}INDEX_NUM", defaults.index_num),
    }

    for setting in ("source_suffixes", "archive_suffixes", "schema_suffixes", "encoding", "index_area"):
        value = os.environ.get(f"{ENV_PREFIX}{setting.upper()}")
        if value is not None:
            config_kwargs[setting] = value

    try:
        return Config(**config_kwargs)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment configuration: {e}") from e


def load_config_from_file(path: Path) -> Config:
    """
    Load configuration from a JSON or YAML file.

    Falls back to environment variables when the file does not exist.
    """
    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    try:
        return Config(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Get the global configuration instance.

    Loads from:
    1. ABLSENSE_CONFIG_FILE environment variable (if set)
    2. Environment variables (default)

    Result is cached for the lifetime of the process.
    """
    config_file = os.environ.get(f"{ENV_PREFIX}CONFIG_FILE")

    if config_file:
        return load_config_from_file(Path(config_file))

    return load_config_from_env()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()
