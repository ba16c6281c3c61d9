from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default: config/import.yml)
- Validate against config_schema.json (unknown keys rejected)
- Apply defaults for every optional setting
"""

__all__ = [
    "ConfigError",
    "DatabaseConfig",
    "ImportConfig",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_HEADER_ROW = 0
DEFAULT_EMPTY_PLACEHOLDER = ""  # by convention absent strings are stored as ''
DEFAULT_MAX_IDENTIFIER_LENGTH = 63
DEFAULT_MAX_SUFFIX = 999
DEFAULT_STRING_LENGTH_MARGIN = 3
DEFAULT_EMPTY_COLUMN_TYPE = "VARCHAR(10)"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection fallback values. Environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    source_directory: str
    header_row: int = DEFAULT_HEADER_ROW
    empty_placeholder: str = DEFAULT_EMPTY_PLACEHOLDER
    max_identifier_length: int = DEFAULT_MAX_IDENTIFIER_LENGTH
    max_suffix: int = DEFAULT_MAX_SUFFIX
    string_length_margin: int = DEFAULT_STRING_LENGTH_MARGIN
    empty_column_type: str = DEFAULT_EMPTY_COLUMN_TYPE
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the config data
            fails validation (missing required keys, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    naming = data.get("naming") or {}
    sql = data.get("sql") or {}
    db_raw = data.get("database") or {}
    return ImportConfig(
        source_directory=data["source_directory"],
        header_row=data.get("header_row", DEFAULT_HEADER_ROW),
        empty_placeholder=data.get("empty_placeholder", DEFAULT_EMPTY_PLACEHOLDER),
        max_identifier_length=naming.get("max_identifier_length", DEFAULT_MAX_IDENTIFIER_LENGTH),
        max_suffix=naming.get("max_suffix", DEFAULT_MAX_SUFFIX),
        string_length_margin=sql.get("string_length_margin", DEFAULT_STRING_LENGTH_MARGIN),
        empty_column_type=sql.get("empty_column_type", DEFAULT_EMPTY_COLUMN_TYPE),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
    )
