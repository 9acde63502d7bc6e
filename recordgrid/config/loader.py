from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..models.config_models import StoreOptions, ValidationRule

"""Store options loader.

Responsibilities:
- Load a YAML options file (all keys optional)
- Validate it against the bundled options_schema.json
- Apply environment overrides (optionally read from a .env file first)
- Build a StoreOptions with ValidationRule objects

Environment overrides take precedence over file values:
    RECORDGRID_MAX_FILE_SIZE, RECORDGRID_MAX_NESTING_DEPTH
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "ENV_MAX_FILE_SIZE",
    "ENV_MAX_NESTING_DEPTH",
    "load_options",
    "options_from_dict",
]

SCHEMA_PATH = Path(__file__).with_name("options_schema.json")

ENV_MAX_FILE_SIZE = "RECORDGRID_MAX_FILE_SIZE"
ENV_MAX_NESTING_DEPTH = "RECORDGRID_MAX_NESTING_DEPTH"


class ConfigError(Exception):
    pass


def _validate_options_schema(data: dict[str, Any]) -> None:
    """Validate options data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            violates it (unknown keys, wrong types, unknown rule kinds).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"options schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"options validation failed: {e.message}") from e


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def options_from_dict(data: dict[str, Any]) -> StoreOptions:
    """Build StoreOptions from already-validated mapping data."""
    defaults = StoreOptions()
    rules: dict[str, list[ValidationRule]] = {}
    for column_key, raw_rules in (data.get("validation_rules") or {}).items():
        try:
            rules[column_key] = [ValidationRule.from_dict(r) for r in raw_rules]
        except ValueError as e:
            # pattern のコンパイル失敗など
            raise ConfigError(f"invalid rule for column '{column_key}': {e}") from e
    return StoreOptions(
        max_file_size=data.get("max_file_size", defaults.max_file_size),
        max_nesting_depth=data.get("max_nesting_depth", defaults.max_nesting_depth),
        validation_rules=rules,
    )


def load_options(path: Path | None = None, *, env_file: Path | None = None) -> StoreOptions:
    """Load StoreOptions from ``path`` (YAML) plus environment overrides.

    Args:
        path: YAML options file; None means defaults only
        env_file: .env file loaded (with override) before reading the environment

    Raises:
        ConfigError: missing file, invalid YAML, schema violation or bad override
    """
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise ConfigError(f"options file not found: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"options file must contain a mapping: {path}")
        _validate_options_schema(data)

    if env_file is not None and env_file.exists():
        load_dotenv(dotenv_path=env_file, override=True)

    max_file_size = _env_int(ENV_MAX_FILE_SIZE)
    if max_file_size is not None:
        if max_file_size == 0:
            raise ConfigError(f"{ENV_MAX_FILE_SIZE} must be positive")
        data["max_file_size"] = max_file_size
    max_nesting_depth = _env_int(ENV_MAX_NESTING_DEPTH)
    if max_nesting_depth is not None:
        data["max_nesting_depth"] = max_nesting_depth

    return options_from_dict(data)
