"""YAML and record-file parsing utilities for RXT.

This module provides functions for loading export configuration files and
record collections with validation.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from rxt.exceptions import ValidationError
from rxt.models.options import ExportConfig

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def substitute_env_vars(data: Any) -> Any:
    """Recursively substitute environment variables in data structure.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.

    Args:
        data: Data structure (dict, list, str, etc.)

    Returns:
        Data with environment variables substituted

    Raises:
        ValidationError: If a variable is unset and has no default

    Examples:
        >>> os.environ['EXPORT_FORMAT'] = 'json'
        >>> substitute_env_vars('${EXPORT_FORMAT}')
        'json'
        >>> substitute_env_vars('${MISSING:-csv}')
        'csv'
    """
    if isinstance(data, dict):
        return {k: substitute_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [substitute_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replace_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2)

            value = os.environ.get(var_name)
            if value is not None:
                return value
            if default_value is None:
                raise ValidationError(
                    f"Environment variable '{var_name}' not found and no default provided"
                )
            return default_value

        return _ENV_PATTERN.sub(replace_var, data)
    else:
        return data


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file into a dictionary with environment variable substitution.

    Args:
        path: Path to YAML file

    Returns:
        Dictionary with YAML contents and environment variables substituted

    Raises:
        ValidationError: If file cannot be read or parsed, or required env vars are missing
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path}: {e}") from e
    except FileNotFoundError as e:
        raise ValidationError(f"File not found: {path}") from e
    except OSError as e:
        raise ValidationError(f"Failed to load {path}: {e}") from e

    if data is None:
        raise ValidationError(f"Empty YAML file: {path}")
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return substitute_env_vars(data)


def load_export_config(path: Path) -> ExportConfig:
    """Load and validate an export configuration from a YAML file.

    Example file:

        format: csv
        options:
          include_metadata: true
          fields: [id, name]
          filters:
            status: active
        encoders:
          xml: mycompany.export.XMLEncoder

    Args:
        path: Path to configuration YAML file

    Returns:
        Validated ExportConfig object

    Raises:
        ValidationError: If the configuration is invalid
    """
    data = load_yaml(path)
    try:
        return ExportConfig(**data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid export configuration in {path}: {e}") from e


def load_records(path: Path) -> list[dict[str, Any]]:
    """Load a record collection from a JSON, JSON Lines or YAML file.

    JSON and YAML files may hold either a list of records or an export
    envelope with a "data" list (as written by the JSON encoder).

    Args:
        path: Path to the record file (.json, .jsonl, .ndjson, .yaml, .yml)

    Returns:
        List of record dicts, in file order

    Raises:
        ValidationError: If the file cannot be read or does not hold records
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix in (".jsonl", ".ndjson"):
                data: Any = [json.loads(line) for line in f if line.strip()]
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except FileNotFoundError as e:
        raise ValidationError(f"File not found: {path}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Invalid record file {path}: {e}") from e
    except OSError as e:
        raise ValidationError(f"Failed to load {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("data"), list):
        data = data["data"]

    if not isinstance(data, list):
        raise ValidationError(f"Expected a list of records in {path}, got {type(data).__name__}")

    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ValidationError(
                f"Record {index} in {path} is {type(record).__name__}, expected an object"
            )
    return data
