"""Loading schema documents and generation configuration from JSON or YAML."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .models import DatabaseSchema, GenerationConfig


logger = logging.getLogger(__name__)


class SchemaLoadError(ValueError):
    """Raised when input is not a valid schema document."""


class ConfigLoadError(ValueError):
    """Raised when a configuration file can not be read as a GenerationConfig."""


def read_structured_file(path: Union[str, Path]) -> Any:
    """Read a JSON or YAML file; anything not ending in .json is parsed as YAML."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def schema_from_dict(data: Any) -> DatabaseSchema:
    """Validate a nested record as a schema document."""
    if not isinstance(data, dict):
        raise SchemaLoadError("Schema document must be a mapping with a 'tables' list")
    if "tables" not in data:
        raise SchemaLoadError("Schema document has no 'tables' entry")
    try:
        return DatabaseSchema.model_validate(data)
    except ValidationError as e:
        raise SchemaLoadError(f"Invalid schema document: {e}") from e


def load_schema(path: Union[str, Path]) -> DatabaseSchema:
    """Load a schema document from disk."""
    try:
        data = read_structured_file(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaLoadError(f"Could not parse schema file {path}: {e}") from e

    schema = schema_from_dict(data)
    logger.info(f"Loaded schema with {len(schema.tables)} tables from {path}")
    return schema


def load_config_file(path: Union[str, Path]) -> GenerationConfig:
    """Load a generation configuration from JSON or YAML."""
    try:
        data = read_structured_file(path) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Could not parse config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config file {path} must contain a mapping")
    if "generation" in data:
        data = data["generation"]
        if not isinstance(data, dict):
            raise ConfigLoadError(f"'generation' section of {path} must be a mapping")

    try:
        return GenerationConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid config file {path}: {e}") from e


def config_template() -> Dict[str, Any]:
    """Sample configuration written by ``ersynth init-config``."""
    return {
        "generation": {
            "seed": 42,
            "default_rows": 10,
            "reference_rows": 5,
            "reference_prefixes": ["ref_"],
            "cycle_policy": "drop",
            "flag_values": ["Y", "N"],
            "row_counts": {
                "Agencies": 3,
                "Clients": 25,
            },
            "complexity": {
                "complex_tables": 20,
                "complex_relationships": 30,
                "medium_tables": 10,
                "medium_relationships": 15,
            },
        }
    }
