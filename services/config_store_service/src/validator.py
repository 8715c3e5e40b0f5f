from datetime import date, datetime
from typing import Any, Dict, Mapping
import jsonschema
import hashlib
import json


class ConfigValidationError(Exception):
    pass


FLAT_MAPPING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "anyOf": [
            {"type": ["string", "number", "boolean", "null"]},
            {"type": "array", "items": {"type": ["string", "number", "boolean"]}},
        ]
    },
}


def validate_config_structure(config: Any, schema: Dict[str, Any]) -> None:
    """
    Validates a configuration against a JSON schema.
    """
    try:
        jsonschema.validate(instance=config, schema=schema)
    except jsonschema.exceptions.ValidationError as e:
        raise ConfigValidationError(f"Configuration validation failed: {e.message}")


def generate_snapshot_checksum(values: Mapping[str, str]) -> str:
    """
    Generates a checksum for a raw snapshot.
    """
    config_str = json.dumps(dict(values), sort_keys=True)
    return hashlib.sha256(config_str.encode()).hexdigest()


def flatten_scalar_mapping(config: Any) -> Dict[str, str]:
    """
    Converts a parsed YAML document into raw string values.
    Only a mapping of scalars or scalar lists is accepted; an empty document is an empty mapping.
    """
    if config is None:
        return {}
    if isinstance(config, dict):
        config = {str(key): _iso_dates(value) for key, value in config.items()}
    validate_config_structure(config, FLAT_MAPPING_SCHEMA)

    values: Dict[str, str] = {}
    for key, value in config.items():
        if value is None:
            continue
        if isinstance(value, list):
            values[key] = ", ".join(_render_scalar(item) for item in value)
        else:
            values[key] = _render_scalar(value)
    return values


def _iso_dates(value: Any) -> Any:
    # safe_load turns date-like scalars into date/datetime objects
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, list):
        return [_iso_dates(item) for item in value]
    return value


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
