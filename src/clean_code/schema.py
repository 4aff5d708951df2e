"""Schema validation of the assembled GrumPHP document."""

from __future__ import annotations

from typing import Any

from jsonschema.validators import Draft202012Validator

from clean_code.catalog import known_sections


class ConfigValidationError(ValueError):
    """Raised when an assembled document does not match the catalog schema."""

    def __init__(self, messages: list[str]):
        super().__init__(
            "Schema validation failed for GrumPHP configuration:\n"
            + "\n".join(f"  - {msg}" for msg in messages)
        )
        self.messages = messages


def config_schema() -> dict[str, Any]:
    """Return the JSON schema for documents built from the current catalog."""
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["grumphp"],
        "additionalProperties": False,
        "$defs": {
            "value": {
                "anyOf": [
                    {"type": ["string", "integer", "boolean", "null"]},
                    {"type": "array", "items": {"type": "string"}},
                    {"type": "object", "additionalProperties": {"$ref": "#/$defs/value"}},
                ],
            },
        },
        "properties": {
            "grumphp": {
                "type": "object",
                "required": [
                    "hide_circumvention_tip",
                    "process_timeout",
                    "stop_on_failure",
                    "ignore_unstaged_changes",
                    "tasks",
                ],
                "properties": {
                    "hide_circumvention_tip": {"type": "boolean"},
                    "process_timeout": {"type": "integer", "minimum": 0},
                    "stop_on_failure": {"type": "boolean"},
                    "ignore_unstaged_changes": {"type": "boolean"},
                    "fixer": {
                        "type": "object",
                        "properties": {"enabled": {"type": "boolean"}},
                    },
                    "ascii": {
                        "type": "object",
                        "additionalProperties": {"type": ["string", "null"]},
                    },
                    "tasks": {
                        "type": "object",
                        "propertyNames": {"enum": list(known_sections())},
                        "additionalProperties": {
                            "type": "object",
                            "additionalProperties": {"$ref": "#/$defs/value"},
                        },
                    },
                },
            },
        },
    }


def validate_config(document: dict[str, Any]) -> None:
    """Raise ConfigValidationError listing every schema violation."""
    validator = Draft202012Validator(config_schema())
    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise ConfigValidationError(
            [
                f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
                for e in errors
            ]
        )
