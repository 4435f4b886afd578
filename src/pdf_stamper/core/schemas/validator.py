"""
Schema Validation Utilities

Validates template descriptions and stamping jobs read from JSON before
they are turned into models. Fails fast with every schema violation
collected into one ValidationError.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(data: Any, schema_name: str, label: str) -> None:
    schema = _load_schema(schema_name)
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if not errors:
        return

    first = errors[0]
    path = ".".join(str(p) for p in first.absolute_path)
    raise ValidationError(
        f"Invalid {label}: {first.message}" + (f" (at {path})" if path else ""),
        path=path,
        errors=[
            f"{'.'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
            for e in errors
        ],
    )


def validate_template(data: dict[str, Any]) -> None:
    """
    Validate a template description read from JSON.

    Raises:
        ValidationError: If data is invalid
    """
    name = data.get("name", "?") if isinstance(data, dict) else "?"
    _validate(data, "template", f"template {name!r}")


def validate_job(data: dict[str, Any]) -> None:
    """
    Validate a stamping job (templates, fonts, pages, options).

    Templates inside the job are validated individually so errors name the
    offending template.

    Raises:
        ValidationError: If data is invalid
    """
    _validate(data, "job", "job")
    for template in (*data.get("templates", ()), *data.get("partials", ())):
        validate_template(template)
