"""Boundary parsing: turn raw payloads into strict schemas or domain ValidationErrors."""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from speednet.core.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def format_errors(exc: pydantic.ValidationError) -> list[dict[str, Any]]:
    """Compact, JSON-safe list of field errors."""
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]


def parse_payload(schema: type[SchemaT], payload: SchemaT | dict[str, Any] | None) -> SchemaT:
    """
    Validate a payload against a schema.

    Already-parsed schema instances pass straight through. Unknown fields,
    bad enum values and type errors become a ValidationError.
    """
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload or {})
    except pydantic.ValidationError as exc:
        errors = format_errors(exc)
        first = errors[0]["message"] if errors else "Invalid payload"
        raise ValidationError(
            f"Invalid {schema.__name__} payload: {first}",
            details={"errors": errors},
        ) from exc
