"""Schema-directed dispatch: pick the extractor from the schema's root kind."""

from __future__ import annotations

import logging
from typing import Any

from .config import RecoveryConfig
from .exceptions import NoMatchError, UnsupportedSchemaError, ValidationError, preview
from .extract import (
    extract_json_from_string,
    parse_boolean_output,
    parse_number_output,
    parse_object_output,
)
from .schema import OutputSchema, RootKind, as_schema

logger = logging.getLogger("llm-parse")


def _parse_array(text: str, schema: OutputSchema, limit: int) -> Any:
    """Return the first array candidate the schema accepts.

    If arrays were found but none validates, the first candidate's
    ValidationError is raised.
    """
    candidates = extract_json_from_string(text, RootKind.ARRAY)
    if not candidates:
        raise NoMatchError(f"Invalid JSON array: {preview(text, limit)}")

    first_error: ValidationError | None = None
    for i, candidate in enumerate(candidates):
        try:
            return schema.validate(candidate)
        except ValidationError as e:
            logger.debug("Array candidate %d rejected: %s", i, e)
            if first_error is None:
                first_error = e
    raise first_error


def parse_output(text: str, schema: Any, config: RecoveryConfig | None = None) -> Any:
    """Recover a value of the shape *schema* describes from *text*.

    *schema* is an :class:`OutputSchema` or anything pydantic can validate
    (a model class, ``list[int]``, ``bool``, ...). The returned value is the
    schema's coerced result.
    """
    config = config or RecoveryConfig()
    schema = as_schema(schema, config.preview_chars)
    kind = schema.root_kind()

    if kind == RootKind.ARRAY:
        return _parse_array(text, schema, config.preview_chars)
    if kind == RootKind.OBJECT:
        return schema.validate(parse_object_output(text, config))
    if kind == RootKind.BOOLEAN:
        return schema.validate(parse_boolean_output(text, config))
    if kind == RootKind.NUMBER:
        return parse_number_output(text, schema, config)

    raise UnsupportedSchemaError(f"Unsupported output schema: {schema!r}")
