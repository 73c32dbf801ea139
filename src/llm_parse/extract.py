"""Typed extractors for LLM output.

Arrays and objects go through a three-stage pipeline:
  1. Scan for balanced ``[...]`` / ``{...}`` candidates
  2. Normalize each candidate (quote + trailing-comma repair)
  3. Strictly decode; candidates that still fail are dropped

Booleans and numbers are matched directly against the text.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from .config import RecoveryConfig
from .exceptions import (
    PREVIEW_CHARS,
    FormatError,
    NoMatchError,
    ValidationError,
    preview,
)
from .normalize import normalize
from .scanner import scan
from .schema import OutputSchema, RootKind

logger = logging.getLogger("llm-parse")

DELIMITERS: dict[RootKind, tuple[str, str]] = {
    RootKind.ARRAY: ("[", "]"),
    RootKind.OBJECT: ("{", "}"),
}

_ROOT_TYPES: dict[RootKind, type] = {
    RootKind.ARRAY: list,
    RootKind.OBJECT: dict,
}

_BOOLEAN_RE = re.compile(r"(?<![^\W_])(true|false)(?![^\W_])", re.IGNORECASE)
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def decode(text: str) -> tuple[bool, Any]:
    """Strictly decode *text*. Returns ``(ok, value)`` and never raises."""
    try:
        return True, json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.debug("Dropping candidate %s: %s", preview(text, 60), e)
        return False, None


def _preview_chars(config: RecoveryConfig | None) -> int:
    return config.preview_chars if config is not None else PREVIEW_CHARS


def extract_json_from_string(text: str, kind: RootKind | str) -> list[Any]:
    """Return every decodable array/object of the given kind, in order.

    Nested objects inside an array are found on their own when objects are
    requested, because scanning only looks for the requested delimiter.
    """
    kind = RootKind(kind)
    if kind not in DELIMITERS:
        raise ValueError(f"Only array and object extraction scan text, not {kind.value}")

    open_char, close_char = DELIMITERS[kind]
    root_type = _ROOT_TYPES[kind]
    results = []
    for candidate in scan(text, open_char, close_char):
        ok, value = decode(normalize(candidate.text))
        if ok and isinstance(value, root_type):
            results.append(value)
    return results


def parse_array_output(text: str, config: RecoveryConfig | None = None) -> list:
    """Return the first array found in *text*."""
    found = extract_json_from_string(text, RootKind.ARRAY)
    if not found:
        raise NoMatchError(
            f"Invalid JSON array: {preview(text, _preview_chars(config))}"
        )
    return found[0]


def parse_object_output(text: str, config: RecoveryConfig | None = None) -> dict:
    """Return the first object found in *text*."""
    found = extract_json_from_string(text, RootKind.OBJECT)
    if not found:
        raise NoMatchError(
            f"Invalid JSON object: {preview(text, _preview_chars(config))}"
        )
    return found[0]


def parse_boolean_output(text: str, config: RecoveryConfig | None = None) -> bool:
    """Return the first standalone ``true``/``false`` word, any case."""
    match = _BOOLEAN_RE.search(text)
    if match is None:
        raise NoMatchError(
            f"Invalid boolean output: {preview(text, _preview_chars(config))}"
        )
    return match.group(1).lower() == "true"


def parse_number_output(
    text: str,
    schema: OutputSchema | None = None,
    config: RecoveryConfig | None = None,
) -> int | float:
    """Parse the whole trimmed *text* as a number.

    With an integral schema a fractional value raises ValidationError. When
    a schema is given the parsed value is validated by it.
    """
    limit = _preview_chars(config)
    trimmed = text.strip()
    if not _NUMBER_RE.fullmatch(trimmed):
        raise FormatError(f"Invalid number output: {preview(text, limit)}")

    integral = bool(schema is not None and schema.integral)
    if _INTEGER_RE.fullmatch(trimmed):
        try:
            value: int | float = int(trimmed)
        except ValueError as e:  # exceeds the interpreter's digit limit
            raise FormatError(f"Number out of range: {preview(text, limit)}") from e
    else:
        value = float(trimmed)
        if not math.isfinite(value):
            raise FormatError(f"Number out of range: {preview(text, limit)}")
        if integral:
            if not value.is_integer():
                raise ValidationError(
                    f"Expected an integer, got {preview(trimmed, limit)}",
                    ["<root>: value must be an integer"],
                )
            value = int(value)

    if schema is not None:
        value = schema.validate(value)
    return value
