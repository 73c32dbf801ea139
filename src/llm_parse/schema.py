"""Schema collaborator: root kinds and pydantic-backed validation."""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

import pydantic
from pydantic import BaseModel, TypeAdapter

from .exceptions import PREVIEW_CHARS, ValidationError, preview


class RootKind(str, Enum):
    ARRAY = "array"
    OBJECT = "object"
    BOOLEAN = "boolean"
    NUMBER = "number"


_JSON_TYPES = {
    "array": RootKind.ARRAY,
    "object": RootKind.OBJECT,
    "boolean": RootKind.BOOLEAN,
    "number": RootKind.NUMBER,
    "integer": RootKind.NUMBER,
}


@runtime_checkable
class OutputSchema(Protocol):
    """What the dispatcher needs from a schema.

    Any schema library can be plugged in by implementing these three members.
    """

    integral: bool

    def root_kind(self) -> RootKind | None: ...

    def validate(self, value: Any) -> Any: ...


def _format_errors(exc: pydantic.ValidationError) -> list[str]:
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        lines.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return lines


def _root_json_type(adapter: TypeAdapter) -> str | None:
    """Return the JSON ``type`` of the root, following a top-level ``$ref``.

    Self-referencing models are emitted as a ``$ref`` into ``$defs``.
    """
    try:
        schema = adapter.json_schema()
    except pydantic.PydanticUserError:
        return None
    ref = schema.get("$ref")
    if isinstance(ref, str) and ref.startswith("#/$defs/"):
        schema = schema.get("$defs", {}).get(ref[len("#/$defs/") :], {})
    json_type = schema.get("type")
    return json_type if isinstance(json_type, str) else None


def _is_plain_model(tp: Any) -> bool:
    return (
        isinstance(tp, type)
        and issubclass(tp, BaseModel)
        and not issubclass(tp, pydantic.RootModel)
    )


class PydanticSchema:
    """Adapt any pydantic-validatable type to :class:`OutputSchema`.

    ``PydanticSchema(list[int])``, ``PydanticSchema(MyModel)`` and
    ``PydanticSchema(Annotated[int, Field(ge=0)])`` all work.
    """

    def __init__(self, tp: Any, preview_chars: int = PREVIEW_CHARS):
        self.type = tp
        self.preview_chars = preview_chars
        self._adapter = TypeAdapter(tp)
        json_type = _root_json_type(self._adapter)
        self._kind: RootKind | None = _JSON_TYPES.get(json_type) if json_type else None
        if self._kind is None and _is_plain_model(tp):
            # Models always validate from a mapping, even without a JSON schema.
            self._kind = RootKind.OBJECT
        self.integral = json_type == "integer"

    def root_kind(self) -> RootKind | None:
        return self._kind

    def validate(self, value: Any) -> Any:
        try:
            return self._adapter.validate_python(value)
        except pydantic.ValidationError as e:
            errors = _format_errors(e)
            raise ValidationError(
                f"Value {preview(repr(value), self.preview_chars)} rejected by schema: "
                + "; ".join(errors),
                errors,
            ) from e

    def __repr__(self) -> str:
        return f"PydanticSchema({self.type!r})"


def as_schema(obj: Any, preview_chars: int = PREVIEW_CHARS) -> OutputSchema:
    """Return *obj* if it already satisfies the protocol, else wrap it."""
    if isinstance(obj, OutputSchema):
        return obj
    return PydanticSchema(obj, preview_chars)
