"""Build chat-completion function definitions from pydantic input models."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Iterable

from pydantic import BaseModel

from .exceptions import DescriptorError

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]{0,63}$")


@dataclass
class FunctionTool:
    """A callable exposed to the model: its name, input model and description."""

    name: str
    input_model: type[BaseModel]
    description: str = ""


def is_valid_identifier(name: str) -> bool:
    return bool(name) and _IDENTIFIER_RE.match(name) is not None


def _inline_refs(node: Any, defs: dict[str, Any], seen: tuple[str, ...] = ()) -> Any:
    if isinstance(node, list):
        return [_inline_refs(item, defs, seen) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith("#/$defs/"):
        key = ref[len("#/$defs/") :]
        if key in seen:
            raise DescriptorError(f"Recursive model reference: {key}")
        if key not in defs:
            raise DescriptorError(f"Unresolved schema reference: {ref}")
        target = _inline_refs(defs[key], defs, seen + (key,))
        siblings = {k: v for k, v in node.items() if k != "$ref"}
        return {**target, **_inline_refs(siblings, defs, seen)}

    return {k: _inline_refs(v, defs, seen) for k, v in node.items() if k != "$defs"}


def model_to_parameters(model: type[BaseModel]) -> dict[str, Any]:
    """Return the JSON schema of *model* with every ``$ref`` inlined."""
    schema = copy.deepcopy(model.model_json_schema())
    defs = schema.pop("$defs", {})
    parameters = _inline_refs(schema, defs)
    parameters.pop("title", None)
    if parameters.get("additionalProperties") is False:
        del parameters["additionalProperties"]
    return parameters


def function_definition(
    name: str, model: type[BaseModel], description: str = ""
) -> dict[str, Any]:
    """Describe one function for a chat-completion request.

    Raises DescriptorError if *name* is not a valid function identifier.
    """
    if not is_valid_identifier(name):
        raise DescriptorError(f'Invalid function name "{name}"')

    return {
        "name": name,
        "description": description or name,
        "parameters": model_to_parameters(model),
    }


def function_definitions(
    tools: Iterable[FunctionTool | tuple[str, type[BaseModel], str]],
) -> list[dict[str, Any]]:
    definitions = []
    for tool in tools:
        if isinstance(tool, FunctionTool):
            definitions.append(
                function_definition(tool.name, tool.input_model, tool.description)
            )
        else:
            definitions.append(function_definition(*tool))
    return definitions
