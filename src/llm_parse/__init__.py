"""llm-parse — recover structured values from language model output."""

__version__ = "0.1.0"

from .dispatch import parse_output
from .exceptions import (
    ConfigError,
    DescriptorError,
    FormatError,
    LLMParseError,
    NoMatchError,
    UnsupportedSchemaError,
    ValidationError,
)
from .extract import (
    extract_json_from_string,
    parse_array_output,
    parse_boolean_output,
    parse_number_output,
    parse_object_output,
)
from .schema import OutputSchema, PydanticSchema, RootKind

__all__ = [
    "__version__",
    "parse_output",
    "extract_json_from_string",
    "parse_array_output",
    "parse_object_output",
    "parse_boolean_output",
    "parse_number_output",
    "OutputSchema",
    "PydanticSchema",
    "RootKind",
    "LLMParseError",
    "NoMatchError",
    "FormatError",
    "ValidationError",
    "UnsupportedSchemaError",
    "DescriptorError",
    "ConfigError",
]
