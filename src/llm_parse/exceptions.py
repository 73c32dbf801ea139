"""Custom exception hierarchy for llm-parse.

All llm-parse exceptions inherit from LLMParseError, allowing callers
to catch broad or specific errors:

    try:
        answer = parse_output(completion, list[int])
    except NoMatchError:
        ...  # re-prompt the model
    except LLMParseError as e:
        print(f"llm-parse error: {e}")
"""

from __future__ import annotations

PREVIEW_CHARS = 100


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """Shorten *text* for use in an error message."""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + "..."


class LLMParseError(Exception):
    """Base exception for all llm-parse errors."""


class NoMatchError(LLMParseError):
    """Raised when no candidate of the requested kind could be decoded."""


class FormatError(LLMParseError):
    """Raised when the model output is not a syntactically valid numeral."""


class ValidationError(LLMParseError):
    """Raised when a decoded value is rejected by the caller's schema.

    ``errors`` holds one readable line per violated constraint.
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


class UnsupportedSchemaError(LLMParseError):
    """Raised when a schema's root kind has no extraction path."""


class DescriptorError(LLMParseError):
    """Raised when a function descriptor cannot be built."""


class ConfigError(LLMParseError):
    """Raised when configuration is invalid or missing."""
