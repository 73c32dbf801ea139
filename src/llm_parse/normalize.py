"""Lenient normalizer for candidate fragments.

Only two malformations are repaired:
  1. Single-quoted string literals are rewritten as double-quoted ones
  2. Trailing commas before ``}`` or ``]`` are removed

Anything else (unquoted keys, comments, ...) is left alone and will fail to
decode.
"""

from __future__ import annotations

CLOSERS = ("}", "]")


def repair_quotes(fragment: str) -> str:
    """Rewrite ``'...'`` literals as ``"..."`` literals.

    Inside a single-quoted literal ``\\'`` becomes ``'`` and a bare ``"`` is
    escaped. Double-quoted literals are copied through unchanged.
    """
    out: list[str] = []
    i = 0
    n = len(fragment)

    while i < n:
        char = fragment[i]

        if char == '"':
            # Copy the double-quoted literal verbatim.
            j = i + 1
            while j < n and fragment[j] != '"':
                j += 2 if fragment[j] == "\\" else 1
            out.append(fragment[i : j + 1])
            i = j + 1
            continue

        if char != "'":
            out.append(char)
            i += 1
            continue

        out.append('"')
        i += 1
        while i < n and fragment[i] != "'":
            char = fragment[i]
            if char == "\\" and i + 1 < n:
                nxt = fragment[i + 1]
                out.append("'" if nxt == "'" else char + nxt)
                i += 2
                continue
            out.append('\\"' if char == '"' else char)
            i += 1
        out.append('"')
        i += 1

    return "".join(out)


def _strip_once(fragment: str) -> str:
    out: list[str] = []
    i = 0
    n = len(fragment)

    while i < n:
        char = fragment[i]

        if char == '"':
            j = i + 1
            while j < n and fragment[j] != '"':
                j += 2 if fragment[j] == "\\" else 1
            out.append(fragment[i : j + 1])
            i = j + 1
            continue

        if char == ",":
            j = i + 1
            while j < n and fragment[j].isspace():
                j += 1
            if j < n and fragment[j] in CLOSERS:
                # Drop the comma, keep the whitespace.
                i += 1
                continue

        out.append(char)
        i += 1

    return "".join(out)


def strip_trailing_commas(fragment: str) -> str:
    """Remove commas followed only by whitespace and a closing delimiter."""
    while True:
        stripped = _strip_once(fragment)
        if stripped == fragment:
            return stripped
        fragment = stripped


def normalize(fragment: str) -> str:
    """Apply quote repair followed by trailing-comma repair."""
    return strip_trailing_commas(repair_quotes(fragment))
