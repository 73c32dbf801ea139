"""Bracket scanner: locate balanced JSON-looking fragments in free text."""

from __future__ import annotations

from dataclasses import dataclass

QUOTES = ('"', "'")


@dataclass(frozen=True)
class Candidate:
    """A balanced fragment of the source text. ``end`` is exclusive."""

    start: int
    end: int
    text: str


def _find_close(text: str, start: int, open_char: str, close_char: str) -> int:
    """Return the index just past the delimiter closing ``text[start]``.

    Returns -1 when the text ends before the fragment is balanced.
    """
    depth = 0
    quote = ""
    escaped = False

    for i in range(start, len(text)):
        char = text[i]

        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = ""
            continue

        if char in QUOTES:
            quote = char
        elif char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return i + 1

    return -1


def scan(text: str, open_char: str, close_char: str) -> list[Candidate]:
    """Return every balanced ``open_char``...``close_char`` fragment in order.

    Bracket characters inside quoted strings (either quote style, with
    backslash escapes) do not affect nesting. Quotes are only tracked once a
    fragment has started, so apostrophes in surrounding prose are ignored.

    Fragments never overlap: after one closes, scanning resumes past its end.
    A fragment left open at the end of the text is dropped and scanning
    resumes just after its opening delimiter.
    """
    candidates: list[Candidate] = []
    pos = 0

    while True:
        start = text.find(open_char, pos)
        if start == -1:
            break
        end = _find_close(text, start, open_char, close_char)
        if end == -1:
            pos = start + 1
            continue
        candidates.append(Candidate(start=start, end=end, text=text[start:end]))
        pos = end

    return candidates
