"""
Input Validation
================
Checks a candidate expression against the characters the evaluator accepts
before any parsing happens.

The rejection carries the whole run of offending characters so the user sees
exactly what to remove, e.g. "1ab+2" is rejected at "ab".
"""
from __future__ import annotations

import string
from typing import Optional

DECIMAL_SEPARATOR = "."
ALTERNATE_DECIMAL_SEPARATOR = ","

ALLOWED_CHARACTERS = frozenset(
    string.digits
    + "+-*/"
    + "()"
    + DECIMAL_SEPARATOR
    # comparison, bitwise, logical and ternary operators of the evaluator
    + "&|^%><!~?:="
)


class InvalidInputError(ValueError):
    """Raised when the input contains characters outside ALLOWED_CHARACTERS."""

    def __init__(self, run: str, position: int) -> None:
        super().__init__(run)
        self.run = run
        self.position = position


def normalize_decimal_separator(text: str) -> str:
    """Treat ',' as an alias of the decimal point."""
    return text.replace(ALTERNATE_DECIMAL_SEPARATOR, DECIMAL_SEPARATOR)


def is_allowed(char: str) -> bool:
    return char in ALLOWED_CHARACTERS


def find_invalid_run(text: str) -> Optional[tuple[int, str]]:
    """
    Locate the first run of disallowed characters.

    Returns:
        (position, run) of the first maximal run of invalid characters,
        or None when every character is allowed.
    """
    for start, char in enumerate(text):
        if is_allowed(char):
            continue

        end = start + 1
        while end < len(text) and not is_allowed(text[end]):
            end += 1
        return start, text[start:end]

    return None


def validate(text: str) -> str:
    """
    Normalise the decimal separator and check every character.

    Args:
        text: Raw buffer content.

    Returns:
        The normalised text, unchanged otherwise.

    Raises:
        InvalidInputError: If any character is not allowed. `run` holds the
            offending characters.
    """
    normalized = normalize_decimal_separator(text)
    invalid = find_invalid_run(normalized)
    if invalid is not None:
        position, run = invalid
        raise InvalidInputError(run, position)
    return normalized
