"""
Input sanitizer - Cleans user-supplied strings before validation.

Strips markup/attribute-injection characters, trims surrounding
whitespace and bounds the length of any free-form value.
"""

import re

MAX_INPUT_LENGTH = 500

_DISALLOWED_CHARACTERS = re.compile(r"[<>\"']")


def sanitize(raw: str) -> str:
    """
    Sanitize a raw user-supplied string.

    Removes ``< > " '``, trims leading/trailing whitespace and truncates
    to 500 characters. The result is trimmed again after truncation so
    that sanitizing twice yields the same value.

    Args:
        raw: Untrusted input

    Returns:
        Sanitized string (possibly empty)
    """
    cleaned = _DISALLOWED_CHARACTERS.sub("", raw).strip()
    return cleaned[:MAX_INPUT_LENGTH].strip()
