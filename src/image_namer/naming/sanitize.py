"""Turn free-text model output into a safe filename slug."""

import re
from typing import Final

MAX_FILENAME_LENGTH: Final = 30

_QUOTES = re.compile(r"['\"`‘’“”]")
_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def sanitize_filename(text: str) -> str:
    """Normalise arbitrary text to ``^[a-z0-9]+(-[a-z0-9]+)*$`` (or ``""``), max 30 chars.

    Pure and idempotent: ``sanitize_filename(sanitize_filename(x)) == sanitize_filename(x)``.

    Examples:
        >>> sanitize_filename('"A Red  Sports Car!"')
        'a-red-sports-car'
    """
    name = _QUOTES.sub("", text)
    name = _WHITESPACE.sub("-", name)
    name = _DISALLOWED.sub("", name)
    name = _HYPHEN_RUNS.sub("-", name).strip("-")
    name = name.lower()[:MAX_FILENAME_LENGTH]
    # Truncation can expose a hyphen at the cut
    return name.rstrip("-")
