"""Phone number normalization for storage and search."""

import re

_FORMATTING_CHARS = re.compile(r"[\s\-()]")


def normalize_phone(raw: str | None) -> str | None:
    """Strip whitespace, hyphens and parentheses. Returns None for empty input.

    Other characters (digits, a leading +, extension letters) are kept as-is:
    "(555) 010-1" -> "5550101", "+1 202-555-1234" -> "+12025551234".
    """
    if raw is None:
        return None
    cleaned = _FORMATTING_CHARS.sub("", str(raw))
    return cleaned or None
