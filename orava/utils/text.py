"""Name mapping helpers used to match record fields to placeholder names."""

import re
from functools import lru_cache

# Handles sequences like "HTTPRequest" -> "HTTP_Request" or "SSLError" -> "SSL_Error"
_SNAKE_CASE_RE_ACRONYM_SEQUENCE = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
# Handles transitions like "camelCase" -> "camel_Case"
_SNAKE_CASE_RE_LOWER_UPPER_TRANSITION = re.compile(r"([a-z\d])([A-Z])")
_SNAKE_CASE_RE_REPLACE_SEP = re.compile(r"[-\s.]+")
_SNAKE_CASE_RE_CLEAN_MULTIPLE_UNDERSCORE = re.compile(r"__+")

__all__ = (
    "identity",
    "snake_case",
)


@lru_cache(maxsize=1024)
def snake_case(string: str) -> str:
    """Convert a string to snake_case.

    Handles camelCase, PascalCase and acronyms, so ``"FullName"`` becomes
    ``"full_name"`` and ``"HTTPRequest"`` becomes ``"http_request"``. Names that
    are already snake_case come back unchanged, apart from lowercasing.

    Args:
        string: The string to convert.

    Returns:
        The snake_case version of the string.
    """
    if not string:
        return ""
    s = _SNAKE_CASE_RE_REPLACE_SEP.sub("_", string.strip())
    s = _SNAKE_CASE_RE_ACRONYM_SEQUENCE.sub(r"\1_\2", s)
    s = _SNAKE_CASE_RE_LOWER_UPPER_TRANSITION.sub(r"\1_\2", s)
    s = _SNAKE_CASE_RE_CLEAN_MULTIPLE_UNDERSCORE.sub("_", s)
    return s.lower()


def identity(string: str) -> str:
    """Name mapper that leaves field names untouched."""
    return string
