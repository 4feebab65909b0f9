"""Shared text normalization utilities.

Used to analyze place names, country names and ancestor qualifiers the
same way on both sides of a match: once when the index is opened and
once when a reference is turned into a query.
"""

import re
import unicodedata


def normalize_name(
    s: str,
    *,
    allowed_chars: str = r"a-z0-9\s\-",
) -> str:
    """Generic normalization for matching.

    Transformations:
      1. Unicode normalization (NFKD) and ASCII transliteration
      2. Lowercase
      3. Remove punctuation (keep only allowed_chars)
      4. Collapse whitespace

    Args:
        s: Raw text to normalize
        allowed_chars: Regex character class for allowed characters (default: alphanumeric, space, hyphen)

    Returns:
        Normalized string for matching

    Examples:
        >>> normalize_name("São Paulo")
        'sao paulo'

        >>> normalize_name("St. John's")
        'st john s'
    """
    if not s:
        return ""

    # Unicode normalization and ASCII conversion
    s = unicodedata.normalize("NFKD", s)
    s = s.encode("ascii", "ignore").decode("ascii")

    s = s.lower()

    # Remove punctuation except allowed characters
    s = re.sub(rf"[^{allowed_chars}]", " ", s)

    # Collapse whitespace
    s = re.sub(r"\s+", " ", s).strip()

    return s


def normalize_quotes(s: str) -> str:
    """Normalize curly quotes and apostrophes to their ASCII forms.

    Examples:
        >>> normalize_quotes("Hawai’i")
        "Hawai'i"
    """
    s = s.replace("‘", "'").replace("’", "'")
    s = s.replace("“", '"').replace("”", '"')
    return s


__all__ = [
    "normalize_name",
    "normalize_quotes",
]
