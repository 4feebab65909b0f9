"""
Hierarchy Text Analysis
-----------------------

Helpers shared by the index (when analyzing stored fields) and the
reference parser (when analyzing query values):

  1. analyze_text: full-value analysis for exact name/country matching
  2. analyze_words: word set for ancestor qualifier matching
  3. split_names: split a comma-delimited list of names
  4. parse_ancestor_ids: decode the stored ancestor id field

Examples:
  >>> analyze_text("  São Paulo ")
  'sao paulo'

  >>> analyze_words("Maricopa County, Arizona")
  frozenset({'maricopa', 'county', 'arizona'})

  >>> parse_ancestor_ids("5551752,6252001,6255149")
  {5551752, 6252001, 6255149}
"""

import re
from numbers import Integral
from typing import Any, List, Set

import pandas as pd

from placehierarchy.hierarchy.hierarchyerrors import MalformedAncestorDataError
from placehierarchy.utils.normalize import normalize_name, normalize_quotes


_ANCESTOR_ID = re.compile(r"[0-9]+")


def analyze_text(s: Any) -> str:
    """
    Analyze a place or country name for exact matching.

    Transformations:
      - Normalize quotes/apostrophes
      - ASCII-fold and lowercase
      - Replace punctuation with spaces
      - Collapse whitespace

    Missing values (None/NaN) analyze to the empty string.

    Examples:
        >>> analyze_text("PHOENIX")
        'phoenix'

        >>> analyze_text("Hawai’i")
        'hawai i'
    """
    if s is None or (not isinstance(s, str) and pd.isna(s)):
        return ""
    return normalize_name(normalize_quotes(str(s)), allowed_chars=r"a-z0-9\s")


def analyze_words(s: Any) -> frozenset:
    """Analyze text into its set of words."""
    analyzed = analyze_text(s)
    return frozenset(analyzed.split()) if analyzed else frozenset()


def split_names(s: Any) -> List[str]:
    """Split a comma-delimited list of names, dropping blank entries."""
    if s is None or (not isinstance(s, str) and pd.isna(s)):
        return []
    return [part.strip() for part in str(s).split(",") if part.strip()]


def _ancestor_values(raw: Any) -> List[Any]:
    # A field may hold one delimited string or a list of them
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if pd.api.types.is_list_like(raw):
        return list(raw)
    return [raw]


def parse_ancestor_ids(raw: Any) -> Set[int]:
    """
    Decode the stored ancestor id field into a set of integers.

    The field is a comma-delimited string ("5551752,6252001"), or a list of
    such strings when the index stores several ancestor values for one place.
    Repeated ids collapse into the set. A missing or blank field means the
    place has no ancestors.

    Args:
        raw: Value of the ancestor id field as read from the index

    Returns:
        Set of ancestor identifiers

    Raises:
        MalformedAncestorDataError: If any token is not a non-negative integer.
            The whole lookup fails rather than returning a truncated set.

    Examples:
        >>> parse_ancestor_ids("6252001,6255149,6252001")
        {6252001, 6255149}

        >>> parse_ancestor_ids("")
        set()

        >>> parse_ancestor_ids("6252001,north america")
        Traceback (most recent call last):
        ...
        MalformedAncestorDataError: Malformed ancestor id 'north america' in '6252001,north america'
    """
    ancestors = set()
    for value in _ancestor_values(raw):
        if isinstance(value, bool) or (isinstance(value, Integral) and value < 0):
            raise MalformedAncestorDataError(f"Malformed ancestor id {value!r}")
        if isinstance(value, Integral):
            ancestors.add(int(value))
            continue
        if not isinstance(value, str):
            if pd.isna(value):
                continue
            if isinstance(value, float) and value.is_integer() and value >= 0:
                # CSV exports turn single-id columns with gaps into floats
                ancestors.add(int(value))
                continue
            raise MalformedAncestorDataError(f"Malformed ancestor id {value!r}")

        if not value.strip():
            continue
        for token in value.split(","):
            token = token.strip()
            if not _ANCESTOR_ID.fullmatch(token):
                raise MalformedAncestorDataError(
                    f"Malformed ancestor id {token!r} in {value!r}"
                )
            ancestors.add(int(token))

    return ancestors


__all__ = [
    "analyze_text",
    "analyze_words",
    "split_names",
    "parse_ancestor_ids",
]
