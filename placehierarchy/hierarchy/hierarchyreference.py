"""Place Reference Classification
-------------------------------

Turns a caller supplied place reference into a tagged value, then into the
query that resolves it:

  "5308655"                   -> IdentifierReference(geoname_id=5308655)
  "Phoenix, Arizona"          -> QualifiedReference(name='Phoenix', ancestors=('Arizona',))
  "Mexico"                    -> BareReference(name='Mexico')

Query shapes:
  Identifier:  geonameid == reference, 1 hit, unsorted
  Qualified:   every ancestor qualifier AND name == location, best population
  Bare:        name == location OR country == location, best population

API:
  classify_reference(reference) -> IdentifierReference | QualifiedReference | BareReference
  build_query(parsed) -> QueryPlan
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from placehierarchy.hierarchy.hierarchyerrors import InvalidReferenceError
from placehierarchy.hierarchy.hierarchyindex import (
    ANCESTOR_NAMES_FIELD,
    COUNTRY_FIELD,
    GEONAME_ID_FIELD,
    NAME_FIELD,
    POPULATION_FIELD,
)
from placehierarchy.hierarchy.hierarchynormalize import analyze_text, analyze_words, split_names
from placehierarchy.hierarchy.hierarchyquery import (
    Query,
    SortField,
    Term,
    all_of,
    any_of,
)


# Bare GeoNames identifier: ASCII digits only, nothing around them
GEONAME_ID_REGEX = re.compile(r"[0-9]{1,12}")

POPULATION_SORT = SortField(POPULATION_FIELD, descending=True)


@dataclass(frozen=True)
class IdentifierReference:
    reference: str
    geoname_id: int


@dataclass(frozen=True)
class QualifiedReference:
    reference: str
    name: str
    ancestors: Tuple[str, ...]


@dataclass(frozen=True)
class BareReference:
    reference: str
    name: str


PlaceReference = Union[IdentifierReference, QualifiedReference, BareReference]


@dataclass(frozen=True)
class QueryPlan:
    query: Query
    limit: int = 1
    sort: Optional[SortField] = None


def is_geoname_id(reference: str) -> bool:
    """True if the reference is a bare numeric GeoNames identifier."""
    return GEONAME_ID_REGEX.fullmatch(reference) is not None


def _require_text(reference: str, value: str, what: str) -> str:
    if not analyze_text(value):
        raise InvalidReferenceError(reference, f"Empty {what}")
    return value


def classify_reference(reference: str) -> PlaceReference:
    """
    Classify a place reference by shape.

    Text references are split on the first comma: the part before it is the
    place name, every comma separated part after it is an ancestor qualifier.
    Blank qualifiers are ignored.

    Args:
        reference: Non-empty place reference string

    Returns:
        IdentifierReference, QualifiedReference or BareReference

    Raises:
        InvalidReferenceError: If the reference is not a string, or the name
            or all qualifiers are empty once analyzed

    Examples:
        >>> classify_reference("5317058")
        IdentifierReference(reference='5317058', geoname_id=5317058)

        >>> classify_reference("Phoenix, Arizona, United States")
        QualifiedReference(reference='Phoenix, Arizona, United States', name='Phoenix',
                           ancestors=('Arizona', 'United States'))
    """
    if not isinstance(reference, str):
        raise InvalidReferenceError(reference, "Place reference must be a string")

    if is_geoname_id(reference):
        return IdentifierReference(reference=reference, geoname_id=int(reference))

    location, sep, parents = reference.partition(",")
    location = _require_text(reference, location.strip(), "place name")

    if not sep:
        return BareReference(reference=reference, name=location)

    ancestors = tuple(name for name in split_names(parents) if analyze_words(name))
    if not ancestors:
        raise InvalidReferenceError(reference, "Empty ancestor qualifiers")

    return QualifiedReference(reference=reference, name=location, ancestors=ancestors)


def build_query(parsed: PlaceReference) -> QueryPlan:
    """Build the index query for a classified reference."""
    if isinstance(parsed, IdentifierReference):
        # Literal reference value; ids are exact and unique by construction
        return QueryPlan(query=Term(GEONAME_ID_FIELD, parsed.reference), limit=1)

    if isinstance(parsed, QualifiedReference):
        qualifiers = [Term(ANCESTOR_NAMES_FIELD, ancestor) for ancestor in parsed.ancestors]
        query = all_of(*qualifiers, Term(NAME_FIELD, parsed.name))
        return QueryPlan(query=query, limit=1, sort=POPULATION_SORT)

    if isinstance(parsed, BareReference):
        query = any_of(Term(NAME_FIELD, parsed.name), Term(COUNTRY_FIELD, parsed.name))
        return QueryPlan(query=query, limit=1, sort=POPULATION_SORT)

    raise TypeError(f"Unsupported place reference: {parsed!r}")


__all__ = [
    "GEONAME_ID_REGEX",
    "IdentifierReference",
    "QualifiedReference",
    "BareReference",
    "PlaceReference",
    "QueryPlan",
    "is_geoname_id",
    "classify_reference",
    "build_query",
]
