"""Place Hierarchy Resolution
--------------------------

Two read-only resolvers over a shared HierarchyIndex handle:

  AncestorResolver.find_ancestors(place_id) -> set[int]
      Ancestor closure of one place, read from the place's own record.

  PlaceDisambiguator.resolve_all(references) -> dict[str, Location]
      One canonical Location per resolvable reference. Among several places
      matching a text reference, the most populous one wins.

Neither resolver keeps state between calls; each call opens its own read
session and closes it before returning.

check_index() runs a few known lookups to confirm an index is usable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Set

from placehierarchy.hierarchy.hierarchyerrors import (
    IndexAccessError,
    InvalidReferenceError,
    MalformedAncestorDataError,
)
from placehierarchy.hierarchy.hierarchyindex import (
    ANCESTOR_IDS_FIELD,
    GEONAME_ID_FIELD,
    HierarchyIndex,
)
from placehierarchy.hierarchy.hierarchymapper import Location, map_record
from placehierarchy.hierarchy.hierarchynormalize import parse_ancestor_ids
from placehierarchy.hierarchy.hierarchyquery import Term
from placehierarchy.hierarchy.hierarchyreference import build_query, classify_reference

logger = logging.getLogger(__name__)


class AncestorResolver:
    """Find the containing places of a GeoNames place."""

    def __init__(self, index: HierarchyIndex):
        self._index = index

    def find_ancestors(self, place_id: str) -> Set[int]:
        """
        Return every ancestor id recorded for a place.

        Args:
            place_id: GeoNames id as a digits-only string (validated by the caller)

        Returns:
            Set of ancestor ids. Empty if no place has this id, or if more
            than one record does.

        Raises:
            IndexAccessError: If the index cannot be read, or the record's
                ancestor field is malformed

        Examples:
            >>> AncestorResolver(index).find_ancestors("5308655")
            {5313457, 5551752, 6252001, 6255149, 6295630}
        """
        query = Term(GEONAME_ID_FIELD, place_id)
        logger.info(f"Searching ancestors for: {query}")

        with self._index.open_session() as session:
            # Ask for two hits so a duplicated id is detectable
            refs = session.search(query, limit=2)
            if len(refs) != 1:
                logger.info(f"No unique place for {place_id} ({len(refs)} hits)")
                return set()
            document = session.fetch(refs[0])

        ancestors = parse_ancestor_ids(document.get(ANCESTOR_IDS_FIELD))
        if int(place_id) in ancestors:
            raise MalformedAncestorDataError(f"Place {place_id} lists itself as an ancestor")

        logger.info(f"Results : {len(ancestors)}")
        return ancestors


@dataclass
class DisambiguationResult:
    """Outcome of a batch disambiguation.

    locations: resolved references, keyed by the reference as given
    diagnostics: references that could not be queried, with the reason
    """

    locations: Dict[str, Location] = field(default_factory=dict)
    diagnostics: Dict[str, str] = field(default_factory=dict)


class PlaceDisambiguator:
    """Resolve mixed place references to canonical Locations."""

    def __init__(self, index: HierarchyIndex):
        self._index = index

    def resolve_all(self, references: Iterable[str]) -> Dict[str, Location]:
        """
        Resolve a batch of place references.

        References that match nothing are left out of the result; callers
        should treat a missing key as unresolved. References that cannot be
        queried at all are skipped the same way and logged.

        Args:
            references: Place references, e.g. {"5317058", "Phoenix, Arizona", "Mexico"}

        Returns:
            Dict mapping each resolved reference to its Location

        Raises:
            IndexAccessError: If the index cannot be read

        Examples:
            >>> PlaceDisambiguator(index).resolve_all({"Phoenix, Arizona", "5317058"})
            {'Phoenix, Arizona': Location(geoname_id=5308655, name='Phoenix', ...),
             '5317058': Location(geoname_id=5317058, name='Tempe', ...)}
        """
        return self.resolve_all_detailed(references).locations

    def resolve_all_detailed(self, references: Iterable[str]) -> DisambiguationResult:
        """Resolve a batch and also report references skipped as unqueryable."""
        result = DisambiguationResult()
        unique = list(dict.fromkeys(references))
        if not unique:
            return result

        with self._index.open_session() as session:
            for reference in unique:
                try:
                    plan = build_query(classify_reference(reference))
                except InvalidReferenceError as e:
                    logger.warning(f"Skipping place reference {reference!r}: {e.reason}")
                    result.diagnostics[reference] = e.reason
                    continue

                logger.debug(f"Searching location for {reference!r}: {plan.query}")
                refs = session.search(plan.query, limit=plan.limit, sort=plan.sort)
                if len(refs) == 1:
                    result.locations[reference] = map_record(session.fetch(refs[0]))

        logger.info(f"Resolved {len(result.locations)}/{len(unique)} place references")
        return result


def check_index(
    index: HierarchyIndex,
    ancestor_probe: str = "4831725",
    expected_ancestors: int = 5,
    location_probes: Sequence[str] = ("Phoenix, Arizona", "5317058", "8506558"),
    expected_locations: Optional[int] = None,
) -> None:
    """
    Confirm an index answers known lookups.

    Args:
        index: Open hierarchy index
        ancestor_probe: Place id whose ancestors are looked up
        expected_ancestors: Number of ancestors the probe must have
        location_probes: References that must all resolve
        expected_locations: Number of probes that must resolve (default: all)

    Raises:
        IndexAccessError: If a lookup fails or returns an unexpected count
    """
    if expected_locations is None:
        expected_locations = len(set(location_probes))

    try:
        ancestors = AncestorResolver(index).find_ancestors(ancestor_probe)
        if len(ancestors) != expected_ancestors:
            raise IndexAccessError(
                f"Test query should have retrieved {expected_ancestors} records, "
                f"instead retrieved: {len(ancestors)}"
            )

        locations = PlaceDisambiguator(index).resolve_all(set(location_probes))
        if len(locations) != expected_locations:
            raise IndexAccessError(
                f"Test query should have retrieved {expected_locations} records, "
                f"instead retrieved: {len(locations)}"
            )
    except IndexAccessError as e:
        logger.error(f"Failed to verify hierarchy index: {e}")
        raise
    except Exception as e:
        logger.error(f"Failed to verify hierarchy index: {e}")
        raise IndexAccessError(f"Failed to verify hierarchy index: {e}") from e

    logger.info("Successfully tested hierarchy index.")


__all__ = [
    "AncestorResolver",
    "DisambiguationResult",
    "PlaceDisambiguator",
    "check_index",
]
