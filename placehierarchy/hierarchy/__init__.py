"""Place hierarchy resolution: ancestor lookups and place disambiguation."""

from placehierarchy.hierarchy.hierarchyapi import (
    load_hierarchy_index,
    close_hierarchy_index,
    find_location_ancestors,
    find_geoname_location,
    match_geoname_location,
    verify_hierarchy_index,
)
from placehierarchy.hierarchy.hierarchyerrors import (
    IndexAccessError,
    InvalidReferenceError,
    MalformedAncestorDataError,
)
from placehierarchy.hierarchy.hierarchyindex import HierarchyIndex, IndexSession
from placehierarchy.hierarchy.hierarchymapper import Location
from placehierarchy.hierarchy.hierarchyresolver import (
    AncestorResolver,
    DisambiguationResult,
    PlaceDisambiguator,
    check_index,
)

__all__ = [
    "load_hierarchy_index",
    "close_hierarchy_index",
    "find_location_ancestors",
    "find_geoname_location",
    "match_geoname_location",
    "verify_hierarchy_index",
    "IndexAccessError",
    "InvalidReferenceError",
    "MalformedAncestorDataError",
    "HierarchyIndex",
    "IndexSession",
    "Location",
    "AncestorResolver",
    "DisambiguationResult",
    "PlaceDisambiguator",
    "check_index",
]
