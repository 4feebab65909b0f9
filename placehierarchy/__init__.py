"""Place Hierarchy - GeoNames place resolution for sample metadata

Public API for resolving place references found in biological sample
metadata to canonical GeoNames locations, and for ancestor lookups over
the GeoNames containment hierarchy.

Usage:
    from placehierarchy import find_location_ancestors, find_geoname_location

    # Every place containing Phoenix (county, state, country, continent, Earth)
    ancestors = find_location_ancestors("5308655")  # Returns: {5313457, 5551752, ...}

    # Mixed GeoNames ids and place names
    locations = find_geoname_location({"5317058", "Phoenix, Arizona", "Mexico"})
    locations["Phoenix, Arizona"].geoname_id  # Returns: 5308655

    # Explicit index handle, closed at shutdown
    from placehierarchy import HierarchyIndex, PlaceDisambiguator
    index = HierarchyIndex("/data/geonames/hierarchy.parquet")
    PlaceDisambiguator(index).resolve_all({"Phoenix, Arizona"})
    index.close()

The index location defaults to the PLACEHIERARCHY_INDEX_PATH environment variable.
"""

__version__ = "0.1.0"

# ============================================================================
# Hierarchy Resolution API
# ============================================================================
# Primary interface: placehierarchy.hierarchy.hierarchyapi
# Implementation: placehierarchy.hierarchy.hierarchyresolver (internal)

from .hierarchy.hierarchyapi import (
    find_location_ancestors,   # Primary API - ancestor ids of a place
    find_geoname_location,     # Primary API - resolve mixed place references
    match_geoname_location,    # Resolve a single place reference
    load_hierarchy_index,      # Open (or reuse) the process-wide index
    close_hierarchy_index,     # Shutdown hook
    verify_hierarchy_index,    # Known-lookup self test
)

# ============================================================================
# Building blocks (explicit index handles)
# ============================================================================

from .hierarchy.hierarchyindex import HierarchyIndex
from .hierarchy.hierarchyresolver import (
    AncestorResolver,
    PlaceDisambiguator,
    DisambiguationResult,
)
from .hierarchy.hierarchymapper import Location
from .hierarchy.hierarchyerrors import (
    IndexAccessError,
    InvalidReferenceError,
    MalformedAncestorDataError,
)

__all__ = [
    # Version
    "__version__",

    # ========================================================================
    # PRIMARY APIS - Start here!
    # ========================================================================
    "find_location_ancestors",  # Place id -> ancestor ids
    "find_geoname_location",    # Place references -> Locations

    # ========================================================================
    # Hierarchy Resolution
    # ========================================================================
    "match_geoname_location",
    "load_hierarchy_index",
    "close_hierarchy_index",
    "verify_hierarchy_index",

    # ========================================================================
    # Building blocks
    # ========================================================================
    "HierarchyIndex",
    "AncestorResolver",
    "PlaceDisambiguator",
    "DisambiguationResult",
    "Location",
    "IndexAccessError",
    "InvalidReferenceError",
    "MalformedAncestorDataError",
]
