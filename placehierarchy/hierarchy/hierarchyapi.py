"""Place hierarchy resolution API.

Public API for ancestor lookups and place disambiguation against the
pre-built GeoNames hierarchy index. Every function accepts an explicit
HierarchyIndex; without one it uses the process-wide index opened from the
configured location.

Index location, in priority order:
  1. Explicit path passed to load_hierarchy_index()
  2. PLACEHIERARCHY_INDEX_PATH environment variable
  3. Module-local data: placehierarchy/hierarchy/data/hierarchy.parquet (or .csv)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Optional, Set, Union

from placehierarchy.hierarchy.hierarchyerrors import IndexAccessError
from placehierarchy.hierarchy.hierarchyindex import HierarchyIndex
from placehierarchy.hierarchy.hierarchymapper import Location
from placehierarchy.hierarchy.hierarchyresolver import (
    AncestorResolver,
    PlaceDisambiguator,
    check_index,
)
from placehierarchy.utils.dataloader import find_data_file, format_not_found_error

logger = logging.getLogger(__name__)

INDEX_PATH_ENV = "PLACEHIERARCHY_INDEX_PATH"
INDEX_FILENAMES = ["hierarchy.parquet", "hierarchy.csv"]

_loaded_path: Optional[Path] = None


def resolve_index_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Work out where the hierarchy index lives.

    Args:
        path: Optional explicit path; always wins when given

    Returns:
        Path to the index file

    Raises:
        IndexAccessError: If no path is given, none is configured, and no
            index ships with the package
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(INDEX_PATH_ENV)
    if env_path:
        return Path(env_path)

    found_path = find_data_file(
        module_file=__file__,
        subdirectory="hierarchy",
        filenames=INDEX_FILENAMES,
        module_local_data=True,
    )
    if found_path is None:
        error_msg = format_not_found_error(
            subdirectory="hierarchy",
            searched_locations=[
                ("Environment variable", os.environ.get(INDEX_PATH_ENV, "Not set")),
                ("Module-local data", Path(__file__).parent / "data"),
                ("Package data", Path(__file__).parent.parent / "data" / "hierarchy"),
            ],
            fix_instructions=[
                f"Set {INDEX_PATH_ENV} to the pre-built hierarchy index (.parquet or .csv)",
                "Or place hierarchy.parquet in placehierarchy/hierarchy/data/",
            ],
        )
        raise IndexAccessError(error_msg)

    return found_path


@lru_cache(maxsize=1)
def _open_index(index_path: Path) -> HierarchyIndex:
    return HierarchyIndex(index_path)


def load_hierarchy_index(path: Optional[Union[str, Path]] = None) -> HierarchyIndex:
    """Open the hierarchy index once and reuse it.

    Uses LRU cache to keep one loaded index per process. Asking for a
    different location replaces the cached index.

    Args:
        path: Optional explicit path to the index file

    Returns:
        Open HierarchyIndex shared by every caller asking for the same location

    Raises:
        IndexAccessError: If the index cannot be found or opened

    Examples:
        >>> index = load_hierarchy_index()
        >>> len(index)
        12
    """
    global _loaded_path

    index_path = resolve_index_path(path)
    index = _open_index(index_path)
    if index.closed:
        # Closed directly by a caller; drop it and open a fresh one
        _open_index.cache_clear()
        index = _open_index(index_path)
    _loaded_path = index_path
    return index


def close_hierarchy_index() -> None:
    """Close the index opened by load_hierarchy_index() and clear the cache.

    Call once at shutdown. Later calls to load_hierarchy_index() reopen.
    """
    global _loaded_path

    if _loaded_path is not None and _open_index.cache_info().currsize:
        # Cache hit: the single cached handle is the last one loaded
        index = _open_index(_loaded_path)
        try:
            index.close()
        except Exception as e:
            logger.warning(f"Issue closing hierarchy index {index.source}: {e}")

    _loaded_path = None
    _open_index.cache_clear()
    logger.info("Cleared hierarchy index cache")


def find_location_ancestors(place_id: str, *, index: Optional[HierarchyIndex] = None) -> Set[int]:
    """Return the ancestor ids of a GeoNames place.

    Args:
        place_id: GeoNames id as a digits-only string
        index: Optional index handle; defaults to the process-wide index

    Returns:
        Set of ancestor ids, empty when the place is unknown or ambiguous

    Raises:
        IndexAccessError: On index I/O failure or malformed ancestor data

    Examples:
        >>> find_location_ancestors("5308655")
        {5313457, 5551752, 6252001, 6255149, 6295630}
    """
    if index is None:
        index = load_hierarchy_index()
    return AncestorResolver(index).find_ancestors(place_id)


def find_geoname_location(
    references: Iterable[str],
    *,
    index: Optional[HierarchyIndex] = None,
) -> Dict[str, Location]:
    """Resolve place references (GeoNames ids or place names) to Locations.

    Args:
        references: e.g. {"5317058", "Phoenix, Arizona", "Mexico"}
        index: Optional index handle; defaults to the process-wide index

    Returns:
        Dict mapping each resolved reference to its Location. Unresolved
        references are absent.

    Raises:
        IndexAccessError: On index I/O failure

    Examples:
        >>> locations = find_geoname_location({"Phoenix, Arizona", "5317058"})
        >>> locations["Phoenix, Arizona"].geoname_id
        5308655
    """
    if index is None:
        index = load_hierarchy_index()
    return PlaceDisambiguator(index).resolve_all(references)


def match_geoname_location(
    reference: str,
    *,
    index: Optional[HierarchyIndex] = None,
) -> Optional[Location]:
    """Resolve a single place reference, or None if it does not resolve.

    Examples:
        >>> match_geoname_location("Phoenix, Oregon").population
        4538
    """
    return find_geoname_location([reference], index=index).get(reference)


def verify_hierarchy_index(index: Optional[HierarchyIndex] = None, **probes) -> None:
    """Run the known-lookup self test against an index.

    Keyword arguments are passed through to check_index() to override the
    probes (ancestor_probe, expected_ancestors, location_probes, ...).

    Raises:
        IndexAccessError: If the index fails the test
    """
    if index is None:
        index = load_hierarchy_index()
    check_index(index, **probes)


__all__ = [
    "INDEX_PATH_ENV",
    "resolve_index_path",
    "load_hierarchy_index",
    "close_hierarchy_index",
    "find_location_ancestors",
    "find_geoname_location",
    "match_geoname_location",
    "verify_hierarchy_index",
]
