"""Read-only access to the pre-built place hierarchy index.

The index is a table with one row per GeoNames place (parquet or CSV),
loaded once per process into an immutable DataFrame. Searchable fields are
analyzed when the index is opened; queries run against the analyzed
columns and hits are materialized from the stored ones.

Columns:
  - geonameid: Integer place identifier (primary key)
  - name: Place name
  - country: Country name
  - population: Non-negative integer, used for ranking only
  - ancestor_ids: Comma-delimited ancestor ids, immediate parent first
  - ancestor_names: Comma-delimited ancestor names
  - lat, lon, admin1, feature_code: Optional, passed through to Location

Nothing in this module writes to the index.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from placehierarchy.hierarchy.hierarchyerrors import IndexAccessError
from placehierarchy.hierarchy.hierarchyquery import (
    KeywordAnalyzer,
    Query,
    SortField,
    StandardAnalyzer,
    WordSetAnalyzer,
)
from placehierarchy.utils.dataloader import load_parquet_or_csv

logger = logging.getLogger(__name__)

GEONAME_ID_FIELD = "geonameid"
NAME_FIELD = "name"
COUNTRY_FIELD = "country"
POPULATION_FIELD = "population"
ANCESTOR_IDS_FIELD = "ancestor_ids"
ANCESTOR_NAMES_FIELD = "ancestor_names"

REQUIRED_COLUMNS = (
    GEONAME_ID_FIELD,
    NAME_FIELD,
    COUNTRY_FIELD,
    POPULATION_FIELD,
    ANCESTOR_IDS_FIELD,
    ANCESTOR_NAMES_FIELD,
)

FIELD_ANALYZERS = {
    GEONAME_ID_FIELD: KeywordAnalyzer(),
    NAME_FIELD: StandardAnalyzer(),
    COUNTRY_FIELD: StandardAnalyzer(),
    ANCESTOR_NAMES_FIELD: WordSetAnalyzer(),
}

# Read delimited and text columns as strings when the index is a CSV export
_CSV_DTYPES = {
    ANCESTOR_IDS_FIELD: str,
    ANCESTOR_NAMES_FIELD: str,
    NAME_FIELD: str,
    COUNTRY_FIELD: str,
}

# Only empty cells are missing; "NA" (Namibia) and "None" (Piedmont) are names
_CSV_NA_VALUES = [""]


def _prepare_frame(frame: pd.DataFrame, source: str) -> pd.DataFrame:
    missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
    if missing:
        raise IndexAccessError(f"Hierarchy index at {source} is missing required columns: {missing}")

    frame = frame.reset_index(drop=True).copy()

    ids = pd.to_numeric(frame[GEONAME_ID_FIELD], errors="coerce")
    invalid = frame.index[ids.isna() | (ids < 0) | (ids % 1 != 0)]
    if len(invalid):
        raise IndexAccessError(
            f"Hierarchy index at {source} has {len(invalid)} rows without a valid "
            f"{GEONAME_ID_FIELD} (first at row {invalid[0]}: "
            f"{frame.at[invalid[0], GEONAME_ID_FIELD]!r})"
        )
    frame[GEONAME_ID_FIELD] = ids.astype("int64")

    frame[POPULATION_FIELD] = (
        pd.to_numeric(frame[POPULATION_FIELD], errors="coerce").fillna(0).astype("int64")
    )
    return frame


def _analyze_frame(frame: pd.DataFrame) -> pd.DataFrame:
    analyzed = pd.DataFrame(index=frame.index)
    for field, analyzer in FIELD_ANALYZERS.items():
        analyzed[field] = frame[field].map(analyzer.index_value)
    return analyzed


class IndexSession:
    """A read session against an open HierarchyIndex.

    Sessions are cheap and hold no mutable state shared with other sessions,
    so any number of them can run at once on different threads. Use as a
    context manager so the session is closed on every exit path.
    """

    def __init__(self, source: str, frame: pd.DataFrame, analyzed: pd.DataFrame):
        self._source = source
        self._frame = frame
        self._analyzed = analyzed
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise IndexAccessError(f"Read session on {self._source} is closed")

    def search(self, query: Query, limit: int, sort: Optional[SortField] = None) -> List[int]:
        """Run a query and return references to at most `limit` matching documents.

        Args:
            query: Structured query (Term, And, Or)
            limit: Maximum number of document references to return
            sort: Optional numeric sort; ties keep index order

        Returns:
            Document references in rank order, for use with fetch()

        Raises:
            IndexAccessError: If the session is closed or the query cannot be evaluated
        """
        self._check_open()
        if limit < 1:
            raise IndexAccessError(f"Search limit must be positive, got {limit}")

        try:
            mask = query.evaluate(self._analyzed, FIELD_ANALYZERS)
            hits = self._frame.loc[mask]
            if sort is not None:
                hits = hits.sort_values(
                    sort.field,
                    ascending=not sort.descending,
                    kind="mergesort",
                    na_position="last",
                )
        except IndexAccessError:
            raise
        except Exception as e:
            raise IndexAccessError(f"Could not search hierarchy index: {e}") from e

        return [int(ref) for ref in hits.index[:limit]]

    def fetch(self, ref: int) -> Dict[str, Any]:
        """Materialize a document reference into its stored field values."""
        self._check_open()
        try:
            return self._frame.loc[ref].to_dict()
        except KeyError as e:
            raise IndexAccessError(f"No document {ref} in hierarchy index") from e

    def close(self) -> None:
        self._closed = True
        self._frame = None
        self._analyzed = None

    def __enter__(self) -> "IndexSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class HierarchyIndex:
    """Process-wide handle on the hierarchy index.

    Open once at startup, share the handle with the resolvers, and close it
    once at shutdown. Per-query work goes through open_session().

    Examples:
        >>> index = HierarchyIndex("data/hierarchy.parquet")
        >>> with index.open_session() as session:
        ...     refs = session.search(Term("geonameid", "5308655"), limit=1)
        >>> index.close()
    """

    def __init__(self, path: Union[str, Path]):
        path = Path(path)
        try:
            frame = load_parquet_or_csv(path, dtype=_CSV_DTYPES, na_values=_CSV_NA_VALUES)
        except Exception as e:
            logger.error(f"Could not open hierarchy index at: {path} : {e}")
            raise IndexAccessError(f"Could not open hierarchy index at: {path} : {e}") from e

        self._open(frame, str(path))

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, source: str = "<memory>") -> "HierarchyIndex":
        """Wrap an already loaded DataFrame (tests, notebooks)."""
        index = cls.__new__(cls)
        index._open(frame, source)
        return index

    def _open(self, frame: pd.DataFrame, source: str) -> None:
        self.source = source
        self._frame = _prepare_frame(frame, source)
        self._analyzed = _analyze_frame(self._frame)
        self._closed = False
        logger.info(f"Connected to hierarchy index at: {source} ({len(self._frame)} places)")

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return 0 if self._closed else len(self._frame)

    def open_session(self) -> IndexSession:
        """Open a read session.

        Raises:
            IndexAccessError: If the index has been closed
        """
        if self._closed:
            raise IndexAccessError(f"Hierarchy index at {self.source} is closed")
        return IndexSession(self.source, self._frame, self._analyzed)

    def close(self) -> None:
        """Release the loaded index. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._frame = None
        self._analyzed = None
        logger.info(f"Hierarchy index closed: {self.source}")

    def __enter__(self) -> "HierarchyIndex":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "GEONAME_ID_FIELD",
    "NAME_FIELD",
    "COUNTRY_FIELD",
    "POPULATION_FIELD",
    "ANCESTOR_IDS_FIELD",
    "ANCESTOR_NAMES_FIELD",
    "REQUIRED_COLUMNS",
    "FIELD_ANALYZERS",
    "IndexSession",
    "HierarchyIndex",
]
