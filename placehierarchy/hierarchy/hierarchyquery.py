"""Structured queries over the hierarchy index.

Queries are small immutable trees composed in code, never parsed from a
query string, so user supplied place names cannot change the shape of a
query:

  Term(field, value)      one field matches one value
  And(clauses)            every clause matches
  Or(clauses)             at least one clause matches
  SortField(field)        order hits by a numeric field

How a Term matches is decided by the analyzer the index assigns to its
field (see FIELD_ANALYZERS in hierarchyindex):

  KeywordAnalyzer    exact string equality (identifiers)
  StandardAnalyzer   equality after text analysis (names, countries)
  WordSetAnalyzer    all query words present in the field (ancestor names)

API:
  all_of(*clauses) -> And
  any_of(*clauses) -> Or
  Query.evaluate(analyzed, analyzers) -> boolean Series
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

import pandas as pd

from placehierarchy.hierarchy.hierarchynormalize import analyze_text, analyze_words


# ---- Analyzers ----

class KeywordAnalyzer:
    """Index and match values verbatim."""

    name = "keyword"

    def index_value(self, value: Any) -> str:
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        # Integer ids read back as floats when the column had gaps
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    def query_value(self, value: str) -> str:
        return str(value)

    def matches(self, column: pd.Series, term: str) -> pd.Series:
        return column == term


class StandardAnalyzer:
    """Match whole values after text analysis (case, accents, punctuation)."""

    name = "standard"

    def index_value(self, value: Any) -> str:
        return analyze_text(value)

    def query_value(self, value: str) -> str:
        return analyze_text(value)

    def matches(self, column: pd.Series, term: str) -> pd.Series:
        if not term:
            return pd.Series(False, index=column.index)
        return column == term


class WordSetAnalyzer:
    """Match when every query word appears among the field's words."""

    name = "wordset"

    def index_value(self, value: Any) -> frozenset:
        return analyze_words(value)

    def query_value(self, value: str) -> frozenset:
        return analyze_words(value)

    def matches(self, column: pd.Series, term: frozenset) -> pd.Series:
        if not term:
            return pd.Series(False, index=column.index)
        return column.map(term.issubset).astype(bool)


Analyzer = Union[KeywordAnalyzer, StandardAnalyzer, WordSetAnalyzer]


class QueryError(ValueError):
    """A query refers to an unknown field or is structurally empty."""


# ---- Query nodes ----

@dataclass(frozen=True)
class Term:
    field: str
    value: str

    def evaluate(self, analyzed: pd.DataFrame, analyzers: Mapping[str, Analyzer]) -> pd.Series:
        analyzer = analyzers.get(self.field)
        if analyzer is None or self.field not in analyzed.columns:
            raise QueryError(f"Unknown field in query: {self.field}")
        return analyzer.matches(analyzed[self.field], analyzer.query_value(self.value))

    def __str__(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'{self.field}:"{escaped}"'


@dataclass(frozen=True)
class And:
    clauses: Tuple[Query, ...]

    def evaluate(self, analyzed: pd.DataFrame, analyzers: Mapping[str, Analyzer]) -> pd.Series:
        if not self.clauses:
            raise QueryError("AND query has no clauses")
        mask = pd.Series(True, index=analyzed.index)
        for clause in self.clauses:
            mask &= clause.evaluate(analyzed, analyzers)
        return mask

    def __str__(self) -> str:
        return "(" + " AND ".join(str(c) for c in self.clauses) + ")"


@dataclass(frozen=True)
class Or:
    clauses: Tuple[Query, ...]

    def evaluate(self, analyzed: pd.DataFrame, analyzers: Mapping[str, Analyzer]) -> pd.Series:
        if not self.clauses:
            raise QueryError("OR query has no clauses")
        mask = pd.Series(False, index=analyzed.index)
        for clause in self.clauses:
            mask |= clause.evaluate(analyzed, analyzers)
        return mask

    def __str__(self) -> str:
        return "(" + " OR ".join(str(c) for c in self.clauses) + ")"


Query = Union[Term, And, Or]


@dataclass(frozen=True)
class SortField:
    """Order hits by a numeric field; descending by default."""

    field: str
    descending: bool = True

    def __str__(self) -> str:
        return f"{self.field} {'desc' if self.descending else 'asc'}"


def all_of(*clauses: Query) -> And:
    """Conjunction of the given clauses."""
    return And(tuple(clauses))


def any_of(*clauses: Query) -> Or:
    """Disjunction of the given clauses."""
    return Or(tuple(clauses))


__all__ = [
    "KeywordAnalyzer",
    "StandardAnalyzer",
    "WordSetAnalyzer",
    "QueryError",
    "Term",
    "And",
    "Or",
    "SortField",
    "all_of",
    "any_of",
]
