"""Shared utilities for the placehierarchy package."""

from placehierarchy.utils.dataloader import (
    find_data_file,
    load_parquet_or_csv,
    format_not_found_error,
)
from placehierarchy.utils.normalize import (
    normalize_name,
    normalize_quotes,
)

__all__ = [
    # Data loading
    "find_data_file",
    "load_parquet_or_csv",
    "format_not_found_error",
    # Normalization
    "normalize_name",
    "normalize_quotes",
]
