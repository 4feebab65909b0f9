"""Shared data loading utilities for the hierarchy index.

Locates the pre-built index file in the standard locations and reads it
into a DataFrame regardless of whether it was exported as parquet or CSV.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd


def find_data_file(
    module_file: str,
    subdirectory: str,
    filenames: List[str],
    module_local_data: bool = True,
) -> Optional[Path]:
    """Find data file by searching standard locations.

    Search priority:
    1. Module-local data: {module_dir}/data/ (if module_local_data=True)
    2. Package data: placehierarchy/data/{subdirectory}/

    Args:
        module_file: __file__ from the calling module
        subdirectory: Subdirectory name under package data (e.g., 'hierarchy')
        filenames: Candidate filenames in priority order (e.g., ['hierarchy.parquet', 'hierarchy.csv'])
        module_local_data: If True, search module_dir/data/ first

    Returns:
        Path to found file, or None if not found

    Examples:
        >>> path = find_data_file(__file__, 'hierarchy', ['hierarchy.parquet', 'hierarchy.csv'])
    """
    if module_local_data:
        data_dir = Path(module_file).parent / "data"
        for filename in filenames:
            p = data_dir / filename
            if p.exists():
                return p

    pkg_dir = Path(module_file).parent.parent
    data_dir = pkg_dir / "data" / subdirectory
    for filename in filenames:
        p = data_dir / filename
        if p.exists():
            return p

    return None


def load_parquet_or_csv(
    file_path: Path,
    dtype: Optional[Dict[str, Union[str, type]]] = None,
    na_values: Optional[List[str]] = None,
) -> pd.DataFrame:
    """Load DataFrame from parquet or CSV file based on extension.

    Args:
        file_path: Path to parquet or CSV file
        dtype: Optional column types, applied to CSV input only. Parquet
               files carry their own schema.
        na_values: Optional CSV cells read as missing. When given, these
               replace pandas' default NA strings ("NA", "None", "nan", ...),
               which are real place names and country codes.

    Returns:
        Loaded DataFrame

    Raises:
        ValueError: If file extension is not .parquet or .csv
    """
    if file_path.suffix == ".parquet":
        return pd.read_parquet(file_path)
    elif file_path.suffix == ".csv":
        if na_values is None:
            return pd.read_csv(file_path, dtype=dtype)
        return pd.read_csv(file_path, dtype=dtype, keep_default_na=False, na_values=na_values)
    else:
        raise ValueError(f"Unsupported file format: {file_path.suffix}. Use .parquet or .csv")


def format_not_found_error(
    subdirectory: str,
    searched_locations: List[Tuple[str, Union[str, Path]]],
    fix_instructions: List[str],
) -> str:
    """Format a helpful "not found" error message.

    Args:
        subdirectory: Data subdirectory name (e.g., 'hierarchy')
        searched_locations: List of (description, path) tuples for locations searched
        fix_instructions: List of instructions to fix the issue

    Returns:
        Formatted error message string
    """
    lines = [f"No {subdirectory} data found in standard locations.\n"]

    lines.append("Searched:")
    for i, (desc, path) in enumerate(searched_locations, 1):
        lines.append(f"  {i}. {desc}: {path}")

    lines.append("\nTo fix:")
    for instruction in fix_instructions:
        lines.append(f"  • {instruction}")

    return "\n".join(lines)


__all__ = [
    "find_data_file",
    "load_parquet_or_csv",
    "format_not_found_error",
]
