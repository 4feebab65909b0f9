"""Tests for shared utilities."""

import pytest
from pathlib import Path
import pandas as pd

from placehierarchy.utils.dataloader import (
    find_data_file,
    load_parquet_or_csv,
    format_not_found_error,
)
from placehierarchy.utils.normalize import normalize_name, normalize_quotes


class TestFindDataFile:
    """Test data file finding utility"""

    def test_find_module_local_data(self, tmp_path):
        """Module-local data/ directory is searched first"""
        module_dir = tmp_path / "placehierarchy" / "hierarchy"
        (module_dir / "data").mkdir(parents=True)
        (module_dir / "data" / "hierarchy.csv").write_text("geonameid\n1\n")

        path = find_data_file(
            module_file=str(module_dir / "hierarchyapi.py"),
            subdirectory="hierarchy",
            filenames=["hierarchy.parquet", "hierarchy.csv"],
        )
        assert path == module_dir / "data" / "hierarchy.csv"

    def test_find_package_data(self, tmp_path):
        """Package data/{subdirectory} is the fallback"""
        module_dir = tmp_path / "placehierarchy" / "hierarchy"
        module_dir.mkdir(parents=True)
        data_dir = tmp_path / "placehierarchy" / "data" / "hierarchy"
        data_dir.mkdir(parents=True)
        (data_dir / "hierarchy.parquet").write_bytes(b"")

        path = find_data_file(
            module_file=str(module_dir / "hierarchyapi.py"),
            subdirectory="hierarchy",
            filenames=["hierarchy.parquet"],
        )
        assert path == data_dir / "hierarchy.parquet"

    def test_filename_priority(self, tmp_path):
        data_dir = tmp_path / "hierarchy" / "data"
        data_dir.mkdir(parents=True)
        (data_dir / "hierarchy.parquet").write_bytes(b"")
        (data_dir / "hierarchy.csv").write_text("")

        path = find_data_file(
            module_file=str(tmp_path / "hierarchy" / "hierarchyapi.py"),
            subdirectory="hierarchy",
            filenames=["hierarchy.parquet", "hierarchy.csv"],
        )
        assert path.name == "hierarchy.parquet"

    def test_find_nonexistent_file(self, tmp_path):
        """Test that None is returned when file not found"""
        path = find_data_file(
            module_file=str(tmp_path / "hierarchy" / "hierarchyapi.py"),
            subdirectory="nonexistent",
            filenames=["missing.parquet"],
        )
        assert path is None


class TestLoadParquetOrCsv:
    """Test data loading utility"""

    def test_load_parquet(self, tmp_path):
        temp_path = tmp_path / "places.parquet"
        pd.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6]}).to_parquet(temp_path)

        loaded_df = load_parquet_or_csv(temp_path)
        assert isinstance(loaded_df, pd.DataFrame)
        assert len(loaded_df) == 3
        assert list(loaded_df.columns) == ["a", "b"]

    def test_load_csv(self, tmp_path):
        temp_path = tmp_path / "places.csv"
        temp_path.write_text("a,b\n1,4\n2,5\n3,6\n")

        loaded_df = load_parquet_or_csv(temp_path)
        assert len(loaded_df) == 3
        assert list(loaded_df.columns) == ["a", "b"]

    def test_load_csv_with_dtype(self, tmp_path):
        """Delimited id columns stay strings"""
        temp_path = tmp_path / "places.csv"
        temp_path.write_text('geonameid,ancestor_ids\n1,6252001\n2,"6252001,6295630"\n')

        loaded_df = load_parquet_or_csv(temp_path, dtype={"ancestor_ids": str})
        assert loaded_df["ancestor_ids"].tolist() == ["6252001", "6252001,6295630"]

    def test_load_csv_with_na_values(self, tmp_path):
        """Only the listed cells become missing"""
        temp_path = tmp_path / "places.csv"
        temp_path.write_text("name,country\nNone,Italy\nNamibia,NA\nEarth,\n")

        loaded_df = load_parquet_or_csv(temp_path, dtype={"name": str, "country": str},
                                        na_values=[""])
        assert loaded_df["name"].tolist() == ["None", "Namibia", "Earth"]
        assert loaded_df["country"].tolist()[:2] == ["Italy", "NA"]
        assert pd.isna(loaded_df["country"].iloc[2])

    def test_unsupported_format(self):
        """Test that unsupported formats raise ValueError"""
        with pytest.raises(ValueError, match="Unsupported file format"):
            load_parquet_or_csv(Path("/tmp/test.txt"))


class TestFormatNotFoundError:
    """Test error message formatting utility"""

    def test_format_basic_error(self):
        msg = format_not_found_error(
            subdirectory="hierarchy",
            searched_locations=[
                ("Environment variable", "Not set"),
                ("Module-local data", Path("/path/2")),
            ],
            fix_instructions=[
                "Set PLACEHIERARCHY_INDEX_PATH",
                "Place hierarchy.parquet in data/",
            ],
        )

        assert "No hierarchy data found" in msg
        assert "Searched:" in msg
        assert "1. Environment variable: Not set" in msg
        assert "2. Module-local data: /path/2" in msg
        assert "To fix:" in msg
        assert "Set PLACEHIERARCHY_INDEX_PATH" in msg


def test_normalize_name():
    assert normalize_name("São Paulo") == "sao paulo"
    assert normalize_name("  Winston-Salem ") == "winston-salem"
    assert normalize_name("St. John's") == "st john s"
    assert normalize_name("") == ""


def test_normalize_quotes():
    assert normalize_quotes("Hawai’i") == "Hawai'i"
    assert normalize_quotes("“Phoenix”") == '"Phoenix"'
