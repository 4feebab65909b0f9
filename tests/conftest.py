"""Shared test fixtures for placehierarchy tests."""

import pytest
import pandas as pd

from placehierarchy.hierarchy.hierarchyindex import HierarchyIndex


EARTH = "6295630"
NORTH_AMERICA = "6255149"
UNITED_STATES = "6252001"
US_CHAIN = f"{UNITED_STATES},{NORTH_AMERICA},{EARTH}"
US_NAMES = "United States,North America,Earth"
MARICOPA_CHAIN = f"5313457,5551752,{US_CHAIN}"
MARICOPA_NAMES = f"Maricopa County,Arizona,{US_NAMES}"


def _place(geonameid, name, country, population, ancestor_ids, ancestor_names,
           feature_code, admin1="", lat=None, lon=None):
    return {
        'geonameid': geonameid,
        'name': name,
        'country': country,
        'population': population,
        'ancestor_ids': ancestor_ids,
        'ancestor_names': ancestor_names,
        'lat': lat,
        'lon': lon,
        'admin1': admin1,
        'feature_code': feature_code,
    }


SAMPLE_PLACES = [
    _place(6295630, 'Earth', '', 6814400000, '', '', 'AREA'),
    _place(6255149, 'North America', '', 0, EARTH, 'Earth', 'CONT'),
    _place(6252001, 'United States', 'United States', 310232863,
           f"{NORTH_AMERICA},{EARTH}", 'North America,Earth', 'PCLI'),
    _place(5551752, 'Arizona', 'United States', 6392017, US_CHAIN, US_NAMES, 'ADM1',
           admin1='Arizona', lat=34.5003, lon=-111.50098),
    _place(5313457, 'Maricopa County', 'United States', 3817117,
           f"5551752,{US_CHAIN}", f"Arizona,{US_NAMES}", 'ADM2', admin1='Arizona'),
    _place(5308655, 'Phoenix', 'United States', 1563025, MARICOPA_CHAIN, MARICOPA_NAMES,
           'PPLA', admin1='Arizona', lat=33.44838, lon=-112.07404),
    _place(5308654, 'Phoenix', 'United States', 0, f"5551752,{US_CHAIN}",
           f"Arizona,{US_NAMES}", 'PPLL', admin1='Arizona'),
    _place(5317058, 'Tempe', 'United States', 161719, MARICOPA_CHAIN, MARICOPA_NAMES,
           'PPL', admin1='Arizona', lat=33.41477, lon=-111.90931),
    _place(8506558, 'Ahwatukee Foothills', 'United States', 77259, MARICOPA_CHAIN,
           MARICOPA_NAMES, 'PPLX', admin1='Arizona'),
    _place(5744337, 'Oregon', 'United States', 3831074, US_CHAIN, US_NAMES, 'ADM1',
           admin1='Oregon'),
    _place(5746545, 'Phoenix', 'United States', 4538, f"5735238,5744337,{US_CHAIN}",
           f"Jackson County,Oregon,{US_NAMES}", 'PPL', admin1='Oregon',
           lat=42.27541, lon=-122.81809),
    _place(4831725, 'Canton', 'United States', 10292, f"4835797,4831811,{US_CHAIN}",
           f"Hartford County,Connecticut,{US_NAMES}", 'PPL', admin1='Connecticut'),
    _place(3996063, 'Mexico', 'Mexico', 112468855, f"{NORTH_AMERICA},{EARTH}",
           'North America,Earth', 'PCLI'),
    _place(3530597, 'Mexico City', 'Mexico', 12294193,
           f"3527646,3996063,{NORTH_AMERICA},{EARTH}",
           'Mexico City,Mexico,North America,Earth', 'PPLC', admin1='Mexico City',
           lat=19.42847, lon=-99.12766),
    _place(4395052, 'Mexico', 'United States', 11543, f"4392372,4398678,{US_CHAIN}",
           f"Audrain County,Missouri,{US_NAMES}", 'PPLA2', admin1='Missouri'),
    _place(3448439, 'São Paulo', 'Brazil', 10021295, '3448433,3469034,6255150,6295630',
           'Sao Paulo,Brazil,South America,Earth', 'PPLA', admin1='São Paulo'),
    # Data defects
    _place(9990001, 'Springfield', 'United States', 100, US_CHAIN, US_NAMES, 'PPL'),
    _place(9990001, 'Springfield', 'United States', 200, US_CHAIN, US_NAMES, 'PPL'),
    _place(9990002, 'Broken Hill', 'Australia', 17814, '2155400,not-a-number',
           'New South Wales,Australia', 'PPL'),
    _place(9990003, 'Duplicate Creek', 'United States', 50,
           f"5313457,5551752,5551752,{US_CHAIN},{EARTH}", MARICOPA_NAMES, 'STM'),
    _place(9990004, 'Loopville', 'United States', 10, f"9990004,{US_CHAIN}", US_NAMES, 'PPL'),
]


@pytest.fixture
def hierarchy_df():
    """Sample GeoNames hierarchy index as a DataFrame."""
    return pd.DataFrame(SAMPLE_PLACES)


@pytest.fixture
def hierarchy_index(hierarchy_df):
    """Open index over the sample hierarchy, closed after the test."""
    index = HierarchyIndex.from_frame(hierarchy_df, source="sample")
    yield index
    index.close()


@pytest.fixture
def hierarchy_parquet(tmp_path, hierarchy_df):
    """Sample hierarchy written to a parquet file."""
    path = tmp_path / "hierarchy.parquet"
    hierarchy_df.to_parquet(path)
    return path


@pytest.fixture
def hierarchy_csv(tmp_path, hierarchy_df):
    """Sample hierarchy written to a CSV file."""
    path = tmp_path / "hierarchy.csv"
    hierarchy_df.to_csv(path, index=False)
    return path
