"""Map hierarchy index documents to Location records."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

import pandas as pd


@dataclass(frozen=True)
class Location:
    """A resolved place, flattened for downstream consumers."""

    geoname_id: int
    name: str
    country: Optional[str] = None
    admin1: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    feature_code: Optional[str] = None
    population: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _text(value: Any) -> Optional[str]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    value = str(value).strip()
    return value or None


def _coordinate(value: Any) -> Optional[float]:
    # Index exports leave coordinates blank when unknown
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        coordinate = float(value)
    except (TypeError, ValueError):
        return None
    return None if pd.isna(coordinate) else coordinate


def map_record(document: Mapping[str, Any]) -> Location:
    """Build a Location from the stored fields of one index document.

    Args:
        document: Field mapping as returned by IndexSession.fetch()

    Returns:
        Location with optional fields set to None when absent or blank

    Examples:
        >>> map_record({'geonameid': 5308655, 'name': 'Phoenix', 'country': 'United States',
        ...             'population': 1563025, 'lat': 33.44838, 'lon': -112.07404})
        Location(geoname_id=5308655, name='Phoenix', country='United States', ...)
    """
    population = document.get("population")
    return Location(
        geoname_id=int(document["geonameid"]),
        name=_text(document.get("name")) or "",
        country=_text(document.get("country")),
        admin1=_text(document.get("admin1")),
        latitude=_coordinate(document.get("lat")),
        longitude=_coordinate(document.get("lon")),
        feature_code=_text(document.get("feature_code")),
        population=0 if population is None or pd.isna(population) else int(population),
    )


__all__ = [
    "Location",
    "map_record",
]
