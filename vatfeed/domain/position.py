"""Geographic position and bounding boxes for tracked entities."""

from __future__ import annotations

import math
from dataclasses import dataclass

COORDINATE_DIGITS = 6
_KM_PER_DEGREE_LAT = 111.32


@dataclass(frozen=True)
class Bounds:
    """Simple latitude/longitude bounding box."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float | None, lon: float | None) -> bool:
        if lat is None or lon is None:
            return False
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


def vicinity_bounds(lat: float, lon: float, lat_km: float, lon_km: float) -> Bounds:
    """Box of ``lat_km`` x ``lon_km`` centered on the given point."""

    lat_delta = (lat_km / 2.0) / _KM_PER_DEGREE_LAT
    lon_delta = (lon_km / 2.0) / max(
        _KM_PER_DEGREE_LAT * math.cos(math.radians(lat)), 0.0001
    )
    return Bounds(
        min_lat=lat - lat_delta,
        max_lat=lat + lat_delta,
        min_lon=lon - lon_delta,
        max_lon=lon + lon_delta,
    )


def _round(value: float | None, digits: int) -> float | None:
    return None if value is None else round(value, digits)


def same_location(
    lat1: float | None,
    lon1: float | None,
    lat2: float | None,
    lon2: float | None,
    digits: int = COORDINATE_DIGITS,
) -> bool:
    """Compare two coordinates after rounding to ``digits`` decimals."""

    if lat1 == lat2 and lon1 == lon2:
        return True
    return _round(lat1, digits) == _round(lat2, digits) and _round(
        lon1, digits
    ) == _round(lon2, digits)


@dataclass
class MapPosition:
    """Latitude / longitude in decimal degrees, elevation in feet."""

    latitude: float | None = None
    longitude: float | None = None
    elevation: float | None = None

    def set_latitude_longitude(self, latitude: float | None, longitude: float | None) -> None:
        self.latitude = _round(latitude, COORDINATE_DIGITS)
        self.longitude = _round(longitude, COORDINATE_DIGITS)

    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def is_in(self, bounds: Bounds | None) -> bool:
        if bounds is None:
            return False
        return bounds.contains(self.latitude, self.longitude)


__all__ = [
    "Bounds",
    "COORDINATE_DIGITS",
    "MapPosition",
    "same_location",
    "vicinity_bounds",
]
