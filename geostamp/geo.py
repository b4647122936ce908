"""Geospatial helpers: haversine distance and privacy zone checks."""

from __future__ import annotations

from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt
from typing import Iterable

from geostamp.types import Coordinate

EARTH_RADIUS_METERS = 6_371_000

# Millimetre precision keeps zone boundary comparisons deterministic.
DISTANCE_PRECISION = 3


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between two coordinates in meters."""

    phi1 = radians(a.latitude)
    phi2 = radians(b.latitude)
    delta_phi = radians(b.latitude - a.latitude)
    delta_lambda = radians(b.longitude - a.longitude)

    h = sin(delta_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(delta_lambda / 2) ** 2
    # Rounding can push antipodal points just above 1; NaN passes through.
    if h > 1.0:
        h = 1.0

    return round(2 * EARTH_RADIUS_METERS * asin(sqrt(h)), DISTANCE_PRECISION)


@dataclass(frozen=True, slots=True)
class PrivacyZone:
    """Named circular exclusion region."""

    name: str
    center: Coordinate
    radius_meters: float

    def contains(self, point: Coordinate) -> bool:
        return distance_meters(point, self.center) <= self.radius_meters


def find_privacy_zone(point: Coordinate, zones: Iterable[PrivacyZone]) -> str | None:
    """Return the name of the first zone (in configured order) containing ``point``.

    Overlapping zones are resolved by list order, not by distance. An empty zone
    list disables geofencing and always returns None.
    """
    for zone in zones:
        if zone.contains(point):
            return zone.name
    return None
