from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_M


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance between two coordinates, in meters.

    Inputs are not validated; out-of-range latitudes are the caller's problem.
    """

    lat1, lng1, lat2, lng2 = map(radians, (a.lat, a.lng, b.lat, b.lng))
    d_lat = lat2 - lat1
    d_lng = lng2 - lng1
    h = sin(d_lat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(d_lng / 2) ** 2
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))
