"""
Local Marketplace Backend - Proximity Search
=============================================

What:  Great-circle distance between two coordinates and a radius filter
       over a candidate sequence.
Who:   ListingService.find_nearby feeds it the active listings; anything
       exposing a `coordinate` attribute can be filtered.
How:   Haversine formula on a sphere of radius 6371 km, atan2 form.

Contract:
    - Pure functions: no I/O, no shared mutable state, safe to call
      concurrently from any number of requests.
    - Never raises for numeric input. NaN/inf coordinates yield NaN
      distances, and NaN <= radius is False, so such items are dropped.
    - Range checking of latitude/longitude is the caller's job (the HTTP
      schemas do it); values are used as given.

Non-goals: there is no spatial index. The filter is a linear scan, which is
fine for the candidate set sizes a local marketplace sees.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Protocol, TypeVar

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""

    latitude: float
    longitude: float


class Locatable(Protocol):
    @property
    def coordinate(self) -> Coordinate: ...


T = TypeVar("T", bound=Locatable)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Haversine great-circle distance between `a` and `b` in kilometres.

    Symmetric, and exactly 0.0 for identical points.

    Example:
        >>> round(distance_km(Coordinate(40.7128, -74.0060), Coordinate(34.0522, -118.2437)))
        3936
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h)) if not math.isnan(h) else h
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def find_within_radius(
    center: Coordinate,
    radius_km: float,
    candidates: Iterable[T],
) -> List[T]:
    """
    Return the candidates whose coordinate lies within `radius_km` of `center`.

    - Radius is inclusive (distance <= radius_km).
    - A negative radius matches nothing.
    - Input order is preserved; the same arguments always give the same list.
    """
    if radius_km < 0:
        return []
    return [
        item for item in candidates
        if distance_km(center, item.coordinate) <= radius_km
    ]
