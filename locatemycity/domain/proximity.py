"""
Proximity Query Engine
======================

Two read-only queries over the flat city list:

1. **Within radius** (``near``) -- every city whose great-circle distance
   from the centre is ``<= radius_miles``, nearest first.
2. **Distance band** (``exact``) -- every city whose distance lies in
   ``[max(0, target - epsilon), target + epsilon]``, closest to the target
   distance first.

Both bounds of every window are inclusive.  Ordering uses Python's stable
``sorted`` so cities at equal distance keep their dataset order and repeated
queries return identical results.

Complexity
----------
Let N = number of cities.

* Annotation:  O(N)       -- one haversine per city
* Sorting:     O(M log M) -- M = cities inside the window, M <= N

A linear scan is deliberate: the datasets hold tens of thousands of rows and
are fully resident in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .distance import haversine_miles
from .entities import CityRecord


@dataclass(frozen=True)
class NearbyCity:
    """A city annotated with its distance from the query centre."""

    record: CityRecord
    distance_miles: float

    def to_dict(self) -> dict[str, Any]:
        data = self.record.to_dict()
        data["distanceMiles"] = self.distance_miles
        return data


@dataclass(frozen=True)
class DistanceBand:
    target_miles: float
    epsilon: float
    min_miles: float
    max_miles: float
    results: tuple[NearbyCity, ...]


def band_window(target_miles: float, epsilon: float) -> tuple[float, float]:
    """Return the inclusive ``(min, max)`` acceptance window in miles.

    The lower bound is clamped at zero since no distance can be negative.
    """
    return max(0.0, target_miles - epsilon), target_miles + epsilon


class ProximityEngine:
    """Runs proximity queries against an immutable sequence of cities."""

    def __init__(self, cities: Sequence[CityRecord]):
        self._cities = tuple(cities)

    def __len__(self) -> int:
        return len(self._cities)

    def annotate(self, lat: float, lon: float) -> Iterable[NearbyCity]:
        """Yield every city with its distance from ``(lat, lon)``, in dataset order."""
        for city in self._cities:
            yield NearbyCity(
                record=city,
                distance_miles=haversine_miles(
                    lat, lon, city.latitude, city.longitude
                ),
            )

    def within_radius(
        self, lat: float, lon: float, radius_miles: float
    ) -> list[NearbyCity]:
        matches = [
            c for c in self.annotate(lat, lon) if c.distance_miles <= radius_miles
        ]
        return sorted(matches, key=lambda c: c.distance_miles)

    def within_band(
        self, lat: float, lon: float, target_miles: float, epsilon: float
    ) -> DistanceBand:
        low, high = band_window(target_miles, epsilon)
        matches = [
            c for c in self.annotate(lat, lon) if low <= c.distance_miles <= high
        ]
        ordered = sorted(matches, key=lambda c: abs(c.distance_miles - target_miles))
        return DistanceBand(
            target_miles=target_miles,
            epsilon=epsilon,
            min_miles=low,
            max_miles=high,
            results=tuple(ordered),
        )
