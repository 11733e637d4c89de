"""
Distance calculation using the Haversine formula.

Earth is approximated as a sphere of radius 6371 km.  Inputs are degrees;
range checking is the caller's job (see ``domain.validation``).

Complexity: O(1) per call.
"""

import math

EARTH_RADIUS_KM = 6_371.0
MILES_PER_KM = 0.621371


def haversine_km(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    # rounding can push ``a`` just past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def km_to_miles(km: float) -> float:
    return km * MILES_PER_KM


def haversine_miles(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Great-circle distance in statute miles."""
    return km_to_miles(haversine_km(lat1, lon1, lat2, lon2))
