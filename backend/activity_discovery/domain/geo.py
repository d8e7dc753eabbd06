from __future__ import annotations

import math
from typing import Optional, Tuple

EARTH_RADIUS_KM = 6371.0

Point = Tuple[Optional[float], Optional[float]]


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def within_radius(point: Point, center: Point, radius_km: float) -> bool:
    """Inclusive radius check. A point without coordinates is never inside."""
    lat, lon = point
    center_lat, center_lon = center
    if None in (lat, lon, center_lat, center_lon):
        return False
    return distance_km(lat, lon, center_lat, center_lon) <= radius_km
