"""
GIS Utilities Module for NestScore
Great-circle distance and display helpers for coordinates
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

EARTH_RADIUS_KM = 6371


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


def great_circle_distance_km(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance in kilometres between two WGS84 points."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def format_distance(km: float) -> str:
    """Under 1km as whole metres ('850m'), otherwise one decimal ('3.2km')."""
    if km < 1:
        return f"{int(math.floor(km * 1000 + 0.5))}m"
    return f"{km:.1f}km"


def coordinates_or_none(lat: Optional[float], lng: Optional[float]) -> Optional[Coordinates]:
    if lat is None or lng is None:
        return None
    return Coordinates(lat=lat, lng=lng)


def normalize_postcode(postcode: Optional[str]) -> str:
    """Strip all whitespace and upper-case ('sw1a 2aa' -> 'SW1A2AA')."""
    if not postcode:
        return ''
    return re.sub(r'\s+', '', postcode).upper()
