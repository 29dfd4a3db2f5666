"""Geospatial helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import config


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    r = config.EARTH_RADIUS_KM
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return r * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def coordinate_from_location(location: Optional[Dict[str, Any]]) -> Optional[Coordinate]:
    """Read a ``{"lat": .., "lng": ..}`` location block; None when incomplete."""
    if not isinstance(location, dict):
        return None
    lat = location.get("lat", location.get("latitude"))
    lng = location.get("lng", location.get("longitude", location.get("lon")))
    if lat is None or lng is None:
        return None
    try:
        return Coordinate(float(lat), float(lng))
    except (TypeError, ValueError):
        return None
