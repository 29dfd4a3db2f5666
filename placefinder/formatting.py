"""Map raw text-search records into the output place shape."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

from . import config
from .geo import Coordinate, coordinate_from_location, distance_km

# Characters left alone by JavaScript's encodeURIComponent, which the Maps
# directions links are built against.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class FormattedPlace:
    name: Optional[str]
    address: Optional[str]
    rating: Optional[float]
    place_id: Optional[str]
    maps_embed_url: str
    maps_direction_url: str
    distance_km: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["distance_km"] is not None:
            data["distance_km"] = round(data["distance_km"], 2)
        return data


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_embed_url(place_id: Optional[str], api_key: str) -> str:
    return f"{config.MAPS_EMBED_URL}?key={api_key}&q=place_id:{place_id or ''}"


def build_direction_url(place_id: Optional[str], address: Optional[str]) -> str:
    return (
        f"{config.MAPS_DIRECTIONS_URL}?api=1&destination_place_id={place_id or ''}"
        f"&destination={encode_uri_component(address or '')}"
    )


def _parse_rating(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def place_coordinate(raw: Dict[str, Any]) -> Optional[Coordinate]:
    geometry = raw.get("geometry") or {}
    return coordinate_from_location(geometry.get("location") if isinstance(geometry, dict) else None)


def format_place(
    raw: Dict[str, Any],
    anchor: Optional[Coordinate] = None,
    api_key: str = "",
) -> FormattedPlace:
    place_id = raw.get("place_id")
    address = raw.get("formatted_address")
    distance: Optional[float] = None
    if anchor is not None:
        coord = place_coordinate(raw)
        if coord is not None:
            distance = distance_km(anchor, coord)
    return FormattedPlace(
        name=raw.get("name"),
        address=address,
        rating=_parse_rating(raw.get("rating")),
        place_id=place_id,
        maps_embed_url=build_embed_url(place_id, api_key),
        maps_direction_url=build_direction_url(place_id, address),
        distance_km=distance,
    )
