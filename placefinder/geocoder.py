"""Geocoding API client used to resolve the search anchor."""
from __future__ import annotations

import logging
from typing import Any, Dict

from . import config
from .geo import Coordinate, coordinate_from_location
from .http import HttpClient, UpstreamFetchError

logger = logging.getLogger(__name__)


class GeocodeError(RuntimeError):
    pass


class Geocoder:
    def __init__(self, http_client: HttpClient, api_key: str) -> None:
        self.http = http_client
        self.api_key = api_key

    def resolve(self, location_text: str) -> Coordinate:
        text = (location_text or "").strip()
        if not text:
            raise GeocodeError("Anchor location is empty")
        try:
            data = self.http.get_json(config.GEOCODE_URL, build_geocode_params(text, self.api_key), "geocode")
        except UpstreamFetchError as exc:
            raise GeocodeError(f"Geocoding failed for {text!r}: {exc}") from exc
        return parse_geocode_response(data, text)


def build_geocode_params(location_text: str, api_key: str) -> Dict[str, Any]:
    return {"address": location_text, "key": api_key}


def parse_geocode_response(data: Dict[str, Any], location_text: str = "") -> Coordinate:
    status = data.get("status")
    results = data.get("results") or []
    if status != "OK" or not results:
        raise GeocodeError(f"Geocoding failed for {location_text!r}: status={status}")
    location = (results[0].get("geometry") or {}).get("location")
    coord = coordinate_from_location(location)
    if coord is None:
        raise GeocodeError(f"Geocoding result for {location_text!r} has no location")
    logger.info("Resolved anchor %r to %.5f,%.5f", location_text, coord.latitude, coord.longitude)
    return coord
