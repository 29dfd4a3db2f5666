"""Composite distance/rating ordering for aggregated places."""
from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, List

from . import config
from .formatting import FormattedPlace


def _rating(place: FormattedPlace) -> float:
    return place.rating if place.rating is not None else 0.0


def _by_rating_desc(a: FormattedPlace, b: FormattedPlace) -> int:
    ra, rb = _rating(a), _rating(b)
    if ra > rb:
        return -1
    if ra < rb:
        return 1
    return 0


def compare_places(
    a: FormattedPlace,
    b: FormattedPlace,
    band_km: float = config.DISTANCE_TIE_BAND_KM,
) -> int:
    """Places with a distance come first.

    Two distances closer than ``band_km`` are treated as a tie and decided by
    rating; otherwise the nearer place wins. Without distances, rating decides.
    Missing ratings count as 0.
    """
    da, db = a.distance_km, b.distance_km
    if da is not None and db is None:
        return -1
    if da is None and db is not None:
        return 1
    if da is None and db is None:
        return _by_rating_desc(a, b)
    if abs(da - db) < band_km:
        return _by_rating_desc(a, b)
    if da < db:
        return -1
    if da > db:
        return 1
    return 0


def rank_places(places: Iterable[FormattedPlace]) -> List[FormattedPlace]:
    return sorted(places, key=cmp_to_key(compare_places))
