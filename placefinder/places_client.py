"""Places text-search client: single pages and the multi-page fetch loop."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from . import config
from .geo import Coordinate
from .http import HttpClient, UpstreamFetchError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


class PlacesClient:
    def __init__(
        self,
        http_client: HttpClient,
        api_key: str,
        sleep: Sleep = time.sleep,
        max_requests: int = config.PLACES_MAX_REQUESTS_PER_QUERY,
        page_delay_seconds: float = config.PLACES_NEXT_PAGE_DELAY_SECONDS,
    ) -> None:
        self.http = http_client
        self.api_key = api_key
        self.sleep = sleep
        self.max_requests = max_requests
        self.page_delay_seconds = page_delay_seconds

    def search_text(
        self,
        query: str,
        anchor: Optional[Coordinate] = None,
        page_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = build_text_search_params(query, self.api_key, anchor, page_token)
        return self.http.get_json(config.PLACES_TEXT_SEARCH_URL, params, "places")

    def fetch_all(
        self,
        query: str,
        anchor: Optional[Coordinate] = None,
        max_results: int = config.MAX_RESULTS,
    ) -> List[Dict[str, Any]]:
        """Collect up to ``max_results`` places across continuation pages.

        A page that fails or reports an error status ends the loop; whatever
        was collected before it is returned.
        """
        places: List[Dict[str, Any]] = []
        seen_ids: set[str] = set()
        page_token: Optional[str] = None
        requests_made = 0

        while requests_made < self.max_requests and len(places) < max_results:
            if page_token:
                # next_page_token is not valid until a short while after it is issued
                self.sleep(self.page_delay_seconds)
            try:
                resp = self.search_text(query, anchor=anchor, page_token=page_token)
            except UpstreamFetchError as exc:
                logger.warning(
                    "Places page %s failed for %r, keeping %s results: %s",
                    requests_made + 1,
                    query,
                    len(places),
                    exc,
                )
                break
            requests_made += 1

            status = resp.get("status")
            if status not in config.PLACES_OK_STATUSES:
                logger.warning(
                    "Places status %s for %r: %s",
                    status,
                    query,
                    resp.get("error_message") or "no error message",
                )
                break

            added = merge_unique_places(places, resp.get("results") or [], seen_ids)
            logger.info("Places page %s for %r: +%s (total %s)", requests_made, query, added, len(places))

            page_token = resp.get("next_page_token")
            if not page_token:
                break

        return places[:max_results]


def build_text_search_params(
    query: str,
    api_key: str,
    anchor: Optional[Coordinate] = None,
    page_token: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {"query": query, "key": api_key}
    if anchor is not None:
        params["location"] = f"{anchor.latitude},{anchor.longitude}"
        params["radius"] = config.PLACES_LOCATION_BIAS_RADIUS_M
    if page_token:
        params["pagetoken"] = page_token
    return params


def merge_unique_places(
    places: List[Dict[str, Any]],
    page_results: List[Dict[str, Any]],
    seen_ids: set[str],
) -> int:
    """Append ``page_results`` to ``places`` in order, skipping repeated place ids."""
    added = 0
    for place in page_results:
        if not isinstance(place, dict):
            continue
        place_id = place.get("place_id")
        if place_id:
            if place_id in seen_ids:
                continue
            seen_ids.add(place_id)
        places.append(place)
        added += 1
    return added
