"""Search aggregation: fetch, format, rank and paginate places for one query."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from . import config
from .formatting import FormattedPlace, format_place
from .geo import Coordinate
from .geocoder import GeocodeError, Geocoder
from .http import HttpClient, RequestMetrics
from .pagination import PaginationInfo, calculate_pagination, page_bounds, slice_page
from .places_client import PlacesClient, Sleep
from .query_rewriter import BaseQueryRewriter, NoopQueryRewriter, QueryRewriter
from .ranking import rank_places

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"


class ValidationError(ValueError):
    pass


class PageOutOfRangeError(LookupError):
    def __init__(self, page: int, total_pages: int) -> None:
        super().__init__(f"Page {page} not found. Total pages available: {total_pages}")
        self.page = page
        self.total_pages = total_pages


@dataclass(frozen=True)
class AnchorLocation:
    name: str
    coordinate: Coordinate

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, **self.coordinate.to_dict()}


@dataclass
class SearchResult:
    status: str
    results: List[FormattedPlace]
    pagination: PaginationInfo
    anchor_location: Optional[AnchorLocation] = None
    original_query: Optional[str] = None
    processed_query: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "status": self.status,
            "results": [place.to_dict() for place in self.results],
            "pagination": self.pagination.to_dict(),
        }
        if self.anchor_location is not None:
            data["anchor_location"] = self.anchor_location.to_dict()
        if self.original_query is not None:
            data["original_query"] = self.original_query
            data["processed_query"] = self.processed_query
        return data


def _require_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    return value


def validate_request(query: Any, page_size: Any, page_number: Any) -> str:
    """Return the stripped query or raise ValidationError."""
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("Query parameter is required")
    page_size = _require_int(page_size, "top_n")
    page_number = _require_int(page_number, "page")
    if page_size < config.MIN_PAGE_SIZE or page_size > config.MAX_PAGE_SIZE:
        raise ValidationError(
            f"top_n must be between {config.MIN_PAGE_SIZE} and {config.MAX_PAGE_SIZE}"
        )
    if page_number < 1:
        raise ValidationError("page must be 1 or greater")
    return query.strip()


class PlaceSearch:
    def __init__(
        self,
        settings: config.Settings,
        places_client: PlacesClient,
        geocoder: Optional[Geocoder] = None,
        rewriter: Optional[BaseQueryRewriter] = None,
    ) -> None:
        self.settings = settings
        self.places = places_client
        self.geocoder = geocoder
        self.rewriter = rewriter or NoopQueryRewriter()

    def _resolve_anchor(self) -> Optional[AnchorLocation]:
        if not self.settings.anchor_enabled or self.geocoder is None:
            return None
        name = self.settings.anchor_location or ""
        try:
            coord = self.geocoder.resolve(name)
        except GeocodeError as exc:
            logger.warning("Anchor disabled for this search, ranking by rating only: %s", exc)
            return None
        return AnchorLocation(name=name, coordinate=coord)

    def search(
        self,
        query: str,
        page_size: int = config.DEFAULT_PAGE_SIZE,
        page_number: int = config.DEFAULT_PAGE,
    ) -> SearchResult:
        query = validate_request(query, page_size, page_number)
        logger.info("Searching for: %s (top_n: %s, page: %s)", query, page_size, page_number)

        anchor = self._resolve_anchor()
        anchor_coord = anchor.coordinate if anchor is not None else None

        raw_places = self.places.fetch_all(query, anchor=anchor_coord, max_results=self.settings.max_results)
        if not raw_places:
            return SearchResult(
                status=STATUS_ZERO_RESULTS,
                results=[],
                pagination=calculate_pagination(0, page_size, page_number),
                anchor_location=anchor,
            )

        formatted = [
            format_place(raw, anchor_coord, api_key=self.settings.google_maps_api_key)
            for raw in raw_places
        ]
        ranked = rank_places(formatted)

        total = len(ranked)
        pagination = calculate_pagination(total, page_size, page_number)
        start, _ = page_bounds(total, page_size, page_number)
        if start >= total:
            raise PageOutOfRangeError(page_number, pagination.total_pages)

        return SearchResult(
            status=STATUS_OK,
            results=slice_page(ranked, page_size, page_number),
            pagination=pagination,
            anchor_location=anchor,
        )

    def search_with_rewrite(
        self,
        query: str,
        page_size: int = config.DEFAULT_PAGE_SIZE,
        page_number: int = config.DEFAULT_PAGE,
    ) -> SearchResult:
        original = validate_request(query, page_size, page_number)
        processed = self.rewriter.rewrite(original)
        if not processed or not processed.strip():
            processed = original
        logger.info("Rewrote query %r -> %r", original, processed)
        result = self.search(processed, page_size, page_number)
        result.original_query = original
        result.processed_query = processed
        return result


def build_place_search(
    settings: config.Settings,
    sleep: Sleep = time.sleep,
    metrics: Optional[RequestMetrics] = None,
    rewriter: Optional[BaseQueryRewriter] = None,
) -> PlaceSearch:
    """Wire the HTTP, Places, Geocoding and rewrite clients for ``settings``."""
    http_client = HttpClient(
        timeout=settings.http_timeout_seconds,
        retry_max=config.HTTP_RETRY_MAX,
        backoff_base=config.HTTP_BACKOFF_BASE,
        backoff_max=config.HTTP_BACKOFF_MAX,
        metrics=metrics,
    )
    places_client = PlacesClient(http_client, settings.google_maps_api_key, sleep=sleep)
    geocoder = Geocoder(http_client, settings.google_maps_api_key) if settings.anchor_enabled else None
    if rewriter is None:
        if settings.deepseek_api_key:
            rewriter = QueryRewriter(
                settings.deepseek_api_key,
                model=settings.deepseek_model,
                timeout_seconds=settings.http_timeout_seconds,
            )
        else:
            rewriter = NoopQueryRewriter()
    return PlaceSearch(settings, places_client, geocoder=geocoder, rewriter=rewriter)
