"""Transport-neutral handling of inbound find-places requests."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple, Union

from . import config
from .search import PageOutOfRangeError, PlaceSearch, ValidationError

logger = logging.getLogger(__name__)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Content-Type": "application/json",
}

Response = Tuple[int, Optional[Dict[str, Any]]]


def parse_request_body(body: Union[bytes, str, None]) -> Dict[str, Any]:
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError("Request body must be UTF-8 JSON") from exc
    if not body:
        raise ValidationError("Request body is required")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON body: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _missing_keys_error(search: PlaceSearch, rewrite: bool) -> Optional[str]:
    settings = search.settings
    if rewrite:
        if not settings.google_maps_api_key or not settings.deepseek_api_key:
            return "API keys not configured"
        return None
    if not settings.google_maps_api_key:
        return "Google Maps API key not configured"
    return None


def handle_find_places(
    method: str,
    body: Union[bytes, str, None],
    search: PlaceSearch,
    rewrite: bool = False,
) -> Response:
    """Return ``(status_code, payload)``; payload is None for an empty body."""
    method = (method or "").upper()
    if method == "OPTIONS":
        return 200, None
    if method != "POST":
        return 405, {"error": "Method not allowed"}

    key_error = _missing_keys_error(search, rewrite)
    if key_error:
        logger.error(key_error)
        return 500, {"error": key_error}

    try:
        data = parse_request_body(body)
        query = data.get("query")
        if not isinstance(query, str) or not query.strip():
            return 400, {"error": "Query parameter is required"}
        top_n = data.get("top_n", config.DEFAULT_PAGE_SIZE)
        page = data.get("page", config.DEFAULT_PAGE)
        if rewrite:
            result = search.search_with_rewrite(query, top_n, page)
        else:
            result = search.search(query.strip(), top_n, page)
    except ValidationError as exc:
        return 400, {"error": str(exc)}
    except PageOutOfRangeError as exc:
        return 404, {"error": str(exc), "total_pages": exc.total_pages}
    except Exception as exc:
        logger.exception("Function error")
        return 500, {"error": "Internal server error", "detail": str(exc)}

    return 200, result.to_dict()
