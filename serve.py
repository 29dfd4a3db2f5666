"""Find-places JSON server.

Serves the plain and LLM-assisted search endpoints on top of PlaceSearch.
"""
from __future__ import annotations

import argparse
import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from placefinder import config
from placefinder.handler import CORS_HEADERS, handle_find_places
from placefinder.search import PlaceSearch, build_place_search

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

ROUTES = {
    "/api/find-places": False,
    "/api/find-places-llm": True,
}


class FindPlacesHandler(BaseHTTPRequestHandler):
    search: PlaceSearch

    def _dispatch(self) -> None:
        try:
            length = int(self.headers.get("Content-Length", 0) or 0)
        except ValueError:
            self.close_connection = True
            self._send_json({"error": "Invalid Content-Length header"}, 400)
            return
        body: Optional[bytes] = self.rfile.read(length) if length > 0 else b""
        path = urlparse(self.path).path.rstrip("/")
        if path not in ROUTES:
            self._send_json({"error": "Not found"}, 404)
            return
        status, payload = handle_find_places(self.command, body, self.search, rewrite=ROUTES[path])
        self._send_json(payload, status)

    def do_OPTIONS(self) -> None:
        self._dispatch()

    def do_POST(self) -> None:
        self._dispatch()

    def do_GET(self) -> None:
        self._dispatch()

    def do_PUT(self) -> None:
        self._dispatch()

    def do_DELETE(self) -> None:
        self._dispatch()

    def _send_json(self, data: Optional[Dict[str, Any]], status: int = 200) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8") if data is not None else b""
        self.send_response(status)
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body:
            self.wfile.write(body)

    def log_message(self, fmt: str, *args: Any) -> None:
        logger.info("%s - %s", self.address_string(), fmt % args)


def make_server(search: PlaceSearch, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> HTTPServer:
    handler = type("BoundFindPlacesHandler", (FindPlacesHandler,), {"search": search})
    # Requests are served one at a time; PlaceSearch holds a single requests.Session.
    return HTTPServer((host, port), handler)


def main() -> int:
    config.load_env()
    parser = argparse.ArgumentParser(description="Serve the find-places JSON API")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = config.Settings.from_env()
    if not settings.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not set; search requests will fail with 500")
    server = make_server(build_place_search(settings), args.host, args.port)
    logger.info("Serving on http://%s:%s", args.host, args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
