"""Project configuration.

Endpoints and request-shape constants live at module level; per-process
settings (API keys, anchor location, timeouts) are read once into a frozen
Settings object that callers pass around explicitly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import load_dotenv as _load_dotenv

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- API endpoints ---

PLACES_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DEEPSEEK_CHAT_URL = "https://api.deepseek.com/chat/completions"
MAPS_EMBED_URL = "https://www.google.com/maps/embed/v1/place"
MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"

# --- Places API request shape ---

PLACES_LOCATION_BIAS_RADIUS_M = 50000
PLACES_MAX_REQUESTS_PER_QUERY = 3
PLACES_NEXT_PAGE_DELAY_SECONDS = 2.0
PLACES_OK_STATUSES = ("OK", "ZERO_RESULTS")

# --- Aggregation and ranking ---

MAX_RESULTS = 60
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 60
DEFAULT_PAGE_SIZE = 5
DEFAULT_PAGE = 1
DISTANCE_TIE_BAND_KM = 0.5
EARTH_RADIUS_KM = 6371.0

# --- Query rewrite ---

DEFAULT_DEEPSEEK_MODEL = "deepseek-chat"
REWRITE_TIMEOUT_SECONDS = 30

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20
HTTP_RETRY_MAX = 3
HTTP_BACKOFF_BASE = 0.5
HTTP_BACKOFF_MAX = 8.0


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(value: Optional[str], default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    google_maps_api_key: str = ""
    deepseek_api_key: str = ""
    deepseek_model: str = DEFAULT_DEEPSEEK_MODEL
    anchor_location: Optional[str] = None
    use_anchor: bool = True
    http_timeout_seconds: float = HTTP_TIMEOUT_SECONDS
    max_results: int = MAX_RESULTS

    @property
    def anchor_enabled(self) -> bool:
        return bool(self.use_anchor and self.anchor_location)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        anchor = (env.get("PLACEFINDER_ANCHOR_LOCATION") or "").strip() or None
        return cls(
            google_maps_api_key=(env.get("GOOGLE_MAPS_API_KEY") or "").strip(),
            deepseek_api_key=(env.get("DEEPSEEK_API_KEY") or "").strip(),
            deepseek_model=(env.get("DEEPSEEK_MODEL") or "").strip() or DEFAULT_DEEPSEEK_MODEL,
            anchor_location=anchor,
            use_anchor=_env_bool(env.get("PLACEFINDER_USE_ANCHOR"), default=anchor is not None),
            http_timeout_seconds=_env_float(env.get("PLACEFINDER_HTTP_TIMEOUT"), HTTP_TIMEOUT_SECONDS),
        )


def load_env(path: str = ".env", root_dir: Optional[Union[str, Path]] = None) -> bool:
    """Load a repo-root .env file if present, without overriding real env vars."""
    root = Path(root_dir) if root_dir else _REPO_ROOT
    env_path = (root / path).resolve()
    if not env_path.exists():
        return False
    _load_dotenv(dotenv_path=env_path, override=False)
    return True
