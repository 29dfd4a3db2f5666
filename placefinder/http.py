"""HTTP client with retry/backoff and request counting."""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


class UpstreamFetchError(RuntimeError):
    """A request to an upstream API failed outright (network, HTTP or parse error)."""


@dataclass
class RequestMetrics:
    network_places: int = 0
    network_geocode: int = 0

    @property
    def total(self) -> int:
        return self.network_places + self.network_geocode

    def inc_network(self, kind: str) -> None:
        if kind == "places":
            self.network_places += 1
        elif kind == "geocode":
            self.network_geocode += 1
        else:
            raise ValueError(f"Unknown request kind: {kind}")


class HttpClient:
    def __init__(
        self,
        timeout: float = 20,
        retry_max: int = 3,
        backoff_base: float = 0.5,
        backoff_max: float = 8.0,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self.timeout = timeout
        self.retry_max = max(1, int(retry_max))
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self.metrics = metrics
        self.session = requests.Session()

    def get_json(self, url: str, params: Dict[str, Any], kind: str) -> Dict[str, Any]:
        """GET ``url`` and decode the JSON body.

        Retries connection errors and 429/5xx responses. Anything that still
        fails is raised as UpstreamFetchError.
        """
        for attempt in range(1, self.retry_max + 1):
            if self.metrics is not None:
                self.metrics.inc_network(kind)
            try:
                resp = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt >= self.retry_max:
                    raise UpstreamFetchError(f"{kind} request failed: {exc}") from exc
                logger.warning("%s request error from %s (attempt %s): %s", kind, url, attempt, exc)
                self._sleep_backoff(attempt)
                continue

            status = resp.status_code
            if status == 200:
                try:
                    data = resp.json()
                except ValueError as exc:
                    logger.error("Non-JSON response from %s", url)
                    raise UpstreamFetchError(f"{kind} response is not JSON") from exc
                if not isinstance(data, dict):
                    raise UpstreamFetchError(f"{kind} response is not a JSON object")
                return data

            if status in RETRYABLE_STATUSES:
                logger.warning("HTTP %s from %s (attempt %s)", status, url, attempt)
                if attempt >= self.retry_max:
                    raise UpstreamFetchError(f"{kind} request failed with HTTP {status}")
                if not self._sleep_retry_after(resp):
                    self._sleep_backoff(attempt)
                continue

            # Non-retryable
            logger.error("HTTP %s from %s", status, url)
            raise UpstreamFetchError(f"{kind} request failed with HTTP {status}")

        raise RuntimeError("Unexpected HTTP retry loop exit")

    def _sleep_backoff(self, attempt: int) -> None:
        base = min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_max)
        jitter = random.uniform(0, self.backoff_base)
        time.sleep(base + jitter)

    def _sleep_retry_after(self, resp: requests.Response) -> bool:
        retry_after = resp.headers.get("Retry-After")
        if not retry_after:
            return False
        try:
            delay = float(retry_after)
        except ValueError:
            return False
        delay = max(0.0, min(delay, self.backoff_max))
        time.sleep(delay)
        return True
