import pytest
import requests

from placefinder.http import HttpClient, RequestMetrics, UpstreamFetchError


class FakeResponse:
    def __init__(self, payload=None, status_code=200, headers=None, bad_json=False):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class SequenceSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    def get(self, url, params=None, timeout=None):
        self.calls += 1
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_client(responses, retry_max=3, metrics=None):
    client = HttpClient(timeout=1, retry_max=retry_max, backoff_base=0.0, backoff_max=0.0, metrics=metrics)
    client.session = SequenceSession(responses)
    return client


def test_retries_server_errors_then_succeeds():
    metrics = RequestMetrics()
    client = make_client(
        [FakeResponse(status_code=503), FakeResponse({"status": "OK"})],
        metrics=metrics,
    )
    assert client.get_json("https://example.test", {}, "places") == {"status": "OK"}
    assert client.session.calls == 2
    assert metrics.network_places == 2
    assert metrics.total == 2


def test_retries_connection_errors():
    client = make_client([requests.ConnectionError("reset"), FakeResponse({"ok": 1})])
    assert client.get_json("https://example.test", {}, "geocode") == {"ok": 1}


def test_gives_up_after_retry_max():
    client = make_client([FakeResponse(status_code=500)] * 2, retry_max=2)
    with pytest.raises(UpstreamFetchError):
        client.get_json("https://example.test", {}, "places")
    assert client.session.calls == 2


def test_non_retryable_status_fails_immediately():
    client = make_client([FakeResponse(status_code=403), FakeResponse({"ok": 1})])
    with pytest.raises(UpstreamFetchError):
        client.get_json("https://example.test", {}, "places")
    assert client.session.calls == 1


def test_non_json_body_is_fetch_error():
    client = make_client([FakeResponse(bad_json=True)])
    with pytest.raises(UpstreamFetchError):
        client.get_json("https://example.test", {}, "places")


def test_unknown_metrics_kind_rejected():
    with pytest.raises(ValueError):
        RequestMetrics().inc_network("routes")
