"""
Tests for the HTTP and in-memory emitters.
"""

import pytest
import requests

from snowplow_tracker.emitter import CollectingEmitter, RequestsEmitter, build_session


class FakeResponse:
    def __init__(self, status: int = 200):
        self.status_code = status


class FakeSession:
    """Records GET calls and answers with a fixed status or exception."""

    def __init__(self, status: int = 200, exc: Exception = None):
        self.status = status
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc:
            raise self.exc
        return FakeResponse(self.status)


def test_build_session_no_proxy():
    session = build_session(None)
    assert session.proxies == {}


def test_build_session_with_proxy():
    session = build_session('http://proxy:1234')
    assert session.proxies['http'] == 'http://proxy:1234'
    assert session.proxies['https'] == 'http://proxy:1234'


class TestRequestsEmitter:
    """Test sending payloads as GET query parameters."""

    def test_url_from_parts(self):
        emitter = RequestsEmitter("collector.test", session=FakeSession())
        assert emitter.url == "https://collector.test/i"

    def test_url_with_scheme_in_endpoint(self):
        emitter = RequestsEmitter("http://localhost:8080/", path="track", session=FakeSession())
        assert emitter.url == "http://localhost:8080/track"

    def test_empty_endpoint_rejected(self):
        with pytest.raises(ValueError):
            RequestsEmitter("")

    def test_successful_submit(self):
        session = FakeSession(200)
        emitter = RequestsEmitter("collector.test", timeout=2.0, session=session)

        result = emitter.submit({"e": "pv", "url": "http://x.test"})

        assert result.success
        assert result.status_code == 200
        assert session.calls == [{
            "url": "https://collector.test/i",
            "params": {"e": "pv", "url": "http://x.test"},
            "timeout": 2.0,
        }]

    def test_any_2xx_is_success(self):
        emitter = RequestsEmitter("collector.test", session=FakeSession(204))
        assert emitter.submit({"e": "pv"}).success

    def test_non_2xx_is_failure(self):
        emitter = RequestsEmitter("collector.test", session=FakeSession(500))
        result = emitter.submit({"e": "pv"})
        assert not result.success
        assert result.status_code == 500
        assert "500" in result.error
        assert result.payload == {"e": "pv"}

    def test_network_error_is_failure(self):
        session = FakeSession(exc=requests.exceptions.ConnectionError("refused"))
        emitter = RequestsEmitter("collector.test", session=session)
        result = emitter.submit({"e": "pv"})
        assert not result.success
        assert result.status_code is None
        assert "refused" in result.error

    def test_failure_is_logged(self, caplog):
        emitter = RequestsEmitter("collector.test", session=FakeSession(404))
        with caplog.at_level("WARNING", logger="snowplow_tracker.emitter"):
            emitter.submit({"e": "se"})
        assert "HTTP 404" in caplog.text


class TestCollectingEmitter:
    """Test the in-memory emitter."""

    def test_collects_copies(self):
        emitter = CollectingEmitter()
        payload = {"e": "pv"}
        result = emitter.submit(payload)
        payload["e"] = "se"

        assert result.success
        assert emitter.payloads == [{"e": "pv"}]

    def test_clear(self):
        emitter = CollectingEmitter()
        emitter.submit({"e": "pv"})
        emitter.clear()
        assert emitter.payloads == []
