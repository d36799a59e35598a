"""
Emitters

Transport layer for finished payloads. The tracker hands every payload to an
emitter's ``submit`` and receives a ``SendResult``; emitters never raise for
delivery failures.
"""

import logging
from typing import Dict, List, Mapping, Optional, Protocol

import requests

from .constants import DEFAULT_COLLECTOR_PATH, DEFAULT_SCHEME
from .models import SendResult

_LOG = logging.getLogger(__name__)


class Emitter(Protocol):
    """Anything that can deliver a payload to a collector."""

    def submit(self, payload: Mapping[str, str]) -> SendResult:
        ...


def build_session(proxy_url: Optional[str] = None) -> requests.Session:
    """Build a requests session with optional proxy configuration."""
    session = requests.Session()
    if proxy_url:
        _LOG.info("Using proxy: %s", proxy_url)
        session.proxies.update({"http": proxy_url, "https": proxy_url})
    return session


class RequestsEmitter:
    """Sends each payload as the query string of an HTTP GET to the collector."""

    def __init__(
        self,
        endpoint: str,
        scheme: str = DEFAULT_SCHEME,
        path: str = DEFAULT_COLLECTOR_PATH,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
        proxy_url: Optional[str] = None,
    ):
        """Initialize the emitter.

        Args:
            endpoint: Collector host (and optional port), e.g. ``d3rkrsqld9gmqf.cloudfront.net``
            scheme: ``http`` or ``https``
            path: Request path on the collector
            timeout: Request timeout in seconds
            session: Session to reuse; built from ``proxy_url`` when omitted
            proxy_url: Optional proxy for the default session
        """
        if not endpoint:
            raise ValueError("Collector endpoint must not be empty")
        if "://" in endpoint:
            scheme, endpoint = endpoint.split("://", 1)
        self.endpoint = endpoint.rstrip("/")
        self.scheme = scheme
        self.path = path if path.startswith("/") else "/" + path
        self.timeout = timeout
        self.session = session or build_session(proxy_url)

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.endpoint}{self.path}"

    def submit(self, payload: Mapping[str, str]) -> SendResult:
        """
        Send one payload.

        Args:
            payload: Wire parameters

        Returns:
            ``SendResult`` describing the outcome; status codes outside 2xx and
            network errors yield ``success=False``
        """
        params = dict(payload)
        try:
            resp = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            _LOG.warning("Failed to reach collector %s: %s", self.url, e)
            return SendResult.failure(params, f"Request failed: {e}")

        if resp.status_code // 100 != 2:
            _LOG.warning("Collector %s rejected event %s: HTTP %d", self.url, params.get("e"), resp.status_code)
            return SendResult.failure(params, f"HTTP Error - Error code {resp.status_code}", resp.status_code)

        _LOG.debug("Sent event %s to %s (HTTP %d)", params.get("e"), self.url, resp.status_code)
        return SendResult.ok(params, resp.status_code)


class CollectingEmitter:
    """Keeps payloads in memory instead of sending them."""

    def __init__(self):
        self.payloads: List[Dict[str, str]] = []

    def submit(self, payload: Mapping[str, str]) -> SendResult:
        params = dict(payload)
        self.payloads.append(params)
        return SendResult.ok(params)

    def clear(self) -> None:
        self.payloads.clear()
