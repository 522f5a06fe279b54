"""
Pytest configuration and fixtures for networking tools tests.

This module provides reusable fixtures: sample command output for the
supported trace tools, fake geolocation providers built on
httpx.MockTransport, and an API test client with its dependencies overridden.
"""
import pytest
import sys
import os
import threading
import time

import httpx

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from app.traceroute.geo import GeoEnricher
from app.traceroute.runner import TraceRunner


def geo_payload(ip, **overrides):
    """Build an ip-api.com style success payload for an IP."""
    payload = {
        "status": "success",
        "country": "United States",
        "countryCode": "US",
        "city": "Ashburn",
        "lat": 39.03,
        "lon": -77.5,
        "isp": "Example ISP",
        "org": "Example Org",
        "as": "AS15133 Example Networks",
        "query": ip,
    }
    payload.update(overrides)
    return payload


class FakeGeoProvider:
    """
    Thread-safe stand-in for the ip-api.com service.

    Records every requested IP and the order lookups finished in. Responses are
    taken from ``responses`` (ip -> httpx.Response or exception to raise);
    other IPs get a success payload. ``delays`` (ip -> seconds) slows
    individual answers down.
    """

    payload = staticmethod(geo_payload)

    def __init__(self):
        self.responses = {}
        self.delays = {}
        self.requested = []
        self.completed = []
        self._lock = threading.Lock()

    def __call__(self, request):
        ip = request.url.path.rsplit("/", 1)[-1]
        with self._lock:
            self.requested.append(ip)

        time.sleep(self.delays.get(ip, 0))

        with self._lock:
            self.completed.append(ip)

        response = self.responses.get(ip)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return httpx.Response(200, json=geo_payload(ip))
        return response

    def enricher(self, **kwargs):
        return GeoEnricher(
            api_url="http://geo.test/json",
            timeout=1.0,
            transport=httpx.MockTransport(self),
            **kwargs,
        )


@pytest.fixture
def geo_provider():
    """
    Fake geolocation provider answering every lookup successfully.

    Returns:
        FakeGeoProvider: Provider whose ``responses`` may be customized per test
    """
    return FakeGeoProvider()


@pytest.fixture
def sample_traceroute_output():
    """
    Provide unix traceroute output (-q 1) that reaches 93.184.216.34 on hop 5.

    Returns:
        str: Raw traceroute stdout
    """
    return """traceroute to example.com (93.184.216.34), 30 hops max, 60 byte packets
 1  router.local (10.0.0.1)  2.345 ms
 2  isp-gw.example.net (203.0.113.1)  8.120 ms
 3  *
 4  core1.example.net (198.51.100.7)  15.002 ms
 5  example.com (93.184.216.34)  20.456 ms
"""


@pytest.fixture
def sample_tracert_output():
    """
    Provide Windows tracert -d output that reaches 93.184.216.34 on hop 4.

    Returns:
        str: Raw tracert stdout
    """
    return """
Tracing route to example.com [93.184.216.34]
over a maximum of 30 hops:

  1    <1 ms    <1 ms    <1 ms  192.168.1.1
  2     *        *        *     Request timed out.
  3    12 ms     *       14 ms  10.20.30.40
  4    21 ms    20 ms    22 ms  93.184.216.34

Trace complete.
"""


@pytest.fixture
def mock_trace_runner(mocker, sample_traceroute_output):
    """
    Create a mocked trace runner for testing without running system commands.

    Args:
        mocker: Pytest-mock mocker fixture
        sample_traceroute_output: Raw output returned by ``trace``

    Returns:
        Mock: Mocked TraceRunner instance
    """
    mock = mocker.Mock(spec=TraceRunner)
    mock.dialect = "traceroute"
    mock.resolve.return_value = "93.184.216.34"
    mock.trace.return_value = sample_traceroute_output
    return mock


@pytest.fixture
def api_client():
    """
    Create a test client for API endpoint testing.

    Dependencies are reset after each test so overrides never leak.

    Returns:
        TestClient: FastAPI test client
    """
    from fastapi.testclient import TestClient
    from app.main import app

    client = TestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
