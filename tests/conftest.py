"""Shared fixtures: settings pointing at fake backends and a mock HTTP layer."""

import httpx
import pytest

from grafana_mcp.config import BackendTarget, Settings

GRAFANA_URL = "http://grafana.test"
PROMETHEUS_URL = "http://prometheus.test"


@pytest.fixture
def settings():
    return Settings(
        grafana=BackendTarget(base_url=GRAFANA_URL, auth_token="test-token"),
        prometheus=BackendTarget(base_url=PROMETHEUS_URL),
    )


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.AsyncClient through a handler.

    Call the fixture with a function taking an httpx.Request and returning
    an httpx.Response (or raising). Requests are recorded on the returned list.
    """
    real_client = httpx.AsyncClient

    def install(handler):
        requests = []

        def record(request):
            requests.append(request)
            return handler(request)

        def client_factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(record)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", client_factory)
        return requests

    return install
