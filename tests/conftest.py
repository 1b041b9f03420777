"""
Shared fixtures: settings without latency, a fake HTTP session, and app clients.
"""
import pytest
import requests
from fastapi.testclient import TestClient

from config.settings import Settings
from pitchside.main import create_app
from pitchside.mock_data import build_mock_catalog


class MockResponse:
    def __init__(self, status_code=200, json_data=None, reason="OK", body_error=None):
        self.status_code = status_code
        self._json_data = json_data if json_data is not None else {}
        self.reason = reason
        self._body_error = body_error

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._json_data

    def raise_for_status(self):
        if 400 <= self.status_code:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} Error", response=self
            )


class FakeSession:
    """
    Stands in for requests.Session.

    `routes` maps a URL to a MockResponse or an exception to raise; any other
    URL fails with a connection error. Every call is recorded.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": headers or {}, "timeout": timeout})
        outcome = self.routes.get(url)
        if outcome is None:
            raise requests.exceptions.ConnectionError(f"no route for {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def urls(self):
        return [c["url"] for c in self.calls]


SOFASCORE_BASE = "http://sofascore.test/api/v1"
FOOTBALL_DATA_BASE = "http://football-data.test/v4"


def make_settings(**overrides) -> Settings:
    values = {
        "football_data_api_key": None,
        "football_data_base_url": FOOTBALL_DATA_BASE,
        "sofascore_base_url": SOFASCORE_BASE,
        "sofascore_enabled": True,
        "mock_delay_ms": 0,
        "enforce_refresh_cooldown": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="session")
def catalog():
    return build_mock_catalog()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def make_client(catalog):
    """Build a TestClient around a fresh app with the given settings and session."""

    def _make(session=None, raise_server_exceptions=True, **setting_overrides):
        app = create_app(
            settings=make_settings(**setting_overrides),
            catalog=catalog,
            session=session if session is not None else FakeSession(),
        )
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _make
