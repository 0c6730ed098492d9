"""Test configuration ensuring repository modules are discoverable."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from groupie import seed  # noqa: E402
from groupie.api_server import create_app  # noqa: E402
from groupie.i18n import Translations  # noqa: E402
from groupie.services import GroupieAPIClient  # noqa: E402
from groupie.store import ArtistStore  # noqa: E402

TRANSLATIONS = {
    "fr": {"title": "Groupie Tracker", "nav.home": "Accueil", "details": "Détails"},
    "en": {"title": "Groupie Tracker", "nav.home": "Home"},
}


def pytest_configure(config):
    config.addinivalue_line("markers", "live: hits the public upstream artist API")


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records requested URLs and answers from a path -> response map."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        return response or FakeResponse(404, {"error": "not found"})


@pytest.fixture
def store():
    return ArtistStore(seed.fallback_artists())


@pytest.fixture
def translations():
    return Translations(TRANSLATIONS)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def app(store, translations, fake_session):
    upstream = GroupieAPIClient("https://upstream.test/api", session=fake_session)
    application = create_app(store=store, translations=translations, upstream=upstream)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()
