import os, sys
from dotenv import load_dotenv

import pytest
import requests

# project root on path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# load env once
load_dotenv()

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", text=""):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        self.text = text

    def json(self):
        if self._payload is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)


class FakeSession:
    """Stand-in for requests.Session: replays queued responses and records calls."""

    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def _next(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        resp = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        return resp(method, url, **kwargs) if callable(resp) else resp

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)


def _tier(mode, lo=None, hi=None, currency="USD", transit=None, price=True):
    tier = {"mode": mode}
    if price:
        tier["price"] = {}
        if lo is not None:
            tier["price"]["min"] = {"moneyAmount": {"amount": lo, "currency": currency}}
        if hi is not None:
            tier["price"]["max"] = {"moneyAmount": {"amount": hi, "currency": currency}}
    if transit is not None:
        tier["transitTimes"] = transit
    return tier


def _payload(*tiers):
    return {"response": {"estimatedFreightRates": {"numQuotes": len(tiers), "mode": list(tiers)}}}


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def no_json():
    return _NO_JSON


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def tier():
    return _tier


@pytest.fixture
def provider_payload():
    return _payload


@pytest.fixture
def app():
    from app import create_app

    return create_app(TESTING=True, FREIGHT_RELAY_BASE_URL="http://relay.test", COMPARISON_MAX_WORKERS=2)


@pytest.fixture
def client(app):
    return app.test_client()
