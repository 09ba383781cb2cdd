"""Shared fixtures: RandomUser-shaped payloads and a fake HTTP session.

Also puts the project root on sys.path so ``api_server`` imports when tests
are run from another directory.
"""

import os
import sys
from unittest.mock import Mock

import pytest
import requests

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from user_directory.api_client import RandomUserClient  # noqa: E402
from user_directory.config import Variant  # noqa: E402


def make_user(i: int, host: str = "randomuser.me", postcode=None) -> dict:
    """One record shaped like a RandomUser ``results`` entry (plus noise fields)."""
    return {
        "gender": "female" if i % 2 else "male",
        "name": {"title": "Ms", "first": f"First{i}", "last": f"Last{i}"},
        "location": {
            "street": {"number": 100 + i, "name": f"Main Street {i}"},
            "city": f"City{i}",
            "state": f"State{i}",
            "country": "Norway",
            "postcode": postcode if postcode is not None else f"{1000 + i}",
            "coordinates": {"latitude": "0", "longitude": "0"},
        },
        "email": f"user{i}@example.com",
        "login": {"uuid": f"uuid-{i}"},
        "picture": {
            "large": f"https://{host}/api/portraits/women/{i}.jpg",
            "medium": f"https://{host}/api/portraits/med/women/{i}.jpg",
        },
    }


def make_payload(count: int) -> dict:
    return {"results": [make_user(i) for i in range(count)], "info": {"results": count}}


def make_response(payload=None, status_error=None, json_error=None) -> Mock:
    resp = Mock()
    resp.status_code = 200
    resp.json.return_value = payload
    if json_error is not None:
        resp.json.side_effect = json_error
    if status_error is not None:
        resp.status_code = 500
        resp.raise_for_status.side_effect = status_error
    return resp


class FakeSession:
    """Answers every GET with the payload for the ``results`` count in the URL."""

    def __init__(self):
        self.urls = []
        self.response = None  # fixed response overriding the count-based payload
        self.error = None  # exception raised by get()

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        count = int(url.rsplit("results=", 1)[1])
        return make_response(make_payload(count))

    def close(self):
        pass


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return RandomUserClient(variant=Variant.EXTENDED, session=session)


@pytest.fixture
def failing_session():
    s = FakeSession()
    s.error = requests.ConnectionError("connection refused")
    return s
