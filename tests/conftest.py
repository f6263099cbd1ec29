import json

import pytest
import requests

from flight_tracker.app import create_app
from flight_tracker.ingestion import OpenSkyClient


def make_response(status_code, payload=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session; replays one canned result per call."""

    def __init__(self, result=None):
        self.result = result if result is not None else make_response(200, {"states": []})
        self.calls = []

    def get(self, url, params=None, auth=None, timeout=None):
        prepared = requests.Request("GET", url, params=params, auth=auth).prepare()
        self.calls.append({"request": prepared, "params": params, "timeout": timeout})
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    @property
    def last_request(self):
        return self.calls[-1]["request"]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client_for(fake_session):
    def build(result):
        fake_session.result = result
        return OpenSkyClient(base_url="https://example.test/api", session=fake_session)

    return build


@pytest.fixture
def app(fake_session):
    client = OpenSkyClient(base_url="https://example.test/api", session=fake_session)
    application = create_app(client=client)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def http(app):
    return app.test_client()


@pytest.fixture
def valid_form():
    return {
        "lamin": "40.0",
        "lamax": "41.0",
        "lomin": "-74.5",
        "lomax": "-73.0",
        "client_id": "my-client",
        "client_secret": "s3cret",
    }
