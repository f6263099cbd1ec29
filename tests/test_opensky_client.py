import base64

import pytest
import requests

from flight_tracker.ingestion import (
    AuthenticationError,
    BoundingBox,
    Credentials,
    OpenSkyClient,
    RequestFailedError,
)
from flight_tracker.ingestion.opensky_client import format_coordinate
from tests.conftest import FakeSession, make_response

BBOX = BoundingBox(lat_min=40.0, lat_max=41.5, lon_min=-74.25, lon_max=-73.0)
CREDS = Credentials(client_id="my-client", client_secret="s3cret")


def test_request_carries_bbox_params_and_basic_auth(client_for, fake_session):
    client = client_for(make_response(200, {"states": []}))

    client.get_states(BBOX, CREDS)

    request = fake_session.last_request
    assert request.method == "GET"
    assert request.url.startswith("https://example.test/api/states/all?")
    assert fake_session.calls[0]["params"] == {
        "lamin": "40.0",
        "lomin": "-74.25",
        "lamax": "41.5",
        "lomax": "-73.0",
    }
    expected = base64.b64encode(b"my-client:s3cret").decode("ascii")
    assert request.headers["Authorization"] == f"Basic {expected}"


def test_exactly_one_request_without_timeout_by_default(client_for, fake_session):
    client = client_for(make_response(500))

    with pytest.raises(RequestFailedError):
        client.get_states(BBOX, CREDS)

    assert len(fake_session.calls) == 1
    assert fake_session.calls[0]["timeout"] is None


def test_configured_timeout_is_passed_through():
    session = FakeSession()
    client = OpenSkyClient(base_url="https://example.test/api", timeout=7.5, session=session)

    client.get_states(BBOX, CREDS)

    assert session.calls[0]["timeout"] == 7.5


def test_credentials_are_utf8_encoded(client_for, fake_session):
    client = client_for(make_response(200, {"states": []}))

    client.get_states(BBOX, Credentials(client_id="jörg", client_secret="pässword"))

    scheme, token = fake_session.last_request.headers["Authorization"].split(" ")
    assert scheme == "Basic"
    assert base64.b64decode(token).decode("utf-8") == "jörg:pässword"


def test_secret_is_hidden_from_repr():
    assert "s3cret" not in repr(CREDS)


def test_decodes_states_and_drops_malformed_rows(client_for):
    payload = {
        "time": 1714765200,
        "states": [
            ["abc123", "ABC123  ", "US", 0, 0, -73.5, 40.7, 1000, False, 250],
            ["def456", "SHORT"],
            "not-a-list",
            ["0a0b0c", None, "Canada", 0, 0, None, None, None, True, None],
        ],
    }
    client = client_for(make_response(200, payload))

    records = client.get_states(BBOX, CREDS)

    assert [r.callsign for r in records] == ["ABC123", None]
    assert records[0].latitude == 40.7
    assert records[1].origin_country == "Canada"


@pytest.mark.parametrize("payload", [{"states": None}, {"time": 1}, {"states": []}])
def test_missing_or_null_states_is_empty(client_for, payload):
    client = client_for(make_response(200, payload))

    assert client.get_states(BBOX, CREDS) == []


def test_401_raises_authentication_error(client_for):
    client = client_for(make_response(401, text="Unauthorized"))

    with pytest.raises(AuthenticationError) as exc_info:
        client.get_states(BBOX, CREDS)

    assert exc_info.value.status_code == 401


@pytest.mark.parametrize("status", [403, 429, 503])
def test_other_status_raises_request_failed(client_for, status):
    client = client_for(make_response(status, text="nope"))

    with pytest.raises(RequestFailedError) as exc_info:
        client.get_states(BBOX, CREDS)

    assert exc_info.value.status_code == status


def test_transport_errors_propagate(client_for):
    client = client_for(requests.exceptions.ConnectionError("connection refused"))

    with pytest.raises(requests.exceptions.ConnectionError):
        client.get_states(BBOX, CREDS)


def test_unreadable_body_is_a_request_exception(client_for):
    client = client_for(make_response(200, text="<html>oops</html>"))

    with pytest.raises(requests.exceptions.RequestException):
        client.get_states(BBOX, CREDS)


@pytest.mark.parametrize(
    "value, expected",
    [
        (24.396308, "24.396308"),
        (-124.848974, "-124.848974"),
        (40, "40.0"),
        (-66.93457, "-66.93457"),
        (1e-07, "0.0000001"),
        (-2.5e-05, "-0.000025"),
        (1e16, "10000000000000000.0"),
    ],
)
def test_format_coordinate_never_uses_exponent(value, expected):
    assert format_coordinate(value) == expected


def test_inverted_box_is_sent_unchanged():
    bbox = BoundingBox(lat_min=50.0, lat_max=10.0, lon_min=5.0, lon_max=-5.0)

    assert bbox.to_params() == {
        "lamin": "50.0",
        "lomin": "5.0",
        "lamax": "10.0",
        "lomax": "-5.0",
    }
