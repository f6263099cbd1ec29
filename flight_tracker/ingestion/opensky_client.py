"""
OpenSky Network API client.

Issues a single bounding-box query against the REST API's /states/all
endpoint and decodes the state vectors into FlightRecords.

Deliberately minimal:
- One GET per call, no retries and no rate-limit sleeping
- Basic authentication with the caller's client ID and secret
- No caching; every call hits the network

Errors are logged and raised. Turning them into user-facing text is the
caller's job (see flight_tracker.store).
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

import requests
from requests.auth import HTTPBasicAuth

from flight_tracker.config import config
from flight_tracker.models import FlightRecord

logger = logging.getLogger(__name__)


class OpenSkyError(Exception):
    """Base class for errors reported by the OpenSky API."""


class AuthenticationError(OpenSkyError):
    """OpenSky rejected the credentials (HTTP 401)."""

    def __init__(self):
        super().__init__('OpenSky rejected the supplied credentials')
        self.status_code = 401


class RequestFailedError(OpenSkyError):
    """OpenSky answered with a status other than 200 or 401."""

    def __init__(self, status_code: int):
        super().__init__(f'OpenSky request failed with status {status_code}')
        self.status_code = status_code


def format_coordinate(value: float) -> str:
    """
    Render a coordinate as a plain decimal string.

    Uses the shortest round-tripping digits, but never scientific
    notation: 1e-07 becomes '0.0000001'. Whole numbers keep their '.0'.
    """
    text = repr(float(value))
    if 'e' in text or 'E' in text:
        text = format(Decimal(text), 'f')
        if '.' not in text:
            text += '.0'
    return text


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box for API queries.

    OpenSky expects: lamin, lomin, lamax, lomax
    (latitude min, longitude min, latitude max, longitude max)

    No min <= max check is made; an inverted box is sent as-is.
    """
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def to_params(self) -> dict:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': format_coordinate(self.lat_min),
            'lomin': format_coordinate(self.lon_min),
            'lamax': format_coordinate(self.lat_max),
            'lomax': format_coordinate(self.lon_max),
        }


@dataclass(frozen=True)
class Credentials:
    """OpenSky API client credentials, held for a single request."""
    client_id: str
    client_secret: str = field(repr=False)

    def to_auth(self) -> HTTPBasicAuth:
        """Basic auth with both parts encoded as UTF-8 bytes."""
        # str values would be encoded as latin-1 by requests
        return HTTPBasicAuth(
            self.client_id.encode('utf-8'),
            self.client_secret.encode('utf-8'),
        )


class OpenSkyClient:
    """
    Client for the OpenSky Network states endpoint.

    A requests.Session can be injected, which is how the tests
    substitute canned responses.
    """

    def __init__(
        self,
        base_url: str = 'https://opensky-network.org/api',
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.opensky.base_url,
            timeout=config.opensky.timeout_seconds,
        )

    @property
    def states_url(self) -> str:
        return f'{self.base_url}/states/all'

    def get_states(
        self,
        bbox: BoundingBox,
        credentials: Credentials,
    ) -> List[FlightRecord]:
        """
        Fetch current state vectors inside a bounding box.

        Args:
            bbox: Geographic area to query
            credentials: OpenSky client ID and secret

        Returns:
            Decoded records, malformed state vectors dropped

        Raises:
            AuthenticationError on HTTP 401
            RequestFailedError on any other non-200 status
            requests.RequestException on network errors or an unreadable body
        """
        params = bbox.to_params()
        logger.debug(f'Fetching states: {self.states_url} params={params}')

        try:
            response = self.session.get(
                self.states_url,
                params=params,
                auth=credentials.to_auth(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.error('OpenSky API timeout')
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f'OpenSky request failed: {e}')
            raise

        if response.status_code == 401:
            logger.warning('OpenSky authentication failed')
            raise AuthenticationError()
        if response.status_code != 200:
            logger.warning(f'OpenSky API error: {response.status_code}')
            raise RequestFailedError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            # requests raises its own JSONDecodeError subclass on recent versions
            logger.error(f'OpenSky returned an unreadable body: {e}')
            if isinstance(e, requests.exceptions.RequestException):
                raise
            raise requests.exceptions.InvalidJSONError(str(e), response=response) from e

        return self.parse_states(data)

    @staticmethod
    def parse_states(data: Any) -> List[FlightRecord]:
        """Decode the 'states' array of a /states/all response body."""
        states_raw = data.get('states') if isinstance(data, dict) else None
        if not isinstance(states_raw, list):
            states_raw = []

        logger.info(f'Received {len(states_raw)} state vectors from OpenSky')

        records = []
        for arr in states_raw:
            record = FlightRecord.from_array(arr)
            if record is not None:
                records.append(record)

        dropped = len(states_raw) - len(records)
        if dropped:
            logger.debug(f'Dropped {dropped} malformed state vectors')

        return records
