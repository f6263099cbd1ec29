"""
Tracker state container.

Holds everything the screen shows: the form text, the last result list,
the loading flag and the current error message. One store exists per
application and the page is rendered purely from its state (see
flight_tracker.view).

State machine:
    Idle -> Loading -> Idle with results
                    -> Idle with error

Only one fetch may be in flight. The flag is flipped under a lock since
Flask serves requests on threads; the network call itself runs outside
the lock. There is no cancellation and no queue: a second fetch while
loading is refused.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

import requests

from flight_tracker.config import config
from flight_tracker.ingestion import (
    OpenSkyClient,
    BoundingBox,
    Credentials,
    AuthenticationError,
    RequestFailedError,
)
from flight_tracker.models import FlightRecord, to_double

logger = logging.getLogger(__name__)

INVALID_BOUNDS_MESSAGE = 'Please enter valid numeric bounds.'
MISSING_CREDENTIALS_MESSAGE = 'Client ID and secret are required.'
AUTH_FAILED_MESSAGE = 'Authentication failed. Check client ID/secret.'


class TrackerError(Exception):
    """Base class for errors raised by the tracker shell."""


class InputValidationError(TrackerError):
    """Form input rejected before any network call."""


class FetchOutcome(str, Enum):
    """How a fetch attempt ended."""
    SUCCESS = 'success'
    INVALID_INPUT = 'invalid_input'
    BUSY = 'busy'
    AUTH_FAILED = 'auth_failed'
    REQUEST_FAILED = 'request_failed'
    NETWORK_ERROR = 'network_error'


@dataclass(frozen=True)
class FetchForm:
    """Raw text from the six form inputs."""
    lamin: str = ''
    lamax: str = ''
    lomin: str = ''
    lomax: str = ''
    client_id: str = ''
    client_secret: str = field(default='', repr=False)

    @classmethod
    def from_mapping(cls, data) -> 'FetchForm':
        """Build from request.form or a JSON body; missing keys become ''."""
        def text(key: str) -> str:
            value = data.get(key)
            return '' if value is None else str(value)

        return cls(
            lamin=text('lamin'),
            lamax=text('lamax'),
            lomin=text('lomin'),
            lomax=text('lomax'),
            client_id=text('client_id'),
            client_secret=text('client_secret'),
        )


@dataclass(frozen=True)
class TrackerState:
    """
    Snapshot of everything the page renders.

    The client secret is not part of the state: it is only used for the
    request it was typed for.
    """
    lamin: str = ''
    lamax: str = ''
    lomin: str = ''
    lomax: str = ''
    client_id: str = ''
    flights: Tuple[FlightRecord, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'bounds': {
                'lamin': self.lamin,
                'lamax': self.lamax,
                'lomin': self.lomin,
                'lomax': self.lomax,
            },
            'flights': [f.to_dict() for f in self.flights],
            'count': len(self.flights),
            'is_loading': self.is_loading,
            'error': self.error,
        }


def parse_bounding_box(form: FetchForm) -> BoundingBox:
    """
    Parse the four bound fields.

    Raises InputValidationError if any field is not a finite number.
    Min/max ordering is not checked.
    """
    values = [to_double(text.strip()) for text in (form.lamin, form.lamax, form.lomin, form.lomax)]
    if any(v is None for v in values):
        raise InputValidationError(INVALID_BOUNDS_MESSAGE)

    lamin, lamax, lomin, lomax = values
    return BoundingBox(lat_min=lamin, lat_max=lamax, lon_min=lomin, lon_max=lomax)


def parse_credentials(form: FetchForm) -> Credentials:
    """Raises InputValidationError if either credential is blank."""
    client_id = form.client_id.strip()
    client_secret = form.client_secret.strip()
    if not client_id or not client_secret:
        raise InputValidationError(MISSING_CREDENTIALS_MESSAGE)
    return Credentials(client_id=client_id, client_secret=client_secret)


class TrackerStore:
    """
    Single source of truth for the tracker screen.

    All writes go through fetch_flights(); readers take a snapshot via
    the state property.
    """

    def __init__(
        self,
        client: Optional[OpenSkyClient] = None,
        initial_form: Optional[dict] = None,
    ):
        self.client = client or OpenSkyClient.from_config()
        form = initial_form if initial_form is not None else config.defaults.form_values
        self._state = TrackerState(
            lamin=form.get('lamin', ''),
            lamax=form.get('lamax', ''),
            lomin=form.get('lomin', ''),
            lomax=form.get('lomax', ''),
        )
        self._lock = threading.Lock()

    @property
    def state(self) -> TrackerState:
        with self._lock:
            return self._state

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def _update(self, **changes) -> None:
        with self._lock:
            self._state = replace(self._state, **changes)

    def fetch_flights(self, form: FetchForm) -> FetchOutcome:
        """
        Validate the form, query OpenSky and store the outcome.

        Validation failures are reported without touching the network or
        the previous results. Every path that enters Loading leaves it
        exactly once.
        """
        with self._lock:
            if self._state.is_loading:
                logger.info('Fetch refused: another fetch is in flight')
                return FetchOutcome.BUSY
            # The text fields keep whatever was typed, valid or not
            self._state = replace(
                self._state,
                lamin=form.lamin,
                lamax=form.lamax,
                lomin=form.lomin,
                lomax=form.lomax,
                client_id=form.client_id,
            )

        try:
            bbox = parse_bounding_box(form)
            credentials = parse_credentials(form)
        except InputValidationError as e:
            self._update(error=str(e))
            return FetchOutcome.INVALID_INPUT

        with self._lock:
            if self._state.is_loading:
                return FetchOutcome.BUSY
            self._state = replace(self._state, is_loading=True, error=None)

        outcome = FetchOutcome.SUCCESS
        changes = {}
        try:
            flights = self.client.get_states(bbox, credentials)
            changes['flights'] = tuple(flights)
            logger.info(f'Fetched {len(flights)} flights')
        except AuthenticationError:
            outcome = FetchOutcome.AUTH_FAILED
            changes['error'] = AUTH_FAILED_MESSAGE
        except RequestFailedError as e:
            outcome = FetchOutcome.REQUEST_FAILED
            changes['error'] = f'Request failed ({e.status_code}). Try again in a moment.'
        except requests.exceptions.RequestException as e:
            outcome = FetchOutcome.NETWORK_ERROR
            changes['error'] = f'Network error: {e}'
        finally:
            self._update(is_loading=False, **changes)

        return outcome
