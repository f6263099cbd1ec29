"""
OpenSky ingestion for the flight tracker.

Builds the bounding-box query, sends it with the user's credentials and
decodes the state vectors that come back.
"""

from flight_tracker.ingestion.opensky_client import (
    OpenSkyClient,
    BoundingBox,
    Credentials,
    OpenSkyError,
    AuthenticationError,
    RequestFailedError,
)

__all__ = [
    'OpenSkyClient',
    'BoundingBox',
    'Credentials',
    'OpenSkyError',
    'AuthenticationError',
    'RequestFailedError',
]
