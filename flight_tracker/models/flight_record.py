"""
FlightRecord - one decoded row of the results table.

OpenSky encodes each aircraft as a positional array (a "state vector").
Only six positions are shown on screen:

1: callsign        - Callsign (8 chars max, space padded)
2: origin_country  - Country of registration
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
9: velocity        - Ground speed (m/s)

Decoding is lenient: a malformed array yields None instead of raising,
and a malformed field yields a None value on an otherwise valid record.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Optional, Sequence

# Highest consumed index is 9 (velocity)
MIN_STATE_LENGTH = 10

PLACEHOLDER = '—'


def to_double(value: Any) -> Optional[float]:
    """
    Coerce a raw JSON value to float.

    Numbers pass through, numeric strings are parsed, everything else
    (None, bool, dict, list, junk text) becomes None.
    """
    # bool is an int subclass, reject it before the numeric check
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    if isinstance(value, str) and '_' in value:
        return None
    try:
        parsed = float(value)
    except (ValueError, OverflowError):
        # OverflowError: JSON integers too large for a float
        return None
    return parsed if math.isfinite(parsed) else None


def sanitize_callsign(value: Any) -> Optional[str]:
    """Strip the space padding OpenSky puts on callsigns."""
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def _country(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _fixed(value: Optional[float], decimals: int) -> str:
    if value is None:
        return PLACEHOLDER
    return f'{value:.{decimals}f}'


@dataclass(frozen=True)
class FlightRecord:
    """
    Decoded aircraft state, as displayed in the results table.

    All values may be None if not reported by the aircraft.
    """
    callsign: Optional[str]
    origin_country: Optional[str]
    longitude: Optional[float]
    latitude: Optional[float]
    baro_altitude: Optional[float]
    velocity: Optional[float]

    @classmethod
    def from_array(cls, arr: Any) -> Optional['FlightRecord']:
        """
        Parse an OpenSky state vector array into a FlightRecord.

        Returns None if the value is not an array or is too short.
        """
        if not isinstance(arr, Sequence) or isinstance(arr, (str, bytes)):
            return None
        if len(arr) < MIN_STATE_LENGTH:
            return None

        return cls(
            callsign=sanitize_callsign(arr[1]),
            origin_country=_country(arr[2]),
            longitude=to_double(arr[5]),
            latitude=to_double(arr[6]),
            baro_altitude=to_double(arr[7]),
            velocity=to_double(arr[9]),
        )

    def __repr__(self) -> str:
        return f'<FlightRecord {self.callsign or "?"} @ {self.baro_altitude or 0:.0f}m>'

    # -------------------------------------------------------------------------
    # Display helpers - fixed precision, dash when absent
    # -------------------------------------------------------------------------

    @property
    def display_callsign(self) -> str:
        return self.callsign or PLACEHOLDER

    @property
    def display_country(self) -> str:
        return self.origin_country or PLACEHOLDER

    @property
    def latitude_display(self) -> str:
        """Latitude to 3 decimal places."""
        return _fixed(self.latitude, 3)

    @property
    def longitude_display(self) -> str:
        """Longitude to 3 decimal places."""
        return _fixed(self.longitude, 3)

    @property
    def altitude_display(self) -> str:
        """Barometric altitude in whole meters."""
        return _fixed(self.baro_altitude, 0)

    @property
    def speed_display(self) -> str:
        """Ground speed in m/s to one decimal place."""
        return _fixed(self.velocity, 1)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return asdict(self)
