"""
Data models for the flight tracker.

Plain dataclasses only: records live for a single render pass and are
never stored.
"""

from flight_tracker.models.flight_record import (
    FlightRecord,
    to_double,
    sanitize_callsign,
    PLACEHOLDER,
)

__all__ = [
    'FlightRecord',
    'to_double',
    'sanitize_callsign',
    'PLACEHOLDER',
]
