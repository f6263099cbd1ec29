"""
API module for the flight tracker.

Serves the tracker page and a JSON mirror of its operations.
"""

from flight_tracker.api.tracker import tracker_bp

__all__ = ['tracker_bp']
