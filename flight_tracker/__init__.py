"""
OpenSky Flight Tracker.

Single-screen flight lookup built with Flask and requests: enter a
bounding box and OpenSky credentials, get a table of the aircraft
currently inside it.

Modules:
    api/         Page and JSON endpoints
    models/      FlightRecord and the state vector decoder
    ingestion/   OpenSky API client
    store.py     Tracker state container and fetch orchestration
    view.py      Pure render of a state snapshot
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
