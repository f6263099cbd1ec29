"""
Tracker endpoints.

Provides:
- GET  /                    - Render the tracker page
- POST /fetch               - Form submit: fetch flights and re-render
- GET  /api/flights         - Current state as JSON
- POST /api/flights/fetch   - Fetch flights from a JSON body
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, render_template, request

from flight_tracker.store import FetchForm, FetchOutcome, TrackerStore
from flight_tracker.view import render

logger = logging.getLogger(__name__)

tracker_bp = Blueprint('tracker', __name__)

# JSON status code per fetch outcome. Upstream failures are still a
# successful round trip to us; the error text is in the body.
_OUTCOME_STATUS = {
    FetchOutcome.SUCCESS: 200,
    FetchOutcome.INVALID_INPUT: 400,
    FetchOutcome.BUSY: 409,
    FetchOutcome.AUTH_FAILED: 200,
    FetchOutcome.REQUEST_FAILED: 200,
    FetchOutcome.NETWORK_ERROR: 200,
}


def _store() -> TrackerStore:
    return current_app.config['TRACKER_STORE']


def _render_page(status: int = 200):
    page = render(_store().state)
    return render_template('index.html', page=page), status


@tracker_bp.route('/', methods=['GET'])
def index():
    """Serve the tracker page."""
    return _render_page()


@tracker_bp.route('/fetch', methods=['POST'])
def fetch_form():
    """
    Handle the Fetch Flights button.

    The page is re-rendered in every case; errors show up in the
    page's error area rather than as an HTTP error.
    """
    form = FetchForm.from_mapping(request.form)
    outcome = _store().fetch_flights(form)
    logger.debug(f'Form fetch finished: {outcome.value}')
    return _render_page(409 if outcome is FetchOutcome.BUSY else 200)


@tracker_bp.route('/api/flights', methods=['GET'])
def list_flights():
    """Return the current result list and status."""
    result = _store().state.to_dict()
    result['timestamp'] = datetime.now(timezone.utc).isoformat()
    return jsonify(result)


@tracker_bp.route('/api/flights/fetch', methods=['POST'])
def fetch_json():
    """
    Fetch flights for a bounding box.

    Body: {"lamin": ..., "lamax": ..., "lomin": ..., "lomax": ...,
           "client_id": "...", "client_secret": "..."}

    Response includes the outcome and query timing.
    """
    start_time = time.perf_counter()

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}

    outcome = _store().fetch_flights(FetchForm.from_mapping(body))

    result = _store().state.to_dict()
    result['outcome'] = outcome.value
    result['timestamp'] = datetime.now(timezone.utc).isoformat()
    result['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)

    return jsonify(result), _OUTCOME_STATUS[outcome]
