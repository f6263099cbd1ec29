"""
Page rendering - turns a TrackerState into what the template displays.

render() is a pure function of the state so it can be tested without
Flask. The template only loops over what it is given here.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from flight_tracker.store import TrackerState

TABLE_COLUMNS: Tuple[str, ...] = (
    'Callsign',
    'Country',
    'Lat',
    'Lon',
    'Alt (m)',
    'Speed (m/s)',
)

EMPTY_MESSAGE = 'No flights in this area right now.'


@dataclass(frozen=True)
class FieldView:
    name: str
    label: str
    value: str
    masked: bool = False
    numeric: bool = False


@dataclass(frozen=True)
class RowView:
    cells: Tuple[str, ...]
    striped: bool


@dataclass(frozen=True)
class PageView:
    """Everything the page template needs, already formatted."""
    bounds_fields: Tuple[FieldView, ...]
    credential_fields: Tuple[FieldView, ...]
    fetch_disabled: bool
    error: Optional[str]
    results_heading: str
    show_spinner: bool
    empty_message: Optional[str]
    columns: Tuple[str, ...]
    rows: Tuple[RowView, ...]


def render(state: TrackerState) -> PageView:
    """Build the page view for a state snapshot."""
    bounds_fields = (
        FieldView('lamin', 'Min Latitude', state.lamin, numeric=True),
        FieldView('lamax', 'Max Latitude', state.lamax, numeric=True),
        FieldView('lomin', 'Min Longitude', state.lomin, numeric=True),
        FieldView('lomax', 'Max Longitude', state.lomax, numeric=True),
    )
    # Never echo the secret back into the page
    credential_fields = (
        FieldView('client_id', 'Client ID', state.client_id),
        FieldView('client_secret', 'Client Secret', '', masked=True),
    )

    rows: List[RowView] = []
    empty_message = None
    if not state.is_loading:
        if not state.flights:
            empty_message = EMPTY_MESSAGE
        for index, flight in enumerate(state.flights):
            rows.append(RowView(
                cells=(
                    flight.display_callsign,
                    flight.display_country,
                    flight.latitude_display,
                    flight.longitude_display,
                    flight.altitude_display,
                    flight.speed_display,
                ),
                striped=index % 2 == 0,
            ))

    return PageView(
        bounds_fields=bounds_fields,
        credential_fields=credential_fields,
        fetch_disabled=state.is_loading,
        error=state.error,
        results_heading=f'Results ({len(state.flights)})',
        show_spinner=state.is_loading,
        empty_message=empty_message,
        columns=TABLE_COLUMNS,
        rows=tuple(rows),
    )
