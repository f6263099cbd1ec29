"""
Configuration management for the flight tracker.

Loads settings from environment variables with sensible defaults.
OpenSky credentials are deliberately absent: they are typed into the
form for each fetch and never read from the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

# Contiguous United States, roughly
US_BOUNDING_BOX: Tuple[float, float, float, float] = (
    24.396308, 49.384358, -124.848974, -66.93457,
)


def _parse_bbox(value: str) -> Optional[Tuple[float, float, float, float]]:
    """Parse 'lamin,lamax,lomin,lomax' string into tuple, or None if empty/invalid."""
    if not value:
        return None
    try:
        lamin, lamax, lomin, lomax = value.split(',')
        return (
            float(lamin.strip()),
            float(lamax.strip()),
            float(lomin.strip()),
            float(lomax.strip()),
        )
    except (ValueError, AttributeError):
        return None


def _parse_timeout(value: str) -> Optional[float]:
    """Parse a positive number of seconds, or None for no timeout."""
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds > 0 else None


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration."""
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')
    # None means wait indefinitely, same as requests itself
    timeout_seconds: Optional[float] = _parse_timeout(os.getenv('OPENSKY_TIMEOUT_SECONDS', ''))


@dataclass(frozen=True)
class DefaultsConfig:
    """Initial form values shown on first load."""
    bounding_box: Tuple[float, float, float, float] = field(
        default=_parse_bbox(os.getenv('DEFAULT_BBOX', '')) or US_BOUNDING_BOX
    )

    @property
    def form_values(self) -> dict:
        lamin, lamax, lomin, lomax = self.bounding_box
        return {
            'lamin': str(lamin),
            'lamax': str(lamax),
            'lomin': str(lomin),
            'lomax': str(lomax),
        }


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    opensky: OpenSkyConfig
    defaults: DefaultsConfig

    # Flask settings
    secret_key: str
    debug: bool
    host: str
    port: int


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        opensky=OpenSkyConfig(),
        defaults=DefaultsConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
        host=os.getenv('HOST', '127.0.0.1'),
        port=int(os.getenv('PORT', '5000')),
    )


# Singleton instance
config = load_config()
