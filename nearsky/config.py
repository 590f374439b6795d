"""
Configuration management for nearsky.

Loads settings from environment variables with sensible defaults.
Command-line flags override these values for a single run; components
take their settings through constructors so nothing here is mutated.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _default_cache_path() -> Path:
    override = os.getenv('NEARSKY_CACHE_FILE')
    if override:
        return Path(override)
    return Path(tempfile.gettempdir()) / 'nearsky_cache.json'


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration (anonymous tier)."""
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')
    timeout_seconds: float = float(os.getenv('OPENSKY_TIMEOUT_SECONDS', '30'))
    max_attempts: int = int(os.getenv('OPENSKY_MAX_ATTEMPTS', '3'))
    initial_backoff_seconds: float = float(os.getenv('OPENSKY_INITIAL_BACKOFF_SECONDS', '2'))


@dataclass(frozen=True)
class GeolocationConfig:
    """IP geolocation lookup settings."""
    timeout_seconds: float = float(os.getenv('GEOLOCATION_TIMEOUT_SECONDS', '10'))


@dataclass(frozen=True)
class CacheConfig:
    """Single-slot response cache settings."""
    path: Path = field(default_factory=_default_cache_path)
    ttl_minutes: int = int(os.getenv('NEARSKY_CACHE_MINUTES', '2'))
    enabled: bool = _env_flag('NEARSKY_CACHE_ENABLED', '1')


@dataclass(frozen=True)
class SearchConfig:
    """Search area settings."""
    radius_degrees: float = float(os.getenv('NEARSKY_RADIUS_DEGREES', '0.1'))

    # CLI limits
    min_radius_degrees: float = 0.01
    max_radius_degrees: float = 5.0
    min_cache_minutes: int = 1
    max_cache_minutes: int = 60


@dataclass(frozen=True)
class OutputConfig:
    """Report output settings."""
    html_file: str = os.getenv('NEARSKY_HTML_FILE', 'nearby_flights.html')


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    opensky: OpenSkyConfig
    geolocation: GeolocationConfig
    cache: CacheConfig
    search: SearchConfig
    output: OutputConfig

    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        opensky=OpenSkyConfig(),
        geolocation=GeolocationConfig(),
        cache=CacheConfig(),
        search=SearchConfig(),
        output=OutputConfig(),
        debug=os.getenv('NEARSKY_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
