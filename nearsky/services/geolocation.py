"""
Observer location resolution.

Uses manual coordinates when both are supplied, otherwise asks a fixed,
ordered list of free IP geolocation services. Each service is described
by a GeoProvider record:
- url: endpoint returning JSON for the caller's public IP
- fields: response keys to extract
- transform: optional function turning the extracted values into (lat, lon)

The first service returning a valid coordinate wins. Failures are logged
and the next service is tried; there are no retries per service.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

import requests

from nearsky.config import config
from nearsky.models import Coordinate, Location, MANUAL_INPUT

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


class ResolutionError(Exception):
    """No location could be obtained from manual input or any provider."""


def _pair_to_latlon(values: Sequence[Any]) -> LatLon:
    lat, lon = values
    return float(lat), float(lon)


def split_combined_latlon(values: Sequence[Any]) -> LatLon:
    """Parse a single 'lat,lon' string field (ipinfo.io style)."""
    (combined,) = values
    parts = re.split(r'\s*,\s*', str(combined).strip())
    if len(parts) != 2:
        raise ValueError(f'Expected "lat,lon", got {combined!r}')
    return float(parts[0]), float(parts[1])


@dataclass(frozen=True)
class GeoProvider:
    """One IP geolocation service and how to read its response."""
    name: str
    url: str
    fields: Tuple[str, ...]
    transform: Optional[Callable[[Sequence[Any]], LatLon]] = None
    place_fields: Tuple[str, ...] = ()

    def extract(self, payload: dict) -> LatLon:
        """
        Map a provider response to (lat, lon).

        Raises KeyError, TypeError or ValueError when the payload does
        not carry a usable coordinate.
        """
        values = [payload[name] for name in self.fields]
        if any(v is None for v in values):
            raise ValueError(f'null value in {self.fields}')
        return (self.transform or _pair_to_latlon)(values)

    def describe_place(self, payload: dict) -> Optional[str]:
        parts = [str(payload[name]) for name in self.place_fields if payload.get(name)]
        return ', '.join(parts) or None


DEFAULT_PROVIDERS: Tuple[GeoProvider, ...] = (
    GeoProvider(
        name='ipapi.co',
        url='https://ipapi.co/json/',
        fields=('latitude', 'longitude'),
        place_fields=('city', 'country_name'),
    ),
    GeoProvider(
        name='ip-api.com',
        url='http://ip-api.com/json/',
        fields=('lat', 'lon'),
        place_fields=('city', 'country'),
    ),
    GeoProvider(
        name='ipinfo.io',
        url='https://ipinfo.io/json',
        fields=('loc',),
        transform=split_combined_latlon,
        place_fields=('city', 'country'),
    ),
)


class GeoResolver:
    """
    Resolves the observer location for a run.

    Providers are tried strictly in order; the first valid coordinate
    stops the search.
    """

    def __init__(
        self,
        providers: Sequence[GeoProvider] = DEFAULT_PROVIDERS,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.providers = tuple(providers)
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'GeoResolver':
        return cls(timeout=config.geolocation.timeout_seconds)

    def resolve(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Location:
        """
        Return the observer location.

        Raises:
            ValueError if only one manual coordinate is given or it is out of range
            ResolutionError if no manual input and every provider failed
        """
        if (latitude is None) != (longitude is None):
            raise ValueError('latitude and longitude must be given together')

        if latitude is not None:
            location = Location(Coordinate(latitude, longitude), MANUAL_INPUT)
            logger.info(f'Using manual location ({location.coordinate})')
            return location

        for provider in self.providers:
            location = self._try_provider(provider)
            if location is not None:
                return location

        raise ResolutionError(
            'Could not determine location from any geolocation service; '
            'pass --lat and --lon explicitly'
        )

    def _try_provider(self, provider: GeoProvider) -> Optional[Location]:
        logger.info(f'Detecting location via {provider.name}...')
        try:
            response = self.session.get(provider.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f'unexpected payload type {type(payload).__name__}')
            lat, lon = provider.extract(payload)
            coordinate = Coordinate(lat, lon)
        except requests.exceptions.RequestException as e:
            logger.warning(f'{provider.name} lookup failed: {e}')
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f'{provider.name} returned no usable coordinate: {e}')
            return None

        location = Location(
            coordinate=coordinate,
            method=f'{provider.name} Geolocation',
            place=provider.describe_place(payload),
        )
        logger.info(f'Location detected: {coordinate} ({location.place or "unknown place"})')
        return location
