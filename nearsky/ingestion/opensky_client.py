"""
OpenSky Network API client.

Handles communication with the OpenSky REST API, including:
- Bounding box construction around the observer
- Bounding box queries for geographic filtering
- Retry with exponential backoff on rate limiting and server errors
- Degrading to an empty snapshot when the API cannot be reached

Only the anonymous tier is used; no credentials are sent.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from nearsky.config import config
from nearsky.models import AircraftSnapshot, Coordinate, StateVector

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Flat conversion used for the CLI radius, independent of latitude
KM_PER_DEGREE = 111.0


class FetchError(Exception):
    """Flight data could not be retrieved."""


class TransientFetchError(FetchError):
    """Rate limiting or server error; worth retrying."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class PermanentFetchError(FetchError):
    """Bad request, malformed response or unclassified network error."""


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box for API queries.

    OpenSky expects: lamin, lomin, lamax, lomax
    (latitude min, longitude min, latitude max, longitude max).
    Longitudes are passed through raw and may exceed +/-180.
    """
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @classmethod
    def from_center_radius(cls, center: Coordinate, radius_km: float) -> 'BoundingBox':
        return compute_bounding_box(center, radius_km)

    def to_params(self) -> dict:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': self.lat_min,
            'lamax': self.lat_max,
            'lomin': self.lon_min,
            'lomax': self.lon_max,
        }


def degrees_to_km(degrees: float) -> float:
    """Convert a radius in degrees to kilometers (111 km per degree)."""
    return degrees * KM_PER_DEGREE


def compute_bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """
    Create bounding box from center point and radius.

    Uses the great-circle angular distance on a spherical Earth. When the
    circle reaches a pole, latitude is clamped to +/-90 and the box spans
    every longitude, since the longitude delta is undefined there.
    """
    if radius_km <= 0:
        raise ValueError(f'radius_km must be positive, got {radius_km}')

    lat_rad = math.radians(center.latitude)
    lon_rad = math.radians(center.longitude)
    angular_distance = radius_km / EARTH_RADIUS_KM

    lat_min = lat_rad - angular_distance
    lat_max = lat_rad + angular_distance

    half_pi = math.pi / 2
    cos_lat = math.cos(lat_rad)
    ratio = math.sin(angular_distance) / cos_lat if cos_lat > 1e-12 else math.inf

    if lat_min <= -half_pi or lat_max >= half_pi or ratio >= 1.0:
        return BoundingBox(
            lat_min=max(math.degrees(lat_min), -90.0),
            lat_max=min(math.degrees(lat_max), 90.0),
            lon_min=-180.0,
            lon_max=180.0,
        )

    delta_lon = math.asin(ratio)
    return BoundingBox(
        lat_min=math.degrees(lat_min),
        lat_max=math.degrees(lat_max),
        lon_min=math.degrees(lon_rad - delta_lon),
        lon_max=math.degrees(lon_rad + delta_lon),
    )


class OpenSkyClient:
    """
    Client for OpenSky Network API.

    Handles:
    - GET requests to /states/all endpoint
    - Bounding box filtering
    - Retry on 429 and 5xx with doubling backoff
    """

    def __init__(
        self,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 30.0,
        max_attempts: int = 3,
        initial_backoff: float = 2.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.initial_backoff = initial_backoff
        self.session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(cls) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.opensky.base_url,
            timeout=config.opensky.timeout_seconds,
            max_attempts=config.opensky.max_attempts,
            initial_backoff=config.opensky.initial_backoff_seconds,
        )

    def fetch(self, bbox: BoundingBox) -> AircraftSnapshot:
        """
        Fetch current state vectors, never raising.

        On exhausted retries or a non-retryable error a warning is logged
        and an empty snapshot stamped with the current time is returned.
        Callers tell "no data" apart by the snapshot's count.
        """
        try:
            return self.get_states(bbox)
        except FetchError as e:
            return self.fallback_snapshot(e)

    def fallback_snapshot(self, error: FetchError) -> AircraftSnapshot:
        """Log why the fetch failed and return an empty snapshot."""
        if isinstance(error, TransientFetchError):
            if error.is_rate_limited:
                logger.warning(
                    f'OpenSky rate limit still exceeded after {self.max_attempts} attempts; '
                    'anonymous access is limited, try again in a few minutes '
                    'or increase --cache-minutes'
                )
            else:
                logger.warning(f'OpenSky unavailable after {self.max_attempts} attempts: {error}')
        else:
            logger.warning(f'Could not fetch flight data: {error}')

        return AircraftSnapshot.empty(self._clock())

    def get_states(self, bbox: BoundingBox) -> AircraftSnapshot:
        """
        Fetch current state vectors with retries.

        Raises:
            TransientFetchError when retries are exhausted
            PermanentFetchError on any non-retryable failure
        """
        attempt = 1
        delay = self.initial_backoff
        while True:
            try:
                return self._request_states(bbox)
            except TransientFetchError as e:
                if attempt >= self.max_attempts:
                    raise
                logger.warning(
                    f'OpenSky returned {e.status_code} (attempt {attempt}/{self.max_attempts}), '
                    f'retrying in {delay:.0f}s'
                )
                self._sleep(delay)
                attempt += 1
                delay *= 2

    def _request_states(self, bbox: BoundingBox) -> AircraftSnapshot:
        """Perform a single request and parse the response."""
        url = f'{self.base_url}/states/all'
        params = bbox.to_params()

        logger.debug(f'Fetching states: {url} params={params}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code
            if status == 429 or status >= 500:
                raise TransientFetchError(f'HTTP {status} from OpenSky', status) from e
            raise PermanentFetchError(f'HTTP {status} from OpenSky') from e
        except requests.exceptions.Timeout as e:
            raise PermanentFetchError(f'OpenSky request timed out after {self.timeout:.0f}s') from e
        except requests.exceptions.RequestException as e:
            raise PermanentFetchError(f'OpenSky request failed: {e}') from e

        if not response.content or not response.content.strip():
            raise PermanentFetchError('Empty response body from OpenSky')

        try:
            data = response.json()
        except ValueError as e:
            raise PermanentFetchError('OpenSky response is not valid JSON') from e

        return self._parse_payload(data)

    def _parse_payload(self, data) -> AircraftSnapshot:
        if not data:
            raise PermanentFetchError('Empty payload from OpenSky')
        if not isinstance(data, dict):
            raise PermanentFetchError(f'Unexpected OpenSky payload type: {type(data).__name__}')

        if 'states' not in data:
            if data.get('error'):
                raise PermanentFetchError(f"OpenSky error: {data['error']}")
            logger.info('OpenSky response has no states field, treating as empty')
            return AircraftSnapshot.empty(self._clock())

        try:
            api_time = int(data['time']) if data.get('time') is not None else int(self._clock())
        except (TypeError, ValueError, OverflowError) as e:
            raise PermanentFetchError(f"Invalid OpenSky time field: {data.get('time')!r}") from e

        states_raw = data.get('states')
        if states_raw is None:
            states_raw = []
        elif not isinstance(states_raw, (list, tuple)):
            raise PermanentFetchError(f'Unexpected OpenSky states type: {type(states_raw).__name__}')
        logger.info(f'Received {len(states_raw)} state vectors from OpenSky')

        states = []
        for arr in states_raw:
            sv = StateVector.from_array(arr)
            if sv is None:
                logger.debug(f'Skipping malformed state vector: {arr!r}')
                continue
            states.append(sv)

        return AircraftSnapshot(states=tuple(states), time=api_time)
