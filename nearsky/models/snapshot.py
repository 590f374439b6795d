"""
Aircraft snapshot types.

OpenSky state vector format (array indices):
0: icao24          - ICAO24 hex address
1: callsign        - Callsign (8 chars max, space padded)
2: origin_country  - Country of registration
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
8: on_ground       - Boolean
9: velocity        - Ground speed (m/s)
10: true_track     - Track angle (degrees, 0=north)
11: vertical_rate  - Vertical rate (m/s)

Remaining indices (timestamps, sensors, squawk, ...) are ignored.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, List, Optional, Tuple

# Highest index we read from the wire array
_MIN_ARRAY_LENGTH = 12

_NUMERIC_FIELDS = ('baro_altitude', 'velocity', 'true_track', 'vertical_rate', 'longitude', 'latitude')


def _optional_float(value: Any) -> Optional[float]:
    """
    Coerce a nullable numeric telemetry value.

    Raises TypeError or ValueError for booleans, non-numeric strings
    and non-finite numbers.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f'boolean is not a numeric value: {value!r}')
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f'non-finite value: {value!r}')
    return number


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f'expected string, got {type(value).__name__}')
    return value


@dataclass(frozen=True)
class StateVector:
    """
    One aircraft report, parsed from the positional wire array.

    All telemetry values may be None if not reported by the aircraft.
    Numeric values are always float or None.
    """
    icao24: str
    callsign: Optional[str]
    origin_country: Optional[str]
    baro_altitude: Optional[float]
    on_ground: bool
    velocity: Optional[float]
    true_track: Optional[float]
    vertical_rate: Optional[float]
    longitude: Optional[float] = None
    latitude: Optional[float] = None

    @classmethod
    def from_array(cls, arr: Any) -> Optional['StateVector']:
        """
        Parse an OpenSky state vector array.

        Returns None if the array is malformed, has no icao24, or carries
        a telemetry value that is not a number.
        """
        if not isinstance(arr, (list, tuple)) or len(arr) < _MIN_ARRAY_LENGTH:
            return None

        icao24 = arr[0]
        if not icao24 or not isinstance(icao24, str):
            return None

        # Normalize callsign (strip padding, handle None)
        callsign = arr[1]
        if callsign:
            callsign = str(callsign).strip() or None

        origin_country = arr[2]
        try:
            return cls(
                icao24=icao24.strip().lower(),
                callsign=callsign,
                origin_country=str(origin_country) if origin_country is not None else None,
                baro_altitude=_optional_float(arr[7]),
                on_ground=bool(arr[8]),
                velocity=_optional_float(arr[9]),
                true_track=_optional_float(arr[10]),
                vertical_rate=_optional_float(arr[11]),
                longitude=_optional_float(arr[5]),
                latitude=_optional_float(arr[6]),
            )
        except (TypeError, ValueError):
            return None

    def has_position(self) -> bool:
        """Check if this state has valid position data."""
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'StateVector':
        """
        Rebuild a state vector from to_dict() output.

        Raises KeyError, TypeError or ValueError on missing or mistyped fields.
        """
        if not isinstance(data, dict):
            raise TypeError(f'expected dict, got {type(data).__name__}')
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise KeyError(f'unknown fields: {sorted(unknown)}')

        icao24 = data['icao24']
        if not icao24 or not isinstance(icao24, str):
            raise ValueError(f'invalid icao24: {icao24!r}')
        on_ground = data['on_ground']
        if not isinstance(on_ground, bool):
            raise TypeError(f'on_ground must be a boolean, got {on_ground!r}')

        values = {name: _optional_float(data.get(name)) for name in _NUMERIC_FIELDS}
        return cls(
            icao24=icao24,
            callsign=_optional_str(data['callsign']),
            origin_country=_optional_str(data['origin_country']),
            on_ground=on_ground,
            **values,
        )


@dataclass(frozen=True)
class AircraftSnapshot:
    """
    Aircraft visible in the search area at one point in time.

    states keeps the order returned by the API. time is the OpenSky
    server timestamp (epoch seconds), or the local time when the
    snapshot was synthesized after a failed or empty fetch.
    """
    states: Tuple[StateVector, ...]
    time: int

    @classmethod
    def empty(cls, timestamp: float) -> 'AircraftSnapshot':
        return cls(states=(), time=int(timestamp))

    @property
    def count(self) -> int:
        return len(self.states)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict."""
        return {
            'time': self.time,
            'states': [sv.to_dict() for sv in self.states],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AircraftSnapshot':
        """
        Rebuild a snapshot from to_dict() output.

        Raises KeyError, TypeError or ValueError on foreign content.
        """
        states_raw = data['states']
        if not isinstance(states_raw, list):
            raise TypeError(f'states must be a list, got {type(states_raw).__name__}')
        states: List[StateVector] = [StateVector.from_dict(sv) for sv in states_raw]

        timestamp = data['time']
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not math.isfinite(timestamp):
            raise ValueError(f'invalid snapshot time: {timestamp!r}')
        return cls(states=tuple(states), time=int(timestamp))
