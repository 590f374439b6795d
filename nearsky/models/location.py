"""
Observer location types.

A Location is resolved once per run (manually or via IP geolocation)
and never changes afterwards.
"""

from dataclasses import dataclass
from typing import Optional

MANUAL_INPUT = 'Manual Input'


@dataclass(frozen=True)
class Coordinate:
    """WGS84 point in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f'Latitude {self.latitude} outside [-90, 90]')
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f'Longitude {self.longitude} outside [-180, 180]')

    def __str__(self) -> str:
        return f'{self.latitude:.4f}, {self.longitude:.4f}'


@dataclass(frozen=True)
class Location:
    """
    Resolved observer location.

    method describes where the coordinate came from, e.g. 'Manual Input'
    or 'ipinfo.io Geolocation'. place is an optional human-readable label
    reported by the geolocation provider.
    """
    coordinate: Coordinate
    method: str
    place: Optional[str] = None

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude
