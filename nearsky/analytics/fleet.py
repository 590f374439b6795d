"""
Snapshot analytics using NumPy.

Derives per-aircraft display values (flight phase, distance from the
observer) and fleet-wide summary statistics for one snapshot. Distances
for a whole snapshot are computed in one vectorised pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Union

import numpy as np

from nearsky.models import Coordinate, StateVector

EARTH_RADIUS_KM = 6371.0

# Phase thresholds
GROUND_ALTITUDE_M = 500.0
LEVEL_RATE_MPS = 1.0
CLIMB_RATE_MPS = 2.5  # ~500 fpm

ArrayLike = Union[float, np.ndarray]


class FlightPhase(str, Enum):
    """
    Flight phase inferred from a single state vector.

    - GROUND: on_ground, or low and level
    - CLIMB: vertical rate above ~500 fpm
    - CRUISE: roughly level flight
    - DESCENT: vertical rate below ~-500 fpm
    - UNKNOWN: no vertical rate reported
    """
    GROUND = 'ground'
    CLIMB = 'climb'
    CRUISE = 'cruise'
    DESCENT = 'descent'
    UNKNOWN = 'unknown'


def haversine_km(lat1: ArrayLike, lon1: ArrayLike, lat2: ArrayLike, lon2: ArrayLike) -> np.ndarray:
    """Great-circle distance in km; broadcasts over NumPy arrays."""
    phi1, lam1, phi2, lam2 = (np.radians(np.asarray(v, dtype=float)) for v in (lat1, lon1, lat2, lon2))
    h = (
        np.sin((phi2 - phi1) / 2) ** 2
        + np.cos(phi1) * np.cos(phi2) * np.sin((lam2 - lam1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0)))


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return float(haversine_km(lat1, lon1, lat2, lon2))


def detect_flight_phase(
    on_ground: bool,
    vertical_rate: Optional[float],
    baro_altitude: Optional[float],
) -> FlightPhase:
    """Classify one report; low and level counts as taxiing."""
    low = baro_altitude is not None and baro_altitude < GROUND_ALTITUDE_M
    level = vertical_rate is None or abs(vertical_rate) < LEVEL_RATE_MPS
    if on_ground or (low and level):
        return FlightPhase.GROUND
    if vertical_rate is None:
        return FlightPhase.UNKNOWN
    if vertical_rate > CLIMB_RATE_MPS:
        return FlightPhase.CLIMB
    if vertical_rate < -CLIMB_RATE_MPS:
        return FlightPhase.DESCENT
    return FlightPhase.CRUISE


def phase_of(sv: StateVector) -> FlightPhase:
    return detect_flight_phase(sv.on_ground, sv.vertical_rate, sv.baro_altitude)


def distance_from(observer: Optional[Coordinate], sv: StateVector) -> Optional[float]:
    """Distance in km from the observer, or None without a position."""
    if observer is None or not sv.has_position():
        return None
    return haversine_distance(observer.latitude, observer.longitude, sv.latitude, sv.longitude)


def distances_from(observer: Coordinate, states: Sequence[StateVector]) -> np.ndarray:
    """Distances in km for every state that reports a position."""
    positioned = [sv for sv in states if sv.has_position()]
    if not positioned:
        return np.empty(0)
    lats = np.fromiter((sv.latitude for sv in positioned), dtype=float, count=len(positioned))
    lons = np.fromiter((sv.longitude for sv in positioned), dtype=float, count=len(positioned))
    return haversine_km(observer.latitude, observer.longitude, lats, lons)


@dataclass
class MetricStats:
    mean: float
    min_val: float
    max_val: float
    count: int


@dataclass
class FleetSummary:
    """Aggregate statistics for the aircraft in one snapshot."""
    count: int
    airborne: int
    altitude: Optional[MetricStats] = None
    speed: Optional[MetricStats] = None
    by_phase: Dict[str, int] = field(default_factory=dict)
    nearest_km: Optional[float] = None


def _stats(values: Iterable[Optional[float]]) -> Optional[MetricStats]:
    arr = np.array([v for v in values if v is not None], dtype=float)
    if arr.size == 0:
        return None
    return MetricStats(
        mean=float(arr.mean()),
        min_val=float(arr.min()),
        max_val=float(arr.max()),
        count=int(arr.size),
    )


def summarize(
    states: Sequence[StateVector],
    observer: Optional[Coordinate] = None,
) -> FleetSummary:
    """
    Compute aggregate statistics across all aircraft in a snapshot.

    Altitude and speed statistics cover airborne aircraft only.
    """
    if not states:
        return FleetSummary(count=0, airborne=0)

    airborne = [sv for sv in states if not sv.on_ground]

    phases, counts = np.unique([phase_of(sv).value for sv in states], return_counts=True)

    nearest = None
    if observer is not None:
        distances = distances_from(observer, states)
        if distances.size:
            nearest = float(distances.min())

    return FleetSummary(
        count=len(states),
        airborne=len(airborne),
        altitude=_stats(sv.baro_altitude for sv in airborne),
        speed=_stats(sv.velocity for sv in airborne),
        by_phase={str(p): int(c) for p, c in zip(phases, counts)},
        nearest_km=nearest,
    )
