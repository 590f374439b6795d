"""
Analytics module for nearsky.

NumPy-based summary statistics and per-aircraft derived values.
"""

from nearsky.analytics.fleet import (
    FleetSummary,
    FlightPhase,
    detect_flight_phase,
    distance_from,
    distances_from,
    haversine_distance,
    haversine_km,
    phase_of,
    summarize,
)

__all__ = [
    'FleetSummary',
    'FlightPhase',
    'detect_flight_phase',
    'distance_from',
    'distances_from',
    'haversine_distance',
    'haversine_km',
    'phase_of',
    'summarize',
]
