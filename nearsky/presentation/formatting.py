"""
Display helpers shared by the console and HTML reports.

Convert raw SI telemetry into short human-friendly strings.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from nearsky.analytics import distance_from, phase_of
from nearsky.models import Coordinate, StateVector

NOT_AVAILABLE = 'N/A'
NO_AIRCRAFT_MESSAGE = 'No aircraft detected in the search area.'


def format_altitude(meters: Optional[float]) -> str:
    if meters is None:
        return NOT_AVAILABLE
    return f'{meters:.0f}m'


def format_speed(mps: Optional[float]) -> str:
    if mps is None:
        return NOT_AVAILABLE
    return f'{mps:.0f}m/s'


def format_heading(degrees: Optional[float]) -> str:
    if degrees is None:
        return NOT_AVAILABLE
    return f'{degrees:.0f}°'


def format_vertical_rate(mps: Optional[float]) -> str:
    if mps is None:
        return NOT_AVAILABLE
    return f'{mps:+.1f}m/s'


def format_distance(km: Optional[float]) -> str:
    if km is None:
        return NOT_AVAILABLE
    return f'{km:.1f}km'


def format_timestamp(epoch_seconds: int) -> str:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')


def display_callsign(sv: StateVector) -> str:
    """Callsign for display, with fallback."""
    return sv.callsign or NOT_AVAILABLE


def describe(sv: StateVector, observer: Optional[Coordinate] = None) -> Dict[str, str]:
    """Display strings for one aircraft, in report order."""
    return {
        'callsign': display_callsign(sv),
        'icao24': sv.icao24,
        'origin': sv.origin_country or NOT_AVAILABLE,
        'altitude': format_altitude(sv.baro_altitude),
        'velocity': format_speed(sv.velocity),
        'heading': format_heading(sv.true_track),
        'vertical_rate': format_vertical_rate(sv.vertical_rate),
        'on_ground': 'Yes' if sv.on_ground else 'No',
        'phase': phase_of(sv).value,
        'distance': format_distance(distance_from(observer, sv)),
    }
