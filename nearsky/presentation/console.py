"""Plain-text console report."""

from typing import List, Optional

from nearsky.analytics import FleetSummary, summarize
from nearsky.models import AircraftSnapshot, Location
from nearsky.presentation.formatting import (
    NO_AIRCRAFT_MESSAGE,
    describe,
    format_altitude,
    format_distance,
    format_speed,
    format_timestamp,
)

# ANSI escape sequences
BOLD = '\033[1m'
CYAN = '\033[96m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RESET = '\033[0m'

_FIELDS = (
    ('Origin', 'origin'),
    ('Altitude', 'altitude'),
    ('Velocity', 'velocity'),
    ('Heading', 'heading'),
    ('Vertical rate', 'vertical_rate'),
    ('On ground', 'on_ground'),
    ('Phase', 'phase'),
    ('Distance', 'distance'),
)


def _paint(text: str, style: str, color: bool) -> str:
    return f'{style}{text}{RESET}' if color else text


def _summary_lines(summary: FleetSummary) -> List[str]:
    lines = [f'Airborne: {summary.airborne} of {summary.count}']
    if summary.altitude:
        lines.append(
            f'Altitude: mean {format_altitude(summary.altitude.mean)}, '
            f'range {format_altitude(summary.altitude.min_val)}-{format_altitude(summary.altitude.max_val)}'
        )
    if summary.speed:
        lines.append(
            f'Velocity: mean {format_speed(summary.speed.mean)}, '
            f'max {format_speed(summary.speed.max_val)}'
        )
    if summary.by_phase:
        phases = ', '.join(f'{phase} {count}' for phase, count in sorted(summary.by_phase.items()))
        lines.append(f'Phases: {phases}')
    if summary.nearest_km is not None:
        lines.append(f'Nearest: {format_distance(summary.nearest_km)}')
    return lines


def render(
    snapshot: AircraftSnapshot,
    location: Location,
    radius_km: Optional[float] = None,
    color: bool = False,
) -> str:
    """Render snapshot as a console report."""
    lines = [
        _paint('Nearby Aircraft Report', BOLD + CYAN, color),
        '=' * 40,
        f'Location: {location.coordinate} ({location.method})',
    ]
    if location.place:
        lines.append(f'Place: {location.place}')
    if radius_km is not None:
        lines.append(f'Search radius: {radius_km:.1f} km')
    lines.append(f'Data time: {format_timestamp(snapshot.time)}')
    lines.append(_paint(f'Aircraft count: {snapshot.count}', BOLD, color))
    lines.append('')

    if not snapshot.states:
        lines.append(_paint(NO_AIRCRAFT_MESSAGE, YELLOW, color))
        return '\n'.join(lines)

    for index, sv in enumerate(snapshot.states, start=1):
        info = describe(sv, location.coordinate)
        lines.append(_paint(f"[{index}] {info['callsign']} ({info['icao24']})", GREEN, color))
        for label, key in _FIELDS:
            lines.append(f'    {label + ":":<15}{info[key]}')
        lines.append('')

    lines.append(_paint('Summary', BOLD, color))
    lines.extend(f'    {line}' for line in _summary_lines(summarize(snapshot.states, location.coordinate)))
    return '\n'.join(lines)
