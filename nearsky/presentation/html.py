"""
Standalone HTML report.

Produces a single self-contained page (inline CSS, no scripts) that can
be written to disk and opened in a browser. All dynamic values are
escaped before substitution.
"""

from html import escape
from string import Template
from typing import Optional

from nearsky.analytics import summarize
from nearsky.models import AircraftSnapshot, Location
from nearsky.presentation.formatting import (
    NO_AIRCRAFT_MESSAGE,
    describe,
    format_altitude,
    format_distance,
    format_speed,
    format_timestamp,
)

_COLUMNS = (
    ('Callsign', 'callsign'),
    ('ICAO24', 'icao24'),
    ('Origin', 'origin'),
    ('Altitude', 'altitude'),
    ('Velocity', 'velocity'),
    ('Heading', 'heading'),
    ('Vertical rate', 'vertical_rate'),
    ('On ground', 'on_ground'),
    ('Phase', 'phase'),
    ('Distance', 'distance'),
)

_PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Nearby Aircraft</title>
<style>
  body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
         background: #0f172a; color: #e2e8f0; margin: 2rem; }
  h1 { color: #38bdf8; margin-bottom: 0.25rem; }
  .meta { color: #94a3b8; margin: 0.1rem 0; }
  .count { font-size: 1.2rem; font-weight: bold; margin: 1rem 0; }
  .empty { color: #fbbf24; font-style: italic; }
  table { border-collapse: collapse; width: 100%; margin-top: 1rem; }
  th, td { padding: 0.45rem 0.75rem; text-align: left; border-bottom: 1px solid #1e293b; }
  th { background: #1e293b; color: #38bdf8; }
  tr:hover td { background: #1e293b; }
  .summary { margin-top: 1.5rem; color: #cbd5e1; }
</style>
</head>
<body>
<h1>Nearby Aircraft</h1>
$meta
<p class="count">Aircraft count: $count</p>
$body
</body>
</html>
""")


def _meta(location: Location, snapshot: AircraftSnapshot, radius_km: Optional[float]) -> str:
    items = [f'Location: {location.coordinate} ({location.method})']
    if location.place:
        items.append(f'Place: {location.place}')
    if radius_km is not None:
        items.append(f'Search radius: {radius_km:.1f} km')
    items.append(f'Data time: {format_timestamp(snapshot.time)}')
    return '\n'.join(f'<p class="meta">{escape(item)}</p>' for item in items)


def _table(snapshot: AircraftSnapshot, location: Location) -> str:
    header = ''.join(f'<th>{escape(title)}</th>' for title, _ in _COLUMNS)
    rows = []
    for sv in snapshot.states:
        info = describe(sv, location.coordinate)
        cells = ''.join(f'<td>{escape(info[key])}</td>' for _, key in _COLUMNS)
        rows.append(f'<tr>{cells}</tr>')
    return f'<table>\n<tr>{header}</tr>\n' + '\n'.join(rows) + '\n</table>'


def _summary(snapshot: AircraftSnapshot, location: Location) -> str:
    summary = summarize(snapshot.states, location.coordinate)
    items = [f'Airborne: {summary.airborne} of {summary.count}']
    if summary.altitude:
        items.append(f'Mean altitude: {format_altitude(summary.altitude.mean)}')
    if summary.speed:
        items.append(f'Mean velocity: {format_speed(summary.speed.mean)}')
    if summary.nearest_km is not None:
        items.append(f'Nearest aircraft: {format_distance(summary.nearest_km)}')
    return '<div class="summary">' + ' &middot; '.join(escape(item) for item in items) + '</div>'


def render(
    snapshot: AircraftSnapshot,
    location: Location,
    radius_km: Optional[float] = None,
) -> str:
    """Render snapshot as a complete HTML document."""
    if snapshot.states:
        body = _table(snapshot, location) + '\n' + _summary(snapshot, location)
    else:
        body = f'<p class="empty">{escape(NO_AIRCRAFT_MESSAGE)}</p>'

    return _PAGE.substitute(
        meta=_meta(location, snapshot, radius_km),
        count=snapshot.count,
        body=body,
    )
