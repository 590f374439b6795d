import pytest

from nearsky.analytics import (
    FlightPhase,
    detect_flight_phase,
    distances_from,
    haversine_distance,
    summarize,
)
from nearsky.models import AircraftSnapshot, Coordinate, Location, StateVector
from nearsky.presentation import console, html


@pytest.fixture
def afr_snapshot(afr123_array):
    return AircraftSnapshot(states=(StateVector.from_array(afr123_array),), time=1714765200)


def test_console_report_for_single_aircraft(afr_snapshot, paris):
    report = console.render(afr_snapshot, paris, radius_km=11.1)

    assert 'AFR123' in report
    assert '[1] AFR123 (3c6444)' in report
    assert 'France' in report
    assert '10000m' in report
    assert '230m/s' in report
    assert '45°' in report
    assert '+2.1m/s' in report
    assert 'Aircraft count: 1' in report
    assert 'Manual Input' in report
    assert 'Search radius: 11.1 km' in report
    assert '2024-05-03 19:40:00 UTC' in report
    assert '\033[' not in report


def test_console_report_colors_on_request(afr_snapshot, paris):
    report = console.render(afr_snapshot, paris, color=True)

    assert '\033[' in report
    assert 'AFR123' in report


def test_console_report_without_aircraft(paris):
    report = console.render(AircraftSnapshot.empty(1714765200), paris)

    assert 'No aircraft detected' in report
    assert 'Aircraft count: 0' in report
    assert 'Summary' not in report


def test_console_report_shows_missing_values(paris):
    sv = StateVector(
        icao24='abc123', callsign=None, origin_country=None, baro_altitude=None,
        on_ground=True, velocity=None, true_track=None, vertical_rate=None,
    )
    report = console.render(AircraftSnapshot(states=(sv,), time=0), paris)

    assert '[1] N/A (abc123)' in report
    assert 'On ground:     Yes' in report


def test_html_report_for_single_aircraft(afr_snapshot, paris):
    page = html.render(afr_snapshot, paris, radius_km=11.1)

    assert page.startswith('<!DOCTYPE html>')
    assert '<td>AFR123</td>' in page
    assert '<td>France</td>' in page
    assert '<td>10000m</td>' in page
    assert '<td>230m/s</td>' in page
    assert 'Aircraft count: 1' in page


def test_html_report_without_aircraft(paris):
    page = html.render(AircraftSnapshot.empty(1714765200), paris)

    assert 'No aircraft detected' in page
    assert 'Aircraft count: 0' in page
    assert '<table>' not in page


def test_html_report_escapes_values():
    location = Location(Coordinate(1.0, 2.0), 'Test Geolocation', place='<script>alert(1)</script>')
    sv = StateVector(
        icao24='abc123', callsign='<b>X</b>', origin_country='A & B', baro_altitude=100.0,
        on_ground=False, velocity=50.0, true_track=10.0, vertical_rate=0.0,
    )

    page = html.render(AircraftSnapshot(states=(sv,), time=0), location)

    assert '<script>' not in page
    assert '&lt;b&gt;X&lt;/b&gt;' in page
    assert 'A &amp; B' in page


@pytest.mark.parametrize('on_ground,vertical_rate,altitude,expected', [
    (True, 10.0, 3000.0, FlightPhase.GROUND),
    (False, 0.2, 200.0, FlightPhase.GROUND),
    (False, 5.0, 2000.0, FlightPhase.CLIMB),
    (False, -5.0, 2000.0, FlightPhase.DESCENT),
    (False, 2.1, 10000.0, FlightPhase.CRUISE),
    (False, None, 10000.0, FlightPhase.UNKNOWN),
])
def test_detect_flight_phase(on_ground, vertical_rate, altitude, expected):
    assert detect_flight_phase(on_ground, vertical_rate, altitude) == expected


def test_haversine_paris_london():
    assert haversine_distance(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(343.5, abs=1.0)


def test_summarize_fleet():
    states = (
        StateVector('a', 'A1', 'X', 1000.0, False, 100.0, 0.0, 5.0, longitude=2.36, latitude=48.86),
        StateVector('b', 'B1', 'Y', 3000.0, False, 200.0, 0.0, 0.0, longitude=2.5, latitude=48.9),
        StateVector('c', None, None, None, True, 5.0, None, None),
    )

    summary = summarize(states, Coordinate(48.8566, 2.3522))

    assert summary.count == 3
    assert summary.airborne == 2
    assert summary.altitude.mean == pytest.approx(2000.0)
    assert summary.altitude.max_val == 3000.0
    assert summary.speed.min_val == 100.0
    assert summary.by_phase == {'climb': 1, 'cruise': 1, 'ground': 1}
    assert summary.nearest_km == pytest.approx(0.6, abs=0.2)


def test_summarize_empty():
    summary = summarize(())

    assert summary.count == 0
    assert summary.altitude is None


def test_distances_from_matches_scalar_haversine():
    observer = Coordinate(48.8566, 2.3522)
    states = (
        StateVector('a', None, None, None, False, None, None, None, longitude=-0.1278, latitude=51.5074),
        StateVector('b', None, None, None, False, None, None, None),
        StateVector('c', None, None, None, False, None, None, None, longitude=2.3522, latitude=48.8566),
    )

    distances = distances_from(observer, states)

    assert distances.shape == (2,)
    assert distances[0] == pytest.approx(haversine_distance(48.8566, 2.3522, 51.5074, -0.1278))
    assert distances[1] == pytest.approx(0.0)


def test_distances_from_without_positions_is_empty():
    sv = StateVector('a', None, None, None, False, None, None, None)
    assert distances_from(Coordinate(0.0, 0.0), (sv,)).size == 0
