import math

import pytest

from nearsky.ingestion import BoundingBox, compute_bounding_box, degrees_to_km
from nearsky.models import Coordinate


@pytest.mark.parametrize('lat,lon,radius_km', [
    (48.8566, 2.3522, 11.1),
    (0.0, 0.0, 50.0),
    (-33.9, 151.2, 200.0),
    (64.1, -21.9, 5.0),
])
def test_box_contains_center_and_is_symmetric(lat, lon, radius_km):
    bbox = compute_bounding_box(Coordinate(lat, lon), radius_km)

    assert bbox.lat_min < lat < bbox.lat_max
    assert bbox.lon_min < lon < bbox.lon_max
    assert bbox.lat_max - lat == pytest.approx(lat - bbox.lat_min)
    assert bbox.lon_max - lon == pytest.approx(lon - bbox.lon_min)


def test_latitude_span_matches_angular_distance():
    bbox = compute_bounding_box(Coordinate(10.0, 20.0), 6371.0 * math.radians(1.0))

    assert bbox.lat_max == pytest.approx(11.0)
    assert bbox.lat_min == pytest.approx(9.0)


def test_longitude_span_widens_with_latitude():
    equator = compute_bounding_box(Coordinate(0.0, 0.0), 100.0)
    north = compute_bounding_box(Coordinate(60.0, 0.0), 100.0)

    assert (north.lon_max - north.lon_min) > (equator.lon_max - equator.lon_min)


def test_is_pure():
    center = Coordinate(48.8566, 2.3522)
    assert compute_bounding_box(center, 11.1) == compute_bounding_box(center, 11.1)


def test_longitude_is_not_wrapped_near_antimeridian():
    bbox = compute_bounding_box(Coordinate(0.0, 179.95), 50.0)
    assert bbox.lon_max > 180.0


def test_pole_covers_all_longitudes():
    bbox = compute_bounding_box(Coordinate(90.0, 10.0), 10.0)

    assert bbox.lat_max == 90.0
    assert bbox.lat_min < 90.0
    assert (bbox.lon_min, bbox.lon_max) == (-180.0, 180.0)
    assert not any(math.isnan(v) for v in (bbox.lat_min, bbox.lat_max, bbox.lon_min, bbox.lon_max))


def test_circle_reaching_pole_covers_all_longitudes():
    bbox = compute_bounding_box(Coordinate(-89.95, 0.0), 20.0)

    assert bbox.lat_min == -90.0
    assert (bbox.lon_min, bbox.lon_max) == (-180.0, 180.0)


@pytest.mark.parametrize('radius_km', [0.0, -1.0])
def test_non_positive_radius_rejected(radius_km):
    with pytest.raises(ValueError):
        compute_bounding_box(Coordinate(0.0, 0.0), radius_km)


def test_to_params_uses_opensky_names():
    bbox = BoundingBox(lat_min=1.0, lat_max=2.0, lon_min=3.0, lon_max=4.0)
    assert bbox.to_params() == {'lamin': 1.0, 'lamax': 2.0, 'lomin': 3.0, 'lomax': 4.0}


def test_from_center_radius_matches_function():
    center = Coordinate(51.5, -0.1)
    assert BoundingBox.from_center_radius(center, 25.0) == compute_bounding_box(center, 25.0)


def test_degrees_to_km_uses_flat_factor():
    assert degrees_to_km(0.1) == pytest.approx(11.1)
