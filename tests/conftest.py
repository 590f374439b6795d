import json

import pytest
import requests

from nearsky.models import Coordinate, Location, MANUAL_INPUT


def make_response(status_code=200, payload=None, body=None, url='https://example.test/'):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.reason = 'TEST'
    response.encoding = 'utf-8'
    if body is None:
        body = json.dumps(payload).encode('utf-8') if payload is not None else b''
    response._content = body
    return response


class FakeSession:
    """Scripted stand-in for requests.Session.get."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'timeout': timeout})
        if not self.outcomes:
            raise AssertionError(f'unexpected request to {url}')
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def paris():
    return Location(Coordinate(48.8566, 2.3522), MANUAL_INPUT)


@pytest.fixture
def afr123_array():
    return [
        '3c6444',  # icao24
        'AFR123  ',  # callsign with padding
        'France',
        None,  # time_position
        None,  # last_contact
        None,  # longitude
        None,  # latitude
        10000,  # baro_altitude meters
        False,  # on_ground
        230.5,  # velocity m/s
        45.0,  # true_track
        2.1,  # vertical_rate m/s
        None,  # sensors
        10200.0,  # geo_altitude
        '1000',  # squawk
        False,  # spi
        0,  # position_source
    ]
