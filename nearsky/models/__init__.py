"""
Data models for nearsky.

Plain frozen dataclasses: observer location, parsed aircraft state
vectors and the snapshot that travels through cache and presenters.
"""

from nearsky.models.location import Coordinate, Location, MANUAL_INPUT
from nearsky.models.snapshot import AircraftSnapshot, StateVector

__all__ = [
    'Coordinate',
    'Location',
    'MANUAL_INPUT',
    'AircraftSnapshot',
    'StateVector',
]
