"""
Data ingestion module for nearsky.

Handles the bounding box geometry, querying the OpenSky API and the
cache-aware pipeline around it.
"""

from nearsky.ingestion.opensky_client import (
    BoundingBox,
    FetchError,
    OpenSkyClient,
    PermanentFetchError,
    TransientFetchError,
    compute_bounding_box,
    degrees_to_km,
)
from nearsky.ingestion.pipeline import IngestionPipeline

__all__ = [
    'BoundingBox',
    'FetchError',
    'OpenSkyClient',
    'PermanentFetchError',
    'TransientFetchError',
    'compute_bounding_box',
    'degrees_to_km',
    'IngestionPipeline',
]
