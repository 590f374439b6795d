"""
Ingestion pipeline - orchestrates one lookup from location to snapshot.

Pipeline stages:
1. Area: Build the bounding box around the observer
2. Cache: Reuse the last snapshot if it has not expired
3. Fetch: Query OpenSky on a cache miss
4. Store: Persist the fresh snapshot for the next run
"""

import logging
from typing import Optional

from nearsky.cache import ResponseCache
from nearsky.ingestion.opensky_client import (
    BoundingBox,
    FetchError,
    OpenSkyClient,
    compute_bounding_box,
)
from nearsky.models import AircraftSnapshot, Location

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Runs a single cache-aware fetch for one location.

    A degraded empty result from a failed fetch is returned but not
    cached, so the next run asks the API again.
    """

    def __init__(
        self,
        client: Optional[OpenSkyClient] = None,
        cache: Optional[ResponseCache] = None,
        radius_km: float = 11.1,
    ):
        """
        Initialize the ingestion pipeline.

        Args:
            client: OpenSky API client (created from config if None)
            cache: Response cache (created from config if None)
            radius_km: Search radius in kilometers
        """
        self.client = client or OpenSkyClient.from_config()
        self.cache = cache or ResponseCache.from_config()
        self.radius_km = radius_km

    def bounding_box(self, location: Location) -> BoundingBox:
        return compute_bounding_box(location.coordinate, self.radius_km)

    def run(self, location: Location) -> AircraftSnapshot:
        """Return the snapshot for location, from cache or from OpenSky."""
        bbox = self.bounding_box(location)
        logger.debug(
            f'Search area lat [{bbox.lat_min:.4f}, {bbox.lat_max:.4f}] '
            f'lon [{bbox.lon_min:.4f}, {bbox.lon_max:.4f}]'
        )

        cached = self.cache.load()
        if cached is not None:
            return cached

        logger.info(f'Fetching aircraft within {self.radius_km:.1f} km...')
        try:
            snapshot = self.client.get_states(bbox)
        except FetchError as e:
            return self.client.fallback_snapshot(e)

        self.cache.store(snapshot)
        logger.info(f'Found {snapshot.count} aircraft')
        return snapshot
