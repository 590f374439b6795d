"""
External service integrations.

Provides IP geolocation lookups for the observer location.
"""

from nearsky.services.geolocation import (
    DEFAULT_PROVIDERS,
    GeoProvider,
    GeoResolver,
    ResolutionError,
)

__all__ = ['DEFAULT_PROVIDERS', 'GeoProvider', 'GeoResolver', 'ResolutionError']
