"""
nearsky - aircraft flying near you, from the command line.

Modules:
    models/        Location and aircraft snapshot dataclasses
    services/      IP geolocation lookups for the observer location
    ingestion/     Bounding box geometry, OpenSky client and fetch pipeline
    analytics/     NumPy-based fleet summary and flight phase detection
    presentation/  Console and HTML report rendering
    cache.py       Single-slot expiring response cache on disk
    config.py      Centralized configuration from environment variables
    app.py         Command-line entry point
"""

__version__ = '1.0.0'
