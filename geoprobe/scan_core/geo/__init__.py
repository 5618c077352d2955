"""Geolocation Package

Offline IP to coordinate resolution backed by a GeoIP2 City database.
"""

from .geo_resolver import GeoResolver

__all__ = [
    'GeoResolver'
]
