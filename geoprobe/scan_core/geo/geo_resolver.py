"""Geolocation Resolver

Maps IP addresses to coordinates using a local MaxMind GeoIP2/GeoLite2 City
database. The reader is opened once per scan and shared by every worker;
maxminddb readers are safe for concurrent lookups.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import geoip2.database
import geoip2.errors
from maxminddb import InvalidDatabaseError

from ..exceptions import GeoDatabaseError
from ..models import Coordinate, Resolved, Skipped, ResolveOutcome

logger = logging.getLogger(__name__)


class GeoResolver:
    """Resolves IP addresses to coordinates from an offline City database"""
    
    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.reader: Optional[geoip2.database.Reader] = None
    
    def __enter__(self):
        self.open()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
    
    def open(self):
        """Open the database; failure here aborts the whole scan"""
        if self.reader is not None:
            return
        
        try:
            reader = geoip2.database.Reader(str(self.db_path))
        except (OSError, ValueError, InvalidDatabaseError) as e:
            raise GeoDatabaseError(
                f"Cannot open geolocation database {self.db_path}: {e}",
                resource=str(self.db_path)
            ) from e
        
        database_type = reader.metadata().database_type
        if 'City' not in database_type:
            reader.close()
            raise GeoDatabaseError(
                f"Geolocation database {self.db_path} is a {database_type} database, "
                f"a City database is required for coordinates",
                resource=str(self.db_path)
            )
        
        self.reader = reader
        logger.info(f"GeoIP2 database loaded from: {self.db_path} ({database_type})")
    
    def close(self):
        if self.reader is not None:
            self.reader.close()
            self.reader = None
    
    def resolve(self, ip: str) -> ResolveOutcome:
        """Look up the coordinate of a single IP address"""
        if self.reader is None:
            raise GeoDatabaseError("Geolocation database is not open", resource=str(self.db_path))
        
        try:
            response = self.reader.city(ip)
        except geoip2.errors.AddressNotFoundError:
            return Skipped(f"{ip} not found in geolocation database")
        except ValueError:
            return Skipped(f"{ip} is not a valid IP address")
        
        latitude = response.location.latitude
        longitude = response.location.longitude
        if latitude is None or longitude is None:
            return Skipped(f"{ip} has no coordinates in geolocation database")
        
        return Resolved(Coordinate(latitude=float(latitude), longitude=float(longitude)))
