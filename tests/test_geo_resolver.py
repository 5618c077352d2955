#!/usr/bin/env python3
"""
Geolocation Resolver Tests

The GeoIP2 reader is mocked; only the missing-database case touches the
filesystem.
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch, Mock

import geoip2.errors

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from geoprobe.scan_core.exceptions import GeoDatabaseError
from geoprobe.scan_core.geo import GeoResolver
from geoprobe.scan_core.models import Coordinate, Resolved, Skipped


def _city_response(latitude, longitude):
    response = Mock()
    response.location.latitude = latitude
    response.location.longitude = longitude
    return response


class TestGeoResolver(unittest.TestCase):
    """Test IP to coordinate resolution"""
    
    def setUp(self):
        patcher = patch('geoip2.database.Reader')
        self.mock_reader_class = patcher.start()
        self.addCleanup(patcher.stop)
        
        self.reader = self.mock_reader_class.return_value
        self.reader.metadata.return_value.database_type = "GeoLite2-City"
        self.resolver = GeoResolver("GeoLite2-City.mmdb")
        self.resolver.open()
    
    def test_reader_opened_once(self):
        self.resolver.open()
        self.mock_reader_class.assert_called_once_with("GeoLite2-City.mmdb")
    
    def test_resolved_coordinate(self):
        self.reader.city.return_value = _city_response(37.4, -122.1)
        
        outcome = self.resolver.resolve("8.8.8.8")
        
        self.assertIsInstance(outcome, Resolved)
        self.assertEqual(outcome.coordinate, Coordinate(37.4, -122.1))
        self.reader.city.assert_called_once_with("8.8.8.8")
    
    def test_address_not_found_is_skipped(self):
        self.reader.city.side_effect = geoip2.errors.AddressNotFoundError("The address 10.0.0.1 is not in the database.")
        
        outcome = self.resolver.resolve("10.0.0.1")
        
        self.assertIsInstance(outcome, Skipped)
        self.assertIn("10.0.0.1", outcome.reason)
    
    def test_invalid_ip_is_skipped(self):
        self.reader.city.side_effect = ValueError("'example.org' does not appear to be an IPv4 or IPv6 address")
        
        outcome = self.resolver.resolve("example.org")
        
        self.assertIsInstance(outcome, Skipped)
        self.assertIn("not a valid IP address", outcome.reason)
    
    def test_missing_coordinates_is_skipped(self):
        self.reader.city.return_value = _city_response(None, None)
        self.assertIsInstance(self.resolver.resolve("192.0.2.1"), Skipped)
    
    def test_close_releases_reader(self):
        with self.resolver:
            pass
        self.reader.close.assert_called()
        self.assertIsNone(self.resolver.reader)
    
    def test_resolve_requires_open_database(self):
        self.resolver.close()
        with self.assertRaises(GeoDatabaseError):
            self.resolver.resolve("8.8.8.8")
    
    def test_non_city_database_rejected(self):
        self.reader.metadata.return_value.database_type = "GeoLite2-Country"
        resolver = GeoResolver("GeoLite2-Country.mmdb")
        
        with self.assertRaises(GeoDatabaseError) as ctx:
            resolver.open()
        
        self.assertIn("City database is required", str(ctx.exception))
        self.assertIsNone(resolver.reader)


class TestGeoResolverDatabaseFile(unittest.TestCase):
    """Test opening real database paths"""
    
    def test_missing_database_is_fatal(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = os.path.join(temp_dir, "GeoLite2-City.mmdb")
            with self.assertRaises(GeoDatabaseError) as ctx:
                GeoResolver(db_path).open()
        self.assertEqual(ctx.exception.resource, db_path)
        self.assertEqual(ctx.exception.error_code, "GEO_DATABASE_ERROR")
    
    def test_corrupt_database_is_fatal(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = os.path.join(temp_dir, "GeoLite2-City.mmdb")
            with open(db_path, 'wb') as f:
                f.write(b"this is not a maxmind database")
            with self.assertRaises(GeoDatabaseError):
                GeoResolver(db_path).open()


if __name__ == '__main__':
    unittest.main()
