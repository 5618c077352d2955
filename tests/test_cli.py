#!/usr/bin/env python3
"""
CLI Integration Tests

Invokes the click command with the prober and resolver replaced by fakes.
"""

import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner

# Add project root and test helpers to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from geoprobe import __version__
from geoprobe.scan_cli.cli import main_cli, EXIT_FAILURE

from scan_fakes import FakeProber, FakeResolver


class TestMainCli(unittest.TestCase):
    """Test the geoprobe command end to end"""
    
    def setUp(self):
        self.runner = CliRunner()
        self.prober = FakeProber({"8.8.8.8:80"})
        self.resolver = FakeResolver({"8.8.8.8": (37.4, -122.1)})
        
        prober_patch = patch('geoprobe.scan_engine.coordinator.TcpProber',
                             side_effect=lambda timeout: self.prober)
        resolver_patch = patch('geoprobe.scan_engine.coordinator.GeoResolver',
                               side_effect=lambda path: self.resolver)
        self.mock_prober_class = prober_patch.start()
        self.mock_resolver_class = resolver_patch.start()
        self.addCleanup(prober_patch.stop)
        self.addCleanup(resolver_patch.stop)
    
    def tearDown(self):
        # Handlers point at the runner's captured streams
        base_logger = logging.getLogger('geoprobe')
        for handler in list(base_logger.handlers):
            base_logger.removeHandler(handler)
    
    def test_scan_writes_coordinates(self):
        with self.runner.isolated_filesystem():
            Path("ips").write_text("10.0.0.1:22\n8.8.8.8\n", encoding='utf-8')
            
            result = self.runner.invoke(main_cli, ['-T', '0.1', '-t', '4'])
            
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(Path("coordinates").read_text(encoding='utf-8'), "(37.4, -122.1)\n")
            self.assertIn("1 coordinates written", result.output)
        
        self.mock_prober_class.assert_called_once_with(timeout=0.1)
        self.mock_resolver_class.assert_called_once_with("GeoLite2-City.mmdb")
        self.assertTrue(self.resolver.closed)
    
    def test_custom_paths(self):
        with self.runner.isolated_filesystem():
            Path("targets.txt").write_text("8.8.8.8\n", encoding='utf-8')
            
            result = self.runner.invoke(main_cli, ['-f', 'targets.txt', '-o', 'out.txt',
                                                   '-g', 'City.mmdb', '-q'])
            
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(Path("out.txt").read_text(encoding='utf-8'), "(37.4, -122.1)\n")
            self.assertFalse(Path("coordinates").exists())
        
        self.mock_resolver_class.assert_called_once_with("City.mmdb")
    
    def test_empty_input_exits_zero(self):
        with self.runner.isolated_filesystem():
            Path("ips").write_text("", encoding='utf-8')
            
            result = self.runner.invoke(main_cli, [])
            
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(Path("coordinates").read_text(encoding='utf-8'), "")
    
    def test_missing_input_exits_non_zero(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(main_cli, ['-f', 'missing_ips'])
            
            self.assertEqual(result.exit_code, EXIT_FAILURE)
            self.assertIn("Cannot open endpoint list", result.output)
            self.assertFalse(Path("coordinates").exists())
    
    def test_invalid_settings_rejected(self):
        with self.runner.isolated_filesystem():
            Path("ips").write_text("8.8.8.8\n", encoding='utf-8')
            
            result = self.runner.invoke(main_cli, ['-t', '0'])
            
            self.assertEqual(result.exit_code, EXIT_FAILURE)
            self.assertIn("worker_count must be a positive integer", result.output)
            self.assertFalse(Path("coordinates").exists())
    
    def test_config_file_and_overrides(self):
        with self.runner.isolated_filesystem():
            Path("ips").write_text("8.8.8.8\n", encoding='utf-8')
            Path("scan.yaml").write_text("output_path: from_config\ncoordinate_precision: 1\n",
                                         encoding='utf-8')
            
            result = self.runner.invoke(main_cli, ['-c', 'scan.yaml', '-p', '3'])
            
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(Path("from_config").read_text(encoding='utf-8'), "(37.400, -122.100)\n")
    
    def test_missing_config_file(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(main_cli, ['-c', 'absent.yaml'])
            self.assertEqual(result.exit_code, EXIT_FAILURE)
            self.assertIn("Configuration file not found", result.output)

    def test_config_error_logged_through_package_handlers(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(main_cli, ['-c', 'absent.yaml'])

        self.assertEqual(result.exit_code, EXIT_FAILURE)
        self.assertTrue(logging.getLogger('geoprobe').handlers)
        self.assertIn(" - ERROR - Configuration file not found", result.output)

    def test_undecodable_input_line_skipped(self):
        with self.runner.isolated_filesystem():
            Path("ips").write_bytes(b"8.8.8.8\n\xff\xfe:80\n")

            result = self.runner.invoke(main_cli, ['-q'])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIsNone(result.exception)
            self.assertEqual(Path("coordinates").read_text(encoding='utf-8'), "(37.4, -122.1)\n")
            self.assertIn("not valid UTF-8", result.output)

    def test_write_config_template(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(main_cli, ['--write-config', 'geoprobe.yaml', '-t', '64'])
            
            self.assertEqual(result.exit_code, 0, result.output)
            data = yaml.safe_load(Path("geoprobe.yaml").read_text(encoding='utf-8'))
            self.assertEqual(data['worker_count'], 64)
            self.assertFalse(Path("coordinates").exists())
        
        self.mock_prober_class.assert_not_called()
    
    def test_silent_mode_prints_nothing_on_success(self):
        with self.runner.isolated_filesystem():
            Path("ips").write_text("8.8.8.8\n", encoding='utf-8')
            
            result = self.runner.invoke(main_cli, ['-N'])
            
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(result.output.strip(), "")
    
    def test_version(self):
        result = self.runner.invoke(main_cli, ['--version'])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)


if __name__ == '__main__':
    unittest.main()
