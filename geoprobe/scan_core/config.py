"""Scan Core Configuration - Simple Configuration Management"""

import json
import logging
import os
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional, List

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# ===============================================================================
# CONFIGURATION DATA CLASS
# ===============================================================================

@dataclass
class ScanSettings:
    """Main configuration settings"""
    
    # Pipeline sizing
    worker_count: int = 100
    job_queue_size: int = 10
    result_queue_size: int = 100
    
    # Probing
    probe_timeout: float = 3.0
    
    # Files
    input_path: str = "ips"
    output_path: str = "coordinates"
    geo_db_path: str = "GeoLite2-City.mmdb"
    
    # Output formatting (None keeps the shortest exact float representation)
    coordinate_precision: Optional[int] = None
    
    # Logging settings
    log_level: str = "WARNING"
    log_file: Optional[str] = None


# ===============================================================================
# CONFIGURATION MANAGER
# ===============================================================================

class ConfigManager:
    """Loads settings from an optional YAML/JSON file and applies CLI overrides"""
    
    def __init__(self, config_path: Optional[str] = None, cli_overrides: Optional[Dict[str, Any]] = None):
        self.config_path = config_path
        self.config = ScanSettings()
        self.cli_overrides = cli_overrides or {}
        self._load_config()
    
    def _load_config(self):
        """Load configuration from file and apply CLI overrides"""
        if self.config_path:
            data = self._read_config_file(self.config_path)
            for key, value in data.items():
                if hasattr(self.config, key):
                    setattr(self.config, key, value)
                else:
                    logger.warning(f"Ignoring unknown configuration key '{key}' in {self.config_path}")
        
        # Apply CLI overrides (highest priority)
        self._apply_cli_overrides()
    
    def _read_config_file(self, config_path: str) -> Dict[str, Any]:
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}",
                                     config_file=config_path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.endswith('.json'):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config from {config_path}: {e}",
                                     config_file=config_path) from e
        
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping",
                                     config_file=config_path)
        return data
    
    def _apply_cli_overrides(self):
        """Apply CLI parameter overrides to configuration"""
        self.update(**{key: value for key, value in self.cli_overrides.items() if value is not None})
    
    def save_config(self, path: Optional[str] = None):
        """Save current configuration to file"""
        path = path or self.config_path
        if not path:
            raise ConfigurationError("No configuration path to save to")
        
        config_data = asdict(self.config)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                if path.endswith('.json'):
                    json.dump(config_data, f, indent=2)
                else:
                    f.write(self._generate_yaml_with_comments(config_data))
        except OSError as e:
            raise ConfigurationError(f"Failed to save config: {e}", config_file=path) from e
        
        logger.info(f"Configuration saved to: {path}")
    
    def _generate_yaml_with_comments(self, data: Dict) -> str:
        """Generate YAML with helpful comments"""
        precision = 'null' if data['coordinate_precision'] is None else data['coordinate_precision']
        log_file = 'null' if data['log_file'] is None else f'"{data["log_file"]}"'
        return f"""# GeoProbe Configuration File

# Pipeline Sizing
worker_count: {data['worker_count']}                  # Parallel probe workers
job_queue_size: {data['job_queue_size']}                 # Pending endpoints buffered for workers
result_queue_size: {data['result_queue_size']}             # Pending coordinates buffered for the writer

# Probing
probe_timeout: {data['probe_timeout']}                # TCP connect timeout (seconds)

# Files
input_path: "{data['input_path']}"                 # Endpoint list, one address[:port] per line
output_path: "{data['output_path']}"        # Coordinates output, truncated on every run
geo_db_path: "{data['geo_db_path']}"  # MaxMind City database

# Output Formatting
coordinate_precision: {precision}          # Fixed decimals, null for exact float output

# Logging Settings
log_level: "{data['log_level']}"               # DEBUG, INFO, WARNING, ERROR
log_file: {log_file}                     # Rotating log file, null to disable
"""
    
    def set(self, key: str, value: Any):
        """Set configuration value"""
        if not hasattr(self.config, key):
            raise ConfigurationError(f"Unknown configuration key: {key}", config_key=key)
        setattr(self.config, key, value)
    
    def update(self, **kwargs):
        """Update multiple configuration values"""
        for key, value in kwargs.items():
            self.set(key, value)
    
    def validate(self) -> List[str]:
        """Validate configuration settings"""
        errors = []
        
        # Validate pool and queue sizes
        for key in ('worker_count', 'job_queue_size', 'result_queue_size'):
            value = getattr(self.config, key)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(f"{key} must be a positive integer")
        
        # Validate timeout
        if not isinstance(self.config.probe_timeout, (int, float)) or self.config.probe_timeout <= 0:
            errors.append("probe_timeout must be positive")
        
        # Validate paths
        for key in ('input_path', 'output_path', 'geo_db_path'):
            if not getattr(self.config, key):
                errors.append(f"{key} must not be empty")
        
        precision = self.config.coordinate_precision
        if precision is not None and (not isinstance(precision, int) or precision < 0):
            errors.append("coordinate_precision must be a non-negative integer or null")
        
        # Validate log level
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(self.config.log_level).upper() not in valid_log_levels:
            errors.append(f"log_level must be one of: {valid_log_levels}")
        
        return errors
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return asdict(self.config)
    
    def __repr__(self) -> str:
        return f"ConfigManager(config_path='{self.config_path}')"


# ===============================================================================
# CONFIGURATION UTILITIES
# ===============================================================================

def get_config_template() -> Dict[str, Any]:
    """Get configuration template with all available options"""
    return asdict(ScanSettings())


def create_cli_overrides(input_path=None, output_path=None, geo_db_path=None, threads=None,
                         timeout=None, precision=None, job_queue_size=None,
                         result_queue_size=None, verbose=None, quiet=None, silent=None,
                         log_file=None) -> Dict[str, Any]:
    """Create CLI overrides dictionary from common parameters"""
    overrides = {
        'input_path': input_path,
        'output_path': output_path,
        'geo_db_path': geo_db_path,
        'worker_count': threads,
        'probe_timeout': timeout,
        'coordinate_precision': precision,
        'job_queue_size': job_queue_size,
        'result_queue_size': result_queue_size,
        'log_file': log_file,
    }
    
    if verbose:
        overrides['log_level'] = 'DEBUG'
    elif silent:
        overrides['log_level'] = 'ERROR'
    elif quiet:
        overrides['log_level'] = 'WARNING'
    
    return {key: value for key, value in overrides.items() if value is not None}
