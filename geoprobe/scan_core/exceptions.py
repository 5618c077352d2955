"""
GeoProbe Custom Exceptions
Standardized exception hierarchy for startup and pipeline errors
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class GeoProbeError(Exception):
    """Base exception for all GeoProbe errors"""
    
    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/reporting"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context,
            'timestamp': self.timestamp.isoformat()
        }


class ConfigurationError(GeoProbeError):
    """Configuration-related errors"""
    
    def __init__(self, message: str, config_file: Optional[str] = None,
                 config_key: Optional[str] = None):
        context = {}
        if config_file:
            context['config_file'] = config_file
        if config_key:
            context['config_key'] = config_key
        super().__init__(message, "CONFIG_ERROR", context)


class StartupError(GeoProbeError):
    """A resource required before any worker starts is unavailable"""
    
    error_code = "STARTUP_ERROR"
    
    def __init__(self, message: str, resource: Optional[str] = None):
        context = {'resource': resource} if resource else {}
        super().__init__(message, self.error_code, context)
        self.resource = resource


class InputSourceError(StartupError):
    """Endpoint list is missing or unreadable"""
    error_code = "INPUT_ERROR"


class OutputError(StartupError):
    """Output destination cannot be created"""
    error_code = "OUTPUT_ERROR"


class GeoDatabaseError(StartupError):
    """Geolocation database cannot be opened"""
    error_code = "GEO_DATABASE_ERROR"


class PipelineStateError(GeoProbeError):
    """Pipeline coordinator was driven through an illegal transition"""
    
    def __init__(self, message: str, current_state: Optional[str] = None,
                 requested_state: Optional[str] = None):
        context = {}
        if current_state:
            context['current_state'] = current_state
        if requested_state:
            context['requested_state'] = requested_state
        super().__init__(message, "PIPELINE_STATE_ERROR", context)
