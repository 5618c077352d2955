from .models import (
    Endpoint, Coordinate, WorkItem, CoordinateRecord, SHUTDOWN,
    Resolved, Skipped, PipelineState, ScanStats, ScanReport
)
from .exceptions import (
    GeoProbeError, ConfigurationError, StartupError, InputSourceError,
    OutputError, GeoDatabaseError, PipelineStateError
)
from .config import ScanSettings, ConfigManager
from .parsing import parse_endpoint, EndpointSource

__all__ = [
    "Endpoint", "Coordinate", "WorkItem", "CoordinateRecord", "SHUTDOWN",
    "Resolved", "Skipped", "PipelineState", "ScanStats", "ScanReport",
    "GeoProbeError", "ConfigurationError", "StartupError", "InputSourceError",
    "OutputError", "GeoDatabaseError", "PipelineStateError",
    "ScanSettings", "ConfigManager",
    "parse_endpoint", "EndpointSource"
]
