__version__ = "1.0.0"

from .scan_core.models import Endpoint, Coordinate, PipelineState, ScanReport
from .scan_core.config import ScanSettings, ConfigManager
from .scan_core.exceptions import (
    GeoProbeError, StartupError, InputSourceError, OutputError, GeoDatabaseError
)
from .scan_core.parsing import parse_endpoint
from .scan_engine.coordinator import ScanPipeline

__all__ = [
    "Endpoint", "Coordinate", "PipelineState", "ScanReport",
    "ScanSettings", "ConfigManager",
    "GeoProbeError", "StartupError", "InputSourceError", "OutputError", "GeoDatabaseError",
    "parse_endpoint", "ScanPipeline"
]
