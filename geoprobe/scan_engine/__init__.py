from .prober import TcpProber
from .completion import CompletionCounter
from .workers import ScanWorkerPool
from .sink import CoordinateFileSink
from .coordinator import ScanPipeline

__all__ = [
    "TcpProber",
    "CompletionCounter",
    "ScanWorkerPool",
    "CoordinateFileSink",
    "ScanPipeline"
]
