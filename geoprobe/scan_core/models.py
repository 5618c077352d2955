"""Scan Core Models - Endpoints, coordinates and the queue payloads passed between pipeline stages"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, Union


DEFAULT_PORT = "80"


# ===============================================================================
# ENUMERATIONS
# ===============================================================================

class PipelineState(Enum):
    """Lifecycle states of a scan pipeline, in the only order they may occur"""
    IDLE = "idle"
    FILLING = "filling"            # Endpoints are being dispatched to workers
    DRAINING = "draining"          # Worker shutdown values sent, waiting for workers
    WORKERS_DONE = "workers_done"  # All workers exited, sink shutdown value sent
    SINK_DONE = "sink_done"        # Sink flushed and closed the output


# ===============================================================================
# DATA MODELS
# ===============================================================================

@dataclass(frozen=True)
class Endpoint:
    """A network address and port to probe"""
    address: str
    port: str = DEFAULT_PORT
    
    @property
    def target(self) -> str:
        return f"{self.address}:{self.port}"
    
    def __str__(self) -> str:
        return self.target


@dataclass(frozen=True)
class Coordinate:
    """Geographic coordinate resolved for an IP address"""
    latitude: float
    longitude: float
    
    def format(self, precision: Optional[int] = None) -> str:
        """Render as ``(lat, lon)``.
        
        Without a precision the shortest representation that round-trips
        back to the same float is used; with one, fixed-point notation.
        """
        if precision is None:
            return f"({float(self.latitude)!r}, {float(self.longitude)!r})"
        return f"({self.latitude:.{precision}f}, {self.longitude:.{precision}f})"
    

class _Shutdown:
    """Poison value telling a queue consumer that nothing more will arrive"""
    
    _instance = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __repr__(self) -> str:
        return "SHUTDOWN"


SHUTDOWN = _Shutdown()


@dataclass(frozen=True)
class WorkItem:
    """Job carrying one endpoint for a worker"""
    endpoint: Endpoint


@dataclass(frozen=True)
class CoordinateRecord:
    """Result carrying a resolved coordinate for the sink"""
    endpoint: Endpoint
    coordinate: Coordinate


Job = Union[WorkItem, _Shutdown]
ScanResult = Union[CoordinateRecord, _Shutdown]


@dataclass(frozen=True)
class Resolved:
    """Successful geolocation lookup"""
    coordinate: Coordinate


@dataclass(frozen=True)
class Skipped:
    """Geolocation lookup that produced no coordinate for this endpoint"""
    reason: str


ResolveOutcome = Union[Resolved, Skipped]


# ===============================================================================
# RUN STATISTICS
# ===============================================================================

class ScanStats:
    """Thread-safe counters shared by the coordinator, workers and sink"""
    
    FIELDS = (
        'endpoints_read',
        'endpoints_probed',
        'endpoints_alive',
        'endpoints_down',
        'coordinates_resolved',
        'resolution_skipped',
        'worker_errors',
        'results_written',
    )
    
    def __init__(self):
        self._lock = threading.Lock()
        self._counters = {name: 0 for name in self.FIELDS}
    
    def increment(self, name: str, amount: int = 1):
        if name not in self._counters:
            raise KeyError(f"Unknown scan counter: {name}")
        with self._lock:
            self._counters[name] += amount
    
    def get(self, name: str) -> int:
        with self._lock:
            return self._counters[name]
    
    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)


@dataclass
class ScanReport:
    """Summary of a finished scan run"""
    output_path: str
    worker_count: int
    final_state: PipelineState = PipelineState.IDLE
    cancelled: bool = False
    duration: float = 0.0
    stats: Dict[str, int] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    @property
    def results_written(self) -> int:
        return self.stats.get('results_written', 0)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary"""
        return {
            'output_path': self.output_path,
            'worker_count': self.worker_count,
            'final_state': self.final_state.value,
            'cancelled': self.cancelled,
            'duration': round(self.duration, 3),
            **self.stats,
            'timestamp': self.timestamp.isoformat()
        }
