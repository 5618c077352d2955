"""
Scan Pipeline Coordinator

Owns the job and result queues, the worker pool and the sink, and drives the
shutdown handshake:

    FILLING       stream endpoints into the job queue
    DRAINING      one SHUTDOWN job per worker, wait for every worker
    WORKERS_DONE  one SHUTDOWN result for the sink, wait for the sink
    SINK_DONE     output flushed and closed

The sink's SHUTDOWN is only sent once every worker has exited, so no worker
can push a result after the sink stopped reading.
"""

import contextlib
import logging
import queue
import threading
import time
from typing import Optional

from ..scan_core.config import ScanSettings
from ..scan_core.exceptions import OutputError, PipelineStateError
from ..scan_core.geo import GeoResolver
from ..scan_core.logging_setup import log_structured
from ..scan_core.models import (
    SHUTDOWN, WorkItem, PipelineState, ScanStats, ScanReport
)
from ..scan_core.parsing import EndpointSource
from .completion import CompletionCounter
from .prober import TcpProber
from .sink import CoordinateFileSink
from .workers import ScanWorkerPool


# Each state may only be entered from the one before it
_TRANSITIONS = {
    PipelineState.FILLING: PipelineState.IDLE,
    PipelineState.DRAINING: PipelineState.FILLING,
    PipelineState.WORKERS_DONE: PipelineState.DRAINING,
    PipelineState.SINK_DONE: PipelineState.WORKERS_DONE,
}


class ScanPipeline:
    """Runs one scan: endpoint file in, coordinates file out"""

    def __init__(self, settings: Optional[ScanSettings] = None, prober=None, resolver=None):
        self.settings = settings or ScanSettings()
        self.prober = prober or TcpProber(timeout=self.settings.probe_timeout)
        self._resolver = resolver
        self.stats = ScanStats()
        self.state = PipelineState.IDLE
        self._cancel_event = threading.Event()
        self._state_lock = threading.Lock()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    def cancel(self):
        """Stop dispatching new endpoints; in-flight work still drains normally"""
        if not self._cancel_event.is_set():
            self.logger.warning("Scan cancellation requested, draining in-flight work")
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self) -> ScanReport:
        """Execute the scan and block until all output is flushed.

        Startup failures (input, database, output) raise before any worker
        starts, in that order, so the output file is left untouched when the
        input or the database is missing.
        """
        if self.state is not PipelineState.IDLE:
            raise PipelineStateError("A scan pipeline can only be run once",
                                     current_state=self.state.value)

        settings = self.settings
        start_time = time.time()

        with EndpointSource(settings.input_path) as source, \
                self._open_resolver() as resolver, \
                CoordinateFileSink(settings.output_path, settings.coordinate_precision,
                                   self.stats) as sink:

            log_structured(self.logger, 'INFO', "Starting scan",
                           input=settings.input_path, output=settings.output_path,
                           workers=settings.worker_count, timeout=settings.probe_timeout)

            job_queue = queue.Queue(maxsize=settings.job_queue_size)
            result_queue = queue.Queue(maxsize=settings.result_queue_size)
            workers_done = CompletionCounter(settings.worker_count)
            sink_done = CompletionCounter(1)

            sink_thread = threading.Thread(
                target=sink.run, args=(result_queue, sink_done),
                name="scan-sink", daemon=True
            )
            pool = ScanWorkerPool(
                settings.worker_count, job_queue, result_queue,
                self.prober, resolver, workers_done, self.stats
            )

            sink_thread.start()
            pool.start()

            try:
                self._advance(PipelineState.FILLING)
                self._fill(source, job_queue)
            finally:
                # Shutdown always runs so no worker or the sink is abandoned
                self._advance(PipelineState.DRAINING)
                for _ in range(settings.worker_count):
                    job_queue.put(SHUTDOWN)
                workers_done.wait()
                pool.join()

                self._advance(PipelineState.WORKERS_DONE)
                result_queue.put(SHUTDOWN)
                sink_done.wait()
                sink_thread.join()

                self._advance(PipelineState.SINK_DONE)

        if sink.write_error is not None:
            raise OutputError(
                f"Writing coordinates to {settings.output_path} failed: {sink.write_error}",
                resource=str(settings.output_path)
            )

        report = ScanReport(
            output_path=str(settings.output_path),
            worker_count=settings.worker_count,
            final_state=self.state,
            cancelled=self.cancelled,
            duration=time.time() - start_time,
            stats=self.stats.snapshot()
        )
        log_structured(self.logger, 'INFO', "Scan completed", **report.to_dict())
        return report

    # ---------------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------------

    def _open_resolver(self):
        if self._resolver is not None:
            return contextlib.nullcontext(self._resolver)
        return GeoResolver(self.settings.geo_db_path)

    def _fill(self, source: EndpointSource, job_queue: queue.Queue):
        for endpoint in source:
            if self._cancel_event.is_set():
                self.logger.info(f"Dispatch stopped after {self.stats.get('endpoints_read')} endpoints")
                break
            # Blocks while the job queue is full
            job_queue.put(WorkItem(endpoint))
            self.stats.increment('endpoints_read')

    def _advance(self, new_state: PipelineState):
        with self._state_lock:
            required = _TRANSITIONS.get(new_state)
            if required is None or self.state is not required:
                raise PipelineStateError(
                    f"Illegal pipeline transition {self.state.value} -> {new_state.value}",
                    current_state=self.state.value,
                    requested_state=new_state.value
                )
            self.logger.debug(f"Pipeline state {self.state.value} -> {new_state.value}")
            self.state = new_state
