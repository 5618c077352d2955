"""
Scan Worker Pool

Fixed pool of identical threads. Each worker pulls endpoints from the shared
job queue, probes them, resolves the coordinates of live ones and pushes the
records to the result queue. A worker stops only when it takes the SHUTDOWN
value off the job queue.
"""

import logging
import queue
import threading
from typing import List

from ..scan_core.models import (
    SHUTDOWN, WorkItem, CoordinateRecord, Resolved, ScanStats
)
from .completion import CompletionCounter

logger = logging.getLogger(__name__)


class ScanWorkerPool:
    """Runs ``worker_count`` probe/resolve workers over a job queue"""
    
    def __init__(self, worker_count: int, job_queue: queue.Queue, result_queue: queue.Queue,
                 prober, resolver, completion: CompletionCounter, stats: ScanStats):
        if worker_count <= 0:
            raise ValueError("worker_count must be positive")
        self.worker_count = worker_count
        self.job_queue = job_queue
        self.result_queue = result_queue
        self.prober = prober
        self.resolver = resolver
        self.completion = completion
        self.stats = stats
        self.threads: List[threading.Thread] = []
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
    
    def start(self):
        """Launch every worker thread"""
        if self.threads:
            raise RuntimeError("Worker pool already started")
        
        for worker_id in range(self.worker_count):
            thread = threading.Thread(
                target=self._worker_loop,
                args=(worker_id,),
                name=f"scan-worker-{worker_id}",
                daemon=True
            )
            self.threads.append(thread)
            thread.start()
        
        self.logger.debug(f"Started {self.worker_count} scan workers")
    
    def join(self, timeout: float = None):
        for thread in self.threads:
            thread.join(timeout)
    
    def _worker_loop(self, worker_id: int):
        try:
            while True:
                job = self.job_queue.get()
                if job is SHUTDOWN:
                    break
                
                try:
                    self._process(job)
                except Exception:
                    self.stats.increment('worker_errors')
                    self.logger.exception(f"Worker {worker_id} failed processing {job}")
        finally:
            self.completion.done()
            self.logger.debug(f"Worker {worker_id} finished")
    
    def _process(self, job: WorkItem):
        endpoint = job.endpoint
        self.stats.increment('endpoints_probed')
        
        if not self.prober.probe(endpoint.address, endpoint.port):
            self.stats.increment('endpoints_down')
            return
        self.stats.increment('endpoints_alive')
        
        outcome = self.resolver.resolve(endpoint.address)
        if not isinstance(outcome, Resolved):
            self.stats.increment('resolution_skipped')
            self.logger.warning(f"Skipping {endpoint}: {outcome.reason}")
            return
        
        self.stats.increment('coordinates_resolved')
        # Blocks while the result queue is full
        self.result_queue.put(CoordinateRecord(endpoint=endpoint, coordinate=outcome.coordinate))
