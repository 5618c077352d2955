"""Result sink - the single writer of the coordinates output file"""

import logging
import queue
from pathlib import Path
from typing import Optional, Union

from ..scan_core.exceptions import OutputError
from ..scan_core.models import SHUTDOWN, CoordinateRecord, ScanStats
from .completion import CompletionCounter

logger = logging.getLogger(__name__)


class CoordinateFileSink:
    """Drains the result queue into a text file, one ``(lat, lon)`` line per result.
    
    Only one sink consumes a result queue, so writes need no lock. Every line
    is flushed as soon as it is written so a crash mid-scan keeps the
    progress made so far.
    """
    
    def __init__(self, output_path: Union[str, Path], precision: Optional[int] = None,
                 stats: Optional[ScanStats] = None):
        self.output_path = Path(output_path)
        self.precision = precision
        self.stats = stats or ScanStats()
        self.file_handle = None
        self.written_count = 0
        self.write_error: Optional[OSError] = None
    
    def __enter__(self):
        self.open()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
    
    @property
    def is_open(self) -> bool:
        return self.file_handle is not None
    
    def open(self):
        """Create or truncate the output file"""
        try:
            self.file_handle = open(self.output_path, 'w', encoding='utf-8')
        except OSError as e:
            raise OutputError(
                f"Cannot create output file {self.output_path}: {e.strerror or e}",
                resource=str(self.output_path)
            ) from e
        logger.debug(f"Output file opened: {self.output_path}")
    
    def close(self):
        """Flush and close the output file"""
        if self.file_handle:
            try:
                self.file_handle.flush()
            finally:
                self.file_handle.close()
                self.file_handle = None
            logger.info(f"Output file closed: {self.output_path} ({self.written_count} coordinates)")
    
    def write(self, record: CoordinateRecord):
        self.file_handle.write(record.coordinate.format(self.precision) + "\n")
        self.file_handle.flush()
        self.written_count += 1
        self.stats.increment('results_written')
    
    def run(self, result_queue: queue.Queue, completion: CompletionCounter):
        """Consume results until SHUTDOWN, then close the file and report completion"""
        if not self.is_open:
            raise OutputError("Output file is not open", resource=str(self.output_path))
        
        try:
            while True:
                result = result_queue.get()
                if result is SHUTDOWN:
                    break
                if self.write_error is not None:
                    # Keep draining so workers never block on a full queue
                    continue
                try:
                    self.write(result)
                except OSError as e:
                    self.write_error = e
                    logger.error(f"Writing to {self.output_path} failed, discarding further results: {e}")
        finally:
            try:
                self.close()
            except OSError as e:
                self.write_error = self.write_error or e
                logger.error(f"Closing {self.output_path} failed: {e}")
            finally:
                completion.done()
