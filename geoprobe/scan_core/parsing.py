"""Endpoint list parsing - turns lines of ``address`` or ``address:port`` into endpoints"""

import logging
from pathlib import Path
from typing import Iterator, Union

from .exceptions import InputSourceError
from .models import Endpoint, DEFAULT_PORT

logger = logging.getLogger(__name__)


def parse_endpoint(line: str) -> Endpoint:
    """Split a line on ':' into address and port, defaulting the port to 80.
    
    Only the first two segments are used. The address is not validated: an
    unusable address simply fails to connect later.
    """
    segments = line.strip().split(':')
    if len(segments) > 1:
        return Endpoint(address=segments[0], port=segments[1])
    return Endpoint(address=segments[0], port=DEFAULT_PORT)


class EndpointSource:
    """Streams endpoints from a UTF-8 text file, one per non-blank line.
    
    Lines are decoded one at a time; a line that is not valid UTF-8 is logged
    and skipped without affecting the lines around it.
    """
    
    def __init__(self, input_path: Union[str, Path]):
        self.input_path = Path(input_path)
        self.file_handle = None
        self.lines_read = 0
        self.lines_skipped = 0
    
    def __enter__(self):
        self.open()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
    
    def open(self):
        """Open the endpoint list; a missing or unreadable file is fatal"""
        try:
            self.file_handle = open(self.input_path, 'rb')
        except OSError as e:
            raise InputSourceError(
                f"Cannot open endpoint list {self.input_path}: {e.strerror or e}",
                resource=str(self.input_path)
            ) from e
        logger.debug(f"Opened endpoint list {self.input_path}")
    
    def close(self):
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None
    
    def __iter__(self) -> Iterator[Endpoint]:
        if self.file_handle is None:
            raise InputSourceError("Endpoint list is not open", resource=str(self.input_path))
        
        for line_number, raw_line in enumerate(self.file_handle, start=1):
            try:
                line = raw_line.decode('utf-8')
            except UnicodeDecodeError as e:
                self.lines_skipped += 1
                logger.warning(f"Skipping line {line_number} of {self.input_path}: not valid UTF-8 ({e.reason})")
                continue
            if not line.strip():
                continue
            self.lines_read += 1
            yield parse_endpoint(line)

