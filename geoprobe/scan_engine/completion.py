"""Completion counter used to wait for a group of pipeline threads"""

import threading
from typing import Optional


class CompletionCounter:
    """Counts down as participants finish; ``wait`` blocks until none remain"""
    
    def __init__(self, participants: int):
        if participants < 0:
            raise ValueError("participants cannot be negative")
        self._outstanding = participants
        self._condition = threading.Condition()
    
    @property
    def outstanding(self) -> int:
        with self._condition:
            return self._outstanding
    
    def done(self):
        """Record that one participant finished"""
        with self._condition:
            if self._outstanding == 0:
                raise RuntimeError("CompletionCounter.done() called more times than participants")
            self._outstanding -= 1
            if self._outstanding == 0:
                self._condition.notify_all()
    
    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every participant finished; False if the timeout expired first"""
        with self._condition:
            return self._condition.wait_for(lambda: self._outstanding == 0, timeout=timeout)
