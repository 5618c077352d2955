"""TCP liveness probing - a single bounded-timeout connect per endpoint"""

import logging
import socket
import time

from ..scan_core.models import Endpoint

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 3.0


class TcpProber:
    """Checks whether an endpoint accepts a TCP connection within a timeout"""
    
    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT):
        self.timeout = timeout
    
    def probe(self, address: str, port: str) -> bool:
        """Return True iff the handshake completes before the timeout.
        
        Timeouts, refusals, resolution failures and malformed ports all
        count as down. The connection is closed immediately.
        """
        start_time = time.time()
        try:
            port_number = int(port)
            if not 0 < port_number <= 65535:
                raise ValueError(port)
        except (TypeError, ValueError):
            logger.debug(f"Endpoint {address}:{port} down: invalid port")
            return False
        
        try:
            with socket.create_connection((address, port_number), timeout=self.timeout):
                pass
        except (OSError, ValueError) as e:
            logger.debug(f"Endpoint {address}:{port} down: {e or type(e).__name__}")
            return False
        
        logger.debug(f"Endpoint {address}:{port} alive in {(time.time() - start_time) * 1000:.1f}ms")
        return True
    
    def probe_endpoint(self, endpoint: Endpoint) -> bool:
        return self.probe(endpoint.address, endpoint.port)
