import enum
import logging
import socket
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 0.2
DEFAULT_WORKERS = 64


class ConnectOutcome(enum.Enum):
    OPEN = "open"
    REFUSED = "refused"
    TIMED_OUT = "timed_out"
    ERROR = "error"

    @property
    def is_open(self):
        return self is ConnectOutcome.OPEN


class ScanResult(NamedTuple):
    open_ports: List[int]
    closed_ports: List[int]


def probe_port(address, port, timeout=DEFAULT_CONNECT_TIMEOUT):
    """Try one TCP connect to (address, port) and report how it went."""
    try:
        with socket.create_connection((address, port), timeout=timeout):
            return ConnectOutcome.OPEN
    except ConnectionRefusedError:
        return ConnectOutcome.REFUSED
    except socket.timeout:
        return ConnectOutcome.TIMED_OUT
    except OSError as e:
        logger.debug("connect to %s:%d failed: %s", address, port, e)
        return ConnectOutcome.ERROR


def scan_ports(address, from_port, to_port, timeout=DEFAULT_CONNECT_TIMEOUT,
               workers=DEFAULT_WORKERS):
    """Probe every port in [from_port, to_port] and split them into open and closed.

    Connects run on a thread pool of at most ``workers`` threads.
    Refused, timed-out and failed connects all count as closed.
    Both lists come back in ascending port order.
    """
    ports = range(from_port, to_port + 1)
    open_ports, closed_ports = [], []
    started = time.monotonic()

    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(ports)))) as executor:
        # map() yields in submission order, i.e. by port
        outcomes = executor.map(lambda p: probe_port(address, p, timeout), ports)
        for port, outcome in zip(ports, outcomes):
            (open_ports if outcome.is_open else closed_ports).append(port)

    logger.debug("scanned %s ports %d-%d in %.2fs: %d open",
                 address, from_port, to_port, time.monotonic() - started, len(open_ports))
    return ScanResult(open_ports, closed_ports)
