import logging
import socket
from typing import NamedTuple, Optional

from netdiag.utils.runner import CommandResult, run_command

logger = logging.getLogger(__name__)


class DnsResult(NamedTuple):
    host_address: str
    canonical_host_name: str


class PingResult(NamedTuple):
    exit_code: int
    raw_output: str
    reachable: bool
    latency_ms: Optional[str]


def resolve_address(host):
    """Forward-resolve host and return one address, IPv4 preferred.

    Resolver errors (socket.gaierror) are left to the caller. Names the
    idna codec refuses, such as empty or over-long labels, surface as
    socket.gaierror too.
    """
    try:
        infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except ValueError as e:
        raise socket.gaierror(str(e)) from e
    if not infos:
        raise socket.gaierror(f"no addresses for {host}")
    # sorted() is stable, so resolver order is kept within each family
    infos = sorted(infos, key=lambda info: info[0] != socket.AF_INET)
    return infos[0][4][0]


def dns_lookup(host):
    address = resolve_address(host)
    try:
        canonical = socket.gethostbyaddr(address)[0]
    except OSError:
        # no PTR record; fall back to the literal
        canonical = address
    logger.debug("%s resolved to %s (%s)", host, address, canonical)
    return DnsResult(address, canonical)


def parse_latency(output):
    """Pull the round-trip time out of ping output, e.g. 'time=12.3 ms' -> '12.3'."""
    start = output.find("time=")
    if start == -1:
        return None
    end = output.find(" ms", start)
    if end == -1:
        return None
    return output[start + len("time="):end].strip()


def ping(host, timeout):
    """Send a single ICMP echo with the system ping (Linux flags)."""
    result = run_command(["ping", "-c", "1", host], timeout)
    return PingResult(
        exit_code=result.exit_code,
        raw_output=result.output,
        reachable=result.exit_code == 0,
        latency_ms=parse_latency(result.output),
    )


def traceroute(host, timeout) -> CommandResult:
    return run_command(["traceroute", host], timeout)
