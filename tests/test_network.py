import socket
from unittest.mock import patch

import pytest

from netdiag.utils import network
from netdiag.utils.runner import CommandResult

PING_OK = """PING 8.8.8.8 (8.8.8.8) 56(84) bytes of data.
64 bytes from 8.8.8.8: icmp_seq=1 ttl=117 time=12.3 ms

--- 8.8.8.8 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
"""

PING_LOST = """PING 192.0.2.1 (192.0.2.1) 56(84) bytes of data.

--- 192.0.2.1 ping statistics ---
1 packets transmitted, 0 received, 100% packet loss
"""


def _addrinfo(*addresses):
    infos = []
    for address in addresses:
        family = socket.AF_INET6 if ":" in address else socket.AF_INET
        infos.append((family, socket.SOCK_STREAM, 6, "", (address, 0)))
    return infos


class TestParseLatency:
    def test_extracts_value_between_markers(self):
        assert network.parse_latency(PING_OK) == "12.3"

    def test_trims_whitespace(self):
        assert network.parse_latency("time= 0.045 ms") == "0.045"

    @pytest.mark.parametrize("output", [PING_LOST, "", "time=12.3", "12.3 ms"])
    def test_missing_marker_gives_none(self, output):
        assert network.parse_latency(output) is None


class TestPing:
    def test_reachable_host(self):
        with patch("netdiag.utils.network.run_command", return_value=CommandResult(0, PING_OK)) as run:
            result = network.ping("8.8.8.8", timeout=5)

        run.assert_called_once_with(["ping", "-c", "1", "8.8.8.8"], 5)
        assert result.reachable is True
        assert result.exit_code == 0
        assert result.latency_ms == "12.3"
        assert result.raw_output == PING_OK

    def test_unreachable_host(self):
        with patch("netdiag.utils.network.run_command", return_value=CommandResult(1, PING_LOST)):
            result = network.ping("192.0.2.1", timeout=5)

        assert result.reachable is False
        assert result.exit_code == 1
        assert result.latency_ms is None


def test_traceroute_runs_binary():
    with patch("netdiag.utils.network.run_command", return_value=CommandResult(0, "1  gw\n")) as run:
        result = network.traceroute("example.com", timeout=30)

    run.assert_called_once_with(["traceroute", "example.com"], 30)
    assert result.output == "1  gw\n"


class TestResolve:
    def test_prefers_ipv4(self):
        with patch("netdiag.utils.network.socket.getaddrinfo",
                   return_value=_addrinfo("::1", "127.0.0.1")):
            assert network.resolve_address("localhost") == "127.0.0.1"

    def test_falls_back_to_ipv6(self):
        with patch("netdiag.utils.network.socket.getaddrinfo",
                   return_value=_addrinfo("2001:db8::1")):
            assert network.resolve_address("v6only.example") == "2001:db8::1"

    @pytest.mark.parametrize("host", ["a..example.com", "x" * 64 + ".example.com"])
    def test_unencodable_name_raises_gaierror(self, host):
        with pytest.raises(socket.gaierror):
            network.resolve_address(host)

    def test_resolver_error_propagates(self):
        with patch("netdiag.utils.network.socket.getaddrinfo",
                   side_effect=socket.gaierror(-2, "Name or service not known")):
            with pytest.raises(OSError):
                network.resolve_address("nope.invalid")


class TestDnsLookup:
    def test_uses_reverse_lookup_for_canonical_name(self):
        with patch("netdiag.utils.network.socket.getaddrinfo", return_value=_addrinfo("93.184.216.34")), \
                patch("netdiag.utils.network.socket.gethostbyaddr",
                      return_value=("edge.example.net", [], ["93.184.216.34"])):
            result = network.dns_lookup("example.com")

        assert result.host_address == "93.184.216.34"
        assert result.canonical_host_name == "edge.example.net"

    def test_canonical_name_falls_back_to_address(self):
        with patch("netdiag.utils.network.socket.getaddrinfo", return_value=_addrinfo("192.0.2.7")), \
                patch("netdiag.utils.network.socket.gethostbyaddr",
                      side_effect=socket.herror(1, "Unknown host")):
            result = network.dns_lookup("test.example")

        assert result.canonical_host_name == "192.0.2.7"

    def test_localhost(self):
        result = network.dns_lookup("localhost")
        assert result.host_address in ("127.0.0.1", "::1")
        assert result.canonical_host_name
