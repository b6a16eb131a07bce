import logging
from datetime import datetime, timezone

from flask import current_app
from flask_restx import Namespace, Resource, fields, reqparse

from netdiag.utils.network import dns_lookup, ping, resolve_address, traceroute
from netdiag.utils.portscan import scan_ports
from netdiag.utils.runner import CommandError
from netdiag.utils.validation import ValidationError, validate_host, validate_port_range

logger = logging.getLogger(__name__)
diag_ns = Namespace('diagnostics', description="Network Diagnostic Tools", path='/')


def port_number(value):
    """Query-string port; anything that is not an integer becomes None."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

port_number.__schema__ = {"type": "integer", "minimum": 1, "maximum": 65535}

# Query parameters
host_parser = reqparse.RequestParser()
host_parser.add_argument('host', type=str, location='args', help="Target host", default=None)

port_scan_parser = host_parser.copy()
port_scan_parser.add_argument('fromPort', type=port_number, location='args', help="First port")
port_scan_parser.add_argument('toPort', type=port_number, location='args', help="Last port")

# Response models (documentation only)
envelope_model = diag_ns.model('Envelope', {
    'host': fields.String(description="Host as sent by the client", example="8.8.8.8"),
    'timestamp': fields.String(description="ISO-8601 time the request was received"),
    'error': fields.String(description="Present only when the probe failed"),
})
ping_model = diag_ns.inherit('Ping Result', envelope_model, {
    'exitCode': fields.Integer,
    'rawOutput': fields.String,
    'reachable': fields.Boolean,
    'latencyMs': fields.String(example="12.3"),
})
dns_model = diag_ns.inherit('DNS Result', envelope_model, {
    'hostAddress': fields.String(example="142.250.74.36"),
    'canonicalHostName': fields.String,
})
traceroute_model = diag_ns.inherit('Traceroute Result', envelope_model, {
    'exitCode': fields.Integer,
    'rawOutput': fields.String,
})
port_scan_model = diag_ns.inherit('Port Scan Result', envelope_model, {
    'fromPort': fields.Integer,
    'toPort': fields.Integer,
    'resolvedAddress': fields.String,
    'openPorts': fields.List(fields.Integer),
    'closedPorts': fields.List(fields.Integer),
})


def new_envelope(host):
    now = datetime.now(timezone.utc)
    return {"host": host, "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z")}


def fail(result, status, message):
    logger.warning("%s -> %d: %s", result.get("host"), status, message)
    result["error"] = message
    return result, status


# Ping
@diag_ns.route('/ping')
class Ping(Resource):
    @diag_ns.expect(host_parser)
    @diag_ns.response(200, "Probe ran (the host may still be unreachable)", ping_model)
    @diag_ns.response(400, "Missing or invalid host", envelope_model)
    @diag_ns.response(500, "ping could not be run", envelope_model)
    def get(self):
        """Send one ICMP echo to a host."""
        host = host_parser.parse_args()['host']
        result = new_envelope(host)
        try:
            validate_host(host)
        except ValidationError as e:
            return fail(result, 400, str(e))

        try:
            outcome = ping(host, current_app.config['PING_TIMEOUT'])
        except CommandError as e:
            return fail(result, 500, f"Exception: {e}")

        result.update({
            "exitCode": outcome.exit_code,
            "rawOutput": outcome.raw_output,
            "reachable": outcome.reachable,
            "latencyMs": outcome.latency_ms,
        })
        logger.info("ping %s: reachable=%s", host, outcome.reachable)
        return result, 200

# DNS
@diag_ns.route('/dns-lookup')
class DNSLookup(Resource):
    @diag_ns.expect(host_parser)
    @diag_ns.response(200, "Host resolved", dns_model)
    @diag_ns.response(400, "Invalid host or lookup failed", envelope_model)
    def get(self):
        """Resolve a host name to an address and its canonical name."""
        host = host_parser.parse_args()['host']
        result = new_envelope(host)
        try:
            validate_host(host)
        except ValidationError as e:
            return fail(result, 400, str(e))

        try:
            answer = dns_lookup(host)
        except OSError as e:
            return fail(result, 400, f"DNS lookup failed: {e}")

        result["hostAddress"] = answer.host_address
        result["canonicalHostName"] = answer.canonical_host_name
        logger.info("dns-lookup %s: %s", host, answer.host_address)
        return result, 200

# Traceroute
@diag_ns.route('/traceroute')
class Traceroute(Resource):
    @diag_ns.expect(host_parser)
    @diag_ns.response(200, "Trace finished", traceroute_model)
    @diag_ns.response(400, "Missing or invalid host", envelope_model)
    @diag_ns.response(500, "traceroute could not be run", envelope_model)
    def get(self):
        """Trace the route to a host. The traceroute output is returned unparsed."""
        host = host_parser.parse_args()['host']
        result = new_envelope(host)
        try:
            validate_host(host)
        except ValidationError as e:
            return fail(result, 400, str(e))

        try:
            outcome = traceroute(host, current_app.config['TRACEROUTE_TIMEOUT'])
        except CommandError as e:
            return fail(result, 500, f"Exception: {e}")

        result["exitCode"] = outcome.exit_code
        result["rawOutput"] = outcome.output
        logger.info("traceroute %s: exit code %d", host, outcome.exit_code)
        return result, 200

# Port scan
@diag_ns.route('/port-scan')
class PortScan(Resource):
    @diag_ns.expect(port_scan_parser)
    @diag_ns.response(200, "Scan finished", port_scan_model)
    @diag_ns.response(400, "Invalid host or port range", envelope_model)
    @diag_ns.response(500, "Host could not be resolved", envelope_model)
    def get(self):
        """TCP connect scan over at most 2001 consecutive ports."""
        args = port_scan_parser.parse_args()
        host, from_port, to_port = args['host'], args['fromPort'], args['toPort']
        result = new_envelope(host)
        result["fromPort"] = from_port
        result["toPort"] = to_port
        try:
            validate_host(host)
            validate_port_range(from_port, to_port)
        except ValidationError as e:
            return fail(result, 400, str(e))

        try:
            address = resolve_address(host)
        except OSError as e:
            return fail(result, 500, f"Exception: {e}")

        scan = scan_ports(
            address, from_port, to_port,
            timeout=current_app.config['PORT_SCAN_CONNECT_TIMEOUT'],
            workers=current_app.config['PORT_SCAN_WORKERS'],
        )
        result["resolvedAddress"] = address
        result["openPorts"] = scan.open_ports
        result["closedPorts"] = scan.closed_ports
        logger.info("port-scan %s (%s) %d-%d: %d open",
                    host, address, from_port, to_port, len(scan.open_ports))
        return result, 200
