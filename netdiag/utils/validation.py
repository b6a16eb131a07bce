MAX_PORT_SPAN = 2000


class ValidationError(ValueError):
    """Bad request input; the message is returned to the client as-is."""


def validate_host(host):
    """Reject blank hosts, hosts with whitespace and hosts that look like options."""
    if host is None or not host.strip():
        raise ValidationError("Host is required")
    # ping/traceroute would read a leading dash as a flag
    if any(ch.isspace() for ch in host) or host.startswith("-"):
        raise ValidationError("Invalid host")
    return host


def validate_port_range(from_port, to_port):
    if from_port is None or to_port is None:
        raise ValidationError("Invalid port range")
    if from_port < 1 or to_port > 65535 or from_port > to_port:
        raise ValidationError("Invalid port range")
    if to_port - from_port > MAX_PORT_SPAN:
        raise ValidationError(f"Port range too large (max {MAX_PORT_SPAN} ports for this endpoint)")
    return from_port, to_port
