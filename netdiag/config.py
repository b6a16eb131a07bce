class DefaultConfig:
    """Defaults; override with NETDIAG_* environment variables."""

    # Subprocess deadlines, in seconds
    PING_TIMEOUT = 5
    TRACEROUTE_TIMEOUT = 30

    # Per-connect timeout (seconds) and thread pool size for /port-scan
    PORT_SCAN_CONNECT_TIMEOUT = 0.2
    PORT_SCAN_WORKERS = 64

    LOG_LEVEL = "INFO"
    BIND_HOST = "0.0.0.0"
    BIND_PORT = 5000

    # Keep flask-restx from appending "You have requested this URI..." to 404s
    RESTX_ERROR_404_HELP = False
