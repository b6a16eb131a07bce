import pytest

from netdiag import create_app


@pytest.fixture
def app():
    return create_app({
        "TESTING": True,
        "PING_TIMEOUT": 2,
        "TRACEROUTE_TIMEOUT": 2,
        "PORT_SCAN_CONNECT_TIMEOUT": 0.2,
        "PORT_SCAN_WORKERS": 8,
    })


@pytest.fixture
def client(app):
    return app.test_client()
