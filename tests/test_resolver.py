import time

import pytest

from netproc import service
from netproc.resolver import Resolver


def test_first_lookup_returns_address_text():
    with Resolver(0, 1) as resolver:
        assert resolver.ip_to_domain("127.0.0.1") == ("127.0.0.1", False)


def test_lookup_eventually_resolves():
    with Resolver(16, 1) as resolver:
        resolver.ip_to_domain("127.0.0.1")
        deadline = time.monotonic() + 10
        name, resolved = resolver.ip_to_domain("127.0.0.1")
        while not resolved and time.monotonic() < deadline:
            time.sleep(0.01)
            name, resolved = resolver.ip_to_domain("127.0.0.1")
    assert resolved is True
    assert name


def test_port_to_service_matches_service_module():
    with Resolver(0, 1) as resolver:
        assert resolver.port_to_service(22, "tcp") == service.port_to_service(22, "tcp")


def test_port_out_of_range_raises():
    with Resolver(0, 1) as resolver:
        with pytest.raises(ValueError):
            resolver.port_to_service(70000, "tcp")


def test_invalid_arguments_raise():
    with pytest.raises(ValueError):
        Resolver(-1, 1)
    with pytest.raises(ValueError):
        Resolver(0, -1)


def test_lookup_after_close_raises():
    resolver = Resolver(0, 1)
    resolver.close()
    with pytest.raises(RuntimeError):
        resolver.ip_to_domain("192.0.2.9")