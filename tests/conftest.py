"""Shared fixtures for SSDP discovery tests."""

import pytest

from .const import make_response


@pytest.fixture
def basic_response() -> str:
    return make_response(
        "uuid:abc::urn:schemas-upnp-org:device:Basic:1",
        "http://10.0.0.5:80/desc.xml",
    )
