"""Tests for connection descriptor building."""

from __future__ import annotations

import pytest

from gremlinsvc.config import ServiceConfig, TlsConfig
from gremlinsvc.descriptor import build_descriptor, descriptor_from_config, parse_contact_points
from gremlinsvc.errors import ConfigurationError
from gremlinsvc.models import TlsMaterial


def test_parse_contact_points_trims_and_keeps_order() -> None:
    assert parse_contact_points("a, b , c") == ("a", "b", "c")


def test_parse_contact_points_drops_blank_entries() -> None:
    assert parse_contact_points(" host-1 ,, ,host-2,") == ("host-1", "host-2")


@pytest.mark.parametrize("contacts", ["", "  ", " , ,", []])
def test_empty_contact_list_is_rejected(contacts) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(ConfigurationError):
        build_descriptor(contacts, 8182, "/gremlin")


@pytest.mark.parametrize("port", [0, -1, 65536, 100000, "abc", True])
def test_out_of_range_ports_are_rejected(port) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(ConfigurationError):
        build_descriptor("localhost", port, "/gremlin")


@pytest.mark.parametrize("port", [1, 8182, 65535, "8182"])
def test_valid_ports_are_accepted(port) -> None:  # type: ignore[no-untyped-def]
    descriptor = build_descriptor("localhost", port, "/gremlin")

    assert descriptor.port == int(port)


def test_empty_path_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        build_descriptor("localhost", 8182, "  ")


def test_path_gets_leading_slash() -> None:
    descriptor = build_descriptor("localhost", 8182, "gremlin")

    assert descriptor.path == "/gremlin"


def test_transit_url_without_tls() -> None:
    descriptor = build_descriptor("a, b", 8182, "/gremlin")

    assert descriptor.transit_url == "gremlin://a,b:8182/gremlin"
    assert descriptor.tls_enabled is False
    assert "+ssl" not in descriptor.transit_url
    assert descriptor.endpoint_urls() == ("ws://a:8182/gremlin", "ws://b:8182/gremlin")


def test_transit_url_with_tls() -> None:
    material = TlsMaterial(trust_store="/etc/ca.pem")
    descriptor = build_descriptor(["graph-1"], 8183, "/gremlin", material)

    assert descriptor.transit_url == "gremlin+ssl://graph-1:8183/gremlin"
    assert descriptor.tls_enabled is True
    assert descriptor.tls is material
    assert descriptor.endpoint_urls() == ("wss://graph-1:8183/gremlin",)


def test_descriptor_from_config_maps_tls_fields() -> None:
    config = ServiceConfig(
        contact_points="graph-1",
        tls=TlsConfig(key_store="/etc/client.pem", key_store_password="secret", trust_store="/etc/ca.pem"),
    )

    descriptor = descriptor_from_config(config)

    assert descriptor.port == 8182
    assert descriptor.path == "/gremlin"
    assert descriptor.tls == TlsMaterial(
        key_store="/etc/client.pem",
        key_store_password="secret",
        trust_store="/etc/ca.pem",
    )
    assert descriptor.transit_url.startswith("gremlin+ssl://")


def test_descriptor_is_immutable() -> None:
    descriptor = build_descriptor("localhost", 8182, "/gremlin")

    with pytest.raises(AttributeError):
        descriptor.port = 1  # type: ignore[misc]
