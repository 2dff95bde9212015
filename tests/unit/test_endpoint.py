"""Unit tests for nodeconf.config.endpoint."""
from __future__ import annotations

import pytest

from nodeconf.config.endpoint import (
    Endpoint,
    EndpointParseError,
    parse_endpoint,
    serialize_endpoint,
)


class TestParse:
    def test_parses_scheme_host_and_port(self) -> None:
        e = parse_endpoint("https://10.0.0.1:6443/")
        assert e.scheme == "https"
        assert e.hostname == "10.0.0.1"
        assert e.port == 6443

    def test_dns_name_without_port(self) -> None:
        e = parse_endpoint("https://cluster.example.com")
        assert e.hostname == "cluster.example.com"
        assert e.port is None

    def test_ipv6_host_strips_brackets(self) -> None:
        e = parse_endpoint("https://[fd00::1]:6443")
        assert e.hostname == "fd00::1"
        assert e.port == 6443

    def test_relative_reference_parses_but_is_not_absolute(self) -> None:
        e = parse_endpoint("/manifest.yaml")
        assert e.hostname == ""
        assert e.is_absolute is False

    def test_absolute_url_is_absolute(self) -> None:
        assert parse_endpoint("https://localhost:6443/").is_absolute is True

    def test_classmethod_matches_function(self) -> None:
        assert Endpoint.parse("https://a:1/") == parse_endpoint("https://a:1/")

    @pytest.mark.parametrize(
        "raw",
        [
            "https://host:port/",
            "https://host:99999/",
            "https://[fd00::1/",
            "https://exa mple.com/",
            "https://example.com/\x7f",
        ],
    )
    def test_invalid_urls_raise(self, raw: str) -> None:
        with pytest.raises(EndpointParseError):
            parse_endpoint(raw)

    def test_space_in_path_is_accepted(self) -> None:
        e = parse_endpoint("https://example.com/a b")
        assert e.hostname == "example.com"
        assert e.url.path == "/a b"

    def test_space_in_host_names_the_host(self) -> None:
        with pytest.raises(EndpointParseError) as info:
            parse_endpoint("https://exa mple.com/")
        assert "host name" in info.value.reason

    def test_tab_is_rejected_anywhere(self) -> None:
        with pytest.raises(EndpointParseError):
            parse_endpoint("https://example.com/a\tb")

    def test_non_string_raises(self) -> None:
        with pytest.raises(EndpointParseError):
            parse_endpoint(6443)  # type: ignore[arg-type]

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_endpoint("https://host:port/")

    def test_parse_error_names_input(self) -> None:
        with pytest.raises(EndpointParseError) as info:
            parse_endpoint("https://host:port/")
        assert info.value.raw == "https://host:port/"
        assert "https://host:port/" in str(info.value)


class TestSerialize:
    @pytest.mark.parametrize(
        "raw",
        [
            "https://localhost:6443/",
            "https://10.5.0.2:6443",
            "https://[fd00::1]:6443/",
            "https://user@cluster.example.com:443/api?x=1#frag",
            "tcp://lb.internal:6443",
            "https://example.com/?",
            "https://example.com/#",
            "https://example.com/docs/my file.yaml",
        ],
    )
    def test_round_trip(self, raw: str) -> None:
        assert serialize_endpoint(parse_endpoint(raw)) == raw

    def test_str_matches_serialize(self) -> None:
        e = parse_endpoint("https://localhost:6443/")
        assert str(e) == serialize_endpoint(e)

    def test_endpoint_is_frozen(self) -> None:
        e = parse_endpoint("https://localhost:6443/")
        with pytest.raises((AttributeError, TypeError)):
            e.url = None  # type: ignore[misc]
