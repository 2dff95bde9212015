"""Endpoint value type for the control-plane address.

An ``Endpoint`` wraps a single parsed URL.  It is the only field of the
configuration document with its own decode/encode pair: the document
serializer calls ``parse_endpoint`` when reading and
``serialize_endpoint`` when writing, and nothing else.

Usage
-----
::

    from nodeconf.config.endpoint import parse_endpoint, serialize_endpoint

    endpoint = parse_endpoint("https://10.0.0.1:6443/")
    endpoint.hostname   # '10.0.0.1'
    serialize_endpoint(endpoint)   # 'https://10.0.0.1:6443/'
"""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import SplitResult, urlsplit


@dataclass(eq=False)
class EndpointParseError(ValueError):
    """Raised when a string is not a syntactically valid URL.

    Parameters
    ----------
    raw:
        The string that failed to parse.
    reason:
        Why it was rejected.
    """

    raw: str
    reason: str

    def __str__(self) -> str:
        return f"parse {self.raw!r}: {self.reason}"

    def __post_init__(self) -> None:
        self.args = (str(self),)


def _control_character(raw: str) -> str | None:
    for ch in raw:
        if ord(ch) < 0x20 or ord(ch) == 0x7F:
            return ch
    return None


def _host_whitespace(url: SplitResult) -> str | None:
    for ch in url.netloc:
        if ch.isspace():
            return ch
    return None


@dataclass(frozen=True)
class Endpoint:
    """A parsed URL used as the canonical control-plane address.

    ``raw`` keeps the exact input so that serializing gives back the
    same string, including empty ``?`` or ``#`` delimiters that
    ``SplitResult.geturl`` would drop.
    """

    url: SplitResult
    raw: str

    @classmethod
    def parse(cls, raw: str) -> "Endpoint":
        """Parse ``raw`` into an ``Endpoint``.

        Raises
        ------
        EndpointParseError
            If ``raw`` is not a valid URL.
        """
        if not isinstance(raw, str):
            raise EndpointParseError(repr(raw), "endpoint must be a string")

        bad = _control_character(raw)
        if bad is not None:
            raise EndpointParseError(raw, f"invalid control character {bad!r} in URL")

        try:
            url = urlsplit(raw)
            # Port is validated lazily by urllib; force it here.
            url.port
        except ValueError as exc:
            raise EndpointParseError(raw, str(exc)) from exc

        # Whitespace is allowed in the path and query, not in the authority.
        bad = _host_whitespace(url)
        if bad is not None:
            raise EndpointParseError(raw, f"invalid character {bad!r} in host name")

        return cls(url, raw)

    @property
    def scheme(self) -> str:
        return self.url.scheme

    @property
    def hostname(self) -> str:
        """Host part without port or IPv6 brackets; empty when absent."""
        return self.url.hostname or ""

    @property
    def port(self) -> int | None:
        return self.url.port

    @property
    def is_absolute(self) -> bool:
        """True when both a scheme and a host are present."""
        return bool(self.url.scheme) and bool(self.hostname)

    def __str__(self) -> str:
        return self.raw


def parse_endpoint(raw: str) -> Endpoint:
    """Decode hook: turn a document string into an ``Endpoint``."""
    return Endpoint.parse(raw)


def serialize_endpoint(endpoint: Endpoint) -> str:
    """Encode hook: turn an ``Endpoint`` back into its document string."""
    return str(endpoint)
