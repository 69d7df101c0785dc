"""Network port variables."""

from __future__ import annotations

from .spec import Builder

_MAX_PORT = 65535
_MAX_SERVICE_NAME = 15
_LETTERS = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")
_DIGITS = frozenset(b"0123456789")
_HYPHEN = ord("-")


def validate_port(port: str) -> None:
    """Raise ValueError unless port is a numeric port or an IANA service name."""
    if port == "":
        raise ValueError("port must not be empty")
    if not (port.isascii() and port.isdigit()):
        validate_iana_service_name(port)
        return
    if not 1 <= int(port) <= _MAX_PORT:
        raise ValueError("numeric ports must be between 1 and 65535")


def validate_iana_service_name(name: str) -> None:
    """Raise ValueError unless name is a valid IANA service name (RFC 6335)."""
    data = name.encode("utf-8")
    if not 1 <= len(data) <= _MAX_SERVICE_NAME:
        raise ValueError("IANA service name must be between 1 and 15 characters")
    if data[0] == _HYPHEN or data[-1] == _HYPHEN:
        raise ValueError("IANA service name must not begin or end with a hyphen")

    has_letter = False
    previous = None
    for byte in data:
        if byte in _LETTERS:
            has_letter = True
        elif byte == _HYPHEN:
            if previous == _HYPHEN:
                raise ValueError("IANA service name must not contain adjacent hyphens")
        elif byte not in _DIGITS:
            raise ValueError(
                "IANA service name must contain only ASCII letters, digits and hyphen"
            )
        previous = byte

    if not has_letter:
        raise ValueError("IANA service name must contain at least one letter")


class NetworkPortBuilder(Builder):
    """Builds a specification for a network port variable."""

    def with_default(self, value: str) -> "NetworkPortBuilder":
        self._default = value
        return self

    def _check_value(self, value: str) -> None:
        validate_port(value)

    def _unmarshal(self, text: str) -> str:
        return text


def network_port(name: str, desc: str) -> NetworkPortBuilder:
    """Configure an environment variable as a network port."""
    return NetworkPortBuilder(name, desc)