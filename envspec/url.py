"""URL variables."""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit

from .spec import Builder


def _parse_url(text: str) -> SplitResult:
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text):
        raise ValueError("invalid control character in URL")
    return urlsplit(text)


class URLBuilder(Builder):
    """Builds a specification for a fully-qualified URL variable."""

    def with_default(self, value: str) -> "URLBuilder":
        """Set the default from a URL string, raising ValueError if it cannot be parsed."""
        self._default = _parse_url(value)
        return self

    def _check_value(self, value: SplitResult) -> None:
        if not value.scheme:
            raise ValueError("URL must have a scheme")
        if not value.netloc.rpartition("@")[2]:
            raise ValueError("URL must have a hostname")

    def _unmarshal(self, text: str) -> SplitResult:
        return _parse_url(text)


def url(name: str, desc: str) -> URLBuilder:
    """Configure an environment variable as a fully-qualified URL."""
    return URLBuilder(name, desc)