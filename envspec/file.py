"""File name variables."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from .spec import Builder


class FileName(str):
    """The name of a file."""

    def reader(self) -> BinaryIO:
        """Open the file for reading its contents as bytes."""
        return open(self, "rb")

    def read_bytes(self) -> bytes:
        """Return the contents of the file."""
        return Path(self).read_bytes()

    def read_string(self) -> str:
        """Return the contents of the file as text."""
        return self.read_bytes().decode("utf-8")


class FileBuilder(Builder):
    """Builds a specification for a file name variable."""

    def with_default(self, value: str) -> "FileBuilder":
        self._default = FileName(value)
        return self

    def _unmarshal(self, text: str) -> FileName:
        return FileName(text)


def file(name: str, desc: str) -> FileBuilder:
    """Configure an environment variable as a file name."""
    return FileBuilder(name, desc)