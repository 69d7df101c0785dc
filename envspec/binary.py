"""Binary variables, encoded as base64 or hexadecimal."""

from __future__ import annotations

import base64
import binascii
import string
from typing import Callable

from .spec import Builder

_STD_ALT = "+/"
_URL_ALT = "-_"


class BinaryBuilder(Builder):
    """Builds a specification for a binary variable."""

    def __init__(self, name: str, desc: str) -> None:
        super().__init__(name, desc)
        self._hex = False
        self._altchars = _STD_ALT
        self._padded = True
        self.encoding_desc = ""
        self.with_base64_encoding()

    def _schema(self) -> str:
        return f"<{self.encoding_desc}>"

    def with_default(self, value: bytes) -> "BinaryBuilder":
        self._default = bytes(value)
        return self

    def with_encoded_default(self, value: str) -> "BinaryBuilder":
        return self.with_default(self._unmarshal(value))

    def with_constraint(self, desc: str, fn: Callable[[bytes], bool]) -> "BinaryBuilder":
        self._add_user_constraint(desc, fn)
        return self

    def with_sensitive_content(self) -> "BinaryBuilder":
        self._sensitive = True
        return self

    def with_base64_encoding(self, altchars: str = _STD_ALT, padded: bool = True) -> "BinaryBuilder":
        if len(altchars) != 2:
            raise ValueError("altchars must hold exactly two characters")
        self._hex = False
        self._altchars = altchars
        self._padded = padded
        if altchars == _STD_ALT:
            self.encoding_desc = "base64" if padded else "unpadded base64"
        elif altchars == _URL_ALT:
            self.encoding_desc = "padded base64url" if padded else "base64url"
        else:
            self.encoding_desc = "non-canonical base64"
        return self

    def with_hex_encoding(self) -> "BinaryBuilder":
        self._hex = True
        self.encoding_desc = "hex"
        return self

    def marshal(self, value: bytes) -> str:
        """Encode a raw value as it appears in the environment."""
        if self._hex:
            return value.hex()
        text = base64.b64encode(value, self._altchars.encode()).decode()
        return text if self._padded else text.rstrip("=")

    def _unmarshal(self, text: str) -> bytes:
        return self._decode_hex(text) if self._hex else self._decode_base64(text)

    def _decode_base64(self, text: str) -> bytes:
        alphabet = string.ascii_uppercase + string.ascii_lowercase + string.digits + self._altchars
        for index, ch in enumerate(text):
            if ch not in alphabet and not (self._padded and ch == "="):
                raise ValueError(f"illegal base64 data at input byte {index}")
        std = text.translate(str.maketrans(self._altchars, _STD_ALT))
        if self._padded:
            if len(std) % 4:
                raise ValueError(f"illegal base64 data at input byte {len(text)}")
        else:
            std += "=" * (-len(std) % 4)
        try:
            return base64.b64decode(std, validate=True)
        except binascii.Error:
            raise ValueError(f"illegal base64 data at input byte {len(text)}") from None

    @staticmethod
    def _decode_hex(text: str) -> bytes:
        for ch in text:
            if ch not in string.hexdigits:
                raise ValueError(f"invalid byte: {ch!r}")
        if len(text) % 2:
            raise ValueError("odd length hex string")
        return bytes.fromhex(text)


def binary(name: str, desc: str) -> BinaryBuilder:
    """Configure an environment variable as a raw binary value."""
    return BinaryBuilder(name, desc)