"""Numeric variables: floating-point, signed integer and unsigned integer."""

from __future__ import annotations

import math
import operator
import re
import struct
import sys
from typing import Any, Callable, Optional

from .spec import Builder

_INT_BITS = (8, 16, 32, 64)
_FLOAT_BITS = (32, 64)
_FLOAT32_MAX = 3.4028234663852886e38

_SIGNED_SYNTAX = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_SYNTAX = re.compile(r"[0-9]+")
_DECIMAL_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_SPECIAL_FLOAT = re.compile(r"[+-]?(?:inf|infinity)|nan", re.IGNORECASE)


class _NumericBuilder(Builder):
    """Shared behaviour of builders for ordered numeric values."""

    def __init__(self, name: str, desc: str, kind: str, fmt: Callable[[Any], str]) -> None:
        super().__init__(name, desc)
        self._kind = kind
        self._format = fmt
        self._min: Optional[Any] = None
        self._max: Optional[Any] = None

    def _coerce(self, value: Any) -> Any:
        return value

    def _set_default(self, value: Any) -> None:
        self._default = self._coerce(value)

    def _set_minimum(self, value: Any) -> None:
        self._min = self._coerce(value)

    def _set_maximum(self, value: Any) -> None:
        self._max = self._coerce(value)

    def _schema(self) -> str:
        lo, hi = self._min, self._max
        if lo is not None and hi is not None:
            return f"{self._format(lo)} ... {self._format(hi)}"
        if lo is not None:
            return f"{self._format(lo)} ..."
        if hi is not None:
            return f"... {self._format(hi)}"
        return f"<{self._kind}>"

    def _expectation(self) -> str:
        lo, hi = self._min, self._max
        if lo is not None and hi is not None:
            return f"expected between {self._format(lo)} and {self._format(hi)}"
        if lo is not None:
            return f"expected {self._format(lo)} or greater"
        return f"expected {self._format(hi)} or less"

    def _check_value(self, value: Any) -> None:
        if self._min is not None and value < self._min:
            raise ValueError(f"too low, {self._expectation()}")
        if self._max is not None and value > self._max:
            raise ValueError(f"too high, {self._expectation()}")


class _IntegerBuilder(_NumericBuilder):
    """Shared behaviour of fixed-size integer builders."""

    def __init__(
        self,
        name: str,
        desc: str,
        kind: str,
        fmt: Callable[[int], str],
        type_min: int,
        type_max: int,
    ) -> None:
        super().__init__(name, desc, kind, fmt)
        self._type_min = type_min
        self._type_max = type_max

    def _coerce(self, value: Any) -> int:
        return operator.index(value)

    def _within_type(self, value: int) -> int:
        if value < self._type_min:
            raise ValueError(
                f"too low, expected the smallest {self._kind} value of "
                f"{self._format(self._type_min)} or greater"
            )
        if value > self._type_max:
            raise ValueError(
                f"too high, expected the largest {self._kind} value of "
                f"{self._format(self._type_max)} or less"
            )
        return value

    def _check_value(self, value: Any) -> None:
        self._within_type(value)
        super()._check_value(value)


def _format_signed(value: int) -> str:
    return f"{value:+d}"


def _format_unsigned(value: int) -> str:
    return str(value)


class SignedBuilder(_IntegerBuilder):
    """Builds a specification for a signed integer variable."""

    def __init__(self, name: str, desc: str, bits: int = 64) -> None:
        if bits not in _INT_BITS:
            raise ValueError(f"unsupported integer size: {bits} bits")
        super().__init__(
            name,
            desc,
            f"int{bits}",
            _format_signed,
            -(1 << (bits - 1)),
            (1 << (bits - 1)) - 1,
        )

    def with_default(self, value: Any) -> SignedBuilder:
        """Set the value used when the variable is undefined or empty."""
        self._set_default(value)
        return self

    def with_minimum(self, value: Any) -> SignedBuilder:
        """Set the minimum acceptable value."""
        self._set_minimum(value)
        return self

    def with_maximum(self, value: Any) -> SignedBuilder:
        """Set the maximum acceptable value."""
        self._set_maximum(value)
        return self

    def _unmarshal(self, text: str) -> int:
        if not _SIGNED_SYNTAX.fullmatch(text):
            raise ValueError(f"unrecognized {self._kind} syntax")
        return self._within_type(int(text))


class UnsignedBuilder(_IntegerBuilder):
    """Builds a specification for an unsigned integer variable."""

    def __init__(self, name: str, desc: str, bits: int = 64) -> None:
        if bits not in _INT_BITS:
            raise ValueError(f"unsupported integer size: {bits} bits")
        super().__init__(name, desc, f"uint{bits}", _format_unsigned, 0, (1 << bits) - 1)

    def with_default(self, value: Any) -> UnsignedBuilder:
        """Set the value used when the variable is undefined or empty."""
        self._set_default(value)
        return self

    def with_minimum(self, value: Any) -> UnsignedBuilder:
        """Set the minimum acceptable value."""
        self._set_minimum(value)
        return self

    def with_maximum(self, value: Any) -> UnsignedBuilder:
        """Set the maximum acceptable value."""
        self._set_maximum(value)
        return self

    def _unmarshal(self, text: str) -> int:
        if not _UNSIGNED_SYNTAX.fullmatch(text):
            raise ValueError(f"unrecognized {self._kind} syntax")
        return self._within_type(int(text))


def _to_float32(value: float) -> float:
    """Round a float to single precision, raising OverflowError if it does not fit."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _round_to(value: float, bits: int) -> float:
    return _to_float32(value) if bits == 32 else value


def _shortest(magnitude: float, bits: int) -> str:
    """Return the shortest scientific notation that round-trips at the given size."""
    for precision in range(17):
        text = f"{magnitude:.{precision}e}"
        if _round_to(float(text), bits) == magnitude:
            return text
    return f"{magnitude:.16e}"


def _format_float(value: float, bits: int) -> str:
    """Format a float in shortest 'g' style, always with a leading sign."""
    if math.isnan(value):
        return "+NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else "+"
    magnitude = abs(value)
    if magnitude == 0:
        return sign + "0"

    mantissa, exponent = _shortest(magnitude, bits).split("e")
    digits = mantissa.replace(".", "").rstrip("0") or "0"
    nd = len(digits)
    dp = int(exponent) + 1

    eprec = 6
    if eprec > nd and nd >= dp:
        eprec = nd
    exp = dp - 1

    if exp < -4 or exp >= eprec:
        body = digits[0] + ("." + digits[1:] if nd > 1 else "") + f"e{exp:+03d}"
    elif dp <= 0:
        body = "0." + "0" * -dp + digits
    elif dp >= nd:
        body = digits + "0" * (dp - nd)
    else:
        body = digits[:dp] + "." + digits[dp:]
    return sign + body


def _parse_float(text: str) -> Optional[float]:
    """Parse a float literal, returning None if the syntax is not recognized."""
    if _DECIMAL_FLOAT.fullmatch(text) or _SPECIAL_FLOAT.fullmatch(text):
        return float(text)
    if _HEX_FLOAT.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return -math.inf if text.startswith("-") else math.inf
    return None


class FloatBuilder(_NumericBuilder):
    """Builds a specification for a floating-point variable."""

    def __init__(self, name: str, desc: str, bits: int = 64) -> None:
        if bits not in _FLOAT_BITS:
            raise ValueError(f"unsupported floating-point size: {bits} bits")
        super().__init__(name, desc, f"float{bits}", lambda v: _format_float(v, bits))
        self._bits = bits
        self._type_max = _FLOAT32_MAX if bits == 32 else sys.float_info.max

    def with_default(self, value: Any) -> FloatBuilder:
        """Set the value used when the variable is undefined or empty."""
        self._set_default(value)
        return self

    def with_minimum(self, value: Any) -> FloatBuilder:
        """Set the minimum acceptable value."""
        self._set_minimum(value)
        return self

    def with_maximum(self, value: Any) -> FloatBuilder:
        """Set the maximum acceptable value."""
        self._set_maximum(value)
        return self

    def _range_error(self, value: float) -> ValueError:
        if value < 0:
            return ValueError(
                f"too low, expected the smallest {self._kind} value of "
                f"{self._format(-self._type_max)} or greater"
            )
        return ValueError(
            f"too high, expected the largest {self._kind} value of "
            f"{self._format(self._type_max)} or less"
        )

    def _narrow(self, value: float) -> float:
        try:
            return _round_to(value, self._bits)
        except OverflowError:
            raise self._range_error(value) from None

    def _coerce(self, value: Any) -> float:
        return self._narrow(float(value))

    def _unmarshal(self, text: str) -> float:
        value = _parse_float(text)
        if value is None:
            raise ValueError(f"unrecognized {self._kind} syntax")
        if math.isinf(value) and not _SPECIAL_FLOAT.fullmatch(text):
            raise self._range_error(value)
        return self._narrow(value)

    def _check_value(self, value: Any) -> None:
        if not math.isfinite(value):
            raise ValueError("expected a finite number")
        super()._check_value(value)


def floating(name: str, desc: str, bits: int = 64) -> FloatBuilder:
    """Configure an environment variable as a floating-point number."""
    return FloatBuilder(name, desc, bits)


def signed(name: str, desc: str, bits: int = 64) -> SignedBuilder:
    """Configure an environment variable as a signed integer."""
    return SignedBuilder(name, desc, bits)


def unsigned(name: str, desc: str, bits: int = 64) -> UnsignedBuilder:
    """Configure an environment variable as an unsigned integer."""
    return UnsignedBuilder(name, desc, bits)