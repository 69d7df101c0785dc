"""Duration variables.

Durations are represented as integer numbers of nanoseconds; the unit
constants in this module make them convenient to build.
"""

from __future__ import annotations

import json
import operator
import re
from datetime import timedelta
from typing import Any

from .numeric import _NumericBuilder

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "\u00b5s": MICROSECOND,
    "\u03bcs": MICROSECOND,
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_LIMIT = 1 << 63
_NUMBER = re.compile(r"([0-9]*)(?:\.([0-9]*))?")
_UNIT = re.compile(r"[^0-9.]*")
_TRAILING_ZERO_UNITS = re.compile(r"(?<=[a-z\u00b5])(?:0[a-z\u00b5]+)+$")


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def parse_duration(text: str) -> int:
    """Parse a duration such as "300ms", "-1.5h" or "2h45m" into nanoseconds."""
    invalid = ValueError(f"invalid duration {_quote(text)}")
    rest = text
    negative = False
    if rest[:1] in ("-", "+"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return 0
    if not rest:
        raise invalid

    total = 0
    while rest:
        if not (rest[0] == "." or rest[0].isascii() and rest[0].isdigit()):
            raise invalid
        number = _NUMBER.match(rest)
        whole_digits = number.group(1)
        frac_digits = number.group(2) or ""
        if not whole_digits and not frac_digits:
            raise invalid
        whole = int(whole_digits) if whole_digits else 0
        if whole > _LIMIT:
            raise invalid
        rest = rest[number.end():]

        unit_match = _UNIT.match(rest)
        unit_text = unit_match.group(0)
        if not unit_text:
            raise ValueError("missing unit")
        rest = rest[unit_match.end():]
        unit = _UNITS.get(unit_text)
        if unit is None:
            raise ValueError(f"unknown unit {_quote(unit_text)}")

        if whole > _LIMIT // unit:
            raise invalid
        amount = whole * unit

        fraction = 0
        scale = 1.0
        for ch in frac_digits:
            candidate = fraction * 10 + int(ch)
            if candidate > _LIMIT:
                break
            fraction = candidate
            scale *= 10
        if fraction:
            amount += int(float(fraction) * (float(unit) / scale))
            if amount > _LIMIT:
                raise invalid

        total += amount
        if total > _LIMIT:
            raise invalid

    if negative:
        return -total
    if total > _LIMIT - 1:
        raise invalid
    return total


def _fraction(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10**precision)
    text = str(whole)
    if frac:
        text += "." + f"{frac:0{precision}d}".rstrip("0")
    return text


def _long_form(value: int) -> str:
    """Render a duration with every unit down to seconds, e.g. "1h0m0s"."""
    if value == 0:
        return "0s"
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude < MICROSECOND:
        return f"{sign}{magnitude}ns"
    if magnitude < MILLISECOND:
        return f"{sign}{_fraction(magnitude, 3)}\u00b5s"
    if magnitude < SECOND:
        return f"{sign}{_fraction(magnitude, 6)}ms"

    seconds, nanos = divmod(magnitude, SECOND)
    text = _fraction((seconds % 60) * SECOND + nanos, 9) + "s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


def _to_nanoseconds(value: Any) -> int:
    if isinstance(value, timedelta):
        return (value.days * 86400 + value.seconds) * SECOND + value.microseconds * MICROSECOND
    return operator.index(value)


def format_duration(value: Any) -> str:
    """Render a duration in its shortest form, dropping trailing zero units."""
    return _TRAILING_ZERO_UNITS.sub("", _long_form(_to_nanoseconds(value)))


class DurationBuilder(_NumericBuilder):
    """Builds a specification for a duration variable.

    The minimum is one nanosecond unless configured otherwise.
    """

    def __init__(self, name: str, desc: str) -> None:
        super().__init__(name, desc, "duration", format_duration)
        self._min = NANOSECOND

    def with_default(self, value: Any) -> DurationBuilder:
        """Set the value used when the variable is undefined or empty."""
        self._set_default(value)
        return self

    def with_minimum(self, value: Any) -> DurationBuilder:
        """Set the minimum acceptable duration."""
        self._set_minimum(value)
        return self

    def with_maximum(self, value: Any) -> DurationBuilder:
        """Set the maximum acceptable duration."""
        self._set_maximum(value)
        return self

    def _coerce(self, value: Any) -> int:
        return _to_nanoseconds(value)

    def _unmarshal(self, text: str) -> int:
        return parse_duration(text.replace(" ", ""))


def duration(name: str, desc: str) -> DurationBuilder:
    """Configure an environment variable as a duration."""
    return DurationBuilder(name, desc)