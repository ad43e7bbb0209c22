"""
Duration parsing for ``expires_in``, ``not_before`` and ``max_age``.

Integers are seconds. Strings follow the ``ms`` grammar ("10m", "2 days",
"1.5h", "-10m"); a string without a unit is milliseconds. Results are
floored to whole seconds.
"""

import math
import re
from typing import Union

Duration = Union[int, float, str]

_SECOND = 1000
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24
_WEEK = _DAY * 7
_YEAR = _DAY * 365.25

_UNITS = {
    "years": _YEAR, "year": _YEAR, "yrs": _YEAR, "yr": _YEAR, "y": _YEAR,
    "weeks": _WEEK, "week": _WEEK, "w": _WEEK,
    "days": _DAY, "day": _DAY, "d": _DAY,
    "hours": _HOUR, "hour": _HOUR, "hrs": _HOUR, "hr": _HOUR, "h": _HOUR,
    "minutes": _MINUTE, "minute": _MINUTE, "mins": _MINUTE, "min": _MINUTE, "m": _MINUTE,
    "seconds": _SECOND, "second": _SECOND, "secs": _SECOND, "sec": _SECOND, "s": _SECOND,
    "milliseconds": 1, "millisecond": 1, "msecs": 1, "msec": 1, "ms": 1,
}

_PATTERN = re.compile(r"^(-?(?:\d+)?\.?\d+) *([a-z]+)?$", re.IGNORECASE)


def parse_duration(value: Duration) -> int:
    """Convert a duration to whole seconds, raising ``ValueError`` if unparseable."""
    if isinstance(value, bool):
        raise ValueError("duration must be a number of seconds or a timespan string")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError("duration must be finite")
        return math.floor(value)
    if not isinstance(value, str) or not value or len(value) > 100:
        raise ValueError("duration must be a number of seconds or a timespan string")

    match = _PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"invalid timespan: {value!r}")

    amount = float(match.group(1))
    unit = (match.group(2) or "ms").lower()
    if unit not in _UNITS:
        raise ValueError(f"invalid timespan unit: {unit!r}")

    return math.floor(amount * _UNITS[unit] / 1000)


def timespan(value: Duration, base: int) -> int:
    """Return ``base`` shifted by the duration ``value``."""
    return base + parse_duration(value)
