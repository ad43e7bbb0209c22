"""
Tests for duration parsing.
"""

import pytest

from service_tokens.app.timespan import parse_duration, timespan


@pytest.mark.parametrize("value, expected", [
    (60, 60),
    (0, 0),
    (-3600, -3600),
    (1.9, 1),
    ("10m", 600),
    ("10 m", 600),
    ("2 days", 172800),
    ("1.5h", 5400),
    ("-10m", -600),
    ("1w", 604800),
    ("1y", 31557600),
    ("30s", 30),
    ("1000", 1),
    ("1500", 1),
    ("500ms", 0),
    ("2 HOURS", 7200),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "10 parsecs", "1.2.3s", True, None, [10], float("inf")])
def test_parse_duration_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_timespan_offsets_base():
    assert timespan("10m", 1000) == 1600
    assert timespan(-10, 1000) == 990
