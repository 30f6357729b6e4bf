"""
Tests for the text helpers: whitespace, money, odds and placed dates.
"""
from datetime import datetime, timezone

import pytest

from settled_bets.config.settings import DEFAULT_TIMEZONE_OFFSETS
from settled_bets.utils.text import (
    format_american_odds,
    normalize_spaces,
    parse_american_odds,
    parse_money,
    parse_placed_at,
    strip_date_time_noise,
    strip_scoreboard_text,
)


def test_normalize_spaces_collapses_unicode_whitespace():
    assert normalize_spaces("  Jalen\u00a0 Brunson\u200b\n25+ ") == "Jalen Brunson 25+"
    assert normalize_spaces(None) == ""


@pytest.mark.parametrize("text, expected", [
    ("$1,234.50", 1234.5),
    ("$0.00", 0.0),
    ("4.60", 4.6),
    ("N/A", None),
    (None, None),
])
def test_parse_money(text, expected):
    assert parse_money(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("+360", 360),
    ("-110", -110),
    ("\u2212110", -110),
    ("+1.5", 0),
    ("EVEN", 0),
    ("", 0),
])
def test_parse_american_odds(text, expected):
    assert parse_american_odds(text) == expected


def test_format_american_odds():
    assert format_american_odds(360) == "+360"
    assert format_american_odds(-110) == "-110"
    assert format_american_odds(0) == ""
    assert format_american_odds(None) == ""


def test_parse_placed_at_with_timezone_table():
    offsets = dict(DEFAULT_TIMEZONE_OFFSETS)
    assert parse_placed_at("11/18/2025 11:09PM ET", offsets) == "2025-11-18T23:09:00-05:00"
    assert parse_placed_at("12/01/2025 12:05AM PT", offsets) == "2025-12-01T00:05:00-08:00"
    assert parse_placed_at("7/4/2025 12:30PM", offsets) == "2025-07-04T12:30:00-05:00"


def test_parse_placed_at_unknown_zone_uses_default_offset():
    assert parse_placed_at("1/2/2025 9:00AM XYZ", {}, default_offset="+01:00") == (
        "2025-01-02T09:00:00+01:00"
    )


def test_parse_placed_at_falls_back_to_clock():
    """Unparsable and out-of-range dates both use the injected clock."""
    now = datetime(2025, 3, 1, 8, 30, 15, 999, tzinfo=timezone.utc)
    expected = "2025-03-01T08:30:15+00:00"
    assert parse_placed_at("soon", now=lambda: now) == expected
    assert parse_placed_at("13/40/2025 1:00PM ET", now=lambda: now) == expected
    assert parse_placed_at(None, now=lambda: now) == expected


def test_strip_date_time_noise_unglues_schedule():
    assert strip_date_time_noise("Jalen BrunsonNov 16, 8:12pm ET") == "Jalen Brunson"


def test_strip_scoreboard_text():
    assert strip_scoreboard_text("Orlando Magic -5.5 Finished Box Score Play-by-play") == (
        "Orlando Magic -5.5"
    )

