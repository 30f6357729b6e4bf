"""Text normalization helpers shared by every parsing stage.

All functions are pure: they take strings and return strings or numbers,
and never raise on malformed input.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Dict, Optional

from .logger import get_module_logger

logger = get_module_logger("text")

_WS_RE = re.compile(r"[\s\u200b]+")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_ODDS_RE = re.compile(r"^[+\-]?\d+$")

# 11/18/2025 11:09PM ET
_PLACED_RE = re.compile(
    r"(\d{1,2})/(\d{1,2})/(\d{4})\s+(\d{1,2}):(\d{2})\s*(AM|PM)\s*([A-Z]{1,4})?",
    re.I,
)

_MONTH_TIME_RE = re.compile(
    r"[A-Z][a-z]{2}\s+\d{1,2},\s*\d{1,2}:\d{2}\s*(?:am|pm)\s*[ECMP][SD]?T", re.I
)
_TIME_RE = re.compile(r"\b\d{1,2}:\d{2}\s*(?:am|pm)\s*[ECMP][SD]?T\b", re.I)
_GLUED_MONTH_RE = re.compile(
    r"(?<=[a-z])(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{1,2},\s*\d{1,2}:\d{2}\s*(?:am|pm)\s*[ECMP][SD]?T",
    re.I,
)

_SCOREBOARD_TAIL_RE = re.compile(r"(?:Box\s+Score|Play-by-play).*$", re.I)
_PERIOD_SCORES_RE = re.compile(r"\b\d{1,3}\b(?:\s+\d{1,3}){3,}")
_LONG_DIGITS_RE = re.compile(r"\b\d{6,}\b")
_TRAILING_PAIR_RE = re.compile(r"\s+\d{1,3}\s+\d{1,3}\s*$")
_GAME_SCORE_RE = re.compile(r"\b\d{3,6}\s+\d{3,6}\b")


def normalize_spaces(text: Optional[str]) -> str:
    """Collapse whitespace runs (including non-breaking ones) to a single space"""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def parse_money(text: Optional[str]) -> Optional[float]:
    """Parse "$1,234.50" style amounts.

    Returns None when no digits are present.
    """
    if not text:
        return None
    cleaned = re.sub(r"[^0-9.\-]", "", text)
    m = _NUMBER_RE.search(cleaned)
    if not m:
        return None
    return float(m.group(0))


def parse_american_odds(text: Optional[str]) -> int:
    """Parse "+360" / "-110" / "\u2212110" odds, 0 when unparsable"""
    if not text:
        return 0
    cleaned = text.replace("\u2212", "-").replace("+", "")
    cleaned = re.sub(r"\s+", "", cleaned)
    if not _ODDS_RE.match(cleaned):
        return 0
    return int(cleaned)


def format_american_odds(odds: Optional[int]) -> str:
    if not odds:
        return ""
    return f"+{odds}" if odds > 0 else str(odds)


def parse_placed_at(
    raw: Optional[str],
    offsets: Optional[Dict[str, str]] = None,
    default_offset: str = "-05:00",
    now: Optional[Callable[[], datetime]] = None,
) -> str:
    """Convert "M/D/YYYY h:mmAM TZ" to "YYYY-MM-DDTHH:MM:00+HH:MM".

    The timezone abbreviation is looked up in ``offsets``; unknown or missing
    abbreviations use ``default_offset``. Unparsable input yields the current
    time from ``now``.
    """
    text = normalize_spaces(raw)
    m = _PLACED_RE.search(text)
    if m:
        month, day, year, hour, minute = (int(g) for g in m.groups()[:5])
        meridiem = m.group(6).upper()
        tz_abbr = (m.group(7) or "").upper()
        if meridiem == "PM" and hour != 12:
            hour += 12
        elif meridiem == "AM" and hour == 12:
            hour = 0
        try:
            datetime(year, month, day, hour, minute)
        except ValueError:
            logger.debug("dates.unparsable", raw=text, reason="out_of_range")
        else:
            offset = (offsets or {}).get(tz_abbr, default_offset) if tz_abbr else default_offset
            return f"{year:04d}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:00{offset}"
    else:
        logger.debug("dates.unparsable", raw=text)

    current = (now or datetime.now)()
    return current.replace(microsecond=0).isoformat()


def strip_date_time_noise(text: Optional[str]) -> str:
    """Remove schedule fragments glued to names, e.g. "Nov 16, 8:12pm ET" """
    if not text:
        return ""
    cleaned = _GLUED_MONTH_RE.sub(" ", text)
    cleaned = _MONTH_TIME_RE.sub(" ", cleaned)
    cleaned = _TIME_RE.sub(" ", cleaned)
    return normalize_spaces(cleaned)


def strip_scoreboard_text(text: Optional[str]) -> str:
    """Remove live-score blobs, "Finished" markers and box score links"""
    cleaned = normalize_spaces(text)
    cleaned = re.sub(r"Finished", " ", cleaned, flags=re.I)
    cleaned = _SCOREBOARD_TAIL_RE.sub(" ", cleaned)
    cleaned = strip_date_time_noise(cleaned)
    cleaned = _PERIOD_SCORES_RE.sub(" ", cleaned)
    cleaned = _LONG_DIGITS_RE.sub(" ", cleaned)
    cleaned = _TRAILING_PAIR_RE.sub(" ", cleaned)
    cleaned = _GAME_SCORE_RE.sub(" ", cleaned)
    return normalize_spaces(cleaned)
