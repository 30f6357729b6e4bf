"""Header fields of a bet card: description, market fields, odds, sport."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from bs4 import Tag

from ..processors.bet_data import BetType
from ..processors.descriptions import (
    clean_parlay_leg_text,
    format_description,
    infer_sport,
    strip_promo_text,
    truncate,
)
from ..processors.market_text import derive_leg_fields
from ..utils.text import normalize_spaces, strip_scoreboard_text
from .dom import aria_label, element_text, extract_odds
from .leg_rows import PLAYER_NAME_PATTERN

_ODDS_TOKEN_RE = re.compile(r"(?<![\w.])[+\-\u2212]\d{3,}(?![\d.])")
_SPREAD_SPAN_RE = re.compile(r"Spread Betting.*,.*[+\-]\d", re.I)
_SPREAD_TEXT_RE = re.compile(
    r"([A-Z][A-Za-z.' ]+?\s+[+\-]\d+(?:\.\d+)?)\s*,?\s*Spread Betting", re.I
)
_PROP_LEG_RE = re.compile(
    rf"({PLAYER_NAME_PATTERN}\s+(?:To Record|To Score)\s+\d+\+\s+(?:Made Threes|\w+))"
)
_MADE_THREES_RE = re.compile(rf"({PLAYER_NAME_PATTERN})\s+(\d+\+)\s+Made Threes")
_NAME_MARKET_RE = re.compile(
    rf"({PLAYER_NAME_PATTERN})\s*,?\s*((?:To Record|To Score|Over|Under)\s+[\d.]+\+?\s*[A-Za-z ]+?)"
    r"(?=,|\s[+\-]\d|$)"
)
_OVER_LINE_RE = re.compile(r"\b(?:Over|Under)\s+(\d+(?:\.\d+)?)", re.I)
_LIVE_RE = re.compile(r"live bet|in-play", re.I)


@dataclass
class HeaderInfo:
    description: str = ""
    name: Optional[str] = None
    type: Optional[str] = None
    line: Optional[str] = None
    ou: Optional[str] = None
    odds: Optional[int] = None
    sport: Optional[str] = None
    is_live: bool = False


def clean_description_from_aria(aria: str) -> str:
    """Drop odds tokens and the "Odds" label from an aria-label"""
    cleaned = normalize_spaces(aria).replace("\u2212", "-")
    cleaned = re.sub(r"\bOdds\b", " ", cleaned, flags=re.I)
    cleaned = _ODDS_TOKEN_RE.sub(" ", cleaned)
    cleaned = normalize_spaces(cleaned)
    cleaned = re.sub(r"(?:\s*,)+\s*$", "", cleaned)
    return re.sub(r"\s*,\s*,\s*", ", ", cleaned).strip()


def _first_aria(header: Tag) -> str:
    labelled = header.find_all(attrs={"aria-label": True})
    preferred = [t for t in labelled if t.name != "span" and aria_label(t)]
    if preferred:
        return aria_label(preferred[0])
    for tag in labelled:
        label = aria_label(tag)
        if label and not label.lower().startswith("odds"):
            return label
    return ""


def _parlay_description(header: Tag, raw: str) -> str:
    for span in header.find_all("span"):
        text = element_text(span)
        if _SPREAD_SPAN_RE.search(text):
            return normalize_spaces(re.sub(r"Spread Betting", " ", text, flags=re.I)).strip(" ,")

    spreads = [normalize_spaces(m.group(1)) for m in _SPREAD_TEXT_RE.finditer(raw)]
    if spreads:
        return ", ".join(spreads)

    parts: List[str] = []
    after_sgp = raw.split("Same Game Parlay", 1)[-1]
    legs = [clean_parlay_leg_text(m.group(1)) for m in _PROP_LEG_RE.finditer(after_sgp)]
    if len(legs) >= 2:
        parts.extend(legs)
    for m in _MADE_THREES_RE.finditer(raw):
        extra = clean_parlay_leg_text(f"{m.group(1)} {m.group(2)} Made Threes")
        if extra not in parts:
            parts.append(extra)
    return ", ".join(parts)


def _single_description(header: Tag, raw: str) -> str:
    aria = _first_aria(header)
    if aria:
        return clean_description_from_aria(aria)
    m = _NAME_MARKET_RE.search(raw)
    if m:
        return normalize_spaces(f"{m.group(1)} {m.group(2)}")
    return " ".join(raw.split()[:5])


def extract_header_info(header: Tag, bet_type: BetType) -> HeaderInfo:
    """Read description and market fields from a card header.

    Multi-leg headers only yield a description and odds; legs carry the
    market fields.
    """
    raw = element_text(header)
    info = HeaderInfo(
        odds=extract_odds(header, climb=False),
        is_live=bool(_LIVE_RE.search(raw)),
    )

    if bet_type is not BetType.SINGLE:
        description = _parlay_description(header, raw) or strip_scoreboard_text(raw)
        info.description = truncate(strip_promo_text(description))
        info.sport = infer_sport(raw)
        return info

    description = _single_description(header, raw)
    fields = derive_leg_fields(description)
    info.name, info.type, info.line, info.ou = fields.name, fields.type, fields.line, fields.ou
    if info.ou and not info.line:
        m = _OVER_LINE_RE.search(raw)
        if m:
            info.line = m.group(1)

    info.sport = infer_sport(raw, [info.type] if info.type else [])
    info.description = format_description(description, info.type, info.name, info.line, info.ou)
    return info
