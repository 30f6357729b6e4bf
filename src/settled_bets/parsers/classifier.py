"""Bet-type classification from header text and leg-row count."""
from __future__ import annotations

import re
from typing import Sequence

from ..processors.bet_data import BetType
from .leg_rows import MARKET_RE, is_sgp_plus_text

_SGP_RE = re.compile(r"same\s+game\s+parlay", re.I)
_N_LEG_PARLAY_RE = re.compile(r"\b\d+\s+leg\s+parlay\b", re.I)
_N_LEG_RE = re.compile(r"\b\d+\s+leg\b", re.I)
_PARLAY_RE = re.compile(r"\bparlay\b(?!\s*available)", re.I)
_INCLUDES_RE = re.compile(r"includes:\s*\d+\s+same\s+game\s+parlays?", re.I)


def _is_promo_only(text: str) -> bool:
    """"Same Game Parlay Available" banners with no selection content"""
    return "parlay available" in text.lower() and not MARKET_RE.search(text)


def classify_bet_type(
    text: str,
    aria: str = "",
    leg_count: int = 0,
    spans: Sequence[str] = (),
) -> BetType:
    """First matching rule wins: sgp_plus, sgp, N-leg parlay, generic parlay,
    a parlay-and-leg span, repeated spread rows, then single.

    >>> classify_bet_type("3 leg parlay")
    <BetType.PARLAY: 'parlay'>
    """
    combined = f"{text or ''} {aria or ''}".strip()

    if is_sgp_plus_text(combined):
        return BetType.SGP_PLUS

    has_sgp = bool(_SGP_RE.search(combined))
    if has_sgp and not _is_promo_only(combined):
        return BetType.SGP

    if _N_LEG_PARLAY_RE.search(combined):
        return BetType.PARLAY

    if _PARLAY_RE.search(combined) and "parlay available" not in combined.lower() and leg_count >= 2:
        multiple = combined.count(",") >= 2 or bool(_N_LEG_RE.search(combined))
        if multiple:
            return BetType.SGP if re.search(r"same\s+game", combined, re.I) else BetType.PARLAY

    if any("parlay" in s.lower() and "leg" in s.lower() for s in spans or ()):
        return BetType.PARLAY

    # several spread rows under one header
    if (text or "").count("Spread Betting") >= 2 and leg_count >= 2:
        return BetType.PARLAY

    return BetType.SINGLE


def correct_bet_type(bet_type: BetType, text: str, leg_count: int) -> BetType:
    """Re-flag a collapsed nested-SGP ticket as SGP+"""
    if bet_type in (BetType.PARLAY, BetType.SGP_PLUS) and leg_count == 1 and _INCLUDES_RE.search(text or ""):
        return BetType.SGP_PLUS
    return bet_type
