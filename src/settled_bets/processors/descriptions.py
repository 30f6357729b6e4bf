"""Human-readable descriptions, bet names, market category and sport."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from ..utils.text import normalize_spaces, strip_date_time_noise
from .bet_data import BetLeg, BetType, GroupLeg, Selection
from .market_text import PROP_MARKETS, clean_entity_name
from .matchups import NBA_NICKNAMES, NFL_NICKNAMES, shorten_matchup

MAX_DESCRIPTION = 200

_PROMO_PATTERNS = [
    re.compile(p, re.I) for p in (
        r"\s*(?:same\s+game\s+)?parlay\s+available\s*",
        r"\s*available\s+same\s+game\s*",
        r"\bparlay\s*™",
        r"™",
        r"^same\s+game\s+parlay\s*",
        r"^includes[:\s]*",
        r"^plus\s+available\s*",
        r"\s*Current\s+\w+:\s*\d+\s*",
        r"\s*Finished\s*",
        r"\s*(?:Box\s+Score|Play-by-play).*$",
        r"\b\d{6,}\b",
    )
]
_OU_LABELS = {
    "Reb": "Rebounds",
    "Yds": "Yards",
    "Rec": "Receptions",
    "Ast": "Assists",
    "3pt": "Made Threes",
}
_TEAM_TOKENS = NBA_NICKNAMES | NFL_NICKNAMES | {"trail"}


def truncate(text: str, limit: int = MAX_DESCRIPTION) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3].strip() + "..."


def strip_promo_text(text: Optional[str]) -> str:
    """Remove promo banners, trademark signs and scoreboard debris"""
    cleaned = normalize_spaces(text)
    for pattern in _PROMO_PATTERNS:
        cleaned = pattern.sub(" ", cleaned)
    cleaned = normalize_spaces(cleaned)
    return re.sub(r"^,\s*|\s*,\s*$", "", cleaned).strip()


def clean_parlay_leg_text(leg: str) -> str:
    """Trim team words glued in front of a "Name To Record ..." phrase"""
    normalized = strip_date_time_noise(leg)
    normalized = normalize_spaces(re.sub(r"Finished|\b\d{6,}\b", " ", normalized, flags=re.I))
    m = re.search(r"\b(?:To Record|To Score|\d+\+\s+Made Threes|Made Threes)\b", normalized, re.I)
    if m and m.start() > 0:
        before, after = normalized[: m.start()].split(), normalized[m.start():]
        tokens = before[-3:]
        while len(tokens) > 1 and tokens[0].lower() in _TEAM_TOKENS:
            tokens = tokens[1:]
        normalized = f"{' '.join(tokens)} {after}"
    return normalize_spaces(normalized)


def format_description(
    description: str,
    type: Optional[str] = None,
    name: Optional[str] = None,
    line: Optional[str] = None,
    ou: Optional[str] = None,
) -> str:
    """Canonical single-bet description from its derived fields"""
    cleaned = strip_promo_text(description)
    if not cleaned and not name and type != "Total":
        return ""

    if "Spread Betting" in cleaned and "," in cleaned:
        return truncate(re.sub(r",\s*", ", ", re.sub(r"\s*Spread Betting\s*", " ", cleaned)).strip(" ,"))

    if type == "Total" and line and ou:
        return f"{ou} {line} Total Points"

    if not name:
        return truncate(re.sub(r"TOTAL POINTS", "Total Points", cleaned, flags=re.I))

    if type == "Pts" and line:
        if ou:
            return f"{name} {ou} {line} Points"
        if line.endswith("+"):
            return f"{name} To Score {line} Points"
        return f"{name} {line} Points"

    if type == "Spread" and line:
        return f"{name} {line} Spread"

    if type == "Moneyline":
        return f"{name} Moneyline"

    if ou and line and type in _OU_LABELS:
        return f"{name} {ou} {line} {_OU_LABELS[type]}"

    return truncate(re.sub(r"TOTAL POINTS", "Total Points", cleaned, flags=re.I))


def format_leg_summary(leg: BetLeg) -> str:
    """Short text for one leg, e.g. "Orlando Magic -5.5" or "Jalen Brunson 25+ Pts" """
    if isinstance(leg, GroupLeg):
        child_summary = ", ".join(s for s in (format_leg_summary(c) for c in leg.children) if s)
        label = f"Same Game Parlay - {leg.target}" if leg.target else "Same Game Parlay"
        return f"{label}: {child_summary}" if child_summary else label

    name = clean_entity_name(leg.entity)
    market = leg.market or ""
    target = leg.target or ""
    lowered = market.lower()

    if lowered == "spread" and target:
        return f"{name} {target}" if name else target
    if lowered == "moneyline":
        return f"{name} Moneyline" if name else "Moneyline"
    if lowered == "3pt":
        made = f"{target} Made Threes" if target else "Made Threes"
        return f"{name} {made}" if name else made
    if lowered == "total" and target:
        return normalize_spaces(f"{name} {leg.ou or ''} {target} Total")

    if name and target and market:
        return f"{name} {target} {market}"
    if name and market:
        return f"{name} {market}"
    if market and target:
        return f"{target} {market}"
    return name or market


def format_parlay_description(legs: Iterable[BetLeg]) -> str:
    return ", ".join(s for s in (format_leg_summary(leg) for leg in legs) if s)


def _child_summaries(group: GroupLeg) -> List[str]:
    return [s for s in (format_leg_summary(c) for c in group.children) if s]


def _is_ladder(groups: Sequence[GroupLeg]) -> bool:
    markets = {c.market.lower() for g in groups for c in g.children if c.market}
    return 0 < len(markets) <= 2


def format_sgp_description(groups: Sequence[GroupLeg], legs: Sequence[BetLeg]) -> str:
    """Condensed text for a plain same game parlay"""
    if len(groups) == 1 and len(groups[0].children) <= 3:
        group = groups[0]
        joined = ", ".join(_child_summaries(group))
        return truncate(f"{joined} {group.target}".strip() if group.target else joined)
    return truncate(format_parlay_description(legs))


def build_sgp_plus_description(groups: Sequence[GroupLeg], extras: Sequence[Selection]) -> str:
    """'{N}-leg Same Game Parlay Plus: SGP (matchup) + extra' style text"""
    total = sum(len(g.children) for g in groups) + len(extras)
    extra_text = [format_leg_summary(e) for e in extras]

    if len(groups) > 1:
        if not extras and _is_ladder(groups):
            return truncate(", ".join(s for g in groups for s in _child_summaries(g)))
        parts = []
        for group in groups:
            markets = sorted({c.market for c in group.children if c.market})
            label = shorten_matchup(group.target) or "/".join(markets)
            parts.append(f"SGP ({label})" if label else "SGP")
        return truncate(f"{total}-leg Same Game Parlay Plus: " + " + ".join(parts + extra_text))

    if groups:
        group = groups[0]
        inner = ", ".join(_child_summaries(group))
        matchup = shorten_matchup(group.target)
        label = f"SGP ({matchup} - {inner})" if matchup else f"SGP ({inner})"
        return truncate(" + ".join([f"{total}-leg Same Game Parlay Plus: {label}"] + extra_text))

    return truncate(format_parlay_description(extras))


def bet_name(bet_type: BetType, leg_count: int) -> Optional[str]:
    if bet_type is BetType.SGP:
        return f"SGP ({leg_count} legs)" if leg_count >= 4 else "SGP"
    if bet_type is BetType.SGP_PLUS:
        return "SGP+"
    if bet_type is BetType.PARLAY:
        return f"Parlay ({leg_count})"
    return None


def infer_market_category(bet_type: BetType, market: Optional[str] = None, text: str = "") -> str:
    if bet_type is not BetType.SINGLE:
        return "Parlays"
    if market in PROP_MARKETS:
        return "Props"
    if re.search(r"\bfutures?\b|\bto win the\b|\bchampionship\b|\bmvp\b", text or "", re.I):
        return "Futures"
    return "Main Markets"


def infer_sport(text: str, markets: Iterable[str] = ()) -> Optional[str]:
    """Sport from leg markets, then keywords, then team nicknames"""
    codes = {m.upper() for m in markets if m}
    if codes & {"YDS", "REC"}:
        return "NFL"
    if codes & {"PTS", "REB", "AST", "3PT", "PRA", "PR", "RA", "PA", "STOCKS", "STL", "BLK",
                "TO", "FB", "TOP PTS", "DD", "TD"}:
        return "NBA"

    upper = (text or "").upper()
    if re.search(r"YARDS|YDS|RECEPTIONS|\bREC\b", upper) and not re.search(r"POINTS|REBOUNDS|ASSISTS", upper):
        return "NFL"
    if re.search(r"POINTS|REBOUNDS|ASSISTS|MADE THREES|3PT", upper) and not re.search(r"YARDS|RECEPTIONS", upper):
        return "NBA"

    for sport, pattern in (
        ("NFL", r"\bNFL\b|FOOTBALL"),
        ("NBA", r"\bNBA\b|BASKETBALL"),
        ("MLB", r"\bMLB\b|BASEBALL"),
        ("NHL", r"\bNHL\b|HOCKEY"),
        ("Soccer", r"SOCCER|PREMIER LEAGUE|\bMLS\b"),
        ("Tennis", r"TENNIS|\bATP\b|\bWTA\b"),
    ):
        if re.search(pattern, upper):
            return sport

    words = set(re.findall(r"[a-z0-9]+", (text or "").lower()))
    if words & NBA_NICKNAMES:
        return "NBA"
    if words & NFL_NICKNAMES:
        return "NFL"
    return None
