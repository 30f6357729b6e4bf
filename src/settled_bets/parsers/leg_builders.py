"""
Leg builders.

Each builder reads selections from a different signal (structured rows,
the header description, raw card text, span pairs, the header itself).
Their outputs overlap on purpose and are reconciled by
``processors.leg_merge.dedupe_legs``.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from bs4 import Tag

from ..processors.bet_data import LegResult, Selection
from ..processors.leg_merge import dedupe_legs
from ..processors.market_text import (
    GENERIC_WORDS,
    MARKET_LABELS,
    clean_entity_name,
    derive_leg_fields,
    guess_market_from_text,
    strip_target_from_name,
)
from ..processors.matchups import TEAM_NICKNAMES, find_matchup_in_text
from ..utils.logger import get_module_logger
from ..utils.text import normalize_spaces, strip_scoreboard_text
from .dom import aria_label, element_text, extract_leg_result_from_row, extract_odds
from .header import clean_description_from_aria
from .leg_rows import MARKET_RE, PLAYER_NAME_PATTERN

logger = get_module_logger("leg_builders")

_STAT_WORD = r"(?:Made\s+Threes|[A-Za-z]+)"
_STAT_TEXT_PATTERNS = [
    re.compile(rf"({PLAYER_NAME_PATTERN})\s*,?\s+((?i:to\s+record|to\s+score)\s+\d+\+\s+{_STAT_WORD})"),
    re.compile(rf"({PLAYER_NAME_PATTERN})\s*,?\s+(\d+\+\s+(?i:made\s+threes))"),
    re.compile(rf"({PLAYER_NAME_PATTERN})\s*,?\s+((?i:over|under)\s+\d+(?:\.\d+)?\s+{_STAT_WORD})"),
    re.compile(rf"({PLAYER_NAME_PATTERN})\s*,?\s+((?i:to\s+record\s+a\s+)(?i:triple|double)\s+(?i:double))"),
]
_NAME_SPAN_RE = re.compile(rf"^{PLAYER_NAME_PATTERN}$")
_MARKET_SPAN_RE = re.compile(
    r"^(?:(?:To Record|To Score)\s+(?:a\s+)?)?(?:(?:Over|Under)\s+)?\d+(?:\.\d+)?\+?\s+[A-Za-z ]+$"
    r"|^To Record a (?:Triple|Double) Double$",
    re.I,
)
_MARKET_LABEL_WORDS = {label.lower() for label in MARKET_LABELS.values()}
_SIGNED_LINE_RE = re.compile(r"(?<![\w.])[+\-]\d{1,2}(?:\.\d+)?(?![\d.])")
_NAME_STOP_WORDS = {
    "to", "record", "score", "over", "under", "made", "threes", "same", "game", "parlay",
    "includes", "selection", "spread", "betting", "moneyline", "total", "finished",
} | _MARKET_LABEL_WORDS


def _row_text(row: Tag) -> str:
    label = aria_label(row) if row.name != "span" else ""
    if label and MARKET_RE.search(label):
        return clean_description_from_aria(label)
    return strip_scoreboard_text(element_text(row))


def _selection(text: str, result=None, odds: Optional[int] = None,
               matchup: Optional[str] = None) -> Optional[Selection]:
    fields = derive_leg_fields(text)
    if not fields.name and not fields.type:
        return None
    market = fields.type or guess_market_from_text(text) or "Other"
    name = fields.name or ""
    if market == "Spread":
        name = strip_target_from_name(name, fields.line)
    return Selection(
        entities=[name] if name else [],
        market=market,
        target=fields.line,
        ou=fields.ou,
        odds=odds,
        result=result or LegResult.PENDING,
        matchup=matchup,
    )


def parse_leg_from_node(
    row: Tag,
    fallback_parent: Optional[Tag] = None,
    result=None,
    skip_odds: bool = False,
) -> Optional[Selection]:
    """Build one selection from a leg-row element.

    ``result`` is the ticket-level fallback used when the row shows no icon.
    Inner SGP rows pass ``skip_odds`` since their odds are never shown.
    """
    text = _row_text(row)
    if not text:
        return None
    odds = None if skip_odds else extract_odds(row, climb=False)
    leg_result = extract_leg_result_from_row(row, fallback_parent, fallback=result)
    return _selection(text, leg_result, odds, find_matchup_in_text(element_text(row)))


def parse_leg_from_text(text: str, result=None) -> Optional[Selection]:
    """Selection from free text; a subject name is required"""
    leg = _selection(normalize_spaces(text), result)
    if leg is None or not leg.entity:
        return None
    return leg


def build_legs_from_rows(
    rows: Iterable[Tag],
    fallback_parent: Optional[Tag] = None,
    result=None,
    skip_odds: bool = False,
) -> List[Selection]:
    legs = []
    for row in rows:
        leg = parse_leg_from_node(row, fallback_parent, result, skip_odds)
        if leg is not None:
            legs.append(leg)
    return legs


def build_legs_from_description(description: str, result=None) -> List[Selection]:
    legs = []
    for segment in re.split(r"\s*[,;]\s*", description or ""):
        if not segment or not (MARKET_RE.search(segment) or _SIGNED_LINE_RE.search(segment)):
            continue
        leg = parse_leg_from_text(segment, result)
        if leg is not None:
            legs.append(leg)
    return legs


def _trim_captured_name(name: str) -> str:
    # the name pattern can run over team words or a previous stat phrase
    tokens = name.split()
    stops = [i for i, t in enumerate(tokens) if t.lower() in _NAME_STOP_WORDS]
    if stops:
        tokens = tokens[stops[-1] + 1:]
    tokens = tokens[-3:]
    while len(tokens) > 2 and (
        tokens[0].lower() in TEAM_NICKNAMES
        or tokens[0].lower() in GENERIC_WORDS
        or tokens[0].lower() in _MARKET_LABEL_WORDS
    ):
        tokens = tokens[1:]
    if len(tokens) < 2:
        return ""
    return clean_entity_name(" ".join(tokens))


def build_legs_from_stat_text(raw: str, result=None) -> List[Selection]:
    """Last-resort legs read straight from rendered card text"""
    text = strip_scoreboard_text(raw)
    legs: List[Selection] = []
    for pattern in _STAT_TEXT_PATTERNS:
        for m in pattern.finditer(text):
            name = _trim_captured_name(m.group(1))
            if not name:
                continue
            leg = parse_leg_from_text(f"{name} {m.group(2)}", result)
            if leg is not None:
                legs.append(leg)
    return legs


def build_legs_from_spans(card: Tag, result=None) -> List[Selection]:
    """Pair market-phrase spans with the closest preceding name span"""
    legs: List[Selection] = []
    last_name: Optional[str] = None
    for span in card.find_all("span"):
        if span.find("span") is not None:
            continue
        text = element_text(span)
        if not text:
            continue
        if _MARKET_SPAN_RE.match(text) and MARKET_RE.search(text):
            name = _trim_captured_name(last_name) if last_name else ""
            if name:
                leg = parse_leg_from_text(f"{name} {text}", result)
                if leg is not None:
                    legs.append(leg)
            last_name = None
        elif _NAME_SPAN_RE.match(text) and 2 <= len(text.split()) <= 4 and not MARKET_RE.search(text):
            last_name = text
    return legs


def build_legs_from_header(header: Tag, result=None) -> List[Selection]:
    leg = parse_leg_from_node(header, result=result)
    return [leg] if leg is not None else []


def collect_legs(
    card: Tag,
    rows: Sequence[Tag],
    description: str = "",
    raw: str = "",
    result=None,
) -> List[Selection]:
    """Union every builder's legs, then dedupe.

    The header itself is only used when nothing else produced a leg.
    """
    fallback = result
    legs: List[Selection] = []
    legs.extend(build_legs_from_rows(rows, result=fallback))
    legs.extend(build_legs_from_description(description))
    legs.extend(build_legs_from_stat_text(raw))
    legs.extend(build_legs_from_spans(card))
    merged = dedupe_legs(legs)
    if not merged:
        merged = dedupe_legs(build_legs_from_header(card, result=fallback))
    logger.debug("legs.collected", rows=len(rows), candidates=len(legs), kept=len(merged))
    return [leg for leg in merged if isinstance(leg, Selection)]
