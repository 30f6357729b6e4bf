"""Leg-row and same-game-parlay container discovery inside one bet card."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from bs4 import Tag

from .dom import (
    ODDS_SELECTOR,
    aria_label,
    closest,
    element_parents,
    element_text,
    extract_odds,
    has_odds_element,
    is_within,
    unique_elements,
)

PLAYER_NAME_PATTERN = r"[A-Z][A-Za-z'.\-]+(?:\s+[A-Z][A-Za-z'.\-]+)*"

MARKET_RE = re.compile(
    r"\b(?:SPREAD BETTING|SPREAD|MONEYLINE|TOTAL|TO RECORD|TO SCORE|MADE THREES|ASSISTS|REBOUNDS"
    r"|POINTS|OVER|UNDER|YARDS|RECEPTIONS|REC|YDS|STEALS|BLOCKS|TRIPLE DOUBLE|DOUBLE DOUBLE"
    r"|FIRST BASKET|TOP POINTS)\b",
    re.I,
)
_FOOTER_RE = re.compile(r"TOTAL WAGER|BET ID|PLACED:", re.I)
_LEG_PARLAY_RE = re.compile(r"\bleg parlay\b", re.I)
_SGP_RE = re.compile(r"same game parlay", re.I)
_SGP_PARENT_RE = re.compile(r"parlay\s*\+(?!\s*\d{3})|parlay plus|includes:", re.I)
_SCOREBOARD_RE = re.compile(r"\d{1,3}\s+\d{1,3}\s*Finished|Box Score|Play-by-play", re.I)
_LEG_TEXT_RE = re.compile(
    rf"(?:{PLAYER_NAME_PATTERN})\s+(?:"
    r"(?i:to\s+record|to\s+score)\s+(?:(?i:a\s+)?(?i:triple\s+double|double\s+double)|\d+\+\s+\w+)"
    r"|\d+\+\s+(?i:made\s+threes|yards|receptions|points|assists|rebounds|yds|rec)"
    r"|(?i:over|under)\s+\d+(?:\.\d+)?)"
)


def is_sgp_plus_text(text: str) -> bool:
    lower = (text or "").lower()
    return (
        "same game parlay plus" in lower
        or "same game parlay+" in lower
        or bool(re.search(r"includes:\s*\d+\s+same\s+game\s+parlay", lower))
    )


def _is_row_like(node: Tag, allow_marketless: bool = False) -> bool:
    aria = aria_label(node)
    text = element_text(node)
    has_market = bool(MARKET_RE.search(aria) or MARKET_RE.search(text))
    if _LEG_PARLAY_RE.search(aria) or _SGP_RE.search(aria):
        return False
    if _LEG_PARLAY_RE.search(text) and not has_market:
        return False
    if _FOOTER_RE.search(text) or re.search(r"TOTAL WAGER", aria, re.I):
        return False
    if not re.search(r"[A-Za-z]{3,}", aria or text):
        return False
    if has_market:
        return True
    return allow_marketless or has_odds_element(node)


def _text_pattern_rows(root: Tag) -> List[Tag]:
    """Innermost divs whose text reads like "Name To Record 10+ Assists"."""
    matches = []
    for div in root.find_all("div"):
        text = element_text(div)
        if not _LEG_TEXT_RE.search(text):
            continue
        if _FOOTER_RE.search(text) or _SCOREBOARD_RE.search(text) or _LEG_PARLAY_RE.search(text):
            continue
        matches.append(div)
    return [d for d in matches if not any(o is not d and is_within(o, d) for o in matches)]


def _keep_outermost(nodes: Sequence[Tag]) -> List[Tag]:
    return [n for n in nodes if not any(o is not n and is_within(n, o) for o in nodes)]


def _keep_innermost(nodes: Sequence[Tag]) -> List[Tag]:
    return [n for n in nodes if not any(o is not n and is_within(o, n) for o in nodes)]


def _dedupe_by_text(nodes: Sequence[Tag]) -> List[Tag]:
    seen = set()
    out = []
    for node in nodes:
        key = element_text(node).lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(node)
    return out


def _base_candidates(root: Tag) -> List[Tag]:
    candidates = [el for el in root.find_all(attrs={"aria-label": True}) if el.name != "span"]
    for span in root.select(ODDS_SELECTOR):
        div = closest(span, "div")
        if div is not None and is_within(div, root):
            candidates.append(div)
    return unique_elements(candidates)


def find_leg_rows(card: Tag) -> List[Tag]:
    """Selection-like blocks of a card, skipping footer and scoreboard content.

    SGP+ cards keep the innermost rows so nested-SGP legs stay visible;
    other cards keep the outermost candidate of each nest.
    """
    card_text = element_text(card)
    sgp_plus = is_sgp_plus_text(card_text)
    candidates = _base_candidates(card)
    if not candidates and _SGP_RE.search(card_text):
        candidates = _text_pattern_rows(card)

    filtered = [n for n in candidates if _is_row_like(n, allow_marketless=False)]
    if sgp_plus:
        filtered = _keep_innermost(filtered)
    else:
        filtered = _keep_outermost(filtered)
    return _dedupe_by_text(filtered)


def _qualifies_as_sgp_container(el: Tag) -> bool:
    text = element_text(el)
    if not _SGP_RE.search(text) or _SGP_PARENT_RE.search(text):
        return False
    if has_odds_element(el):
        return True
    if (el.get("role") or "").lower() == "button":
        return any(
            t.name != "span" and aria_label(t) for t in el.find_all(attrs={"aria-label": True})
        )
    return False


def find_sgp_group_containers(root: Tag) -> List[Tag]:
    """Nested same-game-parlay blocks, innermost first per odds value"""
    candidates = [d for d in root.find_all("div") if _qualifies_as_sgp_container(d)]
    candidates = _keep_innermost(candidates)
    by_odds: Dict[Optional[int], Tag] = {}
    ordered: List[Tag] = []
    for container in candidates:
        odds = extract_odds(container, climb=False)
        if odds is not None and odds in by_odds:
            continue
        by_odds[odds] = container
        ordered.append(container)
    return ordered


def _belongs_to_other_container(node: Tag, container: Tag, others: Sequence[Tag]) -> bool:
    if any(o is not container and is_within(node, o) for o in others):
        return True
    if node is not container and _qualifies_as_sgp_container(node):
        return True
    for parent in element_parents(node):
        if parent is container:
            return False
        if _qualifies_as_sgp_container(parent):
            return True
    return False


def find_leg_rows_within(container: Tag, others: Sequence[Tag] = ()) -> List[Tag]:
    """Leg rows of one SGP block, never crossing into a sibling block"""
    candidates = [c for c in _base_candidates(container) if c is not container]
    if not candidates:
        candidates = [c for c in _text_pattern_rows(container) if c is not container]
    rows = [
        c for c in candidates
        if not _belongs_to_other_container(c, container, others)
        and _is_row_like(c, allow_marketless=False)
    ]
    return _dedupe_by_text(_keep_innermost(rows))
