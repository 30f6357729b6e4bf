"""Footer metadata: bet id, placed time, stake and payout."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from bs4 import Tag

from ..utils.logger import get_module_logger
from ..utils.text import parse_money
from .dom import child_tags, element_text

logger = get_module_logger("footer")

_BET_ID_PATTERNS = [
    re.compile(r"BET ID:\s*([A-Z0-9/]+)(?=\s*PLACED)", re.I),
    re.compile(r"BET ID:\s*([A-Z0-9/]+)", re.I),
    re.compile(r"BET\s*ID[:\s]+([A-Z0-9/]+)", re.I),
    re.compile(r"BET\s*ID:([A-Z0-9/]+)", re.I),
]
_PLACED_SPAN_RE = re.compile(r"PLACED:\s*(.+?)(?:\s*$|\s*BET ID)", re.I)
_PLACED_TEXT_RE = re.compile(
    r"PLACED:\s*(\d{1,2}/\d{1,2}/\d{4}\s+\d{1,2}:\d{2}\s*[AP]M(?:\s*[A-Z]{1,4}\b)?)", re.I
)

STAKE_LABELS = ("TOTAL WAGER", "WAGER", "STAKE")
RETURNED_LABELS = ("RETURNED", "REFUNDED")


@dataclass
class FooterMeta:
    """Settlement data read from a card footer"""
    bet_id: Optional[str] = None
    placed_at_raw: Optional[str] = None
    stake: Optional[float] = None
    payout: Optional[float] = None
    has_won: bool = False
    raw_text: str = ""


def _dollar_amount(el: Optional[Tag]) -> Optional[float]:
    if el is None:
        return None
    span = el if el.name == "span" else el.find("span")
    text = element_text(span if span is not None else el)
    if "$" not in text:
        return None
    return parse_money(text)


def _first_amount(elements) -> Optional[float]:
    for el in elements:
        value = _dollar_amount(el)
        if value is not None:
            return value
    return None


def _amount_by_regex(text: str, label: str) -> Optional[float]:
    escaped = re.escape(label)
    for pattern in (
        rf"\$([0-9,]+(?:\.[0-9]{{2}})?)\s*{escaped}\b",
        rf"\b{escaped}\s*\$([0-9,]+(?:\.[0-9]{{2}})?)",
    ):
        m = re.search(pattern, text, re.I)
        if m:
            return parse_money(m.group(1))
    return None


def extract_labeled_amount(root: Tag, label: str) -> Optional[float]:
    """Dollar amount displayed next to a label such as "TOTAL WAGER".

    The amount may sit after or before the label inside the same parent,
    deeper inside the parent, a few spans away, or only in the text.
    """
    wanted = label.upper()
    spans: List[Tag] = root.find_all("span")
    label_span = next((s for s in spans if element_text(s).upper() == wanted), None)
    if label_span is None:
        return _amount_by_regex(element_text(root), label)

    parent = label_span.parent
    siblings = child_tags(parent) if parent is not None else []
    idx = next((i for i, el in enumerate(siblings) if el is label_span), -1)

    if idx >= 0:
        value = _first_amount(siblings[idx + 1:])
        if value is not None:
            return value
        value = _first_amount(reversed(siblings[:idx]))
        if value is not None:
            return value

    if parent is not None:
        value = _first_amount(s for s in parent.find_all("span") if s is not label_span)
        if value is not None:
            return value

    pos = next((i for i, s in enumerate(spans) if s is label_span), -1)
    if pos >= 0:
        window = spans[max(0, pos - 3): pos] + spans[pos + 1: pos + 3]
        value = _first_amount(window)
        if value is not None:
            return value

    if parent is not None:
        value = _first_amount(parent.find_all("div"))
        if value is not None:
            return value
        value = _first_amount(parent.find_previous_siblings())
        if value is not None:
            return value

    return _amount_by_regex(element_text(parent if parent is not None else root), label)


def _extract_bet_id(text: str) -> Optional[str]:
    for pattern in _BET_ID_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(1)
    return None


def _extract_placed(footer: Tag, text: str) -> Optional[str]:
    for span in footer.find_all("span"):
        span_text = element_text(span)
        if "PLACED:" not in span_text.upper():
            continue
        m = _PLACED_SPAN_RE.search(span_text)
        if m and m.group(1).strip():
            return m.group(1).strip()
    m = _PLACED_TEXT_RE.search(text)
    return m.group(1).strip() if m else None


def _first_labeled(footer: Tag, labels) -> Optional[float]:
    for label in labels:
        value = extract_labeled_amount(footer, label)
        if value is not None:
            return value
    return None


def extract_footer_meta(footer: Tag, book: str = "FanDuel") -> FooterMeta:
    text = element_text(footer)
    won_labels = (f"WON ON {book.upper()}", "WON", "PAID")

    stake = _first_labeled(footer, STAKE_LABELS)
    won = _first_labeled(footer, won_labels)
    returned = _first_labeled(footer, RETURNED_LABELS)

    payout = won if won is not None else returned
    meta = FooterMeta(
        bet_id=_extract_bet_id(text),
        placed_at_raw=_extract_placed(footer, text),
        stake=stake,
        payout=payout,
        has_won=won is not None,
        raw_text=text,
    )
    logger.debug("footer.extracted", bet_id=meta.bet_id, stake=stake, payout=payout,
                 has_won=meta.has_won)
    return meta
