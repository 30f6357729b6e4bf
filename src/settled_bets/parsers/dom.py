"""DOM helpers over BeautifulSoup trees: card discovery, odds and result icons.

bs4 compares tags structurally, so identity checks here use ``is``/``id()``.
"""
from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..processors.bet_data import LegResult
from ..processors.results import to_leg_result
from ..utils.logger import get_module_logger
from ..utils.text import normalize_spaces

logger = get_module_logger("dom")

ODDS_SELECTOR = 'span[aria-label^="Odds"]'

_BET_ID_MARKER_RE = re.compile(r"BET\s*ID", re.I)
_BET_ID_VALUE_RE = re.compile(r"BET\s*ID:?\s*([^\s<]+)", re.I)
_ODDS_SPAN_TEXT_RE = re.compile(r"^([+\-]\d{3,})$")
_ODDS_IN_TEXT_RE = re.compile(r"(?<![\w.])([+\-]\d{3,})\b")
_LEG_PARLAY_RE = re.compile(r"\d+\s+leg\s+parlay", re.I)
_VOID_TEXT_RE = re.compile(r"\bVoid(?:ed)?\b", re.I)

WIN_FILL = "#128000"
LOSS_FILL = "#d22839"
VOID_FILL = "#c15400"


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def element_text(el: Optional[Tag]) -> str:
    """Whitespace-normalized text content"""
    if el is None:
        return ""
    return normalize_spaces(el.get_text(" "))


def aria_label(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return normalize_spaces(el.get("aria-label") or "")


def is_within(node, ancestor: Tag) -> bool:
    """True when node is ancestor itself or one of its descendants"""
    if node is ancestor:
        return True
    return any(parent is ancestor for parent in node.parents)


def closest(el: Tag, name: str) -> Optional[Tag]:
    if el.name == name:
        return el
    return el.find_parent(name)


def element_parents(el: Tag) -> Iterator[Tag]:
    """Ancestors up to, not including, the document object"""
    for parent in el.parents:
        if isinstance(parent, BeautifulSoup):
            return
        yield parent


def child_tags(el: Tag) -> List[Tag]:
    return [c for c in el.children if isinstance(c, Tag)]


def unique_elements(elements) -> List[Tag]:
    seen = set()
    out = []
    for el in elements:
        if id(el) in seen:
            continue
        seen.add(id(el))
        out.append(el)
    return out


def has_odds_element(el: Tag) -> bool:
    return el.select_one(ODDS_SELECTOR) is not None


# ---------------------------------------------------------------------------
# Card discovery
# ---------------------------------------------------------------------------

def find_bet_id_markers(soup: BeautifulSoup) -> List[Tuple[Tag, str]]:
    """Elements holding a "BET ID: xxx" marker, in document order"""
    markers: List[Tuple[Tag, str]] = []
    for node in soup.find_all(string=_BET_ID_MARKER_RE):
        if isinstance(node, Comment) or not isinstance(node, NavigableString):
            continue
        parent = node.parent
        if parent is None or parent.name in ("script", "style"):
            continue
        # the id may live in a sibling span: "BET ID:" <span>O/123</span>
        for holder in [parent] + list(element_parents(parent))[:2]:
            m = _BET_ID_VALUE_RE.search(element_text(holder))
            if m and not m.group(1).upper().startswith("PLACED"):
                markers.append((parent, m.group(1)))
                break
    logger.debug("dom.bet_id_markers", count=len(markers))
    return markers


def _quorum(el: Tag) -> int:
    upper = element_text(el).upper()
    signals = [
        "WAGER" in upper,
        "RETURNED" in upper or "PAID" in upper or "WON ON" in upper,
        "PLACED:" in upper,
        has_odds_element(el),
        "SAME GAME PARLAY" in upper,
    ]
    return sum(signals)


def find_card_root(start: Tag) -> Optional[Tag]:
    """Walk up from a bet-id element until enough card markers are present"""
    node: Optional[Tag] = start
    while node is not None and not isinstance(node, BeautifulSoup):
        text = element_text(node).upper()
        if "BET ID" in text and _quorum(node) >= 2:
            return node
        node = node.parent
    return None


def is_footer_like(el: Tag, won_label: str = "WON ON FANDUEL") -> bool:
    text = element_text(el).lower()
    if "bet id" in text:
        return True
    return "total wager" in text and won_label.lower() in text


def has_leg_content(el: Tag) -> bool:
    """Whether an element carries selection content besides footer data"""
    if el.select_one(ODDS_SELECTOR) is not None:
        return True
    return any(
        tag.name != "span" and aria_label(tag)
        for tag in el.find_all(attrs={"aria-label": True})
    )


def find_footer_element(marker: Tag) -> Optional[Tag]:
    """Nearest list item around the marker, else the quorum card root"""
    li = closest(marker, "li")
    if li is not None:
        return li
    return find_card_root(marker)


def find_header_for_footer(footer: Tag, won_label: str = "WON ON FANDUEL") -> Optional[Tag]:
    """Locate the header region that belongs to a footer.

    Multi-leg cards render header and footer in one element; otherwise the
    header is the closest preceding sibling item that is not another footer.
    """
    if _LEG_PARLAY_RE.search(element_text(footer)):
        return footer

    if footer.name == "li":
        for prev in footer.find_previous_siblings("li"):
            if "bet id" in element_text(prev).lower():
                # belongs to the previous card
                break
            if not is_footer_like(prev, won_label):
                return prev

    if has_leg_content(footer):
        return footer

    if footer.name == "li":
        card = find_card_root(footer)
        if card is not None and card is not footer and has_leg_content(card):
            return card
    return None


# ---------------------------------------------------------------------------
# Odds
# ---------------------------------------------------------------------------

def _odds_from_spans(el: Tag) -> str:
    span = el.select_one(ODDS_SELECTOR)
    txt = element_text(span) if span is not None else ""
    if txt:
        return txt
    for span in el.find_all("span"):
        m = _ODDS_SPAN_TEXT_RE.match(element_text(span).replace("\u2212", "-"))
        if m:
            return m.group(1)
    return ""


def extract_odds(root: Optional[Tag], climb: bool = True) -> Optional[int]:
    """American odds for an element using a ladder of DOM shapes.

    Tries the element's own odds span, odds-shaped spans, ancestors up to the
    enclosing list item, siblings, then raw text. Returns None when nothing
    looks like odds. Card-level callers pass climb=False so neighbouring
    cards are never consulted.
    """
    if root is None:
        return None
    txt = _odds_from_spans(root)
    climb = climb and root.name != "li"

    if not txt and climb:
        for parent in element_parents(root):
            txt = _odds_from_spans(parent)
            if txt or parent.name == "li":
                break

    if not txt and climb and root.parent is not None and not isinstance(root.parent, BeautifulSoup):
        for sibling in child_tags(root.parent):
            if sibling is root:
                continue
            span = sibling.select_one(ODDS_SELECTOR)
            if span is not None and element_text(span):
                txt = element_text(span)
                break
            m = _ODDS_IN_TEXT_RE.search(element_text(sibling))
            if m:
                txt = m.group(1)
                break

    if not txt:
        for m in _ODDS_IN_TEXT_RE.finditer(element_text(root).replace("\u2212", "-")):
            if abs(int(m.group(1))) >= 100:
                txt = m.group(1)
                break

    if not txt:
        return None
    txt = re.sub(r"[^+\-0-9]", "", txt.replace("\u2212", "-"))
    m = re.search(r"[+\-]?\d+", txt)
    return int(m.group(0)) if m else None


# ---------------------------------------------------------------------------
# Result icons
# ---------------------------------------------------------------------------

def icon_result(node: Tag) -> Optional[LegResult]:
    """Result signalled by one svg/path node, or None"""
    node_id = (node.get("id") or "").lower()
    fill = (node.get("fill") or "").lower()
    if fill == WIN_FILL:
        return LegResult.WIN
    if fill == LOSS_FILL:
        return LegResult.LOSS
    if "cross-circle" in node_id or "cross_circle" in node_id:
        return LegResult.LOSS
    if "tick-circle" in node_id or "tick_circle" in node_id:
        return LegResult.WIN
    if fill == VOID_FILL or "warning" in node_id:
        return LegResult.PUSH
    return None


def _icons_in(root: Tag) -> Optional[LegResult]:
    targets = [root] if root.name in ("svg", "path") else []
    targets.extend(root.find_all(["svg", "path"]))
    for svg in root.find_all("svg"):
        targets.extend(svg.find_all(True))
    for node in targets:
        res = icon_result(node)
        if res is not None:
            return res
    return None


def _holds_other_rows(ancestor: Tag, row: Tag) -> bool:
    for tag in ancestor.find_all(attrs={"aria-label": True}):
        if tag.name == "span" or is_within(tag, row) or is_within(row, tag):
            continue
        return True
    return False


def extract_leg_result_from_row(
    row: Tag,
    fallback_parent: Optional[Tag] = None,
    fallback=None,
) -> LegResult:
    """Result for one leg row from icons near it.

    Ancestors are searched only while they wrap this row alone, so icons of
    neighbouring legs never leak in. Without any signal the fallback is used.
    """
    search: List[Tag] = [row]
    for depth, parent in enumerate(element_parents(row)):
        if depth >= 4 or _holds_other_rows(parent, row):
            break
        search.append(parent)
    if fallback_parent is not None and not _holds_other_rows(fallback_parent, row):
        search.append(fallback_parent)

    for el in unique_elements(search):
        res = _icons_in(el)
        if res is not None:
            return res

    if _VOID_TEXT_RE.search(element_text(row)):
        return LegResult.PUSH
    return to_leg_result(fallback)
