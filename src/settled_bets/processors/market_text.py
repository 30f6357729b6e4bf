"""
Market phrase parsing.

Turns free text such as "To Record 6+ Assists", "Over 24.5 Points" or
"Orlando Magic -5.5 Spread Betting" into a subject name and a
(type, line, ou) triple with short stat codes (Pts, Reb, Ast, 3pt, PRA...).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..utils.text import normalize_spaces, strip_date_time_noise
from .matchups import TEAM_NAMES, TEAM_NICKNAMES

PROP_MARKETS = {
    "Pts", "Reb", "Ast", "3pt", "PRA", "PR", "RA", "PA", "Stocks", "Stl",
    "Blk", "TO", "Yds", "Rec", "FB", "Top Pts", "DD", "TD",
}
NO_LINE_MARKETS = {"FB", "Top Pts", "DD", "TD", "Moneyline"}
MARKET_LABELS = {
    "Pts": "Points",
    "Reb": "Rebounds",
    "Ast": "Assists",
    "3pt": "Made Threes",
    "Stl": "Steals",
    "Blk": "Blocks",
    "TO": "Turnovers",
    "Yds": "Yards",
    "Rec": "Receptions",
    "PRA": "Pts + Reb + Ast",
    "PR": "Pts + Reb",
    "RA": "Reb + Ast",
    "PA": "Pts + Ast",
    "Stocks": "Steals + Blocks",
    "FB": "First Basket",
    "Top Pts": "Top Points Scorer",
    "DD": "Double Double",
    "TD": "Triple Double",
}

_PTS = re.compile(r"\bpoints?\b|\bpts\b")
_REB = re.compile(r"\brebounds?\b|\brebs?\b")
_AST = re.compile(r"\bassists?\b|\bast\b")
_STL = re.compile(r"\bsteals?\b|\bstl\b")
_BLK = re.compile(r"\bblocks?\b|\bblk\b")
_THREES = re.compile(r"made\s+threes?|3[\s-]?pointers?|\bthrees\b|\b3pt\b|\b3pm\b")

_MILESTONE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*\+")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_OU_RE = re.compile(r"\b(over|under)\s+\d", re.I)
_OU_ANY_RE = re.compile(r"\b(over|under)\b", re.I)
_ODDS_TOKEN_RE = re.compile(r"(?<![\w.])[+\-\u2212]\d{3,}(?![\d.])")
_SIGNED_RE = re.compile(r"(?<![\w.])([+\-]\d{1,2}(?:\.\d+)?)(?![\d.])")

_KEYWORDS = (
    r"Over|Under|To\s+(?:Record|Score)|Top\s+(?:Points?|Scorer|Pts)|First\s+(?:Basket|Field\s+Goal|FG)"
    r"|Money\s*line|Spread|Total|Made\s+Threes?|Threes|3PT|Triple[-\s]Double|Double[-\s]Double"
    r"|Points|Pts|Rebounds|Reb|Assists|Ast|Steals|Blocks|Turnovers|Yards|Yds|Receptions"
    r"|Alt|Passing|Rushing|Receiving|Anytime|PRA|Pts\s*\+"
)
_MARKET_START_RE = re.compile(
    rf"(?<![\w.])[+\-]?\d+(?:\.\d+)?\+?(?!\w)|\b(?:{_KEYWORDS})\b", re.I
)
_NAME_AFTER_PREFIX_RE = re.compile(
    r"^(?:Made\s+Threes?|Threes|Triple\s+Double|Double\s+Double)\s+([A-Z][A-Za-z'.\-]+(?:\s+[A-Z][A-Za-z'.\-]+)+)"
)
_DESCRIPTIVE_TAIL_RE = re.compile(
    r"alt\s+(?:receiving|rushing|yards|receptions)|[+\-]\d{3,}|@|\bvs\b|\bET\b"
    r"|\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b",
    re.I,
)

GENERIC_WORDS = {
    "made", "yards", "receptions", "available same game", "same game",
    "parlay", "parlay™", "parlaytm", "points", "rebounds", "assists", "threes",
}

_PREFIXES = [
    re.compile(p, re.I) for p in (
        r"^parlay™\s*", r"^parlay\s*", r"^available\s+same\s+game\s*", r"^same\s+game\s*",
        r"^play[-\s]+", r"^plus available[-\s]*", r"^includes[:\-\s]*",
        r"^made\s+threes?\s+", r"^to\s+record\s+(?:a\s+)?", r"^to\s+score\s+",
        r"^triple\s+double\s+", r"^alt\s+(?:receiving|rushing)\s+(?:yds|yards|receptions|rec)\s+",
        r"^alt\s+(?:receptions|receiving|rushing)\s+", r"^(?:points\s+)?void\s+",
    )
]
_SUFFIXES = [
    re.compile(p, re.I) for p in (
        r"\s+Top\s*$", r"\s+First\s*$", r"\.?\s*To\s+(?:Record|Score).*$", r"\s+To\s*$",
        r"\s+Triple\s+Double\s*$", r"\s+Double\s+Double\s*$",
        r"\s+\d+\+\s*(?:Yards|Yds|Receptions|Rec|Points|Pts|Rebounds|Reb|Assists|Ast|Made\s+Threes|3pt|Threes)\s*$",
        r"\s*-\s*Alt\s+(?:Receiving|Rushing)\s+(?:Yds|Yards|Receptions|Rec)\s*$",
        r"\s*\d+\+\s*Made.*$", r"\s*\d+\+\s*$", r"\s*[+\-]\d{2,}.*$",
        r"\s+(?:Spread(?:\s+Betting)?|Money\s*line|Total(?:\s+Points)?)\s*$",
        r"\s*[+\-]?\d+(?:\.\d+)?\s*$", r"\s*[+\-]\s*$", r"\s+Void(?:ed)?\s*$",
    )
]
_TEAM_PREFIX_RE = re.compile(
    r"^(?:" + "|".join(re.escape(t) for t in sorted(TEAM_NAMES, key=len, reverse=True)) + r")\s+"
    r"(?=[A-Z][A-Za-z'.\-]+\s+[A-Z])"
)
_NICKNAME_PREFIX_RE = re.compile(
    r"^(?:" + "|".join(re.escape(n.capitalize()) for n in sorted(TEAM_NICKNAMES)) + r")\s+"
    r"(?=[A-Z][A-Za-z'.\-]+\s+[A-Z])"
)


@dataclass
class MarketText:
    """Parsed market phrase"""
    type: str = ""
    line: str = ""
    ou: Optional[str] = None


@dataclass
class DerivedFields:
    """Subject and market fields read from one selection's text"""
    name: Optional[str] = None
    type: Optional[str] = None
    line: Optional[str] = None
    ou: Optional[str] = None


def stat_code(text: str) -> str:
    """Short code for a stat phrase, "" when nothing matches.

    Named props are checked first ("Top Points Scorer" mentions points),
    then combined stats before single stats.
    """
    s = (text or "").lower()
    if "first basket" in s or "first field goal" in s or "first fg" in s:
        return "FB"
    if "top scorer" in s or "top point" in s or "top pts" in s:
        return "Top Pts"
    if re.search(r"triple[\s-]*double", s):
        return "TD"
    if re.search(r"double[\s-]*double", s):
        return "DD"
    if _THREES.search(s):
        return "3pt"

    pts, reb, ast = bool(_PTS.search(s)), bool(_REB.search(s)), bool(_AST.search(s))
    if (pts and reb and ast) or re.search(r"\bpra\b", s):
        return "PRA"
    if pts and reb:
        return "PR"
    if reb and ast:
        return "RA"
    if pts and ast:
        return "PA"
    if (_STL.search(s) and _BLK.search(s)) or "stocks" in s:
        return "Stocks"

    if pts:
        return "Pts"
    if ast:
        return "Ast"
    if reb:
        return "Reb"
    if _STL.search(s):
        return "Stl"
    if _BLK.search(s):
        return "Blk"
    if re.search(r"\bturnovers?\b|\btov\b", s):
        return "TO"
    if re.search(r"\byards\b|\byds\b", s):
        return "Yds"
    if re.search(r"\breceptions?\b|\bcatches\b", s):
        return "Rec"
    return ""


def parse_market_text(text: str) -> MarketText:
    """Parse a market phrase into stat code, line and over/under.

    >>> parse_market_text("To Record 6+ Assists")
    MarketText(type='Ast', line='6+', ou=None)
    """
    cleaned = normalize_spaces(text)
    cleaned = re.sub(r"^to\s+record\s+(?:a\s+)?", "", cleaned, flags=re.I)

    m = _MILESTONE_RE.search(cleaned)
    if m:
        line = f"{m.group(1)}+"
    else:
        bare = _NUMBER_RE.search(cleaned)
        line = bare.group(0) if bare else ""

    ou_match = _OU_RE.search(cleaned)
    ou = ou_match.group(1).capitalize() if ou_match else None

    stat_text = re.sub(r"\d+(?:\.\d+)?\s*\+?", " ", cleaned)
    stat_text = re.sub(r"\b(?:over|under|to\s+record|to\s+score)\b", " ", stat_text, flags=re.I)
    stat_text = normalize_spaces(stat_text)

    return MarketText(type=stat_code(stat_text) or stat_text, line=line, ou=ou)


def guess_market_from_text(text: str) -> str:
    """Loose market guess for text with no structured market phrase"""
    upper = (text or "").upper()
    if "SPREAD" in upper:
        return "Spread"
    if re.search(r"MONEY\s*LINE", upper):
        return "Moneyline"
    code = stat_code(text)
    if code:
        return code
    if "TOTAL" in upper:
        return "Total"
    return ""


def extract_spread_target(text: str) -> Optional[str]:
    """First signed line that is not an odds value"""
    stripped = _ODDS_TOKEN_RE.sub(" ", text or "")
    for m in _SIGNED_RE.finditer(stripped):
        if abs(float(m.group(1))) <= 60:
            return m.group(1)
    return None


def strip_target_from_name(name: str, target: Optional[str]) -> str:
    if not name or not target:
        return name or ""
    return re.sub(rf"\s*{re.escape(target)}\s*$", "", name).strip()


def clean_entity_name(raw: Optional[str]) -> str:
    """Strip promo, market and odds fragments glued around a subject name"""
    if not raw:
        return ""
    cleaned = strip_date_time_noise(normalize_spaces(raw))

    head, sep, tail = cleaned.partition(",")
    if sep and (not tail.strip() or _DESCRIPTIVE_TAIL_RE.search(tail)):
        cleaned = head.strip()

    if cleaned.lower() in GENERIC_WORDS:
        return ""

    for pattern in _PREFIXES:
        cleaned = pattern.sub("", cleaned)
    cleaned = _TEAM_PREFIX_RE.sub("", cleaned)
    cleaned = _NICKNAME_PREFIX_RE.sub("", cleaned)
    # suffix patterns can expose one another, e.g. "Name 25+ Points -110"
    for _ in range(2):
        for pattern in _SUFFIXES:
            cleaned = pattern.sub("", cleaned).strip()

    words = cleaned.split()
    if len(words) >= 4 and [w.lower() for w in words[:2]] == [w.lower() for w in words[-2:]]:
        cleaned = " ".join(words[:2])

    cleaned = cleaned.strip(" ,-:")
    if cleaned.lower() in GENERIC_WORDS:
        return ""
    return cleaned


def _drop_descriptive_segments(desc: str) -> str:
    segments = [s.strip() for s in desc.split(",")]
    segments = [s for s in segments if s]
    if not segments:
        return ""
    kept = [segments[0]]
    lead = " ".join(segments[0].split()[:2]).lower()
    for seg in segments[1:]:
        if "@" in seg or re.search(r"\bvs\.?\b", seg, re.I):
            continue
        if re.search(r"\d{1,2}:\d{2}|\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b\s+\d", seg, re.I):
            continue
        if lead and seg.lower().startswith(lead):
            # "Name - Alt Receiving Yds" repeats the subject
            continue
        kept.append(seg)
    return " ".join(kept)


def derive_leg_fields(text: str) -> DerivedFields:
    """Split a selection's text into subject name and market fields.

    >>> derive_leg_fields("Cade Cunningham, To Score 25+ Points, +360")
    DerivedFields(name='Cade Cunningham', type='Pts', line='25+', ou=None)
    """
    desc = normalize_spaces(text).replace("\u2212", "-")
    desc = re.sub(r"\bOdds\s*(?=[+\-]\d)", " ", desc, flags=re.I)
    desc = _ODDS_TOKEN_RE.sub(" ", desc)
    desc = _drop_descriptive_segments(desc)
    if not desc:
        return DerivedFields()

    name_part, phrase = desc, ""
    prefixed = _NAME_AFTER_PREFIX_RE.match(desc)
    if prefixed:
        name_part = prefixed.group(1)
        phrase = desc[: prefixed.start(1)] + desc[prefixed.end(1):]
    else:
        start = _MARKET_START_RE.search(desc)
        if start:
            name_part, phrase = desc[: start.start()], desc[start.start():]

    fields = DerivedFields(name=clean_entity_name(name_part) or None)
    phrase = normalize_spaces(phrase)
    if not phrase:
        return fields

    upper = phrase.upper()
    ou_match = _OU_ANY_RE.search(phrase)
    fields.ou = ou_match.group(1).capitalize() if ou_match else None
    code = stat_code(phrase)

    if re.search(r"MONEY\s*LINE", upper):
        fields.type = "Moneyline"
        fields.ou = None
        return fields

    signed = extract_spread_target(phrase)
    if "SPREAD" in upper or (signed and not code and not fields.ou and "TOTAL" not in upper):
        fields.type = "Spread"
        fields.line = signed
        fields.ou = None
        return fields

    if re.search(r"\bTOTAL\b", upper) and code in ("", "Pts"):
        number = _NUMBER_RE.search(phrase)
        fields.type = "Total"
        fields.line = number.group(0) if number else None
        return fields

    parsed = parse_market_text(phrase)
    if code:
        fields.type = code
        fields.line = None if code in NO_LINE_MARKETS else (parsed.line or None)
        fields.ou = fields.ou or parsed.ou
    elif parsed.line:
        fields.line = parsed.line
    return fields
