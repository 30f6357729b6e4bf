"""Team dictionaries and "Team A @ Team B" matchup detection."""
from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..utils.text import normalize_spaces, strip_date_time_noise, strip_scoreboard_text

NBA_TEAMS = [
    "Atlanta Hawks", "Boston Celtics", "Brooklyn Nets", "Charlotte Hornets",
    "Chicago Bulls", "Cleveland Cavaliers", "Dallas Mavericks", "Denver Nuggets",
    "Detroit Pistons", "Golden State Warriors", "Houston Rockets", "Indiana Pacers",
    "Los Angeles Clippers", "Los Angeles Lakers", "Memphis Grizzlies", "Miami Heat",
    "Milwaukee Bucks", "Minnesota Timberwolves", "New Orleans Pelicans",
    "New York Knicks", "Oklahoma City Thunder", "Orlando Magic",
    "Philadelphia 76ers", "Phoenix Suns", "Portland Trail Blazers",
    "Sacramento Kings", "San Antonio Spurs", "Toronto Raptors", "Utah Jazz",
    "Washington Wizards",
]

NFL_TEAMS = [
    "Arizona Cardinals", "Atlanta Falcons", "Baltimore Ravens", "Buffalo Bills",
    "Carolina Panthers", "Chicago Bears", "Cincinnati Bengals", "Cleveland Browns",
    "Dallas Cowboys", "Denver Broncos", "Detroit Lions", "Green Bay Packers",
    "Houston Texans", "Indianapolis Colts", "Jacksonville Jaguars",
    "Kansas City Chiefs", "Las Vegas Raiders", "Los Angeles Chargers",
    "Los Angeles Rams", "Miami Dolphins", "Minnesota Vikings",
    "New England Patriots", "New Orleans Saints", "New York Giants",
    "New York Jets", "Philadelphia Eagles", "Pittsburgh Steelers",
    "San Francisco 49ers", "Seattle Seahawks", "Tampa Bay Buccaneers",
    "Tennessee Titans", "Washington Commanders",
]

TEAM_NAMES = NBA_TEAMS + NFL_TEAMS

_TEAM_NAMES_LOWER = {name.lower(): name for name in TEAM_NAMES}

TEAM_NICKNAMES = {name.split()[-1].lower() for name in TEAM_NAMES} | {
    "blazers", "niners", "sixers", "wolves",
}

NBA_NICKNAMES = {name.split()[-1].lower() for name in NBA_TEAMS} | {"blazers", "sixers"}
NFL_NICKNAMES = {name.split()[-1].lower() for name in NFL_TEAMS} | {"niners"}

# Only long city+nickname combos whose city alone is distinctive
TEAM_SHORT_NAMES: Dict[str, str] = {
    "Golden State Warriors": "Golden State",
    "New Orleans Pelicans": "New Orleans",
    "Detroit Pistons": "Detroit",
    "Los Angeles Lakers": "Lakers",
    "Los Angeles Clippers": "Clippers",
    "Portland Trail Blazers": "Portland",
    "Orlando Magic": "Orlando",
    "San Francisco 49ers": "San Francisco",
    "Kansas City Chiefs": "Kansas City",
    "Denver Broncos": "Denver",
    "Baltimore Ravens": "Baltimore",
    "Cleveland Browns": "Cleveland",
    "Arizona Cardinals": "Arizona",
    "Dallas Mavericks": "Dallas",
}

_TEAM_WORD = r"(?:[A-Z][A-Za-z'.]+|\d{2}ers)"
_TEAM_PHRASE = rf"{_TEAM_WORD}(?:\s+{_TEAM_WORD}){{0,2}}"
_AT_RE = re.compile(rf"({_TEAM_PHRASE})\s+@\s+({_TEAM_PHRASE})")
_VS_RE = re.compile(rf"({_TEAM_PHRASE})\s+(?:vs\.?|v\.)\s+({_TEAM_PHRASE})", re.I)
_STAT_NOISE_RE = re.compile(r"Rebounds|Record|Assists|Points|Made|Yards|Receptions|Threes", re.I)
_SPLIT_RE = re.compile(r"\s+@\s+|\s+vs\.?\s+", re.I)
_LEADING_LABEL_RE = re.compile(r"^(?:Same Game Parlay™?|Parlay|Threes|Made Threes|Double|TD)\s+", re.I)
_MONTH_RE = re.compile(r"(?<=[a-z])(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\b\.?")
_SCORE_RE = re.compile(rf"({_TEAM_PHRASE})\s+\d{{2,}}(?:\s+\d{{2,}})*\s+({_TEAM_PHRASE})")


def strip_trailing_player_name(matchup: str) -> str:
    """Cut anything captured after the second team's nickname."""
    parts = _SPLIT_RE.split(matchup)
    if len(parts) != 2:
        return matchup
    separator = " @ " if "@" in matchup else " vs "
    team1 = _strip_leading_words(parts[0].strip())
    words = parts[1].split()
    for i in range(len(words) - 1, -1, -1):
        if words[i].lower() in TEAM_NICKNAMES:
            words = words[: i + 1]
            break
    return f"{team1}{separator}{' '.join(words)}"


def _strip_leading_words(team: str) -> str:
    # "Hart Boston Celtics" -> "Boston Celtics"
    words = team.split()
    for i in range(len(words)):
        if " ".join(words[i:]).lower() in _TEAM_NAMES_LOWER:
            return " ".join(words[i:])
    return team


def find_matchup_in_text(text: str) -> Optional[str]:
    """Shortest clean "A @ B" (or "A vs B") phrase in the text."""
    if not text:
        return None
    cleaned = strip_scoreboard_text(text)
    best: Optional[str] = None
    for pattern, sep in ((_AT_RE, "@"), (_VS_RE, "vs")):
        for m in pattern.finditer(cleaned):
            candidate = normalize_spaces(f"{m.group(1)} {sep} {m.group(2)}")
            if _STAT_NOISE_RE.search(candidate):
                continue
            candidate = strip_trailing_player_name(candidate)
            if best is None or len(candidate) < len(best):
                best = candidate
        if best:
            return best
    return best


def infer_matchup_from_teams(text: str) -> Optional[str]:
    """Build "A @ B" from the first two known team names in the text"""
    if not text:
        return None
    lower = text.lower()
    hits = []
    for name in TEAM_NAMES:
        idx = lower.find(name.lower())
        if idx != -1:
            hits.append((idx, name))
    hits.sort()
    unique: List[str] = []
    for _, name in hits:
        if name not in unique:
            unique.append(name)
        if len(unique) == 2:
            return f"{unique[0]} @ {unique[1]}"
    return None


def _looks_like_team(name: str) -> bool:
    if re.search(r"finished|box\s*score|play.by.play", name, re.I):
        return False
    words = name.split()
    if len(words) == 2 and words[-1].lower() not in TEAM_NICKNAMES:
        # "First Last" reads as a player
        return False
    return True


def clean_matchup_target(text: Optional[str]) -> Optional[str]:
    """Reduce free text to a bare matchup string, or None"""
    if not text:
        return None
    normalized = normalize_spaces(strip_date_time_noise(text))
    normalized = _MONTH_RE.sub("", normalized)
    normalized = _LEADING_LABEL_RE.sub("", normalized)

    direct = find_matchup_in_text(normalized)
    if direct:
        return direct

    from_teams = infer_matchup_from_teams(normalized)
    if from_teams:
        return from_teams

    m = _SCORE_RE.search(normalized)
    if m:
        team1, team2 = normalize_spaces(m.group(1)), normalize_spaces(m.group(2))
        if _looks_like_team(team1) and _looks_like_team(team2):
            return f"{team1} @ {team2}"
    return None


def shorten_matchup(matchup: Optional[str]) -> str:
    if not matchup:
        return ""
    shortened = matchup
    for full, short in TEAM_SHORT_NAMES.items():
        shortened = re.sub(re.escape(full), short, shortened, flags=re.I)
    return shortened


def matchup_near(text: str, index: int, before: int = 100, after: int = 140) -> Optional[str]:
    """Matchup found in a window of text around an index"""
    if index < 0:
        return None
    window = text[max(0, index - before): index + after]
    return find_matchup_in_text(window) or infer_matchup_from_teams(window)

