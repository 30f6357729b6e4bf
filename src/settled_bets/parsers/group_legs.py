"""Same-game-parlay group legs for SGP and SGP+ tickets."""
from __future__ import annotations

import re
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

from bs4 import Tag

from ..processors.bet_data import GroupLeg, LegResult, Selection
from ..processors.leg_merge import merge_legs
from ..processors.matchups import clean_matchup_target, find_matchup_in_text, matchup_near
from ..processors.results import aggregate_child_results, to_leg_result
from ..utils.logger import get_module_logger
from ..utils.text import format_american_odds, strip_scoreboard_text
from .dom import element_text, extract_odds, has_odds_element
from .leg_builders import build_legs_from_rows
from .leg_rows import find_leg_rows_within, find_sgp_group_containers

logger = get_module_logger("group_legs")

_ODDS_MATCHUP_RE = re.compile(r"([+\-]\d{3,})\s+(?=[A-Z])")


def extract_odds_matchups(raw: str) -> Dict[int, str]:
    """Map "{odds} {Team A} @ {Team B}" occurrences in header text to matchups"""
    found: Dict[int, str] = {}
    text = (raw or "").replace("\u2212", "-")
    for m in _ODDS_MATCHUP_RE.finditer(text):
        matchup = find_matchup_in_text(text[m.end(): m.end() + 90])
        if matchup:
            found.setdefault(int(m.group(1)), matchup)
    return found


def _container_matchup(
    container: Tag,
    odds: Optional[int],
    odds_matchups: Dict[int, str],
    raw_card: str,
) -> Optional[str]:
    matchup = clean_matchup_target(strip_scoreboard_text(element_text(container)))
    if not matchup and odds is not None:
        matchup = odds_matchups.get(odds)
    if not matchup:
        matchup = clean_matchup_target(raw_card)
    return matchup


def build_group_leg_from_container(
    container: Tag,
    others: Sequence[Tag] = (),
    ticket_odds: Optional[int] = None,
    fallback=None,
    odds_matchups: Optional[Dict[int, str]] = None,
    raw_card: str = "",
) -> Optional[GroupLeg]:
    """One GroupLeg from an SGP container, or None when it has no legs.

    Child odds are always dropped; children without an icon take the
    ticket result.
    """
    rows = find_leg_rows_within(container, others)
    children = [
        leg for leg in merge_legs(build_legs_from_rows(rows, container, fallback, skip_odds=True))
        if isinstance(leg, Selection)
    ]
    if not children:
        return None

    odds = extract_odds(container, climb=False) if has_odds_element(container) else None
    if odds is None:
        odds = ticket_odds
    matchup = _container_matchup(container, odds, odds_matchups or {}, raw_card)
    return GroupLeg(
        children=children,
        target=matchup,
        odds=odds,
        result=aggregate_child_results(children, fallback),
        matchup=matchup,
    )


def build_sgp_group_legs(
    card: Tag,
    ticket_odds: Optional[int] = None,
    fallback=None,
    raw_header: str = "",
    raw_card: str = "",
) -> Tuple[List[GroupLeg], List[Tag]]:
    """Group legs for every SGP container in the card, plus the containers"""
    containers = find_sgp_group_containers(card)
    odds_matchups = extract_odds_matchups(raw_header)
    groups: List[GroupLeg] = []
    for container in containers:
        group = build_group_leg_from_container(
            container, containers, ticket_odds, fallback, odds_matchups, raw_card
        )
        if group is not None:
            groups.append(group)
    logger.debug("groups.built", containers=len(containers), groups=len(groups))
    return groups, containers


def wrap_as_group(
    legs: Sequence[Selection],
    odds: Optional[int],
    fallback=None,
    raw_card: str = "",
) -> GroupLeg:
    """Single group over every leg, for SGP cards without a container"""
    children = [
        Selection(entities=list(l.entities), market=l.market, target=l.target, ou=l.ou,
                  result=l.result, matchup=l.matchup)
        for l in legs
    ]
    matchup = clean_matchup_target(raw_card)
    return GroupLeg(
        children=children,
        target=matchup,
        odds=odds,
        result=aggregate_child_results(children, fallback),
        matchup=matchup,
    )


def group_legs_by_shared_odds(
    legs: Sequence[Selection],
    raw_header: str = "",
    fallback=None,
) -> Tuple[List[GroupLeg], List[Selection]]:
    """Cluster legs that show the same odds value into synthetic group legs.

    Returns the groups and the legs that stayed ungrouped.
    """
    buckets: "OrderedDict[int, List[Selection]]" = OrderedDict()
    for leg in legs:
        if leg.odds is not None:
            buckets.setdefault(leg.odds, []).append(leg)

    groups: List[GroupLeg] = []
    grouped_ids = set()
    for odds, bucket in buckets.items():
        if len(bucket) < 2:
            continue
        grouped_ids.update(id(l) for l in bucket)
        idx = raw_header.find(format_american_odds(odds))
        matchup = clean_matchup_target(matchup_near(raw_header, idx)) if idx >= 0 else None
        children = [
            Selection(entities=list(l.entities), market=l.market, target=l.target, ou=l.ou,
                      result=l.result, matchup=l.matchup)
            for l in bucket
        ]
        groups.append(GroupLeg(
            children=children,
            target=matchup,
            odds=odds,
            result=aggregate_child_results(children, fallback),
            matchup=matchup,
        ))
    remaining = [l for l in legs if id(l) not in grouped_ids]
    return groups, remaining


def footer_disagrees(groups: Sequence[GroupLeg], legs: Sequence[Selection], ticket_result) -> bool:
    """All settled leg signals WIN while the footer says LOSS"""
    if to_leg_result(ticket_result) is not LegResult.LOSS:
        return False
    signals = [r for r in
               [c.result for g in groups for c in g.children] + [l.result for l in legs]
               if r is not LegResult.PENDING]
    return bool(signals) and all(r is LegResult.WIN for r in signals)
