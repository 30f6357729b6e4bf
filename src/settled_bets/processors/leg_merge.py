"""Leg deduplication and merging.

Builders produce overlapping views of the same selections. Two legs are
duplicates when entity and market match and the targets are equal or one
of them is missing.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Set

from .bet_data import BetLeg, GroupLeg, LegResult, Selection
from .market_text import GENERIC_WORDS, PROP_MARKETS

_RESULT_RANK = {
    LegResult.WIN: 4,
    LegResult.LOSS: 3,
    LegResult.PUSH: 2,
    LegResult.PENDING: 1,
    LegResult.UNKNOWN: 0,
}
_STAT_WORDS = {
    "points", "rebounds", "assists", "yards", "receptions", "threes", "made threes",
    "steals", "blocks", "turnovers", "spread", "moneyline", "total",
}
_PROMO_RE = re.compile(r"parlay|available|includes|same game|box score|play-by-play|finished", re.I)
_ALT_RE = re.compile(r"^alt\b", re.I)


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def leg_keys(leg: Selection) -> List[str]:
    """Lookup keys for a leg; a leg without target also matches by entity+market"""
    entity, market, target = _norm(leg.entity), _norm(leg.market), _norm(leg.target)
    keys = [f"{entity}|{market}|{target}"]
    if not target:
        keys += [f"{entity}|{market}|", f"{entity}|{market}"]
    return keys


def leg_matches_key_set(leg: Selection, keys: Set[str]) -> bool:
    """Whether a leg duplicates a keyed leg.

    A targeted leg matches an untargeted one through the "entity|market"
    wildcard; an untargeted leg matches any targeted key with the same
    entity and market. Two real, different targets never match.
    """
    if any(k in keys for k in leg_keys(leg)):
        return True
    entity, market, target = _norm(leg.entity), _norm(leg.market), _norm(leg.target)
    if not entity and not market:
        return False
    wildcard = f"{entity}|{market}"
    if wildcard in keys:
        return True
    if not target:
        return any(k.startswith(wildcard + "|") for k in keys)
    return False


def key_set(legs: Iterable[Selection]) -> Set[str]:
    keys: Set[str] = set()
    for leg in legs:
        keys.update(leg_keys(leg))
    return keys


def _same_selection(a: Selection, b: Selection) -> bool:
    if _norm(a.entity) != _norm(b.entity) or _norm(a.market) != _norm(b.market):
        return False
    ta, tb = _norm(a.target), _norm(b.target)
    return ta == tb or not ta or not tb


def better_result(a: LegResult, b: LegResult) -> LegResult:
    return a if _RESULT_RANK[a] >= _RESULT_RANK[b] else b


def _merge_into(kept: Selection, other: Selection) -> None:
    if not kept.target and other.target:
        kept.target = other.target
    if not kept.ou and other.ou:
        kept.ou = other.ou
    if kept.odds is None and other.odds is not None:
        kept.odds = other.odds
    if not kept.matchup and other.matchup:
        kept.matchup = other.matchup
    kept.result = better_result(kept.result, other.result)


def merge_legs(legs: Iterable[BetLeg]) -> List[BetLeg]:
    """Collapse duplicate selections keeping the richest fields.

    Group legs pass through untouched. Result precedence is
    WIN > LOSS > PUSH > PENDING.
    """
    merged: List[BetLeg] = []
    for leg in legs:
        if isinstance(leg, GroupLeg):
            merged.append(leg)
            continue
        match = next(
            (m for m in merged if isinstance(m, Selection) and _same_selection(m, leg)),
            None,
        )
        if match is None:
            merged.append(Selection(
                entities=list(leg.entities), market=leg.market, target=leg.target,
                ou=leg.ou, odds=leg.odds, result=leg.result, matchup=leg.matchup,
            ))
        else:
            _merge_into(match, leg)
    return merged


def is_meaningful_leg(leg: Selection) -> bool:
    entity = _norm(leg.entity)
    market = leg.market or ""
    if not entity and not market and not leg.target:
        return False
    if entity:
        if entity in GENERIC_WORDS or entity in _STAT_WORDS:
            return False
        if entity[0].isdigit():
            return False
        if _PROMO_RE.search(entity):
            return False
        if len(entity.split()) == 1 and market in PROP_MARKETS and entity in _STAT_WORDS:
            return False
    if _ALT_RE.search(market):
        return False
    return True


def filter_meaningful_legs(legs: Iterable[BetLeg]) -> List[BetLeg]:
    return [leg for leg in legs if isinstance(leg, GroupLeg) or is_meaningful_leg(leg)]


def drop_generic_duplicate_legs(legs: Sequence[BetLeg]) -> List[BetLeg]:
    """Remove "Other" legs already covered by a leg with a specific market"""
    specific = {
        (_norm(leg.entity), _norm(leg.target))
        for leg in legs
        if isinstance(leg, Selection) and leg.market and leg.market != "Other"
    }
    return [
        leg for leg in legs
        if not (
            isinstance(leg, Selection)
            and leg.market in ("", "Other")
            and (_norm(leg.entity), _norm(leg.target)) in specific
        )
    ]


def dedupe_legs(legs: Iterable[BetLeg]) -> List[BetLeg]:
    return drop_generic_duplicate_legs(merge_legs(filter_meaningful_legs(legs)))
