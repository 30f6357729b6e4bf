"""
Bet assemblers.

Turn one located card (header, footer, footer metadata, ticket result)
into a Bet record. Singles take their fields from the header, backfilled
from the lone leg row; multi-leg tickets combine group legs with the
remaining selections.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from bs4 import Tag

from ..config.settings import ParserConfig
from ..processors.bet_data import Bet, BetLeg, BetResult, BetType, GroupLeg, Selection
from ..processors.descriptions import (
    bet_name,
    build_sgp_plus_description,
    format_description,
    format_parlay_description,
    format_sgp_description,
    infer_market_category,
    infer_sport,
)
from ..processors.leg_merge import dedupe_legs, key_set, leg_keys, leg_matches_key_set
from ..processors.market_text import strip_target_from_name
from ..processors.results import to_leg_result
from ..utils.logger import get_module_logger
from .dom import element_text, is_within
from .footer import FooterMeta
from .group_legs import (
    build_sgp_group_legs,
    footer_disagrees,
    group_legs_by_shared_odds,
    wrap_as_group,
)
from .header import extract_header_info
from .leg_builders import build_legs_from_stat_text, collect_legs, parse_leg_from_node

logger = get_module_logger("assemblers")

_INCLUDES_COUNTS_RE = re.compile(
    r"includes:\s*(\d+)\s+same\s+game\s+parlays?\S*\s*\+\s*(\d+)\s+selections?", re.I
)


@dataclass
class CardContext:
    """Everything located for one bet card"""
    header: Tag
    footer: Tag
    meta: FooterMeta
    bet_id: str
    placed_at: str
    result: BetResult
    config: ParserConfig

    @property
    def raw_header(self) -> str:
        return element_text(self.header)

    @property
    def raw(self) -> str:
        if self.header is self.footer:
            return self.raw_header
        return f"{self.raw_header}\n----\n{element_text(self.footer)}"


def _bet(ctx: CardContext, bet_type: BetType, **fields) -> Bet:
    return Bet(
        book=ctx.config.book,
        bet_id=ctx.bet_id,
        placed_at=ctx.placed_at,
        bet_type=bet_type,
        stake=ctx.meta.stake or 0.0,
        payout=ctx.meta.payout or 0.0,
        result=ctx.result,
        raw=ctx.raw,
        **fields,
    )


def build_single_bet(ctx: CardContext, rows: Sequence[Tag]) -> Bet:
    """Single-selection ticket"""
    info = extract_header_info(ctx.header, BetType.SINGLE)
    leg_result = to_leg_result(ctx.result)

    row_leg: Optional[Selection] = None
    if len(rows) == 1:
        row_leg = parse_leg_from_node(rows[0], ctx.header, leg_result)

    name, type_, line, ou, odds = info.name, info.type, info.line, info.ou, info.odds
    if row_leg is not None:
        # generic headers ("Spread Betting") only carry content in the row
        name = name or row_leg.entity or None
        type_ = type_ or row_leg.market or None
        line = line or row_leg.target
        ou = ou or row_leg.ou
        odds = odds if odds is not None else row_leg.odds
    if type_ == "Spread" and name and line:
        name = strip_target_from_name(name, line) or name

    description = format_description(info.description, type_, name, line, ou) or info.description
    legs: List[BetLeg] = []
    if name or type_:
        legs.append(Selection(
            entities=[name] if name else [],
            market=type_ or "Other",
            target=line,
            ou=ou,
            odds=odds,
            result=row_leg.result if row_leg is not None else leg_result,
            matchup=row_leg.matchup if row_leg is not None else None,
        ))

    return _bet(
        ctx,
        BetType.SINGLE,
        market_category=infer_market_category(BetType.SINGLE, type_, ctx.raw_header),
        odds=odds or 0,
        description=description,
        name=name,
        sport=info.sport or infer_sport(ctx.raw_header, [type_] if type_ else []),
        is_live=info.is_live,
        legs=legs,
        type=type_,
        line=line,
        ou=ou,
    )


def _outside(rows: Sequence[Tag], containers: Sequence[Tag]) -> List[Tag]:
    return [
        r for r in rows
        if not any(is_within(r, c) or is_within(c, r) for c in containers)
    ]


def _enrich_sgp_plus(ctx: CardContext, extras: List[Selection], known: set) -> List[Selection]:
    """Re-scan card text when the header promises more extra selections"""
    m = _INCLUDES_COUNTS_RE.search(ctx.raw_header)
    if not m or len(extras) >= int(m.group(2)):
        return extras
    seen = key_set(extras) | known
    for leg in build_legs_from_stat_text(ctx.raw_header, to_leg_result(ctx.result)):
        if leg_matches_key_set(leg, seen):
            continue
        extras.append(leg)
        seen.update(leg_keys(leg))
    return extras


def _description(bet_type: BetType, groups: Sequence[GroupLeg], extras: Sequence[Selection],
                 legs: Sequence[BetLeg], fallback: str) -> str:
    if bet_type is BetType.SGP_PLUS:
        text = build_sgp_plus_description(groups, extras)
    elif bet_type is BetType.SGP:
        text = format_sgp_description(groups, legs)
    else:
        text = format_parlay_description(legs)
    return text or fallback


def build_parlay_bet(ctx: CardContext, bet_type: BetType, rows: Sequence[Tag]) -> Bet:
    """Parlay, SGP or SGP+ ticket"""
    info = extract_header_info(ctx.header, bet_type)
    fallback = to_leg_result(ctx.result)
    raw_header = ctx.raw_header

    groups: List[GroupLeg] = []
    containers: List[Tag] = []
    if bet_type in (BetType.SGP, BetType.SGP_PLUS):
        groups, containers = build_sgp_group_legs(
            ctx.header, info.odds, fallback, raw_header, ctx.raw
        )

    outside = _outside(rows, containers)
    extras: List[Selection] = []
    # SGP+ extras come from rows outside the SGP blocks; text-only ones are
    # recovered by _enrich_sgp_plus
    if outside or bet_type is not BetType.SGP_PLUS:
        extras = collect_legs(ctx.header, outside, info.description, raw_header, fallback)
    child_keys = key_set(c for g in groups for c in g.children)
    extras = [leg for leg in extras if not leg_matches_key_set(leg, child_keys)]

    if bet_type is BetType.SGP and not groups and len(extras) >= 2:
        groups, extras = [wrap_as_group(extras, info.odds, fallback, ctx.raw)], []
    elif bet_type is BetType.SGP_PLUS:
        if not groups:
            groups, extras = group_legs_by_shared_odds(extras, raw_header, fallback)
        extras = _enrich_sgp_plus(ctx, extras, key_set(c for g in groups for c in g.children))

    legs: List[BetLeg] = list(groups) + list(dedupe_legs(extras))
    extras = [leg for leg in legs if isinstance(leg, Selection)]

    if footer_disagrees(groups, extras, ctx.result):
        logger.warning(
            "parlay.footer_result_mismatch",
            bet_id=ctx.bet_id,
            footer_result=ctx.result.value,
            legs=len(legs),
        )

    markets = [c.market for g in groups for c in g.children] + [l.market for l in extras]
    leg_count = sum(len(g.children) for g in groups) + len(extras)
    return _bet(
        ctx,
        bet_type,
        market_category=infer_market_category(bet_type),
        odds=info.odds or 0,
        description=_description(bet_type, groups, extras, legs, info.description),
        name=bet_name(bet_type, leg_count),
        sport=infer_sport(raw_header, markets) or info.sport,
        is_live=info.is_live,
        legs=legs,
    )
