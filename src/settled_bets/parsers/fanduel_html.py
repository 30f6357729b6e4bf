"""
FanDuel settled-bets page parser.

Entry point: ``parse_fanduel_html(html, config)`` walks every "BET ID"
marker in document order, locates the card's header and footer, and
assembles one Bet per distinct bet id. It never raises for bad input.
"""
from __future__ import annotations

from typing import List, Optional, Set

from bs4 import Tag

from ..config.settings import ParserConfig
from ..processors.bet_data import Bet, BetType
from ..processors.results import infer_result
from ..utils.logger import get_module_logger
from ..utils.text import parse_placed_at
from .assemblers import CardContext, build_parlay_bet, build_single_bet
from .classifier import classify_bet_type, correct_bet_type
from .dom import (
    aria_label,
    element_text,
    find_bet_id_markers,
    find_footer_element,
    find_header_for_footer,
    parse_document,
)
from .footer import extract_footer_meta
from .leg_rows import find_leg_rows

logger = get_module_logger("fanduel")


def _header_aria(header: Tag) -> str:
    for tag in header.find_all(attrs={"aria-label": True}):
        if tag.name != "span":
            return aria_label(tag)
    return ""


def _parse_card(marker: Tag, marker_id: str, config: ParserConfig, seen: Set[str]) -> Optional[Bet]:
    footer = find_footer_element(marker)
    if footer is None:
        logger.debug("fanduel.card_skipped", bet_id=marker_id, reason="no_footer")
        return None

    meta = extract_footer_meta(footer, config.book)
    bet_id = meta.bet_id or marker_id
    if bet_id in seen:
        return None

    header = find_header_for_footer(footer, config.won_label)
    if header is None:
        logger.debug("fanduel.card_skipped", bet_id=bet_id, reason="no_header")
        return None
    seen.add(bet_id)

    placed_at = parse_placed_at(
        meta.placed_at_raw,
        offsets=config.timezone_offsets,
        default_offset=config.default_tz_offset,
        now=config.now,
    )
    result = infer_result(meta.stake, meta.payout, meta.raw_text, meta.has_won, config.won_label)
    ctx = CardContext(
        header=header,
        footer=footer,
        meta=meta,
        bet_id=bet_id,
        placed_at=placed_at,
        result=result,
        config=config,
    )

    rows = find_leg_rows(header)
    header_text = element_text(header)
    spans = [element_text(s) for s in header.find_all("span")]
    bet_type = classify_bet_type(header_text, _header_aria(header), len(rows), spans)
    bet_type = correct_bet_type(bet_type, header_text, len(rows))

    if bet_type is BetType.SINGLE:
        return build_single_bet(ctx, rows)
    return build_parlay_bet(ctx, bet_type, rows)


def parse_fanduel_html(html: Optional[str], config: Optional[ParserConfig] = None) -> List[Bet]:
    """Parse a settled-bets page into Bet records, in page order.

    Without a config the built-in FanDuel defaults are used; environment
    and YAML overrides are read only through ``load_parser_config()``.
    Duplicate bet ids keep their first occurrence. A card that fails is
    logged and skipped; a document that fails entirely yields [].
    """
    if not html or not html.strip():
        return []
    try:
        config = config or ParserConfig()
        soup = parse_document(html)
        markers = find_bet_id_markers(soup)
    except Exception as e:
        logger.error("fanduel.parse_failed", error=str(e))
        return []

    seen: Set[str] = set()
    bets: List[Bet] = []
    for marker, marker_id in markers:
        try:
            bet = _parse_card(marker, marker_id, config, seen)
        except Exception as e:
            logger.error("fanduel.card_failed", bet_id=marker_id, error=str(e))
            continue
        if bet is not None:
            bets.append(bet)

    logger.info("fanduel.parsed", bets=len(bets), markers=len(markers))
    return bets
