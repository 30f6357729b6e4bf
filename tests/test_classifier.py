"""
Tests for bet-type classification.
"""
import pytest

from settled_bets.parsers.classifier import classify_bet_type, correct_bet_type
from settled_bets.processors.bet_data import BetType


@pytest.mark.parametrize("text, leg_count, expected", [
    ("Same Game Parlay Plus +2500", 3, BetType.SGP_PLUS),
    ("Includes: 2 Same Game Parlays + 1 selection", 5, BetType.SGP_PLUS),
    ("Same Game Parlay™ Jalen Brunson To Score 25+ Points", 4, BetType.SGP),
    ("3 leg parlay +596", 3, BetType.PARLAY),
    ("Parlay Orlando Magic -5.5, Boston Celtics +3.5, Lakers Moneyline", 3, BetType.PARLAY),
    ("Cade Cunningham To Score 25+ Points +360", 1, BetType.SINGLE),
])
def test_classify_bet_type(text, leg_count, expected):
    assert classify_bet_type(text, leg_count=leg_count) is expected


def test_promo_banner_alone_is_not_a_parlay():
    assert classify_bet_type("Orlando Magic Same Game Parlay Available", leg_count=1) is BetType.SINGLE


def test_generic_parlay_needs_several_legs():
    text = "Parlay Orlando Magic -5.5, Boston Celtics +3.5, Lakers Moneyline"
    assert classify_bet_type(text, leg_count=1) is BetType.SINGLE


def test_aria_label_takes_part_in_classification():
    assert classify_bet_type("+1200", aria="Same Game Parlay, 4 legs", leg_count=4) is BetType.SGP


def test_collapsed_nested_sgp_is_reflagged():
    text = "Includes: 1 Same Game Parlay + 1 selection"
    assert correct_bet_type(BetType.PARLAY, text, 1) is BetType.SGP_PLUS
    assert correct_bet_type(BetType.PARLAY, text, 2) is BetType.PARLAY
    assert correct_bet_type(BetType.SGP, text, 1) is BetType.SGP


def test_span_mentioning_parlay_legs_marks_parlay():
    spans = ["Orlando Magic -5.5", "2 legs in this parlay"]
    assert classify_bet_type("Orlando Magic -5.5 +264", leg_count=1, spans=spans) is BetType.PARLAY
    assert classify_bet_type("Orlando Magic -5.5 +264", leg_count=1, spans=["Orlando Magic -5.5"]) is BetType.SINGLE


def test_repeated_spread_rows_mark_parlay():
    text = "Orlando Magic -5.5 Spread Betting -110 Boston Celtics +3.5 Spread Betting -120"
    assert classify_bet_type(text, leg_count=2) is BetType.PARLAY
    assert classify_bet_type(text, leg_count=1) is BetType.SINGLE
    assert classify_bet_type("Orlando Magic -5.5 Spread Betting -110", leg_count=2) is BetType.SINGLE
