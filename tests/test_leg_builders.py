"""
Tests for the text and span leg builders.
"""
from settled_bets.parsers.dom import parse_document
from settled_bets.parsers.leg_builders import build_legs_from_spans, build_legs_from_stat_text
from settled_bets.processors.bet_data import LegResult


def _fields(legs):
    return [(leg.entity, leg.market, leg.target) for leg in legs]


def test_stat_text_reads_each_phrase():
    raw = (
        "Same Game Parlay™ +600 Jalen Brunson To Score 25+ Points "
        "Josh Hart To Record 10+ Rebounds Stephen Curry 4+ Made Threes"
    )
    legs = build_legs_from_stat_text(raw, LegResult.WIN)

    assert sorted(_fields(legs)) == [
        ("Jalen Brunson", "Pts", "25+"),
        ("Josh Hart", "Reb", "10+"),
        ("Stephen Curry", "3pt", "4+"),
    ]
    assert all(leg.result is LegResult.WIN for leg in legs)
    assert all(leg.odds is None for leg in legs)


def test_stat_text_trims_team_words_before_name():
    legs = build_legs_from_stat_text("Boston Celtics Tyrese Haliburton To Record 10+ Assists")
    assert _fields(legs) == [("Tyrese Haliburton", "Ast", "10+")]
    assert legs[0].result is LegResult.PENDING


def test_stat_text_ignores_scoreboard_and_plain_text():
    assert build_legs_from_stat_text("Knicks 112 108 Finished Box Score Play-by-play") == []
    assert build_legs_from_stat_text("") == []


def test_spans_pair_market_with_preceding_name():
    card = parse_document(
        "<div>"
        "<span>Jalen Brunson</span><span>To Score 25+ Points</span>"
        "<span>+600</span>"
        "<span>Josh Hart</span><span>To Record 10+ Rebounds</span>"
        "</div>"
    ).div
    legs = build_legs_from_spans(card, LegResult.LOSS)

    assert _fields(legs) == [("Jalen Brunson", "Pts", "25+"), ("Josh Hart", "Reb", "10+")]
    assert all(leg.result is LegResult.LOSS for leg in legs)


def test_market_span_without_name_is_skipped():
    card = parse_document(
        "<div><span>To Score 25+ Points</span><span>New York Knicks @ Boston Celtics</span></div>"
    ).div
    assert build_legs_from_spans(card) == []
