"""
Tests for the bet records and their dictionary form.
"""
import pytest

from settled_bets.processors.bet_data import Bet, BetResult, BetType, GroupLeg, LegResult, Selection


def _sgp_plus_bet():
    group = GroupLeg(
        children=[
            Selection(["Jalen Brunson"], "Pts", "25+", odds=-110, result=LegResult.WIN),
            Selection(["Josh Hart"], "Reb", "10+"),
        ],
        target="New York Knicks @ Boston Celtics",
        odds=600,
        result=LegResult.WIN,
        matchup="New York Knicks @ Boston Celtics",
    )
    extra = Selection(["Stephen Curry"], "3pt", "4+", odds=150, result=LegResult.WIN)
    return Bet(
        book="FanDuel",
        bet_id="O/5555555/0000005",
        placed_at="2025-11-18T23:09:00-05:00",
        bet_type=BetType.SGP_PLUS,
        odds=2500,
        stake=2.0,
        payout=52.0,
        result=BetResult.WIN,
        legs=[group, extra],
    )


def test_group_children_serialize_null_odds():
    group, extra = _sgp_plus_bet().to_dict()["legs"]

    assert group["isGroupLeg"] is True
    assert group["odds"] == 600
    for child in group["children"]:
        assert "odds" in child
        assert child["odds"] is None
        assert child["isGroupLeg"] is False

    # plain selections still omit unset fields
    assert extra["odds"] == 150
    assert "ou" not in extra
    assert "ou" not in group["children"][0]


def test_dict_form_restores_the_bet():
    bet = _sgp_plus_bet()
    restored = Bet.from_dict(bet.to_dict())

    assert restored.to_dict() == bet.to_dict()
    assert isinstance(restored.legs[0], GroupLeg)
    assert restored.legs[0].children[0].odds is None


def test_settled_at_follows_result():
    assert _sgp_plus_bet().settled_at == "2025-11-18T23:09:00-05:00"
    pending = Bet(book="FanDuel", bet_id="X1", placed_at="2025-11-18T23:09:00-05:00")
    assert pending.settled_at is None


def test_group_leg_rejects_nested_groups():
    with pytest.raises(TypeError):
        GroupLeg(children=[GroupLeg()])
