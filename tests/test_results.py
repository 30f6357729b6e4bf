"""
Tests for ticket and leg settlement rules.
"""
import pytest

from settled_bets.processors.bet_data import BetResult, LegResult, Selection
from settled_bets.processors.results import aggregate_child_results, infer_result, to_leg_result


@pytest.mark.parametrize("stake, payout, footer, has_won, expected", [
    (1.0, 4.6, "$1.00 TOTAL WAGER $4.60 WON ON FANDUEL", True, BetResult.WIN),
    (10.0, 10.0, "$10.00 TOTAL WAGER $10.00 RETURNED", False, BetResult.PUSH),
    (5.0, 0.0, "$5.00 TOTAL WAGER $0.00 RETURNED", False, BetResult.LOSS),
    (5.0, None, "$5.00 TOTAL WAGER Finished", False, BetResult.LOSS),
    (5.0, 12.0, "$5.00 TOTAL WAGER $12.00", False, BetResult.WIN),
    (5.0, None, "$5.00 TOTAL WAGER", False, BetResult.PENDING),
])
def test_infer_result(stake, payout, footer, has_won, expected):
    assert infer_result(stake, payout, footer, has_won) is expected


def test_won_label_follows_book():
    assert infer_result(2.0, None, "$2.00 WON ON DRAFTKINGS", False, "WON ON DRAFTKINGS") is BetResult.LOSS
    assert infer_result(2.0, 2.0, "$2.00 WON ON DRAFTKINGS", False, "WON ON DRAFTKINGS") is BetResult.PUSH


@pytest.mark.parametrize("value, expected", [
    (BetResult.WIN, LegResult.WIN),
    (BetResult.PENDING, LegResult.PENDING),
    (LegResult.LOSS, LegResult.LOSS),
    ("Void", LegResult.PUSH),
    ("won", LegResult.WIN),
    ("garbage", LegResult.PENDING),
    (None, LegResult.PENDING),
])
def test_to_leg_result(value, expected):
    assert to_leg_result(value) is expected


def _legs(*results):
    return [Selection(["Player %d" % i], "Pts", "10+", result=r) for i, r in enumerate(results)]


def test_aggregate_child_results():
    assert aggregate_child_results(_legs(LegResult.WIN, LegResult.LOSS)) is LegResult.LOSS
    assert aggregate_child_results(_legs(LegResult.WIN, LegResult.PUSH)) is LegResult.PUSH
    assert aggregate_child_results(_legs(LegResult.WIN, LegResult.PENDING)) is LegResult.WIN


def test_aggregate_falls_back_to_ticket_result():
    undecided = _legs(LegResult.PENDING, LegResult.PENDING)
    assert aggregate_child_results(undecided, BetResult.LOSS) is LegResult.LOSS
    assert aggregate_child_results([], None) is LegResult.PENDING
