"""Ticket and leg settlement rules."""
from __future__ import annotations

from typing import Iterable, Optional, Union

from .bet_data import BetLeg, BetResult, LegResult

_TOLERANCE = 1e-4

_SETTLED_MARKERS = ("finished", "settled", "returned")

_LEG_RESULT_ALIASES = {
    "void": LegResult.PUSH,
    "voided": LegResult.PUSH,
    "win": LegResult.WIN,
    "won": LegResult.WIN,
    "loss": LegResult.LOSS,
    "lost": LegResult.LOSS,
    "push": LegResult.PUSH,
    "pending": LegResult.PENDING,
    "unknown": LegResult.UNKNOWN,
}


def to_leg_result(value: Union[LegResult, BetResult, str, None]) -> LegResult:
    """Map a bet-level or free-form result string to the leg enum"""
    if not value:
        return LegResult.PENDING
    text = value.value if isinstance(value, (LegResult, BetResult)) else str(value)
    return _LEG_RESULT_ALIASES.get(text.strip().lower(), LegResult.PENDING)


def infer_result(
    stake: Optional[float],
    payout: Optional[float],
    footer_text: str,
    has_won: bool,
    won_label: str = "WON ON FANDUEL",
) -> BetResult:
    """Derive the ticket result from footer amounts and labels.

    An explicit won label wins over any amount comparison.
    """
    if has_won:
        return BetResult.WIN

    lower = (footer_text or "").lower()
    settled = (
        any(marker in lower for marker in _SETTLED_MARKERS)
        or won_label.lower() in lower
        or payout is not None
    )
    has_returned = "returned" in lower

    if has_returned:
        if stake is not None and payout is not None and payout > 0 and abs(payout - stake) < _TOLERANCE:
            return BetResult.PUSH
        if payout is None or payout == 0:
            return BetResult.LOSS

    if settled and payout == 0:
        return BetResult.LOSS

    if settled and payout is None and not has_returned:
        return BetResult.LOSS

    if payout is not None and stake is not None:
        if payout > stake:
            return BetResult.WIN
        if abs(payout - stake) < _TOLERANCE:
            return BetResult.PUSH

    return BetResult.PENDING


def aggregate_child_results(
    children: Iterable[BetLeg],
    fallback: Union[LegResult, BetResult, str, None] = None,
) -> LegResult:
    """Group result: LOSS beats PUSH; WIN needs every settled child to win.

    Anything else falls back to the ticket result.
    """
    results = [to_leg_result(c.result) for c in children]
    if LegResult.LOSS in results:
        return LegResult.LOSS
    if LegResult.PUSH in results:
        return LegResult.PUSH
    decided = [r for r in results if r is not LegResult.PENDING]
    if decided and all(r is LegResult.WIN for r in decided):
        return LegResult.WIN
    return to_leg_result(fallback)
