"""
Tests for footer metadata extraction across the label layouts the page uses.
"""
from settled_bets.parsers.dom import parse_document
from settled_bets.parsers.footer import extract_footer_meta, extract_labeled_amount

from conftest import footer_li


def _footer(html):
    return parse_document(f"<ul>{html}</ul>").li


def test_amount_before_label():
    meta = extract_footer_meta(_footer(footer_li("O/0242888/0028020", "1.00", won="4.60")))

    assert meta.bet_id == "O/0242888/0028020"
    assert meta.placed_at_raw == "11/18/2025 11:09PM ET"
    assert meta.stake == 1.0
    assert meta.payout == 4.6
    assert meta.has_won
    assert "TOTAL WAGER" in meta.raw_text


def test_returned_amount_is_payout_without_win():
    meta = extract_footer_meta(_footer(footer_li("O/1/2", "10.00", returned="10.00")))
    assert meta.stake == 10.0
    assert meta.payout == 10.0
    assert not meta.has_won


def test_amount_after_label():
    footer = _footer(
        "<li>"
        "<div><span>TOTAL WAGER</span><span>$2.00</span></div>"
        "<div><span>WON ON FANDUEL</span><span>$5.50</span></div>"
        "<div><span>BET ID: O/1/3</span><span>PLACED: 1/2/2025 1:05PM ET</span></div>"
        "</li>"
    )
    meta = extract_footer_meta(footer)
    assert (meta.stake, meta.payout, meta.has_won) == (2.0, 5.5, True)
    assert meta.bet_id == "O/1/3"
    assert meta.placed_at_raw == "1/2/2025 1:05PM ET"


def test_text_only_footer():
    footer = _footer("<li><div>TOTAL WAGER $3.00 | BET ID: O/9/9</div></li>")
    meta = extract_footer_meta(footer)
    assert meta.stake == 3.0
    assert meta.payout is None
    assert meta.bet_id == "O/9/9"
    assert meta.placed_at_raw is None


def test_missing_label_yields_none():
    footer = _footer(footer_li("O/1/4", "1.00"))
    assert extract_labeled_amount(footer, "WON ON FANDUEL") is None


def test_won_label_uses_book_name():
    footer = _footer(
        "<li><div><div><span>$7.00</span></div><span>WON ON DRAFTKINGS</span></div>"
        "<div><span>BET ID: D/1</span></div></li>"
    )
    meta = extract_footer_meta(footer, book="DraftKings")
    assert meta.payout == 7.0
    assert meta.has_won
