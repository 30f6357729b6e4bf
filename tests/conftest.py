"""
Shared fixtures: small hand-built FanDuel settled-bets cards and a
parser config with a pinned clock.
"""
import logging
from datetime import datetime, timezone

import pytest
import structlog

from settled_bets.config.settings import ParserConfig

FIXED_NOW = datetime(2025, 11, 20, 12, 0, 0, tzinfo=timezone.utc)


def footer_li(bet_id, stake, won=None, returned=None, placed="11/18/2025 11:09PM ET"):
    parts = [f'<div><div><span>${stake}</span></div><span>TOTAL WAGER</span></div>']
    if won is not None:
        parts.append(f'<div><div><span>${won}</span></div><span>WON ON FANDUEL</span></div>')
    if returned is not None:
        parts.append(f'<div><div><span>${returned}</span></div><span>RETURNED</span></div>')
    parts.append(f'<div><span>BET ID: {bet_id}</span><span>PLACED: {placed}</span></div>')
    return "<li>" + "".join(parts) + "</li>"


SINGLE_HEADER = """
<li>
  <div role="button" aria-label="Cade Cunningham, To Score 25+ Points, +360">
    <div><span>Cade Cunningham</span><span>To Score 25+ Points</span></div>
    <span aria-label="Odds +360">+360</span>
    <span>Detroit Pistons @ Washington Wizards</span>
  </div>
</li>
"""

SPREAD_HEADER = """
<li>
  <div role="button" aria-label="Orlando Magic -5.5, Spread Betting, -110">
    <div><span>Orlando Magic -5.5</span><span>Spread Betting</span></div>
    <span aria-label="Odds -110">-110</span>
  </div>
</li>
"""

PARLAY_CARD = """
<li>
  <div><span>2 leg parlay</span><span aria-label="Odds +264">+264</span></div>
  <div aria-label="Orlando Magic -5.5, Spread Betting, -110">
    <span>Orlando Magic -5.5</span><span>Spread Betting</span>
    <span aria-label="Odds -110">-110</span>
  </div>
  <div aria-label="Boston Celtics +3.5, Spread Betting, -120">
    <span>Boston Celtics +3.5</span><span>Spread Betting</span>
    <span aria-label="Odds -120">-120</span>
  </div>
  <div><div><span>$10.00</span></div><span>TOTAL WAGER</span></div>
  <div><div><span>$36.40</span></div><span>WON ON FANDUEL</span></div>
  <div><span>BET ID: O/2222222/0000002</span><span>PLACED: 11/20/2025 8:00PM ET</span></div>
</li>
"""


def sgp_header(icon=""):
    legs = [
        ("Jalen Brunson", "To Score 25+ Points"),
        ("Josh Hart", "To Record 10+ Rebounds"),
        ("Mikal Bridges", "To Record 3+ Assists"),
        ("OG Anunoby", "To Record 2+ Made Threes"),
    ]
    rows = "".join(
        f'<div aria-label="{name}, {market}">{icon}<span>{name}</span><span>{market}</span></div>'
        for name, market in legs
    )
    return f"""
<li>
  <div role="button">
    <span>Same Game Parlay™</span>
    <span aria-label="Odds +1200">+1200</span>
    {rows}
    <span>New York Knicks @ Boston Celtics</span>
  </div>
</li>
"""


SGP_PLUS_HEADER = """
<li>
  <div class="card">
    <span>Includes: 1 Same Game Parlay™ + 1 selection</span>
    <span aria-label="Odds +2500">+2500</span>
    <div role="button">
      <span>Same Game Parlay™</span>
      <span aria-label="Odds +600">+600</span>
      <div aria-label="Jalen Brunson, To Score 25+ Points">
        <svg id="tick-circle"></svg><span>Jalen Brunson</span><span>To Score 25+ Points</span>
      </div>
      <div aria-label="Josh Hart, To Record 10+ Rebounds">
        <span>Josh Hart</span><span>To Record 10+ Rebounds</span>
      </div>
      <span>New York Knicks @ Boston Celtics</span>
    </div>
    <div aria-label="Stephen Curry 4+ Made Threes, +150">
      <span>Stephen Curry</span><span>4+ Made Threes</span>
      <span aria-label="Odds +150">+150</span>
    </div>
  </div>
</li>
"""


def page(*items):
    return "<html><body><ul>" + "".join(items) + "</ul></body></html>"


def leg_div(name, market, odds=None):
    """One aria-labelled selection row; extras carry their own odds"""
    if odds is None:
        return f'<div aria-label="{name}, {market}"><span>{name}</span><span>{market}</span></div>'
    return (
        f'<div aria-label="{name}, {market}, {odds}"><span>{name}</span><span>{market}</span>'
        f'<span aria-label="Odds {odds}">{odds}</span></div>'
    )


def sgp_block(odds, legs, matchup):
    rows = "".join(leg_div(name, market) for name, market in legs)
    return (
        f'<div role="button"><span>Same Game Parlay™</span>'
        f'<span aria-label="Odds {odds}">{odds}</span>{rows}<span>{matchup}</span></div>'
    )


def sgp_plus_card(includes, odds, *blocks):
    return (
        f'<li><div class="card"><span>{includes}</span>'
        f'<span aria-label="Odds {odds}">{odds}</span>{"".join(blocks)}</div></li>'
    )


KNICKS_LEGS = [("Jalen Brunson", "To Score 25+ Points"), ("Josh Hart", "To Record 10+ Rebounds")]
KNICKS_GAME = "New York Knicks @ Boston Celtics"

# two spread rows under one header and no parlay wording
SPREAD_PAIR = (
    """
<li>
  <div aria-label="Orlando Magic -5.5, Spread Betting, -110">
    <span>Orlando Magic -5.5</span><span>Spread Betting</span>
    <span aria-label="Odds -110">-110</span>
  </div>
  <div aria-label="Boston Celtics +3.5, Spread Betting, -120">
    <span>Boston Celtics +3.5</span><span>Spread Betting</span>
    <span aria-label="Odds -120">-120</span>
  </div>
</li>
""",
    footer_li("O/6666666/0000006", "10.00", won="36.40"),
)

TWO_SGP_BLOCKS = (
    sgp_plus_card(
        "Includes: 2 Same Game Parlays™",
        "+4000",
        sgp_block("+600", KNICKS_LEGS, KNICKS_GAME),
        sgp_block(
            "+450",
            [("Stephen Curry", "To Score 30+ Points"), ("Jimmy Butler", "To Record 8+ Assists")],
            "Golden State Warriors @ Los Angeles Lakers",
        ),
    ),
    footer_li("O/8888888/0000008", "1.00", won="41.00"),
)

# no SGP block markup: the nested parlay shows up as rows sharing one price
SHARED_ODDS_SGP_PLUS = (
    sgp_plus_card(
        "Includes: 1 Same Game Parlay™ + 1 selection",
        "+2200",
        leg_div("Jalen Brunson", "To Score 25+ Points", "+600"),
        leg_div("Josh Hart", "To Record 10+ Rebounds", "+600"),
        leg_div("Stephen Curry", "4+ Made Threes", "+150"),
        f"<span>{KNICKS_GAME}</span>",
    ),
    footer_li("O/1212121/0000012", "2.00", won="46.00"),
)

# the extra selection is only rendered as text
TEXT_EXTRA_SGP_PLUS = (
    sgp_plus_card(
        "Includes: 1 Same Game Parlay™ + 1 selection",
        "+1800",
        "<div><span>Tyrese Haliburton To Record 10+ Assists</span></div>",
        sgp_block("+600", KNICKS_LEGS, KNICKS_GAME),
    ),
    footer_li("O/1313131/0000013", "2.00", won="38.00"),
)

# extra on the same player and market as a nested leg, higher threshold
SAME_PLAYER_EXTRA_SGP_PLUS = (
    sgp_plus_card(
        "Includes: 1 Same Game Parlay™ + 1 selection",
        "+5400",
        sgp_block("+600", KNICKS_LEGS, KNICKS_GAME),
        leg_div("Jalen Brunson", "40+ Points", "+900"),
    ),
    footer_li("O/1414141/0000014", "1.00", won="55.00"),
)


SINGLE_WIN = (SINGLE_HEADER, footer_li("O/0242888/0028020", "1.00", won="4.60"))
PUSH = (
    SPREAD_HEADER,
    footer_li("O/1111111/0000001", "10.00", returned="10.00", placed="11/19/2025 7:30PM ET"),
)
PARLAY = (PARLAY_CARD,)
SGP = (sgp_header(), footer_li("O/3333333/0000003", "5.00", won="65.00"))
SGP_PLUS = (SGP_PLUS_HEADER, footer_li("O/5555555/0000005", "2.00", won="52.00"))


@pytest.fixture
def config():
    return ParserConfig(now=lambda: FIXED_NOW)


@pytest.fixture
def single_win_html():
    return page(*SINGLE_WIN)


@pytest.fixture
def push_html():
    return page(*PUSH)


@pytest.fixture
def parlay_html():
    return page(*PARLAY)


@pytest.fixture
def sgp_html():
    return page(*SGP)


@pytest.fixture
def sgp_mismatch_html():
    icon = '<svg id="tick-circle"></svg>'
    return page(sgp_header(icon), footer_li("O/4444444/0000004", "5.00", returned="0.00"))


@pytest.fixture
def sgp_plus_html():
    return page(*SGP_PLUS)


@pytest.fixture
def restore_logging():
    """Undo setup_logger: extra root handlers, root level, structlog config."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()
