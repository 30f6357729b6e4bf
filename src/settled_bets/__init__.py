"""Parse sportsbook "settled bets" HTML pages into Bet records."""
from .config.settings import ParserConfig, load_parser_config
from .parsers.fanduel_html import parse_fanduel_html as parse
from .processors.bet_data import Bet, BetResult, BetType, GroupLeg, LegResult, Selection

__all__ = [
    "parse",
    "load_parser_config",
    "ParserConfig",
    "Bet",
    "BetResult",
    "BetType",
    "GroupLeg",
    "LegResult",
    "Selection",
]
