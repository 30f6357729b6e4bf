"""
Parse a saved settled-bets page and print the bets as JSON.

Usage:
  settled-bets logs/raw_html/fanduel_settled.html
  settled-bets page.html --output bets.json --log-level DEBUG
  settled-bets page.html --book DraftKings --config my_config.yml

Settings come from the environment (.env included) and the YAML config,
see ``settled_bets.config.settings``.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config.settings import ConfigManager
from .parsers.fanduel_html import parse_fanduel_html
from .utils.logger import get_module_logger, setup_logger

logger = get_module_logger("cli")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse a settled-bets HTML page into JSON bet records")
    parser.add_argument("file", help="path to the saved HTML page")
    parser.add_argument("--config", help="YAML config path; defaults to the packaged config.yml")
    parser.add_argument("--book", help="apply this book's YAML section, e.g., FanDuel")
    parser.add_argument("--output", help="write JSON to this file instead of stdout")
    parser.add_argument("--log-level", help="override LOG_LEVEL")
    parser.add_argument("--log-file", help="override LOG_FILE")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        manager = ConfigManager(args.config)
    except ValueError as e:
        setup_logger(args.log_level or "INFO", args.log_file)
        logger.error("cli.bad_config", error=str(e))
        return 2
    config = manager.for_book(args.book) if args.book else manager.parser
    setup_logger(args.log_level or config.log_level, args.log_file or config.log_file)

    path = Path(args.file)
    if not path.is_file():
        logger.error("cli.file_not_found", path=str(path))
        return 3

    bets = parse_fanduel_html(path.read_text(encoding="utf-8"), config)
    payload = json.dumps([bet.to_dict() for bet in bets], indent=2)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
    else:
        sys.stdout.write(payload + "\n")

    logger.info("cli.done", file=str(path), bets=len(bets), output=args.output or "stdout")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
