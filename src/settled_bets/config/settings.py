"""
Configuration management for the settled-bets parser.
Handles environment variables, per-book YAML overrides, and the clock.
"""
import os
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

from ..utils.config_loader import find_book_section, load_config

# Load environment variables
load_dotenv()

_OFFSET_RE = re.compile(r"^[+\-](?:[01]\d|2[0-3]):[0-5]\d$")

DEFAULT_TIMEZONE_OFFSETS: Dict[str, str] = {
    "ET": "-05:00",
    "EST": "-05:00",
    "EDT": "-04:00",
    "CT": "-06:00",
    "CST": "-06:00",
    "CDT": "-05:00",
    "MT": "-07:00",
    "MST": "-07:00",
    "MDT": "-06:00",
    "PT": "-08:00",
    "PST": "-08:00",
    "PDT": "-07:00",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ParserConfig:
    """Settings for one parse call"""
    book: str = "FanDuel"
    default_tz_offset: str = "-05:00"
    timezone_offsets: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TIMEZONE_OFFSETS))
    log_level: str = "INFO"
    log_file: Optional[str] = None
    # Used when the placed date cannot be parsed
    now: Callable[[], datetime] = _utc_now

    def __post_init__(self):
        self.book = (self.book or "").strip() or "FanDuel"
        self.default_tz_offset = self._check_offset(self.default_tz_offset)
        self.timezone_offsets = {
            str(k).strip().upper(): self._check_offset(v)
            for k, v in (self.timezone_offsets or {}).items()
        }

    @staticmethod
    def _check_offset(value: str) -> str:
        value = (value or "").strip()
        if not _OFFSET_RE.match(value):
            raise ValueError(f"Invalid UTC offset: {value!r} (expected +HH:MM or -HH:MM)")
        return value

    @property
    def won_label(self) -> str:
        return f"WON ON {self.book.upper()}"


class ConfigManager:
    """Builds a ParserConfig from environment and YAML"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.raw = load_config(config_path)
        self.parser = self._load_parser_config()

    def _load_parser_config(self) -> ParserConfig:
        """Environment first, then the YAML section for the selected book"""
        book = os.getenv("SETTLED_BETS_BOOK", "FanDuel")
        section = find_book_section(self.raw, book)
        offsets: Dict[str, Any] = dict(DEFAULT_TIMEZONE_OFFSETS)
        yaml_offsets = section.get("timezone_offsets")
        if isinstance(yaml_offsets, dict):
            offsets.update({str(k): str(v) for k, v in yaml_offsets.items()})
        return ParserConfig(
            book=book,
            default_tz_offset=os.getenv(
                "SETTLED_BETS_TZ_OFFSET", str(section.get("default_tz_offset", "-05:00"))
            ),
            timezone_offsets=offsets,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
        )

    def for_book(self, book: str) -> ParserConfig:
        """Same settings with another book's overrides applied"""
        section = find_book_section(self.raw, book)
        offsets = dict(self.parser.timezone_offsets)
        yaml_offsets = section.get("timezone_offsets")
        if isinstance(yaml_offsets, dict):
            offsets.update({str(k): str(v) for k, v in yaml_offsets.items()})
        return replace(
            self.parser,
            book=book,
            default_tz_offset=str(section.get("default_tz_offset", self.parser.default_tz_offset)),
            timezone_offsets=offsets,
        )


def load_parser_config(config_path: Optional[str] = None) -> ParserConfig:
    """Convenience wrapper around ConfigManager"""
    return ConfigManager(config_path).parser
