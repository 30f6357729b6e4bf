"""Config loader for optional per-book parser overrides.

Search order:
1) ENV SETTLED_BETS_CONFIG_YAML if set
2) ./config/config.yml next to the package
3) ./config.yml in the current working directory

Returns a dict with keys like 'books' and 'defaults'.
"""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import yaml

from .logger import get_module_logger

logger = get_module_logger("config_loader")


def _default_candidates() -> List[str]:
    return [
        os.getenv("SETTLED_BETS_CONFIG_YAML", "").strip(),
        os.path.join(os.path.dirname(os.path.dirname(__file__)), "config", "config.yml"),
        os.path.join(os.getcwd(), "config.yml"),
    ]


def _load_yaml(path: str) -> Optional[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning("YAML root is not a mapping", path=path)
            return None
        return data
    except FileNotFoundError:
        return None
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to read YAML config", path=path, error=str(e))
        return None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the first available config among candidates.

    Never raises; returns {} on failure.
    """
    candidates = [path] if path else _default_candidates()
    for cand in candidates:
        if not cand:
            continue
        data = _load_yaml(cand)
        if data is not None:
            logger.debug("Loaded YAML config", path=cand)
            return data
    return {}


def find_book_section(cfg: Dict[str, Any], book: str) -> Dict[str, Any]:
    """Resolve the override mapping for a book.

    Example:
      book='FanDuel' -> cfg['books']['fanduel']
    """
    books = cfg.get("books", {}) if isinstance(cfg, dict) else {}
    if not isinstance(books, dict):
        return {}
    for key, section in books.items():
        if str(key).strip().lower() == book.strip().lower() and isinstance(section, dict):
            return section
    # fallback to defaults
    defaults = cfg.get("defaults", {}) if isinstance(cfg, dict) else {}
    return defaults if isinstance(defaults, dict) else {}
