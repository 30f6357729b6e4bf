"""
Logging utilities for the settled-bets parser.
Structured key/value events rendered as JSON lines.
"""
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, TextIO

import structlog

_HANDLER_MARK = "_settled_bets_handler"


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    service_name: str = "settled_bets",
    stream: Optional[TextIO] = None,
) -> Any:
    """
    Route structlog events through stdlib logging as JSON lines.

    Parser modules never call this; the process embedding the parser does
    (see ``settled_bets.cli``). Events go to ``stream`` (stderr by default,
    stdout stays free for command output) and to ``log_file`` when given.
    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path that also receives every event
        service_name: Bound on the returned logger as ``service``
        stream: Text stream for console output

    Returns:
        structlog logger bound to the service name
    """
    level = logging.getLevelName((log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # module loggers are created at import and must follow reconfiguration
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(service_name).bind(service=service_name)


def get_module_logger(module_name: str) -> Any:
    """Get a logger instance for a specific module"""
    return structlog.get_logger(module_name)
