"""structlog rendering for the package's stdlib loggers.

Modules log through ``logging.getLogger(__name__)``; this installs a single
stderr handler whose formatter is a structlog renderer, so stdout stays free
for the token table.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import settings

_NOISY_LOGGERS = ("httpcore", "httpx")


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: Optional[str] = None) -> None:
    """Route all logging to stderr: console output at DEBUG, JSON lines otherwise."""
    level = _resolve_level(log_level or settings.log_level)

    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if level == logging.DEBUG:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
