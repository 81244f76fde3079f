"""
Structured logging for the track repository.
Production writes one JSON object per line so `extra=` fields stay queryable;
any other ENV gets a plain console format.
"""
import json
import logging
import sys
import traceback
from typing import Any, Optional

_CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

_QUIET_LIBRARIES = ("aiohttp", "sqlalchemy", "asyncio")

# Attributes every LogRecord carries; anything else arrived through `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, val) for key, val in vars(record).items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            entry["exception"] = traceback.format_exception(*record.exc_info)
        return json.dumps(entry, default=str)


def build_formatter(env: str) -> logging.Formatter:
    if env == "production":
        return JsonFormatter()
    return logging.Formatter(fmt=_CONSOLE_FORMAT, datefmt=_CONSOLE_DATEFMT)


def setup_logging(level: str = "INFO", env: Optional[str] = None) -> None:
    """Replace the root handlers with one stdout handler for `env` (default: settings.ENV)."""
    if env is None:
        from starsearch.config.settings import settings
        env = settings.ENV

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(env))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for lib in _QUIET_LIBRARIES:
        logging.getLogger(lib).setLevel(logging.WARNING)
