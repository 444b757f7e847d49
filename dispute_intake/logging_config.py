"""
Logging setup for the dispute intake service.

Everything logs through ``logging.getLogger(__name__)`` under the
``dispute_intake`` namespace. Structured fields are passed with ``extra=``
and rendered by :class:`JsonLineFormatter` as one JSON object per line.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

ROOT_LOGGER_NAME = "dispute_intake"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime", "taskName"}
)


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class StdoutHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stdout`` is at emit time."""

    def __init__(self, level: int = logging.NOTSET) -> None:
        logging.Handler.__init__(self, level)

    @property
    def stream(self):  # type: ignore[override]
        return sys.stdout


def parse_level(level: str) -> int:
    return _LEVELS.get(level.strip().lower(), logging.INFO)


def setup_logging(level: str = "info") -> logging.Logger:
    """Install the JSON handler once; later calls only adjust the level."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(parse_level(level))
    if not any(isinstance(h, StdoutHandler) for h in logger.handlers):
        handler = StdoutHandler()
        handler.setFormatter(JsonLineFormatter())
        logger.addHandler(handler)
    return logger
