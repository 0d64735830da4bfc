"""Structured Logging — game-session aware log records, JSON or text.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Quiz identifiers (session_id, owner_id, question_id) and error/retry
      fields are emitted only when the record carries them
    - setup_logging replaces root handlers: calling it twice never duplicates lines

Design Decisions:
    - stdlib logging + a small JSONFormatter, no logging dependency
    - UUIDs stringified at format time, so call sites pass ids as-is in `extra`
"""

import json
import logging
from datetime import datetime, timezone

QUIZ_FIELDS = (
    "session_id", "owner_id", "question_id", "error_code", "attempt", "path",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s%(quiz_fields)s"


def _quiz_fields(record: logging.LogRecord) -> dict[str, str]:
    return {
        key: str(record.__dict__[key])
        for key in QUIZ_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_quiz_fields(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local development, ids appended as key=value."""

    def __init__(self):
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        fields = _quiz_fields(record)
        record.quiz_fields = (
            " [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"
            if fields else ""
        )
        return super().format(record)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure the root logger once per process (FastAPI lifespan)."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # SQL echo only when explicitly debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level.upper() == "DEBUG" else logging.WARNING,
    )
