"""Logging setup for checkmate.

``configure_logging`` attaches one stream handler to the ``checkmate``
package logger, writing either plain text or, with
``CHECKMATE_STRUCTURED_LOGGING=true``, one JSON object per record.

JSON records always carry ``timestamp`` (UTC, ISO 8601), ``level``,
``logger`` and ``message``.  The run context is added when known:

* ``checkset``: the check set a run summary belongs to.
* ``check``: the check a precondition warning refers to.
* ``thread``: the pool worker that emitted the record, for concurrent runs.
* ``exc_info``: the formatted traceback, for records logged with one.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from checkmate.config import Settings, load_settings

PACKAGE_LOGGER = "checkmate"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes the engine passes through ``extra=`` to identify what a record is about.
CONTEXT_FIELDS = ("checkset", "check")


class JSONFormatter(logging.Formatter):
    """Render checkmate log records as single-line JSON with run context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.threadName and record.threadName.startswith(PACKAGE_LOGGER):
            payload["thread"] = record.threadName

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Attach a stream handler to the ``checkmate`` logger.

    Replaces handlers installed by a previous call, so it is safe to call
    repeatedly.  Returns the configured package logger.
    """
    settings = settings or load_settings()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()

    handler = logging.StreamHandler()
    if settings.structured_logging:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(settings.log_level)
    package_logger.propagate = False
    return package_logger
