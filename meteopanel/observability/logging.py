"""Structured logging for the panel process."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict

# Everything a bare LogRecord carries; only ``extra=`` fields go past this.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, ``extra`` fields included."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}:{record.lineno}",
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        return json.dumps(payload, ensure_ascii=False, default=str)


class CoordinateRedactor(logging.Filter):
    """Mask latitude/longitude query parameters in logged URLs."""

    _pattern = re.compile(r"\b(latitude|longitude)=[^&\s]+", re.IGNORECASE)

    def _redact(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._pattern.sub(r"\1=***", value)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(self._redact(a) for a in record.args)
        elif isinstance(record.args, dict):
            record.args = {k: self._redact(v) for k, v in record.args.items()}
        return True


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send every record to stderr as redacted JSON."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(CoordinateRedactor())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    logging.captureWarnings(True)

    # httpx logs every request URL at INFO, coordinates included.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
