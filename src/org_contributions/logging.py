"""JSON log lines on stderr, tagged with the run they belong to.

stdout is reserved for the contribution report, so every record goes to
stderr. `configure_logging` installs a `RunContextFilter` that stamps each
record with the organization and search mode, which makes interleaved logs
from several runs (e.g. in CI) easy to tell apart.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Whatever a bare LogRecord carries is not "extra"; this tracks the running
# interpreter (e.g. `taskName` on 3.12+) without a hand-kept list.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_CONTEXT_ATTRS = ("org", "mode")


class RunContextFilter(logging.Filter):
    """Attach the run's organization and search mode to every record."""

    def __init__(self, *, org: str | None = None, mode: str | None = None) -> None:
        super().__init__()
        self.org = org
        self.mode = mode

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (record)
        if self.org is not None and not hasattr(record, "org"):
            record.org = self.org
        if self.mode is not None and not hasattr(record, "mode"):
            record.mode = self.mode
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record; run context is lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_ATTRS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
            and key not in _CONTEXT_ATTRS
            and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Exceptions and Paths show up in `extra`; render them as text.
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, org: str | None = None, mode: str | None = None) -> None:
    """Send JSON records at ``level`` to stderr, tagged with ``org`` and ``mode``."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RunContextFilter(org=org, mode=mode))

    root.addHandler(handler)
    root.setLevel(level.upper())

    # requests logs every connection through urllib3 at DEBUG.
    logging.getLogger("urllib3").setLevel(max(root.level, logging.INFO))
