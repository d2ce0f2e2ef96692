"""Logging setup for cephmeta.

Library code only logs at DEBUG and never installs handlers: the package
logger carries a ``NullHandler`` so lookups stay silent unless an application
configures logging.  ``configure_logging`` is for applications such as the
CLI and renders the lookup context (bucket, key, access level, ...) that
``cephmeta.meta`` attaches via ``extra``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

LIBRARY_LOGGER = "cephmeta"

# Attributes cephmeta attaches to records through ``extra``.
LOOKUP_FIELDS = ("bucket", "key", "status", "access_level", "duration_ms")

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def lookup_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the lookup fields present on ``record``, in LOOKUP_FIELDS order."""
    context = {}
    for name in LOOKUP_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            context[name] = value
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, lookup context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(lookup_context(record))
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class LookupTextFormatter(logging.Formatter):
    """Plain text with the lookup context appended as ``[bucket=... key=...]``."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = lookup_context(record)
        if not context:
            return line
        pairs = " ".join(f"{name}={value}" for name, value in context.items())
        return f"{line} [{pairs}]"


def install_null_handler() -> None:
    """Keep the library logger silent when the application configures nothing."""
    logger = logging.getLogger(LIBRARY_LOGGER)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())


def configure_logging(
    level: str = "INFO",
    fmt: str = "text",
    library_level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Install a single root handler for an application using cephmeta.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        fmt: 'text' or 'json'.
        library_level: Level for the ``cephmeta`` logger.  Set it to DEBUG to
            see per-request signing and ACL resolution; None inherits ``level``.
        stream: Destination, stderr by default.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else LookupTextFormatter())
    root.addHandler(handler)

    library = logging.getLogger(LIBRARY_LOGGER)
    if library_level is None:
        library.setLevel(logging.NOTSET)
    else:
        library.setLevel(getattr(logging, library_level.upper(), logging.WARNING))
