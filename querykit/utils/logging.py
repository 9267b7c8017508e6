"""Logging for querykit.

Every module logs through :func:`get_logger`, under the ``querykit``
namespace. Statement context (SQL text, bound values, the debug rendering of
a failed query and its SQLSTATE) travels in ``extra_fields`` via
:func:`log_with_context`; :class:`StructuredFormatter` groups it under a
``"query"`` key so log pipelines can index it without parsing messages.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from querykit._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = ("QUERY_FIELDS", "StructuredFormatter", "configure_logging", "get_logger", "log_with_context")

ROOT_LOGGER_NAME = "querykit"

QUERY_FIELDS = ("sql", "parameters", "debug_sql", "sql_state")
"""``extra_fields`` keys emitted under ``"query"`` rather than at the top level."""

_SQL_FIELDS = ("sql", "debug_sql")
_SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredFormatter(logging.Formatter):
    """Formats each record as one JSON object.

    Args:
        max_sql_length: Truncate ``sql`` and ``debug_sql`` to this many
            characters; ``None`` keeps them whole.
    """

    def __init__(self, *args: Any, max_sql_length: int | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.max_sql_length = max_sql_length

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.lineno:
            entry["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        fields = dict(getattr(record, "extra_fields", None) or {})
        query = {name: fields.pop(name) for name in QUERY_FIELDS if name in fields}
        if query:
            entry["query"] = self._truncate(query)
        entry.update(fields)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)

    def _truncate(self, query: dict[str, Any]) -> dict[str, Any]:
        limit = self.max_sql_length
        if limit is None:
            return query
        for name in _SQL_FIELDS:
            text = query.get(name)
            if isinstance(text, str) and len(text) > limit:
                query[name] = f"{text[:limit]}..."
        return query


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the querykit namespace.

    Args:
        name: Logger name, prefixed with ``querykit.`` unless it already is.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str | int = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
    max_sql_length: int | None = None,
) -> logging.Logger:
    """Route querykit's loggers to stdout, and optionally a file.

    Replaces any handlers previously attached to the ``querykit`` logger and
    stops propagation to the root logger.

    Args:
        level: Level name or number.
        format_style: ``"structured"`` for JSON, ``"simple"`` for text.
        log_to_file: Path of a file that receives structured records.
        extra_handlers: Handlers attached as given, formatter untouched.
        max_sql_length: Passed to every :class:`StructuredFormatter` created here.

    Returns:
        The ``querykit`` logger.
    """
    root_logger = get_logger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if format_style == "structured":
        console_handler.setFormatter(StructuredFormatter(max_sql_length=max_sql_length))
    else:
        console_handler.setFormatter(logging.Formatter(_SIMPLE_FORMAT))
    handlers: list[logging.Handler] = [console_handler]

    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter(max_sql_length=max_sql_length))
        handlers.append(file_handler)
    handlers.extend(extra_handlers or ())

    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.propagate = False

    log_with_context(
        root_logger,
        logging.DEBUG,
        "querykit logging configured",
        level=logging.getLevelName(root_logger.level),
        format_style=format_style,
        handlers_count=len(handlers),
    )
    return root_logger


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log a message with structured extra fields.

    Args:
        logger: The logger to use
        level: Log level
        message: Log message
        **extra_fields: Fields for the structured record; see :data:`QUERY_FIELDS`.
    """
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, "(unknown file)", 0, message, (), None)
    record.extra_fields = extra_fields  # type: ignore[attr-defined]
    logger.handle(record)
