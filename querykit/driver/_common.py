"""Contracts for the database driver the engine runs on top of."""

import logging
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

from querykit.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from querykit.exceptions import QueryExecutionError
    from querykit.typing import DictRow, StatementParameters

__all__ = (
    "Driver",
    "ErrorAction",
    "ErrorHandler",
    "LoggingErrorHandler",
    "RaiseErrorHandler",
    "rows_from_cursor",
)


@runtime_checkable
class Driver(Protocol):
    """A live connection able to execute statements and quote literals.

    ``execute`` must raise :class:`~querykit.exceptions.DriverError` when the
    database rejects a statement.
    """

    def execute(self, sql: str, parameters: "StatementParameters") -> Any:
        """Execute ``sql`` and return a DB-API style cursor."""
        ...

    def quote(self, value: Any) -> str:
        """Render ``value`` as a literal safe for this driver's dialect."""
        ...


class ErrorAction(str, Enum):
    """What the runner does after an error handler has seen a failed statement."""

    RECOVER = "recover"
    PROPAGATE = "propagate"

    def __str__(self) -> str:
        return self.value


@runtime_checkable
class ErrorHandler(Protocol):
    """Strategy deciding whether a failed statement aborts the caller."""

    def handle(self, error: "QueryExecutionError") -> ErrorAction:
        """Inspect a failed statement; ``error.__cause__`` is the driver error."""
        ...


class RaiseErrorHandler:
    """Always propagates."""

    def handle(self, error: "QueryExecutionError") -> ErrorAction:
        return ErrorAction.PROPAGATE


class LoggingErrorHandler:
    """Logs the debug rendering of a failed statement, then propagates."""

    def __init__(self, logger: "Optional[logging.Logger]" = None, level: int = logging.ERROR) -> None:
        self.logger = logger or get_logger("driver.errors")
        self.level = level

    def handle(self, error: "QueryExecutionError") -> ErrorAction:
        log_with_context(
            self.logger,
            self.level,
            f"Query failed: {error.message}",
            sql=error.sql,
            debug_sql=error.debug_sql,
            parameters=error.parameters,
            sql_state=error.sql_state,
        )
        return ErrorAction.PROPAGATE


def rows_from_cursor(cursor: Any) -> "Iterator[DictRow]":
    """Yield the remaining rows of a DB-API cursor as dicts keyed by column name.

    Yields nothing for statements that return no result set.
    """
    description = getattr(cursor, "description", None)
    if not description:
        return
    columns = [column[0] for column in description]
    while (row := cursor.fetchone()) is not None:
        yield dict(row) if isinstance(row, Mapping) else dict(zip(columns, row))
