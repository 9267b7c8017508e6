"""Query runner tying parameter expansion, driver execution and result reshaping together."""

import contextlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from mypy_extensions import mypyc_attr

from querykit.config import QueryConfig
from querykit.driver._common import ErrorAction, RaiseErrorHandler, rows_from_cursor
from querykit.exceptions import DriverError, QueryExecutionError, QueryKitError
from querykit.parameters.binder import DebugQueryRenderer, highlight_errors
from querykit.parameters.expander import ArrayParameterExpander
from querykit.parameters.validator import ParameterValidator
from querykit.result.format_spec import parse_format_spec
from querykit.result.reshaper import reshape
from querykit.typing import NO_PARAMETERS
from querykit.utils.logging import get_logger, log_with_context
from querykit.utils.type_guards import is_iterable_parameters

if TYPE_CHECKING:
    from querykit.driver._common import Driver, ErrorHandler
    from querykit.typing import DictRow, GroupedResult, StatementParameters

__all__ = ("QueryRunner",)

logger = get_logger("driver.runner")


def _as_parameters(parameters: Any) -> "StatementParameters":
    """Wrap a single scalar, ``None`` included, as a one-element positional list."""
    if parameters is NO_PARAMETERS or isinstance(parameters, Mapping) or is_iterable_parameters(parameters):
        return parameters
    return [parameters]


def _with_offset(message: str, offset_hint: Optional[int]) -> str:
    if offset_hint is None or "at character" in message:
        return message
    return f"{message} at character {offset_hint}"


@mypyc_attr(allow_interpreted_subclasses=False)
class QueryRunner:
    """Executes query templates through a :class:`~querykit.driver.Driver`.

    Sequence-valued parameters are expanded before execution. When the driver
    rejects a statement the runner builds a debug rendering of it, asks the
    error handler what to do, and raises :class:`QueryExecutionError` unless
    the handler recovers.
    """

    __slots__ = ("_expander", "_renderer", "_validator", "config", "driver", "error_handler")

    def __init__(
        self,
        driver: "Driver",
        config: "Optional[QueryConfig]" = None,
        error_handler: "Optional[ErrorHandler]" = None,
    ) -> None:
        self.driver = driver
        self.config = config or QueryConfig()
        self.error_handler = error_handler or RaiseErrorHandler()
        self._validator = ParameterValidator()
        self._expander = ArrayParameterExpander(config=self.config, validator=self._validator)
        self._renderer = DebugQueryRenderer(quote=driver.quote, config=self.config, validator=self._validator)

    def prepare(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> "tuple[str, StatementParameters]":
        """Return the SQL and parameters that would be sent to the driver."""
        if not sql or not sql.strip():
            msg = "Cannot execute an empty query"
            raise QueryKitError(msg)
        final_sql, final_parameters = self._expander.expand(sql, _as_parameters(parameters))
        if self.config.validate_parameters:
            self._validator.validate_parameters(final_sql, final_parameters)
        return final_sql, final_parameters

    def execute(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> Any:
        """Execute a statement and return the driver's cursor.

        Returns ``None`` when the error handler recovered from a failure.

        Raises:
            QueryExecutionError: If the driver rejects the statement.
        """
        final_sql, final_parameters = self.prepare(sql, parameters)
        log_with_context(logger, logging.DEBUG, "Executing statement", sql=final_sql, parameters=final_parameters)
        try:
            return self.driver.execute(final_sql, final_parameters)
        except DriverError as exc:
            error = self._execution_error(final_sql, final_parameters, exc)
            error.__cause__ = exc
            if self.error_handler.handle(error) is ErrorAction.RECOVER:
                logger.debug("Recovered from failed statement: %s", exc.message)
                return None
            raise error from exc

    def execute_affected(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> Optional[int]:
        """Execute a statement and return the number of affected rows."""
        cursor = self.execute(sql, parameters)
        if cursor is None:
            return None
        with contextlib.closing(cursor):
            return cursor.rowcount

    def select(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> "Optional[list[DictRow]]":
        cursor = self.execute(sql, parameters)
        if cursor is None:
            return None
        with contextlib.closing(cursor):
            return list(rows_from_cursor(cursor))

    def select_one(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> "Optional[DictRow]":
        """Return the first row, or ``None`` when there is none."""
        cursor = self.execute(sql, parameters)
        if cursor is None:
            return None
        with contextlib.closing(cursor):
            return next(rows_from_cursor(cursor), None)

    def select_value(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> Any:
        """Return the first column of the first row, or ``None`` when there is no row."""
        row = self.select_one(sql, parameters)
        if not row:
            return None
        return next(iter(row.values()))

    def select_column(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> "Optional[list[Any]]":
        """Return the first column of every row."""
        rows = self.select(sql, parameters)
        if rows is None:
            return None
        return [next(iter(row.values())) for row in rows]

    def select_grouped(
        self,
        sql: str,
        format_spec: str,
        parameters: "StatementParameters" = NO_PARAMETERS,
        keep_key_columns: Optional[bool] = None,
    ) -> "Optional[GroupedResult]":
        """Execute a query and reshape its rows per ``format_spec``.

        The format string is parsed before the query runs, so a malformed one
        raises :class:`~querykit.exceptions.InvalidFormatSpecError` without
        touching the database.
        """
        spec = parse_format_spec(format_spec)
        rows = self.select(sql, parameters)
        if rows is None:
            return None
        if keep_key_columns is None:
            keep_key_columns = self.config.keep_key_columns
        return reshape(rows, spec, keep_key_columns=keep_key_columns)

    def render_debug_query(
        self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS, error_message: Optional[str] = None
    ) -> str:
        """Reconstruct ``sql`` with ``parameters`` using the driver's quoting."""
        return self._renderer.render(sql, _as_parameters(parameters), error_message)

    def _execution_error(self, sql: str, parameters: "StatementParameters", exc: DriverError) -> QueryExecutionError:
        message = _with_offset(exc.message, exc.offset_hint)
        try:
            debug_sql = self._renderer.render(sql, parameters, message)
        except QueryKitError as render_error:
            logger.warning("Could not render failed query with parameters: %s", render_error)
            debug_sql = highlight_errors(sql, message, self.config)
        return QueryExecutionError(
            exc.message, sql, parameters=parameters, debug_sql=debug_sql, sql_state=exc.sql_state
        )
