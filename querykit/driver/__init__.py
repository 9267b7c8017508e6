"""Driver contracts, the DB-API adapter and the query runner."""

from querykit.driver._common import (
    Driver,
    ErrorAction,
    ErrorHandler,
    LoggingErrorHandler,
    RaiseErrorHandler,
    rows_from_cursor,
)
from querykit.driver.dbapi import DBAPIDriver, driver_error_from_exception
from querykit.driver.runner import QueryRunner

__all__ = (
    "DBAPIDriver",
    "Driver",
    "ErrorAction",
    "ErrorHandler",
    "LoggingErrorHandler",
    "QueryRunner",
    "RaiseErrorHandler",
    "driver_error_from_exception",
    "rows_from_cursor",
)
