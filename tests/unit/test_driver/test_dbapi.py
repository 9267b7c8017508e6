"""Tests for the DB-API driver adapter and row conversion."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from querykit.driver import DBAPIDriver, Driver, driver_error_from_exception, rows_from_cursor
from querykit.exceptions import DriverError
from querykit.typing import NO_PARAMETERS


class FakePsycopgError(Exception):
    def __init__(self, message: str, sqlstate: str, position: "str | None") -> None:
        super().__init__(message)
        self.sqlstate = sqlstate
        self.diag = SimpleNamespace(statement_position=position)


class FakeCursor:
    def __init__(self, description, rows) -> None:
        self.description = description
        self._rows = list(rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None


def test_rows_from_cursor_maps_tuples() -> None:
    cursor = FakeCursor([("id", None), ("name", None)], [(1, "a"), (2, "b")])

    assert list(rows_from_cursor(cursor)) == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


def test_rows_from_cursor_accepts_mapping_rows() -> None:
    cursor = FakeCursor([("id",)], [{"id": 1}])

    assert list(rows_from_cursor(cursor)) == [{"id": 1}]


def test_rows_from_cursor_without_result_set() -> None:
    assert list(rows_from_cursor(FakeCursor(None, []))) == []


def test_driver_error_from_psycopg_style_exception() -> None:
    error = driver_error_from_exception(FakePsycopgError('syntax error at or near "FORM"', "42601", "10"))

    assert error.message == 'syntax error at or near "FORM"'
    assert error.sql_state == "42601"
    assert error.offset_hint == 10


def test_driver_error_from_psycopg2_style_exception() -> None:
    exc = Exception("ignored")
    exc.pgerror = "ERROR:  relation \"nope\" does not exist\n"  # type: ignore[attr-defined]
    exc.pgcode = "42P01"  # type: ignore[attr-defined]

    error = driver_error_from_exception(exc)

    assert error.message == 'ERROR:  relation "nope" does not exist'
    assert error.sql_state == "42P01"
    assert error.offset_hint is None


def test_driver_error_from_plain_exception() -> None:
    error = driver_error_from_exception(RuntimeError())

    assert error.message == "RuntimeError"
    assert error.sql_state is None


def test_execute_passes_parameters_to_cursor() -> None:
    connection = MagicMock()
    driver = DBAPIDriver(connection)

    cursor = driver.execute("SELECT ?", [1])

    assert cursor is connection.cursor.return_value
    cursor.execute.assert_called_once_with("SELECT ?", [1])


def test_execute_without_parameters() -> None:
    connection = MagicMock()

    DBAPIDriver(connection).execute("SELECT 1", NO_PARAMETERS)

    connection.cursor.return_value.execute.assert_called_once_with("SELECT 1")


def test_execute_translates_errors_and_closes_cursor() -> None:
    connection = MagicMock()
    cursor = connection.cursor.return_value
    cursor.execute.side_effect = FakePsycopgError("boom", "XX000", None)

    with pytest.raises(DriverError) as exc_info:
        DBAPIDriver(connection).execute("SELECT 1", [])

    assert exc_info.value.sql_state == "XX000"
    assert isinstance(exc_info.value.__cause__, FakePsycopgError)
    cursor.close.assert_called_once()


def test_quote_defaults_to_standard_literals() -> None:
    driver = DBAPIDriver(MagicMock())

    assert driver.quote("it's") == "'it''s'"
    assert DBAPIDriver(MagicMock(), quote=lambda value: "?").quote(1) == "?"
    assert isinstance(driver, Driver)
