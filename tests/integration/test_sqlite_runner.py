"""Run the query runner end to end against an in-memory SQLite database."""

import sqlite3
from collections.abc import Generator

import pytest

from querykit.driver import DBAPIDriver, QueryRunner
from querykit.exceptions import EmptyArrayParameterError, QueryExecutionError
from querykit.literal import Literal

pytestmark = pytest.mark.integration


@pytest.fixture
def connection() -> "Generator[sqlite3.Connection, None, None]":
    connection = sqlite3.connect(":memory:")
    connection.executescript(
        """
        CREATE TABLE items (
            id INTEGER NOT NULL,
            type TEXT NOT NULL,
            value TEXT NOT NULL,
            active TEXT NOT NULL DEFAULT 't'
        );
        INSERT INTO items (id, type, value, active) VALUES
            (5, 'fruit', 'apple', 't'),
            (5, 'mammal', 'cat', 't'),
            (5, 'fruit', 'pear', 'f'),
            (7, 'mammal', 'rhino', 't');
        """
    )
    yield connection
    connection.close()


@pytest.fixture
def runner(connection: sqlite3.Connection) -> QueryRunner:
    return QueryRunner(DBAPIDriver(connection))


def test_select_rows_as_dicts(runner: QueryRunner) -> None:
    rows = runner.select("SELECT id, value FROM items WHERE type = :type ORDER BY value", {"type": "mammal"})

    assert rows == [{"id": 5, "value": "cat"}, {"id": 7, "value": "rhino"}]


def test_named_in_expansion(runner: QueryRunner) -> None:
    values = runner.select_column(
        "SELECT value FROM items WHERE value IN (:values) ORDER BY value", {"values": ["pear", "rhino", "x"]}
    )

    assert values == ["pear", "rhino"]


def test_positional_in_expansion(runner: QueryRunner) -> None:
    count = runner.select_value("SELECT COUNT(*) FROM items WHERE id = ? AND type IN (?)", [5, ("fruit", "mammal")])

    assert count == 3


def test_backslash_ending_string_keeps_later_placeholders(runner: QueryRunner) -> None:
    assert runner.select_value("SELECT 'C:\\' || ? || 'x'", ["y"]) == "C:\\yx"


def test_booleans_bind_as_flags(runner: QueryRunner) -> None:
    values = runner.select_column("SELECT value FROM items WHERE active = ? ORDER BY value", False)

    assert values == ["pear"]


def test_select_one_and_value(runner: QueryRunner) -> None:
    assert runner.select_one("SELECT id, value FROM items WHERE value = ?", "rhino") == {"id": 7, "value": "rhino"}
    assert runner.select_one("SELECT id FROM items WHERE value = ?", "dodo") is None
    assert runner.select_value("SELECT ? IS NULL", None) == 1


def test_execute_affected(runner: QueryRunner) -> None:
    assert runner.execute_affected("UPDATE items SET active = :active WHERE id = :id", {"active": True, "id": 5}) == 3
    assert runner.select_value("SELECT COUNT(*) FROM items WHERE active = 't'") == 4


def test_select_grouped(runner: QueryRunner) -> None:
    sql = "SELECT id, type, value FROM items ORDER BY rowid"

    assert runner.select_grouped(sql, "id[type][]=>value") == {
        5: {"fruit": ["apple", "pear"], "mammal": ["cat"]},
        7: {"mammal": ["rhino"]},
    }
    assert runner.select_grouped(sql, "id[type]=>value") == {
        5: {"fruit": "pear", "mammal": "cat"},
        7: {"mammal": "rhino"},
    }
    assert runner.select_grouped(sql, "id=>*") == {
        5: {"type": "fruit", "value": "pear"},
        7: {"type": "mammal", "value": "rhino"},
    }
    assert runner.select_grouped("SELECT id, value FROM items WHERE id = 0", "id=>*") == {}


def test_empty_in_list_is_rejected(runner: QueryRunner) -> None:
    with pytest.raises(EmptyArrayParameterError):
        runner.select("SELECT * FROM items WHERE id IN (:ids)", {"ids": []})


def test_syntax_error_carries_debug_query(runner: QueryRunner) -> None:
    with pytest.raises(QueryExecutionError) as exc_info:
        runner.select("SELECT * FORM items WHERE id = :id", {"id": 5})

    exc = exc_info.value
    assert "syntax error" in exc.message
    assert exc.sql == "SELECT * FORM items WHERE id = :id"
    assert exc.parameters == {"id": 5}
    assert exc.debug_sql == 'SELECT * FORM items WHERE id = <abbr title=":id">5</abbr>'
    assert isinstance(exc.__cause__.__cause__, sqlite3.Error)


def test_literals_in_statements(runner: QueryRunner, connection: sqlite3.Connection) -> None:
    bound = Literal.bind("upper(?)", "kiwi", runner.driver.quote)
    runner.execute(f"INSERT INTO items (id, type, value) VALUES (9, 'fruit', {bound})")

    assert runner.select_one("SELECT value, active FROM items WHERE id = 9") == {"value": "KIWI", "active": "t"}
    assert runner.render_debug_query("SELECT :v", {"v": bound}) == "SELECT upper('kiwi')"
