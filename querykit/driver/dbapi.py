"""Driver adapter for any DB-API 2.0 connection."""

import contextlib
from typing import TYPE_CHECKING, Any, Optional

from querykit.exceptions import DriverError
from querykit.parameters.renderer import quote_literal
from querykit.typing import NO_PARAMETERS

if TYPE_CHECKING:
    from querykit.typing import QuoteFn, StatementParameters

__all__ = ("DBAPIDriver", "driver_error_from_exception")


def driver_error_from_exception(exc: BaseException) -> DriverError:
    """Translate a DB-API exception into a :class:`DriverError`.

    Picks up the SQLSTATE (``sqlstate`` on psycopg 3, ``pgcode`` on psycopg2)
    and the 1-based error position psycopg exposes as ``diag.statement_position``.
    """
    message = getattr(exc, "pgerror", None) or str(exc) or type(exc).__name__
    sql_state = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)
    position = getattr(getattr(exc, "diag", None), "statement_position", None)
    offset_hint = int(position) if position else None
    return DriverError(message.strip(), sql_state=sql_state, offset_hint=offset_hint)


class DBAPIDriver:
    """Runs statements on a DB-API 2.0 connection whose paramstyle accepts ``?`` and ``:name``."""

    __slots__ = ("_quote", "connection")

    def __init__(self, connection: Any, quote: "Optional[QuoteFn]" = None) -> None:
        self.connection = connection
        self._quote = quote or quote_literal

    def execute(self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS) -> Any:
        cursor = self.connection.cursor()
        try:
            if parameters is NO_PARAMETERS:
                cursor.execute(sql)
            else:
                cursor.execute(sql, parameters)
        # DB-API modules share no common exception base.
        except Exception as exc:
            with contextlib.suppress(Exception):
                cursor.close()
            raise driver_error_from_exception(exc) from exc
        return cursor

    def quote(self, value: Any) -> str:
        return self._quote(value)
