from typing import Any, Optional

__all__ = (
    "DriverError",
    "EmptyArrayParameterError",
    "ImproperConfigurationError",
    "InvalidFormatSpecError",
    "ParamCountMismatchError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "QueryExecutionError",
    "QueryKitError",
    "UnsupportedNestedArrayBindingError",
    "UnsupportedValueKindError",
)


class QueryKitError(Exception):
    """Base exception class from which all querykit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``QueryKitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(QueryKitError):
    """Improper Configuration error.

    Raised when a configuration value, or the environment variable it was read from, is invalid.
    """


# -- Parameter Errors --
class ParameterError(QueryKitError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParamCountMismatchError(ParameterError):
    """Raised when the number of bound values does not match the placeholders."""

    def __init__(
        self, message: str, sql: Optional[str] = None, expected: Optional[int] = None, actual: Optional[int] = None
    ) -> None:
        super().__init__(message, sql)
        self.expected = expected
        self.actual = actual


class UnsupportedNestedArrayBindingError(ParameterError):
    """Raised when a sequence value has no ``IN (...)`` placeholder to expand into."""

    def __init__(self, key: Any, sql: Optional[str] = None) -> None:
        super().__init__(f"Nested array provided to bind to a query for parameter {key!r}", sql)
        self.key = key


class EmptyArrayParameterError(ParameterError):
    """Raised when an empty sequence is bound to an ``IN (...)`` placeholder."""

    def __init__(self, key: Any, sql: Optional[str] = None) -> None:
        super().__init__(f"Empty sequence bound to IN placeholder for parameter {key!r}", sql)
        self.key = key


class ParameterStyleMismatchError(ParameterError):
    """Error when parameter style doesn't match SQL placeholder style.

    Raised for templates mixing ``?`` and ``:name`` placeholders, and when the
    parameter container (mapping or sequence) doesn't fit the placeholders found.
    """

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Parameter style mismatch: named and positional placeholders cannot be mixed."
        super().__init__(message, sql)


class UnsupportedValueKindError(QueryKitError):
    """Raised when a value that is neither scalar, null nor a literal reaches the renderer."""

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value_type = type(value).__name__
        super().__init__(f"Cannot render value of type {self.value_type!r} bound to {key!r}")


class InvalidFormatSpecError(QueryKitError):
    """Raised when a grouping format string is malformed or doesn't fit the result rows."""

    def __init__(self, format_spec: str, message: Optional[str] = None) -> None:
        self.format_spec = format_spec
        super().__init__(f"{message or 'Invalid format pattern'}: {format_spec!r}")


# -- Execution Errors --
class DriverError(QueryKitError):
    """Error reported by the database driver while executing a statement."""

    def __init__(self, message: str, sql_state: Optional[str] = None, offset_hint: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.sql_state = sql_state
        self.offset_hint = offset_hint


class QueryExecutionError(QueryKitError):
    """Raised when a statement fails, with the debug rendering of the failing query attached."""

    def __init__(
        self,
        message: str,
        sql: str,
        parameters: Any = None,
        debug_sql: Optional[str] = None,
        sql_state: Optional[str] = None,
    ) -> None:
        detail_message = message
        if debug_sql:
            detail_message = f"{message}\nQuery: {debug_sql}"
        super().__init__(detail=detail_message)
        self.message = message
        self.sql = sql
        self.parameters = parameters
        self.debug_sql = debug_sql
        self.sql_state = sql_state
