"""querykit: parameterized query templating and result reshaping."""

from querykit import driver, exceptions, parameters, result, typing, utils
from querykit.__metadata__ import __version__
from querykit.config import DebugRenderConfig, QueryConfig, load_config_from_env
from querykit.driver import DBAPIDriver, ErrorAction, LoggingErrorHandler, QueryRunner, RaiseErrorHandler
from querykit.exceptions import (
    DriverError,
    EmptyArrayParameterError,
    ImproperConfigurationError,
    InvalidFormatSpecError,
    ParamCountMismatchError,
    ParameterError,
    ParameterStyleMismatchError,
    QueryExecutionError,
    QueryKitError,
    UnsupportedNestedArrayBindingError,
    UnsupportedValueKindError,
)
from querykit.literal import DEFAULT, Literal, defaultify
from querykit.parameters import expand_array_parameters, highlight_errors, quote_literal, render_debug_query
from querykit.result import parse_format_spec, reshape
from querykit.typing import NO_PARAMETERS, StatementParameters

__all__ = (
    "DEFAULT",
    "NO_PARAMETERS",
    "DBAPIDriver",
    "DebugRenderConfig",
    "DriverError",
    "EmptyArrayParameterError",
    "ErrorAction",
    "ImproperConfigurationError",
    "InvalidFormatSpecError",
    "Literal",
    "LoggingErrorHandler",
    "ParamCountMismatchError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "QueryConfig",
    "QueryExecutionError",
    "QueryKitError",
    "QueryRunner",
    "RaiseErrorHandler",
    "StatementParameters",
    "UnsupportedNestedArrayBindingError",
    "UnsupportedValueKindError",
    "__version__",
    "defaultify",
    "driver",
    "exceptions",
    "expand_array_parameters",
    "highlight_errors",
    "load_config_from_env",
    "parameters",
    "parse_format_spec",
    "quote_literal",
    "render_debug_query",
    "reshape",
    "result",
    "typing",
    "utils",
)
