"""Configuration for query templating, debug rendering and result reshaping.

Configuration objects are immutable and passed explicitly to the components
that need them; there is no process-wide configuration state.

- DebugRenderConfig: markup used when reconstructing a failed query
- QueryConfig: boolean normalization, parameter validation and render markup
- load_config_from_env: build a QueryConfig from ``QUERYKIT_*`` variables
"""

import os
from dataclasses import dataclass, field

from querykit.exceptions import ImproperConfigurationError
from querykit.utils.logging import get_logger

__all__ = ("DebugRenderConfig", "QueryConfig", "load_config_from_env")

logger = get_logger("config")


@dataclass(frozen=True)
class DebugRenderConfig:
    """Markup for debug reconstructions of a query.

    The error span wraps the token the driver reported the error at; the title
    template wraps each substituted value so the placeholder name shows on hover.
    """

    error_open_tag: str = '<span class="sql-error">'
    error_close_tag: str = "</span>"
    default_error_length: int = 5
    title_template: str = '<abbr title="{key}">{value}</abbr>'


@dataclass(frozen=True)
class QueryConfig:
    """Settings shared by the expander, renderer and query runner."""

    true_flag: str = "t"
    false_flag: str = "f"
    keep_key_columns: bool = False
    validate_parameters: bool = True
    render: DebugRenderConfig = field(default_factory=DebugRenderConfig)

    def __post_init__(self) -> None:
        errors = self.validate()
        if errors:
            msg = f"Invalid query configuration: {'; '.join(errors)}"
            raise ImproperConfigurationError(msg)

    def validate(self) -> "list[str]":
        """Validate configuration consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.true_flag == self.false_flag:
            errors.append("true_flag and false_flag must differ")
        if self.render.default_error_length < 0:
            errors.append("default_error_length must not be negative")
        if "{value}" not in self.render.title_template:
            errors.append("title_template must contain a {value} field")
        return errors

    def normalize_flag(self, value: bool) -> str:
        """Return the single-character flag sent in place of a boolean."""
        return self.true_flag if value else self.false_flag


def load_config_from_env(prefix: str = "QUERYKIT_") -> QueryConfig:
    """Load configuration from environment variables.

    Environment Variables Supported:
    - QUERYKIT_TRUE_FLAG / QUERYKIT_FALSE_FLAG: boolean flags (string)
    - QUERYKIT_KEEP_KEY_COLUMNS: keep grouping keys in reshaped rows (true/false)
    - QUERYKIT_VALIDATE_PARAMETERS: check placeholder counts before execute (true/false)
    - QUERYKIT_DEFAULT_ERROR_LENGTH: highlighted length when the error names no token (integer)

    Returns:
        QueryConfig loaded from environment variables
    """
    defaults = QueryConfig()
    render = DebugRenderConfig(
        default_error_length=_env_int(f"{prefix}DEFAULT_ERROR_LENGTH", defaults.render.default_error_length)
    )
    return QueryConfig(
        true_flag=os.getenv(f"{prefix}TRUE_FLAG", defaults.true_flag),
        false_flag=os.getenv(f"{prefix}FALSE_FLAG", defaults.false_flag),
        keep_key_columns=_env_bool(f"{prefix}KEEP_KEY_COLUMNS", defaults.keep_key_columns),
        validate_parameters=_env_bool(f"{prefix}VALIDATE_PARAMETERS", defaults.validate_parameters),
        render=render,
    )


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on", "enabled")


def _env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer value for %s: %s, using default %d", key, value, default)
        return default
