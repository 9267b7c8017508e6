"""Rendering of single bound values for debug output."""

import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from querykit.config import QueryConfig
from querykit.exceptions import UnsupportedValueKindError
from querykit.utils.type_guards import is_literal, is_numeric, is_scalar

if TYPE_CHECKING:
    from querykit.typing import QuoteFn

__all__ = ("normalize_value", "quote_literal", "render_value")


def normalize_value(value: Any, config: "Optional[QueryConfig]" = None) -> Any:
    """Normalize a scalar for binding; booleans become single-character flags."""
    if isinstance(value, bool):
        return (config or QueryConfig()).normalize_flag(value)
    return value


def render_value(
    value: Any,
    key: str,
    quote: "QuoteFn",
    for_error_display: bool = False,
    config: "Optional[QueryConfig]" = None,
) -> str:
    """Render one bound value as SQL text for a debug reconstruction.

    Without error display the value is shown as a plain literal: numbers bare,
    everything else between single quotes with no escaping. This text is for
    reading only and must never be executed.

    With error display the value goes through the driver's quoting primitive
    and is wrapped in the configured title markup naming the placeholder.

    Args:
        value: The bound value.
        key: Placeholder text the value is bound to (``:name`` or ``?``).
        quote: Driver quoting primitive.
        for_error_display: Whether the rendering is for a failed query.
        config: Supplies boolean flags and the title template.

    Raises:
        UnsupportedValueKindError: If the value is neither scalar, null nor a :class:`~querykit.literal.Literal`.

    Returns:
        Rendered SQL text.
    """
    config = config or QueryConfig()

    if is_literal(value):
        rendered = value.sql
    elif value is not None and not is_scalar(value):
        raise UnsupportedValueKindError(key, value)
    else:
        value = normalize_value(value, config)
        if for_error_display:
            rendered = quote(value)
        elif value is None:
            rendered = "NULL"
        elif is_numeric(value):
            rendered = str(value)
        else:
            rendered = f"'{value}'"

    if for_error_display:
        return config.render.title_template.format(key=key, value=rendered)
    return rendered


def quote_literal(value: Any) -> str:
    """Render a value as a standard SQL literal.

    Text is single-quoted with embedded quotes doubled, which is correct for
    PostgreSQL with ``standard_conforming_strings`` and for SQLite. Used when
    no driver-specific quoting primitive is available.

    Raises:
        UnsupportedValueKindError: If the value is neither scalar, null nor a literal.
    """
    if value is None:
        return "NULL"
    if is_literal(value):
        return value.sql
    if isinstance(value, Enum):
        return quote_literal(value.value)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if is_numeric(value):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return f"X'{bytes(value).hex()}'"
    if isinstance(value, (datetime.date, datetime.time)):
        return f"'{value.isoformat()}'"
    if not is_scalar(value):
        raise UnsupportedValueKindError("literal", value)
    text = str(value).replace("'", "''")
    return f"'{text}'"
