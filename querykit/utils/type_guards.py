"""Type guard functions for classifying bound values and parameter containers."""

import datetime
import uuid
from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from querykit.literal import Literal

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "is_array_value",
    "is_iterable_parameters",
    "is_literal",
    "is_named_parameters",
    "is_numeric",
    "is_scalar",
)

_SCALAR_TYPES = (
    str,
    bytes,
    bytearray,
    bool,
    int,
    float,
    Decimal,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    Enum,
)


def is_named_parameters(params: Any) -> "TypeGuard[Mapping[str, Any]]":
    """Check if parameters are keyed by placeholder name.

    Args:
        params: The parameters to check

    Returns:
        True if the parameters are a mapping, False otherwise
    """
    return isinstance(params, Mapping)


def is_iterable_parameters(params: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if parameters are iterable (but not string or dict).

    Args:
        params: The parameters to check

    Returns:
        True if the parameters are iterable, False otherwise
    """
    return isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray, dict))


def is_array_value(value: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if a bound value is a sequence that must be expanded into ``IN (...)``."""
    return isinstance(value, (list, tuple, set, frozenset))


def is_literal(value: Any) -> "TypeGuard[Literal]":
    """Check if a bound value is a raw SQL literal."""
    return isinstance(value, Literal)


def is_numeric(value: Any) -> bool:
    """Check if a value renders as an unquoted number (booleans excluded)."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_scalar(value: Any) -> bool:
    """Check if a value is a single non-null value a driver can bind."""
    return isinstance(value, _SCALAR_TYPES)
