from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Final, Literal, Union

from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = (
    "NO_PARAMETERS",
    "DictRow",
    "GroupedResult",
    "NoParametersEnum",
    "NoParametersType",
    "QuoteFn",
    "RowMapping",
    "StatementParameters",
)


class NoParametersEnum(Enum):
    """Sentinel marking a statement executed without any bound values."""

    NO_PARAMETERS = 0


NoParametersType: TypeAlias = Literal[NoParametersEnum.NO_PARAMETERS]
NO_PARAMETERS: Final = NoParametersEnum.NO_PARAMETERS
"""Passed instead of parameters when the statement should run unprepared."""

DictRow: TypeAlias = "dict[str, Any]"
"""Type variable for DictRow types."""
RowMapping: TypeAlias = "Mapping[str, Any]"
"""A single result row keyed by column name."""

StatementParameters: TypeAlias = "Union[Any, dict[str, Any], list[Any], tuple[Any, ...], None, NoParametersType]"
"""Type alias for statement parameters.

Represents:
- :type:`dict[str, Any]` for ``:name`` placeholders
- :type:`list[Any]` / :type:`tuple[Any, ...]` for ``?`` placeholders
- a single scalar, bound to the only ``?``
- :data:`NO_PARAMETERS`
"""

QuoteFn: TypeAlias = Callable[[Any], str]
"""Driver quoting primitive: scalar value in, dialect-safe SQL literal out."""

GroupedResult: TypeAlias = "dict[Any, Any]"
"""Nested mapping produced by the result reshaper."""
