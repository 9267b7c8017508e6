"""Raw SQL fragments that are rendered verbatim instead of being quoted."""

import re
from typing import TYPE_CHECKING, Any, Final

from querykit.exceptions import ParamCountMismatchError

if TYPE_CHECKING:
    from querykit.typing import QuoteFn

__all__ = ("DEFAULT", "Literal", "defaultify")

_QMARK: Final = re.compile(r"\?")


class Literal:
    """A piece of SQL passed through as-is, e.g. ``NOW()`` or ``DEFAULT``.

    Literals are never quoted by the value renderer, so only wrap text that
    comes from code, never from user input.
    """

    __slots__ = ("sql",)

    def __init__(self, sql: str) -> None:
        self.sql = sql

    @classmethod
    def bind(cls, sql: str, parameters: Any, quote: "QuoteFn") -> "Literal":
        """Build a literal, replacing each ``?`` left to right with the next quoted parameter.

        Args:
            sql: SQL fragment with ``?`` placeholders.
            parameters: Values for the placeholders; a non-list value is bound to the only ``?``.
            quote: Driver quoting primitive.

        Raises:
            ParamCountMismatchError: If the fragment has more ``?`` than values.

        Returns:
            The bound literal.
        """
        values = list(parameters) if isinstance(parameters, (list, tuple)) else [parameters]
        placeholder_count = len(_QMARK.findall(sql))
        if placeholder_count > len(values):
            msg = "Literal has more placeholders than bound values"
            raise ParamCountMismatchError(msg, sql, expected=placeholder_count, actual=len(values))
        remaining = iter(values)
        return cls(_QMARK.sub(lambda _: quote(next(remaining)), sql))

    def __str__(self) -> str:
        return self.sql

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.sql!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return False
        return self.sql == other.sql

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.sql))


DEFAULT: Final = Literal("DEFAULT")


def defaultify(value: Any) -> Any:
    """Replace empty strings with ``DEFAULT``.

    Lists are processed element-wise and returned as a new list.
    """
    if isinstance(value, list):
        return [DEFAULT if item == "" else item for item in value]
    return DEFAULT if value == "" else value
