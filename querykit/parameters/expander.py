"""Expansion of sequence-valued parameters into ``IN (...)`` placeholder lists.

A driver binds one value per placeholder, so ``WHERE id IN (:ids)`` with
``ids=[1, 2, 3]`` is rewritten to ``WHERE id IN (:ids__0, :ids__1, :ids__2)``
with three scalar parameters, and ``WHERE id IN (?)`` with ``[[1, 2, 3]]`` to
``WHERE id IN (?, ?, ?)`` with the list spliced in place.
"""

import re
from typing import TYPE_CHECKING, Any, Final, Optional

from mypy_extensions import mypyc_attr

from querykit.config import QueryConfig
from querykit.exceptions import (
    EmptyArrayParameterError,
    ParamCountMismatchError,
    ParameterError,
    UnsupportedNestedArrayBindingError,
    UnsupportedValueKindError,
)
from querykit.parameters.fragments import apply_fragments
from querykit.parameters.renderer import normalize_value
from querykit.parameters.types import ParameterStyle, RenderedFragment
from querykit.parameters.validator import ParameterValidator, normalize_named_parameters
from querykit.typing import NO_PARAMETERS
from querykit.utils.logging import get_logger
from querykit.utils.type_guards import is_array_value, is_iterable_parameters, is_named_parameters

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from querykit.typing import StatementParameters

__all__ = ("ArrayParameterExpander", "expand_array_parameters")

logger = get_logger("parameters.expander")

_POSITIONAL_IN: Final = re.compile(r"\sIN\s*\(\s*(?P<mark>\?)\s*\)", re.IGNORECASE)


def _named_in_pattern(name: str) -> "re.Pattern[str]":
    return re.compile(rf"\sIN\s*\(\s*(?P<mark>:{re.escape(name)})\s*\)", re.IGNORECASE)


@mypyc_attr(allow_interpreted_subclasses=False)
class ArrayParameterExpander:
    """Rewrites ``IN (:name)`` / ``IN (?)`` placeholders bound to sequences."""

    __slots__ = ("_config", "_validator")

    def __init__(
        self, config: "Optional[QueryConfig]" = None, validator: "Optional[ParameterValidator]" = None
    ) -> None:
        self._config = config or QueryConfig()
        self._validator = validator or ParameterValidator()

    def expand(self, sql: str, parameters: "StatementParameters") -> "tuple[str, StatementParameters]":
        """Expand every sequence-valued parameter into one placeholder per element.

        Booleans, inside sequences or not, are normalized to the configured flags.

        Args:
            sql: Query template.
            parameters: Bound values, a mapping for ``:name`` or a sequence for ``?``.

        Raises:
            UnsupportedNestedArrayBindingError: A sequence is bound to a placeholder not inside ``IN (...)``.
            EmptyArrayParameterError: An empty sequence is bound to ``IN (...)``.
            ParamCountMismatchError: A positional sequence has no placeholder to bind to.
            UnsupportedValueKindError: A mapping is bound as a single value.
            ParameterError: A generated ``name__N`` key is already bound, or two keys name one placeholder.

        Returns:
            The rewritten SQL and parameters; no value in the result is a sequence.
        """
        if parameters is NO_PARAMETERS:
            return sql, parameters
        if is_named_parameters(parameters):
            return self._expand_named(sql, parameters)
        values = list(parameters) if is_iterable_parameters(parameters) else [parameters]
        return self._expand_positional(sql, values)

    def _expand_named(self, sql: str, parameters: "Mapping[str, Any]") -> "tuple[str, dict[str, Any]]":
        placeholder_positions = {
            p.position for p in self._validator.extract_parameters(sql) if p.style is ParameterStyle.NAMED_COLON
        }
        named = normalize_named_parameters(parameters, sql)
        fragments: list[RenderedFragment] = []
        expanded: dict[str, Any] = {}

        for name, value in named.items():
            if not is_array_value(value):
                expanded[name] = self._normalize_scalar(name, value)
                continue

            matches = [
                m for m in _named_in_pattern(name).finditer(sql) if m.start("mark") in placeholder_positions
            ]
            if not matches:
                raise UnsupportedNestedArrayBindingError(name, sql)
            items = list(value)
            if not items:
                raise EmptyArrayParameterError(name, sql)

            new_names = [f"{name}__{index}" for index in range(len(items))]
            for new_name in new_names:
                if new_name in named or new_name in expanded:
                    msg = f"Expanded parameter name {new_name!r} collides with a bound parameter"
                    raise ParameterError(msg, sql)
            replacement = f" IN ({', '.join(f':{new_name}' for new_name in new_names)})"
            fragments.extend(RenderedFragment(m.start(), m.end(), replacement) for m in matches)
            for new_name, item in zip(new_names, items):
                expanded[new_name] = self._normalize_scalar(new_name, item)
            logger.debug("Expanded :%s into %d parameters (%d occurrences)", name, len(items), len(matches))

        return apply_fragments(sql, fragments), expanded

    def _expand_positional(self, sql: str, values: "Sequence[Any]") -> "tuple[str, list[Any]]":
        qmarks = [p for p in self._validator.extract_parameters(sql) if p.style is ParameterStyle.QMARK]
        in_matches = {m.start("mark"): m for m in _POSITIONAL_IN.finditer(sql)}
        fragments: list[RenderedFragment] = []
        expanded: list[Any] = []

        for index, value in enumerate(values):
            if not is_array_value(value):
                expanded.append(self._normalize_scalar(index, value))
                continue

            if index >= len(qmarks):
                msg = f"Sequence bound at position {index} has no placeholder"
                raise ParamCountMismatchError(msg, sql, expected=len(qmarks), actual=len(values))
            match = in_matches.get(qmarks[index].position)
            if match is None:
                raise UnsupportedNestedArrayBindingError(index, sql)
            items = list(value)
            if not items:
                raise EmptyArrayParameterError(index, sql)

            fragments.append(RenderedFragment(match.start(), match.end(), f" IN ({', '.join('?' * len(items))})"))
            expanded.extend(self._normalize_scalar(index, item) for item in items)
            logger.debug("Expanded positional parameter %d into %d parameters", index, len(items))

        return apply_fragments(sql, fragments), expanded

    def _normalize_scalar(self, key: Any, value: Any) -> Any:
        if is_named_parameters(value) or is_array_value(value):
            raise UnsupportedValueKindError(key, value)
        return normalize_value(value, self._config)


def expand_array_parameters(
    sql: str, parameters: "StatementParameters", config: "Optional[QueryConfig]" = None
) -> "tuple[str, StatementParameters]":
    """Expand sequence-valued parameters; see :meth:`ArrayParameterExpander.expand`."""
    return ArrayParameterExpander(config=config).expand(sql, parameters)
