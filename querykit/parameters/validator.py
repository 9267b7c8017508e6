"""Placeholder extraction and parameter validation.

Placeholders are found with a single tokenizing regex so that ``?`` and
``:name`` inside string literals, comments, PostgreSQL casts and JSON
operators are never mistaken for parameters.
"""

import re
from typing import TYPE_CHECKING, Any, Final, Optional

from querykit.exceptions import ParamCountMismatchError, ParameterError, ParameterStyleMismatchError
from querykit.parameters.types import ParameterInfo, ParameterStyle
from querykit.typing import NO_PARAMETERS
from querykit.utils.type_guards import is_iterable_parameters, is_named_parameters

if TYPE_CHECKING:
    from collections.abc import Mapping

    from querykit.typing import StatementParameters

__all__ = ("ParameterValidator", "normalize_named_parameters")


_PARAMETER_REGEX: Final = re.compile(
    r"""
    # Literals and Comments (these should be matched first and skipped)
    (?P<escape_string>(?<!\w)[Ee]'(?:[^'\\]|\\.|'')*') |    # PostgreSQL E'...', backslash escapes
    (?P<dquote>"(?:[^"]|"")*") |                               # identifiers, "" escapes a quote
    (?P<squote>'(?:[^']|'')*') |                               # standard strings, '' escapes a quote
    # Dollar-quoted strings ($tag$...$tag$ or $$...$$), tag back-referenced by name
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag_inner>\w*)\$[\s\S]*?\$(?P=dollar_quote_tag_inner)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    # Tokens that contain parameter-like characters but are not parameters
    (?P<pg_q_operator>\?\?|\?\||\?&) |                         # PostgreSQL JSON operators ??, ?|, ?&
    (?P<pg_cast>::(?P<cast_type>\w+)) |                        # PostgreSQL ::type casting

    # Parameter Placeholders
    (?P<named_colon>(?<!\w):(?P<colon_name>[A-Za-z_]\w*)) |     # :name, whole word only
    (?P<qmark>\?)
    """,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)


def normalize_named_parameters(parameters: "Mapping[Any, Any]", sql: "Optional[str]" = None) -> "dict[str, Any]":
    """Key named values by bare placeholder name, so ``":id"`` and ``"id"`` address the same placeholder.

    Raises:
        ParameterError: If two keys name the same placeholder.
    """
    normalized: dict[str, Any] = {}
    for key, value in parameters.items():
        name = str(key)
        name = name[1:] if name.startswith(":") else name
        if name in normalized:
            msg = f"Parameter {name!r} is bound more than once"
            raise ParameterError(msg, sql)
        normalized[name] = value
    return normalized


class ParameterValidator:
    """Validates and extracts SQL parameters with detailed information."""

    def __init__(self) -> None:
        """Initialize validator with caching support."""
        self._parameter_cache: dict[str, list[ParameterInfo]] = {}

    def extract_parameters(self, sql: str) -> "list[ParameterInfo]":
        """Extract parameter information from SQL string.

        Args:
            sql: SQL string to analyze

        Returns:
            Placeholders in order of appearance
        """
        if sql in self._parameter_cache:
            return self._parameter_cache[sql]

        parameters: list[ParameterInfo] = []
        ordinal = 0

        for match in _PARAMETER_REGEX.finditer(sql):
            if match.group("qmark"):
                parameters.append(
                    ParameterInfo(
                        name=None,
                        style=ParameterStyle.QMARK,
                        position=match.start("qmark"),
                        ordinal=ordinal,
                        placeholder_text=match.group("qmark"),
                    )
                )
                ordinal += 1
            elif match.group("named_colon"):
                parameters.append(
                    ParameterInfo(
                        name=match.group("colon_name"),
                        style=ParameterStyle.NAMED_COLON,
                        position=match.start("named_colon"),
                        ordinal=ordinal,
                        placeholder_text=match.group("named_colon"),
                    )
                )
                ordinal += 1

        self._parameter_cache[sql] = parameters
        return parameters

    def get_parameter_style(self, sql: str) -> ParameterStyle:
        """Determine the placeholder style used by ``sql``.

        Raises:
            ParameterStyleMismatchError: If ``?`` and ``:name`` placeholders are mixed.

        Returns:
            ``NONE`` when the statement has no placeholders.
        """
        styles = {p.style for p in self.extract_parameters(sql)}
        if len(styles) > 1:
            raise ParameterStyleMismatchError(sql=sql)
        return styles.pop() if styles else ParameterStyle.NONE

    def validate_parameters(self, sql: str, parameters: "StatementParameters") -> None:
        """Check that ``parameters`` bind every placeholder of ``sql`` and nothing else.

        Args:
            sql: SQL with placeholders, after array expansion.
            parameters: Bound values, a mapping for ``:name`` or a sequence for ``?``.

        Raises:
            ParameterStyleMismatchError: Mixed placeholders, or a container that doesn't fit them.
            ParamCountMismatchError: Values and placeholders don't pair up exactly.
            ParameterError: Two named keys address the same placeholder.
        """
        style = self.get_parameter_style(sql)
        placeholders = self.extract_parameters(sql)

        if parameters is NO_PARAMETERS:
            return

        if is_named_parameters(parameters):
            if style is ParameterStyle.QMARK:
                msg = "Named parameters provided but the SQL uses positional placeholders"
                raise ParameterStyleMismatchError(msg, sql)
            expected = {p.name for p in placeholders}
            provided = set(normalize_named_parameters(parameters, sql))
            missing = expected - provided
            if missing:
                msg = f"Missing values for named parameters: {', '.join(sorted(str(m) for m in missing))}"
                raise ParamCountMismatchError(msg, sql, expected=len(expected), actual=len(provided))
            extra = provided - expected
            if extra:
                msg = f"Values provided for unknown named parameters: {', '.join(sorted(str(e) for e in extra))}"
                raise ParamCountMismatchError(msg, sql, expected=len(expected), actual=len(provided))
            return

        values: Any = parameters if is_iterable_parameters(parameters) else [parameters]
        if style is ParameterStyle.NAMED_COLON:
            msg = "Positional parameters provided but the SQL uses named placeholders"
            raise ParameterStyleMismatchError(msg, sql)
        if len(values) != len(placeholders):
            msg = f"Statement has {len(placeholders)} placeholders but {len(values)} values were bound"
            raise ParamCountMismatchError(msg, sql, expected=len(placeholders), actual=len(values))
