"""Debug reconstruction of parameterized queries.

The binder substitutes bound values into a query template so a human can
read what was sent to the database, and marks the span a driver error points
at. The output is never executed: real binding is always left to the driver.

All substitutions and error markers are computed as fragments over the
unmodified template and applied in one pass, so offsets reported by the
driver line up with the text the driver actually received.
"""

import re
from collections import defaultdict
from typing import TYPE_CHECKING, Any, Final, Optional

from mypy_extensions import mypyc_attr

from querykit.config import QueryConfig
from querykit.exceptions import ParamCountMismatchError
from querykit.parameters.fragments import apply_fragments
from querykit.parameters.renderer import quote_literal, render_value
from querykit.parameters.types import ParameterStyle, RenderedFragment
from querykit.parameters.validator import ParameterValidator, normalize_named_parameters
from querykit.typing import NO_PARAMETERS
from querykit.utils.type_guards import is_iterable_parameters, is_named_parameters

if TYPE_CHECKING:
    from querykit.parameters.types import ParameterInfo
    from querykit.typing import QuoteFn, StatementParameters

__all__ = ("DebugQueryRenderer", "highlight_errors", "render_debug_query")

_ERROR_OFFSET: Final = re.compile(r"at character (\d+)")
_ERROR_TOKEN: Final = re.compile(r'"([^"]+)"')


def _error_fragments(sql: str, error_message: Optional[str], config: QueryConfig) -> "list[RenderedFragment]":
    """Locate the error span named by a driver message like ``... "FORM" at character 15``."""
    if error_message is None:
        return []
    offset_match = _ERROR_OFFSET.search(error_message)
    if offset_match is None:
        return []
    start = min(max(int(offset_match.group(1)) - 1, 0), len(sql))
    token_match = _ERROR_TOKEN.search(error_message)
    length = len(token_match.group(1)) if token_match else config.render.default_error_length
    end = min(start + length, len(sql))
    return [
        RenderedFragment(start, start, config.render.error_open_tag),
        RenderedFragment(end, end, config.render.error_close_tag),
    ]


def _snap_outside(fragment: RenderedFragment, replacements: "list[RenderedFragment]", to_end: bool) -> RenderedFragment:
    """Move an insertion that falls inside a replaced placeholder to that placeholder's edge."""
    for replacement in replacements:
        if replacement.position < fragment.position < replacement.end:
            position = replacement.end if to_end else replacement.position
            return RenderedFragment(position, position, fragment.text)
    return fragment


def highlight_errors(sql: str, error_message: Optional[str], config: "Optional[QueryConfig]" = None) -> str:
    """Wrap the span a driver error points at in the configured error markup.

    Returns ``sql`` unchanged when there is no error or the message carries no
    ``at character <N>`` offset.
    """
    return apply_fragments(sql, _error_fragments(sql, error_message, config or QueryConfig()))


@mypyc_attr(allow_interpreted_subclasses=False)
class DebugQueryRenderer:
    """Renders a query template with its bound values for logs and error reports."""

    __slots__ = ("_config", "_quote", "_validator")

    def __init__(
        self,
        quote: "Optional[QuoteFn]" = None,
        config: "Optional[QueryConfig]" = None,
        validator: "Optional[ParameterValidator]" = None,
    ) -> None:
        self._quote = quote or quote_literal
        self._config = config or QueryConfig()
        self._validator = validator or ParameterValidator()

    def render(
        self, sql: str, parameters: "StatementParameters" = NO_PARAMETERS, error_message: Optional[str] = None
    ) -> str:
        """Reconstruct ``sql`` with ``parameters`` substituted in.

        Args:
            sql: Query template with ``:name`` or ``?`` placeholders.
            parameters: Bound values, or :data:`~querykit.typing.NO_PARAMETERS`.
            error_message: Driver error message; ``None`` when the query did not fail.

        Raises:
            ParamCountMismatchError: If fewer positional values than ``?`` placeholders are bound.
            ParameterStyleMismatchError: If the template mixes ``?`` and ``:name``.
            ParameterError: If two keys name the same placeholder, e.g. ``"a"`` and ``":a"``.
            UnsupportedValueKindError: If a bound value can't be rendered.

        Returns:
            The human-readable query. Never execute it.
        """
        if parameters is NO_PARAMETERS or _is_empty(parameters):
            return highlight_errors(sql, error_message, self._config)

        self._validator.get_parameter_style(sql)
        placeholders = self._validator.extract_parameters(sql)
        for_error_display = error_message is not None

        if is_named_parameters(parameters):
            replacements = self._named_fragments(sql, placeholders, parameters, for_error_display)
        else:
            values = list(parameters) if is_iterable_parameters(parameters) else [parameters]
            replacements = self._positional_fragments(sql, placeholders, values, for_error_display)

        markers = _error_fragments(sql, error_message, self._config)
        if markers:
            opening, closing = markers
            markers = [
                _snap_outside(opening, replacements, to_end=False),
                _snap_outside(closing, replacements, to_end=True),
            ]
        return apply_fragments(sql, [*replacements, *markers])

    def _named_fragments(
        self, sql: str, placeholders: "list[ParameterInfo]", parameters: Any, for_error_display: bool
    ) -> "list[RenderedFragment]":
        by_name: defaultdict[str, list[ParameterInfo]] = defaultdict(list)
        for placeholder in placeholders:
            if placeholder.style is ParameterStyle.NAMED_COLON and placeholder.name is not None:
                by_name[placeholder.name].append(placeholder)

        fragments = []
        for name, value in normalize_named_parameters(parameters, sql).items():
            for placeholder in by_name.get(name, ()):
                text = render_value(value, placeholder.placeholder_text, self._quote, for_error_display, self._config)
                fragments.append(RenderedFragment(placeholder.position, placeholder.end, text))
        return fragments

    def _positional_fragments(
        self, sql: str, placeholders: "list[ParameterInfo]", values: "list[Any]", for_error_display: bool
    ) -> "list[RenderedFragment]":
        qmarks = [p for p in placeholders if p.style is ParameterStyle.QMARK]
        if len(values) < len(qmarks):
            msg = "Query has more placeholders than bound values"
            raise ParamCountMismatchError(msg, sql, expected=len(qmarks), actual=len(values))
        return [
            RenderedFragment(
                placeholder.position,
                placeholder.end,
                render_value(value, placeholder.placeholder_text, self._quote, for_error_display, self._config),
            )
            for placeholder, value in zip(qmarks, values)
        ]


def _is_empty(parameters: Any) -> bool:
    return (is_named_parameters(parameters) or is_iterable_parameters(parameters)) and len(parameters) == 0


def render_debug_query(
    sql: str,
    parameters: "StatementParameters" = NO_PARAMETERS,
    error_message: Optional[str] = None,
    *,
    quote: "Optional[QuoteFn]" = None,
    config: "Optional[QueryConfig]" = None,
) -> str:
    """Reconstruct ``sql`` with ``parameters`` substituted in, for diagnostics only.

    See :meth:`DebugQueryRenderer.render`.
    """
    return DebugQueryRenderer(quote=quote, config=config).render(sql, parameters, error_message)
