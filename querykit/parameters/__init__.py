"""Parameter handling: placeholder scanning, debug rendering and array expansion."""

from querykit.parameters.binder import DebugQueryRenderer, highlight_errors, render_debug_query
from querykit.parameters.expander import ArrayParameterExpander, expand_array_parameters
from querykit.parameters.fragments import apply_fragments
from querykit.parameters.renderer import normalize_value, quote_literal, render_value
from querykit.parameters.types import ParameterInfo, ParameterStyle, RenderedFragment
from querykit.parameters.validator import ParameterValidator, normalize_named_parameters

__all__ = (
    "ArrayParameterExpander",
    "DebugQueryRenderer",
    "ParameterInfo",
    "ParameterStyle",
    "ParameterValidator",
    "RenderedFragment",
    "apply_fragments",
    "expand_array_parameters",
    "highlight_errors",
    "normalize_named_parameters",
    "normalize_value",
    "quote_literal",
    "render_debug_query",
    "render_value",
)
