"""Reshaping of flat result rows into nested keyed structures."""

from querykit.result.format_spec import FormatSpec, ValueKind, parse_format_spec
from querykit.result.reshaper import reshape

__all__ = ("FormatSpec", "ValueKind", "parse_format_spec", "reshape")
