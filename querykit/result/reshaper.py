"""Folding of flat result rows into nested keyed structures."""

from typing import TYPE_CHECKING, Any, Optional, Union

from querykit.exceptions import InvalidFormatSpecError
from querykit.result.format_spec import FormatSpec, ValueKind, parse_format_spec

if TYPE_CHECKING:
    from collections.abc import Iterable

    from querykit.typing import GroupedResult, RowMapping

__all__ = ("reshape",)


def _column(row: "RowMapping", name: str, spec: FormatSpec) -> Any:
    try:
        return row[name]
    except KeyError:
        msg = f"Column {name!r} is missing from the result row"
        raise InvalidFormatSpecError(spec.source, msg) from None


def _leaf_value(row: "RowMapping", spec: FormatSpec, keep_key_columns: bool) -> Any:
    if spec.value_kind is ValueKind.COLUMN:
        return _column(row, spec.columns[0], spec)
    if spec.value_kind is ValueKind.COLUMNS:
        return {column: _column(row, column, spec) for column in spec.columns}
    leaf = dict(row)
    if not keep_key_columns:
        for field in spec.key_fields:
            leaf.pop(field, None)
    return leaf


def _new_container(segment: Optional[str]) -> Any:
    return [] if segment is None else {}


def reshape(
    rows: "Iterable[RowMapping]", format_spec: Union[str, FormatSpec], keep_key_columns: bool = False
) -> "GroupedResult":
    """Group rows into a nested structure described by ``format_spec``.

    Rows are processed in the order given, so for keyed levels the last row
    with a given key wins; empty-bracket levels keep every row in order.

    Args:
        rows: Result rows keyed by column name.
        format_spec: A format string or an already parsed :class:`FormatSpec`.
        keep_key_columns: Keep the grouping columns in ``*`` leaves.

    Raises:
        InvalidFormatSpecError: If the format is malformed or names a column the rows lack.

    Returns:
        The nested result; empty when there are no rows.
    """
    spec = parse_format_spec(format_spec) if isinstance(format_spec, str) else format_spec
    path = spec.nested_path
    result: dict[Any, Any] = {}

    for row in rows:
        leaf = _leaf_value(row, spec, keep_key_columns)
        key = _column(row, spec.key_field, spec)

        if not path:
            result[key] = leaf
            continue

        container = result.setdefault(key, _new_container(path[0]))
        for depth, segment in enumerate(path):
            is_last = depth == len(path) - 1
            child = leaf if is_last else _new_container(path[depth + 1])
            if segment is None:
                container.append(child)
            elif is_last:
                container[_column(row, segment, spec)] = child
            else:
                child = container.setdefault(_column(row, segment, spec), child)
            container = child

    return result
