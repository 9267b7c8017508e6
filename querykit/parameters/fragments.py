"""Single-pass application of rendered fragments onto an unmodified SQL string."""

from collections.abc import Iterable

from querykit.parameters.types import RenderedFragment

__all__ = ("apply_fragments",)


def apply_fragments(sql: str, fragments: "Iterable[RenderedFragment]") -> str:
    """Build a new string from ``sql`` with every fragment applied exactly once.

    Fragment offsets refer to the original ``sql``. Fragments are applied in
    ascending position; at equal positions insertions come before replacements
    and otherwise keep the order they were given in.

    Args:
        sql: The original SQL text.
        fragments: Fragments computed against ``sql``.

    Raises:
        ValueError: If two replacements overlap or a fragment lies outside ``sql``.

    Returns:
        The rewritten SQL.
    """
    ordered = sorted(enumerate(fragments), key=lambda item: (item[1].position, not item[1].is_insertion, item[0]))
    parts: list[str] = []
    cursor = 0
    for _, fragment in ordered:
        if fragment.position < cursor or fragment.end > len(sql) or fragment.end < fragment.position:
            msg = f"Fragment {fragment!r} overlaps a previous fragment or lies outside the SQL text"
            raise ValueError(msg)
        parts.append(sql[cursor : fragment.position])
        parts.append(fragment.text)
        cursor = fragment.end
    parts.append(sql[cursor:])
    return "".join(parts)
