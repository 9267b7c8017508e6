"""Tests for single-pass fragment application."""

import pytest

from querykit.parameters import RenderedFragment, apply_fragments


def test_no_fragments_returns_original() -> None:
    assert apply_fragments("SELECT 1", []) == "SELECT 1"


def test_replacements_use_original_offsets() -> None:
    sql = "SELECT ?, ?"
    fragments = [RenderedFragment(10, 11, "'second'"), RenderedFragment(7, 8, "1")]

    assert apply_fragments(sql, fragments) == "SELECT 1, 'second'"


def test_insertion_precedes_replacement_at_same_position() -> None:
    fragments = [RenderedFragment(2, 3, "X"), RenderedFragment(2, 2, "<"), RenderedFragment(3, 3, ">")]

    assert apply_fragments("a ? b", fragments) == "a <X> b"


def test_insertions_keep_given_order() -> None:
    fragments = [RenderedFragment(0, 0, "1"), RenderedFragment(0, 0, "2")]

    assert apply_fragments("x", fragments) == "12x"


@pytest.mark.parametrize(
    "fragments",
    [
        [RenderedFragment(0, 3, "a"), RenderedFragment(2, 4, "b")],
        [RenderedFragment(5, 9, "a")],
        [RenderedFragment(3, 1, "a")],
    ],
)
def test_invalid_fragments_raise(fragments: "list[RenderedFragment]") -> None:
    with pytest.raises(ValueError):
        apply_fragments("SELECT", fragments)


def test_fragment_properties() -> None:
    assert RenderedFragment(3, 3, "x").is_insertion
    assert not RenderedFragment(3, 4, "x").is_insertion
    assert RenderedFragment(1, 2, "x") == RenderedFragment(1, 2, "x")
    assert len({RenderedFragment(1, 2, "x"), RenderedFragment(1, 2, "x")}) == 1
