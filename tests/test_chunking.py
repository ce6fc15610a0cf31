"""Tests for sequence chunking."""

import pytest

from fitsync.utils.chunking import chunked


def test_chunked_preserves_order_with_short_tail() -> None:
    assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]


def test_chunked_exact_multiple() -> None:
    chunks = chunked(list(range(6)), 3)
    assert chunks == [[0, 1, 2], [3, 4, 5]]
    assert [x for chunk in chunks for x in chunk] == list(range(6))


def test_chunked_size_larger_than_input() -> None:
    assert chunked(["a", "b"], 100) == [["a", "b"]]


def test_chunked_empty_input_yields_no_chunks() -> None:
    assert chunked([], 10) == []


@pytest.mark.parametrize("size", [0, -1])
def test_chunked_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ValueError):
        chunked([1, 2, 3], size)
