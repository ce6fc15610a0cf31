"""Sequence chunking."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into contiguous chunks of `size`.

    The final chunk may be shorter. Order is preserved and an empty
    input yields no chunks.

    Args:
        items: Sequence to split
        size: Maximum chunk length (must be positive)

    Returns:
        List of chunks

    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
