"""
Sequence helpers for splitting data into chunks and regrouping them
"""

from itertools import islice
from typing import Iterable, List, TypeVar

from .errors import ValidationError

T = TypeVar("T")


def chunk_by(items: Iterable[T], size: int) -> List[List[T]]:
    """
    Split items into consecutive groups of a fixed size

    Args:
        items: Source items, consumed once
        size: Items per group

    Returns:
        Groups of exactly size items in original order; only the last
        group may be shorter
    """
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise ValidationError(f"Chunk size must be a positive integer, got {size!r}")

    iterator = iter(items)
    chunks = []
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return chunks
        chunks.append(chunk)


def transpose(rows: Iterable[Iterable[T]]) -> List[List[T]]:
    """
    Swap rows and columns of a list of sequences

    Output k holds the k-th element of every input row, in row order.
    Rows of unequal length are truncated to the shortest one.
    """
    return [list(column) for column in zip(*rows)]
