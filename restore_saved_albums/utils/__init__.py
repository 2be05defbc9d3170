"""
Utility functions for restore-saved-albums.

Usage:
    from restore_saved_albums.utils import chunked, unique_in_order
"""

from typing import Hashable, Iterable, Iterator, Sequence, TypeVar

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


def chunked(items: Sequence[T], size: int) -> Iterator[tuple[int, Sequence[T]]]:
    """
    Split a sequence into consecutive slices of at most `size` items.

    Args:
        items: The sequence to split. Order is preserved.
        size: Maximum slice length, must be positive.

    Yields:
        (start_index, slice) pairs, where start_index is the position of
        the slice's first item in `items`.

    Example:
        list(chunked([1, 2, 3, 4, 5], 2))
        # [(0, [1, 2]), (2, [3, 4]), (4, [5])]
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")

    for start in range(0, len(items), size):
        yield start, items[start:start + size]


def unique_in_order(values: Iterable[H]) -> list[H]:
    """
    Drop repeated values, keeping the first occurrence of each.

    Unlike a consecutive-only dedupe, repeats scattered anywhere in the
    input are removed too.

    Example:
        unique_in_order(["a", "b", "a", "c", "b"])  # ["a", "b", "c"]
    """
    seen: set[H] = set()
    result: list[H] = []

    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)

    return result
