import itertools
from typing import Iterable, Iterator, Tuple, TypeVar

T = TypeVar("T")


def permutations(items: Iterable[T]) -> Iterator[Tuple[T, ...]]:
    """
    Every ordering of `items` (n! of them), produced lazily.

    Each ordering is a new tuple, so callers may keep what they receive
    without copying.
    """
    yield from itertools.permutations(tuple(items))
