"""
Partitioning of ordered sequences into contiguous, size-bounded chunks.
"""
from collections.abc import Mapping, Sequence
from typing import Any

from dbbatch.exceptions import InvalidArgument

__all__ = ['Partition', 'partition']


def partition(sequence: Any, size: int) -> 'Partition':
    """Partition a sequence into chunks of at most `size` elements.

    The result is a live view: chunks are sliced from the backing sequence
    when accessed, so later mutations of a shared backing list show up in
    subsequent reads.

    >>> list(partition([1, 2, 3, 4, 5], 2))
    [[1, 2], [3, 4], [5]]
    >>> list(partition([], 3))
    []

    :param sequence: Ordered, indexable sequence to partition.
    :param size: Maximum chunk length, strictly positive.
    :returns: Partition over the sequence.
    :raises InvalidArgument: If sequence is None or not indexable, or size is
        not a positive integer.
    """
    if sequence is None:
        raise InvalidArgument('Sequence cannot be None')
    if (isinstance(sequence, Mapping)
            or not hasattr(sequence, '__getitem__')
            or not hasattr(sequence, '__len__')):
        raise InvalidArgument(f'Cannot partition non-sequence {type(sequence).__name__}')
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidArgument(f'Partition size must be a positive integer (not {size!r})')
    return Partition(sequence, size)


class Partition(Sequence):
    """Sequence of contiguous chunks over a backing sequence.
    """

    __slots__ = ('_sequence', '_size')

    def __init__(self, sequence: Any, size: int):
        self._sequence = sequence
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return -(-len(self._sequence) // self._size)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        count = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError(f'Index: {index}, Size: {count}')
        start = index * self._size
        return self._sequence[start:start + self._size]

    def __eq__(self, other):
        if not isinstance(other, Partition):
            return NotImplemented
        return list(self) == list(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f'Partition({self._sequence!r}, size={self._size})'
