"""
Linked Row Index

Arena-style index mapping each row to a chain of slot positions in the
caller's parallel column/value arrays. Three flat arrays of the index dtype:

    row_start[row] -> first slot of the row (UNSET if empty)
    row_tail[row]  -> last slot of the row  (UNSET if empty)
    next[slot]     -> next slot of the same row (UNSET at chain end)

The tail array makes append O(1); chains still yield slots in insertion
order, which CRS conversion and column sorting depend on.
"""

from typing import Iterator, Optional, Tuple, Union

from ._array import Array
from ._dtypes import IndexType, normalize_index_type

__all__ = ['RowIndexList']


class RowIndexList:
    """
    Linked row index over slot positions.

    Example:
        >>> idx = RowIndexList('uint16')
        >>> for row in (1, 1, 2, 4, 1):
        ...     idx.push(row)
        >>> list(idx.iter_row(1))
        [0, 1, 4]
    """

    __slots__ = ('_itype', '_row_start', '_row_tail', '_next')

    def __init__(self, index_type: Union[None, str, IndexType] = None, capacity: int = 0):
        """
        Create an empty index.

        Args:
            index_type: Unsigned index type (configured default if None)
            capacity: Expected number of entries
        """
        self._itype = normalize_index_type(index_type)
        dtype = self._itype.dtype
        self._row_start = Array(dtype)
        self._row_tail = Array(dtype)
        self._next = Array(dtype, capacity)

    @property
    def index_type(self) -> IndexType:
        return self._itype

    def push(self, row: int) -> int:
        """
        Append a new slot to ``row``.

        Args:
            row: Target row (the row table grows as needed)

        Returns:
            Position of the new slot, to be used in the caller's arrays

        Raises:
            CapacityError: If the slot number would reach the UNSET sentinel
        """
        unset = self._itype.UNSET
        slot = len(self._next)
        self._itype.check(slot, "slot")
        self._itype.check(row, "row")

        if row >= len(self._row_start):
            self._row_start.resize(row + 1, unset)
            self._row_tail.resize(row + 1, unset)

        self._next.append(unset)
        tail = int(self._row_tail[row])
        if tail == unset:
            self._row_start[row] = slot
        else:
            self._next[tail] = slot
        self._row_tail[row] = slot
        return slot

    def iter_row(self, row: int) -> Iterator[int]:
        """Yield the slots of ``row`` in insertion order (empty past the end)."""
        if row < 0 or row >= len(self._row_start):
            return
        unset = self._itype.UNSET
        nxt = self._next
        slot = int(self._row_start[row])
        while slot != unset:
            yield slot
            slot = int(nxt[slot])

    def iter(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(row, slot)`` over all rows, skipping empty rows."""
        for row in range(len(self._row_start)):
            for slot in self.iter_row(row):
                yield row, slot

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return self.iter()

    def row_length(self, row: int) -> int:
        """Number of slots chained to ``row``."""
        return sum(1 for _ in self.iter_row(row))

    def n_entries(self) -> int:
        return len(self._next)

    def n_rows(self) -> int:
        return len(self._row_start)

    def copy(self) -> 'RowIndexList':
        """Deep copy."""
        new = RowIndexList.__new__(RowIndexList)
        new._itype = self._itype
        new._row_start = self._row_start.copy()
        new._row_tail = self._row_tail.copy()
        new._next = self._next.copy()
        return new

    def __len__(self) -> int:
        return len(self._next)

    def __repr__(self) -> str:
        return (
            f"RowIndexList(n_rows={self.n_rows()}, n_entries={self.n_entries()}, "
            f"index_type={self._itype})"
        )
