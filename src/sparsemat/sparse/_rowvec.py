"""
Row-of-Arrays Engine

One column Array and one value Array per row. No shared offset table, so
appending to any row is amortized O(1); each new row costs two allocations.
"""

from typing import Any, Iterable, Iterator, List, Optional, Tuple

from ._array import Array
from ._base import Sortable, SparseMatrix

__all__ = ['RowVecMatrix']


class RowVecMatrix(SparseMatrix, Sortable):
    """
    Sparse matrix storing each row in its own pair of arrays.

    Slot keys are (row, position) pairs. Column traversal is not supported.
    """

    def __init__(self, index_type=None, value_type=None, capacity: int = 0):
        self._init_types(index_type, value_type)
        self._n_cols = 0
        self._nnz = 0
        self._columns: List[Array] = []
        self._values: List[Array] = []

    def n_rows(self) -> int:
        return len(self._columns)

    def n_cols(self) -> int:
        return self._n_cols

    def n_non_zero_entries(self) -> int:
        return self._nnz

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def _find(self, i: int, j: int) -> Optional[Tuple[int, int]]:
        if i < 0 or i >= len(self._columns):
            return None
        for pos, col in enumerate(self._columns[i]):
            if col == j:
                return i, pos
        return None

    def _push(self, i: int, j: int, value: Any) -> Tuple[int, int]:
        self._itype.check(i, "row")
        self._itype.check(j, "column")
        while len(self._columns) <= i:
            self._columns.append(Array(self._itype.dtype))
            self._values.append(Array(self._vtype.dtype))
        pos = self._columns[i].append(j)
        self._values[i].append(value)
        self._nnz += 1
        if j >= self._n_cols:
            self._n_cols = j + 1
        self._structure_changed()
        return i, pos

    def _locate(self, i: int, j: int, create: bool) -> Optional[Tuple[int, int]]:
        key = self._find(i, j)
        if key is None and create:
            key = self._push(i, j, self._vtype.zero())
        return key

    def _load(self, key: Tuple[int, int]) -> Any:
        i, pos = key
        return self._values[i][pos]

    def _store(self, key: Tuple[int, int], value: Any) -> None:
        i, pos = key
        self._values[i][pos] = value

    def _row_slots(self, i: int) -> Iterable[Tuple[int, int]]:
        if i < 0 or i >= len(self._columns):
            return ()
        return [(i, pos) for pos in range(len(self._columns[i]))]

    def _write_slot(self, key: Tuple[int, int], col: int, value: Any) -> None:
        i, pos = key
        self._columns[i][pos] = col
        self._values[i][pos] = value

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def iter_row(self, row: int) -> Iterator[Tuple[int, Any]]:
        if row < 0 or row >= len(self._columns):
            return
        cols = self._columns[row]
        vals = self._values[row]
        for pos in range(len(cols)):
            yield int(cols[pos]), vals[pos]

    # -------------------------------------------------------------------------
    # Mutation & Copy
    # -------------------------------------------------------------------------

    def scale(self, factor: Any) -> None:
        for vals in self._values:
            vals[:] = vals[:] * factor

    def copy(self) -> 'RowVecMatrix':
        new = RowVecMatrix.__new__(RowVecMatrix)
        new._itype = self._itype
        new._vtype = self._vtype
        new._version = self._version
        new._n_cols = self._n_cols
        new._nnz = self._nnz
        new._columns = [c.copy() for c in self._columns]
        new._values = [v.copy() for v in self._values]
        return new
