"""
Incremental Linked Engine

Entries live in two flat arrays (columns, values) in insertion order; a
RowIndexList chains the slots of each row. Appending an entry never moves
existing ones, which makes this the engine of choice while assembling a
matrix. Lookup walks the row chain.

Column view (after assemble_column_info):
    rows[slot]  -> owning row of every slot
    col_index   -> RowIndexList keyed by column, in slot order
"""

import logging
from typing import Any, Iterable, Iterator, Optional, Tuple, TYPE_CHECKING

from ._array import Array
from ._base import ColumnIterable, Sortable, SparseMatrix
from ._index_list import RowIndexList

if TYPE_CHECKING:
    from ._crs import CRSMatrix

__all__ = ['IndexListMatrix']

logger = logging.getLogger("sparsemat.sparse")


class IndexListMatrix(SparseMatrix, Sortable, ColumnIterable):
    """
    Sparse matrix backed by a linked row index.

    Rows iterate in insertion order until sort_row()/sort() is called.

    Example:
        >>> mat = IndexListMatrix()
        >>> mat.add_to(0, 1, 4.2)
        >>> mat.add_to(0, 0, 7.12)
        >>> list(mat.iter_row(0))
        [(1, 4.2), (0, 7.12)]
        >>> mat.sort()
        >>> list(mat.iter_row(0))
        [(0, 7.12), (1, 4.2)]
    """

    def __init__(self, index_type=None, value_type=None, capacity: int = 0):
        """
        Create an empty matrix.

        Args:
            index_type: Unsigned index type (configured default if None)
            value_type: Value type (configured default if None)
            capacity: Expected number of entries
        """
        self._init_types(index_type, value_type)
        self._n_cols = 0
        self._columns = Array(self._itype.dtype, capacity)
        self._values = Array(self._vtype.dtype, capacity)
        self._index = RowIndexList(self._itype, capacity)
        self._rows: Optional[Array] = None
        self._col_index: Optional[RowIndexList] = None
        self._col_version = None

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    def n_rows(self) -> int:
        return self._index.n_rows()

    def n_cols(self) -> int:
        return self._n_cols

    def n_non_zero_entries(self) -> int:
        return len(self._columns)

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def _find(self, i: int, j: int) -> Optional[int]:
        cols = self._columns
        for slot in self._index.iter_row(i):
            if cols[slot] == j:
                return slot
        return None

    def _push(self, i: int, j: int, value: Any) -> int:
        self._itype.check(j, "column")
        slot = self._index.push(i)
        self._columns.append(j)
        self._values.append(value)
        if j >= self._n_cols:
            self._n_cols = j + 1
        self._structure_changed()
        return slot

    def _locate(self, i: int, j: int, create: bool) -> Optional[int]:
        slot = self._find(i, j)
        if slot is None and create:
            slot = self._push(i, j, self._vtype.zero())
        return slot

    def _load(self, slot: int) -> Any:
        return self._values[slot]

    def _store(self, slot: int, value: Any) -> None:
        self._values[slot] = value

    def _row_slots(self, i: int) -> Iterable[int]:
        return self._index.iter_row(i)

    def _write_slot(self, slot: int, col: int, value: Any) -> None:
        self._columns[slot] = col
        self._values[slot] = value

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def iter_row(self, row: int) -> Iterator[Tuple[int, Any]]:
        cols = self._columns
        vals = self._values
        for slot in self._index.iter_row(row):
            yield int(cols[slot]), vals[slot]

    def iter(self) -> Iterator[Tuple[int, int, Any]]:
        cols = self._columns
        vals = self._values
        for row, slot in self._index.iter():
            yield row, int(cols[slot]), vals[slot]

    # -------------------------------------------------------------------------
    # Column View
    # -------------------------------------------------------------------------

    def _build_column_info(self) -> None:
        nnz = len(self._columns)
        rows = Array.full(nnz, self._itype.UNSET, self._itype.dtype)
        for row, slot in self._index.iter():
            rows[slot] = row
        col_index = RowIndexList(self._itype, nnz)
        for col in self._columns:
            col_index.push(int(col))
        self._rows = rows
        self._col_index = col_index
        logger.debug(f"Assembled column info: {nnz} entries over {self._n_cols} columns")

    def _iter_col(self, col: int) -> Iterator[Tuple[int, Any]]:
        rows = self._rows
        vals = self._values
        for slot in self._col_index.iter_row(col):
            yield int(rows[slot]), vals[slot]

    # -------------------------------------------------------------------------
    # Mutation & Copy
    # -------------------------------------------------------------------------

    def scale(self, factor: Any) -> None:
        vals = self._values
        vals[:] = vals[:] * factor

    def copy(self) -> 'IndexListMatrix':
        new = IndexListMatrix.__new__(IndexListMatrix)
        new._itype = self._itype
        new._vtype = self._vtype
        new._version = self._version
        new._n_cols = self._n_cols
        new._columns = self._columns.copy()
        new._values = self._values.copy()
        new._index = self._index.copy()
        new._rows = self._rows.copy() if self._rows is not None else None
        new._col_index = self._col_index.copy() if self._col_index is not None else None
        new._col_version = self._col_version
        return new

    def to_crs(self) -> 'CRSMatrix':
        """Compressed-row copy (column info carried over if assembled)."""
        from ._crs import CRSMatrix
        return CRSMatrix.from_index_list(self)
