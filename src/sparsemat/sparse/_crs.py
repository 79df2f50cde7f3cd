"""
Compressed Row Storage Engine

Three flat arrays:

    values[k], columns[k]   - entries, row by row
    row_offsets[i]          - start of row i (length n_rows + 1)

Row i occupies [row_offsets[i], row_offsets[i+1]). Bulk construction from
another engine is a single O(nnz) pass; inserting a new entry shifts every
later entry and offset (O(nnz)), so this engine suits read-mostly use.

Column view (after assemble_column_info), built by counting entries per
column, prefix-summing the counts and scattering row-major:

    col_offsets[j]  - start of column j in col_rows / col_slots
    col_rows[k]     - row of the k-th entry in column order
    col_slots[k]    - position of that entry in values
"""

import logging
from typing import Any, Iterable, Iterator, Optional, Tuple

import numpy as np

from ._array import Array
from ._base import ColumnIterable, Sortable, SparseMatrix

__all__ = ['CRSMatrix']

logger = logging.getLogger("sparsemat.sparse")


class CRSMatrix(SparseMatrix, Sortable, ColumnIterable):
    """
    Sparse matrix in compressed row storage.

    A new entry is appended at the end of its row, so rows keep insertion
    order like the other engines until sorted.

    Example:
        >>> crs = CRSMatrix.from_index_list(linked)
        >>> crs.assemble_column_info()
        >>> list(crs.iter_col(2))
        [(1, 4.12), (2, 2.12), (3, 1.12)]
    """

    def __init__(self, index_type=None, value_type=None, capacity: int = 0):
        self._init_types(index_type, value_type)
        self._n_rows = 0
        self._n_cols = 0
        self._values = Array(self._vtype.dtype, capacity)
        self._columns = Array(self._itype.dtype, capacity)
        self._offsets = Array(self._itype.dtype)
        self._offsets.append(0)
        self._col_offsets: Optional[np.ndarray] = None
        self._col_rows: Optional[np.ndarray] = None
        self._col_slots: Optional[np.ndarray] = None
        self._col_version = None

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_matrix(cls, src: SparseMatrix, index_type=None, value_type=None) -> 'CRSMatrix':
        """
        Build from any engine in one pass over its rows.

        Each row's entries are copied in the source's row order. If the
        source has a current column view, the result's view is assembled too.

        Args:
            src: Source matrix
            index_type: Index type of the result (source's if None)
            value_type: Value type of the result (source's if None)
        """
        nnz = src.n_non_zero_entries()
        ret = cls(
            index_type=index_type or src.index_type,
            value_type=value_type or src.value_type,
            capacity=nnz,
        )
        itype = ret._itype
        columns = ret._columns
        values = ret._values
        offsets = ret._offsets
        n_rows = src.n_rows()
        offsets.reserve(n_rows + 1)
        for i in range(n_rows):
            for col, val in src.iter_row(i):
                itype.check(col, "column")
                columns.append(col)
                values.append(val)
            itype.check(len(columns), "offset")
            offsets.append(len(columns))
        ret._n_rows = n_rows
        ret._n_cols = src.n_cols()
        logger.debug(
            f"Converted {type(src).__name__} to CRS: {n_rows} rows, {len(columns)} entries"
        )
        if isinstance(src, ColumnIterable) and src.has_column_info:
            ret.assemble_column_info()
        return ret

    @classmethod
    def from_index_list(cls, src: SparseMatrix) -> 'CRSMatrix':
        """Build from an incremental linked matrix (same types)."""
        return cls.from_matrix(src)

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    def n_rows(self) -> int:
        return self._n_rows

    def n_cols(self) -> int:
        return self._n_cols

    def n_non_zero_entries(self) -> int:
        return len(self._columns)

    @property
    def row_offsets(self) -> np.ndarray:
        """Row offset table (read-only view)."""
        view = self._offsets.to_numpy()
        view.flags.writeable = False
        return view

    def _row_range(self, i: int) -> Tuple[int, int]:
        if i < 0 or i >= self._n_rows:
            return 0, 0
        return int(self._offsets[i]), int(self._offsets[i + 1])

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def _find(self, i: int, j: int) -> Optional[int]:
        start, end = self._row_range(i)
        hits = np.flatnonzero(self._columns.to_numpy()[start:end] == j)
        if len(hits) == 0:
            return None
        return start + int(hits[0])

    def _push(self, i: int, j: int, value: Any) -> int:
        """Insert (i, j) at the end of row i, shifting later rows."""
        itype = self._itype
        itype.check(j, "column")
        itype.check(i, "row")
        itype.check(len(self._columns) + 1, "offset")
        if i >= self._n_rows:
            self._offsets.resize(i + 2, self._offsets[self._n_rows])
            self._n_rows = i + 1
        pos = int(self._offsets[i + 1])
        self._columns.insert(pos, j)
        self._values.insert(pos, value)
        offsets = self._offsets
        offsets[i + 1:] = offsets[i + 1:] + 1
        if j >= self._n_cols:
            self._n_cols = j + 1
        self._structure_changed()
        return pos

    def _locate(self, i: int, j: int, create: bool) -> Optional[int]:
        pos = self._find(i, j)
        if pos is None and create:
            pos = self._push(i, j, self._vtype.zero())
        return pos

    def _load(self, pos: int) -> Any:
        return self._values[pos]

    def _store(self, pos: int, value: Any) -> None:
        self._values[pos] = value

    def _row_slots(self, i: int) -> Iterable[int]:
        start, end = self._row_range(i)
        return range(start, end)

    def _write_slot(self, pos: int, col: int, value: Any) -> None:
        self._columns[pos] = col
        self._values[pos] = value

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def iter_row(self, row: int) -> Iterator[Tuple[int, Any]]:
        start, end = self._row_range(row)
        cols = self._columns
        vals = self._values
        for k in range(start, end):
            yield int(cols[k]), vals[k]

    # -------------------------------------------------------------------------
    # Column View
    # -------------------------------------------------------------------------

    def _build_column_info(self) -> None:
        n_cols = self._n_cols
        idtype = self._itype.dtype
        columns = self._columns.to_numpy().astype(np.intp)

        # Count, prefix-sum, scatter
        counts = np.bincount(columns, minlength=n_cols)
        col_offsets = np.zeros(n_cols + 1, dtype=np.intp)
        np.cumsum(counts, out=col_offsets[1:])
        fill = col_offsets[:-1].copy()
        col_rows = np.empty(len(columns), dtype=idtype)
        col_slots = np.empty(len(columns), dtype=idtype)
        for i in range(self._n_rows):
            start, end = self._row_range(i)
            for pos in range(start, end):
                c = columns[pos]
                dest = fill[c]
                col_rows[dest] = i
                col_slots[dest] = pos
                fill[c] = dest + 1

        self._col_offsets = col_offsets
        self._col_rows = col_rows
        self._col_slots = col_slots
        logger.debug(f"Assembled CRS column info: {len(columns)} entries over {n_cols} columns")

    def _iter_col(self, col: int) -> Iterator[Tuple[int, Any]]:
        if col < 0 or col + 1 >= len(self._col_offsets):
            return
        vals = self._values
        rows = self._col_rows
        slots = self._col_slots
        for k in range(int(self._col_offsets[col]), int(self._col_offsets[col + 1])):
            yield int(rows[k]), vals[int(slots[k])]

    # -------------------------------------------------------------------------
    # Mutation & Copy
    # -------------------------------------------------------------------------

    def scale(self, factor: Any) -> None:
        vals = self._values
        vals[:] = vals[:] * factor

    def copy(self) -> 'CRSMatrix':
        new = CRSMatrix.__new__(CRSMatrix)
        new._itype = self._itype
        new._vtype = self._vtype
        new._version = self._version
        new._n_rows = self._n_rows
        new._n_cols = self._n_cols
        new._values = self._values.copy()
        new._columns = self._columns.copy()
        new._offsets = self._offsets.copy()
        new._col_offsets = None if self._col_offsets is None else self._col_offsets.copy()
        new._col_rows = None if self._col_rows is None else self._col_rows.copy()
        new._col_slots = None if self._col_slots is None else self._col_slots.copy()
        new._col_version = self._col_version
        return new
