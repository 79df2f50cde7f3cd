"""
Sparse Matrix Base Classes

This module defines the capability contract shared by every storage engine
and the default algorithms written once against it.

Type Hierarchy:

    SparseMatrix (ABC) - required primitives + default algebra
    ├── Sortable (mixin)        - sort_row / sort
    └── ColumnIterable (mixin)  - assemble_column_info / iter_col

    IndexListMatrix(SparseMatrix, Sortable, ColumnIterable)
    CRSMatrix(SparseMatrix, Sortable, ColumnIterable)
    RowVecMatrix(SparseMatrix, Sortable)
    BlockMatrix(SparseMatrix)

Design:

1. Small primitive set: an engine supplies n_rows, n_cols,
   n_non_zero_entries, iter_row, scale, copy and three slot hooks
   (_locate, _load, _store). get, get_mut, set, add_to and all of the
   algebra below are derived from those.

2. Slots: an engine addresses its stored entries by an opaque key (an
   offset into flat arrays, or a (row, position) pair). EntryRef wraps a
   key so callers can read-modify-write one cell without a second lookup.

3. Operators are implemented once here. Binary operators return new
   instances; compound assignment mutates in place.

Example:

    mat = IndexListMatrix()
    mat.add_to(0, 1, 4.2)
    mat[1, 1] = 2.0
    ref = mat.get_mut(1, 1)
    ref += 1.0
    y = mat @ [1.0, 2.0]          # DenseVec
    twice = mat + mat             # new IndexListMatrix
"""

from abc import ABC, abstractmethod
from operator import itemgetter
from typing import Any, Dict, Hashable, Iterable, Iterator, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from ..core.error import (
    ColumnInfoUnavailableError,
    DimensionMismatchError,
    StaleEntryError,
    UnsortedRowError,
)
from ._dense import DenseVec
from ._dtypes import IndexType, ValueType, normalize_index_type, normalize_value_type

if TYPE_CHECKING:
    from scipy.sparse import spmatrix

__all__ = [
    'EntryRef',
    'SparseMatrix',
    'Sortable',
    'ColumnIterable',
    'format_value',
]


def format_value(value: Any) -> str:
    """Render a stored value as plain text (numpy scalars as Python scalars)."""
    if isinstance(value, np.generic):
        value = value.item()
    return str(value)


def _is_ascending(cols: Iterable[int]) -> bool:
    prev = -1
    for c in cols:
        c = int(c)
        if c < prev:
            return False
        prev = c
    return True


def _is_vector_like(obj: Any) -> bool:
    return isinstance(obj, (DenseVec, list, tuple, np.ndarray))


class EntryRef:
    """
    Mutable handle to one stored entry.

    Returned by ``get_mut``. The handle stays valid until the next
    structural change of its owner (a new entry or a sort); after that
    any access raises StaleEntryError.

    Example:
        >>> ref = mat.get_mut(1, 1)
        >>> ref += 1.12
        >>> ref.value = 8.12
    """

    __slots__ = ('_owner', '_key', '_stamp')

    def __init__(self, owner: Any, key: Hashable):
        self._owner = owner
        self._key = key
        stamp = getattr(owner, '_structure_version', None)
        self._stamp = stamp() if stamp is not None else None

    def _checked_owner(self) -> Any:
        owner = self._owner
        if self._stamp is not None and owner._structure_version() != self._stamp:
            raise StaleEntryError()
        return owner

    @property
    def value(self) -> Any:
        return self._checked_owner()._load(self._key)

    @value.setter
    def value(self, val: Any) -> None:
        self._checked_owner()._store(self._key, val)

    def get(self) -> Any:
        return self.value

    def set(self, val: Any) -> None:
        self.value = val

    def __iadd__(self, other: Any) -> 'EntryRef':
        self.value = self.value + other
        return self

    def __isub__(self, other: Any) -> 'EntryRef':
        self.value = self.value - other
        return self

    def __imul__(self, other: Any) -> 'EntryRef':
        self.value = self.value * other
        return self

    def __float__(self) -> float:
        return float(self.value)

    def __repr__(self) -> str:
        return f"EntryRef({format_value(self.value)})"


class SparseMatrix(ABC):
    """
    Abstract base class for all sparse matrices.

    Required Methods (subclasses must implement):
        n_rows(): Number of rows (one plus the last row ever written)
        n_cols(): Number of columns (one plus the max column ever written)
        n_non_zero_entries(): Number of stored entries
        iter_row(i): Lazy (col, value) pairs of row i in storage order
        scale(factor): Multiply every stored value in place
        copy(): Deep copy
        _locate(i, j, create): Slot key of (i, j), appending a zero entry
            when create is set, or None when absent
        _load(key) / _store(key, value): Slot value access

    Attributes:
        index_type (IndexType): Index capability set
        value_type (ValueType): Value capability set
    """

    # numpy must defer to our reflected operators
    __array_ufunc__ = None

    _itype: IndexType
    _vtype: ValueType

    def _init_types(self, index_type, value_type) -> None:
        self._itype = normalize_index_type(index_type)
        self._vtype = normalize_value_type(value_type)
        self._version = 0

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def with_capacity(cls, capacity: int, index_type=None, value_type=None) -> 'SparseMatrix':
        """Empty matrix with room for ``capacity`` entries (a hint, not a limit)."""
        return cls(index_type=index_type, value_type=value_type, capacity=capacity)

    def like(self, capacity: int = 0) -> 'SparseMatrix':
        """Empty matrix of the same engine and types."""
        return type(self).with_capacity(capacity, index_type=self._itype, value_type=self._vtype)

    @classmethod
    def eye(cls, dim: int, index_type=None, value_type=None) -> 'SparseMatrix':
        """Identity matrix of dimension ``dim``."""
        ret = cls.with_capacity(dim, index_type=index_type, value_type=value_type)
        one = ret.value_type.one()
        for i in range(dim):
            ret.set(i, i, one)
        return ret

    @classmethod
    def from_scipy(cls, mat: "spmatrix", index_type=None, value_type=None) -> 'SparseMatrix':
        """
        Build from a scipy sparse matrix, row by row in column order.

        Explicitly stored zeros are kept. Trailing empty rows and columns are
        not representable (dimensions derive from the entries written).
        """
        from ._ops import from_scipy
        return from_scipy(mat, engine=cls, index_type=index_type, value_type=value_type)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def index_type(self) -> IndexType:
        return self._itype

    @property
    def value_type(self) -> ValueType:
        return self._vtype

    @property
    def shape(self) -> Tuple[int, int]:
        """(n_rows, n_cols)."""
        return (self.n_rows(), self.n_cols())

    @property
    def nnz(self) -> int:
        return self.n_non_zero_entries()

    # =========================================================================
    # Required Primitives
    # =========================================================================

    @abstractmethod
    def n_rows(self) -> int:
        ...

    @abstractmethod
    def n_cols(self) -> int:
        ...

    @abstractmethod
    def n_non_zero_entries(self) -> int:
        ...

    @abstractmethod
    def iter_row(self, row: int) -> Iterator[Tuple[int, Any]]:
        """Lazy (col, value) pairs of ``row``; empty for rows past the end."""
        ...

    @abstractmethod
    def scale(self, factor: Any) -> None:
        """Multiply every stored value by ``factor`` in place."""
        ...

    @abstractmethod
    def copy(self) -> 'SparseMatrix':
        ...

    @abstractmethod
    def _locate(self, i: int, j: int, create: bool) -> Optional[Hashable]:
        ...

    @abstractmethod
    def _load(self, key: Hashable) -> Any:
        ...

    @abstractmethod
    def _store(self, key: Hashable, value: Any) -> None:
        ...

    def _structure_changed(self) -> None:
        """Record a structural mutation (new entry, reordering)."""
        self._version += 1

    def _structure_version(self) -> int:
        return self._version

    # =========================================================================
    # Element Access
    # =========================================================================

    def get(self, i: int, j: int) -> Any:
        """Value at (i, j), zero if absent."""
        key = self._locate(i, j, False)
        if key is None:
            return self._vtype.zero()
        return self._load(key)

    def get_mut(self, i: int, j: int) -> EntryRef:
        """Mutable handle to (i, j), creating a zero entry if absent."""
        return EntryRef(self, self._locate(i, j, True))

    def set(self, i: int, j: int, value: Any) -> None:
        """Write ``value`` at (i, j)."""
        self.get_mut(i, j).value = value

    def add_to(self, i: int, j: int, value: Any) -> None:
        """Accumulate ``value`` at (i, j)."""
        ref = self.get_mut(i, j)
        ref.value = ref.value + value

    def __getitem__(self, idx: Tuple[int, int]) -> Any:
        i, j = idx
        return self.get(i, j)

    def __setitem__(self, idx: Tuple[int, int], value: Any) -> None:
        i, j = idx
        self.set(i, j, value)

    # =========================================================================
    # Iteration
    # =========================================================================

    def iter(self) -> Iterator[Tuple[int, int, Any]]:
        """Row-major (row, col, value) triples, rows in order, entries in storage order."""
        for row in range(self.n_rows()):
            for col, val in self.iter_row(row):
                yield row, col, val

    def iter_values(self) -> Iterator[Tuple[int, int, Any]]:
        return self.iter()

    def __iter__(self) -> Iterator[Tuple[int, int, Any]]:
        return self.iter()

    def to_dict(self) -> Dict[Tuple[int, int], Any]:
        """Entries keyed by (row, col)."""
        return {(i, j): v for i, j, v in self.iter()}

    # =========================================================================
    # Default Algorithms
    # =========================================================================

    def add(self, rhs: 'SparseMatrix') -> None:
        """Accumulate every entry of ``rhs`` into self."""
        for row in range(rhs.n_rows()):
            for col, val in rhs.iter_row(row):
                self.add_to(row, col, val)

    def sub(self, rhs: 'SparseMatrix') -> None:
        """Subtract every entry of ``rhs`` from self."""
        for row in range(rhs.n_rows()):
            for col, val in rhs.iter_row(row):
                ref = self.get_mut(row, col)
                ref.value = ref.value - val

    def transpose(self) -> 'SparseMatrix':
        """New matrix with rows and columns swapped."""
        ret = self.like(self.n_non_zero_entries())
        for i, j, val in self.iter():
            ret.set(j, i, val)
        return ret

    @property
    def T(self) -> 'SparseMatrix':
        return self.transpose()

    def is_symmetric(self) -> bool:
        """Whether every stored (i, j, v) has get(j, i) == v."""
        for i, j, val in self.iter():
            if self.get(j, i) != val:
                return False
        return True

    def density(self) -> float:
        """Stored entries over rows * cols (0.0 for an empty shape)."""
        n_entries = self.n_rows() * self.n_cols()
        if n_entries == 0:
            return 0.0
        return self.n_non_zero_entries() / n_entries

    def sparsity(self) -> float:
        return 1.0 - self.density()

    def is_empty(self) -> bool:
        """Whether no entry is stored (structural, not value emptiness)."""
        return self.n_non_zero_entries() == 0

    def mvp(self, vector) -> DenseVec:
        """
        Matrix-vector product.

        Rows are summed in the engine's row iteration order; every row
        produces one output entry (zero for empty rows).

        Args:
            vector: DenseVec, list or 1D numpy array with dim >= n_cols()

        Returns:
            DenseVec of dimension n_rows()

        Raises:
            DimensionMismatchError: If the vector is shorter than n_cols()
        """
        from .._typing import ensure_vector

        vec = ensure_vector(vector, self._vtype)
        if vec.dim() < self.n_cols():
            raise DimensionMismatchError(
                f"mvp: matrix has {self.n_cols()} columns, vector has dim {vec.dim()}"
            )
        x = vec.to_numpy()
        zero = self._vtype.zero()
        n_rows = self.n_rows()
        ret = DenseVec.with_capacity(n_rows, self._vtype)
        for i in range(n_rows):
            total = zero
            for col, val in self.iter_row(i):
                total += x[col] * val
            ret.set(i, total)
        return ret

    # =========================================================================
    # Text Output
    # =========================================================================

    def is_row_sorted(self, i: int) -> bool:
        """Whether row ``i`` is in ascending column order."""
        return _is_ascending(col for col, _ in self.iter_row(i))

    def is_sorted(self) -> bool:
        return all(self.is_row_sorted(i) for i in range(self.n_rows()))

    def to_string_row(self, i: int) -> str:
        """
        Row ``i`` as space-separated values, explicit zeros included.

        Raises:
            UnsortedRowError: If the row is not sorted by column
        """
        if not self.is_row_sorted(i):
            raise UnsortedRowError(f"row {i} is not sorted by column")
        zero = format_value(self._vtype.zero())
        cells = [zero] * self.n_cols()
        for col, val in self.iter_row(i):
            cells[col] = format_value(val)
        return " ".join(cells)

    def __str__(self) -> str:
        zero = format_value(self._vtype.zero())
        lines = []
        for i in range(self.n_rows()):
            cells = [zero] * self.n_cols()
            for col, val in self.iter_row(i):
                cells[col] = format_value(val)
            lines.append(" ".join(cells))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(shape={self.shape}, nnz={self.nnz}, "
            f"index_type={self._itype}, value_type={self._vtype})"
        )

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dense(self) -> np.ndarray:
        """Dense numpy array of shape (n_rows, n_cols)."""
        out = np.zeros(self.shape, dtype=self._vtype.dtype)
        if self._vtype.is_object:
            out[...] = self._vtype.zero()
        for i, j, val in self.iter():
            out[i, j] = val
        return out

    def to_scipy(self) -> "spmatrix":
        """Convert to scipy.sparse.csr_matrix."""
        from ._ops import to_scipy
        return to_scipy(self)

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    # =========================================================================
    # Operators
    # =========================================================================

    def __add__(self, rhs):
        if not isinstance(rhs, SparseMatrix):
            return NotImplemented
        ret = self.copy()
        ret.add(rhs)
        return ret

    def __sub__(self, rhs):
        if not isinstance(rhs, SparseMatrix):
            return NotImplemented
        ret = self.copy()
        ret.sub(rhs)
        return ret

    def __mul__(self, rhs):
        """Scaled copy for a scalar, matrix-vector product for a vector."""
        if isinstance(rhs, SparseMatrix):
            return NotImplemented
        if _is_vector_like(rhs):
            return self.mvp(rhs)
        ret = self.copy()
        ret.scale(rhs)
        return ret

    def __rmul__(self, lhs):
        if isinstance(lhs, SparseMatrix) or _is_vector_like(lhs):
            return NotImplemented
        ret = self.copy()
        ret.scale(lhs)
        return ret

    def __matmul__(self, rhs):
        if isinstance(rhs, SparseMatrix):
            from ..math.linalg import dot
            return dot(self, rhs)
        if _is_vector_like(rhs):
            return self.mvp(rhs)
        return NotImplemented

    def __iadd__(self, rhs):
        if not isinstance(rhs, SparseMatrix):
            return NotImplemented
        self.add(rhs)
        return self

    def __isub__(self, rhs):
        if not isinstance(rhs, SparseMatrix):
            return NotImplemented
        self.sub(rhs)
        return self

    def __imul__(self, factor):
        if isinstance(factor, SparseMatrix) or _is_vector_like(factor):
            return NotImplemented
        self.scale(factor)
        return self

    def __neg__(self):
        ret = self.copy()
        ret.scale(-self._vtype.one())
        return ret


# =============================================================================
# Extension Contracts
# =============================================================================

class Sortable(ABC):
    """
    Engines whose rows can be reordered by column in place.

    Requires ``_row_slots(i)`` (slot keys of row i in storage order) and
    ``_write_slot(key, col, value)``. Sorting reuses the row's own slots,
    so the set of slots owned by a row never changes.
    """

    @abstractmethod
    def _row_slots(self, i: int) -> Iterable[Hashable]:
        ...

    @abstractmethod
    def _write_slot(self, key: Hashable, col: int, value: Any) -> None:
        ...

    def sort_row(self, i: int) -> None:
        """Sort row ``i`` by ascending column (stable)."""
        if self.is_row_sorted(i):
            return
        pairs = sorted(self.iter_row(i), key=itemgetter(0))
        for key, (col, val) in zip(list(self._row_slots(i)), pairs):
            self._write_slot(key, col, val)
        self._structure_changed()

    def sort(self) -> None:
        """Sort every row."""
        for i in range(self.n_rows()):
            self.sort_row(i)


class ColumnIterable(ABC):
    """
    Engines offering column traversal after an explicit assembly step.

    The column view is stamped with the structure version it was built
    for. Any later new entry or sort makes ``iter_col`` raise until
    ``assemble_column_info()`` is called again; value-only writes are seen
    through the view.
    """

    _col_version: Optional[int] = None

    @abstractmethod
    def _build_column_info(self) -> None:
        ...

    @abstractmethod
    def _iter_col(self, col: int) -> Iterator[Tuple[int, Any]]:
        ...

    def assemble_column_info(self) -> None:
        """(Re)build the column view from the current entries."""
        self._build_column_info()
        self._col_version = self._version

    @property
    def has_column_info(self) -> bool:
        """Whether a column view exists and matches the current structure."""
        return self._col_version is not None and self._col_version == self._version

    def iter_col(self, col: int) -> Iterator[Tuple[int, Any]]:
        """
        Lazy (row, value) pairs of column ``col``.

        Raises:
            ColumnInfoUnavailableError: If the view was never assembled or
                the structure changed since
        """
        if self._col_version is None:
            raise ColumnInfoUnavailableError(
                "Column iterator not available - use assemble_column_info()"
            )
        if self._col_version != self._version:
            raise ColumnInfoUnavailableError(
                "Column info is stale after a structural change - "
                "call assemble_column_info() again"
            )
        return self._iter_col(col)
