"""High-Level Sparse Matrix Operations.

This module provides functional operations on sparse matrices:
- Format conversions between storage engines
- Construction from triplets and dense arrays
- Cross-platform conversions (scipy, numpy)

Example:
    >>> from sparsemat.sparse import IndexListMatrix, to_crs, from_scipy
    >>>
    >>> crs = to_crs(linked)                        # any engine -> CRS
    >>> mat = from_scipy(scipy_csr, engine=IndexListMatrix)
    >>> scipy_mat = crs.to_scipy()
"""

import logging
from typing import Any, Sequence, Type, TYPE_CHECKING

import numpy as np

from ._base import SparseMatrix
from ._crs import CRSMatrix
from ._linked import IndexListMatrix

if TYPE_CHECKING:
    from scipy.sparse import spmatrix

__all__ = [
    # Conversions
    'to_crs',
    'convert',

    # Construction
    'from_triplets',
    'from_dense',

    # Cross-platform
    'from_scipy',
    'to_scipy',
    'to_numpy',
]

logger = logging.getLogger("sparsemat.sparse")


# =============================================================================
# Format Conversions
# =============================================================================

def to_crs(mat: SparseMatrix) -> CRSMatrix:
    """Convert any engine to compressed row storage.

    Single pass over the rows in order; each row keeps the source's entry
    order. A current column view on the source is rebuilt on the result.

    Args:
        mat: Source matrix (row iteration is all that is required).

    Returns:
        New CRSMatrix with the same types.
    """
    return CRSMatrix.from_matrix(mat)


def convert(mat: SparseMatrix, engine: Type[SparseMatrix]) -> SparseMatrix:
    """Copy a matrix into another engine.

    Args:
        mat: Source matrix.
        engine: Target SparseMatrix subclass.

    Returns:
        New matrix of type ``engine`` with the same entries and types. The
        source itself is copied when it already has that type.
    """
    if type(mat) is engine:
        return mat.copy()
    if engine is CRSMatrix:
        return to_crs(mat)
    ret = engine.with_capacity(
        mat.n_non_zero_entries(), index_type=mat.index_type, value_type=mat.value_type
    )
    for i, j, val in mat.iter():
        ret.set(i, j, val)
    logger.debug(f"Converted {type(mat).__name__} to {engine.__name__}")
    return ret


# =============================================================================
# Construction
# =============================================================================

def from_triplets(
    rows: Sequence[int],
    cols: Sequence[int],
    values: Sequence[Any],
    engine: Type[SparseMatrix] = IndexListMatrix,
    index_type=None,
    value_type=None,
) -> SparseMatrix:
    """Build a matrix from coordinate triplets.

    Duplicate coordinates are accumulated.

    Args:
        rows: Row indices.
        cols: Column indices.
        values: Values.
        engine: Target SparseMatrix subclass.
        index_type: Index type (configured default if None).
        value_type: Value type (configured default if None).

    Raises:
        ValueError: If the three sequences differ in length.
    """
    if not (len(rows) == len(cols) == len(values)):
        raise ValueError(
            f"Triplet lengths differ: rows={len(rows)}, cols={len(cols)}, values={len(values)}"
        )
    ret = engine.with_capacity(len(values), index_type=index_type, value_type=value_type)
    cast = ret.value_type.cast
    for i, j, val in zip(rows, cols, values):
        ret.add_to(int(i), int(j), cast(val))
    return ret


def from_dense(
    array: Any,
    engine: Type[SparseMatrix] = IndexListMatrix,
    index_type=None,
    value_type=None,
) -> SparseMatrix:
    """Build a matrix from a 2D array-like, skipping zeros.

    Args:
        array: 2D array-like.
        engine: Target SparseMatrix subclass.
        index_type: Index type (configured default if None).
        value_type: Value type (the array's dtype if None).
    """
    arr = np.asarray(array)
    if arr.ndim != 2:
        raise ValueError(f"Expected a 2D array, got shape {arr.shape}")
    if value_type is None and arr.dtype.kind in 'fiu':
        value_type = arr.dtype if arr.dtype.kind != 'u' else np.dtype('int64')
    rows, cols = np.nonzero(arr)
    ret = engine.with_capacity(len(rows), index_type=index_type, value_type=value_type)
    for i, j in zip(rows.tolist(), cols.tolist()):
        ret.set(i, j, arr[i, j])
    return ret


# =============================================================================
# Cross-Platform Conversions
# =============================================================================

def from_scipy(
    mat: "spmatrix",
    engine: Type[SparseMatrix] = IndexListMatrix,
    index_type=None,
    value_type=None,
) -> SparseMatrix:
    """Build a matrix from any scipy sparse matrix or array.

    Entries are written row by row in ascending column order, so the result
    is sorted. Duplicate coordinates are summed first.

    Args:
        mat: scipy sparse matrix/array (any format).
        engine: Target SparseMatrix subclass.
        index_type: Index type (configured default if None).
        value_type: Value type (the scipy dtype if None).
    """
    import scipy.sparse as sp

    if not sp.issparse(mat):
        raise TypeError(f"Expected a scipy sparse matrix, got {type(mat).__name__}")
    csr = sp.csr_matrix(mat)
    csr.sum_duplicates()
    csr.sort_indices()
    if value_type is None:
        value_type = csr.dtype
    ret = engine.with_capacity(csr.nnz, index_type=index_type, value_type=value_type)
    indptr = csr.indptr
    indices = csr.indices
    data = csr.data
    for i in range(csr.shape[0]):
        for k in range(indptr[i], indptr[i + 1]):
            ret.set(i, int(indices[k]), data[k])
    logger.debug(f"Imported scipy matrix {csr.shape} with {csr.nnz} entries")
    return ret


def to_scipy(mat: SparseMatrix) -> "spmatrix":
    """Convert to scipy.sparse.csr_matrix.

    Rows keep their storage order; scipy sorts nothing on construction.

    Raises:
        TypeError: For value types scipy cannot store (object dtype).
    """
    import scipy.sparse as sp

    if mat.value_type.is_object:
        raise TypeError(f"scipy cannot store value type {mat.value_type}")
    n_rows, n_cols = mat.shape
    nnz = mat.n_non_zero_entries()
    data = np.empty(nnz, dtype=mat.value_type.dtype)
    indices = np.empty(nnz, dtype=np.int64)
    indptr = np.zeros(n_rows + 1, dtype=np.int64)
    k = 0
    for i in range(n_rows):
        for col, val in mat.iter_row(i):
            indices[k] = col
            data[k] = val
            k += 1
        indptr[i + 1] = k
    return sp.csr_matrix((data[:k], indices[:k], indptr), shape=(n_rows, n_cols))


def to_numpy(mat: SparseMatrix) -> np.ndarray:
    """Convert to a dense numpy array."""
    return mat.to_dense()
