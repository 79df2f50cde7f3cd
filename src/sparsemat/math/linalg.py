"""
Linear Algebra Operations for Sparse Matrices.

This module provides the products every solver and higher-level routine is
built on.

Implemented Operations:
    - Sparse matrix-dense vector multiplication (SpMV)
    - Sparse-sparse matrix multiplication (sort-merge over rows of A and
      columns of B)

Both accept scipy sparse inputs too, in which case scipy does the work.
"""

from __future__ import annotations

import logging
from operator import itemgetter
from typing import TYPE_CHECKING, List, Optional, Tuple, Type, Union

from sparsemat._typing import VectorInput, is_column_iterable, is_scipy_sparse, is_sparse_matrix
from sparsemat.core.error import DimensionMismatchError

if TYPE_CHECKING:
    import numpy as np
    from scipy import sparse as sp
    from sparsemat.sparse import DenseVec, SparseMatrix

__all__ = ["spmv", "dot"]

logger = logging.getLogger("sparsemat.math")


# =============================================================================
# Sparse Matrix-Vector Multiplication
# =============================================================================

def spmv(
    mat: Union["SparseMatrix", "sp.spmatrix"],
    x: VectorInput,
) -> Union["DenseVec", "np.ndarray"]:
    """Sparse matrix-vector multiplication (SpMV).

    Computes y = A * x where A is a sparse matrix and x is a dense vector.

    Mathematical Definition:
        y[i] = sum(A[i, j] * x[j] for j in range(n))

    Each row is summed in the engine's row iteration order, so results of
    different engines can differ in the last bits for floating types.

    Args:
        mat: Sparse matrix with n_cols() <= len(x), or a scipy sparse matrix.
        x: Dense vector.

    Returns:
        DenseVec of length n_rows() (numpy array for scipy input).

    Raises:
        DimensionMismatchError: If x is shorter than the matrix has columns.

    Examples:
        >>> from sparsemat.sparse import from_dense
        >>> mat = from_dense([[1.0, 2.0], [3.0, 4.0]])
        >>> spmv(mat, [1.0, 2.0]).tolist()
        [5.0, 11.0]
    """
    if is_scipy_sparse(mat):
        import numpy as np
        x_arr = np.asarray(x).ravel()
        if x_arr.shape[0] != mat.shape[1]:
            raise DimensionMismatchError(
                f"spmv: matrix has {mat.shape[1]} columns, vector has dim {x_arr.shape[0]}"
            )
        return mat.tocsr().dot(x_arr)
    return mat.mvp(x)


# =============================================================================
# Sparse-Sparse Matrix Multiplication
# =============================================================================

def dot(
    a: Union["SparseMatrix", "sp.spmatrix"],
    b: Union["SparseMatrix", "sp.spmatrix"],
    assemble: bool = True,
    out_type: Optional[Type["SparseMatrix"]] = None,
) -> Union["SparseMatrix", "sp.csr_matrix"]:
    """Sparse-sparse matrix multiplication.

    Computes C = A * B where A is row-iterable and B is column-iterable.

    Algorithm (Sort-Merge):
        For each row i of A:
            Collect (col, val) pairs of row i, sorted by column
            For each column j of B (entries sorted by row):
                Merge the two sorted lists: advance the row cursor while
                its column is below the current B row k; on a match
                accumulate A[i, k] * B[k, j]
            Store C[i, j] only if the sum is non-zero

    B's columns are collected and sorted once, up front. A is never
    modified.

    Args:
        a: Left matrix of shape (m, n).
        b: Right matrix of shape (n, p); must be ColumnIterable.
        assemble: Build B's column view if it is missing or stale.
        out_type: Engine of the result (same engine and types as A if None).

    Returns:
        Sparse matrix C of shape (m, p) (scipy csr_matrix for scipy input).

    Raises:
        DimensionMismatchError: If a.n_cols() != b.n_rows().
        TypeError: If an operand is not a sparse matrix or B has no
            column view.
        ColumnInfoUnavailableError: If B's column view is missing or stale
            and ``assemble`` is False.

    Examples:
        >>> A = from_dense([[1.0, 2.0], [0.0, 3.0]])
        >>> B = from_dense([[4.0, 0.0], [5.0, 6.0]])
        >>> dot(A, B).to_dense()
        array([[14., 12.],
               [15., 18.]])
    """
    if is_scipy_sparse(a) and is_scipy_sparse(b):
        if a.shape[1] != b.shape[0]:
            raise DimensionMismatchError(
                f"Matrix dimensions incompatible: {a.shape} x {b.shape}"
            )
        return a.dot(b).tocsr()
    if is_scipy_sparse(a) or is_scipy_sparse(b):
        from sparsemat.sparse import from_scipy
        if is_scipy_sparse(a):
            a = from_scipy(a)
        else:
            b = from_scipy(b)

    for operand in (a, b):
        if not is_sparse_matrix(operand):
            raise TypeError(
                f"dot expects sparse matrices, got {type(operand).__name__}"
            )
    if a.n_cols() != b.n_rows():
        raise DimensionMismatchError(
            f"Matrix dimensions incompatible: {a.shape} x {b.shape}"
        )
    if not is_column_iterable(b):
        raise TypeError(
            f"Right operand must support column iteration, got {type(b).__name__}"
        )
    if assemble and not b.has_column_info:
        b.assemble_column_info()

    columns = _sorted_columns(b)
    ret = out_type.with_capacity(0, index_type=a.index_type, value_type=a.value_type) \
        if out_type is not None else a.like()
    zero = ret.value_type.zero()

    for i in range(a.n_rows()):
        row = sorted(a.iter_row(i), key=itemgetter(0))
        if not row:
            continue
        last_col = row[-1][0]
        for j, col in enumerate(columns):
            total = zero
            p = 0
            for k, b_val in col:
                if k > last_col:
                    break
                while row[p][0] < k:
                    p += 1
                if row[p][0] == k:
                    total += row[p][1] * b_val
            if total != zero:
                ret.set(i, j, total)

    logger.debug(
        f"dot: {a.shape} x {b.shape} -> {ret.n_non_zero_entries()} entries"
    )
    return ret


def _sorted_columns(b: "SparseMatrix") -> List[List[Tuple[int, object]]]:
    """Every column of ``b`` as (row, value) pairs sorted by row."""
    return [
        sorted(b.iter_col(j), key=itemgetter(0))
        for j in range(b.n_cols())
    ]
