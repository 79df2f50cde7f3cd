"""
sparsemat Type Definitions and Protocols.

Type aliases, protocols and input coercion helpers shared by the algorithm
modules, so that functions can accept DenseVec, numpy arrays and plain
sequences interchangeably.

Example:
    >>> from sparsemat._typing import VectorInput, ensure_vector
    >>>
    >>> def my_func(mat, x: VectorInput):
    ...     x = ensure_vector(x, mat.value_type)
    ...     return mat.mvp(x)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

import numpy as np

if TYPE_CHECKING:
    from sparsemat.sparse import DenseVec, ValueType


__all__ = [
    "VectorInput",
    "is_sparse_matrix",
    "is_column_iterable",
    "is_scipy_sparse",
    "ensure_vector",
]


# =============================================================================
# Input Type Aliases
# =============================================================================

VectorInput = Union[
    "DenseVec",
    np.ndarray,
    Sequence[Any],
]


# =============================================================================
# Type Checking Functions
# =============================================================================

def is_sparse_matrix(obj: Any) -> bool:
    """Check if object is a sparsemat matrix (any engine)."""
    from sparsemat.sparse import SparseMatrix
    return isinstance(obj, SparseMatrix)


def is_column_iterable(obj: Any) -> bool:
    """Check if object supports column traversal."""
    from sparsemat.sparse import ColumnIterable
    return isinstance(obj, ColumnIterable)


def is_scipy_sparse(obj: Any) -> bool:
    """Check if object is any scipy sparse matrix or array."""
    import scipy.sparse as sp
    return sp.issparse(obj)


# =============================================================================
# Conversion Functions
# =============================================================================

def ensure_vector(
    vec: VectorInput,
    value_type: Optional["ValueType"] = None,
    size: Optional[int] = None,
    copy: bool = False,
) -> "DenseVec":
    """Convert any vector input to DenseVec.

    Args:
        vec: DenseVec, 1D numpy array or sequence.
        value_type: Value type for non-DenseVec inputs (configured default if None).
        size: Expected size (for validation).
        copy: If True, always create a copy.

    Returns:
        DenseVec holding the vector data. A DenseVec input is returned as is
        unless ``copy`` is set.

    Raises:
        DimensionMismatchError: If size doesn't match expected.
    """
    from sparsemat.core.error import check_dimensions
    from sparsemat.sparse import DenseVec

    if isinstance(vec, DenseVec):
        result = vec.copy() if copy else vec
    elif isinstance(vec, np.ndarray):
        if vec.ndim != 1:
            raise ValueError(f"Expected a 1D array, got shape {vec.shape}")
        result = DenseVec.from_numpy(vec, value_type)
    else:
        result = DenseVec.from_list(vec, value_type)

    if size is not None:
        check_dimensions(size, result.dim(), "vector size")

    return result
