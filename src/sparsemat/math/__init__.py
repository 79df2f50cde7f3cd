"""
sparsemat Math Module.

This module provides algorithms written against the matrix contract:

    - Linear algebra operations (matrix-vector, matrix-matrix products)
    - Iterative solvers (conjugate gradient)

Example:
    >>> import sparsemat.math as smath
    >>> from sparsemat.sparse import IndexListMatrix
    >>>
    >>> y = smath.spmv(mat, x)
    >>> c = smath.dot(mat, mat)
    >>> result = smath.cg(spd_mat, b)
"""

from sparsemat.math.linalg import (
    spmv,
    dot,
)

from sparsemat.math.solvers import (
    SolveResult,
    ConjugateGradient,
    cg,
)

__all__ = [
    # Linear algebra
    "spmv",
    "dot",
    # Solvers
    "SolveResult",
    "ConjugateGradient",
    "cg",
]
