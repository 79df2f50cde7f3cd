"""
Iterative Linear Solvers.

Solvers consume only the matrix contract (n_rows, n_cols, mvp) and the
dense vector contract, so they run on every storage engine.

Implemented Solvers:
    - Conjugate gradient, for symmetric positive-definite systems
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from sparsemat._config import config
from sparsemat._typing import VectorInput, ensure_vector
from sparsemat.core.error import ConvergenceError, DimensionMismatchError, NotSquareError

if TYPE_CHECKING:
    from sparsemat.sparse import DenseVec, SparseMatrix

__all__ = ["SolveResult", "ConjugateGradient", "cg"]

logger = logging.getLogger("sparsemat.solvers")


@dataclass
class SolveResult:
    """Outcome of an iterative solve.

    Attributes:
        x: Solution vector (the caller's DenseVec when one was passed).
        converged: Whether the residual norm dropped below the tolerance.
        iterations: Number of iterations performed.
        residual_norm: Final residual L2 norm.
    """
    x: "DenseVec"
    converged: bool
    iterations: int
    residual_norm: float

    def __bool__(self) -> bool:
        return self.converged


class ConjugateGradient:
    """
    Conjugate gradient solver for A x = b.

    Symmetric positive-definiteness of A is assumed, not checked; an
    indefinite matrix simply fails to converge.

    Algorithm:
        r = b - A x;  p = r;  rs = r.r
        repeat up to max_iter times:
            Ap    = A p
            alpha = rs / (p . Ap)
            x    += alpha p
            r    -= alpha Ap
            rs'   = r.r
            stop if sqrt(rs') < tol
            p     = r + (rs' / rs) p;  rs = rs'

    Example:
        >>> solver = ConjugateGradient(tol=1e-10)
        >>> result = solver.solve(mat, [1.0, 2.0])
        >>> result.converged, result.x.tolist()
        (True, [0.0909..., 0.6363...])
    """

    def __init__(
        self,
        tol: Optional[float] = None,
        max_iter: Optional[int] = None,
        raise_on_failure: bool = False,
    ):
        """
        Args:
            tol: Absolute residual tolerance (config.solver.tol if None)
            max_iter: Iteration cap (config.solver.max_iter if None)
            raise_on_failure: Raise ConvergenceError instead of returning
                an unconverged result
        """
        self.tol = config.solver.tol if tol is None else tol
        self.max_iter = config.solver.max_iter if max_iter is None else max_iter
        self.raise_on_failure = raise_on_failure
        if self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}")
        if self.max_iter < 0:
            raise ValueError(f"max_iter must be non-negative, got {self.max_iter}")

    def solve(
        self,
        mat: "SparseMatrix",
        b: VectorInput,
        x: Optional[VectorInput] = None,
    ) -> SolveResult:
        """
        Solve ``mat @ x = b``.

        Args:
            mat: Square sparse matrix
            b: Right-hand side, dim == n_rows()
            x: Initial guess, dim == n_rows() (zeros if None); a DenseVec
                is updated in place

        Returns:
            SolveResult

        Raises:
            NotSquareError: If n_rows() != n_cols()
            DimensionMismatchError: If b or x does not match n_rows()
            ConvergenceError: If raise_on_failure and the cap is exhausted
        """
        from sparsemat.sparse import DenseVec

        n = mat.n_rows()
        if n != mat.n_cols():
            raise NotSquareError(f"conjugate gradient needs a square matrix, got {mat.shape}")

        vtype = mat.value_type
        b = ensure_vector(b, vtype)
        x = DenseVec.zeros(n, vtype) if x is None else ensure_vector(x, vtype)
        if b.dim() != n or x.dim() != n:
            raise DimensionMismatchError(
                f"matrix has {n} rows, b has dim {b.dim()}, x has dim {x.dim()}"
            )

        r = b - mat.mvp(x)
        p = r.copy()
        rs = r.norm_squared()
        residual = math.sqrt(float(rs))
        converged = residual < self.tol
        iterations = 0

        while not converged and iterations < self.max_iter:
            ap = mat.mvp(p)
            alpha = rs / p.inner_prod(ap)
            x.axpy(alpha, p)
            r.axpy(-alpha, ap)
            rs_prev = rs
            rs = r.norm_squared()
            iterations += 1
            residual = math.sqrt(float(rs))
            if residual < self.tol:
                converged = True
                break
            p.scale(rs / rs_prev)
            p.add(r)

        logger.debug(
            f"CG: n={n}, iterations={iterations}, residual={residual:.3e}, "
            f"converged={converged}"
        )
        if not converged:
            logger.warning(
                f"CG did not converge in {self.max_iter} iterations "
                f"(residual {residual:.3e}, tol {self.tol:.1e})"
            )
            if self.raise_on_failure:
                raise ConvergenceError(
                    f"no convergence after {iterations} iterations, residual {residual:.3e}"
                )

        return SolveResult(x=x, converged=converged, iterations=iterations, residual_norm=residual)

    def __repr__(self) -> str:
        return f"ConjugateGradient(tol={self.tol}, max_iter={self.max_iter})"


def cg(
    mat: "SparseMatrix",
    b: VectorInput,
    x: Optional[VectorInput] = None,
    tol: Optional[float] = None,
    max_iter: Optional[int] = None,
    raise_on_failure: bool = False,
) -> SolveResult:
    """Solve ``mat @ x = b`` with conjugate gradient.

    Functional form of ``ConjugateGradient(tol, max_iter).solve(mat, b, x)``.
    """
    solver = ConjugateGradient(tol=tol, max_iter=max_iter, raise_on_failure=raise_on_failure)
    return solver.solve(mat, b, x)
