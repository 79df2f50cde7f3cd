"""
sparsemat - Sparse Matrix Algebra Engine

Interchangeable sparse matrix storage engines behind one algebraic
contract:
- Incremental linked, compressed-row and row-of-arrays engines
- Default algebra written once (add, sub, scale, transpose, mvp, ...)
- Sort-merge sparse x sparse product
- Conjugate gradient solver
- Row-sharded block wrapper with a fork-join matrix-vector product
- Text / PBM export and scipy interop

Modules:
- sparse: Storage engines, dense vector and conversions
- math: Products and solvers
- io: Text and bitmap export

Architecture:
    ┌──────────────────────────────────────────────┐
    │   SparseMatrix (contract + default algebra)  │
    ├──────────────────────────────────────────────┤
    │  IndexListMatrix | CRSMatrix | RowVecMatrix  │
    │  BlockMatrix (shards one engine by rows)     │
    └──────────────────────────────────────────────┘

Example:
    >>> import sparsemat
    >>> from sparsemat import IndexListMatrix, cg
    >>>
    >>> mat = IndexListMatrix()
    >>> mat.set(0, 0, 4.0); mat.set(0, 1, 1.0)
    >>> mat.set(1, 0, 1.0); mat.set(1, 1, 3.0)
    >>> result = cg(mat, [1.0, 2.0])
    >>> result.x.tolist()
    [0.0909..., 0.6363...]
"""

__version__ = '0.1.0'

# Import main modules
from . import sparse
from . import math
from . import io

from ._config import (
    config,
    get_config,
    set_default_types,
    set_solver,
    set_parallel,
    ParallelStrategy,
    TypeConfig,
    SolverConfig,
    ParallelConfig,
)

from .core.error import (
    SparseMatError,
    CapacityError,
    DimensionMismatchError,
    NotSquareError,
    ColumnInfoUnavailableError,
    UnsortedRowError,
    StaleEntryError,
    ConvergenceError,
)

# Re-export common types
from .sparse import (
    # Core classes
    SparseMatrix,
    Sortable,
    ColumnIterable,
    EntryRef,
    IndexListMatrix,
    CRSMatrix,
    RowVecMatrix,
    BlockMatrix,
    DenseVec,
    RowIndexList,
    Array,

    # Type constants
    IndexType,
    ValueType,
    uint8,
    uint16,
    uint32,
    uint64,
    float32,
    float64,
    int32,
    int64,

    # Conversions
    to_crs,
    convert,
    from_triplets,
    from_dense,
    from_scipy,
    to_scipy,
)

from .math import (
    spmv,
    dot,
    ConjugateGradient,
    SolveResult,
    cg,
)

__all__ = [
    # Version
    '__version__',

    # Modules
    'sparse',
    'math',
    'io',

    # Configuration
    'config',
    'get_config',
    'set_default_types',
    'set_solver',
    'set_parallel',
    'ParallelStrategy',
    'TypeConfig',
    'SolverConfig',
    'ParallelConfig',

    # Errors
    'SparseMatError',
    'CapacityError',
    'DimensionMismatchError',
    'NotSquareError',
    'ColumnInfoUnavailableError',
    'UnsortedRowError',
    'StaleEntryError',
    'ConvergenceError',

    # Core classes
    'SparseMatrix',
    'Sortable',
    'ColumnIterable',
    'EntryRef',
    'IndexListMatrix',
    'CRSMatrix',
    'RowVecMatrix',
    'BlockMatrix',
    'DenseVec',
    'RowIndexList',
    'Array',

    # Type constants
    'IndexType',
    'ValueType',
    'uint8',
    'uint16',
    'uint32',
    'uint64',
    'float32',
    'float64',
    'int32',
    'int64',

    # Conversions
    'to_crs',
    'convert',
    'from_triplets',
    'from_dense',
    'from_scipy',
    'to_scipy',

    # Math
    'spmv',
    'dot',
    'ConjugateGradient',
    'SolveResult',
    'cg',
]
