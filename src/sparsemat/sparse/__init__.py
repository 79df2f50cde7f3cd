"""sparsemat Sparse Matrix Module.

Interchangeable sparse matrix storage engines behind one capability
contract, plus the dense vector they multiply.

Type Hierarchy:

    SparseMatrix (ABC)
    ├── IndexListMatrix               # Linked row index, O(1) append
    ├── CRSMatrix                     # Compressed rows, contiguous row slices
    ├── RowVecMatrix                  # One pair of arrays per row
    └── BlockMatrix                   # Row-sharded wrapper over one engine

    Sortable        - IndexListMatrix, CRSMatrix, RowVecMatrix
    ColumnIterable  - IndexListMatrix, CRSMatrix

Quick Start:
    >>> from sparsemat.sparse import IndexListMatrix, to_crs
    >>>
    >>> mat = IndexListMatrix()
    >>> mat.add_to(0, 1, 4.2)
    >>> mat.set(1, 2, 4.12)
    >>> crs = to_crs(mat)
    >>> y = crs @ [2.0, 4.8, 1.2]

Engine Trade-offs:
    Engine            Append        Lookup        Column view
    ---------------------------------------------------------
    IndexListMatrix   O(1)          O(row)        after assembly
    CRSMatrix         O(nnz)        O(row)        after assembly
    RowVecMatrix      O(1)          O(row)        not supported

Key Functions:
    - to_crs, convert: Engine conversion
    - from_triplets, from_dense: Construction
    - from_scipy, to_scipy, to_numpy: scipy/numpy interop
"""

# =============================================================================
# Numeric Types
# =============================================================================
from ._dtypes import (
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
    normalize_index_type,
    normalize_value_type,
    is_float_type,
)

# =============================================================================
# Storage Primitives
# =============================================================================
from ._array import (
    Array,
    empty,
    zeros,
    full,
    from_list,
)
from ._index_list import RowIndexList
from ._dense import DenseVec

# =============================================================================
# Contract & Engines
# =============================================================================
from ._base import (
    EntryRef,
    SparseMatrix,
    Sortable,
    ColumnIterable,
    format_value,
)
from ._linked import IndexListMatrix
from ._crs import CRSMatrix
from ._rowvec import RowVecMatrix
from ._blocked import BlockMatrix

# =============================================================================
# Operations
# =============================================================================
from ._ops import (
    to_crs,
    convert,
    from_triplets,
    from_dense,
    from_scipy,
    to_scipy,
    to_numpy,
)

__all__ = [
    # Types
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
    'normalize_index_type',
    'normalize_value_type',
    'is_float_type',

    # Storage primitives
    'Array',
    'empty',
    'zeros',
    'full',
    'from_list',
    'RowIndexList',
    'DenseVec',

    # Contract
    'EntryRef',
    'SparseMatrix',
    'Sortable',
    'ColumnIterable',
    'format_value',

    # Engines
    'IndexListMatrix',
    'CRSMatrix',
    'RowVecMatrix',
    'BlockMatrix',

    # Operations
    'to_crs',
    'convert',
    'from_triplets',
    'from_dense',
    'from_scipy',
    'to_scipy',
    'to_numpy',
]
