"""
Block-Partitioned Matrix

Shards the rows of one storage engine over N sub-matrices of equal declared
row capacity:

    block = min(row // capacity, n_blocks - 1)
    local = row - block * capacity

Rows past the last block's range are kept by the final block. Each block
can be processed by its own worker (see mvp_parallel).
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Hashable, Iterator, List, Optional, Tuple, Type

from .._config import ParallelStrategy, config
from ..core.error import DimensionMismatchError
from ._base import SparseMatrix
from ._dense import DenseVec
from ._linked import IndexListMatrix

__all__ = ['BlockMatrix']

logger = logging.getLogger("sparsemat.parallel")

_DEFAULT_BLOCKS = 4


class BlockMatrix(SparseMatrix):
    """
    Row-sharded wrapper around sub-matrices of a single engine.

    The row count assumes every block before the last non-empty one is full:
    n_rows = capacity * last + blocks[last].n_rows(), where ``last`` is the
    block before the first structurally empty one.

    Attributes:
        engine: Engine class of the sub-matrices
        n_blocks (int): Number of sub-matrices
        rows_per_block (int): Declared row capacity of each sub-matrix

    Example:
        >>> mat = BlockMatrix(CRSMatrix, n_blocks=2, max_n_rows=4)
        >>> mat.set(3, 0, 1.0)
        >>> mat.block_of(3)
        (1, 1)
        >>> y = mat.mvp_parallel([2.0])
    """

    def __init__(
        self,
        engine: Optional[Type[SparseMatrix]] = None,
        n_blocks: int = _DEFAULT_BLOCKS,
        max_n_rows: int = 0,
        index_type=None,
        value_type=None,
    ):
        """
        Create N empty sub-matrices.

        Args:
            engine: SparseMatrix subclass for every block (IndexListMatrix if None)
            n_blocks: Number of sub-matrices
            max_n_rows: Expected total row count, split evenly over the blocks
            index_type: Index type of the sub-matrices
            value_type: Value type of the sub-matrices
        """
        if n_blocks < 1:
            raise ValueError(f"n_blocks must be positive, got {n_blocks}")
        if max_n_rows < 0:
            raise ValueError(f"max_n_rows must be non-negative, got {max_n_rows}")
        self._init_types(index_type, value_type)
        self._engine = engine or IndexListMatrix
        self._n_blocks = n_blocks
        self._max_n_rows = max_n_rows
        self._cap = max(1, max_n_rows // n_blocks)
        self._blocks: List[SparseMatrix] = [
            self._engine.with_capacity(self._cap, index_type=self._itype, value_type=self._vtype)
            for _ in range(n_blocks)
        ]

    @classmethod
    def with_capacity(cls, capacity: int, index_type=None, value_type=None,
                      engine: Optional[Type[SparseMatrix]] = None) -> 'BlockMatrix':
        """Four blocks sharing ``capacity`` rows."""
        return cls(engine, _DEFAULT_BLOCKS, capacity, index_type=index_type, value_type=value_type)

    def like(self, capacity: int = 0) -> 'BlockMatrix':
        return BlockMatrix(
            self._engine, self._n_blocks, self._max_n_rows,
            index_type=self._itype, value_type=self._vtype,
        )

    # -------------------------------------------------------------------------
    # Partitioning
    # -------------------------------------------------------------------------

    @property
    def engine(self) -> Type[SparseMatrix]:
        return self._engine

    @property
    def n_blocks(self) -> int:
        return self._n_blocks

    @property
    def rows_per_block(self) -> int:
        return self._cap

    @property
    def blocks(self) -> Tuple[SparseMatrix, ...]:
        """The sub-matrices, in row order."""
        return tuple(self._blocks)

    def block_of(self, row: int) -> Tuple[int, int]:
        """(block index, local row) holding global ``row``."""
        if row < 0:
            raise IndexError(f"Row must be non-negative, got {row}")
        block = min(row // self._cap, self._n_blocks - 1)
        return block, row - block * self._cap

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    def n_rows(self) -> int:
        last = 0
        for b, sub in enumerate(self._blocks):
            if sub.is_empty():
                break
            last = b
        return last * self._cap + self._blocks[last].n_rows()

    def n_cols(self) -> int:
        return max(sub.n_cols() for sub in self._blocks)

    def n_non_zero_entries(self) -> int:
        return sum(sub.n_non_zero_entries() for sub in self._blocks)

    # -------------------------------------------------------------------------
    # Slots (delegated)
    # -------------------------------------------------------------------------

    def _locate(self, i: int, j: int, create: bool) -> Optional[Tuple[int, Hashable]]:
        block, local = self.block_of(i)
        key = self._blocks[block]._locate(local, j, create)
        if key is None:
            return None
        return block, key

    def _load(self, key: Tuple[int, Hashable]) -> Any:
        block, sub_key = key
        return self._blocks[block]._load(sub_key)

    def _store(self, key: Tuple[int, Hashable], value: Any) -> None:
        block, sub_key = key
        self._blocks[block]._store(sub_key, value)

    def _structure_version(self) -> int:
        return self._version + sum(sub._structure_version() for sub in self._blocks)

    def iter_row(self, row: int) -> Iterator[Tuple[int, Any]]:
        block, local = self.block_of(row)
        return self._blocks[block].iter_row(local)

    def scale(self, factor: Any) -> None:
        for sub in self._blocks:
            sub.scale(factor)

    def copy(self) -> 'BlockMatrix':
        new = BlockMatrix.__new__(BlockMatrix)
        new._itype = self._itype
        new._vtype = self._vtype
        new._version = self._version
        new._engine = self._engine
        new._n_blocks = self._n_blocks
        new._max_n_rows = self._max_n_rows
        new._cap = self._cap
        new._blocks = [sub.copy() for sub in self._blocks]
        return new

    # -------------------------------------------------------------------------
    # Fork-Join Product
    # -------------------------------------------------------------------------

    def mvp_parallel(self, vector, max_workers: Optional[int] = None) -> DenseVec:
        """
        Matrix-vector product with one task per block.

        Each task reads only its own block; the result is assembled after
        every task has finished. Must not run concurrently with mutation.

        Args:
            vector: DenseVec, list or 1D numpy array with dim >= n_cols()
            max_workers: Thread pool size (config.parallel.num_workers, then
                one per block, if None)

        Returns:
            DenseVec of dimension n_rows(), equal to mvp(vector)
        """
        from .._typing import ensure_vector

        vec = ensure_vector(vector, self._vtype)
        if vec.dim() < self.n_cols():
            raise DimensionMismatchError(
                f"mvp: matrix has {self.n_cols()} columns, vector has dim {vec.dim()}"
            )

        strategy = config.parallel.strategy
        workers = max_workers or config.num_workers or self._n_blocks
        sequential = (
            strategy == ParallelStrategy.SEQUENTIAL
            or (strategy == ParallelStrategy.AUTO and (self._n_blocks == 1 or workers == 1))
        )
        logger.debug(
            f"mvp over {self._n_blocks} blocks "
            f"({'sequential' if sequential else f'{workers} workers'})"
        )

        if sequential:
            parts = [sub.mvp(vec) for sub in self._blocks]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                parts = list(pool.map(lambda sub: sub.mvp(vec), self._blocks))

        n_rows = self.n_rows()
        ret = DenseVec.zeros(n_rows, self._vtype)
        for b, part in enumerate(parts):
            offset = b * self._cap
            for local, val in enumerate(part):
                row = offset + local
                if row >= n_rows:
                    break
                ret.set(row, val)
        return ret

    def __repr__(self) -> str:
        return (
            f"BlockMatrix(engine={self._engine.__name__}, n_blocks={self._n_blocks}, "
            f"rows_per_block={self._cap}, shape={self.shape}, nnz={self.nnz})"
        )
