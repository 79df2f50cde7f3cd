"""
Tests for the row-sharded block matrix.
"""

import logging

import numpy as np
import pytest

from sparsemat import DimensionMismatchError, ParallelStrategy, StaleEntryError, set_parallel
from sparsemat.sparse import BlockMatrix, IndexListMatrix, CRSMatrix, RowVecMatrix

from conftest import random_dense, assert_vec_close


def _blocked_from_dense(arr, engine, n_blocks):
    mat = BlockMatrix(engine, n_blocks=n_blocks, max_n_rows=arr.shape[0])
    for i, j in zip(*np.nonzero(arr)):
        mat.set(int(i), int(j), arr[i, j])
    return mat


class TestPartitioning:
    """Test row to block mapping."""

    def test_default_engine(self):
        """The linked engine backs the blocks by default."""
        mat = BlockMatrix()
        assert mat.engine is IndexListMatrix
        assert mat.n_blocks == 4
        assert all(isinstance(b, IndexListMatrix) for b in mat.blocks)

    def test_block_of(self):
        """Rows map to (block, local row)."""
        mat = BlockMatrix(CRSMatrix, n_blocks=2, max_n_rows=4)
        assert mat.rows_per_block == 2
        assert mat.block_of(0) == (0, 0)
        assert mat.block_of(1) == (0, 1)
        assert mat.block_of(2) == (1, 0)
        assert mat.block_of(3) == (1, 1)

    def test_overflow_goes_to_last_block(self):
        """Rows past the declared range stay in the final block."""
        mat = BlockMatrix(n_blocks=2, max_n_rows=4)
        assert mat.block_of(10) == (1, 8)
        mat.set(10, 0, 1.0)
        assert mat.blocks[1].get(8, 0) == 1.0

    def test_rows_per_block_floor(self):
        """Each block owns at least one row."""
        assert BlockMatrix(n_blocks=4, max_n_rows=0).rows_per_block == 1
        assert BlockMatrix(n_blocks=4, max_n_rows=3).rows_per_block == 1

    def test_with_capacity(self):
        """with_capacity splits the rows over four blocks."""
        mat = BlockMatrix.with_capacity(8, engine=RowVecMatrix)
        assert mat.n_blocks == 4
        assert mat.rows_per_block == 2
        assert mat.engine is RowVecMatrix

    def test_invalid_arguments(self):
        """At least one block and a non-negative row count."""
        with pytest.raises(ValueError):
            BlockMatrix(n_blocks=0)
        with pytest.raises(ValueError):
            BlockMatrix(max_n_rows=-1)

    def test_negative_row(self):
        """Negative rows have no block."""
        with pytest.raises(IndexError):
            BlockMatrix().block_of(-1)


class TestShape:
    """Test dimensions across blocks."""

    def test_full_blocks(self, engine):
        """Rows count across every non-empty block."""
        mat = BlockMatrix(engine, n_blocks=2, max_n_rows=4)
        for i in range(4):
            mat.set(i, i % 2, 1.0)
        assert mat.shape == (4, 2)
        assert mat.nnz == 4

    def test_partial_last_block(self):
        """The last non-empty block contributes its own row count."""
        mat = BlockMatrix(n_blocks=2, max_n_rows=4)
        mat.set(0, 0, 1.0)
        mat.set(2, 3, 1.0)
        assert mat.n_rows() == 3
        assert mat.n_cols() == 4

    def test_row_count_stops_at_first_empty_block(self):
        """Blocks after an empty one are not counted."""
        mat = BlockMatrix(n_blocks=3, max_n_rows=3)
        mat.set(0, 0, 1.0)
        mat.set(2, 0, 1.0)
        assert mat.n_rows() == 1
        assert mat.nnz == 2

    def test_empty(self):
        """An empty block matrix has zero shape."""
        mat = BlockMatrix()
        assert mat.shape == (0, 0)
        assert mat.is_empty()


class TestBlockContract:
    """Test the delegated contract."""

    def test_get_set(self, engine):
        """Element access routes through the owning block."""
        mat = BlockMatrix(engine, n_blocks=2, max_n_rows=4)
        mat.set(3, 1, 2.0)
        mat.add_to(3, 1, 1.0)
        ref = mat.get_mut(0, 0)
        ref += 5.0
        assert mat.get(3, 1) == 3.0
        assert mat.get(0, 0) == 5.0
        assert mat.get(1, 1) == 0.0
        assert mat.blocks[1].get(1, 1) == 3.0

    def test_handle_tracks_block_structure(self, engine):
        """A new entry in any block invalidates outstanding handles."""
        mat = BlockMatrix(engine, n_blocks=2, max_n_rows=4)
        mat.set(0, 0, 1.0)
        ref = mat.get_mut(0, 0)
        ref += 1.0
        mat.set(3, 2, 4.0)
        with pytest.raises(StaleEntryError):
            ref += 1.0
        assert mat.get(0, 0) == 2.0

    def test_iteration_uses_global_rows(self, engine):
        """iter reports global row numbers."""
        mat = BlockMatrix(engine, n_blocks=2, max_n_rows=4)
        mat.set(0, 0, 1.0)
        mat.set(1, 1, 2.0)
        mat.set(3, 0, 3.0)
        assert [(i, j) for i, j, _ in mat.iter()] == [(0, 0), (1, 1), (3, 0)]

    def test_scale_and_copy(self):
        """scale reaches every block; copy is deep."""
        mat = BlockMatrix(n_blocks=2, max_n_rows=2)
        mat.set(0, 0, 1.0)
        mat.set(1, 1, 2.0)
        other = mat.copy()
        mat.scale(3.0)
        assert mat.get(1, 1) == 6.0
        assert other.get(1, 1) == 2.0

    def test_transpose_keeps_layout(self):
        """Derived matrices share the block layout."""
        mat = BlockMatrix(CRSMatrix, n_blocks=2, max_n_rows=2)
        mat.set(0, 1, 1.0)
        mat.set(1, 0, 2.0)
        t = mat.transpose()
        assert isinstance(t, BlockMatrix)
        assert t.engine is CRSMatrix
        assert t.get(0, 1) == 2.0

    def test_repr(self):
        """repr names the engine."""
        assert "IndexListMatrix" in repr(BlockMatrix())


class TestParallelProduct:
    """Test the fork-join matrix-vector product."""

    @pytest.fixture
    def dense(self, rng):
        arr = random_dense(rng, (9, 5))
        arr[:, 0] += 1.0
        return arr

    def test_matches_sequential(self, engine, dense, rng):
        """mvp_parallel equals mvp and the dense product."""
        mat = _blocked_from_dense(dense, engine, n_blocks=3)
        x = rng.random(5)
        expected = dense @ x
        assert_vec_close(mat.mvp(x), expected)
        assert_vec_close(mat.mvp_parallel(x), expected)

    @pytest.mark.parametrize("strategy", list(ParallelStrategy))
    def test_strategies(self, dense, rng, strategy):
        """Every strategy gives the same result."""
        set_parallel(num_workers=2, strategy=strategy)
        mat = _blocked_from_dense(dense, CRSMatrix, n_blocks=4)
        x = rng.random(5)
        assert_vec_close(mat.mvp_parallel(x), dense @ x)

    def test_max_workers(self, dense):
        """An explicit pool size overrides the configuration."""
        mat = _blocked_from_dense(dense, IndexListMatrix, n_blocks=3)
        x = np.ones(5)
        assert_vec_close(mat.mvp_parallel(x, max_workers=1), dense @ x)
        assert_vec_close(mat.mvp_parallel(x, max_workers=8), dense @ x)

    def test_single_block(self, dense):
        """One block degenerates to the plain product."""
        mat = _blocked_from_dense(dense, RowVecMatrix, n_blocks=1)
        x = np.arange(5, dtype=float)
        assert_vec_close(mat.mvp_parallel(x), dense @ x)

    def test_short_vector(self, dense):
        """The vector must cover every column."""
        mat = _blocked_from_dense(dense, IndexListMatrix, n_blocks=3)
        with pytest.raises(DimensionMismatchError):
            mat.mvp_parallel([1.0, 2.0])

    def test_logs_dispatch(self, dense, caplog):
        """Dispatch is logged at debug level."""
        mat = _blocked_from_dense(dense, IndexListMatrix, n_blocks=3)
        with caplog.at_level(logging.DEBUG, logger="sparsemat.parallel"):
            mat.mvp_parallel(np.ones(5))
        assert "3 blocks" in caplog.text
