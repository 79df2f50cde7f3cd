"""
Tests for sparse products.
"""

import numpy as np
import pytest
import scipy.sparse as sp

from sparsemat import (
    ColumnInfoUnavailableError,
    DenseVec,
    DimensionMismatchError,
    dot,
    spmv,
)
from sparsemat.sparse import (
    IndexListMatrix,
    CRSMatrix,
    RowVecMatrix,
    BlockMatrix,
    convert,
    from_dense,
)

from conftest import random_dense, dense_of, assert_vec_close


class TestSpmv:
    """Test the matrix-vector product entry point."""

    def test_sparse_input(self, example1):
        """spmv delegates to mvp."""
        y = spmv(example1, [2.0, 4.8, 1.2])
        assert isinstance(y, DenseVec)
        assert y[0] == pytest.approx(34.544)

    def test_scipy_input(self, rng):
        """scipy matrices multiply in scipy."""
        arr = random_dense(rng, (4, 3))
        x = rng.random(3)
        y = spmv(sp.csr_matrix(arr), x)
        assert isinstance(y, np.ndarray)
        np.testing.assert_allclose(y, arr @ x)

    def test_scipy_dimension_mismatch(self):
        """scipy input still checks the vector length."""
        with pytest.raises(DimensionMismatchError):
            spmv(sp.eye(3, format='csr'), [1.0, 2.0])

    def test_matmul_vector(self, example1):
        """The @ operator with a vector is the matrix-vector product."""
        y = example1 @ np.array([2.0, 4.8, 1.2])
        assert_vec_close(y, [34.544, 15.696, 2.544])


class TestDot:
    """Test the sort-merge sparse product."""

    def test_small_example(self):
        """2x2 product."""
        a = from_dense([[1.0, 2.0], [0.0, 3.0]])
        b = from_dense([[4.0, 0.0], [5.0, 6.0]])
        c = dot(a, b)
        np.testing.assert_array_equal(c.to_dense(), [[14.0, 12.0], [15.0, 18.0]])

    def test_matches_numpy(self, engine, column_engine, rng):
        """Every left engine times every column engine."""
        a_arr = random_dense(rng, (5, 4))
        b_arr = random_dense(rng, (4, 6))
        a = from_dense(a_arr, engine=engine)
        b = from_dense(b_arr, engine=column_engine)
        c = dot(a, b)
        assert type(c) is engine
        np.testing.assert_allclose(dense_of(c, (5, 6)), a_arr @ b_arr)

    def test_result_is_sorted(self, rng):
        """Each result row is written in ascending column order."""
        a = from_dense(random_dense(rng, (6, 6)))
        b = from_dense(random_dense(rng, (6, 6)), engine=CRSMatrix)
        assert dot(a, b).is_sorted()

    def test_unsorted_operands(self, example1):
        """Operand row order does not matter."""
        dense = example1.to_dense()
        b = convert(example1, IndexListMatrix)
        c = dot(example1, b)
        np.testing.assert_allclose(c.to_dense(), dense @ dense)

    def test_zero_sums_not_stored(self):
        """Cancelling products leave no entry."""
        a = from_dense([[1.0, 1.0]])
        b = from_dense([[1.0], [-1.0]])
        c = dot(a, b)
        assert c.nnz == 0

    def test_operands_unchanged(self, rng):
        """A is untouched; B only gains a column view."""
        a = from_dense(random_dense(rng, (3, 3)), engine=CRSMatrix)
        b = from_dense(random_dense(rng, (3, 3)))
        a_before = a.to_dict()
        b_before = b.to_dict()
        dot(a, b)
        assert a.to_dict() == a_before
        assert b.to_dict() == b_before
        assert b.has_column_info
        assert not a.has_column_info

    def test_out_type(self, rng):
        """The result engine can be chosen."""
        a = from_dense(random_dense(rng, (3, 3)))
        b = from_dense(random_dense(rng, (3, 3)))
        c = dot(a, b, out_type=RowVecMatrix)
        assert isinstance(c, RowVecMatrix)
        assert c.value_type == a.value_type

    def test_block_left_operand(self, rng):
        """A block matrix can be the left operand."""
        arr = random_dense(rng, (4, 4))
        arr[:, 0] += 1.0
        a = BlockMatrix(n_blocks=2, max_n_rows=4)
        for i, j in zip(*np.nonzero(arr)):
            a.set(int(i), int(j), arr[i, j])
        b = from_dense(np.eye(4), engine=CRSMatrix)
        c = dot(a, b)
        assert isinstance(c, BlockMatrix)
        np.testing.assert_allclose(dense_of(c, (4, 4)), arr)

    def test_matmul_operator(self, rng):
        """A @ B is dot(A, B)."""
        a = from_dense(random_dense(rng, (3, 4)))
        b = from_dense(random_dense(rng, (4, 2)))
        assert (a @ b) == dot(a, b)

    def test_dimension_mismatch(self, rng):
        """Inner dimensions must agree."""
        a = from_dense(random_dense(rng, (5, 4)))
        b = from_dense(random_dense(rng, (3, 6)))
        with pytest.raises(DimensionMismatchError):
            dot(a, b)

    def test_right_operand_needs_columns(self, rng):
        """The row-of-arrays engine cannot be the right operand."""
        a = from_dense(random_dense(rng, (3, 3)))
        b = from_dense(random_dense(rng, (3, 3)), engine=RowVecMatrix)
        with pytest.raises(TypeError):
            dot(a, b)

    def test_operands_must_be_sparse(self, rng):
        """Dense arrays are not accepted by the sparse product."""
        a = from_dense(random_dense(rng, (3, 3)))
        with pytest.raises(TypeError):
            dot(np.eye(3), a)
        with pytest.raises(TypeError):
            dot(a, np.eye(3))

    def test_no_assembly(self, rng):
        """Without assembly a missing view is an error."""
        a = from_dense(random_dense(rng, (3, 3)))
        b = from_dense(random_dense(rng, (3, 3)), engine=CRSMatrix)
        with pytest.raises(ColumnInfoUnavailableError):
            dot(a, b, assemble=False)
        b.assemble_column_info()
        np.testing.assert_allclose(
            dot(a, b, assemble=False).to_dense(), a.to_dense() @ b.to_dense()
        )

    def test_stale_view_reassembled(self, rng):
        """A stale view is rebuilt before the product."""
        a = IndexListMatrix.eye(3)
        b = IndexListMatrix.eye(3)
        b.assemble_column_info()
        b.set(0, 2, 5.0)
        c = dot(a, b)
        assert c.get(0, 2) == 5.0


class TestDotScipy:
    """Test scipy interoperability of dot."""

    def test_both_scipy(self, rng):
        """Two scipy inputs multiply in scipy."""
        a = sp.csr_matrix(random_dense(rng, (3, 4)))
        b = sp.csc_matrix(random_dense(rng, (4, 2)))
        c = dot(a, b)
        assert sp.issparse(c)
        np.testing.assert_allclose(c.toarray(), a.toarray() @ b.toarray())

    def test_both_scipy_mismatch(self):
        """scipy inputs are checked too."""
        with pytest.raises(DimensionMismatchError):
            dot(sp.eye(3, format='csr'), sp.eye(4, format='csr'))

    def test_mixed_inputs(self, rng):
        """A scipy operand is imported before the product."""
        a_arr = random_dense(rng, (3, 4))
        b_arr = random_dense(rng, (4, 2))
        c = dot(sp.csr_matrix(a_arr), from_dense(b_arr, engine=CRSMatrix))
        assert isinstance(c, IndexListMatrix)
        np.testing.assert_allclose(dense_of(c, (3, 2)), a_arr @ b_arr)
        c = dot(from_dense(a_arr, engine=CRSMatrix), sp.csr_matrix(b_arr))
        assert isinstance(c, CRSMatrix)
        np.testing.assert_allclose(dense_of(c, (3, 2)), a_arr @ b_arr)
