"""
Tests for the dense vector.
"""

from fractions import Fraction

import numpy as np
import pytest

from sparsemat import DenseVec, DimensionMismatchError
from sparsemat.sparse import float32


class TestConstruction:
    """Test DenseVec creation."""

    def test_with_capacity(self):
        """Reserved capacity does not create entries."""
        vec = DenseVec.with_capacity(10)
        assert vec.dim() == 0
        assert len(vec) == 0

    def test_zeros(self):
        """zeros() creates explicit zero entries."""
        assert DenseVec.zeros(3).tolist() == [0.0, 0.0, 0.0]

    def test_from_list_casts(self):
        """from_list converts to the value type."""
        vec = DenseVec.from_list([1, 2], value_type='float32')
        assert vec.value_type == float32
        assert isinstance(vec[0], np.float32)

    def test_from_numpy_copies(self):
        """from_numpy keeps the dtype and copies the data."""
        arr = np.array([1.0, 2.0])
        vec = DenseVec.from_numpy(arr)
        arr[0] = 5.0
        assert vec.tolist() == [1.0, 2.0]
        out = vec.to_numpy()
        out[1] = 9.0
        assert vec[1] == 2.0


class TestElementAccess:
    """Test growth-on-write access."""

    def test_set_grows(self):
        """Writing past the end zero-fills the gap."""
        vec = DenseVec.from_list([1.0, 2.0])
        vec.set(3, 4.0)
        assert vec.tolist() == [1.0, 2.0, 0.0, 4.0]

    def test_add_to_grows(self):
        """add_to past the end starts from zero."""
        vec = DenseVec()
        vec.add_to(2, 1.5)
        vec.add_to(2, 1.5)
        assert vec.tolist() == [0.0, 0.0, 3.0]

    def test_get_out_of_range(self):
        """Reading past the end is an error."""
        vec = DenseVec.zeros(2)
        with pytest.raises(IndexError):
            vec.get(2)
        with pytest.raises(IndexError):
            vec[5]

    def test_get_mut(self):
        """The handle writes through and grows the vector."""
        vec = DenseVec()
        ref = vec.get_mut(1)
        ref += 2.5
        assert vec.tolist() == [0.0, 2.5]

    def test_negative_index(self):
        """Negative positions are rejected."""
        with pytest.raises(IndexError):
            DenseVec().set(-1, 1.0)

    def test_iteration(self):
        """Iteration yields the entries in order."""
        assert list(DenseVec.from_list([3.0, 1.0])) == [3.0, 1.0]


class TestArithmetic:
    """Test in-place and binary arithmetic."""

    def test_add_sub(self):
        """Element-wise sum and difference return new vectors."""
        a = DenseVec.from_list([1.0, 2.0, 3.0])
        b = DenseVec.from_list([1.0, 1.0, 1.0])
        assert (a + b).tolist() == [2.0, 3.0, 4.0]
        assert (a - b).tolist() == [0.0, 1.0, 2.0]
        assert a.tolist() == [1.0, 2.0, 3.0]

    def test_shorter_rhs(self):
        """A shorter right operand touches only the common prefix."""
        a = DenseVec.from_list([1.0, 2.0, 3.0])
        a += DenseVec.from_list([1.0, 1.0])
        assert a.tolist() == [2.0, 3.0, 3.0]

    def test_longer_rhs(self):
        """A longer right operand is a dimension mismatch."""
        a = DenseVec.from_list([1.0])
        with pytest.raises(DimensionMismatchError):
            a.add(DenseVec.from_list([1.0, 2.0]))
        with pytest.raises(DimensionMismatchError):
            a -= DenseVec.from_list([1.0, 2.0])

    def test_axpy(self):
        """self += alpha * rhs."""
        a = DenseVec.from_list([1.0, 1.0])
        a.axpy(2.0, DenseVec.from_list([3.0, -1.0]))
        assert a.tolist() == [7.0, -1.0]

    def test_scale(self):
        """Scalar multiplication from both sides and negation."""
        a = DenseVec.from_list([1.0, -2.0])
        assert (a * 3.0).tolist() == [3.0, -6.0]
        assert (3.0 * a).tolist() == [3.0, -6.0]
        assert (-a).tolist() == [-1.0, 2.0]
        a *= 0.5
        assert a.tolist() == [0.5, -1.0]

    def test_inner_product(self):
        """Vector times vector is the inner product."""
        a = DenseVec.from_list([1.0, 2.0, 0.0, 4.0])
        assert a * a == 21.0
        assert a.inner_prod(DenseVec.from_list([1.0, 1.0])) == 3.0

    def test_norm(self):
        """Euclidean norm."""
        a = DenseVec.from_list([3.0, 4.0])
        assert a.norm_squared() == 25.0
        assert a.norm() == pytest.approx(5.0)

    def test_equality(self):
        """Vectors compare by entries."""
        assert DenseVec.from_list([1.0, 2.0]) == DenseVec.from_list([1.0, 2.0])
        assert DenseVec.from_list([1.0, 2.0]) != DenseVec.from_list([1.0])


class TestExactValues:
    """Test DenseVec over Fraction."""

    def test_fraction_arithmetic(self):
        """Fractions stay exact."""
        vt = Fraction
        a = DenseVec.from_list([1, 2], value_type=vt)
        b = DenseVec.from_list([Fraction(1, 3), Fraction(1, 6)], value_type=vt)
        assert a * b == Fraction(2, 3)
        a.axpy(Fraction(3), b)
        assert a.tolist() == [Fraction(2), Fraction(5, 2)]

    def test_fraction_growth(self):
        """Growth fills with the type's zero."""
        vec = DenseVec(value_type=Fraction)
        vec.set(2, Fraction(1, 2))
        assert vec.tolist() == [Fraction(0), Fraction(0), Fraction(1, 2)]
