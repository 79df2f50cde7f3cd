"""
Tests for the exception hierarchy.
"""

import pytest

from sparsemat import (
    SparseMatError,
    CapacityError,
    DimensionMismatchError,
    NotSquareError,
    ColumnInfoUnavailableError,
    UnsortedRowError,
    StaleEntryError,
    ConvergenceError,
)
from sparsemat.core.error import (
    SPM_ERROR_CAPACITY_EXCEEDED,
    SPM_ERROR_DIMENSION_MISMATCH,
    SPM_ERROR_NOT_SQUARE,
    check_dimensions,
)


class TestHierarchy:
    """Test error classes and their builtin bases."""

    @pytest.mark.parametrize("cls, builtin", [
        (CapacityError, OverflowError),
        (DimensionMismatchError, ValueError),
        (NotSquareError, ValueError),
        (ColumnInfoUnavailableError, RuntimeError),
        (UnsortedRowError, ValueError),
        (StaleEntryError, RuntimeError),
        (ConvergenceError, ArithmeticError),
    ])
    def test_builtin_bases(self, cls, builtin):
        """Each error is also catchable as its closest builtin."""
        assert issubclass(cls, SparseMatError)
        assert issubclass(cls, builtin)

    def test_not_square_is_dimension_mismatch(self):
        """NotSquareError specializes DimensionMismatchError."""
        assert issubclass(NotSquareError, DimensionMismatchError)
        assert NotSquareError.code == SPM_ERROR_NOT_SQUARE


class TestMessages:
    """Test codes and messages."""

    def test_default_message(self):
        """The code's message is used when none is given."""
        err = CapacityError()
        assert err.code == SPM_ERROR_CAPACITY_EXCEEDED
        assert err.message == "Index capacity exceeded"
        assert "10" in str(err)

    def test_custom_message(self):
        """A custom message is kept."""
        err = DimensionMismatchError("3 vs 4")
        assert err.message == "3 vs 4"
        assert err.code == SPM_ERROR_DIMENSION_MISMATCH

    def test_from_code(self):
        """from_code builds a message with context."""
        err = SparseMatError.from_code(SPM_ERROR_NOT_SQUARE, "cg")
        assert err.code == SPM_ERROR_NOT_SQUARE
        assert err.message == "cg: Matrix is not square"


class TestCheckDimensions:
    """Test the dimension check helper."""

    def test_equal(self):
        """Equal sizes pass."""
        check_dimensions(3, 3)

    def test_mismatch(self):
        """Different sizes raise with context."""
        with pytest.raises(DimensionMismatchError, match="vector size: expected 3, got 2"):
            check_dimensions(3, 2, "vector size")
