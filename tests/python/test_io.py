"""
Tests for text and bitmap export.
"""

from pathlib import Path

import pytest

from sparsemat import UnsortedRowError
from sparsemat.io import to_string_row, to_text, to_pbm, write_text, write_pbm
from sparsemat.sparse import from_dense


EXAMPLE1_TEXT = "7.12 4.2 0.12\n0.0 2.24 4.12\n0.0 0.0 2.12\n"
EXAMPLE1_PBM = "P1\n3 3\n1 1 1\n0 1 1\n0 0 1\n"


class TestText:
    """Test the plain-text dump."""

    def test_to_text(self, example1):
        """One line per row with explicit zeros."""
        example1.sort()
        assert to_text(example1) == EXAMPLE1_TEXT

    def test_to_string_row(self, example1):
        """Single row export."""
        example1.sort_row(1)
        assert to_string_row(example1, 1) == "0.0 2.24 4.12"

    def test_unsorted(self, example1):
        """Unsorted rows are refused."""
        with pytest.raises(UnsortedRowError):
            to_text(example1)

    def test_empty_rows(self):
        """Empty rows print as zeros."""
        mat = from_dense([[0.0, 0.0], [0.0, 1.5]])
        assert to_text(mat) == "0.0 0.0\n0.0 1.5\n"

    def test_write_text(self, example1, tmp_path):
        """write_text writes the dump and returns the path."""
        example1.sort()
        path = write_text(example1, tmp_path / "matrix.txt")
        assert isinstance(path, Path)
        assert path.read_text() == EXAMPLE1_TEXT

    def test_write_text_str_path(self, example1, tmp_path):
        """String paths are accepted."""
        example1.sort()
        path = write_text(example1, str(tmp_path / "matrix.txt"))
        assert path.exists()


class TestBitmap:
    """Test the portable bitmap export."""

    def test_to_pbm(self, example1):
        """Header is width then height; one bit per cell."""
        example1.sort()
        assert to_pbm(example1) == EXAMPLE1_PBM

    def test_rectangular(self):
        """Width is the column count."""
        mat = from_dense([[1.0, 0.0, 0.0], [0.0, 0.0, 2.0]])
        assert to_pbm(mat) == "P1\n3 2\n1 0 0\n0 0 1\n"

    def test_explicit_zero_is_set(self):
        """Stored zeros are part of the pattern."""
        mat = from_dense([[1.0, 0.0], [0.0, 1.0]])
        mat.set(0, 1, 0.0)
        assert to_pbm(mat) == "P1\n2 2\n1 1\n0 1\n"

    def test_unsorted(self, example1):
        """Unsorted rows are refused."""
        with pytest.raises(UnsortedRowError):
            to_pbm(example1)

    def test_write_pbm(self, example1, tmp_path):
        """write_pbm writes the bitmap and returns the path."""
        example1.sort()
        path = write_pbm(example1, tmp_path / "matrix.pbm")
        assert path.read_text() == EXAMPLE1_PBM
