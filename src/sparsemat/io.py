"""
Text and Bitmap Export.

Plain-text dump of a matrix (one line per row, space-separated values with
explicit zeros) and portable bitmap (PBM, ASCII ``P1``) of its sparsity
pattern. Both require every row to be sorted by column; sort with
``mat.sort()`` first.

PBM layout:

    P1
    <n_cols> <n_rows>
    0 1 0 ...        one line per row, 1 where an entry is stored
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Union

from sparsemat.core.error import UnsortedRowError

if TYPE_CHECKING:
    from sparsemat.sparse import SparseMatrix

__all__ = [
    "to_string_row",
    "to_text",
    "to_pbm",
    "write_text",
    "write_pbm",
]

logger = logging.getLogger("sparsemat.io")

PathLike = Union[str, Path]


def _check_sorted(mat: "SparseMatrix") -> None:
    for i in range(mat.n_rows()):
        if not mat.is_row_sorted(i):
            raise UnsortedRowError(f"row {i} is not sorted by column")


def to_string_row(mat: "SparseMatrix", i: int) -> str:
    """Row ``i`` as space-separated values (zeros included).

    Raises:
        UnsortedRowError: If the row is not sorted by column.
    """
    return mat.to_string_row(i)


def to_text(mat: "SparseMatrix") -> str:
    """Every row as a line of space-separated values, newline terminated.

    Raises:
        UnsortedRowError: If any row is not sorted by column.
    """
    _check_sorted(mat)
    return "".join(mat.to_string_row(i) + "\n" for i in range(mat.n_rows()))


def to_pbm(mat: "SparseMatrix") -> str:
    """Sparsity pattern as an ASCII portable bitmap.

    Raises:
        UnsortedRowError: If any row is not sorted by column.
    """
    _check_sorted(mat)
    n_rows, n_cols = mat.shape
    lines: List[str] = ["P1", f"{n_cols} {n_rows}"]
    for i in range(n_rows):
        bits = ["0"] * n_cols
        for col, _ in mat.iter_row(i):
            bits[col] = "1"
        lines.append(" ".join(bits))
    return "\n".join(lines) + "\n"


def write_text(mat: "SparseMatrix", path: PathLike) -> Path:
    """Write :func:`to_text` output to ``path``."""
    path = Path(path)
    path.write_text(to_text(mat))
    logger.debug(f"Wrote {mat.n_rows()}x{mat.n_cols()} text dump to {path}")
    return path


def write_pbm(mat: "SparseMatrix", path: PathLike) -> Path:
    """Write :func:`to_pbm` output to ``path``."""
    path = Path(path)
    path.write_text(to_pbm(mat))
    logger.debug(f"Wrote {mat.n_rows()}x{mat.n_cols()} bitmap to {path}")
    return path
