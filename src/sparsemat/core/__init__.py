"""
sparsemat core - error taxonomy shared by every module.

Usage:
    >>> from sparsemat.core import DimensionMismatchError
    >>> try:
    ...     a @ b
    ... except DimensionMismatchError as e:
    ...     print(e.code)
"""

from .error import (
    SparseMatError,
    CapacityError,
    DimensionMismatchError,
    NotSquareError,
    ColumnInfoUnavailableError,
    UnsortedRowError,
    StaleEntryError,
    ConvergenceError,
    check_dimensions,
    # Error codes
    SPM_OK,
    SPM_ERROR_UNKNOWN,
    SPM_ERROR_INTERNAL,
    SPM_ERROR_CAPACITY_EXCEEDED,
    SPM_ERROR_DIMENSION_MISMATCH,
    SPM_ERROR_NOT_SQUARE,
    SPM_ERROR_COLUMN_INFO_UNAVAILABLE,
    SPM_ERROR_UNSORTED_ROW,
    SPM_ERROR_STALE_ENTRY,
    SPM_ERROR_CONVERGENCE,
)

__all__ = [
    "SparseMatError",
    "CapacityError",
    "DimensionMismatchError",
    "NotSquareError",
    "ColumnInfoUnavailableError",
    "UnsortedRowError",
    "StaleEntryError",
    "ConvergenceError",
    "check_dimensions",
    "SPM_OK",
    "SPM_ERROR_UNKNOWN",
    "SPM_ERROR_INTERNAL",
    "SPM_ERROR_CAPACITY_EXCEEDED",
    "SPM_ERROR_DIMENSION_MISMATCH",
    "SPM_ERROR_NOT_SQUARE",
    "SPM_ERROR_COLUMN_INFO_UNAVAILABLE",
    "SPM_ERROR_UNSORTED_ROW",
    "SPM_ERROR_STALE_ENTRY",
    "SPM_ERROR_CONVERGENCE",
]
