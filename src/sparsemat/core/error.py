"""
Error handling for sparsemat.

Every failure is a local, immediate halt of the operation in progress.
Errors carry a numeric code so callers can dispatch without string matching.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
SPM_OK = 0

# General errors (1-9)
SPM_ERROR_UNKNOWN = 1
SPM_ERROR_INTERNAL = 2

# Capacity errors (10-19)
SPM_ERROR_CAPACITY_EXCEEDED = 10

# Shape errors (20-29)
SPM_ERROR_DIMENSION_MISMATCH = 20
SPM_ERROR_NOT_SQUARE = 21

# Precondition errors (30-39)
SPM_ERROR_COLUMN_INFO_UNAVAILABLE = 30
SPM_ERROR_UNSORTED_ROW = 31
SPM_ERROR_STALE_ENTRY = 32

# Numerical errors (50-59)
SPM_ERROR_CONVERGENCE = 50


_ERROR_MESSAGES = {
    SPM_OK: "Success",
    SPM_ERROR_UNKNOWN: "Unknown error",
    SPM_ERROR_INTERNAL: "Internal error",
    SPM_ERROR_CAPACITY_EXCEEDED: "Index capacity exceeded",
    SPM_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SPM_ERROR_NOT_SQUARE: "Matrix is not square",
    SPM_ERROR_COLUMN_INFO_UNAVAILABLE: "Column iterator not available - use assemble_column_info()",
    SPM_ERROR_UNSORTED_ROW: "Row is not sorted by column - use sort_row() or sort()",
    SPM_ERROR_STALE_ENTRY: "Entry handle outlived a structural change - call get_mut() again",
    SPM_ERROR_CONVERGENCE: "Convergence error",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SparseMatError(Exception):
    """
    Base exception for all sparsemat errors.

    Subclasses also derive from the closest builtin exception so that
    generic handlers (``except ValueError``) keep working.
    """

    code: int = SPM_ERROR_UNKNOWN

    OK = SPM_OK
    ERROR_UNKNOWN = SPM_ERROR_UNKNOWN
    ERROR_INTERNAL = SPM_ERROR_INTERNAL
    ERROR_CAPACITY_EXCEEDED = SPM_ERROR_CAPACITY_EXCEEDED
    ERROR_DIMENSION_MISMATCH = SPM_ERROR_DIMENSION_MISMATCH
    ERROR_NOT_SQUARE = SPM_ERROR_NOT_SQUARE
    ERROR_COLUMN_INFO_UNAVAILABLE = SPM_ERROR_COLUMN_INFO_UNAVAILABLE
    ERROR_UNSORTED_ROW = SPM_ERROR_UNSORTED_ROW
    ERROR_STALE_ENTRY = SPM_ERROR_STALE_ENTRY
    ERROR_CONVERGENCE = SPM_ERROR_CONVERGENCE

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        """
        Create a sparsemat exception.

        Args:
            message: Optional detailed message (default message for the code if omitted)
            code: Error code (class default if omitted)
        """
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(f"sparsemat error {self.code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "SparseMatError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(msg, code=code)


class CapacityError(SparseMatError, OverflowError):
    """An offset or index would collide with the index type's UNSET sentinel.

    Not recoverable: the index type is too narrow for the data volume.
    """

    code = SPM_ERROR_CAPACITY_EXCEEDED


class DimensionMismatchError(SparseMatError, ValueError):
    """Operand shapes disagree (matrix/vector or matrix/matrix)."""

    code = SPM_ERROR_DIMENSION_MISMATCH


class NotSquareError(DimensionMismatchError):
    """Square matrix required (conjugate gradient)."""

    code = SPM_ERROR_NOT_SQUARE


class ColumnInfoUnavailableError(SparseMatError, RuntimeError):
    """Column view requested before assembly, or after a structural change."""

    code = SPM_ERROR_COLUMN_INFO_UNAVAILABLE


class UnsortedRowError(SparseMatError, ValueError):
    """Row export requested on a row that is not sorted by column."""

    code = SPM_ERROR_UNSORTED_ROW


class StaleEntryError(SparseMatError, RuntimeError):
    """EntryRef used after its owner gained an entry or was sorted."""

    code = SPM_ERROR_STALE_ENTRY


class ConvergenceError(SparseMatError, ArithmeticError):
    """Iterative solver exhausted its iteration budget."""

    code = SPM_ERROR_CONVERGENCE


# =============================================================================
# Error Checking Functions
# =============================================================================

def check_dimensions(expected: int, actual: int, context: str = "") -> None:
    """
    Raise DimensionMismatchError if two sizes differ.

    Args:
        expected: Required size
        actual: Provided size
        context: Optional context for the message
    """
    if expected == actual:
        return
    msg = f"expected {expected}, got {actual}"
    if context:
        msg = f"{context}: {msg}"
    raise DimensionMismatchError(msg)


__all__ = [
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
    "SparseMatError",
    "CapacityError",
    "DimensionMismatchError",
    "NotSquareError",
    "ColumnInfoUnavailableError",
    "UnsortedRowError",
    "StaleEntryError",
    "ConvergenceError",
    "check_dimensions",
]
