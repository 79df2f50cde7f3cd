"""
Numeric Capability Sets

Index types are fixed-width unsigned integers whose maximum value is reserved
as the UNSET sentinel. Value types are anything ring-like: numpy float/int
dtypes, or arbitrary Python scalars (e.g. fractions.Fraction) stored in
object arrays.
"""

from enum import Enum
from typing import Any, Callable, Iterable, Optional, Union

import numpy as np

from ..core.error import CapacityError

__all__ = [
    'IndexType', 'ValueType',
    'uint8', 'uint16', 'uint32', 'uint64',
    'float32', 'float64', 'int32', 'int64',
    'normalize_index_type', 'normalize_value_type',
    'is_float_type',
]


class IndexType(Enum):
    """
    Index Type Enumeration.

    Each member wraps an unsigned numpy integer dtype. ``UNSET`` (the dtype
    maximum) marks "no entry / end of chain" and is never a legal offset.

    Example:
        >>> from sparsemat.sparse import IndexType
        >>> IndexType.uint8.UNSET
        255
        >>> IndexType.uint8.check(255)
        Traceback (most recent call last):
        ...
        CapacityError: ...
    """

    uint8 = 'uint8'
    uint16 = 'uint16'
    uint32 = 'uint32'
    uint64 = 'uint64'

    @property
    def dtype(self) -> np.dtype:
        """numpy dtype used for storage."""
        return np.dtype(self.value)

    @property
    def UNSET(self) -> int:
        """Sentinel value (maximum of the type)."""
        return int(np.iinfo(self.dtype).max)

    @property
    def ZERO(self) -> int:
        return 0

    @property
    def ONE(self) -> int:
        return 1

    def as_int(self, value: Any) -> int:
        """Convert a stored index to a Python int."""
        return int(value)

    def as_index(self, value: int) -> int:
        """Convert a Python int to a storable index, checking capacity."""
        self.check(value)
        return int(value)

    def check(self, value: int, what: str = "index") -> None:
        """
        Raise CapacityError if value would collide with the sentinel.

        Args:
            value: Candidate offset or index
            what: Name used in the error message
        """
        if value >= self.UNSET:
            raise CapacityError(
                f"{what} {value} reaches the {self.value} sentinel {self.UNSET} "
                f"- use a wider index type"
            )
        if value < 0:
            raise ValueError(f"{what} must be non-negative, got {value}")

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"IndexType.{self.name}"


class ValueType:
    """
    Value type capability set.

    Provides ``zero()``, ``one()``, ``cast()`` and ``sum()`` for the element
    type of a matrix or vector. numpy dtypes are stored natively; any other
    Python type is stored in an ``object`` array and built through its
    constructor.

    Example:
        >>> from fractions import Fraction
        >>> vt = ValueType.from_python(Fraction)
        >>> vt.one() + vt.one()
        Fraction(2, 1)
    """

    __slots__ = ('_name', '_dtype', '_scalar')

    def __init__(self, name: str, dtype: Union[str, np.dtype], scalar: Callable[[Any], Any]):
        self._name = name
        self._dtype = np.dtype(dtype)
        self._scalar = scalar

    @classmethod
    def from_numpy(cls, dtype: Union[str, np.dtype, type]) -> 'ValueType':
        """Value type backed by a numeric numpy dtype."""
        dt = np.dtype(dtype)
        if dt.kind not in 'fiuc':
            raise TypeError(f"Unsupported numeric dtype: {dt}")
        return cls(dt.name, dt, dt.type)

    @classmethod
    def from_python(cls, scalar_type: type) -> 'ValueType':
        """Value type for an arbitrary ring-like Python type."""
        if scalar_type is float:
            return float64
        if scalar_type is int:
            return int64
        return cls(scalar_type.__name__, object, scalar_type)

    @property
    def name(self) -> str:
        return self._name

    @property
    def dtype(self) -> np.dtype:
        """numpy dtype used for storage."""
        return self._dtype

    @property
    def is_object(self) -> bool:
        """Whether values are stored as Python objects."""
        return self._dtype == np.dtype(object)

    def zero(self) -> Any:
        """Additive identity."""
        return self._scalar(0)

    def one(self) -> Any:
        """Multiplicative identity."""
        return self._scalar(1)

    def cast(self, value: Any) -> Any:
        """Convert a value to this type."""
        return self._scalar(value)

    def sum(self, values: Iterable[Any]) -> Any:
        """Sum a sequence, starting from zero()."""
        total = self.zero()
        for v in values:
            total += v
        return total

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueType):
            return NotImplemented
        return self._dtype == other._dtype and self._scalar is other._scalar

    def __hash__(self) -> int:
        return hash((self._dtype, self._scalar))

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"ValueType({self._name})"


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

uint8 = IndexType.uint8
uint16 = IndexType.uint16
uint32 = IndexType.uint32
uint64 = IndexType.uint64

float32 = ValueType.from_numpy('float32')
float64 = ValueType.from_numpy('float64')
int32 = ValueType.from_numpy('int32')
int64 = ValueType.from_numpy('int64')

_VALUE_TYPES = {
    'float32': float32,
    'float64': float64,
    'int32': int32,
    'int64': int64,
}


# =============================================================================
# Type Utilities
# =============================================================================

def normalize_index_type(index_type: Union[None, str, np.dtype, IndexType]) -> IndexType:
    """
    Normalize an index type argument.

    Args:
        index_type: IndexType, name ('uint32'), numpy dtype, or None for the
            configured default

    Returns:
        IndexType member

    Example:
        >>> normalize_index_type('uint16')
        IndexType.uint16
    """
    if index_type is None:
        from .._config import config
        index_type = config.index_type
    if isinstance(index_type, IndexType):
        return index_type
    try:
        return IndexType(np.dtype(index_type).name)
    except (TypeError, ValueError):
        valid = [e.value for e in IndexType]
        raise ValueError(f"Invalid index type: {index_type!r}. Valid: {valid}")


def normalize_value_type(value_type: Union[None, str, np.dtype, type, ValueType]) -> ValueType:
    """
    Normalize a value type argument.

    Args:
        value_type: ValueType, name ('float64'), numpy dtype, Python type
            (float, int, Fraction, ...), or None for the configured default

    Returns:
        ValueType instance
    """
    if value_type is None:
        from .._config import config
        value_type = config.value_type
    if isinstance(value_type, ValueType):
        return value_type
    if isinstance(value_type, str):
        if value_type in _VALUE_TYPES:
            return _VALUE_TYPES[value_type]
        return ValueType.from_numpy(value_type)
    if isinstance(value_type, np.dtype):
        return _VALUE_TYPES.get(value_type.name) or ValueType.from_numpy(value_type)
    if isinstance(value_type, type):
        if issubclass(value_type, np.generic):
            return normalize_value_type(np.dtype(value_type))
        return ValueType.from_python(value_type)
    raise TypeError(f"value_type must be str, dtype, type or ValueType, got {type(value_type)}")


def is_float_type(value_type: Union[str, ValueType]) -> bool:
    """Check if a value type is floating point."""
    vt = normalize_value_type(value_type)
    return vt.dtype.kind == 'f'
