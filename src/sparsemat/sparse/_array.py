"""
Growable Typed Array

numpy-backed dynamic array used as the flat storage of every engine:
amortized O(1) append, O(n) insert, explicit capacity reservation.
Only the first ``len(arr)`` elements of the buffer are live.
"""

from typing import Any, Iterator, List, Optional, Union

import numpy as np

__all__ = ['Array', 'empty', 'zeros', 'full', 'from_list']


_MIN_CAPACITY = 4


class Array:
    """
    Dynamic array with a fixed element dtype.

    Attributes:
        dtype (np.dtype): Element type
        size (int): Number of live elements
        capacity (int): Allocated elements

    Example:
        >>> arr = Array(dtype='uint32', capacity=8)
        >>> arr.append(3)
        >>> arr.insert(0, 1)
        >>> arr.tolist()
        [1, 3]
    """

    __slots__ = ('_buf', '_size')

    def __init__(self, dtype: Union[str, np.dtype] = 'float64', capacity: int = 0):
        """
        Allocate an empty array.

        Args:
            dtype: numpy dtype of the elements
            capacity: Number of elements to reserve (a hint, not a limit)
        """
        if capacity < 0:
            raise ValueError(f"Array capacity must be non-negative, got {capacity}")
        self._buf = np.empty(capacity, dtype=dtype)
        self._size = 0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def dtype(self) -> np.dtype:
        """Element dtype."""
        return self._buf.dtype

    @property
    def size(self) -> int:
        """Number of live elements."""
        return self._size

    @property
    def capacity(self) -> int:
        """Allocated elements."""
        return len(self._buf)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def full(cls, size: int, fill: Any, dtype: Union[str, np.dtype] = 'float64') -> 'Array':
        """Create array of ``size`` copies of ``fill``."""
        arr = cls(dtype, size)
        arr._buf[:size] = fill
        arr._size = size
        return arr

    @classmethod
    def from_list(cls, data: List, dtype: Union[str, np.dtype] = 'float64') -> 'Array':
        """Create array from Python sequence."""
        arr = cls(dtype, len(data))
        for i, val in enumerate(data):
            arr._buf[i] = val
        arr._size = len(data)
        return arr

    @classmethod
    def from_numpy(cls, data: np.ndarray, dtype: Optional[Union[str, np.dtype]] = None) -> 'Array':
        """Create array by copying a 1D numpy array."""
        src = np.asarray(data).ravel()
        arr = cls(dtype or src.dtype, len(src))
        arr._buf[:len(src)] = src
        arr._size = len(src)
        return arr

    # -------------------------------------------------------------------------
    # Growth
    # -------------------------------------------------------------------------

    def reserve(self, capacity: int) -> None:
        """Ensure room for at least ``capacity`` elements."""
        if capacity <= len(self._buf):
            return
        new_cap = max(capacity, 2 * len(self._buf), _MIN_CAPACITY)
        buf = np.empty(new_cap, dtype=self._buf.dtype)
        buf[:self._size] = self._buf[:self._size]
        self._buf = buf

    def append(self, value: Any) -> int:
        """Append ``value`` and return its position."""
        pos = self._size
        if pos == len(self._buf):
            self.reserve(pos + 1)
        self._buf[pos] = value
        self._size = pos + 1
        return pos

    def insert(self, pos: int, value: Any) -> None:
        """Insert ``value`` at ``pos``, shifting the tail right (O(n))."""
        if pos < 0 or pos > self._size:
            raise IndexError(f"Insert position {pos} out of bounds [0, {self._size}]")
        if self._size == len(self._buf):
            self.reserve(self._size + 1)
        self._buf[pos + 1:self._size + 1] = self._buf[pos:self._size]
        self._buf[pos] = value
        self._size += 1

    def resize(self, size: int, fill: Any = 0) -> None:
        """Grow or shrink to ``size``; new slots take ``fill``."""
        if size < 0:
            raise ValueError(f"Array size must be non-negative, got {size}")
        if size > self._size:
            self.reserve(size)
            self._buf[self._size:size] = fill
        self._size = size

    def clear(self) -> None:
        """Drop all elements, keeping the allocation."""
        self._size = 0

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def __getitem__(self, idx: Union[int, slice]):
        """Get element(s) by index."""
        if isinstance(idx, slice):
            return self._buf[:self._size][idx]
        if idx < 0:
            idx += self._size
        if idx < 0 or idx >= self._size:
            raise IndexError(f"Index {idx} out of bounds [0, {self._size})")
        return self._buf[idx]

    def __setitem__(self, idx: Union[int, slice], value):
        """Set element(s) by index."""
        if isinstance(idx, slice):
            self._buf[:self._size][idx] = value
            return
        if idx < 0:
            idx += self._size
        if idx < 0 or idx >= self._size:
            raise IndexError(f"Index {idx} out of bounds [0, {self._size})")
        self._buf[idx] = value

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        buf = self._buf
        for i in range(self._size):
            yield buf[i]

    # -------------------------------------------------------------------------
    # Conversion & Copy
    # -------------------------------------------------------------------------

    def to_numpy(self) -> np.ndarray:
        """View of the live elements (shares memory until the next growth)."""
        return self._buf[:self._size]

    def tolist(self) -> List:
        """Convert to Python list."""
        return self._buf[:self._size].tolist()

    def copy(self) -> 'Array':
        """Create a deep copy, trimmed to the live elements."""
        new = Array(self._buf.dtype, self._size)
        new._buf[:self._size] = self._buf[:self._size]
        new._size = self._size
        return new

    def fill(self, value) -> None:
        """Fill live elements with a constant value."""
        self._buf[:self._size] = value

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        if self._size <= 6:
            data_str = str(self.tolist())
        else:
            items = self.tolist()
            data_str = str(items[:3] + ['...'] + items[-3:])
        return f"Array({data_str}, dtype={self.dtype})"


# =============================================================================
# Factory Functions
# =============================================================================

def empty(capacity: int = 0, dtype: Union[str, np.dtype] = 'float64') -> Array:
    """Create an empty array with reserved capacity."""
    return Array(dtype, capacity)


def zeros(size: int, dtype: Union[str, np.dtype] = 'float64') -> Array:
    """Create zero-initialized array."""
    return Array.full(size, 0, dtype)


def full(size: int, fill: Any, dtype: Union[str, np.dtype] = 'float64') -> Array:
    """Create array filled with ``fill``."""
    return Array.full(size, fill, dtype)


def from_list(data: List, dtype: Union[str, np.dtype] = 'float64') -> Array:
    """Create array from Python list."""
    return Array.from_list(data, dtype)
