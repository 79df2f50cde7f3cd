"""
Dense Vector

Contiguous vector consumed by the matrix-vector product and the conjugate
gradient solver. Writing past the end extends the vector, zero-filling the
gap.
"""

import math
from typing import Any, Iterable, Iterator, List, Optional, Union

import numpy as np

from ..core.error import DimensionMismatchError
from ._array import Array
from ._dtypes import ValueType, normalize_value_type

__all__ = ['DenseVec']


class DenseVec:
    """
    Dense vector with growth-on-write semantics.

    Attributes:
        value_type (ValueType): Element capability set

    Example:
        >>> v = DenseVec.from_list([1.0, 2.0])
        >>> v.set(3, 4.0)
        >>> v.tolist()
        [1.0, 2.0, 0.0, 4.0]
        >>> v * v
        21.0
    """

    __slots__ = ('_vtype', '_values')

    def __init__(self, value_type: Union[None, str, type, ValueType] = None, capacity: int = 0):
        self._vtype = normalize_value_type(value_type)
        self._values = Array(self._vtype.dtype, capacity)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def with_capacity(cls, capacity: int, value_type=None) -> 'DenseVec':
        """Empty vector with reserved capacity."""
        return cls(value_type, capacity)

    @classmethod
    def zeros(cls, dim: int, value_type=None) -> 'DenseVec':
        """Vector of ``dim`` zeros."""
        vec = cls(value_type, dim)
        vec._values.resize(dim, vec._vtype.zero())
        return vec

    @classmethod
    def from_list(cls, data: Iterable[Any], value_type=None) -> 'DenseVec':
        """Vector holding a copy of ``data``."""
        data = list(data)
        vec = cls(value_type, len(data))
        cast = vec._vtype.cast
        for x in data:
            vec._values.append(cast(x))
        return vec

    @classmethod
    def from_numpy(cls, data: np.ndarray, value_type=None) -> 'DenseVec':
        """Vector holding a copy of a 1D numpy array."""
        arr = np.asarray(data)
        vec = cls(value_type if value_type is not None else arr.dtype)
        vec._values = Array.from_numpy(arr, vec._vtype.dtype)
        return vec

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def value_type(self) -> ValueType:
        return self._vtype

    def dim(self) -> int:
        """Number of entries."""
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def get(self, i: int) -> Any:
        """Value at position ``i``."""
        if i < 0 or i >= len(self._values):
            raise IndexError(f"Index {i} out of bounds [0, {len(self._values)})")
        return self._values[i]

    def _grow(self, i: int) -> None:
        if i < 0:
            raise IndexError(f"Index must be non-negative, got {i}")
        if i >= len(self._values):
            self._values.resize(i + 1, self._vtype.zero())

    def set(self, i: int, value: Any) -> None:
        """Write ``value`` at ``i``, extending the vector if needed."""
        self._grow(i)
        self._values[i] = value

    def add_to(self, i: int, value: Any) -> None:
        """Accumulate ``value`` at ``i``, extending the vector if needed."""
        self._grow(i)
        self._values[i] = self._values[i] + value

    def get_mut(self, i: int):
        """Mutable handle to position ``i`` (extends the vector if needed)."""
        from ._base import EntryRef
        self._grow(i)
        return EntryRef(self, i)

    def _load(self, i: int) -> Any:
        return self._values[i]

    def _store(self, i: int, value: Any) -> None:
        self._values[i] = value

    def __getitem__(self, i: int) -> Any:
        return self.get(i)

    def __setitem__(self, i: int, value: Any) -> None:
        self.set(i, value)

    def iter(self) -> Iterator[Any]:
        return iter(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    # -------------------------------------------------------------------------
    # In-place Arithmetic
    # -------------------------------------------------------------------------

    def _check_rhs(self, rhs: 'DenseVec', op: str) -> None:
        if self.dim() < rhs.dim():
            raise DimensionMismatchError(
                f"cannot {op} vector of dim {rhs.dim()} into vector of dim {self.dim()}"
            )

    def add(self, rhs: 'DenseVec') -> None:
        """Element-wise ``self += rhs``."""
        self._check_rhs(rhs, "add")
        n = rhs.dim()
        self._values[:n] = self._values[:n] + rhs._values[:n]

    def sub(self, rhs: 'DenseVec') -> None:
        """Element-wise ``self -= rhs``."""
        self._check_rhs(rhs, "subtract")
        n = rhs.dim()
        self._values[:n] = self._values[:n] - rhs._values[:n]

    def scale(self, factor: Any) -> None:
        """Multiply every entry by ``factor``."""
        self._values[:] = self._values[:] * factor

    def axpy(self, alpha: Any, rhs: 'DenseVec') -> None:
        """``self += alpha * rhs``."""
        self._check_rhs(rhs, "add")
        n = rhs.dim()
        self._values[:n] = self._values[:n] + rhs._values[:n] * alpha

    # -------------------------------------------------------------------------
    # Reductions
    # -------------------------------------------------------------------------

    def inner_prod(self, rhs: 'DenseVec') -> Any:
        """Sum of pairwise products over the common length."""
        n = min(self.dim(), rhs.dim())
        a = self._values[:n]
        b = rhs._values[:n]
        return self._vtype.sum(x * y for x, y in zip(a, b))

    def norm_squared(self) -> Any:
        """Squared L2 norm."""
        return self.inner_prod(self)

    def norm(self) -> float:
        """L2 norm."""
        return math.sqrt(float(self.norm_squared()))

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __iadd__(self, rhs: 'DenseVec') -> 'DenseVec':
        self.add(rhs)
        return self

    def __isub__(self, rhs: 'DenseVec') -> 'DenseVec':
        self.sub(rhs)
        return self

    def __imul__(self, factor: Any) -> 'DenseVec':
        self.scale(factor)
        return self

    def __add__(self, rhs: 'DenseVec') -> 'DenseVec':
        if not isinstance(rhs, DenseVec):
            return NotImplemented
        ret = self.copy()
        ret.add(rhs)
        return ret

    def __sub__(self, rhs: 'DenseVec') -> 'DenseVec':
        if not isinstance(rhs, DenseVec):
            return NotImplemented
        ret = self.copy()
        ret.sub(rhs)
        return ret

    def __mul__(self, rhs: Any):
        """Inner product with a vector, scaled copy with a scalar."""
        if isinstance(rhs, DenseVec):
            return self.inner_prod(rhs)
        ret = self.copy()
        ret.scale(rhs)
        return ret

    def __rmul__(self, lhs: Any) -> 'DenseVec':
        ret = self.copy()
        ret.scale(lhs)
        return ret

    def __neg__(self) -> 'DenseVec':
        ret = self.copy()
        ret.scale(-self._vtype.one())
        return ret

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseVec):
            return NotImplemented
        return self.tolist() == other.tolist()

    __hash__ = None

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_numpy(self) -> np.ndarray:
        """Copy as numpy array."""
        return self._values.to_numpy().copy()

    def tolist(self) -> List[Any]:
        return self._values.tolist()

    def copy(self) -> 'DenseVec':
        new = DenseVec.__new__(DenseVec)
        new._vtype = self._vtype
        new._values = self._values.copy()
        return new

    def __repr__(self) -> str:
        return f"DenseVec({self._values.tolist()}, value_type={self._vtype})"
