"""
===============================================================================
IMU MATH - Euclidean Vector Types
===============================================================================

Fixed-size Euclidean vectors over a single floating-point scalar type.
Vector3 is the building block of the quaternion's imaginary part; Vector2
is an independent planar counterpart sharing the same arithmetic.

Semantics
---------
    - Binary operators (+, -, *, /) return new values.
    - Compound operators (+=, -=, *=, /=), set() and normalize() mutate the
      receiver and return it.
    - v1 * v2 is the COMPONENTWISE product. Use dot() or cross() for the
      scalar and vector products.
    - Operations on a vector mixed with a plain scalar apply the scalar to
      every component (v + 1 adds 1 to x, y and z).

Degenerate input
----------------
norm() and normalize() do not guard against a zero-length vector. The
division is carried out in the vector's numpy dtype, so the result is
NaN components (with a numpy RuntimeWarning) rather than an exception.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import numpy as np

from imu_math.core.scalar import is_scalar, resolve_dtype


class _VectorBase:
    """
    Dimension-agnostic storage and arithmetic for Vector2 / Vector3.

    Components live in a 1-D numpy array of the value's dtype. Subclasses
    set ``_DIM`` and the component names.
    """

    __slots__ = ('_v',)

    _DIM = 0
    _NAMES: tuple = ()

    # Make numpy scalars defer to our reflected operators (np.float64(2) * v).
    __array_ufunc__ = None

    # Mutable value type
    __hash__ = None

    def _init_components(self, values: Iterable[Any], dtype: Optional[Any]) -> None:
        scalar_type = resolve_dtype(dtype)
        self._v = np.array(list(values), dtype=scalar_type)

    @classmethod
    def _from_np(cls, arr: np.ndarray) -> Any:
        """Wrap an already-typed numpy array without re-validation."""
        instance = cls.__new__(cls)
        instance._v = arr
        return instance

    @classmethod
    def from_array(cls, values: Iterable[Any], dtype: Optional[Any] = None) -> Any:
        """
        Construct from a sequence of exactly ``_DIM`` values.

        Raises
        ------
        ValueError
            If the sequence does not have the right length.
        """
        values = list(np.asarray(values).ravel())
        if len(values) != cls._DIM:
            raise ValueError(
                f"{cls.__name__} needs {cls._DIM} components, got {len(values)}"
            )
        instance = cls.__new__(cls)
        instance._init_components(values, dtype)
        return instance

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _new(self, arr: np.ndarray) -> Any:
        return self._from_np(np.asarray(arr).astype(self._v.dtype, copy=False))

    def _operand(self, other: Any) -> Any:
        """Return the numpy operand for other, or None if unsupported."""
        if isinstance(other, type(self)):
            return other._v
        if is_scalar(other):
            return other
        return None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def dtype(self) -> type:
        """numpy scalar type of the components."""
        return self._v.dtype.type

    @property
    def components(self) -> np.ndarray:
        """Copy of the components as a numpy array."""
        return self._v.copy()

    @property
    def x(self):
        return self._v[0]

    @property
    def y(self):
        return self._v[1]

    def X(self):
        return self._v[0]

    def Y(self):
        return self._v[1]

    # =========================================================================
    # VECTOR OPERATIONS
    # =========================================================================

    def copy(self) -> Any:
        """Return an independent copy."""
        return self._from_np(self._v.copy())

    def set(self, *values: Any) -> Any:
        """Overwrite all components in place and return self."""
        if len(values) != self._DIM:
            raise ValueError(
                f"{type(self).__name__}.set() needs {self._DIM} values, got {len(values)}"
            )
        self._v[:] = values
        return self

    def dot(self, other: Any):
        """Sum of componentwise products."""
        return self._v.dtype.type(np.dot(self._v, other._v))

    def length(self):
        """Euclidean length, sqrt(dot(self, self))."""
        return np.sqrt(self.dot(self))

    def norm(self) -> Any:
        """Return a normalized copy. A zero vector yields NaN components."""
        return self._new(self._v / self.length())

    def normalize(self) -> Any:
        """Normalize in place and return self. A zero vector becomes NaN."""
        self._v /= self.length()
        return self

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._new(self._v + rhs)

    def __radd__(self, other: Any) -> Any:
        if not is_scalar(other):
            return NotImplemented
        return self._new(other + self._v)

    def __sub__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._new(self._v - rhs)

    def __rsub__(self, other: Any) -> Any:
        if not is_scalar(other):
            return NotImplemented
        return self._new(other - self._v)

    def __mul__(self, other: Any) -> Any:
        # Vector * Vector is the componentwise product
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._new(self._v * rhs)

    def __rmul__(self, other: Any) -> Any:
        if not is_scalar(other):
            return NotImplemented
        return self._new(other * self._v)

    def __truediv__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._new(self._v / rhs)

    def __iadd__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._v += rhs
        return self

    def __isub__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._v -= rhs
        return self

    def __imul__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._v *= rhs
        return self

    def __itruediv__(self, other: Any) -> Any:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._v /= rhs
        return self

    def __neg__(self) -> Any:
        return self._new(-self._v)

    def __pos__(self) -> Any:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    def __iter__(self):
        return iter(self._v.tolist())

    def __len__(self) -> int:
        return self._DIM

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={value:+.8f}" for name, value in zip(self._NAMES, self._v)
        )
        return f"{type(self).__name__}({fields})"


class Vector3(_VectorBase):
    """
    Three-component Euclidean vector.

    Examples
    --------
    >>> v = Vector3(3.0, 0.0, 4.0)
    >>> float(v.length())
    5.0
    >>> Vector3(1.0, 0.0, 0.0).cross(Vector3(0.0, 1.0, 0.0))
    Vector3(x=+0.00000000, y=+0.00000000, z=+1.00000000)
    """

    __slots__ = ()

    _DIM = 3
    _NAMES = ('x', 'y', 'z')

    def __init__(self, x: Any = 0.0, y: Any = 0.0, z: Any = 0.0,
                 dtype: Optional[Any] = None) -> None:
        self._init_components((x, y, z), dtype)

    @property
    def z(self):
        return self._v[2]

    def Z(self):
        return self._v[2]

    def cross(self, other: 'Vector3') -> 'Vector3':
        """
        3D cross product.

            (y1*z2 - z1*y2, z1*x2 - x1*z2, x1*y2 - y1*x2)
        """
        x1, y1, z1 = self._v
        x2, y2, z2 = other._v
        return self._new(np.array([
            y1 * z2 - z1 * y2,
            z1 * x2 - x1 * z2,
            x1 * y2 - y1 * x2,
        ]))


class Vector2(_VectorBase):
    """Two-component Euclidean vector. Independent of Vector3 and Quaternion."""

    __slots__ = ()

    _DIM = 2
    _NAMES = ('x', 'y')

    def __init__(self, x: Any = 0.0, y: Any = 0.0,
                 dtype: Optional[Any] = None) -> None:
        self._init_components((x, y), dtype)


