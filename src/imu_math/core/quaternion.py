"""
===============================================================================
IMU MATH - Quaternion Library
===============================================================================

Quaternion algebra and orientation extraction for attitude estimation.
A unit quaternion encodes a 3D rotation with four parameters and no gimbal
lock; gimbal lock only reappears when converting to Euler angles.

Convention
----------
Scalar-first throughout:

    q = [w, x, y, z] = w + x*i + y*j + z*k

Both the four-scalar constructor and from_array() take (w, x, y, z).
Libraries using [x, y, z, w] ordering (e.g. scipy.spatial.transform) must
be converted explicitly with from_xyzw() / as_xyzw().

Rotation of a vector v is the sandwich product

    v' = q * v_pure * conj(q)

with v_pure = [0, v_x, v_y, v_z]. This is only a rotation when |q| = 1.
Nothing here normalizes implicitly: callers call normalize() / norm()
when they need a unit quaternion.

Storage
-------
The imaginary part is held as a private Vector3 and the dot, cross and
scaling work for it is delegated to that type. Quaternion does not expose
the Vector3 API; imag() hands out a copy.

Degenerate input
----------------
    - norm()/normalize() leave a quaternion untouched when its length is
      not above MIN_NORM (1e-7 by default).
    - get_euler_angles() does not clamp the arcsin argument; non-unit
      input can produce NaN pitch.
    - inv() of the zero quaternion and rotation of inf/NaN data propagate
      NaN/inf.

References
----------
    [1] Markley & Crassidis, "Fundamentals of Spacecraft Attitude
        Determination and Control", Springer, 2014.
    [2] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.

===============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

import numpy as np

from imu_math.core.constants import MIN_NORM
from imu_math.core.scalar import is_scalar, resolve_dtype
from imu_math.core.vector import Vector3

logger = logging.getLogger(__name__)


class Quaternion:
    """
    Quaternion over a single floating-point scalar type.

    A free quaternion, or, when normalized, a 3D rotation. For rotation by
    angle theta about the unit axis n:

        q = [cos(theta/2), sin(theta/2) * n_x, sin(theta/2) * n_y, sin(theta/2) * n_z]

    Attributes
    ----------
    w : numpy scalar
        Scalar (real) component.
    x, y, z : numpy scalar
        Imaginary components (i, j, k axes).

    Examples
    --------
    >>> q = Quaternion()                       # identity
    >>> q_x = Quaternion.from_angle_axis(np.pi / 2, Vector3(1.0, 0.0, 0.0))
    >>> v = q_x.rot(Vector3(0.0, 1.0, 0.0))    # ~ (0, 0, 1)
    """

    # =========================================================================
    # norm()/normalize() leave the value unchanged when length() <= MIN_NORM.
    # Retuned through imu_math.config.apply_config().
    # =========================================================================
    MIN_NORM = MIN_NORM

    __slots__ = ('_w', '_imag')

    # Make numpy scalars defer to our reflected operators (np.float32(2) * q).
    __array_ufunc__ = None

    # Mutable value type
    __hash__ = None

    def __init__(self, w: Any = 1.0, x: Any = 0.0, y: Any = 0.0, z: Any = 0.0,
                 dtype: Optional[Any] = None) -> None:
        """
        Initialize from components in (w, x, y, z) order.

        Parameters
        ----------
        w : float
            Scalar part.
        x, y, z : float
            Imaginary part.
        dtype : numpy float type or name, optional
            Scalar type (float32 or float64). Defaults to the package
            default dtype.

        Notes
        -----
        The default arguments build the identity quaternion [1, 0, 0, 0].
        No normalization is applied.
        """
        self._imag = Vector3(x, y, z, dtype=dtype)
        self._w = self._imag.dtype(w)

    @classmethod
    def _from_parts(cls, w: Any, imag: Vector3) -> 'Quaternion':
        """Build from a real part and an owned Vector3 without copying it."""
        q = cls.__new__(cls)
        q._imag = imag
        q._w = imag.dtype(w)
        return q

    # =========================================================================
    # PROPERTIES - Read access to quaternion components
    # =========================================================================

    @property
    def dtype(self) -> type:
        """numpy scalar type of the components."""
        return self._imag.dtype

    @property
    def w(self):
        """Scalar (real) part of the quaternion."""
        return self._w

    @property
    def x(self):
        """First imaginary component (i-axis)."""
        return self._imag.x

    @property
    def y(self):
        """Second imaginary component (j-axis)."""
        return self._imag.y

    @property
    def z(self):
        """Third imaginary component (k-axis)."""
        return self._imag.z

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a 4-element numpy array [w, x, y, z].

        Returns
        -------
        np.ndarray
            New array in the quaternion's dtype.
        """
        return np.array([self._w, *self._imag.components], dtype=self.dtype)

    def W(self):
        return self._w

    def X(self):
        return self._imag.x

    def Y(self):
        return self._imag.y

    def Z(self):
        return self._imag.z

    def real(self):
        """Scalar part (alias for w)."""
        return self._w

    def imag(self) -> Vector3:
        """Copy of the imaginary part as a Vector3."""
        return self._imag.copy()

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @classmethod
    def identity(cls, dtype: Optional[Any] = None) -> 'Quaternion':
        """
        Create the identity quaternion [1, 0, 0, 0].

        The multiplicative identity: q * identity = identity * q = q.
        """
        return cls(1.0, 0.0, 0.0, 0.0, dtype=dtype)

    @classmethod
    def from_real(cls, real: Any, dtype: Optional[Any] = None) -> 'Quaternion':
        """Pure real quaternion [real, 0, 0, 0]."""
        return cls(real, 0.0, 0.0, 0.0, dtype=dtype)

    @classmethod
    def from_vector(cls, vec: Vector3) -> 'Quaternion':
        """
        Pure imaginary quaternion [0, v_x, v_y, v_z].

        This is the embedding used by rot(). The dtype follows the vector.
        """
        return cls._from_parts(0.0, vec.copy())

    @classmethod
    def from_array(cls, q: Iterable[Any], dtype: Optional[Any] = None) -> 'Quaternion':
        """
        Construct from a sequence ordered [w, x, y, z].

        Raises
        ------
        ValueError
            If the sequence does not hold exactly 4 values.
        """
        q = np.asarray(q).ravel()
        if q.shape != (4,):
            raise ValueError(f"Quaternion array must have 4 elements [w, x, y, z], got {q.size}")
        return cls(q[0], q[1], q[2], q[3], dtype=dtype)

    @classmethod
    def from_xyzw(cls, q: Iterable[Any], dtype: Optional[Any] = None) -> 'Quaternion':
        """
        Construct from a sequence ordered [x, y, z, w] (scalar-last).

        Raises
        ------
        ValueError
            If the sequence does not hold exactly 4 values.
        """
        q = np.asarray(q).ravel()
        if q.shape != (4,):
            raise ValueError(f"Quaternion array must have 4 elements [x, y, z, w], got {q.size}")
        return cls(q[3], q[0], q[1], q[2], dtype=dtype)

    @classmethod
    def from_angle_axis(cls, theta: Any, axis: Union[Vector3, Iterable[Any]],
                        dtype: Optional[Any] = None) -> 'Quaternion':
        """
        Create a rotation quaternion from an angle and an axis.

            q = [cos(theta/2), sin(theta/2) * axis]

        Parameters
        ----------
        theta : float
            Rotation angle in radians.
        axis : Vector3 or sequence of 3 floats
            Rotation axis. Must already be unit length: it is NOT
            normalized here, and a non-unit axis gives a non-unit
            quaternion.
        dtype : numpy float type or name, optional
            Defaults to the axis dtype for a Vector3 axis.

        Returns
        -------
        Quaternion
        """
        if isinstance(axis, Vector3):
            if dtype is not None and resolve_dtype(dtype) is not axis.dtype:
                axis = Vector3.from_array(axis.components, dtype=dtype)
        else:
            axis = Vector3.from_array(axis, dtype=dtype)

        # Half-angle encoding
        half_angle = axis.dtype(theta) / axis.dtype(2.0)
        return cls._from_parts(np.cos(half_angle), axis * np.sin(half_angle))

    def copy(self) -> 'Quaternion':
        """Return an independent copy."""
        return self._from_parts(self._w, self._imag.copy())

    def set(self, w: Any, x: Any, y: Any, z: Any) -> 'Quaternion':
        """Overwrite all four components in place and return self."""
        self._w = self.dtype(w)
        self._imag.set(x, y, z)
        return self

    def as_xyzw(self) -> np.ndarray:
        """Components reordered scalar-last, [x, y, z, w]."""
        return np.array([*self._imag.components, self._w], dtype=self.dtype)

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def dot(self, other: 'Quaternion'):
        """4D inner product w*w' + x*x' + y*y' + z*z'."""
        return self.dtype(self._w * other._w + self._imag.dot(other._imag))

    def length(self):
        """Euclidean length sqrt(w^2 + x^2 + y^2 + z^2)."""
        return np.sqrt(self.dot(self))

    def conj(self) -> 'Quaternion':
        """
        Return the quaternion conjugate [w, -x, -y, -z].

        For unit quaternions the conjugate is the inverse and represents
        the reverse rotation.
        """
        return self._from_parts(self._w, -self._imag)

    def inv(self) -> 'Quaternion':
        """
        Return the multiplicative inverse conj(q) / |q|^2.

        The zero quaternion has no inverse; its result is NaN.
        """
        return self.conj() / self.dot(self)

    def norm(self) -> 'Quaternion':
        """
        Return a unit-length copy of this quaternion.

        If length() is not above MIN_NORM the copy is returned unchanged,
        so the zero quaternion stays zero instead of turning into NaN.

        Returns
        -------
        Quaternion
            New quaternion; the receiver is not modified.
        """
        length = self.length()
        if length > self.MIN_NORM:
            return self._from_parts(self._w / length, self._imag / length)
        logger.debug("Quaternion length %.3e not above MIN_NORM, left unnormalized", length)
        return self.copy()

    def normalize(self) -> 'Quaternion':
        """
        Normalize in place, with the same MIN_NORM policy as norm().

        Returns
        -------
        Quaternion
            self
        """
        length = self.length()
        if length > self.MIN_NORM:
            self._w = self.dtype(self._w / length)
            self._imag /= length
        else:
            logger.debug("Quaternion length %.3e not above MIN_NORM, left unnormalized", length)
        return self

    @staticmethod
    def _hamilton(a: 'Quaternion', b: 'Quaternion') -> tuple:
        """
        Hamilton product a * b as (w, imag).

            w'' = w*w' - dot(v, v')
            v'' = v*w' + v'*w + cross(v, v')

        Expanded per component:

            x'' = x*w' + w*x' + y*z' - z*y'
            y'' = y*w' + w*y' + z*x' - x*z'
            z'' = z*w' + w*z' + x*y' - y*x'
        """
        w = a._w * b._w - a._imag.dot(b._imag)
        imag = a._imag * b._w + b._imag * a._w + a._imag.cross(b._imag)
        return w, imag

    # =========================================================================
    # ROTATION / ORIENTATION
    # =========================================================================

    def rot(self, vec: Union[Vector3, Iterable[Any]]) -> Vector3:
        """
        Rotate a 3D vector by this quaternion.

        Applies the sandwich product literally:

            p  = [0, v]
            p' = q * p * conj(q)

        and returns the imaginary part of p'.

        Parameters
        ----------
        vec : Vector3 or sequence of 3 floats
            Vector to rotate.

        Returns
        -------
        Vector3
            Rotated vector, in this quaternion's dtype.

        Notes
        -----
        Only a rotation for a unit quaternion; for |q| != 1 the result is
        additionally scaled by |q|^2. Normalize beforehand.
        """
        if not isinstance(vec, Vector3):
            vec = Vector3.from_array(vec, dtype=self.dtype)
        p = Quaternion.from_vector(vec)
        p = self * p
        p = p * self.conj()
        return p.imag()

    def get_euler_angles(self) -> Vector3:
        """
        Extract Euler angles as Vector3(phi, theta, psi), in radians.

            psi   = atan2(2xy - 2wz, 2w^2 + 2x^2 - 1)
            theta = -asin(2xz + 2wy)
            phi   = atan2(2yz - 2wx, 2w^2 + 2z^2 - 1)

        Warnings
        --------
        Gimbal lock occurs at theta = +/-pi/2: phi and psi become coupled.

        The arcsin argument is not clamped. For non-unit input (or
        rounding just past +/-1) theta is NaN.
        """
        two = self.dtype(2.0)
        one = self.dtype(1.0)
        w, x, y, z = self._w, self._imag.x, self._imag.y, self._imag.z

        psi = np.arctan2(two * x * y - two * w * z, two * w * w + two * x * x - one)
        theta = -np.arcsin(two * x * z + two * w * y)
        phi = np.arctan2(two * y * z - two * w * x, two * w * w + two * z * z - one)

        return Vector3(phi, theta, psi, dtype=self.dtype)

    def g_vec(self) -> Vector3:
        """
        Gravity direction in the body frame.

        Third row of the equivalent rotation matrix:

            (2(xz - wy), 2(wx + yz), w^2 - x^2 - y^2 + z^2)

        For the identity quaternion this is (0, 0, 1).
        """
        two = self.dtype(2.0)
        w, x, y, z = self._w, self._imag.x, self._imag.y, self._imag.z
        return Vector3(
            two * (x * z - w * y),
            two * (w * x + y * z),
            w * w - x * x - y * y + z * z,
            dtype=self.dtype,
        )

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product (non-commutative)
        - Quaternion * scalar -> every component scaled
        """
        if isinstance(other, Quaternion):
            w, imag = self._hamilton(self, other)
            return self._from_parts(w, imag)
        if is_scalar(other):
            return self._from_parts(self._w * other, self._imag * other)
        return NotImplemented

    def __rmul__(self, other: float) -> 'Quaternion':
        if is_scalar(other):
            return self._from_parts(other * self._w, self._imag * other)
        return NotImplemented

    def __imul__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        if isinstance(other, Quaternion):
            w, imag = self._hamilton(self, other)
            self._w = self.dtype(w)
            self._imag = imag
            return self
        if is_scalar(other):
            self._w = self.dtype(self._w * other)
            self._imag *= other
            return self
        return NotImplemented

    def __truediv__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        """
        Division operator.

        - q1 / q2 -> q1 * q2.inv()
        - q / scalar -> every component divided
        """
        if isinstance(other, Quaternion):
            return self * other.inv()
        if is_scalar(other):
            return self._from_parts(self._w / other, self._imag / other)
        return NotImplemented

    def __itruediv__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        if isinstance(other, Quaternion):
            self *= other.inv()
            return self
        if is_scalar(other):
            self._w = self.dtype(self._w / other)
            self._imag /= other
            return self
        return NotImplemented

    def __add__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        """
        Componentwise addition.

        A plain scalar is added to w AND to each imaginary component.
        """
        if isinstance(other, Quaternion):
            return self._from_parts(self._w + other._w, self._imag + other._imag)
        if is_scalar(other):
            return self._from_parts(self._w + other, self._imag + other)
        return NotImplemented

    def __radd__(self, other: float) -> 'Quaternion':
        if is_scalar(other):
            return self + other
        return NotImplemented

    def __iadd__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        if isinstance(other, Quaternion):
            self._w = self.dtype(self._w + other._w)
            self._imag += other._imag
            return self
        if is_scalar(other):
            self._w = self.dtype(self._w + other)
            self._imag += other
            return self
        return NotImplemented

    def __sub__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        """
        Componentwise subtraction.

        A plain scalar is subtracted from w AND from each imaginary component.
        """
        if isinstance(other, Quaternion):
            return self._from_parts(self._w - other._w, self._imag - other._imag)
        if is_scalar(other):
            return self._from_parts(self._w - other, self._imag - other)
        return NotImplemented

    def __rsub__(self, other: float) -> 'Quaternion':
        if is_scalar(other):
            return self._from_parts(other - self._w, other - self._imag)
        return NotImplemented

    def __isub__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        if isinstance(other, Quaternion):
            self._w = self.dtype(self._w - other._w)
            self._imag -= other._imag
            return self
        if is_scalar(other):
            self._w = self.dtype(self._w - other)
            self._imag -= other
            return self
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        """Negate all components. -q is the same rotation as q."""
        return self._from_parts(-self._w, -self._imag)

    def __pos__(self) -> 'Quaternion':
        return self.copy()

    def __eq__(self, other: object) -> bool:
        """Exact componentwise equality."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(self._w == other._w) and self._imag == other._imag

    def __repr__(self) -> str:
        """
        Unambiguous string representation for debugging.

        Format: Quaternion(w=..., x=..., y=..., z=...)
        """
        return (f"Quaternion(w={self.w:+.8f}, x={self.x:+.8f}, "
                f"y={self.y:+.8f}, z={self.z:+.8f})")
