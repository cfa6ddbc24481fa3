"""
===============================================================================
IMU MATH - Dual Numbers for Forward-Mode Differentiation
===============================================================================

A dual number is a pair (real, epsilon) standing for

    real + epsilon * e,     e^2 = 0

i.e. a first-order Taylor expansion truncated after the linear term.
Because e^2 vanishes, ordinary arithmetic on duals carries a function
value and its derivative together:

    f(x + 1*e) = f(x) + f'(x) * e

so evaluating f on Dual(x, 1) yields f'(x) in the epsilon part. Every
function below applies the matching chain-rule multiplier to epsilon:

    exp   -> exp(real)          sin -> cos(real)
    log   -> 1 / real           cos -> -sin(real)
    log10 -> 1 / (real * ln10)  tan -> 1 / cos(real)^2
    sqrt  -> 1 / (2 sqrt(real)) pow -> n * real^(n-1)

Singularities
-------------
Only pow() is guarded: when |real| < POW_MIN_REAL the base used for the
derivative term is pushed out to +/-POW_MIN_REAL so that 0^(n-1) and
log(0) stay finite. log(), sqrt() and inv() at real = 0, and pow() with a
negative base and a Dual exponent, return inf/NaN (computed in numpy, so a
RuntimeWarning is emitted instead of an exception).
===============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple, Union

import numpy as np

from imu_math.core.constants import DUAL_POW_MIN_REAL, LN10
from imu_math.core.scalar import is_scalar, resolve_dtype

logger = logging.getLogger(__name__)


class Dual:
    """
    Dual number real + epsilon*e over a single floating-point scalar type.

    Parameters
    ----------
    real : float, optional
        Value part. Defaults to 0.
    epsilon : float, optional
        Derivative (infinitesimal) part. Defaults to 0.
    dtype : numpy float type or name, optional
        float32 or float64; defaults to the package default dtype.

    Examples
    --------
    >>> d = Dual(3.0, 1.0).pow(2.0)        # f(x) = x^2 at x = 3
    >>> str(d)
    '(9.0,6.0)'
    """

    # Magnitude floor for the base in pow(). Retuned through
    # imu_math.config.apply_config().
    POW_MIN_REAL = DUAL_POW_MIN_REAL

    __slots__ = ('_real', '_epsilon')

    # Make numpy scalars defer to our reflected operators (np.float64(2) * d).
    __array_ufunc__ = None

    # Mutable value type
    __hash__ = None

    def __init__(self, real: Any = 0.0, epsilon: Any = 0.0,
                 dtype: Optional[Any] = None) -> None:
        scalar_type = resolve_dtype(dtype)
        self._real = scalar_type(real)
        self._epsilon = scalar_type(epsilon)

    def _new(self, real: Any, epsilon: Any) -> 'Dual':
        """Build a result in this value's dtype without re-resolving it."""
        d = Dual.__new__(Dual)
        scalar_type = self.dtype
        d._real = scalar_type(real)
        d._epsilon = scalar_type(epsilon)
        return d

    @staticmethod
    def _parts(other: Any) -> Optional[Tuple[Any, Any]]:
        """(real, epsilon) of a Dual operand, or None."""
        if isinstance(other, Dual):
            return other._real, other._epsilon
        return None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def dtype(self) -> type:
        return type(self._real)

    @property
    def real(self):
        """Value part."""
        return self._real

    @property
    def epsilon(self):
        """Derivative part."""
        return self._epsilon

    @property
    def components(self) -> np.ndarray:
        """(real, epsilon) as a numpy array."""
        return np.array([self._real, self._epsilon], dtype=self.dtype)

    def imag(self):
        """The epsilon part."""
        return self._epsilon

    def copy(self) -> 'Dual':
        return self._new(self._real, self._epsilon)

    # =========================================================================
    # ALGEBRA
    # =========================================================================

    def conj(self) -> 'Dual':
        """Dual conjugate (real, -epsilon)."""
        return self._new(self._real, -self._epsilon)

    def inv(self) -> 'Dual':
        """
        Multiplicative inverse.

            real'    =  real / real^2       (= 1 / real)
            epsilon' = -epsilon / real^2    (d/dx 1/x = -1/x^2)

        Not guarded: real = 0 gives NaN/inf.
        """
        real_sq = self._real * self._real
        return self._new(self._real / real_sq, -self._epsilon / real_sq)

    def norm(self):
        """
        Euclidean magnitude of the (real, epsilon) pair.

        This is sqrt(real^2 + epsilon^2), not the absolute value of the
        represented function value.
        """
        return np.sqrt(self._real * self._real + self._epsilon * self._epsilon)

    def abs(self):
        """Alias for norm()."""
        return self.norm()

    # =========================================================================
    # ELEMENTARY FUNCTIONS
    # =========================================================================

    def _pow_base(self):
        """Real part pushed out to +/-POW_MIN_REAL when it is too small."""
        base = self._real
        if np.abs(base) < self.POW_MIN_REAL:
            clamped = self.POW_MIN_REAL if base >= 0 else -self.POW_MIN_REAL
            logger.debug("Dual.pow base %.3e clamped to %.1e", base, clamped)
            base = self.dtype(clamped)
        return base

    def pow(self, exponent: Union['Dual', float]) -> 'Dual':
        """
        Raise to a scalar or Dual power.

        Scalar exponent n:

            real'    = real^n
            epsilon' = epsilon * n * r^(n-1)

        Dual exponent (n + m*e) adds the sensitivity to the exponent:

            epsilon' = epsilon * n * r^(n-1) + m * r^n * ln(r)

        where r is real clamped away from zero (|r| >= POW_MIN_REAL). The
        value part uses the unclamped real, so 0^-1 is still inf.

        Parameters
        ----------
        exponent : float or Dual

        Returns
        -------
        Dual

        Notes
        -----
        A negative base with a non-integer exponent, or any negative base
        with a Dual exponent (through ln(r)), produces NaN.
        """
        base = self._pow_base()

        exponent_parts = self._parts(exponent)
        if exponent_parts is not None:
            n, m = (self.dtype(v) for v in exponent_parts)
            one = self.dtype(1.0)
            real = np.power(self._real, n)
            epsilon = (self._epsilon * n * np.power(base, n - one)
                       + m * np.power(base, n) * np.log(base))
            return self._new(real, epsilon)

        if not is_scalar(exponent):
            raise TypeError(f"Dual.pow() exponent must be a real number or Dual, "
                            f"got {type(exponent).__name__}")
        n = self.dtype(exponent)
        real = np.power(self._real, n)
        epsilon = self._epsilon * n * np.power(base, n - self.dtype(1.0))
        return self._new(real, epsilon)

    def sqrt(self) -> 'Dual':
        """Square root; epsilon / (2 sqrt(real)). Singular at real = 0."""
        root = np.sqrt(self._real)
        return self._new(root, self._epsilon / (self.dtype(2.0) * root))

    def exp(self) -> 'Dual':
        e = np.exp(self._real)
        return self._new(e, e * self._epsilon)

    def log(self) -> 'Dual':
        """Natural logarithm; epsilon / real."""
        return self._new(np.log(self._real), self._epsilon / self._real)

    def log10(self) -> 'Dual':
        """Base-10 logarithm; epsilon / (real * ln 10)."""
        return self._new(np.log10(self._real),
                         self._epsilon / (self._real * self.dtype(LN10)))

    def sin(self) -> 'Dual':
        return self._new(np.sin(self._real), self._epsilon * np.cos(self._real))

    def cos(self) -> 'Dual':
        return self._new(np.cos(self._real), -self._epsilon * np.sin(self._real))

    def tan(self) -> 'Dual':
        c = np.cos(self._real)
        return self._new(np.tan(self._real), self._epsilon / (c * c))

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __pos__(self) -> 'Dual':
        # Same object, no copy
        return self

    def __neg__(self) -> 'Dual':
        return self._new(-self._real, -self._epsilon)

    def __abs__(self):
        return self.norm()

    def __add__(self, other: Union['Dual', float]) -> 'Dual':
        parts = self._parts(other)
        if parts is not None:
            return self._new(self._real + parts[0], self._epsilon + parts[1])
        if is_scalar(other):
            return self._new(self._real + other, self._epsilon)
        return NotImplemented

    def __radd__(self, other: float) -> 'Dual':
        if is_scalar(other):
            return self._new(other + self._real, self._epsilon)
        return NotImplemented

    def __sub__(self, other: Union['Dual', float]) -> 'Dual':
        parts = self._parts(other)
        if parts is not None:
            return self._new(self._real - parts[0], self._epsilon - parts[1])
        if is_scalar(other):
            return self._new(self._real - other, self._epsilon)
        return NotImplemented

    def __rsub__(self, other: float) -> 'Dual':
        if is_scalar(other):
            return self._new(other - self._real, -self._epsilon)
        return NotImplemented

    def __mul__(self, other: Union['Dual', float]) -> 'Dual':
        """(a + b e)(c + d e) = ac + (ad + bc) e"""
        parts = self._parts(other)
        if parts is not None:
            c, d = parts
            return self._new(self._real * c, self._real * d + self._epsilon * c)
        if is_scalar(other):
            return self._new(self._real * other, self._epsilon * other)
        return NotImplemented

    def __rmul__(self, other: float) -> 'Dual':
        if is_scalar(other):
            return self._new(other * self._real, other * self._epsilon)
        return NotImplemented

    def __truediv__(self, other: Union['Dual', float]) -> 'Dual':
        """(a + b e) / (c + d e) = a/c + ((b c - a d) / c^2) e"""
        parts = self._parts(other)
        if parts is not None:
            c, d = parts
            return self._new(self._real / c,
                             (self._epsilon * c - self._real * d) / (c * c))
        if is_scalar(other):
            return self._new(self._real / other, self._epsilon / other)
        return NotImplemented

    def __rtruediv__(self, other: float) -> 'Dual':
        if is_scalar(other):
            c, d = self._real, self._epsilon
            return self._new(other / c, -other * d / (c * c))
        return NotImplemented

    def __pow__(self, other: Union['Dual', float]) -> 'Dual':
        if isinstance(other, Dual) or is_scalar(other):
            return self.pow(other)
        return NotImplemented

    def __rpow__(self, other: float) -> 'Dual':
        if is_scalar(other):
            return self._new(other, 0.0).pow(self)
        return NotImplemented

    def _assign(self, result: 'Dual') -> 'Dual':
        self._real = result._real
        self._epsilon = result._epsilon
        return self

    def __iadd__(self, other: Union['Dual', float]) -> 'Dual':
        result = self.__add__(other)
        if result is NotImplemented:
            return NotImplemented
        return self._assign(result)

    def __isub__(self, other: Union['Dual', float]) -> 'Dual':
        result = self.__sub__(other)
        if result is NotImplemented:
            return NotImplemented
        return self._assign(result)

    def __imul__(self, other: Union['Dual', float]) -> 'Dual':
        result = self.__mul__(other)
        if result is NotImplemented:
            return NotImplemented
        return self._assign(result)

    def __itruediv__(self, other: Union['Dual', float]) -> 'Dual':
        result = self.__truediv__(other)
        if result is NotImplemented:
            return NotImplemented
        return self._assign(result)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dual):
            return NotImplemented
        return bool(self._real == other._real and self._epsilon == other._epsilon)

    def __str__(self) -> str:
        return f"({self._real},{self._epsilon})"

    def __repr__(self) -> str:
        return f"Dual(real={self._real!r}, epsilon={self._epsilon!r})"


def differentiate(func: Callable[[Dual], Any], x: float,
                  dtype: Optional[Any] = None) -> Tuple[Any, Any]:
    """
    Evaluate func and its derivative at x in one forward pass.

    Parameters
    ----------
    func : callable
        Function built from Dual arithmetic and Dual methods.
    x : float
        Point of evaluation.
    dtype : numpy float type or name, optional

    Returns
    -------
    tuple
        (func(x), func'(x)). A constant (plain scalar) result has
        derivative 0.

    Raises
    ------
    TypeError
        If func returns something other than a Dual or a real number.

    Examples
    --------
    >>> value, slope = differentiate(lambda d: d.sin() * d, 0.0)
    """
    scalar_type = resolve_dtype(dtype)
    result = func(Dual(x, 1.0, dtype=scalar_type))
    if isinstance(result, Dual):
        return result.real, result.epsilon
    if is_scalar(result):
        return scalar_type(result), scalar_type(0.0)
    raise TypeError(f"Function returned {type(result).__name__}, expected Dual or real number")
