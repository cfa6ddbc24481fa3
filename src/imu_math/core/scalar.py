"""
Scalar-type handling shared by the vector, quaternion and dual kernels.

Every value type in the package is instantiated over exactly one floating
point numpy type, float32 or float64. Components are held as numpy scalars
or arrays of that type so the formulas run at the requested precision and
IEEE semantics apply: degenerate inputs produce inf/NaN instead of raising.
"""

import logging
import numbers
from typing import Any, Optional

import numpy as np

from imu_math.core.constants import DEFAULT_DTYPE_NAME, SUPPORTED_DTYPES, get_dtype

logger = logging.getLogger(__name__)

_default_dtype = get_dtype(DEFAULT_DTYPE_NAME)


def resolve_dtype(dtype: Optional[Any] = None) -> type:
    """
    Normalize a dtype argument to one of the supported numpy scalar types.

    Parameters
    ----------
    dtype : None, str, numpy type or numpy.dtype
        ``None`` selects the process-wide default.

    Returns
    -------
    type
        ``numpy.float32`` or ``numpy.float64``.

    Raises
    ------
    ValueError
        If the type is not a supported floating-point type.
    """
    if dtype is None:
        return _default_dtype
    if isinstance(dtype, str):
        return get_dtype(dtype)
    try:
        scalar_type = np.dtype(dtype).type
    except TypeError as exc:
        raise ValueError(f"Unsupported dtype: {dtype!r}") from exc
    if scalar_type not in SUPPORTED_DTYPES.values():
        raise ValueError(
            f"Unsupported dtype: {np.dtype(dtype).name}. "
            f"Valid: {list(SUPPORTED_DTYPES.keys())}"
        )
    return scalar_type


def get_default_dtype() -> type:
    """Return the scalar type used when no ``dtype`` is given."""
    return _default_dtype


def set_default_dtype(dtype: Any) -> None:
    """Change the scalar type used when no ``dtype`` is given."""
    global _default_dtype
    _default_dtype = resolve_dtype(dtype)
    logger.debug("Default dtype set to %s", np.dtype(_default_dtype).name)


def is_scalar(value: Any) -> bool:
    """True for Python and numpy real numbers (not arrays, not bool)."""
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))
