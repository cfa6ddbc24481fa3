"""
===============================================================================
IMU MATH - Numeric Constants
===============================================================================
Central repository for the constants used by the vector, quaternion and
dual-number kernels. Angles are in radians throughout.

The two guard thresholds (MIN_NORM and DUAL_POW_MIN_REAL) are algorithm
parameters. They are copied onto Quaternion.MIN_NORM and Dual.POW_MIN_REAL
at import time and can be retuned with imu_math.config.apply_config().
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
LN10 = np.log(10.0)

# =============================================================================
# QUATERNION PARAMETERS
# =============================================================================
# Below this length norm()/normalize() leave a quaternion untouched instead
# of dividing by a near-zero length.
MIN_NORM = 1.0e-7

# =============================================================================
# DUAL NUMBER PARAMETERS
# =============================================================================
# Magnitude floor applied to the base of Dual.pow() when forming the
# derivative term, so that 0**(n-1) and log(0) stay finite.
DUAL_POW_MIN_REAL = 1.0e-15

# =============================================================================
# SCALAR TYPES
# =============================================================================
SUPPORTED_DTYPES = {
    'float32': np.float32,
    'float64': np.float64,
}
DEFAULT_DTYPE_NAME = 'float64'


def get_dtype(name: str) -> type:
    """
    Look up a supported scalar type by name.

    Args:
        name: One of 'float32', 'float64'

    Returns:
        The numpy scalar type

    Raises:
        ValueError: If name is not recognized
    """
    if name.lower() not in SUPPORTED_DTYPES:
        raise ValueError(f"Unknown dtype: {name}. Valid: {list(SUPPORTED_DTYPES.keys())}")
    return SUPPORTED_DTYPES[name.lower()]
