"""
imu_math: vector, quaternion and dual-number kernel for attitude computation.

Every type is generic over one floating-point scalar type (numpy float32
or float64) and follows IEEE semantics: numeric degeneracies show up as
NaN/inf in the result, never as exceptions.
"""

from imu_math.autodiff.dual import Dual, differentiate
from imu_math.config import KernelConfig, apply_config, load_config
from imu_math.core.quaternion import Quaternion
from imu_math.core.scalar import get_default_dtype, set_default_dtype
from imu_math.core.vector import Vector2, Vector3

__version__ = "0.1.0"

__all__ = [
    "Dual",
    "KernelConfig",
    "Quaternion",
    "Vector2",
    "Vector3",
    "apply_config",
    "differentiate",
    "get_default_dtype",
    "load_config",
    "set_default_dtype",
]
