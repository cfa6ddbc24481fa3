"""
Kernel configuration: guard thresholds and the default scalar type.

The numeric kernels read two tunable thresholds from class attributes,
Quaternion.MIN_NORM and Dual.POW_MIN_REAL, and pick their scalar type
from the package default dtype. This module loads those settings from a
YAML file and applies them in one place.

Example file (see config/kernel_config.yaml)::

    kernel:
      min_norm: 1.0e-7
      pow_min_real: 1.0e-15
      dtype: float64
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Optional

import yaml

from imu_math.autodiff.dual import Dual
from imu_math.core.constants import DEFAULT_DTYPE_NAME, DUAL_POW_MIN_REAL, MIN_NORM, get_dtype
from imu_math.core.quaternion import Quaternion
from imu_math.core.scalar import set_default_dtype

logger = logging.getLogger(__name__)


@dataclass
class KernelConfig:
    """
    Tunable parameters of the numeric kernels.

    Attributes:
        min_norm: Quaternion length at or below which norm()/normalize()
                  leave the quaternion unchanged.
        pow_min_real: Smallest base magnitude used for the derivative term
                      of Dual.pow().
        dtype: Default scalar type name, 'float32' or 'float64'.
    """
    min_norm: float = MIN_NORM
    pow_min_real: float = DUAL_POW_MIN_REAL
    dtype: str = DEFAULT_DTYPE_NAME

    def validate(self) -> None:
        """
        Check the values, converting numeric strings to float.

        PyYAML reads exponent literals without a dot (1e-7) as strings,
        so those are accepted here.

        Raises:
            ValueError: If a threshold is not a positive number or the
                        dtype name is not supported.
        """
        for name in ('min_norm', 'pow_min_real'):
            value = getattr(self, name)
            if isinstance(value, str):
                try:
                    value = float(value)
                except ValueError:
                    raise ValueError(f"{name} must be a positive number, got {value!r}") from None
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")
            setattr(self, name, float(value))
        if not isinstance(self.dtype, str):
            raise ValueError(f"dtype must be a type name, got {self.dtype!r}")
        get_dtype(self.dtype)


def load_config(config_path: Optional[str] = None) -> KernelConfig:
    """
    Load kernel configuration from a YAML file.

    Args:
        config_path: Path to a YAML file with a top-level 'kernel' mapping.
                     None returns the built-in defaults.

    Returns:
        Validated KernelConfig

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds unknown keys or invalid values.
    """
    if config_path is None:
        return KernelConfig()

    logger.info("Loading kernel configuration from: %s", config_path)
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Configuration root must be a mapping, got {type(raw).__name__}")
    section = raw.get('kernel') or {}
    if not isinstance(section, dict):
        raise ValueError(f"'kernel' section must be a mapping, got {type(section).__name__}")

    known = {f.name for f in fields(KernelConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown kernel configuration keys: {unknown}. Valid: {sorted(known)}")

    config = KernelConfig(**section)
    config.validate()
    return config


def apply_config(config: KernelConfig) -> None:
    """
    Install a configuration as the process-wide kernel settings.

    Sets Quaternion.MIN_NORM, Dual.POW_MIN_REAL and the default dtype.
    Meant to be called once at start-up, before values are created.
    """
    config.validate()
    Quaternion.MIN_NORM = float(config.min_norm)
    Dual.POW_MIN_REAL = float(config.pow_min_real)
    set_default_dtype(config.dtype)
    logger.info("Kernel configuration applied: %s", asdict(config))
