"""
===============================================================================
IMU MATH - Core Module
===============================================================================
Fixed-shape numeric value types for attitude computation.

Submodules:
    constants  -- Mathematical constants and guard thresholds
    scalar     -- Scalar-type (float32/float64) selection
    vector     -- Vector2 and Vector3
    quaternion -- Quaternion algebra, rotation and orientation extraction
===============================================================================
"""
