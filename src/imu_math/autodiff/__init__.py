"""
===============================================================================
IMU MATH - Automatic Differentiation Module
===============================================================================
Forward-mode differentiation of scalar functions.

Submodules:
    dual -- Dual number type and the differentiate() helper
===============================================================================
"""
