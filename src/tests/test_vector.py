"""
===============================================================================
IMU MATH - Vector Test Suite
===============================================================================
Tests for Vector3 and Vector2: construction, dot/cross products, length and
normalization, componentwise arithmetic, in-place operators, and the
float32/float64 instantiations.

All floating-point comparisons use numpy.testing.assert_allclose with
explicit tolerances appropriate for the scalar type under test.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from imu_math.core.vector import Vector2, Vector3


# Relative tolerance per scalar type
RTOL = {np.float32: 1e-6, np.float64: 1e-14}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(params=[np.float32, np.float64], ids=['float32', 'float64'])
def dtype(request):
    """Run the test once per supported scalar type."""
    return request.param


@pytest.fixture
def v123():
    """Return the vector (1, 2, 3)."""
    return Vector3(1.0, 2.0, 3.0)


# =============================================================================
# Test: Construction
# =============================================================================

class TestConstruction:
    """Tests for building vectors."""

    def test_default_is_zero(self):
        """Vector3() is the zero vector in the default dtype."""
        v = Vector3()
        assert_allclose(v.components, [0.0, 0.0, 0.0], atol=0.0)
        assert v.dtype is np.float64

    def test_dtype_is_respected(self, dtype):
        """Components are stored in the requested scalar type."""
        v = Vector3(1.0, 2.0, 3.0, dtype=dtype)
        assert v.dtype is dtype
        assert isinstance(v.x, dtype)
        assert v.components.dtype == dtype

    def test_from_array(self):
        """from_array reads (x, y, z) in order."""
        v = Vector3.from_array([4.0, 5.0, 6.0])
        assert (v.X(), v.Y(), v.Z()) == (4.0, 5.0, 6.0)

    @pytest.mark.parametrize("values", [[1.0, 2.0], [1.0, 2.0, 3.0, 4.0]])
    def test_from_array_wrong_length_raises(self, values):
        """from_array rejects anything but exactly 3 values."""
        with pytest.raises(ValueError):
            Vector3.from_array(values)

    def test_copy_is_independent(self, v123):
        """Mutating a copy leaves the original alone."""
        c = v123.copy()
        c += 1.0
        assert_allclose(v123.components, [1.0, 2.0, 3.0])
        assert_allclose(c.components, [2.0, 3.0, 4.0])

    def test_set_mutates_in_place(self, v123):
        """set() overwrites all components and returns the receiver."""
        result = v123.set(7.0, 8.0, 9.0)
        assert result is v123
        assert_allclose(v123.components, [7.0, 8.0, 9.0])

    def test_set_wrong_count_raises(self, v123):
        with pytest.raises(ValueError):
            v123.set(1.0, 2.0)

    def test_unsupported_dtype_raises(self):
        with pytest.raises(ValueError):
            Vector3(1, 2, 3, dtype=np.int32)


# =============================================================================
# Test: Products and length
# =============================================================================

class TestProducts:
    """Tests for dot, cross and length."""

    def test_dot(self, v123):
        """dot is the sum of componentwise products."""
        assert_allclose(v123.dot(Vector3(4.0, 5.0, 6.0)), 32.0)

    def test_cross_basis(self):
        """x-hat cross y-hat = z-hat."""
        z = Vector3(1.0, 0.0, 0.0).cross(Vector3(0.0, 1.0, 0.0))
        assert_allclose(z.components, [0.0, 0.0, 1.0], atol=0.0)

    def test_cross_formula(self, v123):
        """Cross product matches the closed form and numpy.cross."""
        other = Vector3(-2.0, 0.5, 4.0)
        expected = np.cross(v123.components, other.components)
        assert_allclose(v123.cross(other).components, expected, atol=1e-15)

    def test_cross_is_anticommutative(self, v123):
        other = Vector3(-2.0, 0.5, 4.0)
        assert_allclose(v123.cross(other).components,
                        (-other.cross(v123)).components, atol=1e-15)

    def test_cross_is_perpendicular(self, v123):
        other = Vector3(-2.0, 0.5, 4.0)
        c = v123.cross(other)
        assert_allclose(c.dot(v123), 0.0, atol=1e-13)
        assert_allclose(c.dot(other), 0.0, atol=1e-13)

    def test_length(self, dtype):
        """|(3, 0, 4)| = 5."""
        v = Vector3(3.0, 0.0, 4.0, dtype=dtype)
        length = v.length()
        assert isinstance(length, dtype)
        assert_allclose(length, 5.0, rtol=RTOL[dtype])

    def test_vector2_has_no_cross(self):
        """Cross product is 3D only."""
        assert not hasattr(Vector2(1.0, 0.0), 'cross')


# =============================================================================
# Test: Normalization
# =============================================================================

class TestNormalize:
    """Tests for norm() (copy) and normalize() (in place)."""

    @pytest.mark.parametrize("components", [
        (3.0, 4.0, 0.0),
        (1.0, 1.0, 1.0),
        (-0.2, 7.5, 1e-3),
        (1e-6, -2e-6, 3e-6),
    ])
    def test_norm_is_unit(self, components, dtype):
        """norm() returns a unit-length copy."""
        v = Vector3(*components, dtype=dtype)
        n = v.norm()
        assert_allclose(n.length(), 1.0, rtol=RTOL[dtype] * 10)
        assert n.dtype is dtype

    def test_norm_leaves_receiver_unchanged(self, v123):
        v123.norm()
        assert_allclose(v123.components, [1.0, 2.0, 3.0])

    def test_normalize_matches_norm(self, v123):
        """normalize() mutates in place to the same result as norm()."""
        expected = v123.norm()
        result = v123.normalize()
        assert result is v123
        assert_allclose(v123.components, expected.components, rtol=1e-15)

    def test_zero_vector_norm_is_nan(self):
        """No zero-length guard: the result propagates NaN."""
        with np.errstate(invalid='ignore', divide='ignore'):
            n = Vector3().norm()
        assert np.all(np.isnan(n.components))

    def test_zero_vector_normalize_is_nan(self):
        v = Vector3()
        with np.errstate(invalid='ignore', divide='ignore'):
            v.normalize()
        assert np.all(np.isnan(v.components))


# =============================================================================
# Test: Arithmetic
# =============================================================================

class TestArithmetic:
    """Tests for the binary and compound operators."""

    def test_add_sub(self, v123):
        other = Vector3(0.5, -1.0, 2.0)
        assert_allclose((v123 + other).components, [1.5, 1.0, 5.0])
        assert_allclose((v123 - other).components, [0.5, 3.0, 1.0])

    def test_vector_product_is_componentwise(self, v123):
        """v1 * v2 multiplies componentwise; it is neither dot nor cross."""
        result = v123 * Vector3(4.0, 5.0, 6.0)
        assert isinstance(result, Vector3)
        assert_allclose(result.components, [4.0, 10.0, 18.0])

    def test_scalar_applies_to_every_component(self, v123):
        assert_allclose((v123 + 1.0).components, [2.0, 3.0, 4.0])
        assert_allclose((v123 - 1.0).components, [0.0, 1.0, 2.0])
        assert_allclose((v123 * 2.0).components, [2.0, 4.0, 6.0])
        assert_allclose((v123 / 2.0).components, [0.5, 1.0, 1.5])
        assert_allclose((2.0 * v123).components, [2.0, 4.0, 6.0])

    def test_scalar_minus_vector(self, v123):
        """s - v subtracts every component from the scalar."""
        result = 1.0 - v123
        assert isinstance(result, Vector3)
        assert_allclose(result.components, [0.0, -1.0, -2.0])
        assert_allclose((np.float64(1.0) - Vector2(3.0, 4.0)).components, [-2.0, -3.0])

    def test_numpy_scalar_on_the_left(self, v123):
        """numpy scalars defer to the vector's reflected operators."""
        result = np.float64(2.0) * v123
        assert isinstance(result, Vector3)
        assert_allclose(result.components, [2.0, 4.0, 6.0])

    def test_binary_ops_return_new_values(self, v123):
        result = v123 + 1.0
        assert result is not v123
        assert_allclose(v123.components, [1.0, 2.0, 3.0])

    def test_negation(self, v123):
        assert_allclose((-v123).components, [-1.0, -2.0, -3.0])

    @pytest.mark.parametrize("op,operand,expected", [
        ('+=', 1.0, [2.0, 3.0, 4.0]),
        ('-=', 1.0, [0.0, 1.0, 2.0]),
        ('*=', 2.0, [2.0, 4.0, 6.0]),
        ('/=', 2.0, [0.5, 1.0, 1.5]),
    ])
    def test_compound_scalar_mutates_receiver(self, v123, op, operand, expected):
        alias = v123
        if op == '+=':
            v123 += operand
        elif op == '-=':
            v123 -= operand
        elif op == '*=':
            v123 *= operand
        else:
            v123 /= operand
        assert v123 is alias
        assert_allclose(alias.components, expected)

    def test_compound_vector(self, v123):
        alias = v123
        v123 += Vector3(1.0, 1.0, 1.0)
        v123 *= Vector3(2.0, 3.0, 4.0)
        assert v123 is alias
        assert_allclose(alias.components, [4.0, 9.0, 16.0])

    def test_division_by_zero_scalar_is_inf(self, v123):
        with np.errstate(divide='ignore'):
            result = v123 / 0.0
        assert np.all(np.isinf(result.components))

    def test_mixed_dimensions_raise(self):
        """Vector2 and Vector3 do not combine."""
        with pytest.raises(TypeError):
            Vector3(1.0, 2.0, 3.0) + Vector2(1.0, 2.0)

    def test_equality(self, v123):
        assert v123 == Vector3(1.0, 2.0, 3.0)
        assert v123 != Vector3(1.0, 2.0, 3.5)

    def test_float32_stays_float32(self):
        """Results keep the left operand's scalar type."""
        v = Vector3(1.0, 2.0, 3.0, dtype=np.float32)
        assert (v * np.float64(2.5)).dtype is np.float32
        assert (v + Vector3(1.0, 1.0, 1.0)).dtype is np.float32
        assert v.norm().dtype is np.float32


# =============================================================================
# Test: Vector2
# =============================================================================

class TestVector2:
    """Tests for the planar vector."""

    def test_dot_and_length(self):
        v = Vector2(3.0, 4.0)
        assert_allclose(v.dot(Vector2(1.0, 2.0)), 11.0)
        assert_allclose(v.length(), 5.0)

    def test_norm_and_normalize(self, dtype):
        v = Vector2(3.0, 4.0, dtype=dtype)
        assert_allclose(v.norm().components, [0.6, 0.8], rtol=RTOL[dtype])
        v.normalize()
        assert_allclose(v.length(), 1.0, rtol=RTOL[dtype] * 10)

    def test_arithmetic(self):
        v = Vector2(1.0, 2.0)
        assert_allclose((v + Vector2(1.0, 1.0)).components, [2.0, 3.0])
        assert_allclose((v - 1.0).components, [0.0, 1.0])
        assert_allclose((v * Vector2(3.0, 4.0)).components, [3.0, 8.0])
        v /= Vector2(1.0, 4.0)
        assert_allclose(v.components, [1.0, 0.5])

    def test_from_array_wrong_length_raises(self):
        with pytest.raises(ValueError):
            Vector2.from_array([1.0, 2.0, 3.0])

    def test_unpacking(self):
        x, y = Vector2(5.0, 6.0)
        assert (x, y) == (5.0, 6.0)
        assert len(Vector2()) == 2
