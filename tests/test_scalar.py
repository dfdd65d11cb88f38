"""Tests for the scalar helpers."""

import math

import jax
import pytest

from jax_geometry import scalar


def test_epsilon_constants():
    assert scalar.EPSILON == 1e-5
    assert scalar.EPSILON_SQUARED == pytest.approx(1e-10)


def test_log():
    """Test logarithms in arbitrary bases."""
    assert scalar.log(100) == pytest.approx(2.0)
    assert scalar.log(8, 2) == pytest.approx(3.0)
    assert scalar.ln(math.e) == pytest.approx(1.0)


def test_round_to_rounds_half_up():
    """Test half-up rounding, unlike the builtin round."""
    assert scalar.round_to(0.125, 2) == 0.13
    assert scalar.round_to(2.5, 0) == 3.0
    assert scalar.round_to(3.14159) == 3.14
    assert math.isnan(scalar.round_to(math.nan))
    assert scalar.round_to(math.inf) == math.inf


@pytest.mark.parametrize("x, max_denominator, expected", [
    (0.5, 16, "1/2"),
    (0.333, 16, "1/3"),
    (0.75, 16, "3/4"),
    (2.0, 16, "2/1"),
    (0.5, 0, "0.5/1"),
])
def test_approximate_fraction(x, max_denominator, expected):
    assert scalar.approximate_fraction(x, max_denominator) == expected


def test_convert_base():
    """Test conversion between bases."""
    assert scalar.convert_base("FF", 16, 10) == "255"
    assert scalar.convert_base("ff", 16, 2) == "11111111"
    assert scalar.convert_base("255", 10, 16) == "FF"
    assert scalar.convert_base("z", 36, 10) == "35"
    assert scalar.convert_base("0", 10, 2) == "0"
    with pytest.raises(ValueError):
        scalar.convert_base("10", 10, 40)


def test_angle_conversion():
    assert scalar.to_degrees(math.pi) == pytest.approx(180.0)
    assert scalar.to_radians(180.0) == pytest.approx(math.pi)
    assert scalar.to_radians(scalar.to_degrees(1.25)) == pytest.approx(1.25)


def test_random_in_range():
    """Test bounded random draws with explicit keys."""
    keys = jax.random.split(jax.random.PRNGKey(0), 20)
    for key in keys:
        assert 2.0 <= float(scalar.random_in_range(key, 2.0, 5.0)) < 5.0
        assert 2.0 <= float(scalar.random_in_range(key, 5.0, 2.0)) < 5.0
        assert 0.0 <= float(scalar.random_in_range(key)) < 1.0

    assert float(scalar.random_in_range(keys[0], 3.0, 3.0)) == 3.0


def test_random_in_range_is_reproducible():
    key = jax.random.PRNGKey(42)
    assert float(scalar.random_in_range(key, -1.0, 1.0)) == float(scalar.random_in_range(key, -1.0, 1.0))


def test_factorial():
    assert scalar.factorial(0) == 1
    assert scalar.factorial(1) == 1
    assert scalar.factorial(5) == 120
    assert scalar.factorial(5.7) == 120
    assert math.isnan(scalar.factorial(-1))


def test_big_factorial():
    """Test the mantissa/exponent approximation, including beyond float range."""
    mantissa, exponent = scalar.big_factorial(5).split("e")
    assert float(mantissa) == pytest.approx(1.2)
    assert int(exponent) == 2

    mantissa, exponent = scalar.big_factorial(200).split("e")
    assert float(mantissa) == pytest.approx(7.886578673647905, rel=1e-9)
    assert int(exponent) == 374


def test_gcd_lcm():
    assert scalar.gcd(12, 18, 24) == 6
    assert scalar.gcd(7) == 7
    assert scalar.lcm(4, 6) == 12
    assert scalar.lcm(2, 3, 4) == 12
    with pytest.raises(TypeError):
        scalar.gcd()
    with pytest.raises(TypeError):
        scalar.lcm()


def test_derivative():
    assert scalar.derivative(lambda x: x * x, 3.0) == pytest.approx(6.0, abs=1e-3)
    assert scalar.derivative(math.sin, 0.0) == pytest.approx(1.0, abs=1e-3)


def test_limit_of_defined_function_is_its_value():
    assert scalar.limit(lambda x: x * x, 2.0) == 4.0


def test_limit_of_removable_singularity():
    """Test sin(x)/x at 0, where direct evaluation fails."""
    assert scalar.limit(lambda x: math.sin(x) / x, 0.0) == 1.0


def test_limit_without_convergence_is_nan():
    assert math.isnan(scalar.limit(lambda x: 1.0 / x, 0.0))


def test_one_sided_limits_at_infinity():
    assert math.isnan(scalar.limit_right(lambda x: x, math.inf))
    assert math.isnan(scalar.limit_left(lambda x: x, -math.inf))


def test_limit_with_overflowing_side_is_nan():
    """Test exp(1/x) at 0: the right side overflows to inf, the left goes to 0."""
    assert scalar.limit_right(lambda x: math.exp(1 / x), 0.0) == math.inf
    assert scalar.limit_left(lambda x: math.exp(1 / x), 0.0) == 0.0
    assert math.isnan(scalar.limit(lambda x: math.exp(1 / x), 0.0))
