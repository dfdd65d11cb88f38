"""Scalar math helpers.

Stateless functions on plain numbers that sit beside the vector/matrix
kernel. The kernel itself only consumes the tolerance constants defined
here; everything else is a standalone utility.
"""

import math
import sys
from typing import Callable, Union

import jax
import jax.numpy as jnp

Array = jax.Array
Number = Union[int, float]

# Floating point epsilon for single precision, used for "effectively zero" checks.
EPSILON = 1e-5
EPSILON_SQUARED = EPSILON * EPSILON

# Step used by the numerical derivative and limit approximations.
SMALL_NUMBER = 1e-10

_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def log(x: Number, base: Number = 10) -> float:
    """Logarithm of ``x`` in an arbitrary base (10 by default)."""
    return math.log(x) / math.log(base)


def ln(x: Number) -> float:
    return math.log(x)


def round_to(x: Number, places: int = 2) -> float:
    """
    Round ``x`` half-up to ``places`` decimal places.

    Unlike the builtin ``round`` this never rounds half to even, so
    ``round_to(0.125, 2) == 0.13``. Non-finite inputs are returned as is.
    """
    if not math.isfinite(x):
        return x
    factor = 10.0 ** places
    return math.floor(x * factor + 0.5) / factor


def approximate_fraction(x: Number, max_denominator: int = 16) -> str:
    """
    Best fraction approximating ``x`` with a denominator up to ``max_denominator``.

    Args:
        x: Value to approximate
        max_denominator: Largest denominator tried

    Returns:
        String of the form ``"numerator/denominator"``
    """
    max_denominator = int(max_denominator)
    if max_denominator < 1:
        return f"{x}/1"

    best = 1
    best_error = x - math.floor(x + 0.5)
    for denominator in range(2, max_denominator + 1):
        approx = math.floor(x / (1.0 / denominator) + 0.5)
        error = x - approx / denominator
        if abs(error) < abs(best_error):
            best = denominator
            best_error = error

    numerator = math.floor(x / (1.0 / best) + 0.5)
    return f"{numerator}/{best}"


def convert_base(number: str, from_base: int, to_base: int) -> str:
    """
    Convert the digit string ``number`` between bases 2..36.

    Digits above 9 are the letters A-Z, case-insensitive on input and
    upper case on output.
    """
    if not 2 <= to_base <= 36:
        raise ValueError(f"to_base must be within 2..36, got {to_base}")

    value = int(str(number).upper(), from_base)
    if value == 0:
        return "0"

    negative = value < 0
    value = abs(value)
    digits = []
    while value:
        value, remainder = divmod(value, to_base)
        digits.append(_DIGITS[remainder])

    return ("-" if negative else "") + "".join(reversed(digits))


def to_degrees(radians: Number) -> float:
    return radians / (math.pi / 180)


def to_radians(degrees: Number) -> float:
    return degrees * (math.pi / 180)


def random_in_range(key: Array, start: Number = 0.0, end: Number = 1.0) -> Array:
    """
    Draw a uniform random number from ``[start, end)``.

    Randomness comes from an explicit JAX PRNG key so results are
    reproducible; split the key between calls.

    Args:
        key: ``jax.random`` key
        start: Lower bound
        end: Upper bound; swapped with ``start`` when smaller

    Returns:
        Scalar array. Equal bounds return ``start`` without sampling.
    """
    if start == end:
        return jnp.asarray(start, dtype=jnp.float64)
    if end < start:
        start, end = end, start
    return jax.random.uniform(key, (), dtype=jnp.float64, minval=start, maxval=end)


def factorial(n: Number) -> Union[int, float]:
    """Factorial of ``int(n)``; NaN for negative input."""
    n = int(n)
    if n < 0:
        return math.nan
    return math.factorial(n)


def big_factorial(n: int) -> str:
    """
    Approximate ``n!`` as a ``"<mantissa>e<exponent>"`` string.

    Works beyond the float range by summing base-10 logarithms.
    """
    exponent = math.fsum(math.log10(k) for k in range(1, int(n) + 1))
    mantissa = 10.0 ** (exponent % 1)
    return f"{mantissa}e{math.floor(exponent)}"


def gcd(*values: int) -> int:
    """Greatest common divisor of one or more integers."""
    if not values:
        raise TypeError("gcd() requires at least one value")
    return math.gcd(*(int(v) for v in values))


def lcm(*values: int) -> int:
    """Least common multiple of one or more integers."""
    if not values:
        raise TypeError("lcm() requires at least one value")
    return math.lcm(*(int(v) for v in values))


def derivative(f: Callable[[float], float], x: Number) -> float:
    """
    Forward-difference approximation of ``f'(x)``.

    Round the result (e.g. to 6 places) to get rid of noise.
    """
    return (f(x + SMALL_NUMBER) - f(x)) / SMALL_NUMBER


def limit(f: Callable[[float], float], x: Number, places: int = 10) -> float:
    """
    Approximate the limit of ``f`` at ``x``.

    If ``f(x)`` is defined it is returned directly. Otherwise ``x`` is
    approached from both sides (one side for infinities) and the common
    value, rounded to ``places``, is returned. NaN means the sides did
    not converge to the same value.
    """
    at_x = _evaluate(f, x)
    if not math.isnan(at_x):
        return at_x

    if x == math.inf:
        return limit_left(f, x, places)
    if x == -math.inf:
        return limit_right(f, x, places)
    if math.isnan(x):
        return math.nan

    left = limit_left(f, x, places)
    right = limit_right(f, x, places)
    if left == right:
        return left
    return math.nan


def limit_right(f: Callable[[float], float], x: Number, places: int = 10) -> float:
    """Approach ``x`` from values greater than ``x``."""
    if x == math.inf:
        return math.nan
    if x == -math.inf:
        x = -sys.float_info.max / 10
    return _probe(f, x, places, 1.0)


def limit_left(f: Callable[[float], float], x: Number, places: int = 10) -> float:
    """Approach ``x`` from values less than ``x``."""
    if x == -math.inf:
        return math.nan
    if x == math.inf:
        x = sys.float_info.max / 10
    return _probe(f, x, places, -1.0)


def _probe(f: Callable[[float], float], x: float, places: int, direction: float) -> float:
    step = SMALL_NUMBER if places <= 10 else 10.0 ** -places

    rounded = []
    point = x
    for _ in range(5):
        point += direction * step
        rounded.append(round_to(_evaluate(f, point), places))

    if all(value == rounded[0] for value in rounded[1:]):
        return rounded[0]
    return math.nan


def _evaluate(f: Callable[[float], float], x: float) -> float:
    # Python raises where IEEE arithmetic would give NaN (e.g. 0/0).
    try:
        return float(f(x))
    except OverflowError:
        return math.inf
    except (ZeroDivisionError, ValueError):
        return math.nan
