"""
Integer vector and line helpers.

All math here is exact: vectors and line coefficients are Python ints,
so nothing is lost for coordinates far beyond float precision.

Conventions:
  - Vec2: (dx, dy) tuple of ints
  - Vec2Key: 'dx,dy' string, also used to name axes ('1,0' is the x axis)
  - Lines are kept in general form A*x + B*y + C = 0 as an (A, B, C) tuple
"""

from math import gcd
from typing import Tuple, TypeAlias

from position_compressor.core.coord_types import Coords


Vec2: TypeAlias = Tuple[int, int]
Vec2Key: TypeAlias = str
LineCoefficients: TypeAlias = Tuple[int, int, int]  # (A, B, C) of Ax + By + C = 0


def vec2_key(vec2: Vec2) -> Vec2Key:
    return f"{vec2[0]},{vec2[1]}"


def vec2_from_key(key: Vec2Key) -> Vec2:
    dx, dy = key.split(",")
    return (int(dx), int(dy))


def negate_vector(vec2: Vec2) -> Vec2:
    return (-vec2[0], -vec2[1])


def abs_vector(vec2: Vec2) -> Vec2:
    """
    Canonical direction of a vector, ignoring its sense.

    Flips the vector so that dx > 0, or dx == 0 and dy >= 0.
    (-1, 0) and (1, 0) both become (1, 0).
    """
    if vec2[0] < 0 or (vec2[0] == 0 and vec2[1] < 0):
        return negate_vector(vec2)
    return vec2


def normalize_vector(vec2: Vec2) -> Vec2:
    """
    Reduce a vector to its smallest integer components with the same direction.

    Example:
        >>> normalize_vector((6, -4))
        (3, -2)
        >>> normalize_vector((0, 0))
        (0, 0)
    """
    divisor = gcd(vec2[0], vec2[1])
    if divisor == 0:
        return (0, 0)
    return (vec2[0] // divisor, vec2[1] // divisor)


def perpendicular_vector(vec2: Vec2) -> Vec2:
    return (-vec2[1], vec2[0])


def line_from_coords_and_vector(coords: Coords, vec2: Vec2) -> LineCoefficients:
    """
    General form (A, B, C) of the line through coords with direction vec2.

    A = dy, B = -dx, C = dx * y0 - dy * x0

    Example:
        >>> line_from_coords_and_vector((2, 3), (1, 1))  # y = x + 1
        (1, -1, 1)
    """
    a = vec2[1]
    b = -vec2[0]
    c = vec2[0] * coords[1] - vec2[1] * coords[0]
    return (a, b, c)
