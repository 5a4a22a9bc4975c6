"""
Exact line intersection.

Intersections of lines with integer coefficients are rational, so they
are computed with fractions.Fraction. Nothing is ever rounded here;
callers decide what a non-integer intersection means.
"""

from fractions import Fraction
from typing import Optional, Tuple

from position_compressor.core.coord_types import Coords
from position_compressor.core.vectors import LineCoefficients


RationalCoords = Tuple[Fraction, Fraction]


def intersect_lines(line1: LineCoefficients, line2: LineCoefficients) -> Optional[RationalCoords]:
    """
    Intersection point of two lines in general form A*x + B*y + C = 0.

    Uses Cramer's rule:
        det = A1*B2 - A2*B1
        x = (C2*B1 - C1*B2) / det
        y = (A2*C1 - A1*C2) / det

    Returns:
        (x, y) as Fractions, or None if the lines are parallel or identical

    Example:
        >>> intersect_lines((1, -1, 0), (1, 0, -4))  # y = x, x = 4
        (Fraction(4, 1), Fraction(4, 1))
    """
    a1, b1, c1 = line1
    a2, b2, c2 = line2

    determinant = a1 * b2 - a2 * b1
    if determinant == 0:
        return None

    x = Fraction(c2 * b1 - c1 * b2, determinant)
    y = Fraction(a2 * c1 - a1 * c2, determinant)
    return (x, y)


def are_coords_integers(point: RationalCoords) -> bool:
    return point[0].denominator == 1 and point[1].denominator == 1


def rational_coords_to_int(point: RationalCoords) -> Coords:
    """
    Convert an integral rational point to int coordinates.

    Raises:
        ValueError: If either component has a non-unit denominator
    """
    if not are_coords_integers(point):
        raise ValueError(f"Point ({point[0]}, {point[1]}) is not an integer coordinate")
    return (point[0].numerator, point[1].numerator)
