"""
Core coordinate types and utilities for the position compressor.

This module defines the fundamental coordinate representation shared by
the compressor and the move expander.

Coords: always a (x, y) tuple of Python ints (arbitrary precision)
CoordsKey: the string form 'x,y' used as a key in position mappings
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias, Tuple


Coords: TypeAlias = Tuple[int, int]  # (x, y), unbounded integers
CoordsKey: TypeAlias = str           # 'x,y', e.g. '-3,1000000000000000000000'


# Rejects "-0" and leading zeros like "007", same as the short-form notation
_SINGLE_COORD = r"(?:0|-?[1-9]\d*)"
COORDS_KEY_PATTERN = re.compile(rf"^({_SINGLE_COORD}),({_SINGLE_COORD})$")


def coords_key(coords: Coords) -> CoordsKey:
    """
    Map (x, y) to its 'x,y' key.

    Example:
        >>> coords_key((5, -10))
        '5,-10'
    """
    return f"{coords[0]},{coords[1]}"


def parse_coords_key(key: CoordsKey) -> Coords:
    """
    Inverse of coords_key: parse 'x,y' back into an (x, y) tuple.

    Python ints keep the full precision of the key, no matter how many
    digits it has.

    Raises:
        ValueError: If key is not of the form 'x,y'

    Example:
        >>> parse_coords_key("-3,100000000000000000000")
        (-3, 100000000000000000000)
    """
    match = COORDS_KEY_PATTERN.match(key)
    if match is None:
        raise ValueError(f"Invalid coordinates key: {key!r}")
    return (int(match.group(1)), int(match.group(2)))


def subtract_coords(a: Coords, b: Coords) -> Coords:
    return (a[0] - b[0], a[1] - b[1])


@dataclass(frozen=True)
class Move:
    """
    A move from one square to another.

    The same type is used for moves in the compressed position (small
    coordinates chosen by an engine) and for expanded moves (true,
    arbitrary-precision coordinates).

    Attributes:
        start_coords: Square the moved piece starts on
        end_coords: Square the moved piece lands on
    """
    start_coords: Coords
    end_coords: Coords

    @classmethod
    def from_compact(cls, compact: str) -> "Move":
        """
        Parse a compact move string 'sx,sy>ex,ey'.

        Raises:
            ValueError: If the string is not of that form

        Example:
            >>> Move.from_compact("20,5>0,1")
            Move(start_coords=(20, 5), end_coords=(0, 1))
        """
        parts = compact.strip().split(">")
        if len(parts) != 2:
            raise ValueError(f"Move must be of the form 'sx,sy>ex,ey', got {compact!r}")
        return cls(parse_coords_key(parts[0]), parse_coords_key(parts[1]))

    def to_compact(self) -> str:
        return f"{coords_key(self.start_coords)}>{coords_key(self.end_coords)}"


if __name__ == "__main__":
    # Self-test: key roundtrip with coordinates far beyond float precision
    big = (10 ** 40 + 1, -(10 ** 30) - 7)
    key = coords_key(big)
    assert parse_coords_key(key) == big, f"Roundtrip failed for {big}"
    print(f"Key roundtrip passed: {key}")

    move = Move.from_compact("20,5>0,1")
    assert move.to_compact() == "20,5>0,1"
    print("Compact move roundtrip passed.")
