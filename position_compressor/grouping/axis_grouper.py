"""
Axis grouping of pieces.

This module orders every piece along each axis of movement and links
pieces that are close together on that axis into groups:

  - x axis ('1,0'):          axis value = x
  - y axis ('0,1'):          axis value = y
  - positive diagonal ('1,1'):  axis value u = y - x
  - negative diagonal ('1,-1'): axis value v = y + x

Walking the pieces in ascending axis order, a piece joins the current
group if its axis value is at most MIN_ARBITRARY_DISTANCE past the end of
that group's range, otherwise it starts a new group. The test is one-sided
(forward gap to the running range end only), so group boundaries depend on
the sort order exactly at the threshold. The move expander relies on
these boundaries; keep it this way.

Within a group, the spacing between pieces is reproduced exactly in the
compressed position. Between groups, only the order and a minimum gap are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Literal, Mapping, Optional, Tuple, Union

from position_compressor.core.coord_types import Coords, CoordsKey, parse_coords_key


logger = logging.getLogger(__name__)


CompressionMode = Literal["orthogonal", "diagonal"]

# Axis keys
X_AXIS = "1,0"
Y_AXIS = "0,1"
U_AXIS = "1,1"
V_AXIS = "1,-1"

ORTHOGONAL_AXES: Tuple[str, ...] = (X_AXIS, Y_AXIS)
DIAGONAL_AXES: Tuple[str, ...] = (U_AXIS, V_AXIS)

AxisDeterminer = Callable[[Coords], int]

# Each determiner maps coordinates to the value shared by every square
# on the same line of that axis.
AXIS_DETERMINERS: Dict[str, AxisDeterminer] = {
    X_AXIS: lambda coords: coords[0],
    Y_AXIS: lambda coords: coords[1],
    U_AXIS: lambda coords: coords[1] - coords[0],
    V_AXIS: lambda coords: coords[1] + coords[0],
}


@dataclass(eq=False)
class PieceRecord:
    """
    One piece of the position, before and after compression.

    Compared and hashed by identity: two records are the same piece only
    if they are the same object.

    Attributes:
        piece_type: Integer piece type code
        coords: True coordinates in the uncompressed position
        transformed_coords: Coordinates in the compressed position.
            Both entries are None until the model has been solved.
    """
    piece_type: int
    coords: Coords
    transformed_coords: List[Optional[int]] = field(default_factory=lambda: [None, None])

    @property
    def is_transformed(self) -> bool:
        return self.transformed_coords[0] is not None and self.transformed_coords[1] is not None

    def transformed(self) -> Coords:
        """
        Transformed coordinates as a tuple.

        Raises:
            ValueError: If the piece has not been solved yet
        """
        if not self.is_transformed:
            raise ValueError(
                f"Piece at {self.coords} has undefined transformed coordinates: {self.transformed_coords}"
            )
        return (self.transformed_coords[0], self.transformed_coords[1])


@dataclass
class AxisGroup:
    """
    A run of pieces linked on one axis because they are close together.

    Attributes:
        range: (min, max) true axis value of the pieces in the group
        pieces: Member pieces, in ascending axis order
        transformed_range: (min, max) axis value in the compressed position,
            None until the solution has been assembled
    """
    range: Tuple[int, int]
    pieces: List[PieceRecord] = field(default_factory=list)
    transformed_range: Optional[Tuple[int, int]] = None

    @property
    def size(self) -> int:
        return self.range[1] - self.range[0]


AxisOrder = List[AxisGroup]
AxisOrders = Dict[str, AxisOrder]
SortedPieces = Dict[str, List[PieceRecord]]

PositionInput = Union[Mapping[Union[CoordsKey, Coords], int], Iterable[Tuple[Coords, int]]]


def axes_for_mode(mode: CompressionMode) -> Tuple[str, ...]:
    """
    Axes that are grouped for a compression mode.

    Raises:
        ValueError: If mode is unknown
    """
    if mode == "orthogonal":
        return ORTHOGONAL_AXES
    if mode == "diagonal":
        return ORTHOGONAL_AXES + DIAGONAL_AXES
    raise ValueError(f"Unknown compression mode: {mode!r} (expected 'orthogonal' or 'diagonal')")


def collect_pieces(position: PositionInput) -> List[PieceRecord]:
    """
    Create fresh PieceRecords for every piece of a position.

    Accepts either a mapping of coordinates (keys 'x,y' or (x, y) tuples) to
    piece types, or an iterable of ((x, y), piece_type) pairs.

    Raises:
        ValueError: If a square is occupied twice, or a coordinate is not an int

    Example:
        >>> pieces = collect_pieces({"0,0": 2, (5, 10**30): 8})
        >>> [p.coords for p in pieces]
        [(0, 0), (5, 1000000000000000000000000000000)]
    """
    items = position.items() if isinstance(position, Mapping) else position

    pieces: List[PieceRecord] = []
    seen: set = set()
    for raw_coords, piece_type in items:
        coords = parse_coords_key(raw_coords) if isinstance(raw_coords, str) else tuple(raw_coords)
        if len(coords) != 2 or not all(isinstance(v, int) and not isinstance(v, bool) for v in coords):
            raise ValueError(f"Coordinates must be a pair of ints, got {raw_coords!r}")
        if coords in seen:
            raise ValueError(f"Square {coords} is occupied by more than one piece")
        seen.add(coords)
        pieces.append(PieceRecord(piece_type=piece_type, coords=coords))

    return pieces


def group_axis(
    pieces: List[PieceRecord],
    axis: str,
    min_distance: int,
) -> Tuple[List[PieceRecord], AxisOrder]:
    """
    Sort the pieces along one axis and split them into groups.

    Args:
        pieces: All pieces of the position
        axis: Axis key ('1,0', '0,1', '1,1' or '1,-1')
        min_distance: MIN_ARBITRARY_DISTANCE; a forward gap larger than
            this starts a new group

    Returns:
        (sorted_pieces, axis_order): the pieces in ascending axis value
        (stable on ties) and the groups partitioning that list

    Example:
        >>> pieces = collect_pieces([((0, 0), 1), ((5, 0), 1), ((1_000_000, 0), 1)])
        >>> _, order = group_axis(pieces, "1,0", 10)
        >>> [g.range for g in order]
        [(0, 5), (1000000, 1000000)]
    """
    determiner = AXIS_DETERMINERS[axis]

    sorted_pieces = sorted(pieces, key=lambda piece: determiner(piece.coords))

    axis_order: AxisOrder = []
    current_group: Optional[AxisGroup] = None
    for piece in sorted_pieces:
        axis_value = determiner(piece.coords)

        if current_group is None or axis_value - current_group.range[1] > min_distance:
            current_group = AxisGroup(range=(axis_value, axis_value))
            axis_order.append(current_group)

        current_group.pieces.append(piece)
        current_group.range = (current_group.range[0], axis_value)

    return sorted_pieces, axis_order


def build_axis_orders(
    pieces: List[PieceRecord],
    mode: CompressionMode,
    min_distance: int,
) -> Tuple[SortedPieces, AxisOrders]:
    """
    Group the pieces on every axis the mode requires.

    Returns:
        (sorted_pieces, axis_orders), both keyed by axis
    """
    sorted_pieces: SortedPieces = {}
    axis_orders: AxisOrders = {}

    for axis in axes_for_mode(mode):
        sorted_pieces[axis], axis_orders[axis] = group_axis(pieces, axis, min_distance)
        logger.debug(
            "Axis %s: %d pieces in %d groups, ranges %s",
            axis,
            len(pieces),
            len(axis_orders[axis]),
            [group.range for group in axis_orders[axis]],
        )

    return sorted_pieces, axis_orders
