"""
Solution decoding from solved variables to the compressed position.

Given:
  - the solver's integer value for every x_<i> / y_<i> variable
  - the pieces sorted on each axis (the <i> indexes into those lists)
  - the axis orders (groups on every axis, diagonals included)

Produces:
  - transformed_coords on every PieceRecord
  - transformed_range on every AxisGroup. Diagonal groups were never
    solved directly; their ranges are derived from the x/y solution.
  - the compressed position {coords_key: piece_type}

Two distinct true squares can never land on one compressed square: the
orthogonal constraints keep strict order or exact spacing on both axes.
The assembly still checks it, since a collision would corrupt the game.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np

from position_compressor.constraints.indexing import parse_variable_name
from position_compressor.core.coord_types import Coords, CoordsKey, coords_key, parse_coords_key, subtract_coords
from position_compressor.grouping.axis_grouper import (
    AXIS_DETERMINERS,
    ORTHOGONAL_AXES,
    X_AXIS,
    AxisOrders,
    PieceRecord,
    SortedPieces,
)
from position_compressor.solver.lp_solver import SolverSolution


logger = logging.getLogger(__name__)


INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)


def apply_solution(solution: SolverSolution, sorted_pieces: SortedPieces) -> None:
    """
    Write each solved variable onto its piece's transformed coordinates.

    'x_3' is the transformed x of the 4th piece in x order, and so on.

    Raises:
        ValueError: If a variable does not name an x/y piece
    """
    for name, value in solution.variables.items():
        axis, index = parse_variable_name(name)
        if axis not in ORTHOGONAL_AXES:
            raise ValueError(f"Solved variable {name} is not on an orthogonal axis")
        if index >= len(sorted_pieces[axis]):
            raise ValueError(f"Solved variable {name} does not correspond to any piece")
        coord_index = 0 if axis == X_AXIS else 1
        sorted_pieces[axis][index].transformed_coords[coord_index] = value


def compute_transformed_ranges(axis_orders: AxisOrders) -> None:
    """
    Set transformed_range of every group on every axis.

    The range is the min/max of the members' axis values in the
    compressed position.
    """
    for axis, axis_order in axis_orders.items():
        determiner = AXIS_DETERMINERS[axis]
        for group in axis_order:
            values = [determiner(piece.transformed()) for piece in group.pieces]
            group.transformed_range = (min(values), max(values))


def recenter_transformed_position(
    pieces: List[PieceRecord],
    axis_orders: AxisOrders,
    reference_type: int,
) -> bool:
    """
    Translate the whole compressed position so that the first piece of
    reference_type sits on its original square.

    A translation preserves every order and spacing, so the solution stays
    valid. Each group's transformed_range moves by the translation's
    value on that group's axis.

    Returns:
        True if the position was translated, False if no such piece exists
    """
    reference = next((p for p in pieces if p.piece_type == reference_type), None)
    if reference is None:
        logger.warning("No piece of type %d to recenter on. Skipping translation.", reference_type)
        return False

    translation: Coords = subtract_coords(reference.coords, reference.transformed())
    logger.debug("Recentering compressed position by %s", translation)

    for piece in pieces:
        x, y = piece.transformed()
        piece.transformed_coords = [x + translation[0], y + translation[1]]

    for axis, axis_order in axis_orders.items():
        # Every determiner is linear, so this is the shift along the axis
        push = AXIS_DETERMINERS[axis](translation)
        for group in axis_order:
            if group.transformed_range is not None:
                start, end = group.transformed_range
                group.transformed_range = (start + push, end + push)

    return True


def build_compressed_position(pieces: List[PieceRecord]) -> Dict[CoordsKey, int]:
    """
    Assemble the compressed position from the pieces' transformed coordinates.

    Raises:
        ValueError: If a piece has undefined transformed coordinates, or
            two pieces landed on the same compressed square
    """
    position: Dict[CoordsKey, int] = {}
    owners: Dict[CoordsKey, PieceRecord] = {}
    for piece in pieces:
        key = coords_key(piece.transformed())
        if key in position:
            raise ValueError(
                f"Pieces at {owners[key].coords} and {piece.coords} both compressed onto square {key}"
            )
        position[key] = piece.piece_type
        owners[key] = piece
        logger.debug("Piece %s transformed to %s", piece.coords, key)

    return position


def assemble_compressed_position(
    solution: SolverSolution,
    sorted_pieces: SortedPieces,
    axis_orders: AxisOrders,
    pieces: List[PieceRecord],
    recenter_type: Optional[int] = None,
) -> Dict[CoordsKey, int]:
    """
    Full assembly: apply the solution, derive group ranges, optionally
    recenter, and build the compressed position.
    """
    apply_solution(solution, sorted_pieces)
    compute_transformed_ranges(axis_orders)
    if recenter_type is not None:
        recenter_transformed_position(pieces, axis_orders, recenter_type)
    return build_compressed_position(pieces)


def position_to_array(position: Dict[CoordsKey, int]) -> np.ndarray:
    """
    Export a compressed position as an int64 array for bounded-precision consumers.

    Returns:
        Array of shape (num_pieces, 3) with rows (x, y, piece_type),
        in the position's iteration order

    Raises:
        OverflowError: If a coordinate does not fit in int64

    Example:
        >>> position_to_array({"0,0": 2, "15,5": 19})
        array([[ 0,  0,  2],
               [15,  5, 19]])
    """
    rows = []
    for key, piece_type in position.items():
        x, y = parse_coords_key(key)
        for value in (x, y):
            if not INT64_MIN <= value <= INT64_MAX:
                raise OverflowError(f"Coordinate {value} of square {key} does not fit in int64")
        rows.append((x, y, piece_type))

    return np.array(rows, dtype=np.int64).reshape(len(rows), 3)
