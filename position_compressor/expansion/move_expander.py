"""
Move expansion from the compressed position back to the true position.

An engine picks a move in the compressed position. This module turns it
into the move it stands for in the original, uncompressed position:

  1. Start square: direct lookup of the piece compressed onto it.
  2. Capture: the destination holds a piece, so the true destination is
     that piece's true square. Exact, no geometry.
  3. Empty square: the destination is attached to the axis group it is
     "targeting" (within half of MIN_ARBITRARY_DISTANCE of the group's
     compressed range, on an axis the move can change). The true
     destination is the exact intersection of the piece's true movement
     line with the true line of that group.
  4. Past the first or last group, the overshoot is carried over verbatim:
     a piece moving arbitrarily far past everything keeps doing so.

Nothing is ever rounded. A non-integer intersection means the compressed
and true positions disagree, and that is raised.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from position_compressor.core.coord_types import Coords, Move, subtract_coords
from position_compressor.core.errors import CompressionError
from position_compressor.core.geometry import are_coords_integers, intersect_lines, rational_coords_to_int
from position_compressor.core.vectors import (
    LineCoefficients,
    Vec2,
    abs_vector,
    line_from_coords_and_vector,
    normalize_vector,
    perpendicular_vector,
    vec2_from_key,
    vec2_key,
)
from position_compressor.grouping.axis_grouper import (
    AXIS_DETERMINERS,
    ORTHOGONAL_AXES,
    X_AXIS,
    Y_AXIS,
    AxisOrder,
    AxisOrders,
    PieceRecord,
)


logger = logging.getLogger(__name__)


class ConfigurationError(CompressionError):
    """The move does not start on a piece of the compressed position it was given with."""
    pass


class PrecisionError(CompressionError):
    """A reconstructed destination is not an exact integer square."""
    pass


class UnresolvableDestinationError(CompressionError):
    """A non-capturing move targets no axis group, so its true destination is unknown."""
    pass


# Movement along this vector never changes the axis value, so the
# destination cannot target a group on that axis.
_PARALLEL_MOVEMENT = {
    X_AXIS: Y_AXIS,  # vertical moves keep x
    Y_AXIS: X_AXIS,  # horizontal moves keep y
}


def find_piece_at(pieces: List[PieceRecord], transformed_coords: Coords) -> Optional[PieceRecord]:
    for piece in pieces:
        if piece.is_transformed and piece.transformed() == transformed_coords:
            return piece
    return None


def find_target_axis_value(axis_order: AxisOrder, compressed_value: int, min_distance: int) -> Optional[int]:
    """
    True axis value a compressed destination stands for on one axis.

    Args:
        axis_order: Groups on the axis, with transformed ranges set
        compressed_value: The destination's axis value in the compressed position
        min_distance: MIN_ARBITRARY_DISTANCE

    Returns:
        The true axis value, or None if the destination targets no group
        on this axis (it sits in the middle of a wide gap)

    Example:
        >>> from position_compressor.grouping.axis_grouper import AxisGroup
        >>> order = [AxisGroup(range=(0, 5), transformed_range=(0, 5)),
        ...          AxisGroup(range=(10**6, 10**6), transformed_range=(15, 15))]
        >>> find_target_axis_value(order, 17, 10)
        1000002
        >>> find_target_axis_value(order, 100, 10)
        1000085
    """
    if not axis_order:
        return None

    half_distance = min_distance // 2

    for group in axis_order:
        start, end = group.transformed_range
        if compressed_value + half_distance >= start and compressed_value - half_distance <= end:
            logger.debug(
                "Destination targets group with transformed range %s (true range %s)",
                group.transformed_range,
                group.range,
            )
            return group.range[0] + (compressed_value - start)

    first, last = axis_order[0], axis_order[-1]
    if compressed_value + half_distance < first.transformed_range[0]:
        logger.debug("Destination lies before the first group")
        return first.range[0] + (compressed_value - first.transformed_range[0])
    if compressed_value - half_distance > last.transformed_range[1]:
        logger.debug("Destination lies past the last group")
        return last.range[1] + (compressed_value - last.transformed_range[1])

    return None


def true_end_coords(movement_line: LineCoefficients, axis: str, target_axis_value: int) -> Coords:
    """
    Intersect the true movement line with the line of an axis group.

    For the x axis the group's line is x = target, for the y axis y = target.

    Raises:
        PrecisionError: If the lines do not intersect, or intersect off the
            integer grid
    """
    through = (target_axis_value, 0) if axis == X_AXIS else (0, target_axis_value)
    group_line = line_from_coords_and_vector(through, perpendicular_vector(vec2_from_key(axis)))

    point = intersect_lines(movement_line, group_line)
    if point is None:
        raise PrecisionError(
            f"Movement line {movement_line} never crosses the group line on axis {axis} at {target_axis_value}"
        )
    if not are_coords_integers(point):
        raise PrecisionError(
            f"Intersection of movement line {movement_line} with the group line on axis {axis} "
            f"at {target_axis_value} is not an integer square: ({point[0]}, {point[1]})"
        )
    return rational_coords_to_int(point)


def expand_move(
    axis_orders: AxisOrders,
    pieces: List[PieceRecord],
    move: Move,
    min_distance: int,
) -> Move:
    """
    Expand a move chosen in the compressed position into the true position.

    Args:
        axis_orders: Axis orders of the compression (transformed ranges set)
        pieces: All pieces of the compression
        move: Move in compressed coordinates
        min_distance: MIN_ARBITRARY_DISTANCE the position was compressed with

    Returns:
        The same move in true, arbitrary-precision coordinates

    Raises:
        ConfigurationError: If no piece was compressed onto the start square
        PrecisionError: If the destination cannot be reconstructed exactly
        UnresolvableDestinationError: If a non-capturing move targets no group
    """
    start = tuple(move.start_coords)
    end = tuple(move.end_coords)

    moved_piece = find_piece_at(pieces, start)
    if moved_piece is None:
        raise ConfigurationError(
            f"Compressed position has no piece on {start}. "
            f"Was the move chosen from this compressed position?"
        )
    true_start = moved_piece.coords

    captured_piece = find_piece_at(pieces, end)
    if captured_piece is not None:
        return Move(true_start, captured_piece.coords)

    # Direction is preserved by the compression; its length is not
    vector: Vec2 = abs_vector(normalize_vector(subtract_coords(end, start)))
    movement_line = line_from_coords_and_vector(true_start, vector)
    logger.debug("Expanding move %s -> %s with vector %s from true %s", start, end, vector, true_start)

    for axis in ORTHOGONAL_AXES:
        if vec2_key(vector) == _PARALLEL_MOVEMENT[axis]:
            continue
        if axis not in axis_orders:
            continue

        compressed_value = AXIS_DETERMINERS[axis](end)
        target = find_target_axis_value(axis_orders[axis], compressed_value, min_distance)
        if target is None:
            logger.debug("Moved piece is not interested in any group on axis %s", axis)
            continue

        return Move(true_start, true_end_coords(movement_line, axis, target))

    raise UnresolvableDestinationError(
        f"Unable to determine the true destination of move {start} -> {end}: "
        f"it targets no group on any axis"
    )
