"""
Core pipeline runner for position compression.

This module provides the main entrypoints:
  1. compress_position: group pieces on every axis, build the ILP, solve
     it, and assemble the compressed position
  2. expand_move: turn a move chosen in the compressed position into the
     move on the true position

and a command line front end:

Usage:
    # Compress a position given in short form
    python -m position_compressor.runners.compress "K0,0|q5,3|R1000000000000,7"

    # Also expand a move chosen in the compressed position
    python -m position_compressor.runners.compress "K0,0|q5,3|R1000000000000,7" \
        --move "0,0>1,1" --mode diagonal

    # Settings from a JSON file
    python -m position_compressor.runners.compress "K0,0|R99999999999999999,0" \
        --config compression.json -v
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from position_compressor.config.settings import CompressionConfig
from position_compressor.config.store import load_compression_config
from position_compressor.constraints.builder import build_compression_model
from position_compressor.core.coord_types import Move
from position_compressor.core.errors import CompressionError
from position_compressor.core.notation import format_short_position, parse_short_position
from position_compressor.expansion import move_expander
from position_compressor.grouping.axis_grouper import (
    PieceRecord,
    PositionInput,
    build_axis_orders,
    collect_pieces,
)
from position_compressor.runners.results import CompressionDiagnostics, CompressionResult
from position_compressor.solver.decoding import (
    assemble_compressed_position,
    build_compressed_position,
    compute_transformed_ranges,
)
from position_compressor.solver.lp_solver import solve_compression_model


# Logger for this module
logger = logging.getLogger(__name__)


def _is_beyond(coords, bound: int) -> bool:
    return abs(coords[0]) > bound or abs(coords[1]) > bound


def needs_compression(pieces: List[PieceRecord], unsafe_bound: int) -> bool:
    """
    Whether any piece lies beyond unsafe_bound on either axis.

    Example:
        >>> needs_compression(collect_pieces([((0, 0), 1), ((10**20, 5), 1)]), 10**15)
        True
    """
    return any(_is_beyond(piece.coords, unsafe_bound) for piece in pieces)


def _identity_result(pieces: List[PieceRecord], config: CompressionConfig) -> CompressionResult:
    """Result whose compressed position is the true position itself."""
    _, axis_orders = build_axis_orders(pieces, config.mode, config.min_arbitrary_distance)
    for piece in pieces:
        piece.transformed_coords = [piece.coords[0], piece.coords[1]]
    compute_transformed_ranges(axis_orders)

    diagnostics = CompressionDiagnostics(
        status="identity",
        num_pieces=len(pieces),
        groups_per_axis={axis: len(order) for axis, order in axis_orders.items()},
    )
    return CompressionResult(
        position=build_compressed_position(pieces),
        axis_orders=axis_orders,
        pieces=pieces,
        config=config,
        diagnostics=diagnostics,
    )


def compress_position(
    position: PositionInput,
    config: Optional[CompressionConfig] = None,
) -> CompressionResult:
    """
    Compress a position so every coordinate is small, keeping every
    ordering and alignment between pieces.

    Args:
        position: Mapping of coordinates ('x,y' or (x, y)) to piece types,
            or an iterable of ((x, y), piece_type) pairs
        config: Compression settings (defaults if None)

    Returns:
        CompressionResult with the compressed position and the info needed
        to expand moves back

    Raises:
        InfeasibleModelError: If the solver finds no optimal solution
        ValueError: On invalid settings or a malformed position

    Example:
        >>> result = compress_position({"0,0": 2, "5,3": 8, "1000000,7": 19})
        >>> sorted(result.position)
        ['0,0', '15,7', '5,3']
    """
    config = config or CompressionConfig()
    config.validate()

    pieces = collect_pieces(position)
    if not pieces:
        logger.info("Empty position, nothing to compress.")
        return _identity_result(pieces, config)

    if config.skip_if_safe and not needs_compression(pieces, config.unsafe_bound):
        logger.info("All %d pieces within %d, no compression needed.", len(pieces), config.unsafe_bound)
        return _identity_result(pieces, config)

    # 1. Order and group pieces on every axis
    sorted_pieces, axis_orders = build_axis_orders(pieces, config.mode, config.min_arbitrary_distance)

    # 2. Build and solve the model
    model = build_compression_model(sorted_pieces, config.min_arbitrary_distance)
    solution = solve_compression_model(model, backend=config.solver_backend, time_limit=config.time_limit)

    # 3. Assemble the compressed position
    compressed = assemble_compressed_position(
        solution, sorted_pieces, axis_orders, pieces, recenter_type=config.recenter_type
    )

    if any(_is_beyond(piece.transformed(), config.unsafe_bound) for piece in pieces):
        logger.warning("Compressed position still has coordinates beyond %d.", config.unsafe_bound)

    diagnostics = CompressionDiagnostics(
        status="ok",
        solver_status=solution.solver_status,
        num_pieces=len(pieces),
        num_constraints=model.num_constraints,
        num_variables=model.num_variables,
        groups_per_axis={axis: len(order) for axis, order in axis_orders.items()},
        objective_value=solution.objective_value,
        solve_seconds=solution.solve_seconds,
    )
    logger.info(
        "Compressed %d pieces: groups %s, %d constraints",
        len(pieces),
        diagnostics.groups_per_axis,
        diagnostics.num_constraints,
    )

    return CompressionResult(
        position=compressed,
        axis_orders=axis_orders,
        pieces=pieces,
        config=config,
        diagnostics=diagnostics,
    )


def expand_move(result: CompressionResult, move: Move) -> Move:
    """
    Expand a move chosen in result.position back to the true position.

    Raises:
        ConfigurationError: If the move does not start on a compressed piece
        PrecisionError: If the destination cannot be reconstructed exactly
        UnresolvableDestinationError: If the destination targets no group
    """
    if result.diagnostics.status == "identity":
        # Transformed and true coordinates coincide
        if move_expander.find_piece_at(result.pieces, tuple(move.start_coords)) is None:
            raise move_expander.ConfigurationError(
                f"Position has no piece on {move.start_coords}. "
                f"Was the move chosen from this position?"
            )
        return move

    expanded = move_expander.expand_move(
        result.axis_orders, result.pieces, move, result.config.min_arbitrary_distance
    )
    logger.info("Expanded move %s to %s", move.to_compact(), expanded.to_compact())
    return expanded


def main():
    """CLI entrypoint for compressing a position and expanding a move."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Compress a position with arbitrarily large coordinates, and expand moves back."
    )
    parser.add_argument(
        "position",
        help="Position in short form, e.g. 'K0,0|q5,3|R1000000000000,7'.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON settings file. Command line options override it.",
    )
    parser.add_argument(
        "--mode",
        choices=["orthogonal", "diagonal"],
        default=None,
        help="Keep orthogonal relations only, or diagonal ones too.",
    )
    parser.add_argument(
        "--min-distance",
        type=int,
        default=None,
        help="MIN_ARBITRARY_DISTANCE (positive, even).",
    )
    parser.add_argument(
        "--backend",
        choices=["cbc", "highs"],
        default=None,
        help="ILP solver backend.",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Solver time budget in seconds.",
    )
    parser.add_argument(
        "--move",
        default=None,
        help="Move chosen in the compressed position, 'sx,sy>ex,ey', to expand.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details.",
    )

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )

    config = load_compression_config(args.config) if args.config else CompressionConfig()
    if args.mode is not None:
        config.mode = args.mode
    if args.min_distance is not None:
        config.min_arbitrary_distance = args.min_distance
    if args.backend is not None:
        config.solver_backend = args.backend
    if args.time_limit is not None:
        config.time_limit = args.time_limit

    try:
        result = compress_position(parse_short_position(args.position), config)
        print("Before:", args.position)
        print("After: ", format_short_position(result.position))

        if args.move:
            move = Move.from_compact(args.move)
            expanded = expand_move(result, move)
            print(f"Chosen move:   {move.to_compact()}")
            print(f"Expanded move: {expanded.to_compact()}")
    except (CompressionError, ValueError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
