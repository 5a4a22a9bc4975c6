"""
Result and diagnostics structures for position compression.

This module defines:
  - CompressionDiagnostics: what happened during one compression
    (status, solver details, model and group sizes)
  - CompressionResult: the compressed position plus everything needed to
    expand a move chosen in it back to the true position
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

import numpy as np

from position_compressor.config.settings import CompressionConfig
from position_compressor.core.coord_types import CoordsKey
from position_compressor.grouping.axis_grouper import AxisOrders, PieceRecord
from position_compressor.solver.decoding import position_to_array


# Status of a compression
#   "ok":       the model was solved and the position compressed
#   "identity": no compression was needed, transformed == true coordinates
CompressionStatus = Literal["ok", "identity"]


@dataclass
class CompressionDiagnostics:
    """
    Diagnostics for a single compression.

    Attributes:
        status: "ok" or "identity"
        solver_status: Raw status string from the solver ("" if not solved)
        num_pieces: Number of pieces in the position
        num_constraints: Constraints in the ILP (0 if not solved)
        num_variables: Variables in the ILP (0 if not solved)
        groups_per_axis: Axis key -> number of groups on that axis
        objective_value: Objective at the solution (None if not solved)
        solve_seconds: Time spent in the solver
    """
    status: CompressionStatus
    solver_status: str = ""
    num_pieces: int = 0
    num_constraints: int = 0
    num_variables: int = 0
    groups_per_axis: Dict[str, int] = field(default_factory=dict)
    objective_value: Optional[float] = None
    solve_seconds: float = 0.0


@dataclass
class CompressionResult:
    """
    A compressed position with its transformation info.

    Single-use: produced by one compress_position call and consumed by
    any number of expand_move calls from one caller.

    Attributes:
        position: Compressed position {coords_key: piece_type}
        axis_orders: Groups on every axis, with true and transformed ranges
        pieces: Every piece with its true and transformed coordinates
        config: Settings the position was compressed with
        diagnostics: What happened during compression
    """
    position: Dict[CoordsKey, int]
    axis_orders: AxisOrders
    pieces: List[PieceRecord]
    config: CompressionConfig
    diagnostics: CompressionDiagnostics

    def to_array(self) -> np.ndarray:
        """Compressed position as an int64 (num_pieces, 3) array of (x, y, piece_type)."""
        return position_to_array(self.position)
