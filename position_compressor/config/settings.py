"""
Compression settings.

This module defines CompressionConfig, the single settings object passed
through the compression pipeline, and the default constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from position_compressor.grouping.axis_grouper import CompressionMode, axes_for_mode
from position_compressor.solver.lp_solver import SOLVER_BACKENDS, SolverBackend


# How close two pieces must be on an axis to be linked into one group.
# Linked pieces keep their exact spacing; anything further apart is an
# "arbitrary" distance and collapses to this minimum gap.
#
# Must be over twice the longest jump of any jumping piece, so a jump
# lands within half of this of the group it targeted. Must be even, as
# the move expander halves it.
MIN_ARBITRARY_DISTANCE = 10

# Positions whose pieces all lie within this bound need no compression
# (a tenth of the largest integer a double holds exactly).
UNSAFE_BOUND = int((2 ** 53 - 1) * 0.1)


@dataclass
class CompressionConfig:
    """
    Settings for one compression.

    Attributes:
        min_arbitrary_distance: Grouping threshold and minimum gap between groups
        mode: "orthogonal" keeps every piece in the same quadrant relative to
            every other, "diagonal" also keeps the same octant
        solver_backend: "cbc" (PuLP) or "highs" (scipy)
        time_limit: Solver time budget in seconds, None for no limit
        recenter_type: If set, translate the compressed position so the
            first piece of this type keeps its original square
        unsafe_bound: Coordinates beyond this bound require compression
        skip_if_safe: Return the position unchanged when every coordinate
            is within unsafe_bound
    """
    min_arbitrary_distance: int = MIN_ARBITRARY_DISTANCE
    mode: CompressionMode = "orthogonal"
    solver_backend: SolverBackend = "cbc"
    time_limit: Optional[float] = None
    recenter_type: Optional[int] = None
    unsafe_bound: int = UNSAFE_BOUND
    skip_if_safe: bool = False

    def validate(self) -> None:
        """
        Raises:
            ValueError: If any setting is out of range
        """
        if (
            not isinstance(self.min_arbitrary_distance, int)
            or isinstance(self.min_arbitrary_distance, bool)
            or self.min_arbitrary_distance <= 0
            or self.min_arbitrary_distance % 2 != 0
        ):
            raise ValueError(
                f"min_arbitrary_distance must be a positive even integer, got {self.min_arbitrary_distance!r}"
            )
        axes_for_mode(self.mode)
        if self.solver_backend not in SOLVER_BACKENDS:
            raise ValueError(
                f"solver_backend must be one of {SOLVER_BACKENDS}, got {self.solver_backend!r}"
            )
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit!r}")
        if self.unsafe_bound <= 0:
            raise ValueError(f"unsafe_bound must be positive, got {self.unsafe_bound!r}")
