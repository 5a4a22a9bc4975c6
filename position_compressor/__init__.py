"""
Position compression for chess variants with unbounded coordinates.

Pieces may sit at coordinates far beyond what a float or int64 holds.
compress_position maps them onto a small grid, keeping every ordering and
alignment between pieces, so a bounded-precision engine can analyse the
position. expand_move turns a move the engine picked there back into the
move on the true position.
"""

from position_compressor.config.settings import CompressionConfig
from position_compressor.core.coord_types import Move
from position_compressor.core.errors import CompressionError
from position_compressor.expansion.move_expander import (
    ConfigurationError,
    PrecisionError,
    UnresolvableDestinationError,
)
from position_compressor.runners.compress import compress_position, expand_move, needs_compression
from position_compressor.runners.results import CompressionDiagnostics, CompressionResult
from position_compressor.solver.lp_solver import InfeasibleModelError

__all__ = [
    "CompressionConfig",
    "CompressionDiagnostics",
    "CompressionError",
    "CompressionResult",
    "ConfigurationError",
    "InfeasibleModelError",
    "Move",
    "PrecisionError",
    "UnresolvableDestinationError",
    "compress_position",
    "expand_move",
    "needs_compression",
]
