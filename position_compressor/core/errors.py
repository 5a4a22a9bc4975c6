"""
Base error for the compression pipeline.

Every failure specific to compressing a position or expanding a move
derives from CompressionError, so a host can catch them together and fall
back to analysing the uncompressed position.
"""


class CompressionError(Exception):
    """Base class for position compression and move expansion failures."""
    pass
