"""
Short-form position notation.

A position is written as '|'-separated piece entries, each being a piece
abbreviation followed by its coordinates key, optionally followed by '+'
for a piece that still has its special rights (castling, double push):

    "K5,5|r35,10|P1,2+|3q-1000000000000000000000,4"

Piece types are plain integers:

    piece_type = raw_type + NUM_RAW_TYPES * player

Upper case abbreviations are white, lower case black; 'ob' and 'vo' are
neutral. A leading player number ('3q') overrides the color.

Special rights are irrelevant to compression and are dropped on parsing.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Tuple

from position_compressor.core.coord_types import CoordsKey, parse_coords_key, coords_key


# Raw piece types, in type-number order
RAW_TYPES: Tuple[str, ...] = (
    "void", "obstacle", "king", "giraffe", "camel", "zebra", "knightrider",
    "amazon", "queen", "royalqueen", "hawk", "chancellor", "archbishop",
    "centaur", "royalcentaur", "rose", "knight", "guard", "huygen", "rook",
    "bishop", "pawn",
)
NUM_RAW_TYPES = len(RAW_TYPES)

# Players
NEUTRAL, WHITE, BLACK, RED, BLUE, YELLOW, GREEN = range(7)

# Lower-case codes for raw piece types
RAW_CODES: Dict[int, str] = {
    RAW_TYPES.index("king"): "k",
    RAW_TYPES.index("pawn"): "p",
    RAW_TYPES.index("knight"): "n",
    RAW_TYPES.index("bishop"): "b",
    RAW_TYPES.index("rook"): "r",
    RAW_TYPES.index("queen"): "q",
    RAW_TYPES.index("amazon"): "am",
    RAW_TYPES.index("hawk"): "ha",
    RAW_TYPES.index("chancellor"): "ch",
    RAW_TYPES.index("archbishop"): "ar",
    RAW_TYPES.index("guard"): "gu",
    RAW_TYPES.index("camel"): "ca",
    RAW_TYPES.index("giraffe"): "gi",
    RAW_TYPES.index("zebra"): "ze",
    RAW_TYPES.index("centaur"): "ce",
    RAW_TYPES.index("royalqueen"): "rq",
    RAW_TYPES.index("royalcentaur"): "rc",
    RAW_TYPES.index("knightrider"): "nr",
    RAW_TYPES.index("huygen"): "hu",
    RAW_TYPES.index("rose"): "ro",
    RAW_TYPES.index("obstacle"): "ob",
    RAW_TYPES.index("void"): "vo",
}
RAW_CODES_INVERTED: Dict[str, int] = {code: raw for raw, code in RAW_CODES.items()}

_NEUTRAL_RAWS = {RAW_TYPES.index("obstacle"), RAW_TYPES.index("void")}

_ENTRY_PATTERN = re.compile(
    r"^(?P<player>0|[1-9]\d*)?(?P<abbrev>[A-Za-z]{1,2})"
    r"(?P<key>(?:0|-?[1-9]\d*),(?:0|-?[1-9]\d*))(?P<special>\+)?$"
)


def build_type(raw_type: int, player: int) -> int:
    return raw_type + NUM_RAW_TYPES * player


def split_type(piece_type: int) -> Tuple[int, int]:
    """Return (raw_type, player) of a piece type."""
    return (piece_type % NUM_RAW_TYPES, piece_type // NUM_RAW_TYPES)


def abbreviation_from_type(piece_type: int) -> str:
    """
    Abbreviation of a piece type.

    Example:
        >>> abbreviation_from_type(build_type(RAW_TYPES.index("pawn"), WHITE))
        'P'
        >>> abbreviation_from_type(build_type(RAW_TYPES.index("king"), RED))
        '3k'
    """
    raw_type, player = split_type(piece_type)
    code = RAW_CODES[raw_type]
    if player == WHITE:
        return code.upper()
    if player == BLACK or (player == NEUTRAL and raw_type in _NEUTRAL_RAWS):
        return code
    return f"{player}{code}"


def type_from_abbreviation(abbrev: str, player: int | None = None) -> int:
    """
    Piece type from an abbreviation like 'Q', 'nr' or 'ob'.

    Raises:
        ValueError: If the abbreviation is unknown
    """
    raw_type = RAW_CODES_INVERTED.get(abbrev.lower())
    if raw_type is None:
        raise ValueError(f"Unknown piece abbreviation: {abbrev!r}")

    if player is not None:
        return build_type(raw_type, player)
    if raw_type in _NEUTRAL_RAWS:
        if abbrev != abbrev.lower():
            raise ValueError(f"Neutral piece abbreviation must be lower case: {abbrev!r}")
        return build_type(raw_type, NEUTRAL)
    return build_type(raw_type, WHITE if abbrev.isupper() else BLACK)


def parse_short_position(short_position: str) -> Dict[CoordsKey, int]:
    """
    Parse a short-form position into a {coords_key: piece_type} mapping.

    Raises:
        ValueError: On a malformed entry or a square listed twice

    Example:
        >>> pos = parse_short_position("k5,5|R35,10")
        >>> sorted(pos)
        ['35,10', '5,5']
    """
    position: Dict[CoordsKey, int] = {}
    for entry in short_position.split("|"):
        entry = entry.strip()
        if not entry:
            continue

        match = _ENTRY_PATTERN.match(entry)
        if match is None:
            raise ValueError(f"Invalid piece entry in short-form position: {entry!r}")

        player = match.group("player")
        piece_type = type_from_abbreviation(
            match.group("abbrev"), int(player) if player is not None else None
        )

        key = coords_key(parse_coords_key(match.group("key")))
        if key in position:
            raise ValueError(f"Square {key} is occupied twice in short-form position")
        position[key] = piece_type

    return position


def format_short_position(position: Mapping[CoordsKey, int] | Iterable[Tuple[CoordsKey, int]]) -> str:
    """Inverse of parse_short_position (without special rights)."""
    items = position.items() if isinstance(position, Mapping) else position
    return "|".join(f"{abbreviation_from_type(piece_type)}{key}" for key, piece_type in items)
