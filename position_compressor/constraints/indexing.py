"""
Variable naming for the compression model.

Each piece gets one integer variable per orthogonal axis:
  - 'x_<i>': transformed x of the i-th piece in ascending x order
  - 'y_<i>': transformed y of the i-th piece in ascending y order

Diagonal axes never get variables of their own; their constraints are
written over the x/y variables. The 'u'/'v' letters only appear in
constraint names.

This is pure naming with no dependencies on constraints or solver.
"""

from typing import Tuple

from position_compressor.grouping.axis_grouper import X_AXIS, Y_AXIS, U_AXIS, V_AXIS


AXIS_LETTERS = {
    X_AXIS: "x",
    Y_AXIS: "y",
    U_AXIS: "u",
    V_AXIS: "v",
}
LETTER_AXES = {letter: axis for axis, letter in AXIS_LETTERS.items()}


def variable_name(axis: str, index: int) -> str:
    """
    Name of the variable (or constraint stem) for the index-th piece on an axis.

    Example:
        >>> variable_name("1,0", 3)
        'x_3'
    """
    return f"{AXIS_LETTERS[axis]}_{index}"


def parse_variable_name(name: str) -> Tuple[str, int]:
    """
    Inverse of variable_name: 'y_12' -> ('0,1', 12).

    Raises:
        ValueError: If the name does not belong to this naming scheme
    """
    letter, _, index = name.partition("_")
    if letter not in LETTER_AXES or not index.isdigit():
        raise ValueError(f"Unknown model variable name: {name!r}")
    return (LETTER_AXES[letter], int(index))


def constraint_name(axis: str, index: int) -> str:
    """Name of the constraint linking piece index-1 to piece index on an axis."""
    return f"{variable_name(axis, index)}_constraint"


def anchor_name(axis: str) -> str:
    return f"{variable_name(axis, 0)}_anchor"
