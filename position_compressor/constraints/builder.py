"""
Linear constraint builder for the compression model.

This module turns the axis-ordered pieces into an integer linear program:

  - one integer variable per piece per orthogonal axis (see indexing.py)
  - anchors: the first piece in x order has x = 0, the first piece in
    y order has y = 0
  - for each axis and each pair of axis-adjacent pieces i -> j:
        same group:       t_j - t_i == true_j - true_i
        different groups: t_j - t_i >= MIN_ARBITRARY_DISTANCE
  - diagonal axes reuse the x/y variables:
        u: (y_j - x_j) - (y_i - x_i)
        v: (x_j + y_j) - (x_i + y_i)
  - objective: minimize x_last + y_last (size of the bounding box)

The model is plain data so any conforming ILP solver can consume it.
No solver logic here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Tuple

from position_compressor.constraints.indexing import anchor_name, constraint_name, variable_name
from position_compressor.grouping.axis_grouper import (
    AXIS_DETERMINERS,
    DIAGONAL_AXES,
    ORTHOGONAL_AXES,
    U_AXIS,
    V_AXIS,
    X_AXIS,
    Y_AXIS,
    PieceRecord,
    SortedPieces,
)


ConstraintSense = Literal["eq", "min", "max"]


@dataclass
class LinearConstraint:
    """
    Represents a single linear constraint over the model variables:

        sum_v coeffs[v] * v  (== | >= | <=)  rhs

    Attributes:
        name: Unique constraint name
        coeffs: Variable name -> coefficient (usually 1 or -1)
        sense: "eq" for ==, "min" for >=, "max" for <=
        rhs: Right-hand side value

    Example:
        # x_1 - x_0 >= 10
        LinearConstraint("x_1_constraint", {"x_1": 1, "x_0": -1}, "min", 10)
    """
    name: str
    coeffs: Dict[str, int]
    sense: ConstraintSense
    rhs: int


@dataclass
class CompressionModel:
    """
    An integer linear program in solver-neutral form.

    Attributes:
        direction: Always "minimize" for compression
        objective: Variable name -> objective coefficient
        constraints: All constraints, in insertion order
        variables: All variable names, in creation order
        integers: Whether every variable must be integral
    """
    direction: Literal["minimize", "maximize"] = "minimize"
    objective: Dict[str, int] = field(default_factory=dict)
    constraints: List[LinearConstraint] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)
    integers: bool = True

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_variables(self) -> int:
        return len(self.variables)


@dataclass
class ConstraintBuilder:
    """
    Collects constraints and objective terms into a CompressionModel.

    Variables are created on first use.
    """
    model: CompressionModel = field(default_factory=CompressionModel)
    _known: set = field(default_factory=set, repr=False)
    _constraint_names: set = field(default_factory=set, repr=False)

    def add_variable(self, name: str) -> None:
        if name not in self._known:
            self._known.add(name)
            self.model.variables.append(name)

    def add_constraint(self, name: str, coeffs: Dict[str, int], sense: ConstraintSense, rhs: int) -> None:
        """
        Add a generic linear constraint.

        Raises:
            ValueError: If a constraint with this name already exists, or sense is unknown
        """
        if sense not in ("eq", "min", "max"):
            raise ValueError(f"Unknown constraint sense: {sense!r}")
        if name in self._constraint_names:
            raise ValueError(f"Duplicate constraint name: {name!r}")
        self._constraint_names.add(name)

        for var in coeffs:
            self.add_variable(var)
        self.model.constraints.append(LinearConstraint(name=name, coeffs=dict(coeffs), sense=sense, rhs=rhs))

    def add_eq(self, name: str, coeffs: Dict[str, int], rhs: int) -> None:
        self.add_constraint(name, coeffs, "eq", rhs)

    def add_min(self, name: str, coeffs: Dict[str, int], rhs: int) -> None:
        self.add_constraint(name, coeffs, "min", rhs)

    def add_objective_term(self, var: str, coeff: int = 1) -> None:
        self.add_variable(var)
        self.model.objective[var] = self.model.objective.get(var, 0) + coeff


def separation_requirement(difference: int, min_distance: int) -> Tuple[ConstraintSense, int]:
    """
    Constraint type between two axis-adjacent pieces.

    Pieces at most min_distance apart are in the same group: their spacing
    is kept exactly. Pieces further apart only need min_distance between them.

    Example:
        >>> separation_requirement(5, 10)
        ('eq', 5)
        >>> separation_requirement(999_995, 10)
        ('min', 10)
    """
    if difference <= min_distance:
        return ("eq", difference)
    return ("min", min_distance)


def _piece_variables(sorted_pieces: SortedPieces) -> Dict[PieceRecord, Dict[str, str]]:
    """Map each piece to its x/y variable names (its index differs per axis)."""
    piece_vars: Dict[PieceRecord, Dict[str, str]] = {}
    for axis in ORTHOGONAL_AXES:
        for index, piece in enumerate(sorted_pieces[axis]):
            piece_vars.setdefault(piece, {})[axis] = variable_name(axis, index)
    return piece_vars


def _diagonal_coeffs(axis: str, first: Dict[str, str], second: Dict[str, str]) -> Dict[str, int]:
    """Coefficients of (axis value of second) - (axis value of first) over x/y variables."""
    if axis == U_AXIS:
        # (y2 - x2) - (y1 - x1)
        return {second[Y_AXIS]: 1, second[X_AXIS]: -1, first[Y_AXIS]: -1, first[X_AXIS]: 1}
    if axis == V_AXIS:
        # (x2 + y2) - (x1 + y1)
        return {second[X_AXIS]: 1, second[Y_AXIS]: 1, first[X_AXIS]: -1, first[Y_AXIS]: -1}
    raise ValueError(f"Not a diagonal axis: {axis!r}")


def add_axis_constraints(
    builder: ConstraintBuilder,
    axis: str,
    sorted_pieces: SortedPieces,
    min_distance: int,
    piece_vars: Dict[PieceRecord, Dict[str, str]],
) -> None:
    """
    Add the constraints between every pair of adjacent pieces on one axis.
    """
    determiner = AXIS_DETERMINERS[axis]
    pieces = sorted_pieces[axis]

    for i in range(1, len(pieces)):
        first, second = pieces[i - 1], pieces[i]
        difference = determiner(second.coords) - determiner(first.coords)
        sense, rhs = separation_requirement(difference, min_distance)

        if axis in ORTHOGONAL_AXES:
            coeffs = {variable_name(axis, i): 1, variable_name(axis, i - 1): -1}
        else:
            coeffs = _diagonal_coeffs(axis, piece_vars[first], piece_vars[second])

        builder.add_constraint(constraint_name(axis, i), coeffs, sense, rhs)


def build_compression_model(
    sorted_pieces: SortedPieces,
    min_distance: int,
) -> CompressionModel:
    """
    Build the full integer linear program for one position.

    Args:
        sorted_pieces: Pieces sorted on each grouped axis (from build_axis_orders).
            Diagonal axes are constrained only if present.
        min_distance: MIN_ARBITRARY_DISTANCE

    Returns:
        CompressionModel ready for the solver

    Raises:
        ValueError: If there are no pieces

    Example:
        >>> from position_compressor.grouping.axis_grouper import collect_pieces, build_axis_orders
        >>> pieces = collect_pieces([((0, 0), 1)])
        >>> sorted_pieces, _ = build_axis_orders(pieces, "orthogonal", 10)
        >>> model = build_compression_model(sorted_pieces, 10)
        >>> [c.name for c in model.constraints]
        ['x_0_anchor', 'y_0_anchor']
    """
    if not sorted_pieces.get(X_AXIS):
        raise ValueError("Cannot build a compression model for an empty position")

    builder = ConstraintBuilder()

    # Two independent anchors, not necessarily the same piece
    for axis in ORTHOGONAL_AXES:
        builder.add_eq(anchor_name(axis), {variable_name(axis, 0): 1}, 0)

    piece_vars = _piece_variables(sorted_pieces)
    for piece_axis_vars in piece_vars.values():
        for var in piece_axis_vars.values():
            builder.add_variable(var)

    for axis in ORTHOGONAL_AXES + DIAGONAL_AXES:
        if axis in sorted_pieces:
            add_axis_constraints(builder, axis, sorted_pieces, min_distance, piece_vars)

    for axis in ORTHOGONAL_AXES:
        builder.add_objective_term(variable_name(axis, len(sorted_pieces[axis]) - 1))

    return builder.model
