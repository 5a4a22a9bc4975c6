"""
ILP solver wrapper for the compression model.

This module provides a thin boundary to an external integer linear
programming solver:
  - Takes a CompressionModel from the constraint builder
  - Solves it with one of two backends:
      "cbc":   PuLP's bundled CBC solver (default)
      "highs": scipy.optimize.milp (HiGHS)
  - Returns every variable's value as an exact int

Anything other than a proven optimum is fatal. The model is a pure
function of the position, so solving it again cannot help.

Uses standard solver libraries (no custom solver implementation).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional

import numpy as np
import pulp
from scipy.optimize import Bounds, LinearConstraint as ScipyLinearConstraint, milp
from scipy.sparse import csr_matrix

from position_compressor.constraints.builder import CompressionModel
from position_compressor.core.errors import CompressionError


logger = logging.getLogger(__name__)


SolverBackend = Literal["cbc", "highs"]
SOLVER_BACKENDS = ("cbc", "highs")

# Solved values further than this from an integer are rejected
INTEGRALITY_TOLERANCE = 1e-6

OPTIMAL = "optimal"


class InfeasibleModelError(CompressionError):
    """Raised when the ILP model is infeasible or not solved to optimality."""

    def __init__(self, message: str, solver_status: str = "unknown"):
        super().__init__(message)
        self.solver_status = solver_status


@dataclass
class SolverSolution:
    """
    Result of an optimal solve.

    Attributes:
        status: Always "optimal" (anything else raises)
        variables: Variable name -> solved integer value
        objective_value: Value of the objective at the solution
        solver_status: Raw status string reported by the backend
        solve_seconds: Wall time spent in the solver
    """
    status: str
    variables: Dict[str, int] = field(default_factory=dict)
    objective_value: Optional[float] = None
    solver_status: str = ""
    solve_seconds: float = 0.0


def to_exact_int(name: str, value: Optional[float], solver_status: str) -> int:
    """
    Convert a solver float to an exact int.

    Raises:
        InfeasibleModelError: If the value is missing or not integral
    """
    if value is None:
        raise InfeasibleModelError(f"Solver returned no value for variable {name}", solver_status)
    rounded = round(value)
    if abs(value - rounded) > INTEGRALITY_TOLERANCE:
        raise InfeasibleModelError(
            f"Solver returned non-integral value {value} for variable {name}", solver_status
        )
    return int(rounded)


def _solve_with_pulp(model: CompressionModel, time_limit: Optional[float]) -> SolverSolution:
    sense = pulp.LpMinimize if model.direction == "minimize" else pulp.LpMaximize
    prob = pulp.LpProblem("position_compression", sense)

    category = pulp.LpInteger if model.integers else pulp.LpContinuous
    lp_vars = {name: pulp.LpVariable(name, cat=category) for name in model.variables}

    # Objective first, then constraints
    prob += pulp.lpSum(coeff * lp_vars[name] for name, coeff in model.objective.items())

    for lc in model.constraints:
        expr = pulp.lpSum(coeff * lp_vars[name] for name, coeff in lc.coeffs.items())
        if lc.sense == "eq":
            prob += (expr == lc.rhs), lc.name
        elif lc.sense == "min":
            prob += (expr >= lc.rhs), lc.name
        else:
            prob += (expr <= lc.rhs), lc.name

    status = prob.solve(pulp.PULP_CBC_CMD(msg=False, timeLimit=time_limit))
    solver_status = pulp.LpStatus[status]

    # A time-limited run can stop on a feasible but unproven solution
    if solver_status != "Optimal" or prob.sol_status != pulp.LpSolutionOptimal:
        raise InfeasibleModelError(
            f"Solver status: {solver_status} (solution status {prob.sol_status}). "
            f"Model may be infeasible or the time limit was reached.",
            solver_status,
        )

    variables = {
        name: to_exact_int(name, var.varValue, solver_status) for name, var in lp_vars.items()
    }
    return SolverSolution(
        status=OPTIMAL,
        variables=variables,
        objective_value=pulp.value(prob.objective),
        solver_status=solver_status,
    )


def _solve_with_scipy(model: CompressionModel, time_limit: Optional[float]) -> SolverSolution:
    index = {name: i for i, name in enumerate(model.variables)}
    n = len(model.variables)

    c = np.zeros(n)
    for name, coeff in model.objective.items():
        c[index[name]] = coeff
    if model.direction == "maximize":
        c = -c

    rows, cols, data = [], [], []
    lower = np.empty(len(model.constraints))
    upper = np.empty(len(model.constraints))
    for row, lc in enumerate(model.constraints):
        for name, coeff in lc.coeffs.items():
            rows.append(row)
            cols.append(index[name])
            data.append(coeff)
        lower[row] = lc.rhs if lc.sense in ("eq", "min") else -np.inf
        upper[row] = lc.rhs if lc.sense in ("eq", "max") else np.inf

    A = csr_matrix((data, (rows, cols)), shape=(len(model.constraints), n))
    options = {"time_limit": time_limit} if time_limit is not None else {}

    res = milp(
        c,
        constraints=ScipyLinearConstraint(A, lower, upper),
        integrality=np.ones(n) if model.integers else np.zeros(n),
        bounds=Bounds(-np.inf, np.inf),
        options=options,
    )
    solver_status = f"{res.status}: {res.message}"

    # status 0 is the only proven optimum
    if res.status != 0 or res.x is None:
        raise InfeasibleModelError(
            f"Solver status: {solver_status}. Model may be infeasible or the time limit was reached.",
            solver_status,
        )

    variables = {name: to_exact_int(name, float(res.x[i]), solver_status) for name, i in index.items()}
    objective_value = float(res.fun) if model.direction == "minimize" else -float(res.fun)
    return SolverSolution(
        status=OPTIMAL,
        variables=variables,
        objective_value=objective_value,
        solver_status=solver_status,
    )


def solve_compression_model(
    model: CompressionModel,
    backend: SolverBackend = "cbc",
    time_limit: Optional[float] = None,
) -> SolverSolution:
    """
    Solve a compression model to optimality.

    Args:
        model: CompressionModel from build_compression_model
        backend: "cbc" (PuLP) or "highs" (scipy.optimize.milp)
        time_limit: Optional solver time budget in seconds. Running out of
            time before optimality is proven counts as a failure.

    Returns:
        SolverSolution with every variable's integer value

    Raises:
        InfeasibleModelError: If no optimal integral solution was found
        ValueError: If the backend is unknown

    Example:
        >>> from position_compressor.constraints.builder import ConstraintBuilder
        >>> builder = ConstraintBuilder()
        >>> builder.add_eq("x_0_anchor", {"x_0": 1}, 0)
        >>> builder.add_min("x_1_constraint", {"x_1": 1, "x_0": -1}, 10)
        >>> builder.add_objective_term("x_1")
        >>> solve_compression_model(builder.model).variables
        {'x_0': 0, 'x_1': 10}
    """
    if backend == "cbc":
        solve = _solve_with_pulp
    elif backend == "highs":
        solve = _solve_with_scipy
    else:
        raise ValueError(f"Unknown solver backend: {backend!r} (expected one of {SOLVER_BACKENDS})")

    logger.debug(
        "Solving model with %d variables and %d constraints (backend=%s)",
        model.num_variables,
        model.num_constraints,
        backend,
    )

    started = time.perf_counter()
    solution = solve(model, time_limit)
    solution.solve_seconds = time.perf_counter() - started

    logger.info(
        "Solved in %.3fs: status=%s objective=%s",
        solution.solve_seconds,
        solution.solver_status,
        solution.objective_value,
    )
    return solution
