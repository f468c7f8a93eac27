#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

LP Solver — minimal linear-programming contract used by the multiplicity
model (declare variable, add constraint, set objective, solve) and a
scipy/HiGHS backend implementing it.

All variables are non-negative. Constraints are sparse rows given as
{variable index: coefficient} mappings.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Tuple
import logging

import numpy as np
from scipy import sparse
from scipy.optimize import linprog

logger = logging.getLogger(__name__)


# ============================================================================
#                           SOLVER CONTRACT
# ============================================================================

class ConstraintSense(Enum):
    """Comparison operator of a linear constraint."""
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    EQUAL = "=="


class ObjectiveSense(Enum):
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


class LPStatus(Enum):
    """Outcome of a solve."""
    SOLVED = "solved"
    INFEASIBLE = "infeasible"
    NEEDS_FIXUP = "needs_fixup"      # Solver stopped without a trustworthy optimum
    UNBOUNDED = "unbounded"

    @property
    def is_failure(self) -> bool:
        return self is not LPStatus.SOLVED


@dataclass
class LPResult:
    """Solver status and, on success, one value per variable."""
    status: LPStatus
    values: List[float] = field(default_factory=list)
    objective: Optional[float] = None
    message: str = ""


class LPSolver(ABC):
    """
    Abstract linear program.

    Subclasses collect variables and constraints and solve them in one
    blocking call. A solver instance is used for exactly one problem.
    """

    def __init__(self):
        self.variable_names: List[str] = []
        self.constraints: List[Tuple[Dict[int, float], ConstraintSense, float]] = []
        self.objective: Dict[int, float] = {}
        self.objective_sense = ObjectiveSense.MINIMIZE

    @property
    def num_variables(self) -> int:
        return len(self.variable_names)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def add_variable(self, name: str) -> int:
        """Declare a non-negative variable and return its column index."""
        self.variable_names.append(name)
        return len(self.variable_names) - 1

    def add_constraint(
        self,
        coefficients: Mapping[int, float],
        sense: ConstraintSense,
        bound: float,
    ):
        """
        Add ``sum(coef * var) <sense> bound``.

        Raises:
            IndexError: If a coefficient refers to an undeclared variable
        """
        row = {}
        for index, coef in coefficients.items():
            if not 0 <= index < self.num_variables:
                raise IndexError(f"Constraint refers to unknown variable {index}")
            if coef != 0:
                row[index] = float(coef)
        self.constraints.append((row, sense, float(bound)))

    def set_objective(
        self,
        coefficients: Mapping[int, float],
        sense: ObjectiveSense = ObjectiveSense.MINIMIZE,
    ):
        for index in coefficients:
            if not 0 <= index < self.num_variables:
                raise IndexError(f"Objective refers to unknown variable {index}")
        self.objective = {index: float(coef) for index, coef in coefficients.items()}
        self.objective_sense = sense

    @abstractmethod
    def solve(self) -> LPResult:
        """Solve the collected problem."""
        pass


# ============================================================================
#                           SCIPY / HiGHS BACKEND
# ============================================================================

# scipy.optimize.linprog status codes
_SCIPY_STATUS = {
    0: LPStatus.SOLVED,
    2: LPStatus.INFEASIBLE,
    3: LPStatus.UNBOUNDED,
}


class ScipyLinprogSolver(LPSolver):
    """
    LPSolver backed by ``scipy.optimize.linprog`` with the HiGHS engine.

    Iteration limits and numerical difficulties are reported as
    NEEDS_FIXUP.
    """

    VALID_METHODS = ('highs', 'highs-ds', 'highs-ipm')

    def __init__(self, method: str = 'highs-ds'):
        super().__init__()
        if method not in self.VALID_METHODS:
            raise ValueError(f"Unknown linprog method '{method}', expected one of {self.VALID_METHODS}")
        self.method = method

    def _build_matrix(self, rows: List[Dict[int, float]]):
        data, row_idx, col_idx = [], [], []
        for i, row in enumerate(rows):
            for j, coef in row.items():
                data.append(coef)
                row_idx.append(i)
                col_idx.append(j)
        return sparse.csr_matrix((data, (row_idx, col_idx)),
                                 shape=(len(rows), self.num_variables))

    def solve(self) -> LPResult:
        n = self.num_variables
        if n == 0:
            return LPResult(status=LPStatus.SOLVED, values=[], objective=0.0,
                            message="Empty problem")

        c = np.zeros(n)
        for index, coef in self.objective.items():
            c[index] = coef
        if self.objective_sense is ObjectiveSense.MAXIMIZE:
            c = -c

        ub_rows, ub_bounds = [], []
        eq_rows, eq_bounds = [], []
        for row, sense, bound in self.constraints:
            if sense is ConstraintSense.EQUAL:
                eq_rows.append(row)
                eq_bounds.append(bound)
            elif sense is ConstraintSense.LESS_EQUAL:
                ub_rows.append(row)
                ub_bounds.append(bound)
            else:
                ub_rows.append({j: -coef for j, coef in row.items()})
                ub_bounds.append(-bound)

        kwargs = {}
        if ub_rows:
            kwargs['A_ub'] = self._build_matrix(ub_rows)
            kwargs['b_ub'] = np.array(ub_bounds)
        if eq_rows:
            kwargs['A_eq'] = self._build_matrix(eq_rows)
            kwargs['b_eq'] = np.array(eq_bounds)

        logger.debug(
            f"Solving LP with {n} variables, {len(ub_rows)} inequalities, "
            f"{len(eq_rows)} equalities (method={self.method})"
        )
        res = linprog(c, bounds=(0, None), method=self.method, **kwargs)

        status = _SCIPY_STATUS.get(res.status, LPStatus.NEEDS_FIXUP)
        if status is not LPStatus.SOLVED or res.x is None:
            logger.debug(f"linprog status {res.status}: {res.message}")
            if status is LPStatus.SOLVED:
                status = LPStatus.NEEDS_FIXUP
            return LPResult(status=status, message=str(res.message))

        objective = float(res.fun)
        if self.objective_sense is ObjectiveSense.MAXIMIZE:
            objective = -objective
        return LPResult(status=LPStatus.SOLVED, values=[float(v) for v in res.x],
                        objective=objective, message=str(res.message))


# ============================================================================
#                           BACKEND REGISTRY
# ============================================================================

SOLVER_BACKENDS: Dict[str, Callable[..., LPSolver]] = {
    'scipy': ScipyLinprogSolver,
}


def get_solver(backend: str = 'scipy', **options) -> LPSolver:
    """
    Create a fresh solver instance for the named backend.

    Raises:
        ValueError: If the backend is not registered
    """
    try:
        factory = SOLVER_BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown LP backend '{backend}', available: {sorted(SOLVER_BACKENDS)}"
        ) from None
    return factory(**options)

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
