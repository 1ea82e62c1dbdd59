#  ___________________________________________________________________________
#
#  pyrobust: Python Robust Optimization
#  Copyright (c) 2008-2025
#  National Technology and Engineering Solutions of Sandia, LLC
#  Under the terms of Contract DE-NA0003525 with National Technology and
#  Engineering Solutions of Sandia, LLC, the U.S. Government retains certain
#  rights in this software.
#  This software is distributed under the 3-clause BSD License.
#  ___________________________________________________________________________

import logging
import math
import time

import numpy as np
import scipy
import scipy.sparse
from scipy.optimize import Bounds, LinearConstraint, linprog, milp

from pyrobust.common.config import Bool, ConfigValue
from pyrobust.common.errors import SolverError
from pyrobust.solvers.base import SolverBase
from pyrobust.solvers.config import BranchAndBoundConfig
from pyrobust.solvers.factory import SolverFactory
from pyrobust.solvers.results import SolutionStatus, SolverResults, TerminationCondition

logger = logging.getLogger(__name__)


class HighsConfig(BranchAndBoundConfig):
    def __init__(self, **kwds):
        super().__init__(**kwds)
        self.presolve = self.declare(
            'presolve',
            ConfigValue(
                domain=Bool,
                default=True,
                description="If False, HiGHS presolve is disabled.",
            ),
        )


def _split_rows(A, row_lower, row_upper):
    """Convert ranged rows into the (A_ub, b_ub, A_eq, b_eq) form used
    by linprog"""
    ub_rows, ub_sign, b_ub = [], [], []
    eq_rows, b_eq = [], []
    for i, (lo, up) in enumerate(zip(row_lower, row_upper)):
        if lo == up:
            eq_rows.append(i)
            b_eq.append(up)
            continue
        if up < math.inf:
            ub_rows.append(i)
            ub_sign.append(1.0)
            b_ub.append(up)
        if lo > -math.inf:
            ub_rows.append(i)
            ub_sign.append(-1.0)
            b_ub.append(-lo)
    A_ub = A_eq = None
    if ub_rows:
        A_ub = scipy.sparse.diags(ub_sign) @ A[ub_rows, :]
    if eq_rows:
        A_eq = A[eq_rows, :]
    return A_ub, (np.array(b_ub) if ub_rows else None), A_eq, (
        np.array(b_eq) if eq_rows else None
    )


# scipy status codes (shared by linprog and milp)
_status_map = {
    0: TerminationCondition.optimal,
    1: TerminationCondition.iterationLimit,
    2: TerminationCondition.infeasible,
    3: TerminationCondition.unbounded,
    4: TerminationCondition.error,
}


@SolverFactory.register('highs', doc='The HiGHS LP/MIP solver (through scipy)')
class Highs(SolverBase):
    """Interface to the HiGHS solver through :py:func:`scipy.optimize.linprog`
    (continuous problems) and :py:func:`scipy.optimize.milp` (problems
    with integer columns)."""

    CONFIG = HighsConfig()

    def available(self):
        return self.Availability.FullLicense

    def version(self):
        return tuple(int(v) for v in scipy.__version__.split('.')[:3] if v.isdigit())

    def _solve_trivial(self, lp, results):
        # No columns: the rows are constants (zero)
        feasible = all(
            lo <= 0 <= up for lo, up in zip(lp.row_lower, lp.row_upper)
        )
        if feasible:
            results.termination_condition = TerminationCondition.optimal
            results.solution_status = SolutionStatus.optimal
            results.incumbent_objective = lp.objective_constant
            results.primal = np.zeros(0)
        else:
            results.termination_condition = TerminationCondition.infeasible
        return results

    def solve(self, lp, **kwds):
        config = self.config(value=kwds)
        tick = time.perf_counter()
        results = SolverResults()
        results.solver_name = self.name

        if not lp.num_columns:
            self._solve_trivial(lp, results)
            results.timing_info.wall_time = time.perf_counter() - tick
            return results

        sign = float(int(lp.sense))
        c = sign * lp.objective_vector()
        A = lp.matrix()
        lower = np.array(lp.col_lower, dtype=float)
        upper = np.array(lp.col_upper, dtype=float)
        integrality = np.array(lp.col_integer, dtype=int)

        options = {'disp': config.tee, 'presolve': config.presolve}
        if config.time_limit is not None:
            options['time_limit'] = config.time_limit
        options.update(config.solver_options.value())

        try:
            if integrality.any():
                if config.rel_gap is not None:
                    options['mip_rel_gap'] = config.rel_gap
                constraints = None
                if lp.num_rows:
                    constraints = LinearConstraint(
                        A, np.array(lp.row_lower), np.array(lp.row_upper)
                    )
                res = milp(
                    c,
                    integrality=integrality,
                    bounds=Bounds(lower, upper),
                    constraints=constraints,
                    options=options,
                )
            else:
                A_ub, b_ub, A_eq, b_eq = _split_rows(A, lp.row_lower, lp.row_upper)
                res = linprog(
                    c,
                    A_ub=A_ub,
                    b_ub=b_ub,
                    A_eq=A_eq,
                    b_eq=b_eq,
                    bounds=np.column_stack([lower, upper]),
                    method='highs',
                    options=options,
                )
        except ValueError as err:
            raise SolverError(
                "HiGHS failed to solve linear program '%s': %s" % (lp.name, err)
            ) from err

        tc = _status_map.get(res.status, TerminationCondition.unknown)
        message = str(res.message)
        if tc is TerminationCondition.iterationLimit and 'time' in message.lower():
            tc = TerminationCondition.maxTimeLimit
        elif tc is TerminationCondition.error and (
            'unbounded or infeasible' in message.lower()
            or 'infeasible or unbounded' in message.lower()
        ):
            tc = TerminationCondition.infeasibleOrUnbounded
        results.termination_condition = tc
        results.extra_info.message = message
        nit = getattr(res, 'nit', None)
        if nit is not None:
            results.iteration_count = int(nit)

        if res.x is not None and tc in (
            TerminationCondition.optimal,
            TerminationCondition.maxTimeLimit,
            TerminationCondition.iterationLimit,
        ):
            results.primal = np.asarray(res.x, dtype=float)
            results.incumbent_objective = lp.objective_value(results.primal)
            if tc is TerminationCondition.optimal:
                results.solution_status = SolutionStatus.optimal
            else:
                results.solution_status = SolutionStatus.feasible
        logger.debug(
            "HiGHS finished solving '%s' (%s columns, %s rows): %s",
            lp.name,
            lp.num_columns,
            lp.num_rows,
            message,
        )
        results.timing_info.wall_time = time.perf_counter() - tick
        return results
