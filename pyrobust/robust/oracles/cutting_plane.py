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

import numpy as np

from pyrobust.common.enums import maximize, minimize
from pyrobust.common.errors import (
    SeparationError,
    SeparationTimeLimitError,
    SetupError,
)
from pyrobust.robust.config import SolverResolvable
from pyrobust.robust.oracles.base import AuxRow, Oracle, Realization, Reformulation
from pyrobust.solvers.results import TerminationCondition

logger = logging.getLogger(__name__)


class CuttingPlaneOracle(Oracle):
    """Robust constraints by iterative separation.

    For a candidate solution ``x``, the oracle evaluates the worst case
    of ``g(u) = sum_j a_j(u) x_j + c(u)`` over the uncertainty set by
    solving ``max g(u)`` (upper bound) and ``min g(u)`` (lower bound)
    with the separation solver.  Integer uncertain parameters turn the
    separation problem into a MILP.

    Parameters
    ----------
    solver: str or SolverBase, optional
        Separation solver for this oracle.  Defaults to the
        ``separation_solver`` option of the solve (or ``solver`` if that
        is not set).
    """

    uses_separation = True

    def __init__(self, solver=None):
        self.solver = solver
        self._uset = None
        self._lp = None
        self._solver = None
        self._nominal = None
        self._tol = 1e-6

    @property
    def nominal_point(self):
        return self._nominal

    def setup(self, uncertainty_set, config):
        self._uset = uncertainty_set
        self._lp = uncertainty_set.to_linear_program()
        self._tol = config.feasibility_tolerance
        self._solver = resolve_solver(
            self.solver, config.separation_solver, config.solver
        )
        self._nominal = find_nominal_point(uncertainty_set, self._solver, self._lp)
        logger.debug("Nominal point of the uncertainty set: %s", self._nominal)

    def reformulate(self, constraint):
        """Return the constraint at the nominal realization"""
        linear, lower, upper = constraint.specialize(self._nominal)
        return Reformulation(
            constraints=[
                AuxRow(linear.items(), lower, upper, "%s_nominal" % (constraint.name,))
            ]
        )

    def _worst_case(self, g, sense):
        if g.is_constant():
            return g.constant, self._nominal
        lp = self._lp.with_objective(g.linear.items(), g.constant, sense)
        if self.time_limit is None:
            res = self._solver.solve(lp)
        else:
            res = self._solver.solve(lp, time_limit=self.time_limit)
        tc = res.termination_condition
        if tc == TerminationCondition.maxTimeLimit:
            raise SeparationTimeLimitError(
                "Separation solver '%s' reached the time limit (%s s)"
                % (self._solver.name, self.time_limit)
            )
        if tc in (
            TerminationCondition.unbounded,
            TerminationCondition.infeasibleOrUnbounded,
        ):
            raise SeparationError(
                "Separation problem is unbounded: the uncertainty set is "
                "unbounded in a direction that affects the constraint"
            )
        if tc != TerminationCondition.optimal or res.primal is None:
            raise SeparationError(
                "Separation solver '%s' failed to solve a separation problem "
                "(termination condition: %s)" % (self._solver.name, tc)
            )
        return res.incumbent_objective, res.primal

    def separate(self, constraint, candidate):
        g = constraint.repn.uncertain_part(candidate)
        best = None
        if constraint.has_ub():
            val, point = self._worst_case(g, maximize)
            viol = val - constraint.upper
            if viol > self._tol:
                best = Realization(point, viol, 'upper')
        if constraint.has_lb():
            val, point = self._worst_case(g, minimize)
            viol = constraint.lower - val
            if viol > self._tol and (best is None or viol > best.violation):
                best = Realization(point, viol, 'lower')
        return best


def resolve_solver(*candidates):
    """Return the first of ``candidates`` that is not None, as a solver"""
    for obj in candidates:
        if obj is not None:
            return SolverResolvable(solver_desc="separation solver")(obj)


def find_nominal_point(uncertainty_set, solver, lp=None):
    """Return a point of the uncertainty set.

    Raises :class:`SetupError` if the set is empty.
    """
    if not uncertainty_set.num_params:
        return np.zeros(0)
    if lp is None:
        lp = uncertainty_set.to_linear_program()
    res = solver.solve(lp)
    tc = res.termination_condition
    if tc == TerminationCondition.infeasible:
        raise SetupError(
            "The uncertainty set is empty: no realization of the "
            "uncertain parameters satisfies the uncertainty set "
            "constraints and bounds"
        )
    if tc != TerminationCondition.optimal or res.primal is None:
        raise SetupError(
            "Could not compute a nominal point of the uncertainty set "
            "(separation solver '%s' terminated with status %s)" % (solver.name, tc)
        )
    return np.asarray(res.primal, dtype=float)
