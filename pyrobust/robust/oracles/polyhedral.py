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

from pyrobust.common.errors import SetupError
from pyrobust.robust.oracles.base import AuxRow, AuxVar, Oracle, Reformulation
from pyrobust.robust.oracles.cutting_plane import (
    CuttingPlaneOracle,
    find_nominal_point,
    resolve_solver,
)

logger = logging.getLogger(__name__)


class PolyhedralOracle(Oracle):
    """Robust constraints over a polyhedral uncertainty set by LP duality.

    The upper side of a constraint ``sum_j (a_j + P_j u) x_j + c0 + c u
    <= ub`` holds for every ``u`` in

    .. math::

        U = \\{ u : A u \\le b, \\; E u = f, \\; l \\le u \\le h \\}

    if and only if there are ``y >= 0``, ``z``, ``w+ >= 0``, ``w- >= 0``
    with

    .. math::

        a^T x + c_0 + b^T y + f^T z + h^T w^+ - l^T w^- \\le ub

        A^T y + E^T z + w^+ - w^- = P^T x + c

    (strong duality of ``max_u (P^T x + c)^T u``).  The lower side is
    handled as the upper side of the negated constraint.  Only the
    connected component of the uncertainty set touched by the
    constraint is dualized, and no dual variable is created for an
    infinite parameter bound.

    The reformulation is exact and never calls a solver; it requires
    continuous uncertain parameters.

    Parameters
    ----------
    prefer_cuts: bool
        If True, the oracle delegates to a :class:`CuttingPlaneOracle`
        instead of dualizing.
    """

    def __init__(self, prefer_cuts=False):
        self.prefer_cuts = bool(prefer_cuts)
        self._uset = None
        self._cuts = CuttingPlaneOracle() if self.prefer_cuts else None

    @property
    def uses_separation(self):
        return self.prefer_cuts

    def setup(self, uncertainty_set, config):
        self._uset = uncertainty_set
        if self.prefer_cuts:
            self._cuts.setup(uncertainty_set, config)
            return
        if uncertainty_set.has_integer_params():
            names = [
                uncertainty_set.names[k]
                for k in range(uncertainty_set.num_params)
                if uncertainty_set.integer[k]
            ]
            raise SetupError(
                "PolyhedralOracle cannot dualize an uncertainty set with "
                "integer uncertain parameters (%s); use a CuttingPlaneOracle "
                "or PolyhedralOracle(prefer_cuts=True)" % (", ".join(names),)
            )
        # the bounds alone always admit a point; rows may rule out all of them
        if len(uncertainty_set.b_ub) or len(uncertainty_set.b_eq):
            find_nominal_point(
                uncertainty_set, resolve_solver(config.separation_solver, config.solver)
            )

    def reformulate(self, constraint):
        if self.prefer_cuts:
            return self._cuts.reformulate(constraint)
        params = self._uset.component_of(constraint.parameters())
        if not params:
            linear, lower, upper = constraint.specialize(())
            return Reformulation(
                constraints=[AuxRow(linear.items(), lower, upper, constraint.name)]
            )
        ans = Reformulation()
        tag = "_dual[%s]" % (constraint.source,)
        if constraint.has_ub():
            self._dualize(constraint.repn, constraint.upper, params, tag + ".ub", ans)
        if constraint.has_lb():
            negated = constraint.repn.scaled(-1.0)
            self._dualize(negated, -constraint.lower, params, tag + ".lb", ans)
        logger.debug(
            "Dualized '%s' over %s uncertain parameters: %s auxiliary "
            "variables, %s rows",
            constraint.name,
            len(params),
            len(ans.variables),
            len(ans.constraints),
        )
        return ans

    def separate(self, constraint, candidate):
        if self.prefer_cuts:
            self._cuts.time_limit = self.time_limit
            return self._cuts.separate(constraint, candidate)
        return None

    def _dualize(self, repn, rhs, params, tag, ans):
        """Append the dual variables and rows of ``repn <= rhs``"""
        A_ub, b_ub, A_eq, b_eq, lower, upper = self._uset.restrict(params)
        y = [AuxVar(0, None, "%s.y[%d]" % (tag, i)) for i in range(len(b_ub))]
        z = [AuxVar(None, None, "%s.z[%d]" % (tag, i)) for i in range(len(b_eq))]
        w_up = {
            pos: AuxVar(0, None, "%s.w_up[%d]" % (tag, k))
            for pos, k in enumerate(params)
            if upper[pos] < math.inf
        }
        w_lo = {
            pos: AuxVar(0, None, "%s.w_lo[%d]" % (tag, k))
            for pos, k in enumerate(params)
            if lower[pos] > -math.inf
        }
        ans.variables.extend(y)
        ans.variables.extend(z)
        ans.variables.extend(w_up.values())
        ans.variables.extend(w_lo.values())

        # a^T x + b^T y + f^T z + h^T w+ - l^T w- <= rhs - c0
        terms = [(j, coef.constant) for j, coef in repn.linear.items()]
        terms.extend(zip(y, b_ub))
        terms.extend(zip(z, b_eq))
        terms.extend((w, upper[pos]) for pos, w in w_up.items())
        terms.extend((w, -lower[pos]) for pos, w in w_lo.items())
        ans.constraints.append(
            AuxRow(terms, None, rhs - repn.constant.constant, tag + ".obj")
        )

        # A^T y + E^T z + w+ - w- - P^T x == c
        for pos, k in enumerate(params):
            terms = [(y[i], A_ub[i, pos]) for i in range(len(y)) if A_ub[i, pos]]
            terms.extend((z[i], A_eq[i, pos]) for i in range(len(z)) if A_eq[i, pos])
            if pos in w_up:
                terms.append((w_up[pos], 1.0))
            if pos in w_lo:
                terms.append((w_lo[pos], -1.0))
            terms.extend(
                (j, -coef.linear[k])
                for j, coef in repn.linear.items()
                if k in coef.linear
            )
            c_k = repn.constant.linear.get(k, 0.0)
            if not terms and not c_k:
                continue
            ans.constraints.append(AuxRow(terms, c_k, c_k, "%s.dual[%d]" % (tag, k)))
