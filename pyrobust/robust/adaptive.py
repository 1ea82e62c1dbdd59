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

"""Affine adaptive policies

A variable declared adaptive with :meth:`RobustModel.set_adapt` is
replaced, in every constraint and in the objective, by the affine
decision rule

.. math::

    x(u) = x_0 + \\sum_{k \\in D} y_k u_k

where ``D`` is the set of parameters the variable depends on.  The base
``x_0`` is the original column and one auxiliary column ``y_k`` is
created per (variable, parameter) pair.  The substitution is performed
by :class:`AdaptiveExpander`, an explicit pass over a
:class:`~pyrobust.robust.working_model.WorkingModel`.
"""

import enum
import logging
import math
from collections.abc import Mapping

import numpy as np

from pyrobust.common.enums import minimize
from pyrobust.common.errors import NonlinearExpressionError
from pyrobust.core.expr.numeric_expr import UncAffExpr
from pyrobust.core.expr.printer import linear_to_string
from pyrobust.repn.standard_repn import MixedRepn, UncertainRepn
from pyrobust.robust.working_model import MixedRow, copy_repn

logger = logging.getLogger(__name__)


class AdaptivePolicy(enum.Enum):
    """The kind of decision rule of a variable"""

    fixed = 'fixed'
    """Here-and-now: the value does not depend on the parameters."""

    affine = 'affine'
    """Wait-and-see: an affine function of the parameters."""

    def __str__(self):
        return self.name


def flatten(obj):
    """Yield the leaves of nested lists, tuples, sets, dicts (values)
    and numpy arrays"""
    if isinstance(obj, Mapping):
        for val in obj.values():
            yield from flatten(val)
    elif isinstance(obj, np.ndarray):
        for val in obj.flat:
            yield from flatten(val)
    elif isinstance(obj, (list, tuple, set, frozenset)):
        for val in obj:
            yield from flatten(val)
    else:
        yield obj


class AdaptivePolicyValue(object):
    """The optimal affine policy of an adaptive variable

    Attributes
    ----------
    variable: Variable
    base: float
        The policy value when every parameter it depends on is zero
    coefficients: dict
        UncertainParam -> float
    """

    def __init__(self, variable, base, coefficients):
        self.variable = variable
        self.base = float(base)
        self.coefficients = dict(coefficients)

    def evaluate(self, realization):
        """Evaluate the policy at a realization of the parameters

        `realization` is a mapping from UncertainParam to value, a
        :class:`Realization`, or a sequence indexed by parameter index.
        """
        if isinstance(realization, Mapping):
            vals = [realization[u] for u in self.coefficients]
        else:
            vals = [realization[u.index] for u in self.coefficients]
        return self.base + math.fsum(
            c * float(v) for c, v in zip(self.coefficients.values(), vals)
        )

    def as_expression(self):
        """The policy as an :class:`UncAffExpr`"""
        return UncAffExpr(self.base, list(self.coefficients.items()))

    def __str__(self):
        return "%s(u) = %s" % (
            self.variable.name,
            linear_to_string(
                [(u.name, c) for u, c in self.coefficients.items()], self.base
            ),
        )


class AdaptiveExpander(object):
    """Substitute affine policies for adaptive variables.

    Parameters
    ----------
    policies: dict
        variable (column) index -> list of parameter indices, for every
        variable with an affine policy
    default_oracle: Oracle
        The oracle of the mixed rows created by the expander
    param_names: list of str, optional
        Used to name the auxiliary columns
    """

    def __init__(self, policies, default_oracle, param_names=None):
        self.policies = {j: list(deps) for j, deps in policies.items() if deps}
        self.default_oracle = default_oracle
        self.param_names = param_names

    @classmethod
    def from_model(cls, model):
        rd = model.robust_data
        return cls(
            {
                j: deps
                for j, (policy, deps) in rd.adapt.items()
                if policy is AdaptivePolicy.affine
            },
            rd.default_oracle,
            [u.name for u in rd.params],
        )

    def apply(self, working):
        """Return a new working model with the policies substituted"""
        wm = working.clone()
        adaptive = self.policies
        if adaptive:
            self._lift_rows(wm)
            self._lift_bounds(wm)
        self._lift_objective(wm)
        for row in wm.mixed_rows:
            self._substitute(wm, row.repn, row.name)
        logger.debug(
            "Adaptive expansion: %s adaptive variables, %s auxiliary "
            "columns, %s mixed rows",
            len(adaptive),
            len(wm.aux_columns),
            len(wm.mixed_rows),
        )
        return wm

    def _param_name(self, k):
        if self.param_names is None:
            return "_unc%d" % (k,)
        return self.param_names[k]

    def _aux_column(self, wm, j, k):
        col = wm.aux_columns.get((j, k))
        if col is None:
            col = wm.lp.add_column(
                name="_adapt[%s,%s]" % (wm.lp.col_names[j], self._param_name(k))
            )
            wm.aux_columns[j, k] = col
        return col

    def _substitute(self, wm, repn, name):
        for j in [j for j in repn.linear if j in self.policies]:
            coef = repn.linear[j]
            if not coef.is_constant():
                raise NonlinearExpressionError(
                    "Adaptive variable '%s' has an uncertain coefficient in "
                    "constraint '%s'; substituting its affine policy would "
                    "make the constraint quadratic in the uncertain "
                    "parameters" % (wm.lp.col_names[j], name)
                )
            for k in self.policies[j]:
                col = self._aux_column(wm, j, k)
                entry = repn.linear.setdefault(col, UncertainRepn())
                entry.linear[k] = entry.linear.get(k, 0.0) + coef.constant

    def _lift_rows(self, wm):
        lp = wm.lp
        lifted = [
            i
            for i, row in enumerate(lp.rows)
            if any(j in self.policies for j in row)
        ]
        for i in lifted:
            repn = MixedRepn(
                {j: UncertainRepn(constant=c) for j, c in lp.rows[i].items()}
            )
            wm.mixed_rows.append(
                MixedRow(
                    repn,
                    lp.row_lower[i],
                    lp.row_upper[i],
                    lp.row_names[i],
                    self.default_oracle,
                    "lifted:%s" % (lp.row_names[i],),
                )
            )
        lp.remove_rows(lifted)

    def _lift_bounds(self, wm):
        lp = wm.lp
        for j in sorted(self.policies):
            lower, upper = lp.col_lower[j], lp.col_upper[j]
            if lower > -math.inf or upper < math.inf:
                name = lp.col_names[j]
                wm.mixed_rows.append(
                    MixedRow(
                        MixedRepn({j: UncertainRepn(constant=1.0)}),
                        lower,
                        upper,
                        "%s bounds" % (name,),
                        self.default_oracle,
                        "bounds:%s" % (name,),
                    )
                )
            lp.col_lower[j] = -math.inf
            lp.col_upper[j] = math.inf

    def _lift_objective(self, wm):
        obj = wm.objective
        sense = wm.lp.sense
        if obj.is_deterministic() and not any(j in self.policies for j in obj.linear):
            wm.lp.set_objective(
                [(j, coef.constant) for j, coef in obj.linear.items()],
                obj.constant.constant,
                sense,
            )
            return
        # epigraph: min t s.t. obj(u) <= t (max t s.t. obj(u) >= t)
        t = wm.lp.add_column(name="_epigraph")
        wm.epigraph_column = t
        repn = copy_repn(obj)
        repn.linear[t] = UncertainRepn(constant=-1.0)
        if sense is minimize:
            lower, upper = None, 0.0
        else:
            lower, upper = 0.0, None
        wm.mixed_rows.append(
            MixedRow(repn, lower, upper, "_epigraph", self.default_oracle, 'objective')
        )
        wm.lp.set_objective([(t, 1.0)], 0.0, sense)
