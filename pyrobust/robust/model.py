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
import sys

from pyrobust.common.config import InEnum
from pyrobust.common.errors import TypeMismatchError
from pyrobust.common.numeric_types import string_intclamp
from pyrobust.core.base.model import Model
from pyrobust.core.base.set_types import RealDomain, Reals
from pyrobust.core.base.var import Variable
from pyrobust.core.expr.relational_expr import (
    LinearConstraint,
    UncConstraint,
    UncSetConstraint,
)
from pyrobust.robust.adaptive import AdaptivePolicy, flatten
from pyrobust.robust.oracles.base import Oracle
from pyrobust.robust.oracles.polyhedral import PolyhedralOracle
from pyrobust.robust.param import UncertainParam

logger = logging.getLogger(__name__)


class RobustData(object):
    """The robust state of a :class:`RobustModel`

    All lists only grow.  ``uncertain_constraints`` and ``oracles`` are
    index-aligned (``None`` meaning the default oracle), as are the
    parameter tables (``params``, ``param_names``, ``param_lower``,
    ``param_upper``, ``param_domain``).

    Attributes
    ----------
    uncertain_constraints: list of UncConstraint
    oracles: list of Oracle or None
    uncertainty_set: list of UncSetConstraint
    adapt: dict
        variable index -> (AdaptivePolicy, list of parameter indices)
    default_oracle: Oracle
    """

    def __init__(self, default_oracle=None):
        self.uncertain_constraints = []
        self.oracles = []
        self.uncertainty_set = []
        self.params = []
        self.param_names = []
        self.param_lower = []
        self.param_upper = []
        self.param_domain = []
        self.adapt = {}
        self.default_oracle = (
            PolyhedralOracle() if default_oracle is None else default_oracle
        )

    @property
    def num_params(self):
        return len(self.params)


def get_robust_data(model):
    """Return the :class:`RobustData` of a :class:`RobustModel`"""
    if not isinstance(model, RobustModel):
        raise TypeMismatchError(
            "This functionality is only available for RobustModels "
            "(received %s)" % (type(model).__name__,)
        )
    return model.robust_data


class RobustModel(Model):
    """A linear model with uncertain parameters.

    In addition to the variables and deterministic constraints of a
    :class:`~pyrobust.core.base.model.Model`, a robust model holds

    - uncertain parameters (:meth:`add_uncertain`),
    - the uncertainty set: bounds on the parameters and linear
      constraints involving only parameters,
    - uncertain constraints: linear constraints in the variables whose
      coefficients are affine in the parameters, which must hold for
      every realization in the uncertainty set, each bound to an
      :class:`~pyrobust.robust.oracles.base.Oracle`, and
    - adaptive policies (:meth:`set_adapt`).

    Parameters
    ----------
    name: str, optional
    default_oracle: Oracle, optional
        The oracle of constraints added without one (a
        :class:`PolyhedralOracle` by default)

    """

    def __init__(self, name='unknown', default_oracle=None):
        super().__init__(name)
        if default_oracle is not None and not isinstance(default_oracle, Oracle):
            raise TypeMismatchError(
                "The default oracle must be an Oracle (received %s)"
                % (type(default_oracle).__name__,)
            )
        self.robust_data = RobustData(default_oracle)

    #
    # Uncertain parameters
    #

    def add_uncertain(self, lower=None, upper=None, name=None, domain=Reals):
        """Declare an uncertain parameter and return its handle

        Parameters
        ----------
        lower: float, optional
            Lower bound (None for -inf)
        upper: float, optional
            Upper bound (None for inf)
        name: str, optional
            The display name (defaults to ``_unc<index>``)
        domain: RealDomain
            Reals (default) or an integer domain

        """
        if not isinstance(domain, RealDomain):
            raise TypeError(
                "Uncertain parameter domain must be a RealDomain (e.g., "
                "Reals, Integers), not %s" % (type(domain).__name__,)
            )
        lower = -math.inf if lower is None else float(lower)
        upper = math.inf if upper is None else float(upper)
        lower = max(lower, domain.bounds[0])
        upper = min(upper, domain.bounds[1])
        if lower > upper:
            raise ValueError(
                "Lower bound (%s) of uncertain parameter '%s' is greater "
                "than its upper bound (%s)" % (lower, name, upper)
            )
        rd = self.robust_data
        param = UncertainParam(self, rd.num_params)
        rd.params.append(param)
        rd.param_names.append(None if name is None else str(name))
        rd.param_lower.append(lower)
        rd.param_upper.append(upper)
        rd.param_domain.append(domain)
        return param

    def add_uncertain_array(self, n, lower=None, upper=None, name=None, domain=Reals):
        """Declare `n` uncertain parameters (named ``name[i]``) and
        return them as a list"""
        return [
            self.add_uncertain(
                lower, upper, None if name is None else "%s[%d]" % (name, i), domain
            )
            for i in range(n)
        ]

    @property
    def uncertain_params(self):
        return tuple(self.robust_data.params)

    @property
    def num_uncertain_params(self):
        return self.robust_data.num_params

    #
    # Constraints
    #

    def add_constraint(self, con, oracle=None):
        """Add a constraint

        - deterministic constraints are added to the underlying model,
        - constraints involving only uncertain parameters become part of
          the uncertainty set (returns None),
        - constraints involving both are uncertain constraints, handled
          by `oracle` (the model default if None).

        """
        if isinstance(con, UncConstraint):
            if oracle is not None and not isinstance(oracle, Oracle):
                raise TypeMismatchError(
                    "Expected an Oracle for constraint '%s' (received %s)"
                    % (con, type(oracle).__name__)
                )
            self._check_owner(con, "Constraint")
            rd = self.robust_data
            rd.uncertain_constraints.append(con)
            rd.oracles.append(oracle)
            return con
        if oracle is not None:
            raise TypeMismatchError(
                "An oracle can only be given for constraints involving both "
                "variables and uncertain parameters (received '%s')" % (con,)
            )
        if isinstance(con, UncSetConstraint):
            self._check_owner(con, "Constraint")
            self.robust_data.uncertainty_set.append(con)
            return None
        if isinstance(con, LinearConstraint):
            return super().add_constraint(con)
        raise TypeError(
            "Model '%s' cannot add object of type %s as a constraint"
            % (self.name, type(con).__name__)
        )

    @property
    def uncertain_constraints(self):
        return tuple(self.robust_data.uncertain_constraints)

    @property
    def uncertainty_set_constraints(self):
        return tuple(self.robust_data.uncertainty_set)

    def set_default_oracle(self, oracle):
        if not isinstance(oracle, Oracle):
            raise TypeMismatchError(
                "The default oracle must be an Oracle (received %s)"
                % (type(oracle).__name__,)
            )
        self.robust_data.default_oracle = oracle

    #
    # Objective
    #

    def _validate_objective(self, expr):
        if expr.__class__ is float:
            return super()._validate_objective(expr)
        return expr

    #
    # Adaptive policies
    #

    def set_adapt(self, variables, policy=AdaptivePolicy.fixed, depends_on=()):
        """Declare the decision rule of one or more variables

        Parameters
        ----------
        variables: Variable or container of Variables
            Nested lists, tuples, dicts and numpy arrays are flattened
        policy: AdaptivePolicy or str
            ``'fixed'`` (here-and-now) or ``'affine'``
        depends_on: UncertainParam or container of UncertainParams
            The parameters an affine policy depends on (duplicates are
            removed)

        """
        try:
            policy = InEnum(AdaptivePolicy)(policy)
        except ValueError:
            raise TypeMismatchError(
                "Unrecognized adaptability type '%s' (expected one of %s)"
                % (policy, ", ".join(p.name for p in AdaptivePolicy))
            ) from None

        params = []
        seen = set()
        for u in flatten(depends_on):
            if not isinstance(u, UncertainParam):
                raise TypeMismatchError(
                    "Adaptive variables can only depend on uncertain "
                    "parameters (received %s)" % (type(u).__name__,)
                )
            self._check_owner(u, "Uncertain parameter")
            if u.index not in seen:
                seen.add(u.index)
                params.append(u.index)
        if policy is AdaptivePolicy.fixed and params:
            raise TypeMismatchError(
                "A fixed policy cannot depend on uncertain parameters "
                "(received %s)" % (", ".join(map(str, flatten(depends_on))),)
            )

        variables = list(flatten(variables))
        for var in variables:
            if not isinstance(var, Variable):
                raise TypeMismatchError(
                    "Only variables can be made adaptive (received %s)"
                    % (type(var).__name__,)
                )
            self._check_owner(var, "Variable")
            if policy is AdaptivePolicy.affine and var.is_integer():
                raise TypeMismatchError(
                    "Integer variable '%s' cannot follow an affine policy" % (var,)
                )
        for var in variables:
            if policy is AdaptivePolicy.fixed:
                self.robust_data.adapt.pop(var.index, None)
            else:
                self.robust_data.adapt[var.index] = (policy, list(params))

    def get_adapt(self, var):
        """Return ``(policy, [UncertainParam, ...])`` of a variable"""
        self._check_owner(var, "Variable")
        policy, deps = self.robust_data.adapt.get(
            var.index, (AdaptivePolicy.fixed, [])
        )
        return policy, [self.robust_data.params[k] for k in deps]

    #
    # Solve
    #

    def solve(self, **kwds):
        """Solve the robust counterpart of the model

        See :func:`pyrobust.robust.solve.solve_robust` for the options.

        Returns
        -------
        RobustSolveResults

        """
        from pyrobust.robust.solve import solve_robust

        return solve_robust(self, **kwds)

    #
    # Printing
    #

    def _param_str(self, param):
        lower, upper = param.bounds
        ans = "%s <= %s <= %s" % (
            string_intclamp(lower),
            param.name,
            string_intclamp(upper),
        )
        if param.domain is not Reals:
            ans += ", %s" % (param.domain,)
        return ans

    def pprint(self, ostream=None):
        """Print the model, its uncertain constraints and its
        uncertainty set"""
        if ostream is None:
            ostream = sys.stdout
        self._pprint_deterministic(ostream)
        rd = self.robust_data
        if rd.uncertain_constraints:
            ostream.write("Uncertain constraints:\n")
            for con in rd.uncertain_constraints:
                ostream.write(" %s\n" % (con,))
        ostream.write("Uncertainty set:\n")
        for con in rd.uncertainty_set:
            ostream.write(" %s\n" % (con,))
        for param in rd.params:
            ostream.write(" %s\n" % (self._param_str(param),))
        adaptive = sorted(rd.adapt.items())
        if adaptive:
            ostream.write("Adaptive variables:\n")
            for j, (policy, deps) in adaptive:
                ostream.write(
                    " %s: %s in (%s)\n"
                    % (
                        self._variables[j].name,
                        policy,
                        ", ".join(rd.params[k].name for k in deps),
                    )
                )
