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

from pyrobust.common.enums import ObjectiveSense, minimize
from pyrobust.common.errors import OwnershipMismatchError
from pyrobust.common.numeric_types import string_intclamp
from pyrobust.core.base.set_types import RealDomain, Reals
from pyrobust.core.base.var import Variable
from pyrobust.core.expr.numeric_expr import LinearExpr, as_expression
from pyrobust.core.expr.relational_expr import LinearConstraint

logger = logging.getLogger(__name__)


class Model(object):
    """A deterministic linear (mixed-integer) optimization model.

    The model owns the tables holding the names, bounds, domains and
    values of its variables; :class:`Variable` objects are handles
    into those tables.

    Parameters
    ----------
    name: str, optional
        The model name (used when printing)

    """

    def __init__(self, name='unknown'):
        self.name = name
        self._variables = []
        self._var_names = []
        self._var_lb = []
        self._var_ub = []
        self._var_domain = []
        self._var_values = []
        self._constraints = []
        self._objective = LinearExpr()
        self._sense = minimize

    #
    # Variables
    #

    def add_variable(self, lb=None, ub=None, domain=Reals, name=None, value=None):
        """Declare a new variable and return its handle

        Parameters
        ----------
        lb: float, optional
            Lower bound (None for -inf)
        ub: float, optional
            Upper bound (None for inf)
        domain: RealDomain
            One of Reals, NonNegativeReals, Integers, NonNegativeIntegers
            or Binary.  The domain bounds are intersected with `lb`/`ub`.
        name: str, optional
            The display name (defaults to ``_col<index>``)
        value: float, optional
            Initial value

        """
        if not isinstance(domain, RealDomain):
            raise TypeError(
                "Variable domain must be a RealDomain (e.g., Reals, Integers), "
                "not %s" % (type(domain).__name__,)
            )
        lb = -math.inf if lb is None else float(lb)
        ub = math.inf if ub is None else float(ub)
        lb = max(lb, domain.bounds[0])
        ub = min(ub, domain.bounds[1])
        if lb > ub:
            raise ValueError(
                "Lower bound (%s) of variable '%s' is greater than its "
                "upper bound (%s)" % (lb, name, ub)
            )
        idx = len(self._variables)
        var = Variable(self, idx)
        self._variables.append(var)
        self._var_names.append(None if name is None else str(name))
        self._var_lb.append(lb)
        self._var_ub.append(ub)
        self._var_domain.append(domain)
        self._var_values.append(None if value is None else float(value))
        return var

    def add_variable_array(self, n, lb=None, ub=None, domain=Reals, name=None):
        """Declare `n` variables (named ``name[i]``) and return them as a list"""
        return [
            self.add_variable(
                lb, ub, domain, None if name is None else "%s[%d]" % (name, i)
            )
            for i in range(n)
        ]

    @property
    def variables(self):
        return tuple(self._variables)

    @property
    def num_variables(self):
        return len(self._variables)

    def _check_owner(self, obj, what):
        model = getattr(obj, 'model', None)
        if model is not None and model is not self:
            raise OwnershipMismatchError(
                "%s '%s' does not belong to model '%s'" % (what, obj, self.name)
            )

    #
    # Constraints
    #

    def add_constraint(self, con):
        """Add a deterministic constraint (built with ``<=``, ``>=``,
        ``==`` or :func:`inequality`) and return it"""
        if not isinstance(con, LinearConstraint):
            raise TypeError(
                "Model '%s' only accepts deterministic linear constraints "
                "(received %s); use a RobustModel for constraints involving "
                "uncertain parameters" % (self.name, type(con).__name__)
            )
        self._check_owner(con, "Constraint")
        self._constraints.append(con)
        return con

    @property
    def constraints(self):
        return tuple(self._constraints)

    #
    # Objective
    #

    def _validate_objective(self, expr):
        if expr.__class__ is float:
            return LinearExpr(expr)
        if expr.kind != 'linear':
            raise TypeError(
                "The objective of model '%s' must be linear in the variables "
                "(received '%s')" % (self.name, expr)
            )
        return expr

    def set_objective(self, expr, sense=minimize):
        """Set the objective to minimize (or maximize) `expr`"""
        expr = self._validate_objective(as_expression(expr))
        self._check_owner(expr, "Objective")
        self._objective = expr
        self._sense = ObjectiveSense(sense)

    @property
    def objective(self):
        return self._objective

    @property
    def sense(self):
        return self._sense

    #
    # Solution
    #

    def load_values(self, values):
        """Load a vector of values (indexed by variable index) into the
        variables"""
        for i, val in enumerate(values[: len(self._variables)]):
            self._var_values[i] = float(val)

    def solve(self, solver='highs', load_solutions=True, **kwds):
        """Solve the deterministic model

        Parameters
        ----------
        solver: str or SolverBase
            The solver name (registered with the SolverFactory) or instance
        load_solutions: bool
            Load the optimal values into the variables
        **kwds:
            Options passed to the solver

        Returns
        -------
        SolverResults

        """
        from pyrobust.repn.linear_program import LinearProgram
        from pyrobust.solvers import SolverFactory

        lp = LinearProgram.from_model(self)
        opt = SolverFactory(solver) if isinstance(solver, str) else solver
        results = opt.solve(lp, **kwds)
        if load_solutions and results.primal is not None:
            self.load_values(results.primal)
        return results

    #
    # Printing
    #

    def _bounds_str(self, var):
        lb, ub = var.bounds
        if lb > -math.inf and ub < math.inf:
            if lb == ub:
                return "%s == %s" % (var.name, string_intclamp(lb))
            return "%s <= %s <= %s" % (
                string_intclamp(lb),
                var.name,
                string_intclamp(ub),
            )
        elif lb > -math.inf:
            return "%s >= %s" % (var.name, string_intclamp(lb))
        elif ub < math.inf:
            return "%s <= %s" % (var.name, string_intclamp(ub))
        return "%s free" % (var.name,)

    def _pprint_deterministic(self, ostream):
        ostream.write("%s %s\n" % (self._sense, self._objective))
        ostream.write("Subject to\n")
        for con in self._constraints:
            ostream.write(" %s\n" % (con,))
        for var in self._variables:
            line = " " + self._bounds_str(var)
            if var.domain is not Reals:
                line += ", %s" % (var.domain,)
            ostream.write(line + "\n")

    def pprint(self, ostream=None):
        """Print the model"""
        if ostream is None:
            ostream = sys.stdout
        self._pprint_deterministic(ostream)
