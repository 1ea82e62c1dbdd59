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

"""Relational (constraint) expressions.

A constraint is stored in ranged form ``lower <= body <= upper`` where
the numeric constant of the body has been moved into the bounds.  The
constraint class is determined by the kind of body:

- :class:`LinearConstraint`: body is linear in the variables
- :class:`UncSetConstraint`: body is linear in the uncertain parameters
  (these define the uncertainty set)
- :class:`UncConstraint`: body is linear in the variables with
  coefficients that are affine in the uncertain parameters
"""

import math

from pyrobust.common.errors import PyrobustException
from pyrobust.common.numeric_types import is_numeric
from pyrobust.core.expr import printer


class ConstraintBase(object):
    """Base class for ranged linear constraints"""

    __slots__ = ('body', 'lower', 'upper')

    def __init__(self, body, lower=None, upper=None):
        self.body = body
        self.lower = -math.inf if lower is None else float(lower)
        self.upper = math.inf if upper is None else float(upper)

    def __bool__(self):
        raise PyrobustException(
            "Cannot convert relational expression '%s' to bool.  This error "
            "is usually caused by using a constraint in a boolean context "
            "such as an if statement, or a chained inequality "
            "(use inequality(lower, body, upper) for ranged constraints)." % (self,)
        )

    @property
    def model(self):
        return self.body.model

    @property
    def equality(self):
        return self.lower == self.upper

    def has_lb(self):
        return self.lower > -math.inf

    def has_ub(self):
        return self.upper < math.inf

    def to_string(self):
        return printer.relational_to_string(
            self.body.to_string(), self.lower, self.upper
        )

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return self.to_string()


class LinearConstraint(ConstraintBase):
    """``lower <= LinearExpr <= upper``"""

    __slots__ = ()


class UncSetConstraint(ConstraintBase):
    """``lower <= UncAffExpr <= upper``; a constraint on the uncertain
    parameters that (together with the parameter bounds) defines the
    uncertainty set."""

    __slots__ = ()


class UncConstraint(ConstraintBase):
    """``lower <= FullAffExpr <= upper``; a constraint that must hold
    for every realization of the uncertain parameters."""

    __slots__ = ()


_constraint_types = {
    'linear': LinearConstraint,
    'uncertain': UncSetConstraint,
    'full': UncConstraint,
}


def build_constraint(diff, lower=None, upper=None):
    """Build the constraint ``lower <= diff <= upper``

    The numeric constant of `diff` is moved into the (finite) bounds.

    """
    body, const = diff.split_constant()
    if lower is not None:
        lower = float(lower) - const
    if upper is not None:
        upper = float(upper) - const
    return _constraint_types[body.kind](body, lower, upper)


def inequality(lower=None, body=None, upper=None):
    """Create a ranged constraint ``lower <= body <= upper``

    Python's chained comparisons (``0 <= x <= 1``) cannot be supported,
    so this function is the way to declare two-sided constraints.

    Parameters
    ----------
    lower: float, optional
        The lower bound (None for no bound)

    body: Variable, UncertainParam or expression

    upper: float, optional
        The upper bound (None for no bound)

    """
    for bound in (lower, upper):
        if bound is not None and not is_numeric(bound):
            raise TypeError(
                "inequality() bounds must be numeric constants, not %s"
                % (type(bound).__name__,)
            )
    if is_numeric(body) or not hasattr(body, '_to_expr'):
        raise TypeError(
            "inequality() body must be a variable, uncertain parameter "
            "or expression, not %s" % (type(body).__name__,)
        )
    return build_constraint(body._to_expr(), lower, upper)
