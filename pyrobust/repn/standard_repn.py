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

"""Index-based ("standard") representations of linear expressions.

The solve-time machinery works on these representations rather than on
the user-facing expression objects: variables are referenced by working
model column index and uncertain parameters by parameter index.

- :class:`LinearRepn`: ``sum(c_j x_j) + c0``
- :class:`UncertainRepn`: ``sum(c_k u_k) + c0``
- :class:`MixedRepn`: ``sum_j (a_j + P_j u) x_j + (c0 + c u)``
"""

import math

from pyrobust.core.expr.numeric_expr import as_expression


class LinearRepn(object):
    __slots__ = ('linear', 'constant')

    def __init__(self, linear=None, constant=0.0):
        self.linear = dict(linear) if linear else {}
        self.constant = float(constant)

    def __str__(self):
        return "LinearRepn(%s, %s)" % (self.linear, self.constant)


class UncertainRepn(object):
    """``sum(linear[k] * u_k) + constant``"""

    __slots__ = ('linear', 'constant')

    def __init__(self, linear=None, constant=0.0):
        self.linear = dict(linear) if linear else {}
        self.constant = float(constant)

    def is_constant(self):
        return not self.linear

    def evaluate(self, point):
        """Evaluate at a parameter realization (indexed by parameter index)"""
        return (
            math.fsum(c * float(point[k]) for k, c in self.linear.items())
            + self.constant
        )

    def scaled(self, factor):
        return UncertainRepn(
            {k: c * factor for k, c in self.linear.items()}, self.constant * factor
        )

    def __str__(self):
        return "UncertainRepn(%s, %s)" % (self.linear, self.constant)


class MixedRepn(object):
    """``sum_j linear[j](u) * x_j + constant(u)``, where every
    coefficient is an :class:`UncertainRepn`"""

    __slots__ = ('linear', 'constant')

    def __init__(self, linear=None, constant=None):
        self.linear = dict(linear) if linear else {}
        self.constant = UncertainRepn() if constant is None else constant

    def parameters(self):
        """Sorted indices of the uncertain parameters in the expression"""
        ans = set(self.constant.linear)
        for coef in self.linear.values():
            ans.update(coef.linear)
        return sorted(ans)

    def is_deterministic(self):
        return self.constant.is_constant() and all(
            coef.is_constant() for coef in self.linear.values()
        )

    def specialize(self, point):
        """Fix the uncertain parameters at `point`; returns ``(linear,
        constant)`` where `linear` maps column to float"""
        linear = {}
        for j, coef in self.linear.items():
            val = coef.evaluate(point)
            if val != 0:
                linear[j] = val
        return linear, self.constant.evaluate(point)

    def uncertain_part(self, x):
        """Fix the variables at `x`; returns the :class:`UncertainRepn`
        ``g(u)`` of the expression as a function of the parameters"""
        terms = [(self.constant, 1.0)]
        terms.extend((coef, float(x[j])) for j, coef in self.linear.items())
        linear = {}
        for coef, xj in terms:
            for k, c in coef.linear.items():
                linear.setdefault(k, []).append(c * xj)
        return UncertainRepn(
            {k: math.fsum(v) for k, v in linear.items()},
            math.fsum(coef.constant * xj for coef, xj in terms),
        )

    def evaluate(self, x, point):
        linear, const = self.specialize(point)
        return math.fsum(c * float(x[j]) for j, c in linear.items()) + const

    def scaled(self, factor):
        return MixedRepn(
            {j: c.scaled(factor) for j, c in self.linear.items()},
            self.constant.scaled(factor),
        )

    def __str__(self):
        return "MixedRepn({%s}, %s)" % (
            ", ".join("%s: %s" % (j, c) for j, c in self.linear.items()),
            self.constant,
        )


def _uncertain_repn(e):
    return UncertainRepn({u.index: c for u, c in e.terms}, e.constant)


def generate_linear_repn(expr):
    """Return the :class:`LinearRepn` of a deterministic expression"""
    e = as_expression(expr)
    if e.__class__ is float:
        return LinearRepn(constant=e)
    e = e.normalized()
    if e.kind != 'linear':
        if e.kind == 'uncertain' and not e.terms:
            return LinearRepn(constant=e.constant)
        raise TypeError("Expression '%s' is not deterministic" % (e,))
    return LinearRepn({v.index: c for v, c in e.terms}, e.constant)


def generate_uncertain_repn(expr):
    """Return the :class:`UncertainRepn` of an expression in the
    uncertain parameters"""
    e = as_expression(expr)
    if e.__class__ is float:
        return UncertainRepn(constant=e)
    e = e.normalized()
    if e.kind != 'uncertain':
        if e.kind == 'linear' and not e.terms:
            return UncertainRepn(constant=e.constant)
        raise TypeError("Expression '%s' contains variables" % (e,))
    return _uncertain_repn(e)


def generate_mixed_repn(expr):
    """Return the :class:`MixedRepn` of any linear expression"""
    e = as_expression(expr)
    if e.__class__ is float:
        return MixedRepn(constant=UncertainRepn(constant=e))
    e = e.normalized()
    if e.kind == 'linear':
        return MixedRepn(
            {v.index: UncertainRepn(constant=c) for v, c in e.terms},
            UncertainRepn(constant=e.constant),
        )
    if e.kind == 'uncertain':
        return MixedRepn(constant=_uncertain_repn(e))
    return MixedRepn(
        {v.index: _uncertain_repn(c) for v, c in e.terms}, _uncertain_repn(e.constant)
    )
