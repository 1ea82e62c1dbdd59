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

import math

from pyrobust.core.expr.numeric_expr import LinearExpr, NumericOperatorMixin


class Variable(NumericOperatorMixin):
    """A decision variable.

    Variables are lightweight handles: the name, bounds, domain and
    value live in the tables of the owning :class:`Model`, and the
    variable is identified by its (0-based) index in those tables.
    Variables are created with :meth:`Model.add_variable`.
    """

    __slots__ = ('_model', '_index')

    def __init__(self, model, index):
        self._model = model
        self._index = index

    @property
    def model(self):
        return self._model

    @property
    def index(self):
        return self._index

    @property
    def name(self):
        name = self._model._var_names[self._index]
        if name is None:
            return "_col%d" % (self._index,)
        return name

    @name.setter
    def name(self, val):
        self._model._var_names[self._index] = None if val is None else str(val)

    @property
    def lb(self):
        return self._model._var_lb[self._index]

    @lb.setter
    def lb(self, val):
        self.setlb(val)

    @property
    def ub(self):
        return self._model._var_ub[self._index]

    @ub.setter
    def ub(self, val):
        self.setub(val)

    def setlb(self, val):
        val = -math.inf if val is None else float(val)
        if val > self.ub:
            raise ValueError(
                "Lower bound (%s) of variable '%s' is greater than its "
                "upper bound (%s)" % (val, self.name, self.ub)
            )
        self._model._var_lb[self._index] = val

    def setub(self, val):
        val = math.inf if val is None else float(val)
        if val < self.lb:
            raise ValueError(
                "Upper bound (%s) of variable '%s' is less than its "
                "lower bound (%s)" % (val, self.name, self.lb)
            )
        self._model._var_ub[self._index] = val

    @property
    def bounds(self):
        return self.lb, self.ub

    @property
    def domain(self):
        return self._model._var_domain[self._index]

    def is_integer(self):
        return self.domain.is_integer

    @property
    def value(self):
        return self._model._var_values[self._index]

    @value.setter
    def value(self, val):
        self._model._var_values[self._index] = None if val is None else float(val)

    def _to_expr(self):
        return LinearExpr.from_var(self)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.name
