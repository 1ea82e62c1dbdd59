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

from pyrobust.core.expr.numeric_expr import NumericOperatorMixin, UncAffExpr


class UncertainParam(NumericOperatorMixin):
    """An uncertain parameter of a :class:`RobustModel`.

    Like :class:`~pyrobust.core.base.var.Variable`, this is a handle:
    the name, bounds and domain are stored in the ``robust_data`` tables
    of the owning model, indexed by :attr:`index`.  Parameters are
    created with :meth:`RobustModel.add_uncertain`.
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
        name = self._model.robust_data.param_names[self._index]
        if name is None:
            return "_unc%d" % (self._index,)
        return name

    @name.setter
    def name(self, val):
        self._model.robust_data.param_names[self._index] = (
            None if val is None else str(val)
        )

    @property
    def lower(self):
        return self._model.robust_data.param_lower[self._index]

    @lower.setter
    def lower(self, val):
        val = -math.inf if val is None else float(val)
        if val > self.upper:
            raise ValueError(
                "Lower bound (%s) of uncertain parameter '%s' is greater "
                "than its upper bound (%s)" % (val, self.name, self.upper)
            )
        self._model.robust_data.param_lower[self._index] = val

    @property
    def upper(self):
        return self._model.robust_data.param_upper[self._index]

    @upper.setter
    def upper(self, val):
        val = math.inf if val is None else float(val)
        if val < self.lower:
            raise ValueError(
                "Upper bound (%s) of uncertain parameter '%s' is less "
                "than its lower bound (%s)" % (val, self.name, self.lower)
            )
        self._model.robust_data.param_upper[self._index] = val

    @property
    def bounds(self):
        return self.lower, self.upper

    @property
    def domain(self):
        return self._model.robust_data.param_domain[self._index]

    def is_integer(self):
        return self.domain.is_integer

    def _to_expr(self):
        return UncAffExpr.from_param(self)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.name
