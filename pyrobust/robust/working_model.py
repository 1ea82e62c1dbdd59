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

"""The working model of a robust solve

A :class:`WorkingModel` is built from the declarative state of a
:class:`RobustModel` at the start of every solve.  It holds

- the deterministic part as a
  :class:`~pyrobust.repn.linear_program.LinearProgram`, and
- the constraints that still involve uncertain parameters as
  :class:`MixedRow` objects, each bound to an oracle.

The adaptive expander and the oracles transform the working model until
no mixed rows remain (or until the remaining ones are handled by the
cutting-plane loop).  The user's model is never modified.
"""

import math

from pyrobust.common.errors import DeveloperError
from pyrobust.core.expr.printer import linear_to_string, relational_to_string
from pyrobust.repn.linear_program import LinearProgram
from pyrobust.repn.standard_repn import (
    MixedRepn,
    UncertainRepn,
    generate_linear_repn,
    generate_mixed_repn,
)
from pyrobust.robust.oracles.base import AuxVar


def copy_repn(repn):
    """Return a deep copy of a :class:`MixedRepn`"""
    return MixedRepn(
        {
            j: UncertainRepn(coef.linear, coef.constant)
            for j, coef in repn.linear.items()
        },
        UncertainRepn(repn.constant.linear, repn.constant.constant),
    )


class MixedRow(object):
    """A working-model constraint
    ``lower <= sum_j a_j(u) x_j + c(u) <= upper``

    Parameters
    ----------
    repn: MixedRepn
        The body (columns and parameters referenced by index)
    lower, upper: float, optional
    name: str, optional
        Display name
    oracle: Oracle, optional
        The oracle responsible for the row
    source: int or str, optional
        Where the row came from: the index of the uncertain constraint
        of the model, or a label for rows created by the expander
        (``'objective'``, ``'bounds:<var>'``, ``'lifted:<row>'``)
    """

    __slots__ = ('repn', 'lower', 'upper', 'name', 'oracle', 'source')

    def __init__(
        self, repn, lower=None, upper=None, name=None, oracle=None, source=None
    ):
        self.repn = repn
        self.lower = -math.inf if lower is None else float(lower)
        self.upper = math.inf if upper is None else float(upper)
        self.name = name
        self.oracle = oracle
        self.source = source

    def has_lb(self):
        return self.lower > -math.inf

    def has_ub(self):
        return self.upper < math.inf

    def parameters(self):
        return self.repn.parameters()

    def is_deterministic(self):
        return self.repn.is_deterministic()

    def specialize(self, point):
        """Fix the parameters at `point`; returns ``(linear, lower,
        upper)`` with the constant moved into the bounds"""
        linear, const = self.repn.specialize(point)
        return linear, self.lower - const, self.upper - const

    def activity(self, x, point):
        return self.repn.evaluate(x, point)

    def violation(self, x, point):
        """Absolute violation of the row by columns `x` at `point`"""
        val = self.repn.evaluate(x, point)
        return max(self.lower - val, val - self.upper, 0.0)

    def copy(self):
        return MixedRow(
            copy_repn(self.repn),
            self.lower,
            self.upper,
            self.name,
            self.oracle,
            self.source,
        )

    def to_string(self, col_names=None, param_names=None):
        def _col(j):
            return "_col%d" % (j,) if col_names is None else col_names[j]

        def _unc(coef):
            return linear_to_string(
                [
                    ("_unc%d" % (k,) if param_names is None else param_names[k], c)
                    for k, c in coef.linear.items()
                ],
                coef.constant,
            )

        pieces = []
        for j, coef in self.repn.linear.items():
            if coef.is_constant():
                pieces.append(linear_to_string([(_col(j), coef.constant)], 0))
            else:
                pieces.append("(%s) %s" % (_unc(coef), _col(j)))
        const = self.repn.constant
        if not const.is_constant() or const.constant:
            pieces.append(_unc(const))
        body = " + ".join(pieces) if pieces else "0"
        return relational_to_string(body, self.lower, self.upper)

    def __str__(self):
        return self.to_string()


class WorkingModel(object):
    """The deterministic program plus the mixed rows of a robust solve

    Attributes
    ----------
    lp: LinearProgram
    mixed_rows: list of MixedRow
    objective: MixedRepn
        The (possibly uncertain) objective of the model; the expander
        moves it into ``lp``
    num_user_columns: int
        Columns ``0 .. num_user_columns-1`` are the model variables
    aux_columns: dict
        ``(variable index, parameter index) -> column`` of the affine
        policy coefficients created by the expander
    epigraph_column: int or None
        The epigraph column of a lifted objective
    """

    def __init__(self, lp, mixed_rows=None, objective=None, num_user_columns=None):
        self.lp = lp
        self.mixed_rows = list(mixed_rows) if mixed_rows else []
        self.objective = MixedRepn() if objective is None else objective
        self.num_user_columns = (
            lp.num_columns if num_user_columns is None else num_user_columns
        )
        self.aux_columns = {}
        self.epigraph_column = None

    @classmethod
    def build(cls, model):
        """Build the working model of a :class:`RobustModel`"""
        rd = model.robust_data
        lp = LinearProgram(model.name)
        for var in model.variables:
            lp.add_column(var.lb, var.ub, var.is_integer(), var.name)
        for con in model.constraints:
            repn = generate_linear_repn(con.body)
            lp.add_row(
                repn.linear.items(),
                con.lower - repn.constant,
                con.upper - repn.constant,
                str(con),
            )
        lp.sense = model.sense
        rows = []
        for i, (con, oracle) in enumerate(zip(rd.uncertain_constraints, rd.oracles)):
            rows.append(
                MixedRow(
                    generate_mixed_repn(con.body),
                    con.lower,
                    con.upper,
                    str(con),
                    rd.default_oracle if oracle is None else oracle,
                    i,
                )
            )
        return cls(lp, rows, generate_mixed_repn(model.objective))

    def clone(self):
        ans = WorkingModel(
            self.lp.clone(),
            [row.copy() for row in self.mixed_rows],
            copy_repn(self.objective),
            self.num_user_columns,
        )
        ans.aux_columns = dict(self.aux_columns)
        ans.epigraph_column = self.epigraph_column
        return ans

    def inject(self, reformulation):
        """Add the auxiliary variables and rows of a
        :class:`Reformulation` to the deterministic program"""
        cols = {}
        for var in reformulation.variables:
            cols[id(var)] = self.lp.add_column(var.lower, var.upper, False, var.name)
        for row in reformulation.constraints:
            terms = []
            for col, coef in row.terms:
                if isinstance(col, AuxVar):
                    if id(col) not in cols:
                        raise DeveloperError(
                            "Auxiliary row '%s' references auxiliary variable "
                            "'%s' that is not part of the reformulation"
                            % (row.name, col.name)
                        )
                    col = cols[id(col)]
                terms.append((col, coef))
            self.lp.add_row(terms, row.lower, row.upper, row.name)
        return cols

    def add_cut(self, row, point, name=None):
        """Add ``row`` specialized at the realization `point`"""
        linear, lower, upper = row.specialize(point)
        return self.lp.add_row(linear.items(), lower, upper, name)
