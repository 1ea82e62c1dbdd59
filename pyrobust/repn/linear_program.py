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

import numpy as np
import scipy.sparse

from pyrobust.common.enums import ObjectiveSense, minimize
from pyrobust.common.numeric_types import string_intclamp
from pyrobust.core.expr.printer import linear_to_string, relational_to_string
from pyrobust.repn.standard_repn import generate_linear_repn


class LinearProgram(object):
    """A (mixed-integer) linear program in index-based form

    .. math::

        \\min / \\max \\; c^T x + c_0 \\quad
        \\text{s.t.} \\; r_l \\le A x \\le r_u, \\; l \\le x \\le u

    Columns and rows are identified by their (0-based) index.  This is
    the working model handed to the solvers: the robust solver builds
    one from the declarative model state for every solve and appends
    the auxiliary columns and rows generated by the oracles.

    """

    def __init__(self, name=None):
        self.name = name
        self.col_lower = []
        self.col_upper = []
        self.col_integer = []
        self.col_names = []
        self.rows = []
        self.row_lower = []
        self.row_upper = []
        self.row_names = []
        self.objective = {}
        self.objective_constant = 0.0
        self.sense = minimize

    @classmethod
    def from_model(cls, model):
        """Build the linear program of a deterministic :class:`Model`"""
        lp = cls(model.name)
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
        repn = generate_linear_repn(model.objective)
        lp.set_objective(repn.linear.items(), repn.constant, model.sense)
        return lp

    @property
    def num_columns(self):
        return len(self.col_lower)

    @property
    def num_rows(self):
        return len(self.rows)

    def add_column(self, lower=None, upper=None, integer=False, name=None):
        """Append a column and return its index"""
        lower = -math.inf if lower is None else float(lower)
        upper = math.inf if upper is None else float(upper)
        self.col_lower.append(lower)
        self.col_upper.append(upper)
        self.col_integer.append(bool(integer))
        idx = len(self.col_names)
        self.col_names.append("_col%d" % (idx,) if name is None else name)
        return idx

    def _collect(self, terms):
        n = self.num_columns
        row = {}
        for col, coef in terms:
            if not 0 <= col < n:
                raise IndexError(
                    "Column index %s out of range for a linear program "
                    "with %s columns" % (col, n)
                )
            coef = float(coef)
            if col in row:
                coef += row[col]
            row[col] = coef
        return {col: coef for col, coef in row.items() if coef != 0}

    def add_row(self, terms, lower=None, upper=None, name=None):
        """Append the row ``lower <= sum(coef * x[col]) <= upper`` and
        return its index

        Parameters
        ----------
        terms: iterable of (int, float)
            (column, coefficient) pairs; duplicate columns are summed
        lower: float, optional
        upper: float, optional
        name: str, optional

        """
        self.rows.append(self._collect(terms))
        self.row_lower.append(-math.inf if lower is None else float(lower))
        self.row_upper.append(math.inf if upper is None else float(upper))
        idx = len(self.row_names)
        self.row_names.append("_row%d" % (idx,) if name is None else name)
        return idx

    def remove_rows(self, indices):
        """Remove the rows with the given indices (later rows are renumbered)"""
        drop = set(indices)
        keep = [i for i in range(self.num_rows) if i not in drop]
        self.rows = [self.rows[i] for i in keep]
        self.row_lower = [self.row_lower[i] for i in keep]
        self.row_upper = [self.row_upper[i] for i in keep]
        self.row_names = [self.row_names[i] for i in keep]

    def set_objective(self, terms, constant=0.0, sense=minimize):
        self.objective = self._collect(terms)
        self.objective_constant = float(constant)
        self.sense = ObjectiveSense(sense)

    def clone(self):
        ans = LinearProgram(self.name)
        ans.col_lower = list(self.col_lower)
        ans.col_upper = list(self.col_upper)
        ans.col_integer = list(self.col_integer)
        ans.col_names = list(self.col_names)
        ans.rows = [dict(row) for row in self.rows]
        ans.row_lower = list(self.row_lower)
        ans.row_upper = list(self.row_upper)
        ans.row_names = list(self.row_names)
        ans.objective = dict(self.objective)
        ans.objective_constant = self.objective_constant
        ans.sense = self.sense
        return ans

    def with_objective(self, terms, constant=0.0, sense=minimize):
        """Return a copy of this program with a new objective.  The
        column and row data are shared (not copied) with this program."""
        ans = LinearProgram.__new__(LinearProgram)
        ans.__dict__.update(self.__dict__)
        ans.set_objective(terms, constant, sense)
        return ans

    #
    # Matrix form
    #

    def matrix(self):
        """The constraint matrix as a ``scipy.sparse.csr_matrix``"""
        data, indices, indptr = [], [], [0]
        for row in self.rows:
            for col in sorted(row):
                indices.append(col)
                data.append(row[col])
            indptr.append(len(indices))
        return scipy.sparse.csr_matrix(
            (np.array(data, dtype=float), np.array(indices, dtype=int), indptr),
            shape=(self.num_rows, self.num_columns),
        )

    def objective_vector(self):
        c = np.zeros(self.num_columns)
        for col, coef in self.objective.items():
            c[col] = coef
        return c

    def activity(self, x):
        """Row activities ``A x``"""
        return self.matrix() @ np.asarray(x, dtype=float)

    def objective_value(self, x):
        return float(self.objective_vector() @ np.asarray(x, dtype=float)) + (
            self.objective_constant
        )

    def max_violation(self, x):
        """Largest violation of any row or column bound at `x`"""
        x = np.asarray(x, dtype=float)
        viol = 0.0
        if self.num_rows:
            act = self.activity(x)
            viol = max(
                viol,
                float(np.max(np.asarray(self.row_lower) - act)),
                float(np.max(act - np.asarray(self.row_upper))),
            )
        if self.num_columns:
            viol = max(
                viol,
                float(np.max(np.asarray(self.col_lower) - x)),
                float(np.max(x - np.asarray(self.col_upper))),
            )
        return viol

    #
    # Printing
    #

    def to_string(self):
        names = self.col_names
        lines = [
            "%s %s"
            % (
                self.sense,
                linear_to_string(
                    [(names[j], c) for j, c in self.objective.items()],
                    self.objective_constant,
                ),
            ),
            "Subject to",
        ]
        for i, row in enumerate(self.rows):
            body = linear_to_string([(names[j], c) for j, c in row.items()], 0)
            lines.append(
                " %s: %s"
                % (
                    self.row_names[i],
                    relational_to_string(body, self.row_lower[i], self.row_upper[i]),
                )
            )
        for j, name in enumerate(names):
            lines.append(
                " %s <= %s <= %s%s"
                % (
                    string_intclamp(self.col_lower[j]),
                    name,
                    string_intclamp(self.col_upper[j]),
                    ", integer" if self.col_integer[j] else "",
                )
            )
        return "\n".join(lines)

    def __str__(self):
        return self.to_string()
