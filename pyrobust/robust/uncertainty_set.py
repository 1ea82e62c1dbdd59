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

"""The matrix-form snapshot of an uncertainty set

The set is the polyhedron

.. math::

    U = \\{ u : A_{ub} u \\le b_{ub}, \\; A_{eq} u = b_{eq}, \\;
               l \\le u \\le h \\}

built from the uncertainty-set constraints and parameter bounds of a
:class:`RobustModel` at solve time.  Oracles receive this object in
:meth:`Oracle.setup`.
"""

import math

import numpy as np

from pyrobust.repn.linear_program import LinearProgram
from pyrobust.repn.standard_repn import generate_uncertain_repn


class UncertaintySet(object):
    """A polyhedral uncertainty set in matrix form.

    Parameters
    ----------
    lower: array_like
        Parameter lower bounds (``-inf`` for none)
    upper: array_like
        Parameter upper bounds (``inf`` for none)
    integer: array_like of bool, optional
        Integrality of each parameter
    names: list of str, optional
    A_ub, b_ub: array_like, optional
        Inequality rows ``A_ub u <= b_ub``
    A_eq, b_eq: array_like, optional
        Equality rows ``A_eq u == b_eq``

    """

    def __init__(
        self,
        lower,
        upper,
        integer=None,
        names=None,
        A_ub=None,
        b_ub=None,
        A_eq=None,
        b_eq=None,
    ):
        self.lower = np.array(lower, dtype=float)
        self.upper = np.array(upper, dtype=float)
        n = len(self.lower)
        if len(self.upper) != n:
            raise ValueError(
                "Uncertainty set bounds have different lengths (%s, %s)"
                % (n, len(self.upper))
            )
        if np.any(self.lower > self.upper):
            k = int(np.argmax(self.lower > self.upper))
            raise ValueError(
                "Lower bound (%s) of uncertain parameter %s is greater than "
                "its upper bound (%s)" % (self.lower[k], k, self.upper[k])
            )
        if integer is None:
            integer = np.zeros(n, dtype=bool)
        self.integer = np.array(integer, dtype=bool)
        self.names = (
            ["_unc%d" % (k,) for k in range(n)] if names is None else list(names)
        )
        self.A_ub = _as_matrix(A_ub, n)
        self.b_ub = np.array([] if b_ub is None else b_ub, dtype=float)
        self.A_eq = _as_matrix(A_eq, n)
        self.b_eq = np.array([] if b_eq is None else b_eq, dtype=float)
        self._components = None

    @classmethod
    def from_model(cls, model):
        """Snapshot the uncertainty set declared on a :class:`RobustModel`"""
        rd = model.robust_data
        n = rd.num_params
        A_ub, b_ub, A_eq, b_eq = [], [], [], []
        for con in rd.uncertainty_set:
            repn = generate_uncertain_repn(con.body)
            row = np.zeros(n)
            for k, coef in repn.linear.items():
                row[k] = coef
            lower = con.lower - repn.constant
            upper = con.upper - repn.constant
            if lower == upper:
                A_eq.append(row)
                b_eq.append(upper)
                continue
            if upper < math.inf:
                A_ub.append(row)
                b_ub.append(upper)
            if lower > -math.inf:
                A_ub.append(-row)
                b_ub.append(-lower)
        return cls(
            rd.param_lower,
            rd.param_upper,
            [domain.is_integer for domain in rd.param_domain],
            [param.name for param in rd.params],
            A_ub,
            b_ub,
            A_eq,
            b_eq,
        )

    @property
    def num_params(self):
        return len(self.lower)

    @property
    def parameter_bounds(self):
        """List of ``(lower, upper)`` pairs, one per parameter"""
        return list(zip(self.lower.tolist(), self.upper.tolist()))

    def has_integer_params(self, indices=None):
        if indices is None:
            return bool(self.integer.any())
        return bool(any(self.integer[k] for k in indices))

    def point_in_set(self, point, tol=1e-9):
        """Return True if `point` (indexed by parameter index) lies in
        the set, up to the absolute tolerance `tol`"""
        u = np.asarray(point, dtype=float)
        if u.shape != self.lower.shape:
            raise ValueError(
                "Point has %s entries; the uncertainty set has %s parameters"
                % (u.size, self.num_params)
            )
        if np.any(u < self.lower - tol) or np.any(u > self.upper + tol):
            return False
        if len(self.b_ub) and np.any(self.A_ub @ u > self.b_ub + tol):
            return False
        if len(self.b_eq) and np.any(np.abs(self.A_eq @ u - self.b_eq) > tol):
            return False
        if np.any(np.abs(u[self.integer] - np.round(u[self.integer])) > tol):
            return False
        return True

    def connected_components(self):
        """Partition the parameters into groups linked by set constraints

        Two parameters are in the same component when they appear
        (transitively) in a common constraint row.  Returns a list of
        sorted index lists, ordered by smallest index.
        """
        if self._components is not None:
            return self._components
        parent = list(range(self.num_params))

        def find(k):
            while parent[k] != k:
                parent[k] = parent[parent[k]]
                k = parent[k]
            return k

        for A in (self.A_ub, self.A_eq):
            for row in A:
                support = np.flatnonzero(row)
                for k in support[1:]:
                    a, b = find(int(support[0])), find(int(k))
                    if a != b:
                        parent[max(a, b)] = min(a, b)
        groups = {}
        for k in range(self.num_params):
            groups.setdefault(find(k), []).append(k)
        self._components = [groups[root] for root in sorted(groups)]
        return self._components

    def component_of(self, indices):
        """Sorted indices of every parameter sharing a component with
        any of `indices`"""
        wanted = set(indices)
        ans = []
        for comp in self.connected_components():
            if wanted.intersection(comp):
                ans.extend(comp)
        return sorted(ans)

    def restrict(self, indices):
        """Return the rows of the set that only involve `indices`

        `indices` must be a union of connected components.  Returns
        ``(A_ub, b_ub, A_eq, b_eq, lower, upper)`` with the columns
        restricted to `indices` (in the given order).
        """
        cols = list(indices)
        outside = np.ones(self.num_params, dtype=bool)
        outside[cols] = False

        def _rows(A, b):
            if not len(b):
                return np.zeros((0, len(cols))), np.zeros(0)
            keep = [
                i
                for i in range(len(b))
                if np.any(A[i, cols] != 0) and not np.any(A[i, outside] != 0)
            ]
            return A[np.ix_(keep, cols)], b[keep]

        A_ub, b_ub = _rows(self.A_ub, self.b_ub)
        A_eq, b_eq = _rows(self.A_eq, self.b_eq)
        return A_ub, b_ub, A_eq, b_eq, self.lower[cols], self.upper[cols]

    def to_linear_program(self, name='uncertainty_set'):
        """Return a :class:`LinearProgram` whose columns are the
        parameters and whose rows are the set constraints (with a zero
        objective)"""
        lp = LinearProgram(name)
        for k in range(self.num_params):
            lp.add_column(
                self.lower[k], self.upper[k], bool(self.integer[k]), self.names[k]
            )
        for A, b, eq in ((self.A_ub, self.b_ub, False), (self.A_eq, self.b_eq, True)):
            for row, rhs in zip(A, b):
                terms = [(int(k), row[k]) for k in np.flatnonzero(row)]
                lp.add_row(terms, rhs if eq else None, rhs)
        return lp

    def __str__(self):
        lines = ["Uncertainty set (%s parameters)" % (self.num_params,)]
        for k, (lo, up) in enumerate(self.parameter_bounds):
            lines.append(" %s <= %s <= %s" % (lo, self.names[k], up))
        lines.append(
            " %s inequality rows, %s equality rows" % (len(self.b_ub), len(self.b_eq))
        )
        return "\n".join(lines)


def _as_matrix(A, n):
    if A is None or not len(A):
        return np.zeros((0, n))
    A = np.array(A, dtype=float)
    if A.ndim != 2 or A.shape[1] != n:
        raise ValueError(
            "Uncertainty set matrix has shape %s; expected (m, %s)" % (A.shape, n)
        )
    return A
