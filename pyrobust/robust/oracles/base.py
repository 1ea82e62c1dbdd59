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

"""
Abstract base class for robust-constraint oracles.

An oracle is responsible for turning a constraint that must hold for
every realization of the uncertain parameters into something a
deterministic solver can handle.  It may do so directly (by returning
auxiliary variables and rows that are equivalent to the robust
constraint) or iteratively (by returning violated realizations, which
the solver turns into cuts).

Oracle protocol:

.. autosummary::

   Oracle.setup
   Oracle.reformulate
   Oracle.separate

Data classes:

.. autosummary::

   AuxVar
   AuxRow
   Reformulation
   Realization
"""

import abc
import math

import numpy as np


class AuxVar(object):
    """An auxiliary column requested by :meth:`Oracle.reformulate`"""

    __slots__ = ('lower', 'upper', 'name')

    def __init__(self, lower=None, upper=None, name=None):
        self.lower = -math.inf if lower is None else float(lower)
        self.upper = math.inf if upper is None else float(upper)
        self.name = name

    def __repr__(self):
        return "AuxVar(%s, %s, %r)" % (self.lower, self.upper, self.name)


class AuxRow(object):
    """An auxiliary row ``lower <= sum(coef * col) <= upper``

    Each entry of `terms` is a ``(col, coef)`` pair where `col` is
    either the (int) index of an existing working-model column or an
    :class:`AuxVar` of the same :class:`Reformulation`.
    """

    __slots__ = ('terms', 'lower', 'upper', 'name')

    def __init__(self, terms, lower=None, upper=None, name=None):
        self.terms = list(terms)
        self.lower = -math.inf if lower is None else float(lower)
        self.upper = math.inf if upper is None else float(upper)
        self.name = name

    def __repr__(self):
        return "AuxRow(%s, %s, %s, %r)" % (
            self.terms,
            self.lower,
            self.upper,
            self.name,
        )


class Reformulation(object):
    """The auxiliary variables and rows replacing one robust constraint"""

    __slots__ = ('variables', 'constraints')

    def __init__(self, variables=None, constraints=None):
        self.variables = list(variables) if variables else []
        self.constraints = list(constraints) if constraints else []

    def __len__(self):
        return len(self.constraints)


class Realization(object):
    """A realization of the uncertain parameters returned by
    :meth:`Oracle.separate`.

    Attributes
    ----------
    point: numpy.ndarray
        The parameter values (indexed by parameter index)
    violation: float
        The (absolute) amount by which the candidate violates the
        constraint at `point`
    side: str
        ``'upper'`` or ``'lower'``: the violated side of the constraint
    """

    __slots__ = ('point', 'violation', 'side')

    def __init__(self, point, violation=0.0, side='upper'):
        self.point = np.array(point, dtype=float)
        self.violation = float(violation)
        self.side = side

    def __getitem__(self, param):
        """Value of an :class:`UncertainParam` (or parameter index)"""
        return float(self.point[getattr(param, 'index', param)])

    def __len__(self):
        return len(self.point)

    def __repr__(self):
        return "Realization(%s, violation=%s, side=%r)" % (
            self.point.tolist(),
            self.violation,
            self.side,
        )


class Oracle(abc.ABC):
    """
    Base class for robust-constraint oracles.

    Each constraint of a :class:`RobustModel` that involves uncertain
    parameters is bound to an oracle (the model default when none is
    given).  During a solve, the orchestrator calls :meth:`setup` once
    for every distinct oracle instance, then either :meth:`reformulate`
    once per constraint (oracles that do not use separation) or
    :meth:`reformulate` followed by repeated :meth:`separate` calls
    (oracles that do).

    The constraints handed to the oracle are
    :class:`~pyrobust.robust.working_model.MixedRow` objects: the
    expression is stored as a
    :class:`~pyrobust.repn.standard_repn.MixedRepn` referencing
    working-model column indices and parameter indices.
    """

    #: True if the oracle is driven by the cutting-plane loop
    uses_separation = False

    #: Wall time (seconds) left for the sub-solves of the current
    #: separation round; set by the cutting-plane loop, None if unlimited
    time_limit = None

    @abc.abstractmethod
    def setup(self, uncertainty_set, config):
        """
        Prepare the oracle for a solve.

        Parameters
        ----------
        uncertainty_set : UncertaintySet
            The uncertainty set of the model being solved.
        config : ConfigDict
            The robust solver options.

        Raises
        ------
        SetupError
            If the oracle cannot represent the uncertainty set.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def reformulate(self, constraint):
        """
        Reformulate a robust constraint.

        Oracles that use separation return their initial cuts (possibly
        none).

        Returns
        -------
        Reformulation
        """
        raise NotImplementedError

    def separate(self, constraint, candidate):
        """
        Check a candidate solution against a robust constraint.

        Parameters
        ----------
        constraint : MixedRow
        candidate : numpy.ndarray
            The (read-only) values of all working-model columns.

        Returns
        -------
        Realization or None
            A realization at which `candidate` violates `constraint`
            by more than the feasibility tolerance, or None.
        """
        return None
