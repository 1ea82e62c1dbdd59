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

import abc
import enum

from pyrobust.solvers.config import SolverConfig


class SolverBase(abc.ABC):
    """Interface to a deterministic (mixed-integer) LP solver

    A solver takes a :class:`~pyrobust.repn.linear_program.LinearProgram`
    and returns :class:`~pyrobust.solvers.results.SolverResults`.  The
    instance `config` is a copy of the class level ``CONFIG``;
    keyword arguments to :meth:`solve` apply to that call only.
    """

    CONFIG = SolverConfig()

    class Availability(enum.IntEnum):
        """Whether (and how) the solver can run here; truthy when it can"""

        FullLicense = 2
        LimitedLicense = 1
        NotFound = 0
        BadVersion = -1

        def __bool__(self):
            return self > 0

        def __str__(self):
            return self.name

    def __init__(self, **kwds):
        name = kwds.pop('name', None)
        if name is not None:
            self.name = name
        elif not hasattr(self, 'name'):
            self.name = type(self).__name__.lower()
        self.config = self.CONFIG(value=kwds)

    def __enter__(self):
        return self

    def __exit__(self, t, v, traceback):
        pass

    @abc.abstractmethod
    def available(self):
        """Return a :class:`SolverBase.Availability`"""

    @abc.abstractmethod
    def version(self):
        """Return the solver version as a tuple of ints"""

    @abc.abstractmethod
    def solve(self, lp, **kwds):
        """Solve `lp` and return its :class:`SolverResults`"""
