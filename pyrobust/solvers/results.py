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

import enum

from pyrobust.common.config import (
    ConfigDict,
    ConfigValue,
    In,
    IsInstance,
    NonNegativeFloat,
)


class TerminationCondition(enum.Enum):
    """Why a deterministic solve stopped

    ``infeasibleOrUnbounded`` is reported when presolve proves that no
    optimal solution exists without telling which of the two cases
    applies.  Anything the interface cannot classify maps to
    ``unknown``; solver failures map to ``error``.
    """

    optimal = 0
    maxTimeLimit = 1
    iterationLimit = 2
    unbounded = 5
    infeasible = 6
    infeasibleOrUnbounded = 8
    error = 9
    unknown = 42

    def __str__(self):
        return self.name


class SolutionStatus(enum.Enum):
    """What kind of point (if any) came back with the results"""

    noSolution = 0
    feasible = 20
    optimal = 30

    def __str__(self):
        return self.name


class SolverResults(ConfigDict):
    """Outcome of one call to :meth:`SolverBase.solve`

    `incumbent_objective` includes the objective constant and is None
    unless a feasible point was returned; `primal` then holds that
    point as a numpy array indexed by column.  Interface specific data
    (solver messages, MIP bounds) goes into `extra_info`.
    """

    def __init__(self, **kwds):
        super().__init__(**kwds)
        self.termination_condition = self.declare(
            'termination_condition',
            ConfigValue(
                domain=In(TerminationCondition),
                default=TerminationCondition.unknown,
            ),
        )
        self.solution_status = self.declare(
            'solution_status',
            ConfigValue(domain=In(SolutionStatus), default=SolutionStatus.noSolution),
        )
        self.incumbent_objective = self.declare(
            'incumbent_objective', ConfigValue(domain=float, default=None)
        )
        self.primal = self.declare('primal', ConfigValue(default=None))
        self.solver_name = self.declare('solver_name', ConfigValue(domain=str))
        self.iteration_count = self.declare(
            'iteration_count', ConfigValue(domain=int, default=None)
        )
        self.timing_info = self.declare('timing_info', ConfigDict(implicit=True))
        self.timing_info.wall_time = self.timing_info.declare(
            'wall_time', ConfigValue(domain=NonNegativeFloat)
        )
        self.extra_info = self.declare(
            'extra_info', ConfigDict(implicit=True, implicit_domain=IsInstance(object))
        )

    def __str__(self):
        keys = ('termination_condition', 'solution_status', 'incumbent_objective')
        return "\n".join("%s: %s" % (key, getattr(self, key)) for key in keys)
