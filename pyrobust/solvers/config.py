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

from pyrobust.common.config import (
    Bool,
    ConfigDict,
    ConfigValue,
    NonNegativeFloat,
)


class SolverConfig(ConfigDict):
    """Options understood by every solver interface"""

    def __init__(self, **kwds):
        super().__init__(**kwds)
        self.tee = self.declare(
            'tee',
            ConfigValue(
                domain=Bool,
                default=False,
                description="Echo the solver log to stdout.",
            ),
        )
        self.time_limit = self.declare(
            'time_limit',
            ConfigValue(
                domain=NonNegativeFloat,
                default=None,
                description="Wall clock limit (seconds) for one solve.",
            ),
        )
        self.solver_options = self.declare(
            'solver_options',
            ConfigDict(
                implicit=True,
                description="Solver specific options, passed through unchanged.",
            ),
        )


class BranchAndBoundConfig(SolverConfig):
    """Adds the MIP gap to :class:`SolverConfig`"""

    def __init__(self, **kwds):
        super().__init__(**kwds)
        self.rel_gap = self.declare(
            'rel_gap',
            ConfigValue(
                domain=NonNegativeFloat,
                default=None,
                description="Stop once the relative gap between the incumbent "
                "and the best bound falls below this value.",
            ),
        )
