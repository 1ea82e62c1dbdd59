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
Options of the robust solver.
"""

import logging

from pyrobust.common.config import (
    Bool,
    ConfigDict,
    ConfigValue,
    NonNegativeFloat,
    PositiveInt,
)
from pyrobust.common.log import setup_logger
from pyrobust.solvers.factory import SolverFactory

default_robust_solver_logger = setup_logger()


def logger_domain(obj):
    """A logging.Logger, or the name of one"""
    return obj if isinstance(obj, logging.Logger) else logging.getLogger(obj)


logger_domain.domain_name = "None, str or logging.Logger"


def positive_int_or_minus_one(obj):
    """An integral value that is either -1 or at least 1"""
    ans = int(obj)
    if ans != float(obj) or not (ans >= 1 or ans == -1):
        raise ValueError(f"Expected positive int or -1, but received value {obj!r}")
    return ans


positive_int_or_minus_one.domain_name = "positive int or -1"


class SolverResolvable(object):
    """Domain turning a solver name into a solver instance

    Names are looked up (case insensitively) in the
    :data:`SolverFactory`; anything with callable ``solve`` and
    ``available`` attributes passes through unchanged.  `solver_desc`
    names the option in error messages.
    """

    def __init__(self, solver_desc="solver"):
        self.solver_desc = solver_desc

    @staticmethod
    def is_solver_type(obj):
        attrs = ('solve', 'available')
        return all(callable(getattr(obj, attr, None)) for attr in attrs)

    def __call__(self, obj):
        if isinstance(obj, str):
            return SolverFactory(obj.lower())
        if self.is_solver_type(obj):
            return obj
        raise TypeError(
            f"Cannot cast object `{obj!r}` to a solver for use as "
            f"{self.solver_desc}, as the object is neither a str nor a "
            f"solver type (got type {type(obj).__name__})."
        )

    def domain_name(self):
        return "str or Solver"
def robust_config():
    CONFIG = ConfigDict('robust')

    CONFIG.declare(
        'solver',
        ConfigValue(
            default='highs',
            domain=SolverResolvable(),
            description="Deterministic solver for the reformulated model.",
            doc=(
                """
                Name of a solver registered with the SolverFactory, or a
                solver instance, used to solve the deterministic
                (reformulated) model in every iteration.
                """
            ),
        ),
    )
    CONFIG.declare(
        'separation_solver',
        ConfigValue(
            default=None,
            domain=SolverResolvable(solver_desc="separation solver"),
            description="Subsolver of the cutting-plane oracles.",
            doc=(
                """
                Solver used by cutting-plane oracles for the separation
                problems (and to compute the nominal point of the
                uncertainty set).  If `None`, `solver` is used.
                Separation problems over integer uncertain parameters
                are solved as MILPs.
                """
            ),
        ),
    )
    CONFIG.declare(
        'max_iter',
        ConfigValue(
            default=100,
            domain=positive_int_or_minus_one,
            description=(
                """
                Iteration limit of the cutting-plane loop. If -1 is
                provided, then no iteration limit is enforced.
                """
            ),
        ),
    )
    CONFIG.declare(
        'time_limit',
        ConfigValue(
            default=None,
            domain=NonNegativeFloat,
            doc=(
                """
                Wall time limit for the robust solve in seconds
                (including time spent by subsolvers).
                `None` (the default) disables the limit.
                """
            ),
        ),
    )
    CONFIG.declare(
        'feasibility_tolerance',
        ConfigValue(
            default=1e-6,
            domain=NonNegativeFloat,
            description=(
                """
                Absolute tolerance on the violation of a robust
                constraint, used to decide whether a separation
                problem returns a cut.
                """
            ),
        ),
    )
    CONFIG.declare(
        'separation_workers',
        ConfigValue(
            default=1,
            domain=PositiveInt,
            description=(
                """
                Number of threads solving the separation problems of
                one cutting-plane iteration.
                """
            ),
        ),
    )
    CONFIG.declare(
        'nominal_cuts',
        ConfigValue(
            default=True,
            domain=Bool,
            description=(
                """
                If True, the initial cuts returned by the `reformulate`
                method of separating oracles (the constraints at the
                nominal realization) are added before the first solve.
                """
            ),
        ),
    )
    CONFIG.declare(
        'raise_exception_on_nonoptimal_result',
        ConfigValue(
            default=False,
            domain=Bool,
            description=(
                """
                If True, an IterationLimitError (iteration limit) or a
                SolverError (any other non-optimal termination) is
                raised instead of returning the results.
                """
            ),
        ),
    )
    CONFIG.declare(
        'load_solution',
        ConfigValue(
            default=True,
            domain=Bool,
            description=(
                """
                If True, the final solution is loaded into the
                variables of the model.
                """
            ),
        ),
    )
    CONFIG.declare(
        'progress_logger',
        ConfigValue(
            default=default_robust_solver_logger,
            domain=logger_domain,
            doc=(
                """
                Logger (or logger name) for progress output.
                Defaults to the INFO level ``pyrobust.robust``
                :class:`~pyrobust.common.log.PreformattedLogger`.
                """
            ),
        ),
    )

    return CONFIG
